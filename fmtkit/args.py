"""Formatting arguments: type classification, named arguments and argument lists."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Iterable, Iterator

from fmtkit.parsecontext import FormatError

__all__ = [
    "ArgType",
    "FormatArg",
    "NamedArg",
    "FormatArgs",
    "DynamicFormatArgStore",
    "classify",
    "arg",
    "make_format_args",
]


class ArgType(enum.IntEnum):
    """Core argument types, ordered so that range checks classify them."""

    NONE = 0
    NAMED_ARG = 1
    # Integer types come first.
    INT = 2
    UINT = 3
    LONG_LONG = 4
    ULONG_LONG = 5
    INT128 = 6
    UINT128 = 7
    BOOL = 8
    CHAR = 9
    # Followed by floating-point types.
    FLOAT = 10
    DOUBLE = 11
    LONG_DOUBLE = 12
    CSTRING = 13
    STRING = 14
    POINTER = 15
    CUSTOM = 16


_LAST_INTEGER_TYPE = ArgType.CHAR
_LAST_NUMERIC_TYPE = ArgType.LONG_DOUBLE

_INTEGER_RANGES = (
    (ArgType.INT, -(1 << 31), (1 << 31) - 1),
    (ArgType.UINT, 0, (1 << 32) - 1),
    (ArgType.LONG_LONG, -(1 << 63), (1 << 63) - 1),
    (ArgType.ULONG_LONG, 0, (1 << 64) - 1),
    (ArgType.INT128, -(1 << 127), (1 << 127) - 1),
    (ArgType.UINT128, 0, (1 << 128) - 1),
)


def _is_integral_type(arg_type: ArgType) -> bool:
    if arg_type is ArgType.NAMED_ARG:
        raise ValueError("invalid argument type")
    return ArgType.NONE < arg_type <= _LAST_INTEGER_TYPE


def _is_arithmetic_type(arg_type: ArgType) -> bool:
    if arg_type is ArgType.NAMED_ARG:
        raise ValueError("invalid argument type")
    return ArgType.NONE < arg_type <= _LAST_NUMERIC_TYPE


@dataclass(frozen=True)
class NamedArg:
    """A value paired with the name a format string refers to it by."""

    name: str
    value: Any


def classify(value: Any) -> ArgType:
    """Return the core argument type that ``value`` is formatted as.

    Integers take the narrowest type that holds them; integers wider than
    128 bits raise FormatError. ``None`` is a null pointer.
    """
    if isinstance(value, NamedArg):
        return ArgType.NAMED_ARG
    if isinstance(value, bool):
        return ArgType.BOOL
    if isinstance(value, int):
        for arg_type, low, high in _INTEGER_RANGES:
            if low <= value <= high:
                return arg_type
        raise FormatError("number is too big")
    if isinstance(value, float):
        return ArgType.DOUBLE
    if isinstance(value, str):
        return ArgType.STRING
    if value is None:
        return ArgType.POINTER
    return ArgType.CUSTOM


@dataclass(frozen=True)
class FormatArg:
    """A single formatting argument and its core type.

    An argument of type NONE stands for a missing argument and is false.
    """

    value: Any = None
    type: ArgType = ArgType.NONE

    def __bool__(self) -> bool:
        return self.type is not ArgType.NONE

    def is_integral(self) -> bool:
        """True for integer, bool and character arguments."""
        return _is_integral_type(self.type)

    def is_arithmetic(self) -> bool:
        """True for integral and floating-point arguments."""
        return _is_arithmetic_type(self.type)


def _make_arg(value: Any) -> FormatArg:
    if isinstance(value, FormatArg):
        return value
    return FormatArg(value, classify(value))


def arg(name: str, value: Any) -> NamedArg:
    """Return a named argument for use in a call to a formatting function."""
    if not isinstance(name, str):
        raise TypeError("argument name must be a string")
    if isinstance(value, NamedArg):
        raise TypeError("nested named arguments are not allowed")
    return NamedArg(name, value)


class FormatArgs:
    """An indexable collection of formatting arguments.

    Named arguments occupy a position like any other argument; looking one
    up by index yields the argument it wraps.
    """

    __slots__ = ("_args", "_named")

    def __init__(self, values: Iterable[Any] = ()) -> None:
        self._args: list[FormatArg] = [_make_arg(v) for v in values]
        self._named: dict[str, FormatArg] = {}
        for item in self._args:
            if item.type is ArgType.NAMED_ARG:
                named: NamedArg = item.value
                # The first argument with a given name wins.
                self._named.setdefault(named.name, _make_arg(named.value))

    def get(self, index: int) -> FormatArg:
        """Return the argument at ``index``, or an empty argument if there is none."""
        if not 0 <= index < len(self._args):
            return FormatArg()
        item = self._args[index]
        if item.type is ArgType.NAMED_ARG:
            return _make_arg(item.value.value)
        return item

    def find(self, name: str) -> FormatArg:
        """Return the named argument ``name``, or an empty argument if there is none."""
        return self._named.get(name, FormatArg())

    def __len__(self) -> int:
        return len(self._args)

    def __iter__(self) -> Iterator[FormatArg]:
        return (self.get(i) for i in range(len(self._args)))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._args!r})"


def make_format_args(*args: Any, **kwargs: Any) -> FormatArgs:
    """Build a FormatArgs from positional values and keyword (named) values.

    Keyword arguments become named arguments placed after the positional ones.
    """
    named = [arg(name, value) for name, value in kwargs.items()]
    return FormatArgs([*args, *named])


class DynamicFormatArgStore:
    """A growable argument list, built up one value at a time."""

    __slots__ = ("_data",)

    def __init__(self) -> None:
        self._data: list[FormatArg] = []

    def push_back(self, value: Any) -> None:
        """Append ``value`` as the next positional argument."""
        if isinstance(value, NamedArg):
            raise TypeError("named arguments are not supported yet")
        self._data.append(_make_arg(value))

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[FormatArg]:
        return iter(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"