"""Parsing state for a format string: the unparsed range and argument indexing."""

from __future__ import annotations

__all__ = ["FormatError", "ParseContext"]


class FormatError(ValueError):
    """Raised when a format string or its arguments are invalid."""


class ParseContext:
    """The part of a format string still to be parsed, plus an argument counter.

    Arguments may be referred to automatically (``{}``) or manually (``{0}``),
    but not both in the same format string. Named references (``{name}``)
    may be mixed with either.
    """

    __slots__ = ("_format_str", "_begin", "_next_arg_id")

    def __init__(self, format_str: str) -> None:
        self._format_str = format_str
        self._begin = 0
        self._next_arg_id = 0

    @property
    def format_str(self) -> str:
        """The whole format string this context was built from."""
        return self._format_str

    @property
    def begin(self) -> int:
        """Index of the first character not yet parsed."""
        return self._begin

    @property
    def end(self) -> int:
        """Index just past the end of the format string."""
        return len(self._format_str)

    @property
    def remaining(self) -> str:
        """The text from ``begin`` to the end of the format string."""
        return self._format_str[self._begin :]

    def __len__(self) -> int:
        return self.end - self._begin

    def advance_to(self, position: int) -> None:
        """Move ``begin`` forward to ``position``, an index into the format string."""
        if not self._begin <= position <= self.end:
            raise ValueError(
                f"position {position} is outside the unparsed range "
                f"[{self._begin}, {self.end}]"
            )
        self._begin = position

    def next_arg_id(self) -> int:
        """Return the next automatic argument index.

        Raises FormatError if manual indexing is already in use.
        """
        if self._next_arg_id >= 0:
            arg_id = self._next_arg_id
            self._next_arg_id += 1
            return arg_id
        self.on_error("cannot switch from manual to automatic argument indexing")
        return 0

    def check_arg_id(self, arg_id: int | str) -> None:
        """Record a manual reference to ``arg_id``.

        Integer ids switch the context to manual indexing and raise
        FormatError if automatic indexing was already used. Names are
        always accepted.
        """
        if isinstance(arg_id, str):
            return
        if self._next_arg_id > 0:
            self.on_error("cannot switch from automatic to manual argument indexing")
        else:
            self._next_arg_id = -1

    def on_error(self, message: str) -> None:
        """Report a parse error by raising FormatError."""
        raise FormatError(message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._format_str!r}, begin={self._begin})"