"""Format strings with ``{}`` replacement fields and standard format specs."""

from __future__ import annotations

import builtins
import math
import re
import sys
from dataclasses import dataclass
from typing import Any, Iterable, TextIO

from fmtkit.args import ArgType, FormatArg, FormatArgs, make_format_args
from fmtkit.parsecontext import FormatError, ParseContext

__all__ = ["format", "vformat", "format_to", "vprint", "print_formatted"]

_INT_MAX = (1 << 31) - 1
_DIGITS = "0123456789"
_ALIGNS = "<>^="
_BRACE = re.compile(r"[{}]")
_ID_END = re.compile(r"[:}]")
_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_FLOAT_TYPES = frozenset("eEfFgG%aAn")
_FLOAT_ARG_TYPES = (ArgType.FLOAT, ArgType.DOUBLE, ArgType.LONG_DOUBLE)
_HEX_FRACTION_DIGITS = 13


@dataclass
class _Specs:
    fill: str = " "
    align: str = ""
    sign: str = ""
    alt: bool = False
    width: int = 0
    precision: int = -1
    type: str = ""


def _parse_int(text: str, pos: int) -> tuple[int | None, int]:
    end = pos
    while end < len(text) and text[end] in _DIGITS:
        end += 1
    if end == pos:
        return None, pos
    value = int(text[pos:end])
    if value > _INT_MAX:
        raise FormatError("number is too big")
    return value, end


def _parse_specs(spec: str, arg: FormatArg) -> _Specs:
    specs = _Specs()
    numeric = arg.is_arithmetic()

    def require_numeric() -> None:
        if not numeric:
            raise FormatError("format specifier requires numeric argument")

    pos, size = 0, len(spec)
    if size >= 2 and spec[1] in _ALIGNS:
        if spec[0] == "{":
            raise FormatError("invalid fill character '{'")
        specs.fill, specs.align = spec[0], spec[1]
        pos = 2
    elif size >= 1 and spec[0] in _ALIGNS:
        specs.align = spec[0]
        pos = 1
    if specs.align == "=":
        require_numeric()
    if pos < size and spec[pos] in "+- ":
        require_numeric()
        specs.sign = "" if spec[pos] == "-" else spec[pos]
        pos += 1
    if pos < size and spec[pos] == "#":
        require_numeric()
        specs.alt = True
        pos += 1
    if pos < size and spec[pos] == "0":
        require_numeric()
        specs.fill, specs.align = "0", "="
        pos += 1
    width, pos = _parse_int(spec, pos)
    if width is not None:
        specs.width = width
    if pos < size and spec[pos] == ".":
        precision, pos = _parse_int(spec, pos + 1)
        if precision is None:
            raise FormatError("missing precision specifier")
        if arg.is_integral() or arg.type is ArgType.POINTER:
            raise FormatError("precision not allowed for this argument type")
        specs.precision = precision
    if pos < size:
        specs.type = spec[pos]
        pos += 1
    if pos < size:
        raise FormatError("invalid format specifier")
    return specs


def _pad(body: str, specs: _Specs, default_align: str, prefix_len: int = 0) -> str:
    padding = specs.width - len(body)
    if padding <= 0:
        return body
    fill = specs.fill
    align = specs.align or default_align
    if align == "<":
        return body + fill * padding
    if align == "^":
        left = padding // 2
        return fill * left + body + fill * (padding - left)
    if align == "=":
        return body[:prefix_len] + fill * padding + body[prefix_len:]
    return fill * padding + body


def _sign_of(negative: bool, specs: _Specs) -> str:
    return "-" if negative else specs.sign


def _format_int(value: int, specs: _Specs) -> str:
    kind = specs.type
    if kind == "c":
        try:
            char = chr(value)
        except (ValueError, OverflowError) as exc:
            raise FormatError("invalid character") from exc
        return _pad(char, specs, "<")
    magnitude = abs(value)
    prefix = ""
    if kind in ("", "d", "n"):
        digits = str(magnitude)
    elif kind in ("x", "X"):
        digits = builtins.format(magnitude, kind)
        prefix = "0" + kind if specs.alt else ""
    elif kind in ("b", "B"):
        digits = builtins.format(magnitude, "b")
        prefix = "0" + kind if specs.alt else ""
    elif kind == "o":
        digits = builtins.format(magnitude, "o")
        prefix = "0" if specs.alt and magnitude != 0 else ""
    else:
        raise FormatError("invalid type specifier")
    head = _sign_of(value < 0, specs) + prefix
    return _pad(head + digits, specs, ">", len(head))


def _hex_float(value: float, precision: int, alt: bool) -> str:
    text = value.hex()
    point, exp_pos = text.index("."), text.index("p")
    lead = int(text[2:point])
    fraction = text[point + 1 : exp_pos].ljust(_HEX_FRACTION_DIGITS, "0")
    exponent = int(text[exp_pos + 1 :])
    if precision < 0:
        digits = fraction.rstrip("0")
    elif precision >= _HEX_FRACTION_DIGITS:
        digits = fraction + "0" * (precision - _HEX_FRACTION_DIGITS)
    else:
        shift = 4 * (_HEX_FRACTION_DIGITS - precision)
        quotient, remainder = divmod(int(fraction, 16), 1 << shift)
        half = 1 << (shift - 1)
        if remainder > half or (remainder == half and quotient & 1):
            quotient += 1
        if quotient >> (4 * precision):
            lead += 1
            quotient &= (1 << (4 * precision)) - 1
        digits = builtins.format(quotient, f"0{precision}x") if precision else ""
    point_text = "." + digits if digits or alt else ""
    sign = "+" if exponent >= 0 else "-"
    return f"0x{lead}{point_text}p{sign}{abs(exponent)}"


def _format_float(value: float, specs: _Specs) -> str:
    kind = specs.type
    if kind and kind not in _FLOAT_TYPES:
        raise FormatError("invalid type specifier")
    sign = _sign_of(math.copysign(1.0, value) < 0, specs)
    magnitude = abs(value)
    upper = kind in ("E", "F", "G", "A")
    if not math.isfinite(value):
        body = "nan" if math.isnan(value) else "inf"
        if upper:
            body = body.upper()
        if kind == "%":
            body += "%"
        if specs.fill == "0" and specs.align == "=":
            specs.fill, specs.align = " ", ">"
        return _pad(sign + body, specs, ">", len(sign))
    alt = "#" if specs.alt else ""
    precision = specs.precision
    prefix_len = len(sign)
    if kind in ("", "n"):
        if precision < 0:
            body = repr(magnitude)
        else:
            body = builtins.format(magnitude, f"{alt}.{precision}")
    elif kind in ("a", "A"):
        body = _hex_float(magnitude, precision, specs.alt)
        if upper:
            body = body.upper()
        prefix_len += 2
    else:
        precision_text = f".{precision}" if precision >= 0 else ""
        body = builtins.format(magnitude, f"{alt}{precision_text}{kind}")
    return _pad(sign + body, specs, ">", prefix_len)


def _format_str(value: str, specs: _Specs) -> str:
    if specs.type not in ("", "s"):
        raise FormatError("invalid type specifier")
    if specs.precision >= 0:
        value = value[: specs.precision]
    return _pad(value, specs, "<")


def _format_field(arg: FormatArg, spec: str) -> str:
    if arg.type is ArgType.CUSTOM:
        try:
            return builtins.format(arg.value, spec)
        except TypeError as exc:
            raise FormatError(str(exc)) from exc
    specs = _parse_specs(spec, arg)
    if arg.type is ArgType.BOOL:
        if specs.type in ("", "s"):
            return _pad("true" if arg.value else "false", specs, "<")
        return _format_int(int(arg.value), specs)
    if arg.is_integral():
        return _format_int(int(arg.value), specs)
    if arg.type in _FLOAT_ARG_TYPES:
        return _format_float(float(arg.value), specs)
    if arg.type in (ArgType.STRING, ArgType.CSTRING):
        return _format_str(str(arg.value), specs)
    if arg.type is ArgType.POINTER:
        if specs.type not in ("", "p"):
            raise FormatError("invalid type specifier")
        return _pad("0x0", specs, ">")
    raise FormatError("invalid argument type")


def _positional(args: FormatArgs, index: int) -> FormatArg:
    found = args.get(index)
    if not found:
        raise FormatError("argument index out of range")
    return found


def _lookup(ref: str, ctx: ParseContext, args: FormatArgs) -> FormatArg:
    if not ref:
        return _positional(args, ctx.next_arg_id())
    if ref[0] in _DIGITS:
        if any(c not in _DIGITS for c in ref) or (ref[0] == "0" and len(ref) > 1):
            raise FormatError("invalid format string")
        index = int(ref)
        if index > _INT_MAX:
            raise FormatError("number is too big")
        ctx.check_arg_id(index)
        return _positional(args, index)
    if _NAME.fullmatch(ref):
        ctx.check_arg_id(ref)
        found = args.find(ref)
        if not found:
            raise FormatError("argument not found")
        return found
    raise FormatError("invalid format string")


def _dynamic_int(arg: FormatArg, what: str) -> int:
    if not arg.is_integral():
        raise FormatError(f"{what} is not integer")
    value = int(arg.value)
    if value < 0:
        raise FormatError(f"negative {what}")
    if value > _INT_MAX:
        raise FormatError("number is too big")
    return value


def _read_spec(
    fmt: str, start: int, ctx: ParseContext, args: FormatArgs
) -> tuple[str, int]:
    """Read a format spec up to its closing brace, resolving nested fields."""
    parts: list[str] = []
    pos = start
    while pos < len(fmt):
        char = fmt[pos]
        if char == "}":
            return "".join(parts), pos + 1
        if char == "{":
            close = fmt.find("}", pos + 1)
            if close < 0:
                raise FormatError("invalid format string")
            what = "precision" if pos > start and fmt[pos - 1] == "." else "width"
            nested = _lookup(fmt[pos + 1 : close], ctx, args)
            parts.append(str(_dynamic_int(nested, what)))
            pos = close + 1
            continue
        parts.append(char)
        pos += 1
    raise FormatError("missing '}' in format string")


def _replacement_field(
    fmt: str, start: int, ctx: ParseContext, args: FormatArgs
) -> tuple[str, int]:
    if start >= len(fmt):
        raise FormatError("invalid format string")
    match = _ID_END.search(fmt, start)
    if match is None:
        raise FormatError("missing '}' in format string")
    id_end = match.start()
    arg = _lookup(fmt[start:id_end], ctx, args)
    if fmt[id_end] == "}":
        return _format_field(arg, ""), id_end + 1
    spec, next_pos = _read_spec(fmt, id_end + 1, ctx, args)
    return _format_field(arg, spec), next_pos


def vformat(fmt: str, args: FormatArgs | Iterable[Any]) -> str:
    """Format ``args`` according to the replacement fields in ``fmt``."""
    if not isinstance(args, FormatArgs):
        args = FormatArgs(args)
    ctx = ParseContext(fmt)
    out: list[str] = []
    pos = 0
    while True:
        match = _BRACE.search(fmt, pos)
        if match is None:
            out.append(fmt[pos:])
            break
        brace = match.start()
        out.append(fmt[pos:brace])
        doubled = fmt[brace + 1 : brace + 2] == fmt[brace]
        if fmt[brace] == "}":
            if not doubled:
                raise FormatError("unmatched '}' in format string")
            out.append("}")
            pos = brace + 2
        elif doubled:
            out.append("{")
            pos = brace + 2
        else:
            text, pos = _replacement_field(fmt, brace + 1, ctx, args)
            out.append(text)
        ctx.advance_to(pos)
    return "".join(out)


def format(fmt: str, *args: Any, **kwargs: Any) -> str:
    """Format positional and keyword (named) arguments into a new string."""
    return vformat(fmt, make_format_args(*args, **kwargs))


def format_to(out: Any, fmt: str, *args: Any, **kwargs: Any) -> Any:
    """Format the arguments and append the result to ``out``.

    ``out`` is a text stream with ``write`` or a sequence with ``extend``;
    it is returned.
    """
    text = vformat(fmt, make_format_args(*args, **kwargs))
    write = getattr(out, "write", None)
    if callable(write):
        write(text)
    elif callable(getattr(out, "extend", None)):
        out.extend(text)
    else:
        raise TypeError("output must have a write() or extend() method")
    return out


def vprint(file: TextIO | None, fmt: str, args: FormatArgs | Iterable[Any]) -> None:
    """Format ``args`` and write the result to ``file`` (standard output if None)."""
    (file if file is not None else sys.stdout).write(vformat(fmt, args))


def print_formatted(file: TextIO | None, fmt: str, *args: Any, **kwargs: Any) -> None:
    """Format the arguments and write the result to ``file`` without a newline."""
    vprint(file, fmt, make_format_args(*args, **kwargs))