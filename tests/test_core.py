import builtins
import io
import math

import pytest

from fmtkit.args import DynamicFormatArgStore, arg, make_format_args
from fmtkit.core import format, format_to, print_formatted, vformat, vprint
from fmtkit.parsecontext import FormatError


class Recorder:
    def __init__(self):
        self.specs = []

    def __format__(self, spec):
        self.specs.append(spec)
        return f"<{spec}>"


def test_plain_text_passes_through():
    assert format("hello") == "hello"


def test_automatic_indexing():
    assert format("{}{}", "a", "b") == "ab"


def test_manual_indexing():
    assert format("{1}{0}{1}", "a", "b") == "bab"


def test_named_arguments():
    assert format("{x}-{y}", x="p", y="q") == "p-q"
    assert (
        format("Elapsed time: {s:.2f} seconds", arg("s", 1.23))
        == "Elapsed time: 1.23 seconds"
    )


def test_escaped_braces():
    assert format("{{}}") == "{}"
    assert format("{{{}}}", "v") == "{v}"


def test_cannot_switch_from_automatic_to_manual():
    with pytest.raises(FormatError, match="cannot switch from automatic to manual"):
        format("{}{0}", 1, 2)


def test_cannot_switch_from_manual_to_automatic():
    with pytest.raises(FormatError, match="cannot switch from manual to automatic"):
        format("{0}{}", 1, 2)


@pytest.mark.parametrize("fmt", ["{}", "{5}"])
def test_argument_index_out_of_range(fmt):
    with pytest.raises(FormatError, match="argument index out of range"):
        format(fmt)


def test_unknown_name():
    with pytest.raises(FormatError):
        format("{name}", 1)


@pytest.mark.parametrize("fmt", ["{", "}", "{0", "{0}=:{0::", "{:{o}", "{0x}", "{00}"])
def test_malformed_format_strings(fmt):
    with pytest.raises(FormatError):
        format(fmt, 0)


def test_string_alignment():
    assert format("{:5}", "42s") == "42s  "
    assert format("{:>5}", "42s") == "  42s"
    assert format("{:*^7}", "42s") == "**42s**"


def test_dynamic_width():
    assert format("{:{}}", "42s", 5) == "42s  "
    assert format("{0:>{1}}", "42s", 5) == format("{:>5}", "42s")


def test_dynamic_precision():
    assert format("{:.{}f}", 1.234, 2) == "1.23"
    assert format("{0:^{2}.{1}f}", 1.234, 2, 8) == builtins.format(1.234, "^8.2f")


def test_width_is_not_integer():
    with pytest.raises(FormatError, match="width is not integer"):
        format("{:{}}", "x", "a")


def test_precision_is_not_integer():
    with pytest.raises(FormatError, match="precision is not integer"):
        format("{:.{}}", 1.0, 1.5)


def test_negative_dynamic_width():
    with pytest.raises(FormatError):
        format("{:{}}", "x", -3)


def test_precision_not_allowed_for_integers():
    with pytest.raises(FormatError, match="precision not allowed for this argument type"):
        format("{:.2}", 42)


def test_sign_requires_numeric_argument():
    with pytest.raises(FormatError):
        format("{:+}", "text")


def test_too_big_integer_is_rejected():
    with pytest.raises(FormatError, match="number is too big"):
        format("{}", 1 << 200)


@pytest.mark.parametrize(
    "spec", ["x", "X", "b", "d", "+d", " d", "08d", "#x", "#X", "#b", ">6", "<6", "^7", "=+8"]
)
@pytest.mark.parametrize("value", [0, 42, -42, 255, 2**40])
def test_integers_match_builtin_format(spec, value):
    assert format("{:" + spec + "}", value) == builtins.format(value, spec)


def test_hex_pointer_style_value():
    assert format("{:#x}", 0xFACE) == "0xface"


def test_alternate_octal_has_zero_prefix():
    assert format("{:#o}", 8) == "0" + builtins.format(8, "o")
    assert format("{:#o}", 0) == "0"


def test_uppercase_binary_prefix():
    result = format("{:#B}", 42)
    assert result.startswith("0B")
    assert int(result[2:], 2) == 42


def test_integer_as_character():
    assert format("{:c}", ord("z")) == "z"


def test_invalid_integer_type():
    with pytest.raises(FormatError):
        format("{:s}", 42)


def test_bool_formatting():
    assert format("{}", True) == "true"
    assert format("{:d}", False) == format("{}", 0)


@pytest.mark.parametrize("value", [0.1, 1.0, 1e20, 1e-7, 123.456, 2.5e-300])
def test_default_float_round_trips(value):
    result = format("{}", value)
    assert float(result) == value
    assert "." in result or "e" in result


@pytest.mark.parametrize("spec", ["e", ".3f", "10.2e", "+g", "%", "E", ".4G"])
def test_float_specs_match_builtin_format(spec):
    assert format("{:" + spec + "}", 1234.5678) == builtins.format(1234.5678, spec)


def test_non_finite_floats():
    assert format("{}", -math.nan) == "-nan"
    assert format("{}", math.inf) == "inf"
    padded = format("{:06}", math.inf)
    assert len(padded) == 6
    assert "0" not in padded


@pytest.mark.parametrize("value", [1.5, 0.1, 0.0, 3e300, 5e-324, 1234.5])
def test_hex_float_round_trips(value):
    assert float.fromhex(format("{:a}", value)) == value
    upper = format("{:A}", value)
    assert upper == upper.upper()
    assert float.fromhex(upper) == value


def test_hex_float_with_precision_is_close():
    result = format("{:.3a}", 0.1)
    assert math.isclose(float.fromhex(result), 0.1, rel_tol=1e-3)


def test_none_is_null_pointer():
    assert format("{}", None) == "0x0"


def test_string_precision_truncates():
    assert format("{:.3}", "abcdef") == "abc"


def test_custom_object_receives_resolved_spec():
    recorder = Recorder()
    assert format("{:{}x}", recorder, 5) == "<5x>"
    assert recorder.specs == ["5x"]


def test_custom_object_with_unsupported_spec():
    with pytest.raises(FormatError):
        format("{:d}", object())


def test_vformat_with_dynamic_store():
    store = DynamicFormatArgStore()
    store.push_back(42)
    store.push_back("abc")
    store.push_back(1.5)
    expected = format("{} and {} and {}", 42, "abc", 1.5)
    assert vformat("{} and {} and {}", store) == expected


def test_vformat_with_format_args():
    args = make_format_args("v", name="n")
    assert vformat("{}{name}", args) == "vn"


def test_format_to_list():
    out = []
    result = format_to(out, "{:>4}", "ab")
    assert result is out
    assert "".join(out) == format("{:>4}", "ab")


def test_format_to_stream():
    stream = io.StringIO()
    format_to(stream, "{}-{}", "a", "b")
    assert stream.getvalue() == "a-b"


def test_format_to_rejects_unwritable_output():
    with pytest.raises(TypeError):
        format_to(42, "{}", 1)


def test_print_formatted_to_stream():
    stream = io.StringIO()
    print_formatted(stream, "Don't {}!", "panic")
    assert stream.getvalue() == "Don't panic!"


def test_vprint_to_stdout(capsys):
    vprint(None, "{}-{}", make_format_args("x", "y"))
    assert capsys.readouterr().out == "x-y"