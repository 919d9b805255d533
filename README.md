# fmtkit

String formatting with a `{}` replacement-field syntax: automatic, manual
and named argument references, fill and alignment, sign, alternate form,
zero padding, width and precision (both of which may come from other
arguments), and integer, floating-point, string, bool and null types.

## Install

```
pip install fmtkit
```

## Formatting

```python
from fmtkit.core import format, format_to, print_formatted
from fmtkit.args import arg

format("The answer is {}", 42)              # 'The answer is 42'
format("{0}-{1}-{0}", "a", "b")             # 'a-b-a'
format("Elapsed: {s:.2f} s", arg("s", 1.23))  # 'Elapsed: 1.23 s'
format("{name}!", name="hi")                # 'hi!'
format("{:*^7}", "ab")                      # '**ab***'
format("{:>{}}", 7, 4)                      # '   7'
format("{:#x}", 255)                        # '0xff'
format("{}", True)                          # 'true'

out = []
format_to(out, "{:>5}", 7)   # extends the list with the characters of '    7'
print_formatted(None, "{} and {}\n", 1, 2)  # writes to standard output
```

`format_to` accepts anything with a `write()` method (such as a text
stream) or an `extend()` method (such as a list) and returns it.
`print_formatted` and `vprint` write to the given file, or to standard
output when the file is `None`; no newline is added.

Objects of other types are formatted with their own `__format__` and
receive the spec text after the colon unchanged.

## Errors

Every malformed format string or unsuitable argument raises
`fmtkit.parsecontext.FormatError`, a subclass of `ValueError`. This
includes an unmatched brace, an argument index out of range, an unknown
name, a spec that needs a numeric argument, a precision on an integer, and
mixing automatic (`{}`) with manual (`{0}`) indexing. Named references may
be mixed with either style.

## Argument lists

Arguments can be collected ahead of time and passed to `fmtkit.core.vformat`:

```python
from fmtkit.args import make_format_args, DynamicFormatArgStore
from fmtkit.core import vformat

args = make_format_args(1, 2.5, unit="kg")
vformat("{} {} {unit}", args)      # '1 2.5 kg'

store = DynamicFormatArgStore()
store.push_back(42)
store.push_back("abc")
vformat("{} and {}", store)        # '42 and abc'
```

`fmtkit.args.classify` reports the core type (`ArgType`) a value is
formatted as; integers take the narrowest type that holds them, and
integers wider than 128 bits raise `FormatError`.

`fmtkit.parsecontext.ParseContext` holds the unparsed part of a format
string and the argument counter, and can be used to build parsers that
follow the same indexing rules.

## What this package does not do

It formats with the `{}` syntax only. There is no `%`-style
(`sprintf`-like) formatting, no formatting of durations or calendar times,
no locale-aware output, and no command-line program.