"""HTML encoding that prefers named character references.

encode() runs three passes over the text:

1. baseline.escape() escapes &, <, >, " and ' and turns U+00A0..U+00FF
   into decimal references (&#162;).
2. Every remaining character with a table entry is replaced by its named
   reference, e.g. U+0394 becomes &Delta;.
3. Numeric references (&#162;, &#xA2;) are rewritten to the named form
   (&cent;) when the table has one, and to the literal character otherwise.

All three passes are pure, so encode() can be called concurrently.
"""

import io
import string
from typing import Optional, TextIO

from . import baseline
from .entities import lookup, lookup_codepoint

MAX_CODEPOINT = 0x10FFFF

_TERMINATORS = frozenset(";&")
_DECIMAL_DIGITS = frozenset(string.digits)
_HEX_DIGITS = frozenset(string.hexdigits)
# Longest digit run (leading zeros excluded) that can still be <= U+10FFFF
_MAX_SIGNIFICANT_DIGITS = {10: 7, 16: 6}


def encode(text: Optional[str]) -> Optional[str]:
    """Encode text for HTML, using named entities wherever one exists.

    Returns None for None. Never raises for any input string: malformed or
    ambiguous reference syntax is passed through literally.
    """
    if text is None:
        return None
    escaped = baseline.escape(text)
    named = substitute_named(escaped)
    output = io.StringIO()
    write_references(named, output)
    return output.getvalue()


def substitute_named(value: str) -> str:
    """Replace every character that has a table entry with &name;."""
    parts: list[str] = []
    for ch in value:
        name = lookup(ch)
        parts.append(ch if name is None else f"&{name};")
    return "".join(parts)


def rewrite_references(value: Optional[str]) -> Optional[str]:
    """String-returning wrapper around write_references()."""
    if value is None:
        return None
    output = io.StringIO()
    write_references(value, output)
    return output.getvalue()


def write_references(value: Optional[str], output: TextIO) -> None:
    """Write value to output with numeric references rewritten.

    At each "&" the scan looks ahead for the nearest ";" or "&". If another
    "&" comes first the current one is not a reference; it is written as is
    and the scan continues from the next character, so an unterminated "&"
    cannot swallow a reference that follows it. Bodies that are not
    numeric (&amp;, &Delta;) are left alone.
    """
    if value is None:
        return
    if output is None:
        raise ValueError("output must not be None")

    length = len(value)
    i = 0
    while i < length:
        amp = value.find("&", i)
        if amp == -1:
            output.write(value[i:])
            return
        if amp > i:
            output.write(value[i:amp])
        i = amp

        end = _find_terminator(value, i + 1)
        if end != -1 and value[end] == ";":
            body = value[i + 1:end]
            if len(body) > 1 and body[0] == "#":
                codepoint = _parse_numeric(body)
                if codepoint is not None:
                    name = lookup_codepoint(codepoint)
                    output.write(chr(codepoint) if name is None else f"&{name};")
                    i = end + 1
                    continue

        output.write("&")
        i += 1


def _find_terminator(value: str, start: int) -> int:
    """Index of the first ";" or "&" at or after start, or -1."""
    for index in range(start, len(value)):
        if value[index] in _TERMINATORS:
            return index
    return -1


def _parse_numeric(body: str) -> Optional[int]:
    """Parse "#229" or "#xE5" to a code point.

    Returns None for anything that is not a plain run of ASCII digits, for
    values above U+10FFFF and for surrogates.
    """
    if body[1] in "xX":
        digits, base, allowed = body[2:], 16, _HEX_DIGITS
    else:
        digits, base, allowed = body[1:], 10, _DECIMAL_DIGITS

    if not digits or not all(c in allowed for c in digits):
        return None
    significant = digits.lstrip("0") or "0"
    if len(significant) > _MAX_SIGNIFICANT_DIGITS[base]:
        return None

    codepoint = int(significant, base)
    if codepoint > MAX_CODEPOINT or 0xD800 <= codepoint <= 0xDFFF:
        return None
    return codepoint
