"""Baseline HTML escaping.

Escapes the markup-significant characters with the standard library
html.escape and turns every Latin-1 supplement character (U+00A0 to U+00FF)
into a decimal numeric reference. Character references that are already
well formed in the input (numeric ones, and named ones from the entity
table) are left as they are, so escaped text is not escaped twice.
"""

import html
import re

from .entities import ENTITY_NAMES

_REFERENCE_RE = re.compile(r"&(?:#([0-9]+)|#[xX]([0-9a-fA-F]+)|([A-Za-z][A-Za-z0-9]*));")
_HIGH_RANGE_RE = re.compile(r"[\u00a0-\u00ff]")


def _numeric_reference(match: re.Match) -> str:
    return f"&#{ord(match.group(0))};"


def _is_ampersand(decimal: str, hexadecimal: str) -> bool:
    """True when a kept numeric reference spells U+0026."""
    digits = (decimal or hexadecimal).lstrip("0")
    return digits == ("38" if decimal else "26")


def _escape_segment(segment: str) -> str:
    escaped = html.escape(segment, quote=True)
    return _HIGH_RANGE_RE.sub(_numeric_reference, escaped)


def escape(value: str) -> str:
    """Escape &, <, >, " and ' and encode U+00A0..U+00FF as &#N;.

    Existing references such as &#162;, &#xA2; or &amp; pass through
    unchanged, except &#38; and &#x26;, which become &amp;. Named
    references outside the entity table (&foo;) are treated as text and
    their "&" is escaped.
    """
    parts: list[str] = []
    pos = 0
    for match in _REFERENCE_RE.finditer(value):
        decimal, hexadecimal, name = match.groups()
        if name is not None and name not in ENTITY_NAMES:
            continue
        parts.append(_escape_segment(value[pos:match.start()]))
        if name is None and _is_ampersand(decimal, hexadecimal):
            parts.append("&amp;")
        else:
            parts.append(match.group(0))
        pos = match.end()
    parts.append(_escape_segment(value[pos:]))
    return "".join(parts)
