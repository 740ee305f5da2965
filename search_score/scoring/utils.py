"""Value access and normalization helpers for the scoring engine."""

import math
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Optional

# Floats outside this range are rendered in exponent notation
POSITIONAL_MIN = 1e-6
POSITIONAL_MAX = 1e21


def read_field(record: Any, name: str) -> Any:
    """Read a field from a mapping, or an attribute from any other object.

    Missing fields read as None.
    """
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def is_number(value: Any) -> bool:
    """True for ints and floats. Booleans are not numbers here."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def number_to_text(value) -> str:
    """Render a number the way it is typed in a search box.

    Floats use their shortest round-trip digits. Integral values drop the
    fractional part (``42.0`` reads as ``"42"``), magnitudes from 1e-6 up to
    1e21 are written out positionally, and anything outside that range uses
    exponent notation such as ``"1e+21"`` or ``"1.5e-7"``.
    """
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value == 0:
            return "0"
        if POSITIONAL_MIN <= abs(value) < POSITIONAL_MAX:
            if value.is_integer():
                return str(int(value))
            return format(Decimal(repr(value)), "f")
        mantissa, _, exponent = repr(value).partition("e")
        power = int(exponent)
        return f"{mantissa}e{'+' if power > 0 else '-'}{abs(power)}"
    return str(value)


def normalize_text(value: str) -> str:
    """Trim surrounding whitespace and lowercase."""
    return value.strip().lower()


def resolve_search_key(keyword: str, prefix: Optional[str]) -> Optional[str]:
    """Derive the text a keyword searches for under a condition prefix.

    Without a prefix the keyword is used as is. With a prefix the keyword must
    start with it and carry something after it, otherwise None is returned.
    A keyword ending in ``)`` searches for the text inside its last
    parentheses (``":Foo(bar)"`` searches ``"bar"``), any other keyword
    searches for the text after the prefix.

    Examples:
        >>> resolve_search_key("@alice", "@")
        'alice'
        >>> resolve_search_key("alice", "@") is None
        True
        >>> resolve_search_key(":Foo(bar)", ":")
        'bar'
    """
    if not prefix:
        return keyword

    if not keyword.startswith(prefix) or len(keyword) <= len(prefix):
        return None

    open_index = keyword.rfind("(")
    if keyword.endswith(")") and open_index > -1:
        return keyword[open_index + 1 : -1]
    return keyword[len(prefix) :]
