"""
Per-field canonicalization.

Every function here is pure and total: a value that does not fit a field's
expected shape falls back to a trimmed copy (or the field default), it never
raises.
"""

from __future__ import annotations

import logging
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional, Sequence

from .rules import (
    CANONICAL_FIELDS,
    DEFAULT_TEXT_VALUE,
    DEFAULT_VALUES,
    H_ADDRESS,
    H_BIRTHDAY,
    H_CREDIT_LIMIT,
    H_NAME,
    H_PHONE,
    H_POSTCODE,
)

log = logging.getLogger(__name__)

_BY_LOWER = {name.lower(): name for name in CANONICAL_FIELDS}

_WHITESPACE = re.compile(r"\s+")
_NON_DIGIT = re.compile(r"[^0-9]")
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_TWO_PLACES = Decimal("0.01")

# Tried in order, first match wins.
_DMY_SLASHED = re.compile(r"([0-9]{1,2})/([0-9]{1,2})/([0-9]{4})")
_YMD_COMPACT = re.compile(r"([0-9]{4})([0-9]{2})([0-9]{2})")
_YMD_DASHED = re.compile(r"([0-9]{4})-([0-9]{1,2})-([0-9]{1,2})")


def canonical_field(header: Optional[str]) -> Optional[str]:
    """Map a header to its canonical spelling, case-insensitively."""
    if header is None:
        return None
    return _BY_LOWER.get(str(header).strip().lower())


def default_value(field_name: str) -> str:
    """Value used when a field is absent from the raw input."""
    return DEFAULT_VALUES.get(canonical_field(field_name) or field_name, DEFAULT_TEXT_VALUE)


def norm_postcode(s: str) -> str:
    """'4532 aa' -> '4532AA'"""
    return _WHITESPACE.sub("", s).upper()


def norm_phone(s: str) -> str:
    """Keep digits only; a leading '+' survives as the international prefix."""
    if s.startswith("+"):
        return "+" + _NON_DIGIT.sub("", s[1:])
    return _NON_DIGIT.sub("", s)


def norm_credit_limit(s: str) -> str:
    candidate = s.replace(",", ".", 1)
    if not _DECIMAL.fullmatch(candidate):
        return DEFAULT_VALUES[H_CREDIT_LIMIT]
    try:
        amount = Decimal(candidate).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # too many digits to hold two decimal places
        return DEFAULT_VALUES[H_CREDIT_LIMIT]
    return str(amount)


def norm_birthday(s: str) -> str:
    """Render D/M/YYYY, YYYYMMDD and YYYY-M-D as YYYY-MM-DD."""
    m = _DMY_SLASHED.fullmatch(s)
    if m:
        day, month, year = m.groups()
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    m = _YMD_COMPACT.fullmatch(s)
    if m:
        year, month, day = m.groups()
        return f"{year}-{month}-{day}"

    m = _YMD_DASHED.fullmatch(s)
    if m:
        year, month, day = m.groups()
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    # Unvalidated passthrough; stricter date checks would reject these.
    if s:
        log.debug("unrecognized birthday format kept as-is: %r", s)
    return s


_RULES = {
    H_NAME: None,
    H_ADDRESS: None,
    H_POSTCODE: norm_postcode,
    H_PHONE: norm_phone,
    H_CREDIT_LIMIT: norm_credit_limit,
    H_BIRTHDAY: norm_birthday,
}


def normalize_field(field_name: str, value: Any = None) -> str:
    """
    Canonicalize one raw value for ``field_name``.

    ``None`` means the field was absent and yields the field default.
    Headers outside the canonical schema are trimmed verbatim.
    """
    if value is None:
        return default_value(field_name)

    text = str(value).strip()
    rule = _RULES.get(canonical_field(field_name))
    if rule is None:
        return text
    return rule(text)


def normalize_row(raw: Mapping[str, Any], fields: Sequence[str] = CANONICAL_FIELDS) -> Dict[str, str]:
    """Build a complete record: every field in ``fields`` present, in order."""
    return {name: normalize_field(name, raw.get(name)) for name in fields}
