from __future__ import annotations

import datetime as dt
import logging
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

# Everything except digits and the two separators (drops signs, spaces, NBSP)
NUM_CLEAN_RE = re.compile(r"[^0-9,.]")

_DOTTED_DATE_RE = re.compile(r"^(\d{1,2})\.(\d{1,2})\.(\d{4})$")

logger = logging.getLogger(__name__)


def to_dec_strict(s: str | int | Decimal | None) -> Decimal:
    """Convert a localized export number to Decimal.

    Handles:
    - "1 234,56" -> Decimal("1234.56") (comma as decimal separator)
    - "-1234.5" -> Decimal("1234.5") (signs are dropped; cash flows are magnitudes)

    Raises ValueError on invalid/missing data.
    """
    if s is None:
        raise ValueError("Value is None")
    if isinstance(s, Decimal):
        return s
    if isinstance(s, int):
        return Decimal(s)

    s_clean = NUM_CLEAN_RE.sub("", s.strip()).replace(",", ".")
    if not s_clean:
        raise ValueError(f"No numeric content in {s!r}")
    if s_clean.count(".") > 1:
        raise ValueError(f"Ambiguous decimal separators in {s!r}")

    try:
        return Decimal(s_clean)
    except InvalidOperation as e:
        raise ValueError(f"Invalid decimal format: {s!r}") from e


def to_minor_units(value: Decimal, precision: int) -> int:
    """Scale a decimal to integer minor units, rounding half away from zero."""
    scaled = value.scaleb(precision)
    return int(scaled.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def parse_date(d: str) -> dt.date:
    """Parse date-like strings.
    Handles 'YYYY-MM-DD', 'YYYY-MM-DD HH:MM:SS', 'YYYY-MM-DD, HH:MM' and 'DD.MM.YYYY'.
    """
    d = d.strip()
    if "," in d:
        d = d.split(",")[0].strip()
    if " " in d or "T" in d:
        d = re.split(r"[ T]", d, maxsplit=1)[0]
    m = _DOTTED_DATE_RE.match(d)
    if m:
        day, month, year = (int(g) for g in m.groups())
        return dt.date(year, month, day)
    return dt.date.fromisoformat(d)


def date_key(d: str | dt.date) -> str:
    """Return YYYY-MM-DD string for a date."""
    if isinstance(d, dt.date):
        return d.isoformat()
    return parse_date(d).isoformat()
