import datetime
import math
import re
from decimal import ROUND_HALF_UP, Context, Decimal

import numpy as np
import pandas as pd

_TRUE_TOKENS = {"1", "true", "t", "yes", "y", "on"}
_FALSE_TOKENS = {"0", "false", "f", "no", "n", "off"}
_NON_DIGITS = re.compile(r"\D")
# plain decimal literals only: no underscores, no non-ASCII digits, no nan/inf
_NUMERIC_LITERAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if np.ndim(value) != 0:
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def to_number(value):
    """Return ``value`` as a finite float, or None when it does not parse."""
    if is_blank(value):
        return None
    if isinstance(value, (bool, np.bool_)):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float, np.integer, np.floating)):
        num = float(value)
    elif isinstance(value, str):
        stripped = value.strip()
        if not _NUMERIC_LITERAL.fullmatch(stripped):
            return None
        try:
            num = float(stripped)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(num):
        return None
    return num


def to_date(value):
    if is_blank(value):
        return None
    if isinstance(value, datetime.date):
        return value
    try:
        parsed = pd.to_datetime(str(value), errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if parsed is None or pd.isna(parsed):
        return None
    return parsed.to_pydatetime()


def js_number_str(num: float) -> str:
    if float(num).is_integer() and abs(num) < 1e21:
        return str(int(num))
    return repr(float(num))


def plain_str(value) -> str:
    if isinstance(value, (bool, np.bool_)):
        return "true" if value else "false"
    if isinstance(value, (float, np.floating)) and math.isfinite(value):
        return js_number_str(value)
    return str(value)


def phone_digits(value) -> str:
    return _NON_DIGITS.sub("", "" if value is None else str(value))


def format_phone_partial(raw: str) -> str:
    digits = phone_digits(raw)[:10]
    if len(digits) <= 3:
        return digits
    if len(digits) <= 6:
        return f"({digits[:3]}) {digits[3:]}"
    return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"


def coerce_checkbox_input(text) -> bool:
    text = "" if text is None else str(text)
    lowered = text.strip().lower()
    if lowered in _TRUE_TOKENS:
        return True
    if lowered == "" or lowered in _FALSE_TOKENS:
        return False
    raise ValueError(f"Cannot coerce '{text}' to boolean")


def coerce_date_input(text) -> str:
    text = "" if text is None else str(text)
    stripped = text.strip()
    if stripped == "":
        return ""
    parsed = to_date(stripped)
    if parsed is None:
        raise ValueError(f"Cannot coerce '{text}' to date")
    return parsed.isoformat()


def coerce_phone_input(text) -> str:
    return phone_digits(text)[:10]


def round_half_up(num: float, places: int) -> Decimal:
    """Round the shortest decimal form of ``num``, ties away from zero."""
    exact = Decimal(repr(float(num)))
    context = Context(prec=max(28, exact.adjusted() + places + 2))
    return exact.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP, context=context)
