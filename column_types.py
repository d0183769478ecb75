"""Column types and their per-type value behavior.

Each ``ColumnType`` maps to a ``ColumnTypeBehavior`` in
``COLUMN_TYPE_REGISTRY`` that knows the type's default value, how a stored
value is displayed, and how committed editor text is stored.

Usage:
    from column_types import ColumnType, default_value, format_cell_value

    default_value(ColumnType.CHECKBOX)               # False
    format_cell_value("5551234567", "phone")         # "(555) 123-4567"
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict

from cell_coercion import (
    coerce_checkbox_input,
    coerce_date_input,
    coerce_phone_input,
    is_blank,
    js_number_str,
    phone_digits,
    plain_str,
    round_half_up,
    to_date,
    to_number,
)


class ColumnType(Enum):
    """Types of columns with different default/display behavior."""
    TEXT = "text"
    LONG_TEXT = "long_text"
    CHECKBOX = "checkbox"
    SELECT = "select"
    DATE = "date"
    NUMBER = "number"
    PHONE = "phone"
    EMAIL = "email"
    CURRENCY = "currency"
    PERCENT = "percent"

    @classmethod
    def parse(cls, value) -> "ColumnType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown column type '{value}'") from None

    @property
    def label(self) -> str:
        return COLUMN_TYPE_LABELS[self]

    @property
    def icon(self) -> str:
        return COLUMN_TYPE_ICONS[self]


COLUMN_TYPE_LABELS: Dict[ColumnType, str] = {
    ColumnType.TEXT: "Text",
    ColumnType.LONG_TEXT: "Long text",
    ColumnType.CHECKBOX: "Checkbox",
    ColumnType.SELECT: "Select",
    ColumnType.DATE: "Date",
    ColumnType.NUMBER: "Number",
    ColumnType.PHONE: "Phone number",
    ColumnType.EMAIL: "Email",
    ColumnType.CURRENCY: "Currency",
    ColumnType.PERCENT: "Percent",
}

# Icon names are handed to the renderer untouched.
COLUMN_TYPE_ICONS: Dict[ColumnType, str] = {
    ColumnType.TEXT: "type",
    ColumnType.LONG_TEXT: "align-left",
    ColumnType.CHECKBOX: "check-square",
    ColumnType.SELECT: "list",
    ColumnType.DATE: "calendar",
    ColumnType.NUMBER: "hash",
    ColumnType.PHONE: "phone",
    ColumnType.EMAIL: "mail",
    ColumnType.CURRENCY: "dollar-sign",
    ColumnType.PERCENT: "percent",
}

OPTION_COLORS: Dict[str, str] = {
    "Gray": "#6b7280",
    "Red": "#ef4444",
    "Orange": "#f97316",
    "Amber": "#f59e0b",
    "Green": "#22c55e",
    "Teal": "#14b8a6",
    "Blue": "#3b82f6",
    "Indigo": "#6366f1",
    "Purple": "#a855f7",
    "Pink": "#ec4899",
}

DEFAULT_OPTION_COLOR = OPTION_COLORS["Gray"]

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


@dataclass(frozen=True)
class SelectOption:
    """One choice of a select column. ``color`` is a palette hex value."""
    label: str
    color: str = DEFAULT_OPTION_COLOR

    def __post_init__(self):
        color = self.color
        if color in OPTION_COLORS:
            color = OPTION_COLORS[color]
        elif isinstance(color, str):
            color = color.lower()
        if color not in OPTION_COLORS.values():
            raise ValueError(f"Color '{self.color}' is not in the option palette")
        object.__setattr__(self, "color", color)

    @classmethod
    def coerce(cls, value) -> "SelectOption":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls(label=value)
        if isinstance(value, dict):
            return cls(label=str(value["label"]), color=value.get("color", DEFAULT_OPTION_COLOR))
        raise ValueError(f"Cannot read select option from {value!r}")


# ----- formatters -----
def _format_plain(value) -> str:
    return plain_str(value)


def _format_currency(value) -> str:
    num = to_number(value)
    if num is None:
        return plain_str(value)
    return f"${round_half_up(num, 2):,.2f}"


def _format_percent(value) -> str:
    num = to_number(value)
    if num is None:
        return plain_str(value)
    return f"{js_number_str(num)}%"


def _format_phone(value) -> str:
    digits = phone_digits(value)
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    if len(digits) == 11 and digits.startswith("1"):
        return f"+1 ({digits[1:4]}) {digits[4:7]}-{digits[7:]}"
    return plain_str(value)


def _format_date(value) -> str:
    parsed = to_date(value)
    if parsed is None:
        return plain_str(value)
    return f"{_MONTHS[parsed.month - 1]} {parsed.day}, {parsed.year:04d}"


def _format_number(value) -> str:
    num = to_number(value)
    if num is None:
        return plain_str(value)
    text = f"{round_half_up(num, 3):,.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def _identity_input(text) -> str:
    return "" if text is None else str(text)


@dataclass(frozen=True)
class ColumnTypeBehavior:
    default: Any = ""
    formatter: Callable[[Any], str] = _format_plain
    input_coercer: Callable[[Any], Any] = _identity_input

    def default_value(self):
        return self.default

    def format(self, value) -> str:
        if is_blank(value):
            return ""
        try:
            return self.formatter(value)
        except (TypeError, ValueError, OverflowError):
            return plain_str(value)


COLUMN_TYPE_REGISTRY: Dict[ColumnType, ColumnTypeBehavior] = {
    ColumnType.TEXT: ColumnTypeBehavior(),
    ColumnType.LONG_TEXT: ColumnTypeBehavior(),
    ColumnType.CHECKBOX: ColumnTypeBehavior(default=False, input_coercer=coerce_checkbox_input),
    ColumnType.SELECT: ColumnTypeBehavior(),
    ColumnType.DATE: ColumnTypeBehavior(formatter=_format_date, input_coercer=coerce_date_input),
    ColumnType.NUMBER: ColumnTypeBehavior(formatter=_format_number),
    ColumnType.PHONE: ColumnTypeBehavior(formatter=_format_phone, input_coercer=coerce_phone_input),
    ColumnType.EMAIL: ColumnTypeBehavior(),
    ColumnType.CURRENCY: ColumnTypeBehavior(formatter=_format_currency),
    ColumnType.PERCENT: ColumnTypeBehavior(formatter=_format_percent),
}


def behavior_for(column_type) -> ColumnTypeBehavior:
    return COLUMN_TYPE_REGISTRY[ColumnType.parse(column_type)]


def default_value(column_type):
    return behavior_for(column_type).default_value()


def format_cell_value(value, column_type) -> str:
    """Display string for ``value`` under ``column_type``. Never raises."""
    if is_blank(value):
        return ""
    try:
        behavior = behavior_for(column_type)
    except (KeyError, ValueError):
        return plain_str(value)
    return behavior.format(value)


def normalize_cell_input(text, column_type):
    """Map committed editor text to the value stored for ``column_type``.

    Checkbox and date input raise ValueError when the text cannot be read.
    """
    return behavior_for(column_type).input_coercer(text)
