from enum import Enum
from typing import Iterable, Optional

import pandas as pd

from cell_coercion import to_number
from column_types import ColumnType, format_cell_value
from table_model import TableModel


class AggregateMode(Enum):
    SUM = "sum"
    AVERAGE = "average"
    MEDIAN = "median"

    @classmethod
    def parse(cls, value) -> "AggregateMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown aggregate mode '{value}'") from None


DEFAULT_AGGREGATE_MODE = AggregateMode.SUM

AGGREGATABLE_TYPES = frozenset({ColumnType.NUMBER, ColumnType.CURRENCY})


def numeric_series(values: Iterable) -> pd.Series:
    """Values that parse as numbers, as a float series; the rest are dropped."""
    numbers = [n for n in (to_number(v) for v in values) if n is not None]
    return pd.Series(numbers, dtype="float64")


def aggregate_values(values: Iterable, mode=DEFAULT_AGGREGATE_MODE) -> float:
    mode = AggregateMode.parse(mode)
    series = numeric_series(values)
    if series.empty:
        return 0.0
    if mode is AggregateMode.SUM:
        return float(series.sum())
    if mode is AggregateMode.AVERAGE:
        return float(series.mean())
    return float(series.median())


def is_aggregatable(model: TableModel, key: str) -> bool:
    column = model.get_column(key)
    return column is not None and column.type in AGGREGATABLE_TYPES


def aggregate_column(model: TableModel, key: str, mode=DEFAULT_AGGREGATE_MODE) -> Optional[float]:
    if not is_aggregatable(model, key):
        return None
    return aggregate_values(model.column_values(key), mode)


def format_aggregate(value: Optional[float], column_type) -> str:
    if value is None:
        return ""
    return format_cell_value(value, column_type)
