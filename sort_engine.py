from dataclasses import dataclass
from enum import Enum
from functools import cmp_to_key
from typing import List, Optional

from cell_coercion import is_blank, plain_str, to_number
from table_model import Row, TableModel


class SortDirection(Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"


@dataclass(frozen=True)
class SortDescriptor:
    key: str
    direction: SortDirection = SortDirection.ASCENDING

    @property
    def descending(self) -> bool:
        return self.direction is SortDirection.DESCENDING


def toggle_sort(current: Optional[SortDescriptor], key: str) -> Optional[SortDescriptor]:
    """Advance the ascending -> descending -> unsorted cycle for ``key``."""
    if current is None or current.key != key:
        return SortDescriptor(key, SortDirection.ASCENDING)
    if current.direction is SortDirection.ASCENDING:
        return SortDescriptor(key, SortDirection.DESCENDING)
    return None


def compare_values(a, b) -> int:
    """Numeric comparison when both sides parse as numbers, else by string."""
    left = to_number(a)
    right = to_number(b)
    if left is not None and right is not None:
        return (left > right) - (left < right)
    sa = "" if is_blank(a) else plain_str(a)
    sb = "" if is_blank(b) else plain_str(b)
    return (sa > sb) - (sa < sb)


def sorted_rows(model: TableModel, descriptor: Optional[SortDescriptor]) -> List[Row]:
    rows = list(model.rows)
    if descriptor is None:
        return rows
    key = descriptor.key

    def cmp(r1: Row, r2: Row) -> int:
        result = compare_values(r1.get(key), r2.get(key))
        return -result if descriptor.descending else result

    # sorted() is stable, so equal values keep their model order
    return sorted(rows, key=cmp_to_key(cmp))


def sorted_row_ids(model: TableModel, descriptor: Optional[SortDescriptor]) -> List[str]:
    return [row.id for row in sorted_rows(model, descriptor)]
