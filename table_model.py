"""Table model - ordered column configuration plus the record set.

A ``TableModel`` is an immutable snapshot. Editing operations in
``table_mutations`` build a new snapshot instead of changing this one, so a
reader holding a model never sees a half-applied edit.

Invariants held by every snapshot:
- column keys are pairwise distinct
- row ids are pairwise distinct
- rows built through ``from_records`` and the editing operations carry an
  entry for every column key
"""

import uuid
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from column_types import ColumnType, SelectOption, default_value


class TableModelError(ValueError):
    pass


def new_row_id() -> str:
    return uuid.uuid4().hex[:8]


@dataclass(frozen=True)
class ColumnConfig:
    """Definition for a table column. ``key`` doubles as the display name."""
    key: str
    type: ColumnType = ColumnType.TEXT
    options: Tuple[SelectOption, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "type", ColumnType.parse(self.type))
        opts = tuple(SelectOption.coerce(o) for o in (self.options or ()))
        if self.type is not ColumnType.SELECT:
            opts = ()
        object.__setattr__(self, "options", opts)

    @property
    def label(self) -> str:
        return self.type.label

    @property
    def icon(self) -> str:
        return self.type.icon

    def default_value(self):
        return default_value(self.type)

    @classmethod
    def coerce(cls, value) -> "ColumnConfig":
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls(
                key=str(value["key"]),
                type=value.get("type", ColumnType.TEXT),
                options=tuple(value.get("options") or ()),
            )
        raise TableModelError(f"Cannot read column config from {value!r}")


@dataclass(frozen=True)
class Row:
    id: str
    values: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def get(self, key: str, default=None):
        return self.values.get(key, default)

    def __contains__(self, key) -> bool:
        return key in self.values

    def with_values(self, values: Mapping[str, Any]) -> "Row":
        return Row(id=self.id, values=values)

    def to_dict(self, id_key: str = "id") -> Dict[str, Any]:
        if id_key in self.values:
            raise TableModelError(f"Row '{self.id}' has a cell under id key '{id_key}'")
        return {id_key: self.id, **self.values}


@dataclass(frozen=True)
class TableModel:
    columns: Tuple[ColumnConfig, ...] = ()
    rows: Tuple[Row, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "columns", tuple(self.columns))
        object.__setattr__(self, "rows", tuple(self.rows))
        keys = [c.key for c in self.columns]
        if len(set(keys)) != len(keys):
            raise TableModelError("Column keys must be unique")
        ids = [r.id for r in self.rows]
        if len(set(ids)) != len(ids):
            raise TableModelError("Row ids must be unique")

    # ---------- construction ----------
    @classmethod
    def from_records(
        cls,
        columns: Iterable[Any],
        records: Iterable[Mapping[str, Any]] = (),
        id_key: str = "id",
    ) -> "TableModel":
        """Build a model from column configs and plain dict records.

        A record's ``id_key`` entry becomes the row id (one is generated
        when missing). Columns a record does not mention are default-filled.
        A column may not be named ``id_key``; pick another ``id_key`` when
        the table has an "id" column.
        """
        cols = tuple(ColumnConfig.coerce(c) for c in columns)
        if any(c.key == id_key for c in cols):
            raise TableModelError(f"Column '{id_key}' clashes with the row id key")
        rows: List[Row] = []
        for record in records:
            values = dict(record)
            row_id = values.pop(id_key, None)
            row_id = new_row_id() if row_id in (None, "") else str(row_id)
            for col in cols:
                if col.key not in values:
                    values[col.key] = col.default_value()
            rows.append(Row(id=row_id, values=values))
        return cls(columns=cols, rows=tuple(rows))

    def replace(self, **changes) -> "TableModel":
        return replace(self, **changes)

    # ---------- columns ----------
    @property
    def column_keys(self) -> List[str]:
        return [c.key for c in self.columns]

    def has_column(self, key: str) -> bool:
        return self.column_index(key) is not None

    def column_index(self, key: str) -> Optional[int]:
        for idx, col in enumerate(self.columns):
            if col.key == key:
                return idx
        return None

    def get_column(self, key: str) -> Optional[ColumnConfig]:
        idx = self.column_index(key)
        return None if idx is None else self.columns[idx]

    # ---------- rows ----------
    @property
    def row_ids(self) -> List[str]:
        return [r.id for r in self.rows]

    def get_row(self, row_id: str) -> Optional[Row]:
        for row in self.rows:
            if row.id == row_id:
                return row
        return None

    def column_values(self, key: str) -> List[Any]:
        return [row.get(key) for row in self.rows]

    def to_records(self, id_key: str = "id") -> List[Dict[str, Any]]:
        """Plain dicts with the row id under ``id_key``.

        Raises TableModelError when a row holds a cell under ``id_key``,
        since the id would be lost on the way back through ``from_records``.
        """
        return [row.to_dict(id_key) for row in self.rows]

    def to_frame(self, keys: Optional[Iterable[str]] = None) -> pd.DataFrame:
        """DataFrame view indexed by row id, one column per model column.

        Values are copied as stored (object dtype); orphaned row entries
        are not included.
        """
        keys = self.column_keys if keys is None else list(keys)
        data = {key: [row.get(key) for row in self.rows] for key in keys}
        return pd.DataFrame(
            data,
            index=pd.Index(self.row_ids, name="id", dtype="object"),
            columns=keys,
            dtype="object",
        )

    def __len__(self) -> int:
        return len(self.rows)
