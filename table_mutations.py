"""Structural edits on a ``TableModel``.

Every function takes the current snapshot and returns a ``MutationResult``.
On success ``result.model`` is a new consistent snapshot; on a refused edit
it is the unchanged input model and ``result.message`` says why.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from column_types import ColumnType, default_value
from table_model import ColumnConfig, Row, TableModel, new_row_id

logger = logging.getLogger(__name__)

SIDES = ("left", "right")


@dataclass(frozen=True)
class MutationResult:
    ok: bool
    model: TableModel
    message: str = ""
    # column key or row id the edit produced or touched
    target: Optional[str] = None

    def __bool__(self) -> bool:
        return self.ok


def _applied(model: TableModel, message: str, target: Optional[str] = None) -> MutationResult:
    logger.debug(message)
    return MutationResult(True, model, message, target)


def _refused(model: TableModel, message: str) -> MutationResult:
    logger.info("Edit refused: %s", message)
    return MutationResult(False, model, message)


def _fill_rows(rows: Iterable[Row], key: str, value_for) -> tuple:
    out = []
    for row in rows:
        values = dict(row.values)
        values[key] = value_for(row)
        out.append(row.with_values(values))
    return tuple(out)


def unique_copy_name(model: TableModel, source_key: str) -> str:
    name = f"{source_key} (copy)"
    n = 2
    while model.has_column(name):
        name = f"{source_key} (copy {n})"
        n += 1
    return name


def _is_copy_of(key: str, source_key: str) -> bool:
    return re.fullmatch(re.escape(source_key) + r" \(copy(?: \d+)?\)", key) is not None


def unique_type_name(model: TableModel, column_type) -> str:
    base = ColumnType.parse(column_type).label
    name = base
    n = 2
    while model.has_column(name):
        name = f"{base} {n}"
        n += 1
    return name


# ----- column operations -----
def rename_column(model: TableModel, old_key: str, new_key: str, new_type, new_options=None) -> MutationResult:
    idx = model.column_index(old_key)
    if idx is None:
        return _refused(model, f"Column '{old_key}' not found")
    name = (new_key or "").strip()
    if not name:
        return _refused(model, "Name required")
    if name != old_key and model.has_column(name):
        return _refused(model, "Column already exists")

    old = model.columns[idx]
    options = old.options if new_options is None else tuple(new_options)
    updated = ColumnConfig(key=name, type=new_type, options=options)
    columns = list(model.columns)
    columns[idx] = updated

    rows = model.rows
    if name != old_key:
        moved = []
        for row in rows:
            value = row.get(old_key) if old_key in row else updated.default_value()
            values: Dict[str, Any] = {}
            for k, v in row.values.items():
                if k == name:
                    continue
                if k == old_key:
                    values[name] = value
                else:
                    values[k] = v
            if name not in values:
                values[name] = value
            moved.append(row.with_values(values))
        rows = tuple(moved)
        message = f"Renamed column '{old_key}' to '{name}'"
    else:
        message = f"Updated column '{name}'"

    return _applied(model.replace(columns=tuple(columns), rows=rows), message, name)


def insert_column(model: TableModel, anchor_key: Optional[str], side: str, name: str, column_type, options=None) -> MutationResult:
    name = (name or "").strip()
    if not name:
        return _refused(model, "Name required")
    if model.has_column(name):
        return _refused(model, "Column already exists")
    if side not in SIDES:
        return _refused(model, f"Unknown side '{side}'")

    column = ColumnConfig(key=name, type=column_type, options=tuple(options or ()))
    anchor = model.column_index(anchor_key) if anchor_key else None
    if anchor is None:
        loc = len(model.columns)
    else:
        loc = anchor if side == "left" else anchor + 1

    columns = list(model.columns)
    columns.insert(loc, column)
    fill = column.default_value()
    rows = _fill_rows(model.rows, name, lambda _row: fill)
    return _applied(
        model.replace(columns=tuple(columns), rows=rows),
        f"Inserted column '{name}'",
        name,
    )


def duplicate_column(model: TableModel, source_key: str) -> MutationResult:
    """Copy a column, its type, options and cell values, under a "(copy)" name.

    The copy lands right of the source, past any directly adjacent columns
    whose names read as copies of it ("<source> (copy)", "<source> (copy N)").
    That check is by name only, so a hand-named "amount (copy 7)" sitting
    next to "amount" counts as an earlier copy.
    """
    idx = model.column_index(source_key)
    if idx is None:
        return _refused(model, f"Column '{source_key}' not found")

    source = model.columns[idx]
    name = unique_copy_name(model, source_key)
    copy = ColumnConfig(key=name, type=source.type, options=source.options)
    columns = list(model.columns)
    # land after copies already sitting to the right of the source
    loc = idx + 1
    while loc < len(columns) and _is_copy_of(columns[loc].key, source_key):
        loc += 1
    columns.insert(loc, copy)
    fallback = copy.default_value()
    rows = _fill_rows(
        model.rows,
        name,
        lambda row: row.get(source_key) if source_key in row else fallback,
    )
    return _applied(
        model.replace(columns=tuple(columns), rows=rows),
        f"Duplicated column '{source_key}' as '{name}'",
        name,
    )


def quick_add_column(model: TableModel, column_type) -> MutationResult:
    column_type = ColumnType.parse(column_type)
    name = unique_type_name(model, column_type)
    column = ColumnConfig(key=name, type=column_type)
    fill = default_value(column_type)
    rows = _fill_rows(model.rows, name, lambda _row: fill)
    return _applied(
        model.replace(columns=model.columns + (column,), rows=rows),
        f"Added column '{name}'",
        name,
    )


def delete_column(model: TableModel, key: str, purge: bool = False) -> MutationResult:
    """Remove a column config.

    Row entries under ``key`` stay behind unless ``purge`` is set.
    """
    if not model.has_column(key):
        return _refused(model, f"Column '{key}' not found")
    columns = tuple(c for c in model.columns if c.key != key)
    rows = model.rows
    if purge:
        rows = tuple(
            row.with_values({k: v for k, v in row.values.items() if k != key})
            for row in rows
        )
    return _applied(model.replace(columns=columns, rows=rows), f"Deleted column '{key}'", key)


# ----- row operations -----
def add_row(model: TableModel, row_id: Optional[str] = None) -> MutationResult:
    existing = set(model.row_ids)
    if row_id is not None and row_id in existing:
        return _refused(model, f"Row '{row_id}' already exists")
    while row_id is None or row_id in existing:
        row_id = new_row_id()
    row = Row(id=row_id, values={c.key: c.default_value() for c in model.columns})
    return _applied(model.replace(rows=model.rows + (row,)), "Added row", row_id)


def delete_rows(model: TableModel, ids: Iterable[str]) -> MutationResult:
    targets = set(ids or ())
    if not targets:
        return _refused(model, "No rows selected")
    rows = tuple(r for r in model.rows if r.id not in targets)
    deleted = len(model.rows) - len(rows)
    if deleted == 0:
        return _refused(model, "Row not found")
    return _applied(
        model.replace(rows=rows),
        f"Deleted {deleted} row{'s' if deleted != 1 else ''}",
    )


def set_cell_value(model: TableModel, row_id: str, key: str, value) -> MutationResult:
    """Overwrite one cell. No type check and no column existence check."""
    rows = list(model.rows)
    for idx, row in enumerate(rows):
        if row.id == row_id:
            values = dict(row.values)
            values[key] = value
            rows[idx] = row.with_values(values)
            return _applied(model.replace(rows=tuple(rows)), f"Set '{key}' on row '{row_id}'", row_id)
    return _refused(model, f"Row '{row_id}' not found")
