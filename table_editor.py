import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

import pandas as pd

import table_mutations as tm
from aggregation import (
    AggregateMode,
    aggregate_column,
    format_aggregate,
    is_aggregatable,
)
from column_types import format_cell_value, normalize_cell_input
from sort_engine import SortDescriptor, sorted_rows
from table_model import ColumnConfig, Row, TableModel
from view_state import ViewState

logger = logging.getLogger(__name__)


class TableEditor:
    """Holds the current table snapshot plus view state for one renderer.

    Every edit goes through ``table_mutations`` and installs the returned
    snapshot only when the edit succeeded. Subscribers are called after
    each applied change.
    """

    def __init__(
        self,
        columns: Iterable[Any],
        rows: Iterable[Dict[str, Any]] = (),
        set_status_cb: Optional[Callable[[str, int], None]] = None,
        config: Optional[dict] = None,
        id_key: str = "id",
    ):
        cfg = config or {}
        self._model = TableModel.from_records(columns, rows, id_key=id_key)
        self._set_status = set_status_cb or (lambda *_: None)
        self._subscribers: List[Callable[["TableEditor"], None]] = []
        self.purge_deleted_column_data = bool(cfg.get("PURGE_DELETED_COLUMN_DATA", False))
        self.view = ViewState(
            default_aggregate_mode=AggregateMode.parse(cfg.get("DEFAULT_AGGREGATE_MODE", "sum"))
        )

    # ---------- read accessors ----------
    @property
    def model(self) -> TableModel:
        return self._model

    @property
    def columns(self) -> tuple:
        return self._model.columns

    @property
    def rows(self) -> tuple:
        return self._model.rows

    @property
    def sort(self) -> Optional[SortDescriptor]:
        return self.view.sort

    @property
    def hidden_columns(self) -> frozenset:
        return frozenset(self.view.hidden_columns)

    @property
    def selected_rows(self) -> frozenset:
        return frozenset(self.view.selected_rows)

    def visible_columns(self) -> List[ColumnConfig]:
        return [c for c in self._model.columns if not self.view.is_hidden(c.key)]

    def display_rows(self) -> List[Row]:
        return sorted_rows(self._model, self.view.sort)

    def aggregate_mode(self, key: str) -> AggregateMode:
        return self.view.aggregate_mode(key)

    # ---------- subscription ----------
    def subscribe(self, callback: Callable[["TableEditor"], None]) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self):
        for callback in list(self._subscribers):
            callback(self)

    def _apply(self, result: tm.MutationResult) -> tm.MutationResult:
        if not result.ok:
            self._set_status(result.message, 3)
            return result
        self._model = result.model
        self._set_status(result.message, 2)
        self._notify()
        return result

    # ---------- column operations ----------
    def rename_column(self, old_key: str, new_key: str, new_type, new_options=None) -> tm.MutationResult:
        result = tm.rename_column(self._model, old_key, new_key, new_type, new_options)
        if result.ok:
            self.view.rename_column(old_key, result.target)
        return self._apply(result)

    def insert_column(self, anchor_key: Optional[str], side: str, name: str, column_type, options=None) -> tm.MutationResult:
        return self._apply(tm.insert_column(self._model, anchor_key, side, name, column_type, options))

    def insert_column_left(self, anchor_key: str, name: str, column_type, options=None) -> tm.MutationResult:
        return self.insert_column(anchor_key, "left", name, column_type, options)

    def insert_column_right(self, anchor_key: str, name: str, column_type, options=None) -> tm.MutationResult:
        return self.insert_column(anchor_key, "right", name, column_type, options)

    def duplicate_column(self, source_key: str) -> tm.MutationResult:
        return self._apply(tm.duplicate_column(self._model, source_key))

    def quick_add_column(self, column_type) -> tm.MutationResult:
        return self._apply(tm.quick_add_column(self._model, column_type))

    def delete_column(self, key: str) -> tm.MutationResult:
        result = tm.delete_column(self._model, key, purge=self.purge_deleted_column_data)
        if result.ok:
            self.view.forget_column(key)
            self.view.show_column(key)
        return self._apply(result)

    def hide_column(self, key: str) -> bool:
        if not self._model.has_column(key):
            self._set_status(f"Column '{key}' not found", 3)
            logger.info("Edit refused: column '%s' not found", key)
            return False
        self.view.hide_column(key)
        self._set_status(f"Hid column '{key}'", 2)
        self._notify()
        return True

    def show_column(self, key: str) -> bool:
        if key not in self.view.hidden_columns:
            return False
        self.view.show_column(key)
        self._set_status(f"Showing column '{key}'", 2)
        self._notify()
        return True

    # ---------- row operations ----------
    def add_row(self) -> tm.MutationResult:
        return self._apply(tm.add_row(self._model))

    def delete_rows(self, ids: Iterable[str]) -> tm.MutationResult:
        ids = set(ids or ())
        result = tm.delete_rows(self._model, ids)
        if result.ok:
            self.view.forget_rows(ids)
        return self._apply(result)

    def delete_selected_rows(self) -> tm.MutationResult:
        return self.delete_rows(self.view.selected_rows)

    def set_cell_value(self, row_id: str, key: str, value) -> tm.MutationResult:
        return self._apply(tm.set_cell_value(self._model, row_id, key, value))

    def commit_cell_input(self, row_id: str, key: str, text) -> tm.MutationResult:
        """Store editor text for a cell the way its column type expects."""
        column = self._model.get_column(key)
        if column is None:
            return self._apply(tm.MutationResult(False, self._model, f"Column '{key}' not found"))
        try:
            value = normalize_cell_input(text, column.type)
        except ValueError:
            return self._apply(tm.MutationResult(False, self._model, f"Invalid value for column '{key}'"))
        return self.set_cell_value(row_id, key, value)

    # ---------- selection ----------
    def select_rows(self, ids: Iterable[str], selected: bool = True):
        known = set(self._model.row_ids)
        self.view.select_rows([i for i in ids if i in known], selected)
        self._notify()

    def select_all(self, selected: bool = True):
        self.select_rows(self._model.row_ids, selected)

    # ---------- sort / aggregate ----------
    def toggle_sort(self, key: str) -> Optional[SortDescriptor]:
        descriptor = self.view.toggle_sort(key)
        if descriptor is None:
            self._set_status("Sort cleared", 2)
        else:
            self._set_status(f"Sorted by '{key}' ({descriptor.direction.value})", 2)
        self._notify()
        return descriptor

    def set_aggregate_mode(self, key: str, mode) -> AggregateMode:
        mode = self.view.set_aggregate_mode(key, mode)
        self._notify()
        return mode

    def aggregate(self, key: str) -> Optional[float]:
        return aggregate_column(self._model, key, self.view.aggregate_mode(key))

    def footer(self) -> Dict[str, str]:
        """Formatted aggregate per visible number/currency column."""
        out = {}
        for column in self.visible_columns():
            if is_aggregatable(self._model, column.key):
                out[column.key] = format_aggregate(self.aggregate(column.key), column.type)
        return out

    # ---------- formatting ----------
    @staticmethod
    def format(value, column_type) -> str:
        return format_cell_value(value, column_type)

    def display_value(self, row: Row, key: str) -> str:
        column = self._model.get_column(key)
        if column is None:
            return ""
        return format_cell_value(row.get(key), column.type)

    def to_frame(self) -> pd.DataFrame:
        """Visible columns in display order, as a DataFrame."""
        keys = [c.key for c in self.visible_columns()]
        order = [row.id for row in self.display_rows()]
        return self._model.to_frame(keys).loc[order]
