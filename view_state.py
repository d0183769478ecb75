from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Set

from aggregation import DEFAULT_AGGREGATE_MODE, AggregateMode
from sort_engine import SortDescriptor, toggle_sort


@dataclass
class ViewState:
    """Transient per-view state. None of it touches table data."""
    sort: Optional[SortDescriptor] = None
    hidden_columns: Set[str] = field(default_factory=set)
    aggregate_modes: Dict[str, AggregateMode] = field(default_factory=dict)
    selected_rows: Set[str] = field(default_factory=set)
    default_aggregate_mode: AggregateMode = DEFAULT_AGGREGATE_MODE

    # ----- sort -----
    def toggle_sort(self, key: str) -> Optional[SortDescriptor]:
        self.sort = toggle_sort(self.sort, key)
        return self.sort

    # ----- hiding -----
    def hide_column(self, key: str):
        self.hidden_columns.add(key)
        self.forget_column(key)

    def show_column(self, key: str):
        self.hidden_columns.discard(key)

    def is_hidden(self, key: str) -> bool:
        return key in self.hidden_columns

    # ----- aggregates -----
    def aggregate_mode(self, key: str) -> AggregateMode:
        return self.aggregate_modes.get(key, self.default_aggregate_mode)

    def set_aggregate_mode(self, key: str, mode) -> AggregateMode:
        mode = AggregateMode.parse(mode)
        self.aggregate_modes[key] = mode
        return mode

    def reset_aggregate_mode(self, key: str):
        self.aggregate_modes.pop(key, None)

    # ----- selection -----
    def select_rows(self, ids: Iterable[str], selected: bool = True):
        if selected:
            self.selected_rows.update(ids)
        else:
            self.selected_rows.difference_update(ids)

    def clear_selection(self):
        self.selected_rows = set()

    # ----- structural edit hooks -----
    def forget_column(self, key: str):
        """Drop sort and aggregate state that refers to ``key``."""
        if self.sort is not None and self.sort.key == key:
            self.sort = None
        self.aggregate_modes.pop(key, None)

    def rename_column(self, old_key: str, new_key: str):
        if old_key == new_key:
            return
        if self.sort is not None and self.sort.key == old_key:
            self.sort = SortDescriptor(new_key, self.sort.direction)
        if old_key in self.hidden_columns:
            self.hidden_columns.discard(old_key)
            self.hidden_columns.add(new_key)
        if old_key in self.aggregate_modes:
            self.aggregate_modes[new_key] = self.aggregate_modes.pop(old_key)

    def forget_rows(self, ids: Iterable[str]):
        self.selected_rows.difference_update(ids)
