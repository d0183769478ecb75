import pytest

from sort_engine import (
    SortDescriptor,
    SortDirection,
    compare_values,
    sorted_row_ids,
    toggle_sort,
)
from table_model import TableModel


def _model():
    return TableModel.from_records(
        [{"key": "amount", "type": "currency"}, {"key": "status", "type": "text"}],
        [
            {"id": "a", "amount": 10, "status": "paid"},
            {"id": "b", "amount": "9", "status": "open"},
            {"id": "c", "amount": 100, "status": "paid"},
            {"id": "d", "amount": "", "status": "void"},
        ],
    )


def test_toggle_sort_cycles_through_three_states():
    first = toggle_sort(None, "amount")
    assert first == SortDescriptor("amount", SortDirection.ASCENDING)
    second = toggle_sort(first, "amount")
    assert second == SortDescriptor("amount", SortDirection.DESCENDING)
    assert toggle_sort(second, "amount") is None


def test_toggle_sort_on_other_column_restarts_ascending():
    current = SortDescriptor("status", SortDirection.DESCENDING)
    assert toggle_sort(current, "amount") == SortDescriptor("amount", SortDirection.ASCENDING)


@pytest.mark.parametrize(
    "a, b, expected",
    [
        (9, "10", -1),
        ("10", 9, 1),
        ("2.5", 2.5, 0),
        ("apple", "banana", -1),
        ("10", "apple", -1),
        ("", "a", -1),
        (None, "", 0),
    ],
)
def test_compare_values(a, b, expected):
    assert compare_values(a, b) == expected


def test_numeric_sort_ascending_and_descending():
    model = _model()
    assert sorted_row_ids(model, SortDescriptor("amount")) == ["d", "b", "a", "c"]
    assert sorted_row_ids(
        model, SortDescriptor("amount", SortDirection.DESCENDING)
    ) == ["c", "a", "b", "d"]


def test_sort_is_stable_for_ties():
    model = _model()
    assert sorted_row_ids(model, SortDescriptor("status")) == ["b", "a", "c", "d"]
    assert sorted_row_ids(
        model, SortDescriptor("status", SortDirection.DESCENDING)
    ) == ["d", "a", "c", "b"]


def test_no_descriptor_keeps_model_order_and_model_untouched():
    model = _model()
    assert sorted_row_ids(model, None) == ["a", "b", "c", "d"]
    sorted_row_ids(model, SortDescriptor("amount"))
    assert model.row_ids == ["a", "b", "c", "d"]
