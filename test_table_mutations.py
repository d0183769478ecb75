import unittest

import table_mutations as tm
from column_types import ColumnType
from table_model import ColumnConfig, Row, TableModel


def _model():
    return TableModel.from_records(
        [
            {"key": "status", "type": "text"},
            {"key": "email", "type": "email"},
            {"key": "amount", "type": "currency"},
        ],
        [
            {"id": "r1", "status": "pending", "email": "m@example.com", "amount": 100},
            {"id": "r2", "status": "paid", "email": "k@example.com", "amount": 250},
        ],
    )


def _assert_consistent(test, model):
    keys = model.column_keys
    test.assertEqual(len(keys), len(set(keys)))
    test.assertEqual(len(model.row_ids), len(set(model.row_ids)))
    for row in model.rows:
        for key in keys:
            test.assertIn(key, row)


class RenameColumnTests(unittest.TestCase):
    def test_rename_moves_values(self):
        result = tm.rename_column(_model(), "status", "state", "text")
        self.assertTrue(result.ok)
        model = result.model
        self.assertEqual(model.column_keys, ["state", "email", "amount"])
        self.assertEqual([r.get("state") for r in model.rows], ["pending", "paid"])
        for row in model.rows:
            self.assertNotIn("status", row)
        _assert_consistent(self, model)

    def test_rename_trims_name(self):
        result = tm.rename_column(_model(), "status", "  state  ", "text")
        self.assertEqual(result.model.column_keys[0], "state")

    def test_rename_to_existing_key_is_refused(self):
        model = _model()
        result = tm.rename_column(model, "status", "email", "text")
        self.assertFalse(result.ok)
        self.assertIs(result.model, model)
        self.assertEqual(result.message, "Column already exists")

    def test_rename_empty_name_is_refused(self):
        model = _model()
        result = tm.rename_column(model, "status", "   ", "text")
        self.assertFalse(result)
        self.assertEqual(result.message, "Name required")
        self.assertIs(result.model, model)

    def test_rename_unknown_column_is_refused(self):
        self.assertFalse(tm.rename_column(_model(), "nope", "x", "text").ok)

    def test_type_change_keeps_raw_values(self):
        result = tm.rename_column(_model(), "amount", "amount", "phone")
        self.assertTrue(result.ok)
        self.assertEqual(result.model.get_column("amount").type, ColumnType.PHONE)
        self.assertEqual([r.get("amount") for r in result.model.rows], [100, 250])

    def test_rename_and_retype_to_select_with_options(self):
        result = tm.rename_column(_model(), "status", "stage", "select", ["Open", "Closed"])
        column = result.model.get_column("stage")
        self.assertEqual([o.label for o in column.options], ["Open", "Closed"])
        self.assertEqual(result.model.rows[0].get("stage"), "pending")

    def test_rename_over_orphaned_entry_uses_moved_value(self):
        model = tm.delete_column(_model(), "email").model
        result = tm.rename_column(model, "status", "email", "text")
        self.assertTrue(result.ok)
        self.assertEqual(result.model.rows[0].get("email"), "pending")


class InsertColumnTests(unittest.TestCase):
    def test_insert_right_of_anchor(self):
        result = tm.insert_column(_model(), "email", "right", "Phone", "phone")
        self.assertEqual(result.model.column_keys, ["status", "email", "Phone", "amount"])
        self.assertEqual([r.get("Phone") for r in result.model.rows], ["", ""])
        _assert_consistent(self, result.model)

    def test_insert_left_of_anchor(self):
        result = tm.insert_column(_model(), "status", "left", "Done", "checkbox")
        self.assertEqual(result.model.column_keys, ["Done", "status", "email", "amount"])
        self.assertEqual([r.get("Done") for r in result.model.rows], [False, False])

    def test_missing_anchor_appends(self):
        for anchor in (None, "", "ghost"):
            result = tm.insert_column(_model(), anchor, "left", "Notes", "long_text")
            self.assertEqual(result.model.column_keys[-1], "Notes")

    def test_collision_is_refused(self):
        model = _model()
        result = tm.insert_column(model, "email", "right", " amount ", "number")
        self.assertFalse(result.ok)
        self.assertIs(result.model, model)

    def test_empty_name_is_refused(self):
        self.assertFalse(tm.insert_column(_model(), "email", "right", "", "text").ok)


class DuplicateColumnTests(unittest.TestCase):
    def test_duplicate_twice(self):
        model = tm.duplicate_column(_model(), "amount").model
        model = tm.duplicate_column(model, "amount").model
        self.assertEqual(
            model.column_keys,
            ["status", "email", "amount", "amount (copy)", "amount (copy 2)"],
        )
        self.assertEqual(model.get_column("amount (copy 2)").type, ColumnType.CURRENCY)
        self.assertEqual([r.get("amount (copy)") for r in model.rows], [100, 250])
        _assert_consistent(self, model)

    def test_duplicate_of_copy_names_from_copy(self):
        model = tm.duplicate_column(_model(), "status").model
        result = tm.duplicate_column(model, "status (copy)")
        self.assertEqual(result.target, "status (copy) (copy)")

    def test_duplicate_falls_back_to_default_for_missing_values(self):
        model = TableModel(
            columns=(ColumnConfig("flag", "checkbox"),),
            rows=(Row("r1", {}), Row("r2", {"flag": True})),
        )
        result = tm.duplicate_column(model, "flag")
        self.assertEqual([r.get("flag (copy)") for r in result.model.rows], [False, True])

    def test_single_duplicate_sits_right_of_source(self):
        model = tm.duplicate_column(_model(), "status").model
        self.assertEqual(model.column_keys, ["status", "status (copy)", "email", "amount"])

    def test_adjacent_copy_named_column_is_skipped_by_name(self):
        model = tm.insert_column(_model(), "amount", "right", "amount (copy 7)", "text").model
        model = tm.insert_column(model, "amount (copy 7)", "right", "notes", "text").model
        result = tm.duplicate_column(model, "amount")
        self.assertEqual(
            result.model.column_keys,
            ["status", "email", "amount", "amount (copy 7)", "amount (copy)", "notes"],
        )

    def test_copy_named_column_not_adjacent_is_left_alone(self):
        model = tm.insert_column(_model(), "status", "right", "amount (copy 7)", "text").model
        result = tm.duplicate_column(model, "amount")
        self.assertEqual(result.model.column_keys[-2:], ["amount", "amount (copy)"])

    def test_duplicate_unknown_is_refused(self):
        model = _model()
        result = tm.duplicate_column(model, "ghost")
        self.assertFalse(result.ok)
        self.assertIs(result.model, model)


class QuickAddColumnTests(unittest.TestCase):
    def test_quick_add_names_from_label(self):
        model = tm.quick_add_column(_model(), "text").model
        model = tm.quick_add_column(model, ColumnType.TEXT).model
        self.assertEqual(model.column_keys[-2:], ["Text", "Text 2"])
        _assert_consistent(self, model)

    def test_quick_add_phone_uses_display_label(self):
        result = tm.quick_add_column(_model(), "phone")
        self.assertEqual(result.target, "Phone number")
        self.assertEqual(result.model.rows[0].get("Phone number"), "")


class DeleteColumnTests(unittest.TestCase):
    def test_delete_keeps_orphaned_row_entries(self):
        result = tm.delete_column(_model(), "email")
        self.assertEqual(result.model.column_keys, ["status", "amount"])
        self.assertEqual(result.model.rows[0].get("email"), "m@example.com")

    def test_delete_with_purge_strips_row_entries(self):
        result = tm.delete_column(_model(), "email", purge=True)
        for row in result.model.rows:
            self.assertNotIn("email", row)

    def test_reinsert_after_delete_default_fills(self):
        model = tm.delete_column(_model(), "email").model
        model = tm.insert_column(model, "status", "right", "email", "email").model
        self.assertEqual([r.get("email") for r in model.rows], ["", ""])

    def test_delete_unknown_is_refused(self):
        self.assertFalse(tm.delete_column(_model(), "ghost").ok)


class RowOperationTests(unittest.TestCase):
    def test_add_row_default_fills(self):
        model = tm.insert_column(_model(), None, "right", "done", "checkbox").model
        result = tm.add_row(model)
        self.assertTrue(result.ok)
        row = result.model.get_row(result.target)
        self.assertEqual(dict(row.values), {"status": "", "email": "", "amount": "", "done": False})
        self.assertEqual(len(result.model), 3)
        _assert_consistent(self, result.model)

    def test_add_row_with_taken_id_is_refused(self):
        self.assertFalse(tm.add_row(_model(), row_id="r1").ok)

    def test_delete_rows(self):
        result = tm.delete_rows(_model(), {"r1"})
        self.assertEqual(result.model.row_ids, ["r2"])
        self.assertEqual(result.message, "Deleted 1 row")

    def test_delete_rows_with_no_match_is_refused(self):
        model = _model()
        self.assertFalse(tm.delete_rows(model, {"ghost"}).ok)
        self.assertFalse(tm.delete_rows(model, set()).ok)

    def test_set_cell_value_overwrites_without_type_check(self):
        result = tm.set_cell_value(_model(), "r2", "amount", "lots")
        self.assertEqual(result.model.get_row("r2").get("amount"), "lots")
        self.assertEqual(result.model.get_row("r1").get("amount"), 100)

    def test_set_cell_value_unknown_key_touches_one_row(self):
        result = tm.set_cell_value(_model(), "r1", "ghost", 1)
        self.assertEqual(result.model.get_row("r1").get("ghost"), 1)
        self.assertNotIn("ghost", result.model.get_row("r2"))
        self.assertNotIn("ghost", result.model.column_keys)

    def test_set_cell_value_unknown_row_is_refused(self):
        self.assertFalse(tm.set_cell_value(_model(), "ghost", "status", "x").ok)

    def test_input_snapshot_is_never_modified(self):
        model = _model()
        tm.set_cell_value(model, "r1", "status", "void")
        tm.rename_column(model, "status", "state", "text")
        tm.delete_rows(model, {"r1"})
        self.assertEqual(model.column_keys, ["status", "email", "amount"])
        self.assertEqual(model.get_row("r1").get("status"), "pending")


class MutationSequenceTests(unittest.TestCase):
    def test_invariants_hold_across_mixed_edits(self):
        model = _model()
        steps = [
            lambda m: tm.duplicate_column(m, "amount"),
            lambda m: tm.quick_add_column(m, "number"),
            lambda m: tm.rename_column(m, "amount (copy)", "fee", "number"),
            lambda m: tm.insert_column(m, "fee", "left", "fee", "text"),
            lambda m: tm.delete_column(m, "email"),
            lambda m: tm.add_row(m),
            lambda m: tm.insert_column(m, "status", "left", "email", "email"),
            lambda m: tm.delete_rows(m, {"r2"}),
            lambda m: tm.quick_add_column(m, "number"),
        ]
        for step in steps:
            model = step(model).model
            _assert_consistent(self, model)
        self.assertEqual(
            model.column_keys,
            ["email", "status", "amount", "fee", "Number", "Number 2"],
        )


if __name__ == "__main__":
    unittest.main()
