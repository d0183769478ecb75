from column_types import ColumnType
from table_editor import TableEditor
from table_model import ColumnConfig


class DefaultTableInitializer:
    def columns(self) -> list[ColumnConfig]:
        return [
            ColumnConfig("status", ColumnType.TEXT),
            ColumnConfig("email", ColumnType.EMAIL),
            ColumnConfig("amount", ColumnType.CURRENCY),
        ]

    def rows(self) -> list[dict]:
        return [
            {
                "id": "728ed52f",
                "amount": 100,
                "status": "pending",
                "email": "m@example.com",
            }
        ]

    def create(self, set_status_cb=None, config=None) -> TableEditor:
        return TableEditor(self.columns(), self.rows(), set_status_cb=set_status_cb, config=config)
