from column_registry import ColumnDefinition, ColumnRegistry
from default_table_initializer import DefaultTableInitializer
from edit_buffer import EditBuffer
from persistence_gateway import THEMES, Snapshot
from record import Record
from row_store import RowStore


class TableState:
    def __init__(self, rows: RowStore, columns: ColumnRegistry, theme: str = "light"):
        self.rows = rows
        self.columns = columns
        self.edits = EditBuffer(rows)
        self._theme = "light"
        self.theme = theme

    @classmethod
    def default(cls) -> "TableState":
        init = DefaultTableInitializer()
        return cls(RowStore(init.rows()), ColumnRegistry(init.columns()))

    @property
    def theme(self) -> str:
        return self._theme

    @theme.setter
    def theme(self, value: str):
        if value not in THEMES:
            raise ValueError(f"Theme must be one of {'/'.join(THEMES)}")
        self._theme = value

    def to_snapshot(self) -> Snapshot:
        return Snapshot(
            rows=[r.to_dict() for r in self.rows.list()],
            columns=[c.to_dict() for c in self.columns.list()],
            edited_rows=self.edits.snapshot(),
            theme=self.theme,
        )

    @classmethod
    def from_snapshot(cls, snap: Snapshot) -> "TableState":
        """Build state from a snapshot. Raises ValueError on malformed content."""
        rows = RowStore([Record.from_dict(r) for r in snap.rows])
        columns = ColumnRegistry([ColumnDefinition.from_dict(c) for c in snap.columns])
        state = cls(rows, columns, snap.theme)
        state.edits.restore(snap.edited_rows)
        state.edits.prune(rows.ids())
        return state
