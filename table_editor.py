from dataclasses import dataclass, field
from typing import Dict, List, Optional

import csv_codec
from app_logging import get_logger
from app_state import TableState
from errors import ParseError
from persistence_gateway import PersistenceGateway
from record import Record
from view_pipeline import ViewPipeline, ViewProjection, ViewState

logger = get_logger(__name__)


@dataclass
class ImportReport:
    count: int
    errors: List[ParseError] = field(default_factory=list)


class TableEditor:
    """Entry point for user actions on the table.

    Every action that changes committed state (rows, columns, theme,
    commit_all, import) is followed by a save through the gateway.
    Entering edit mode, field edits and discard_all are not saved.
    """

    def __init__(self, gateway: PersistenceGateway, page_size: int = 10):
        self.gateway = gateway
        self.page_size = page_size
        self.state: Optional[TableState] = None
        self.view: Optional[ViewPipeline] = None

    # ---------- lifecycle ----------
    def open(self) -> TableState:
        snap = self.gateway.load()
        state = None
        if snap is not None:
            try:
                state = TableState.from_snapshot(snap)
            except (ValueError, TypeError) as exc:
                logger.warning("Snapshot could not be restored, using defaults: %s", exc)
        if state is None:
            state = TableState.default()
        self.state = state
        self.view = ViewPipeline(state, ViewState(page_size=self.page_size))
        return state

    def close(self) -> None:
        if self.state is None:
            return
        self.persist()
        self.state = None
        self.view = None

    @property
    def is_open(self) -> bool:
        return self.state is not None

    def _require_state(self) -> TableState:
        if self.state is None:
            raise RuntimeError("Table editor is not open")
        return self.state

    def persist(self) -> bool:
        return self.gateway.save(self._require_state().to_snapshot())

    # ---------- rows ----------
    def add_row(self, fields: Optional[Dict] = None) -> Record:
        record = self._require_state().rows.add(fields)
        self.persist()
        return record

    def update_row(self, record_id: str, partial: Dict) -> bool:
        updated = self._require_state().rows.update(record_id, partial)
        if updated:
            self.persist()
        return updated

    def delete_row(self, record_id: str) -> bool:
        state = self._require_state()
        removed = state.rows.remove(record_id)
        if removed:
            state.edits.prune(state.rows.ids())
            self.persist()
        return removed

    # ---------- editing ----------
    def begin_edit(self, record_id: str) -> None:
        self._require_state().edits.begin_edit(record_id)

    def set_field(self, record_id: str, key: str, value) -> None:
        self._require_state().edits.set_field(record_id, key, value)

    def commit_all(self) -> List[str]:
        committed = self._require_state().edits.commit_all()
        self.persist()
        return committed

    def discard_all(self) -> None:
        self._require_state().edits.discard_all()

    # ---------- columns ----------
    def add_column(self, label: Optional[str] = None):
        col = self._require_state().columns.add(label)
        self.persist()
        return col

    def set_column_label(self, key: str, label: str) -> None:
        self._require_state().columns.set_label(key, label)
        self.persist()

    def set_column_visible(self, key: str, visible: bool) -> None:
        self._require_state().columns.set_visible(key, visible)
        self.persist()

    def move_column(self, from_index: int, to_index: int) -> bool:
        moved = self._require_state().columns.reorder(from_index, to_index)
        if moved:
            self.persist()
        return moved

    # ---------- theme ----------
    def set_theme(self, theme: str) -> None:
        self._require_state().theme = theme
        self.persist()

    def toggle_theme(self) -> str:
        state = self._require_state()
        self.set_theme("dark" if state.theme == "light" else "light")
        return state.theme

    # ---------- csv ----------
    def import_csv(self, path: str) -> ImportReport:
        state = self._require_state()
        decoded, errors = csv_codec.read_file(path)
        fields, field_errors = csv_codec.to_import_fields(decoded)
        state.rows.replace_all(fields)
        state.edits.prune(state.rows.ids())
        self.persist()
        logger.info("Imported %d rows from %s", len(fields), path)
        return ImportReport(count=len(fields), errors=errors + field_errors)

    def export_csv(self, path: Optional[str] = None) -> str:
        state = self._require_state()
        text = csv_codec.encode(state.rows.list(), state.columns.visible_keys())
        if path:
            csv_codec.write_file(path, text)
        return text

    # ---------- view ----------
    def project(self) -> ViewProjection:
        self._require_state()
        return self.view.project()
