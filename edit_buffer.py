from typing import Any, Dict, Iterable, List

from app_logging import get_logger
from errors import ValidationFailure
from field_coercion import NUMERIC_FIELDS, coerce_field_value, is_finite_number
from row_store import RowStore

logger = get_logger(__name__)


class EditBuffer:
    """Pending per-row edits, applied to the row store only by commit_all.

    A row id is present iff that row is open for editing. Commit and
    discard always act on every open row at once.
    """

    def __init__(self, rows: RowStore):
        self.rows = rows
        self._pending: Dict[str, Dict[str, Any]] = {}

    def __len__(self) -> int:
        return len(self._pending)

    def is_open(self, record_id: str) -> bool:
        return record_id in self._pending

    def open_ids(self) -> List[str]:
        return list(self._pending.keys())

    def pending_value(self, record_id: str, key: str, default=None):
        entry = self._pending.get(record_id)
        if entry is None:
            return default
        return entry.get(key, default)

    # ---------- editing ----------
    def begin_edit(self, record_id: str) -> None:
        if record_id in self._pending:
            return
        record = self.rows.get(record_id)
        if record is None:
            raise KeyError(f"No row '{record_id}'")
        self._pending[record_id] = record.fields()

    def set_field(self, record_id: str, key: str, value) -> None:
        entry = self._pending.get(record_id)
        if entry is None:
            raise KeyError(f"Row '{record_id}' is not open for editing")
        entry[key] = coerce_field_value(key, value)

    def discard_all(self) -> None:
        self._pending = {}

    def invalid_rows(self) -> List[str]:
        bad = []
        for record_id, entry in self._pending.items():
            for key in NUMERIC_FIELDS:
                if not is_finite_number(entry.get(key)):
                    bad.append(record_id)
                    break
        return bad

    def commit_all(self) -> List[str]:
        bad = self.invalid_rows()
        if bad:
            raise ValidationFailure(bad)
        committed = []
        for record_id, entry in self._pending.items():
            if self.rows.update(record_id, entry):
                committed.append(record_id)
        self._pending = {}
        logger.info("Committed edits for %d row(s)", len(committed))
        return committed

    # ---------- persistence helpers ----------
    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        return {rid: dict(entry) for rid, entry in self._pending.items()}

    def restore(self, pending: Dict[str, Dict[str, Any]]) -> None:
        restored = {}
        for record_id, entry in (pending or {}).items():
            if isinstance(entry, dict):
                restored[str(record_id)] = dict(entry)
        self._pending = restored

    def prune(self, existing_ids: Iterable[str]) -> None:
        keep = set(existing_ids)
        self._pending = {rid: e for rid, e in self._pending.items() if rid in keep}
