import json
import os
import tempfile
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from app_logging import get_logger
from errors import PersistenceFailure

logger = get_logger(__name__)

STORAGE_KEY = "ddt_state_v1"
THEMES = ("light", "dark")


@dataclass
class Snapshot:
    rows: List[dict] = field(default_factory=list)
    columns: List[dict] = field(default_factory=list)
    edited_rows: Dict[str, dict] = field(default_factory=dict)
    theme: str = "light"

    def to_json(self) -> str:
        return json.dumps(
            {
                "rows": self.rows,
                "columns": self.columns,
                "editedRows": self.edited_rows,
                "theme": self.theme,
            }
        )

    @classmethod
    def from_json(cls, text: str) -> "Snapshot":
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("Snapshot must be a JSON object")
        rows = data.get("rows", [])
        columns = data.get("columns", [])
        edited = data.get("editedRows", {})
        theme = data.get("theme", "light")
        if not isinstance(rows, list) or not isinstance(columns, list):
            raise ValueError("Snapshot rows and columns must be lists")
        if not isinstance(edited, dict):
            raise ValueError("Snapshot editedRows must be an object")
        if theme not in THEMES:
            theme = "light"
        return cls(rows=rows, columns=columns, edited_rows=edited, theme=theme)


class MemoryStore:
    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore:
    """Key-value store kept as one JSON object in a file."""

    def __init__(self, path: str):
        self.path = path

    def _read_all(self) -> Dict[str, str]:
        if not os.path.exists(self.path) or os.path.getsize(self.path) == 0:
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise PersistenceFailure(f"Could not read '{self.path}': {exc}") from exc
        if not isinstance(data, dict):
            raise PersistenceFailure(f"'{self.path}' does not hold a JSON object")
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except PersistenceFailure:
            data = {}
        data[key] = value
        directory = os.path.dirname(os.path.abspath(self.path))
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".state-", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise PersistenceFailure(f"Could not write '{self.path}': {exc}") from exc


class PersistenceGateway:
    """Saves and loads the table snapshot. Failures are logged, never raised."""

    def __init__(self, store, key: str = STORAGE_KEY):
        self.store = store
        self.key = key
        self._lock = threading.Lock()

    def save(self, snapshot: Snapshot) -> bool:
        with self._lock:
            try:
                self.store.set(self.key, snapshot.to_json())
            except (PersistenceFailure, TypeError, ValueError) as exc:
                logger.warning("persist error: %s", exc)
                return False
        return True

    def load(self) -> Optional[Snapshot]:
        with self._lock:
            try:
                raw = self.store.get(self.key)
            except PersistenceFailure as exc:
                logger.warning("load error: %s", exc)
                return None
        if raw is None:
            return None
        try:
            return Snapshot.from_json(raw)
        except ValueError as exc:
            logger.warning("Ignoring corrupt snapshot under '%s': %s", self.key, exc)
            return None
