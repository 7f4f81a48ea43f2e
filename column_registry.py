import time
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional


@dataclass
class ColumnDefinition:
    key: str
    label: str
    visible: bool = True

    def to_dict(self) -> dict:
        return {"key": self.key, "label": self.label, "visible": self.visible}

    @classmethod
    def from_dict(cls, data: dict) -> "ColumnDefinition":
        if not isinstance(data, dict) or not isinstance(data.get("key"), str):
            raise ValueError(f"Invalid column definition: {data!r}")
        label = data.get("label")
        return cls(
            key=data["key"],
            label=label if isinstance(label, str) else data["key"],
            visible=bool(data.get("visible", True)),
        )


class ColumnRegistry:
    """Ordered column definitions. Columns can be hidden but never removed."""

    DEFAULT_LABEL = "New Column"

    def __init__(self, columns: Optional[Iterable[ColumnDefinition]] = None):
        self._columns: List[ColumnDefinition] = []
        if columns is not None:
            self.replace_all(columns)

    def __len__(self) -> int:
        return len(self._columns)

    def list(self) -> List[ColumnDefinition]:
        return [replace(c) for c in self._columns]

    def keys(self) -> List[str]:
        return [c.key for c in self._columns]

    def visible(self) -> List[ColumnDefinition]:
        return [replace(c) for c in self._columns if c.visible]

    def visible_keys(self) -> List[str]:
        return [c.key for c in self._columns if c.visible]

    def get(self, key: str) -> ColumnDefinition:
        return replace(self._find(key))

    def replace_all(self, columns: Iterable[ColumnDefinition]) -> None:
        cols = [replace(c) for c in columns]
        keys = [c.key for c in cols]
        if len(set(keys)) != len(keys):
            raise ValueError("Column keys must be unique")
        self._columns = cols

    def add(self, label: Optional[str] = None) -> ColumnDefinition:
        col = ColumnDefinition(
            key=self._new_key(),
            label=label if label else self.DEFAULT_LABEL,
            visible=True,
        )
        self._columns.append(col)
        return replace(col)

    def set_label(self, key: str, label: str) -> None:
        self._find(key).label = label

    def set_visible(self, key: str, visible: bool) -> None:
        self._find(key).visible = bool(visible)

    def reorder(self, from_index: int, to_index: int) -> bool:
        count = len(self._columns)
        if not (0 <= from_index < count) or not (0 <= to_index < count):
            return False
        if from_index == to_index:
            return False
        moved = self._columns.pop(from_index)
        self._columns.insert(to_index, moved)
        return True

    # ---------- internals ----------
    def _find(self, key: str) -> ColumnDefinition:
        for col in self._columns:
            if col.key == key:
                return col
        raise KeyError(f"No column '{key}'")

    def _new_key(self) -> str:
        taken = set(self.keys())
        base = f"col_{int(time.time() * 1000)}"
        key = base
        bump = 0
        while key in taken:
            bump += 1
            key = f"{base}_{bump}"
        return key
