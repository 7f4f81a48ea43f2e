import time
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Iterable, Optional, Union

Value = Union[str, int, float, None]


@dataclass
class Record:
    """One table row: a fixed id, the known fields and any extra columns."""

    id: str
    name: str = ""
    email: str = ""
    age: Value = None
    role: str = ""
    extras: Dict[str, Value] = field(default_factory=dict)

    KNOWN_FIELDS: ClassVar[tuple] = ("name", "email", "age", "role")

    def get(self, key: str, default: Any = None) -> Any:
        if key == "id":
            return self.id
        if key in self.KNOWN_FIELDS:
            return getattr(self, key)
        return self.extras.get(key, default)

    def fields(self) -> Dict[str, Value]:
        data = {k: getattr(self, k) for k in self.KNOWN_FIELDS}
        data.update(self.extras)
        return data

    def to_dict(self) -> Dict[str, Value]:
        return {"id": self.id, **self.fields()}

    def merged(self, partial: Dict[str, Value]) -> "Record":
        data = self.fields()
        for key, value in (partial or {}).items():
            if key == "id":
                continue
            data[key] = value
        return Record.from_fields(self.id, data)

    @classmethod
    def from_fields(cls, record_id: str, data: Optional[Dict[str, Value]] = None) -> "Record":
        data = dict(data or {})
        data.pop("id", None)
        known = {k: data.pop(k) for k in cls.KNOWN_FIELDS if k in data}
        for key in ("name", "email", "role"):
            if known.get(key) is None and key in known:
                known[key] = ""
        return cls(id=str(record_id), extras=data, **known)

    @classmethod
    def from_dict(cls, data: Dict[str, Value]) -> "Record":
        if not isinstance(data, dict) or data.get("id") in (None, ""):
            raise ValueError("Row is missing an id")
        return cls.from_fields(data["id"], data)


def generate_id(prefix: str, existing: Iterable[str], position: int = 0) -> str:
    """Build an id from the current millisecond clock plus a position.

    A numeric suffix is appended until the id is absent from `existing`.
    """
    taken = existing if isinstance(existing, (set, frozenset, dict)) else set(existing)
    stamp = int(time.time() * 1000)
    candidate = f"{prefix}_{stamp}_{position}"
    bump = 0
    while candidate in taken:
        bump += 1
        candidate = f"{prefix}_{stamp}_{position}_{bump}"
    return candidate
