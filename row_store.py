from typing import Dict, Iterable, List, Optional

from record import Record, generate_id


class RowStore:
    """Ordered records keyed by a unique id. New rows go to the front."""

    def __init__(self, records: Optional[Iterable[Record]] = None):
        self._rows: List[Record] = []
        if records is not None:
            self.restore(records)

    def __len__(self) -> int:
        return len(self._rows)

    def __contains__(self, record_id) -> bool:
        return any(r.id == record_id for r in self._rows)

    def list(self) -> List[Record]:
        return list(self._rows)

    def ids(self) -> List[str]:
        return [r.id for r in self._rows]

    def get(self, record_id: str) -> Optional[Record]:
        for row in self._rows:
            if row.id == record_id:
                return row
        return None

    def restore(self, records: Iterable[Record]) -> None:
        rows = list(records)
        ids = [r.id for r in rows]
        if len(set(ids)) != len(ids):
            raise ValueError("Row ids must be unique")
        self._rows = rows

    def replace_all(self, field_rows: Iterable[Dict], prefix: str = "imp") -> List[Record]:
        rows: List[Record] = []
        taken = set()
        for position, fields in enumerate(field_rows):
            new_id = generate_id(prefix, taken, position)
            taken.add(new_id)
            rows.append(Record.from_fields(new_id, fields))
        self._rows = rows
        return list(rows)

    def add(self, fields: Optional[Dict] = None, prefix: str = "row") -> Record:
        new_id = generate_id(prefix, set(self.ids()), len(self._rows))
        record = Record.from_fields(new_id, fields)
        self._rows.insert(0, record)
        return record

    def update(self, record_id: str, partial: Dict) -> bool:
        for idx, row in enumerate(self._rows):
            if row.id == record_id:
                self._rows[idx] = row.merged(partial)
                return True
        return False

    def remove(self, record_id: str) -> bool:
        before = len(self._rows)
        self._rows = [r for r in self._rows if r.id != record_id]
        return len(self._rows) != before
