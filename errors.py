from typing import List, Optional


class TabulaError(Exception):
    """Base class for table engine errors."""


class ParseError(TabulaError):
    """A malformed CSV row. Collected during decoding, never raised out of it."""

    def __init__(self, row: Optional[int], message: str):
        self.row = row
        self.message = message
        where = f"row {row}: " if row is not None else ""
        super().__init__(f"{where}{message}")


class ImportFailure(TabulaError):
    pass


class ValidationFailure(TabulaError):
    def __init__(self, row_ids: List[str], field: str = "age"):
        self.row_ids = list(row_ids)
        self.field = field
        super().__init__(
            f"{field.capitalize()} must be a valid number for all edited rows "
            f"({', '.join(self.row_ids)})"
        )


class PersistenceFailure(TabulaError):
    pass
