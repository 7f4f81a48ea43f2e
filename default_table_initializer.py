from column_registry import ColumnDefinition
from record import Record


class DefaultTableInitializer:
    def columns(self) -> list[ColumnDefinition]:
        return [
            ColumnDefinition("name", "Name", True),
            ColumnDefinition("email", "Email", True),
            ColumnDefinition("age", "Age", True),
            ColumnDefinition("role", "Role", True),
        ]

    def rows(self) -> list[Record]:
        return [
            Record("r1", "Alok Kumar Bhakta", "alokbhakta2018@gmail.com", 23, "frontend Developer"),
            Record("r2", "Harsh Goyal", "harsh@gmail.com", 22, "Developer"),
            Record("r3", "Amit Yadav", "amit@gmail.com", 23, "Backend Developer"),
        ]
