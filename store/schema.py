"""Column schemas for the spreadsheet tabs

Each tab is described by an ordered list of columns. Rows read from the
Sheets API are mapped to dicts keyed by column key, and records are mapped
back to rows in column order. Shape drift (extra cells, renamed headers)
raises SchemaMismatchError instead of silently shifting fields.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from exceptions import SchemaMismatchError

# Row 1 of every tab is the header; data starts on row 2
HEADER_ROW = 1
FIRST_DATA_ROW = 2


def column_letter(index: int) -> str:
    """0 -> A, 25 -> Z, 26 -> AA"""
    letters = ""
    index += 1
    while index:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def _normalize_title(title: Any) -> str:
    return re.sub(r"[^a-z0-9]", "", str(title).lower())


@dataclass(frozen=True)
class Column:
    key: str  # Record field name
    titles: tuple  # Accepted header titles (first is canonical)


@dataclass
class SheetRecord:
    """One mapped data row plus its 1-based sheet row number"""

    row_number: int
    values: Dict[str, str]


class TableSchema:
    """Ordered column layout of one tab"""

    def __init__(self, name: str, columns: Sequence[Column]):
        self.name = name
        self.columns = list(columns)

    @property
    def keys(self) -> List[str]:
        return [c.key for c in self.columns]

    @property
    def last_letter(self) -> str:
        return column_letter(len(self.columns) - 1)

    @property
    def read_range(self) -> str:
        """Header plus all data rows, e.g. A1:E"""
        return f"A{HEADER_ROW}:{self.last_letter}"

    @property
    def append_range(self) -> str:
        return f"A:{self.last_letter}"

    def row_range(self, row_number: int) -> str:
        return f"A{row_number}:{self.last_letter}{row_number}"

    def cell(self, key: str, row_number: int) -> str:
        return f"{column_letter(self.keys.index(key))}{row_number}"

    def verify_header(self, header: Sequence[Any]) -> None:
        """Compare a header row with the expected titles"""
        if len(header) != len(self.columns):
            raise SchemaMismatchError(
                f"Expected {len(self.columns)} header columns, found {len(header)}",
                table=self.name,
                row_number=HEADER_ROW,
            )
        for column, title in zip(self.columns, header):
            accepted = {_normalize_title(t) for t in column.titles}
            if _normalize_title(title) not in accepted:
                raise SchemaMismatchError(
                    f"Header '{title}' does not match column '{column.titles[0]}'",
                    table=self.name,
                    row_number=HEADER_ROW,
                )

    def to_record(self, row: Sequence[Any], row_number: int) -> Dict[str, str]:
        """Map one raw row to a dict; short rows pad with empty strings"""
        if len(row) > len(self.columns):
            raise SchemaMismatchError(
                f"Row has {len(row)} cells, schema has {len(self.columns)} columns",
                table=self.name,
                row_number=row_number,
            )
        padded = list(row) + [""] * (len(self.columns) - len(row))
        return {key: value for key, value in zip(self.keys, padded)}

    def to_row(self, record: Dict[str, Any]) -> List[Any]:
        """Map a record back to a row in column order (missing keys write empty)"""
        return [record.get(key, "") for key in self.keys]

    def parse(self, rows: Sequence[Sequence[Any]], strict_headers: bool = False) -> List[SheetRecord]:
        """Map a read of `read_range` (header first) to records

        Fully empty rows are skipped but keep their place in the row
        numbering, so each record knows the sheet row it came from.
        """
        if not rows:
            return []

        if strict_headers:
            self.verify_header(rows[0])

        records = []
        for offset, row in enumerate(rows[1:]):
            row_number = FIRST_DATA_ROW + offset
            if not any(str(cell).strip() for cell in row):
                continue
            records.append(SheetRecord(row_number=row_number, values=self.to_record(row, row_number)))
        return records


CONTESTANT_COLUMNS = [
    Column("id", ("ID", "Contestant ID")),
    Column("name", ("Name",)),
    Column("description", ("Description",)),
    Column("active", ("Active", "Active Flag", "Status")),
    Column("imageUrl", ("Image URL", "Image", "Photo")),
]

VOTE_COLUMNS = [
    Column("date", ("Date", "Timestamp")),
    Column("fullName", ("Full Name", "Name")),
    Column("email", ("Email",)),
    Column("mobile", ("Mobile", "Mobile Number")),
    Column("school", ("School", "Current School")),
    Column("grade", ("Grade", "Grade Level")),
    Column("contestantId", ("Contestant ID", "Contestant")),
    Column("ipAddress", ("IP Address", "IP")),
]

GUARDIAN_COLUMNS = [
    Column("guardianName", ("Guardian Name",)),
    Column("guardianNumber", ("Guardian Number", "Guardian Mobile")),
]


def contestants_schema(sheet_name: str = "Contestants") -> TableSchema:
    return TableSchema(sheet_name, CONTESTANT_COLUMNS)


def votes_schema(sheet_name: str = "Votes", include_guardian: bool = True) -> TableSchema:
    columns = VOTE_COLUMNS + (GUARDIAN_COLUMNS if include_guardian else [])
    return TableSchema(sheet_name, columns)
