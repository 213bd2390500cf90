"""
Shared fixtures: an in-memory stand-in for the Sheets client

FakeSheetsClient keeps each tab as a list of rows (header first) and
records every write, so tests can assert on exactly what would have been
sent to the spreadsheet.
"""

import re

import pytest

from exceptions import StoreError
from store.db import VotingStore
from store.schema import CONTESTANT_COLUMNS, GUARDIAN_COLUMNS, VOTE_COLUMNS

_ADDRESS = re.compile(r"^([A-Z]+)(\d+)")


def _column_index(letters: str) -> int:
    index = 0
    for ch in letters:
        index = index * 26 + (ord(ch) - ord("A") + 1)
    return index - 1


class FakeSheetsClient:
    """Same async surface as SheetsClient, backed by plain lists"""

    def __init__(self, tabs=None):
        self.tabs = {name: [list(row) for row in rows] for name, rows in (tabs or {}).items()}
        self.reads = []
        self.appends = []
        self.updates = []
        self.fail_operations = set()
        self.closed = False

    def _maybe_fail(self, table, operation):
        if operation in self.fail_operations:
            raise StoreError(f"Sheets API {operation} failed", table=table, operation=operation)

    async def fetch_rows(self, table, cell_range):
        self._maybe_fail(table, "read")
        self.reads.append((table, cell_range))
        return [list(row) for row in self.tabs.get(table, [])]

    async def append_row(self, table, row, cell_range="A:A"):
        self._maybe_fail(table, "append")
        self.appends.append((table, cell_range, list(row)))
        self.tabs.setdefault(table, []).append(list(row))

    async def update_cells(self, table, address, values):
        self._maybe_fail(table, "update")
        self.updates.append((table, address, list(values)))

        letters, row_number = _ADDRESS.match(address).groups()
        rows = self.tabs[table]
        row = rows[int(row_number) - 1]
        start = _column_index(letters)
        for offset, value in enumerate(values):
            while len(row) <= start + offset:
                row.append("")
            row[start + offset] = value

    def close(self):
        self.closed = True


def contestant_header():
    return [c.titles[0] for c in CONTESTANT_COLUMNS]


def vote_header(include_guardian=True):
    columns = VOTE_COLUMNS + (GUARDIAN_COLUMNS if include_guardian else [])
    return [c.titles[0] for c in columns]


def vote_row(email, mobile, contestant_id, name="Some Voter", date="10/18/2026"):
    return [
        date, name, email, mobile, "Manila Science High", "Grade 10",
        str(contestant_id), "203.0.113.7", "Parent Name", "09181112222",
    ]


@pytest.fixture
def sheets():
    """Three contestants (Carla deactivated), no votes yet"""
    return FakeSheetsClient({
        "Contestants": [
            contestant_header(),
            ["1", "Alice Santos", "Grade 11 soloist", "TRUE", "alice.jpg"],
            ["2", "Ben Reyes", "Dance troupe lead", "TRUE", "ben.jpg"],
            ["3", "Carla Diaz", "Spoken word", "FALSE", "carla.jpg"],
        ],
        "Votes": [vote_header()],
    })


@pytest.fixture
def store(sheets):
    return VotingStore(sheets, require_guardian=True)


@pytest.fixture
def valid_payload():
    return {
        "fullName": "Jane Cruz",
        "email": "Jane.Cruz@Example.com",
        "mobile": "0917-123-4567",
        "currentSchool": "Manila Science High",
        "gradeLevel": "Grade 10",
        "guardianName": "Maria Cruz",
        "guardianNumber": "0918 765 4321",
        "contestantId": "2",
    }
