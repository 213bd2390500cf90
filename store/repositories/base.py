"""Base repository over one spreadsheet tab

All repositories share a single SheetsClient and own one TableSchema.

Return Type Conventions
-----------------------
    get_X(id) -> Optional[T]
        Single entity lookup. Returns None if not found.

    get_Xs(...) -> List[T]
        All entities matching a filter, in sheet order. [] if none.

Every read goes to the sheet; nothing is cached between calls.
"""

from typing import Any, Dict, List

from config import get_logger
from store.schema import SheetRecord, TableSchema
from store.sheets import SheetsClient

logger = get_logger(__name__).bind(component="repository")


class BaseRepository:
    """Base class for sheet-backed repositories

    Design Principles:
    - Client is passed in, not created
    - Schema maps rows to named fields; no positional indexing outside it
    - All methods are async (the client runs blocking calls in threads)
    """

    def __init__(self, client: SheetsClient, schema: TableSchema, strict_headers: bool = False):
        self.client = client
        self.schema = schema
        self.strict_headers = strict_headers

    @property
    def table(self) -> str:
        return self.schema.name

    async def _fetch_records(self) -> List[SheetRecord]:
        """Read header plus all data rows and map them through the schema"""
        rows = await self.client.fetch_rows(self.table, self.schema.read_range)
        return self.schema.parse(rows, strict_headers=self.strict_headers)

    async def _append(self, values: Dict[str, Any]) -> None:
        await self.client.append_row(self.table, self.schema.to_row(values), self.schema.append_range)

    async def _overwrite_row(self, row_number: int, values: Dict[str, Any]) -> None:
        await self.client.update_cells(
            self.table, self.schema.row_range(row_number), self.schema.to_row(values)
        )

    async def _write_cell(self, key: str, row_number: int, value: Any) -> None:
        await self.client.update_cells(self.table, self.schema.cell(key, row_number), [value])
