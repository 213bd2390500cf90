"""Contestant directory backed by the Contestants tab"""

from typing import List, Optional, Tuple

from config import get_logger
from exceptions import ContestantNotFound, SchemaMismatchError, ValidationError
from store.models import Contestant, ContestantStatus
from store.repositories.base import BaseRepository
from store.schema import SheetRecord

logger = get_logger(__name__).bind(component="contestants")


class ContestantRepository(BaseRepository):
    """List, create, update and soft-delete contestants

    Ids are assigned as max(existing) + 1. Rows are never physically
    removed, so ids are not reused unless the sheet is edited by hand.
    """

    def _to_contestant(self, record: SheetRecord) -> Contestant:
        values = record.values
        try:
            contestant_id = int(str(values["id"]).strip())
        except ValueError as e:
            raise SchemaMismatchError(
                f"Contestant id '{values['id']}' is not an integer",
                table=self.table,
                row_number=record.row_number,
            ) from e

        return Contestant(
            id=contestant_id,
            name=str(values["name"]),
            description=str(values["description"]),
            status=ContestantStatus.from_cell(values["active"]),
            image_url=str(values["imageUrl"]),
        )

    async def _load(self) -> List[Tuple[int, Contestant]]:
        """All contestants with their sheet row numbers, in sheet order"""
        records = await self._fetch_records()
        # Rows with a blank id (e.g. checkbox column filled below the roster) are padding
        return [
            (record.row_number, self._to_contestant(record))
            for record in records
            if str(record.values["id"]).strip()
        ]

    async def _locate(self, contestant_id: int) -> Tuple[int, Contestant]:
        for row_number, contestant in await self._load():
            if contestant.id == contestant_id:
                return row_number, contestant
        raise ContestantNotFound(contestant_id)

    async def get_contestants(self, include_inactive: bool = False) -> List[Contestant]:
        """Contestants in insertion order, active only unless include_inactive"""
        contestants = [c for _, c in await self._load()]
        if include_inactive:
            return contestants
        return [c for c in contestants if c.active]

    async def get_contestant(self, contestant_id: int, include_inactive: bool = True) -> Optional[Contestant]:
        for contestant in await self.get_contestants(include_inactive=include_inactive):
            if contestant.id == contestant_id:
                return contestant
        return None

    async def add_contestant(
        self,
        name: str,
        description: str = "",
        active: bool = True,
        image_url: str = "",
    ) -> Contestant:
        """Append a new contestant with the next sequential id

        Raises:
            ValidationError: Name is empty
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Contestant name is required", field="name")

        existing = await self.get_contestants(include_inactive=True)
        next_id = max((c.id for c in existing), default=0) + 1

        contestant = Contestant(
            id=next_id,
            name=name,
            description=(description or "").strip(),
            status=ContestantStatus.from_flag(active),
            image_url=(image_url or "").strip(),
        )
        await self._append(contestant.to_row_values())

        logger.info("added contestant", contestant_id=next_id, active=contestant.active)
        return contestant

    async def update_contestant(
        self,
        contestant_id: int,
        name: str,
        description: str = "",
        active: bool = True,
        image_url: str = "",
    ) -> Contestant:
        """Overwrite every mutable field of an existing contestant

        Raises:
            ValidationError: Name is empty
            ContestantNotFound: No row with this id
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Contestant name is required", field="name")

        row_number, _ = await self._locate(contestant_id)

        contestant = Contestant(
            id=contestant_id,
            name=name,
            description=(description or "").strip(),
            status=ContestantStatus.from_flag(active),
            image_url=(image_url or "").strip(),
        )
        await self._overwrite_row(row_number, contestant.to_row_values())

        logger.info("updated contestant", contestant_id=contestant_id, row=row_number)
        return contestant

    async def deactivate_contestant(self, contestant_id: int) -> None:
        """Soft delete: write FALSE to the active cell, leave the rest of the row alone

        Raises:
            ContestantNotFound: No row with this id
        """
        row_number, _ = await self._locate(contestant_id)
        await self._write_cell("active", row_number, ContestantStatus.INACTIVE.to_cell())
        logger.info("deactivated contestant", contestant_id=contestant_id, row=row_number)
