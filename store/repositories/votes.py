"""Vote ledger backed by the Votes tab

Append-only. The one-vote-per-identity rule is enforced by scanning every
prior vote at submission time; the scan and the append are two separate
remote calls, so two concurrent submissions for the same identity can both
pass the check. Acceptable at the expected volume (hundreds to low
thousands of votes).
"""

from datetime import datetime
from typing import List, Optional
from zoneinfo import ZoneInfo

from config import get_logger
from exceptions import DuplicateVote, InvalidContestant
from store.models import Vote, VoteSubmission
from store.repositories.base import BaseRepository
from store.repositories.contestants import ContestantRepository
from store.schema import SheetRecord, TableSchema
from store.sheets import SheetsClient
from store.validator import clean_number, normalize_email

logger = get_logger(__name__).bind(component="votes")

VOTE_DATE_FORMAT = "%m/%d/%Y"


def _parse_contestant_id(value) -> int:
    """Malformed cells count as contestant 0 rather than failing the read"""
    try:
        return int(str(value).strip())
    except ValueError:
        return 0


class VoteRepository(BaseRepository):
    """Duplicate lookup, submission and read-back of votes"""

    def __init__(
        self,
        client: SheetsClient,
        schema: TableSchema,
        contestants: ContestantRepository,
        timezone: str = "Asia/Manila",
        strict_headers: bool = False,
    ):
        super().__init__(client, schema, strict_headers=strict_headers)
        self.contestants = contestants
        self.timezone = ZoneInfo(timezone)

    def today(self, now: Optional[datetime] = None) -> str:
        """Calendar date (no time) in the configured timezone"""
        moment = now.astimezone(self.timezone) if now else datetime.now(self.timezone)
        return moment.strftime(VOTE_DATE_FORMAT)

    def _to_vote(self, record: SheetRecord) -> Vote:
        values = record.values
        return Vote(
            timestamp=str(values["date"]),
            full_name=str(values["fullName"]),
            email=str(values["email"]),
            mobile=str(values["mobile"]),
            current_school=str(values["school"]),
            grade_level=str(values["grade"]),
            contestant_id=_parse_contestant_id(values["contestantId"]),
            ip_address=str(values["ipAddress"]),
            guardian_name=str(values.get("guardianName", "")),
            guardian_number=str(values.get("guardianNumber", "")),
        )

    async def get_votes(self) -> List[Vote]:
        """All votes in sheet order"""
        records = await self._fetch_records()
        return [self._to_vote(record) for record in records]

    async def has_duplicate(self, email: str, mobile: str) -> bool:
        """True if any prior vote used this email (any case) or mobile (any formatting)"""
        email_key = normalize_email(email)
        mobile_key = clean_number(mobile)

        for record in await self._fetch_records():
            existing_email = normalize_email(str(record.values["email"]))
            existing_mobile = clean_number(str(record.values["mobile"]))
            if existing_email == email_key or existing_mobile == mobile_key:
                return True
        return False

    async def submit_vote(self, submission: VoteSubmission, ip_address: str = "") -> Vote:
        """Record one vote

        Sequence: duplicate check, active-contestant check, date stamp, append.
        Nothing is retried; store failures propagate as StoreError.

        Raises:
            DuplicateVote: Email or mobile already voted
            InvalidContestant: Contestant unknown or inactive
        """
        if await self.has_duplicate(submission.email, submission.mobile):
            logger.info("rejected duplicate vote", contestant_id=submission.contestant_id)
            raise DuplicateVote()

        # Only active contestants accept votes, even ones that existed before
        contestant = await self.contestants.get_contestant(
            submission.contestant_id, include_inactive=False
        )
        if contestant is None:
            logger.info("rejected vote for invalid contestant", contestant_id=submission.contestant_id)
            raise InvalidContestant(submission.contestant_id)

        vote = Vote.from_submission(submission, timestamp=self.today(), ip_address=ip_address or "")
        await self._append(vote.to_row_values())

        logger.info("recorded vote", contestant_id=vote.contestant_id)
        return vote
