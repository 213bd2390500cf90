"""Spreadsheet store facade with repository pattern

VotingStore wires the Sheets client, the two repositories, the tally
service and the submission validator together. Build one per process.
"""

import asyncio

from config import config as default_config, get_logger
from store.repositories import ContestantRepository, VoteRepository
from store.schema import contestants_schema, votes_schema
from store.sheets import SheetsClient
from store.tally import TallyService
from store.validator import SubmissionValidator

logger = get_logger(__name__).bind(component="store")


class VotingStore:
    """Repositories over one spreadsheet

    Usage:
        store = await VotingStore.create()
        contestants = await store.contestants.get_contestants()
        submission = store.validator.validate(payload)
        await store.votes.submit_vote(submission, ip_address="203.0.113.7")
        results = await store.tally.get_results()
        store.close()
    """

    client: SheetsClient
    contestants: ContestantRepository
    votes: VoteRepository
    tally: TallyService
    validator: SubmissionValidator

    def __init__(
        self,
        client: SheetsClient,
        contestants_sheet: str = "Contestants",
        votes_sheet: str = "Votes",
        require_guardian: bool = True,
        timezone: str = "Asia/Manila",
        strict_headers: bool = False,
    ):
        """Initialize with a client; use VotingStore.create() for the configured spreadsheet"""
        self.client = client
        self.require_guardian = require_guardian

        self.contestants = ContestantRepository(
            client, contestants_schema(contestants_sheet), strict_headers=strict_headers
        )
        self.votes = VoteRepository(
            client,
            votes_schema(votes_sheet, include_guardian=require_guardian),
            self.contestants,
            timezone=timezone,
            strict_headers=strict_headers,
        )
        self.tally = TallyService(self.contestants, self.votes)
        self.validator = SubmissionValidator(require_guardian=require_guardian)

        logger.info(
            "store initialized",
            contestants_sheet=contestants_sheet,
            votes_sheet=votes_sheet,
            require_guardian=require_guardian,
        )

    @classmethod
    async def create(cls, cfg=None) -> "VotingStore":
        """Create a store for the configured spreadsheet

        Credential loading and API discovery are blocking, so they run in a thread.

        Raises:
            ConfigurationError: Sheet id or credentials missing
            StoreError: Credentials unusable
        """
        cfg = cfg or default_config
        client = await asyncio.to_thread(SheetsClient.from_config, cfg)
        return cls(
            client,
            contestants_sheet=cfg.CONTESTANTS_SHEET,
            votes_sheet=cfg.VOTES_SHEET,
            require_guardian=cfg.REQUIRE_GUARDIAN,
            timezone=cfg.TIMEZONE,
            strict_headers=cfg.STRICT_HEADERS,
        )

    def close(self) -> None:
        self.client.close()
        logger.info("store closed")
