"""Vote tallies, voter roster and admin overview

Everything here is derived on demand from the two tabs; nothing is cached
or written back.
"""

import asyncio
from collections import Counter
from typing import Dict, Iterable, List

from store.models import Contestant, ContestantResult, Results, Vote
from store.repositories.contestants import ContestantRepository
from store.repositories.votes import VoteRepository

UNKNOWN_CONTESTANT = "Unknown"


def count_votes(votes: Iterable[Vote]) -> Dict[int, int]:
    """Frequency of votes per contestant id"""
    return dict(Counter(vote.contestant_id for vote in votes))


def build_results(contestants: List[Contestant], votes: List[Vote]) -> Results:
    """One entry per contestant in directory order, zero-vote contestants included

    Not ranked; ordering by votes is left to the presentation layer.
    """
    counts = count_votes(votes)
    return Results(
        total_votes=len(votes),
        results=[
            ContestantResult(
                id=c.id,
                name=c.name,
                description=c.description,
                image_url=c.image_url,
                votes=counts.get(c.id, 0),
            )
            for c in contestants
        ],
    )


def annotate_voters(contestants: List[Contestant], votes: List[Vote]) -> List[dict]:
    """Vote dicts with contestantName resolved (Unknown when the id no longer resolves)"""
    names = {c.id: c.name for c in contestants}
    return [
        {**vote.to_dict(), "contestantName": names.get(vote.contestant_id, UNKNOWN_CONTESTANT)}
        for vote in votes
    ]


class TallyService:
    """Joins the contestant directory with the vote ledger"""

    def __init__(self, contestants: ContestantRepository, votes: VoteRepository):
        self.contestants = contestants
        self.votes = votes

    async def get_results(self) -> Results:
        """Per-contestant vote counts over active contestants"""
        contestants, votes = await asyncio.gather(
            self.contestants.get_contestants(include_inactive=False),
            self.votes.get_votes(),
        )
        return build_results(contestants, votes)

    async def get_voters_with_names(self) -> List[dict]:
        """Every vote with its contestant's name, including deactivated contestants"""
        contestants, votes = await asyncio.gather(
            self.contestants.get_contestants(include_inactive=True),
            self.votes.get_votes(),
        )
        return annotate_voters(contestants, votes)

    async def get_overview(self) -> Dict[str, int]:
        """Admin dashboard counters"""
        contestants, votes = await asyncio.gather(
            self.contestants.get_contestants(include_inactive=True),
            self.votes.get_votes(),
        )
        return {
            "totalVotes": len(votes),
            "totalContestants": len(contestants),
            "activeContestants": sum(1 for c in contestants if c.active),
        }
