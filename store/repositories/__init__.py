"""Sheet-backed repositories sharing one SheetsClient"""

from store.repositories.base import BaseRepository
from store.repositories.contestants import ContestantRepository
from store.repositories.votes import VoteRepository

__all__ = [
    "BaseRepository",
    "ContestantRepository",
    "VoteRepository",
]
