"""
Domain Models for the voting service

Pydantic dataclasses with runtime validation for contestants and votes.
Outbound dicts use the camelCase keys the frontend reads.
"""

from enum import Enum
from typing import Any, Dict, List

from pydantic.dataclasses import dataclass


class ContestantStatus(str, Enum):
    """Visibility of a contestant in public listings (soft delete = INACTIVE)"""

    ACTIVE = "active"
    INACTIVE = "inactive"

    @classmethod
    def from_cell(cls, value: Any) -> "ContestantStatus":
        """Normalize the sheet's active cell

        The cell holds either a real boolean (user-entered checkbox) or the
        text TRUE/FALSE written by this service. Anything else is inactive.
        """
        if value is True:
            return cls.ACTIVE
        if isinstance(value, str) and value.strip().upper() == "TRUE":
            return cls.ACTIVE
        return cls.INACTIVE

    @classmethod
    def from_flag(cls, active: bool) -> "ContestantStatus":
        return cls.ACTIVE if active else cls.INACTIVE

    def to_cell(self) -> str:
        return "TRUE" if self is ContestantStatus.ACTIVE else "FALSE"


@dataclass
class Contestant:
    """Contestant entity - one row of the Contestants tab"""

    id: int
    name: str
    description: str = ""
    status: ContestantStatus = ContestantStatus.ACTIVE
    image_url: str = ""  # Opaque filename, no upload logic

    @property
    def active(self) -> bool:
        return self.status is ContestantStatus.ACTIVE

    def to_row_values(self) -> Dict[str, Any]:
        """Values keyed by Contestants column key"""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "active": self.status.to_cell(),
            "imageUrl": self.image_url,
        }

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "active": self.active,
            "imageUrl": self.image_url,
        }


@dataclass
class VoteSubmission:
    """Normalized, validated vote submission (output of SubmissionValidator)"""

    full_name: str
    email: str  # Trimmed, lower-cased
    mobile: str  # Digits only, 09XXXXXXXXX
    current_school: str
    grade_level: str
    contestant_id: int
    guardian_name: str = ""
    guardian_number: str = ""


@dataclass
class Vote:
    """Vote entity - one row of the Votes tab, immutable once appended"""

    timestamp: str  # MM/DD/YYYY in the configured timezone
    full_name: str
    email: str
    mobile: str
    current_school: str
    grade_level: str
    contestant_id: int
    ip_address: str = ""
    guardian_name: str = ""
    guardian_number: str = ""

    @classmethod
    def from_submission(cls, submission: VoteSubmission, timestamp: str, ip_address: str = "") -> "Vote":
        return cls(
            timestamp=timestamp,
            full_name=submission.full_name,
            email=submission.email,
            mobile=submission.mobile,
            current_school=submission.current_school,
            grade_level=submission.grade_level,
            contestant_id=submission.contestant_id,
            ip_address=ip_address,
            guardian_name=submission.guardian_name,
            guardian_number=submission.guardian_number,
        )

    def to_row_values(self) -> Dict[str, Any]:
        """Values keyed by Votes column key"""
        return {
            "date": self.timestamp,
            "fullName": self.full_name,
            "email": self.email,
            "mobile": self.mobile,
            "school": self.current_school,
            "grade": self.grade_level,
            "contestantId": self.contestant_id,
            "ipAddress": self.ip_address,
            "guardianName": self.guardian_name,
            "guardianNumber": self.guardian_number,
        }

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return {
            "timestamp": self.timestamp,
            "fullName": self.full_name,
            "email": self.email,
            "mobile": self.mobile,
            "currentSchool": self.current_school,
            "gradeLevel": self.grade_level,
            "contestantId": self.contestant_id,
            "ipAddress": self.ip_address,
            "guardianName": self.guardian_name,
            "guardianNumber": self.guardian_number,
        }


@dataclass
class ContestantResult:
    """Vote count for one contestant (derived, never stored)"""

    id: int
    name: str
    description: str
    image_url: str
    votes: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "imageUrl": self.image_url,
            "votes": self.votes,
        }


@dataclass
class Results:
    """Tally across all active contestants, in directory order"""

    total_votes: int
    results: List[ContestantResult]

    def to_dict(self) -> dict:
        return {
            "totalVotes": self.total_votes,
            "results": [r.to_dict() for r in self.results],
        }
