"""
Vote submission validation.

Checks the shape of an inbound submission before anything touches the
store, and normalizes it into a VoteSubmission. Pure: no I/O, no state
beyond the guardian-variant flag.
"""

import re
from typing import Any, Mapping, Optional

from exceptions import (
    InvalidEmail,
    InvalidGuardianName,
    InvalidMobile,
    InvalidSchool,
    MissingField,
    ValidationError,
)
from store.models import VoteSubmission

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# Philippine mobile: 11 digits starting with 09
MOBILE_PATTERN = re.compile(r"^09[0-9]{9}$")
_NUMBER_SEPARATORS = re.compile(r"[\s-]")

MIN_SCHOOL_LENGTH = 3
MIN_GUARDIAN_NAME_LENGTH = 2

VOTER_FIELDS = ("fullName", "email", "mobile", "currentSchool", "gradeLevel")
GUARDIAN_FIELDS = ("guardianName", "guardianNumber")


def clean_number(value: str) -> str:
    """Strip whitespace and hyphens from a phone number"""
    return _NUMBER_SEPARATORS.sub("", value)


def normalize_email(value: str) -> str:
    return value.strip().lower()


def _text(raw: Mapping[str, Any], field: str) -> Optional[str]:
    value = raw.get(field)
    if value is None or isinstance(value, bool):
        return None
    text = str(value)
    return text if text.strip() else None


class SubmissionValidator:
    """Validates and normalizes vote submissions"""

    def __init__(self, require_guardian: bool = True):
        """
        Args:
            require_guardian: Guardian name and number are mandatory when True;
                when False they are optional but still validated if given.
        """
        self.require_guardian = require_guardian

    @property
    def required_fields(self) -> tuple:
        fields = VOTER_FIELDS + ("contestantId",)
        if self.require_guardian:
            fields = VOTER_FIELDS + GUARDIAN_FIELDS + ("contestantId",)
        return fields

    def validate(self, raw: Mapping[str, Any]) -> VoteSubmission:
        """Validate a raw submission and return its normalized form

        Raises:
            MissingField: Required field absent or blank
            InvalidEmail: Email does not match local@domain.tld
            InvalidMobile: Mobile or guardian number not 09XXXXXXXXX
            InvalidSchool: School name under 3 characters
            InvalidGuardianName: Guardian name under 2 characters
            ValidationError: contestantId is not an integer
        """
        missing = [f for f in self.required_fields if _text(raw, f) is None]
        if missing:
            raise MissingField("All fields are required", field=missing[0])

        raw_email = _text(raw, "email")
        if not EMAIL_PATTERN.fullmatch(raw_email):
            raise InvalidEmail("Invalid email format", field="email")
        email = normalize_email(raw_email)

        mobile = clean_number(_text(raw, "mobile"))
        if not MOBILE_PATTERN.match(mobile):
            raise InvalidMobile(
                "Invalid mobile number. Must be 11 digits starting with 09", field="mobile"
            )

        guardian_number_raw = _text(raw, "guardianNumber")
        guardian_number = clean_number(guardian_number_raw) if guardian_number_raw else ""
        if guardian_number and not MOBILE_PATTERN.match(guardian_number):
            raise InvalidMobile(
                "Invalid guardian mobile number. Must be 11 digits starting with 09",
                field="guardianNumber",
            )

        school = _text(raw, "currentSchool").strip()
        if len(school) < MIN_SCHOOL_LENGTH:
            raise InvalidSchool("Please enter a valid school name", field="currentSchool")

        guardian_name_raw = _text(raw, "guardianName")
        guardian_name = guardian_name_raw.strip() if guardian_name_raw else ""
        if guardian_name_raw and len(guardian_name) < MIN_GUARDIAN_NAME_LENGTH:
            raise InvalidGuardianName("Please enter a valid guardian name", field="guardianName")

        contestant_id = self._parse_contestant_id(raw.get("contestantId"))

        return VoteSubmission(
            full_name=_text(raw, "fullName").strip(),
            email=email,
            mobile=mobile,
            current_school=school,
            grade_level=_text(raw, "gradeLevel").strip(),
            contestant_id=contestant_id,
            guardian_name=guardian_name,
            guardian_number=guardian_number,
        )

    @staticmethod
    def _parse_contestant_id(value: Any) -> int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        try:
            return int(str(value).strip())
        except ValueError:
            raise ValidationError("Invalid candidate selected", field="contestantId", value=value)
