"""
Tests for SubmissionValidator

Covers normalization of a well-formed submission, the order in which
rules fire, and the reduced (no guardian) variant.
"""

import pytest

from exceptions import (
    InvalidEmail,
    InvalidGuardianName,
    InvalidMobile,
    InvalidSchool,
    MissingField,
    ValidationError,
)
from store.validator import SubmissionValidator, clean_number, normalize_email


@pytest.fixture
def validator():
    return SubmissionValidator(require_guardian=True)


class TestNormalization:
    """A valid submission comes back trimmed and canonical"""

    def test_valid_submission_is_normalized(self, validator, valid_payload):
        submission = validator.validate(valid_payload)

        assert submission.full_name == "Jane Cruz"
        assert submission.email == "jane.cruz@example.com"
        assert submission.mobile == "09171234567"
        assert submission.guardian_number == "09187654321"
        assert submission.guardian_name == "Maria Cruz"
        assert submission.current_school == "Manila Science High"
        assert submission.contestant_id == 2

    def test_surrounding_whitespace_trimmed(self, validator, valid_payload):
        valid_payload["fullName"] = "  Jane Cruz  "
        valid_payload["currentSchool"] = " Manila Science High "
        valid_payload["email"] = "JANE@EXAMPLE.COM"

        submission = validator.validate(valid_payload)

        assert submission.full_name == "Jane Cruz"
        assert submission.current_school == "Manila Science High"
        assert submission.email == "jane@example.com"

    def test_numeric_contestant_id_accepted(self, validator, valid_payload):
        valid_payload["contestantId"] = 3
        assert validator.validate(valid_payload).contestant_id == 3

    def test_helpers(self):
        assert clean_number(" 0917 123-4567 ") == "09171234567"
        assert normalize_email(" A@B.CO ") == "a@b.co"


class TestRequiredFields:
    """Missing or blank fields are rejected before any other rule"""

    @pytest.mark.parametrize("field", [
        "fullName", "email", "mobile", "currentSchool", "gradeLevel",
        "guardianName", "guardianNumber", "contestantId",
    ])
    def test_each_field_required(self, validator, valid_payload, field):
        del valid_payload[field]

        with pytest.raises(MissingField) as exc_info:
            validator.validate(valid_payload)

        assert exc_info.value.message == "All fields are required"
        assert exc_info.value.field == field

    def test_whitespace_only_counts_as_missing(self, validator, valid_payload):
        valid_payload["fullName"] = "   "
        with pytest.raises(MissingField):
            validator.validate(valid_payload)

    def test_missing_wins_over_bad_email(self, validator, valid_payload):
        valid_payload["email"] = "not-an-email"
        valid_payload["gradeLevel"] = ""
        with pytest.raises(MissingField):
            validator.validate(valid_payload)


class TestFieldRules:
    """Format rules and their messages"""

    @pytest.mark.parametrize("email", [
        "jane", "jane@example", "jane @example.com", "@example.com",
        " jane@test.com", "jane@test.com ", "jane@test.com\n",
    ])
    def test_invalid_email(self, validator, valid_payload, email):
        valid_payload["email"] = email
        with pytest.raises(InvalidEmail) as exc_info:
            validator.validate(valid_payload)
        assert exc_info.value.message == "Invalid email format"

    @pytest.mark.parametrize("mobile", ["08171234567", "0917123456", "091712345678", "+639171234567"])
    def test_invalid_mobile(self, validator, valid_payload, mobile):
        valid_payload["mobile"] = mobile
        with pytest.raises(InvalidMobile) as exc_info:
            validator.validate(valid_payload)
        assert exc_info.value.field == "mobile"
        assert "09" in exc_info.value.message

    def test_invalid_guardian_number(self, validator, valid_payload):
        valid_payload["guardianNumber"] = "12345"
        with pytest.raises(InvalidMobile) as exc_info:
            validator.validate(valid_payload)
        assert exc_info.value.field == "guardianNumber"

    def test_short_school(self, validator, valid_payload):
        valid_payload["currentSchool"] = "AB"
        with pytest.raises(InvalidSchool) as exc_info:
            validator.validate(valid_payload)
        assert exc_info.value.message == "Please enter a valid school name"

    def test_short_guardian_name(self, validator, valid_payload):
        valid_payload["guardianName"] = "M"
        with pytest.raises(InvalidGuardianName):
            validator.validate(valid_payload)

    def test_non_numeric_contestant_id(self, validator, valid_payload):
        valid_payload["contestantId"] = "abc"
        with pytest.raises(ValidationError) as exc_info:
            validator.validate(valid_payload)
        assert exc_info.value.field == "contestantId"
        assert exc_info.value.message == "Invalid candidate selected"

    def test_email_checked_before_mobile(self, validator, valid_payload):
        valid_payload["email"] = "bad"
        valid_payload["mobile"] = "123"
        with pytest.raises(InvalidEmail):
            validator.validate(valid_payload)


class TestReducedVariant:
    """Without require_guardian the guardian fields are optional"""

    def test_guardian_fields_optional(self, valid_payload):
        del valid_payload["guardianName"]
        del valid_payload["guardianNumber"]

        submission = SubmissionValidator(require_guardian=False).validate(valid_payload)

        assert submission.guardian_name == ""
        assert submission.guardian_number == ""

    def test_guardian_number_still_checked_when_given(self, valid_payload):
        valid_payload["guardianNumber"] = "555"
        with pytest.raises(InvalidMobile):
            SubmissionValidator(require_guardian=False).validate(valid_payload)

    def test_required_fields_list(self):
        assert "guardianName" not in SubmissionValidator(require_guardian=False).required_fields
        assert "guardianName" in SubmissionValidator(require_guardian=True).required_fields
