"""
Custom Exception Hierarchy - Domain-specific error types

Provides clear, typed exceptions for the failure modes of the voting service.
All custom exceptions inherit from VotingError for easy catching.

Design Philosophy:
- Exceptions are data: Include context for debugging
- Fail explicitly: Better to raise specific exception than generic
- Catch specifically: Routes map each type to its own response
- Log contextually: Exception attributes enable rich logging
"""

from typing import Optional, Dict, Any


class VotingError(Exception):
    """Base exception for all voting service errors

    All custom exceptions inherit from this, enabling:
    - Catch all service errors with single except clause
    - Distinguish our errors from library errors
    - Add common attributes (context, original_error)
    """

    # Nothing in the service retries; the flag is informational for callers
    _retryable: bool = False

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.context = context or {}
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        """Whether this error represents a transient failure"""
        return self._retryable

    @property
    def message(self) -> str:
        """Message without the context suffix (safe to show to end users)"""
        return super().__str__()

    def __str__(self):
        base_msg = super().__str__()
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base_msg} (context: {context_str})"
        return base_msg


# ========== Record Store Errors ==========


class StoreError(VotingError):
    """Spreadsheet store failures

    Examples:
    - Sheets API returned an HTTP error
    - Credentials could not be loaded or refreshed
    - Network failure talking to the API
    """

    _retryable = True

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.table = table
        self.operation = operation
        self.original_error = original_error

        context = {}
        if table:
            context['table'] = table
        if operation:
            context['operation'] = operation
        if original_error:
            context['original_error'] = str(original_error)

        super().__init__(message, context)


class SchemaMismatchError(StoreError):
    """Sheet contents do not match the expected column layout

    Raised instead of silently misaligning fields when a tab has been
    edited out-of-band (columns moved, extra columns, non-numeric ids).
    """

    _retryable = False

    def __init__(self, message: str, table: Optional[str] = None, row_number: Optional[int] = None):
        self.row_number = row_number
        super().__init__(message, table=table, operation="map")
        if row_number:
            self.context['row_number'] = row_number


# ========== Validation Errors ==========


class ValidationError(VotingError):
    """Data validation failures

    Examples:
    - Missing required field
    - Invalid input format
    - Value too short
    """

    def __init__(self, message: str, field: Optional[str] = None, value: Optional[Any] = None):
        self.field = field
        self.value = value

        context = {}
        if field:
            context['field'] = field
        if value is not None:
            context['value'] = str(value)

        super().__init__(message, context)


class MissingField(ValidationError):
    """A required submission field is absent or blank"""


class InvalidEmail(ValidationError):
    """Email does not look like local@domain.tld"""


class InvalidMobile(ValidationError):
    """Mobile number is not 11 digits starting with 09"""


class InvalidSchool(ValidationError):
    """School name shorter than 3 characters"""


class InvalidGuardianName(ValidationError):
    """Guardian name shorter than 2 characters"""


# ========== Voting Errors ==========


class DuplicateVote(VotingError):
    """The email or mobile number has already been used to vote"""

    def __init__(self, message: str = "Email or mobile number has already voted"):
        super().__init__(message)


class InvalidContestant(VotingError):
    """Vote targets a contestant that is unknown or inactive"""

    def __init__(self, contestant_id: int):
        self.contestant_id = contestant_id
        super().__init__("Invalid contestant", {'contestant_id': contestant_id})


# ========== Lookup Errors ==========


class NotFound(VotingError):
    """Referenced entity does not exist"""


class ContestantNotFound(NotFound):
    """Admin operation referenced a contestant id that is not in the sheet"""

    def __init__(self, contestant_id: int):
        self.contestant_id = contestant_id
        super().__init__("Contestant not found", {'contestant_id': contestant_id})


# ========== Configuration Errors ==========


class ConfigurationError(VotingError):
    """Configuration or environment errors

    Examples:
    - Missing spreadsheet id
    - Missing service account credentials
    """

    def __init__(self, message: str, config_key: Optional[str] = None):
        self.config_key = config_key
        context = {}
        if config_key:
            context['config_key'] = config_key
        super().__init__(message, context)
