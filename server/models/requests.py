"""
Pydantic request models for API validation

Vote submissions are loose (every field optional, any scalar); the
SubmissionValidator, not pydantic, decides which rule failed.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class VoteRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    full_name: Optional[str] = None
    email: Optional[str] = None
    mobile: Optional[str] = None
    current_school: Optional[str] = None
    grade_level: Optional[str] = None
    guardian_name: Optional[str] = None
    guardian_number: Optional[str] = None
    contestant_id: Optional[Union[int, str]] = None

    @field_validator(
        "full_name", "email", "mobile", "current_school", "grade_level",
        "guardian_name", "guardian_number",
        mode="before",
    )
    @classmethod
    def coerce_scalar(cls, v):
        # Numbers typed into text inputs arrive as JSON numbers
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    def to_submission(self) -> dict:
        """Raw camelCase payload as consumed by SubmissionValidator"""
        return self.model_dump(by_alias=True)


class ContestantRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    name: Optional[str] = None
    description: Optional[str] = None
    active: bool = True
    image_url: Optional[str] = None

    @field_validator("active", mode="before")
    @classmethod
    def default_active(cls, v):
        # Only an explicit false deactivates
        return v is not False


class LoginRequest(BaseModel):
    password: Optional[str] = None
