"""User request/response schemas - API contract and projections.

JSON uses camelCase (``birthDate``, ``createdEvents``); attributes stay snake_case.
"""

from datetime import date, datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from eventhub.schemas.event import EventSummary

CAMEL_CONFIG = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class LoginKey(str, Enum):
    """Fields a user can be looked up by when logging in."""

    EMAIL = "email"
    USERNAME = "username"


def parse_birth_date(value: str) -> date:
    """Parse an ISO date or datetime string ("1990-05-01", "1990-05-01T00:00:00Z").

    Datetimes with an offset are converted to UTC before taking the date.
    """
    parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date()


class UserResponse(BaseModel):
    """Shared projection. Never carries the password."""

    model_config = CAMEL_CONFIG

    id: str
    username: str
    email: str
    role: str
    avatar: str | None = None
    location: str | None = None
    birth_date: date | None = None
    gender: str | None = None
    bio: str
    events: list[EventSummary] = []
    created_events: list[EventSummary] = []


class UserCredentials(BaseModel):
    """Login projection: the only shape that includes the password hash."""

    model_config = CAMEL_CONFIG

    id: str
    username: str
    email: str
    role: str
    password: str


class UserCreate(BaseModel):
    # role and bio are server-assigned; unknown input keys are ignored
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    username: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    # bcrypt accepts max 72 bytes
    password: str = Field(..., min_length=1, max_length=72)
    birth_date_string: str
    avatar: str | None = None
    location: str | None = None
    gender: str | None = None

    @field_validator("birth_date_string")
    @classmethod
    def check_birth_date(cls, value: str) -> str:
        parse_birth_date(value)
        return value


class UserUpdate(BaseModel):
    """Partial update. Only fields explicitly set are written."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    username: str | None = Field(None, min_length=1, max_length=50)
    email: EmailStr | None = None
    password: str | None = Field(None, min_length=1, max_length=72)
    birth_date_string: str | None = None
    avatar: str | None = None
    location: str | None = None
    gender: str | None = None
    bio: str | None = None

    @field_validator("birth_date_string")
    @classmethod
    def check_birth_date(cls, value: str | None) -> str | None:
        if value is not None:
            parse_birth_date(value)
        return value

    @field_validator("username", "email", "password", "bio")
    @classmethod
    def reject_null(cls, value):
        # Only runs for keys the caller sent; these columns are NOT NULL
        if value is None:
            raise ValueError("may not be null")
        return value


class LoginRequest(BaseModel):
    email: str | None = None
    username: str | None = None
    password: str

    @model_validator(mode="after")
    def require_identifier(self) -> "LoginRequest":
        if not self.email and not self.username:
            raise ValueError("email or username is required")
        return self

    @property
    def key(self) -> str:
        return LoginKey.EMAIL.value if self.email else LoginKey.USERNAME.value

    @property
    def identifier(self) -> str:
        return self.email or self.username


class TokenResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    token: str
    token_type: str = "bearer"
    user: UserResponse
