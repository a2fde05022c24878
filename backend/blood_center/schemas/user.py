"""User Schemas — registration, profile edits, and admin role/status changes.

Invariants:
    - UserCreate fields are all optional at the schema level: missing/blank
      required fields are reported by the service as one 400 "Missing required
      fields" (core/user_rules.missing_registration_fields)
    - blood_group, when present, is one of the eight ABO/Rh groups
    - UserProfileUpdate keeps unknown keys (extra="allow") so the service can
      name the offending fields instead of silently dropping them

Design Decisions:
    - User JSON keeps snake_case keys (blood_group) as registered clients send
      them; only createdAt is camelCase
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blood_center.core.domain_types import BloodGroup, Role, UserStatus


def _check_blood_group(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip().upper()
    if v not in {g.value for g in BloodGroup}:
        raise ValueError(f"blood_group must be one of {[g.value for g in BloodGroup]}")
    return v


class UserCreate(BaseModel):
    """Self-registration payload."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(None, max_length=200)
    email: str | None = Field(None, max_length=320)
    photo: str | None = Field(None, max_length=1000)
    blood_group: str | None = None
    district: str | None = Field(None, max_length=100)
    upazila: str | None = Field(None, max_length=100)
    role: str | None = None
    status: str | None = None

    @field_validator("blood_group")
    @classmethod
    def validate_blood_group(cls, v: str | None) -> str | None:
        return _check_blood_group(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str | None) -> str | None:
        if v and "@" not in v:
            raise ValueError("email must contain @")
        return v


class UserRegistered(BaseModel):
    message: str
    userId: str


class UserProfileUpdate(BaseModel):
    """Partial profile edit — identity, role and status are not editable here."""
    model_config = ConfigDict(extra="allow", str_strip_whitespace=True)

    name: str | None = Field(None, min_length=1, max_length=200)
    photo: str | None = Field(None, min_length=1, max_length=1000)
    blood_group: str | None = None
    district: str | None = Field(None, min_length=1, max_length=100)
    upazila: str | None = Field(None, min_length=1, max_length=100)

    @field_validator("blood_group")
    @classmethod
    def validate_blood_group(cls, v: str | None) -> str | None:
        return _check_blood_group(v)


class UserStatusUpdate(BaseModel):
    status: UserStatus


class UserRoleUpdate(BaseModel):
    role: Role


class RoleUpdateByEmail(BaseModel):
    email: str = Field(min_length=3, max_length=320)
    role: Role


class UserResponse(BaseModel):
    """Public user record."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    photo: str
    blood_group: str
    district: str
    upazila: str
    role: str
    status: str
    created_at: datetime = Field(serialization_alias="createdAt")


class UserRoleResponse(BaseModel):
    msg: str = "ok"
    role: str
    status: str


class UserPage(BaseModel):
    users: list[UserResponse]
    total: int
