"""User-related Pydantic schemas."""

from pydantic import EmailStr, Field, field_validator, model_validator

from inspectflow.enums import Role
from inspectflow.schemas.base import ApiModel, Document, strip_text
from inspectflow.schemas.organization import PHONE_PATTERN


class User(Document):
    """Member of exactly one organization."""

    name: str
    email: str
    role: Role
    custom_role: str | None = None
    permissions: list[str] | None = None
    organization_id: str
    mobile_number: str | None = None
    address: str | None = None


class OrganizationMember(Document):
    """User as listed by the admin user endpoints (organization by name)."""

    name: str
    email: str
    role: Role
    custom_role: str | None = None
    permissions: list[str] | None = None
    organization_name: str | None = None
    mobile_number: str | None = None
    address: str | None = None


# =============================================================================
# Request Schemas
# =============================================================================

REGISTERABLE_ROLES = {Role.ADMIN, Role.INSPECTOR, Role.APPROVER, Role.CUSTOM}


class UserRegister(ApiModel):
    """
    Request schema for registering a user (also used by admins creating users).

    Validates:
    - Email format, normalized to lowercase
    - Role is one of admin/inspector/approver/custom
    - customRole is present when role is custom
    """

    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    organization_id: str = Field(min_length=1)
    role: Role
    custom_role: str | None = None
    mobile_number: str | None = Field(default=None, pattern=PHONE_PATTERN)
    address: str | None = Field(default=None, max_length=500)

    @field_validator("name", "email", mode="before")
    @classmethod
    def strip_fields(cls, v):
        return strip_text(v)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: Role) -> Role:
        if v not in REGISTERABLE_ROLES:
            raise ValueError(f"Role '{v.value}' cannot be assigned at registration")
        return v

    @model_validator(mode="after")
    def require_custom_role(self) -> "UserRegister":
        if self.role == Role.CUSTOM and not self.custom_role:
            raise ValueError("customRole is required when role is custom")
        return self


class LoginRequest(ApiModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        v = strip_text(v)
        return v.lower() if isinstance(v, str) else v


class UserUpdate(ApiModel):
    """Request schema for an admin updating a user."""

    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    role: Role
    password: str | None = Field(default=None, min_length=6, max_length=128)

    @field_validator("name", "email", mode="before")
    @classmethod
    def strip_fields(cls, v):
        return strip_text(v)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()


class ChangePasswordRequest(ApiModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6, max_length=128)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self) -> "ChangePasswordRequest":
        if self.confirm_password != self.new_password:
            raise ValueError("confirmPassword must match newPassword")
        return self
