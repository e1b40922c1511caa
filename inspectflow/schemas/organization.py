"""Organization-related Pydantic schemas."""

from pydantic import EmailStr, Field, field_validator

from inspectflow.enums import OrganizationSize
from inspectflow.schemas.base import ApiModel, Document, strip_text

PHONE_PATTERN = r"^\+?[1-9]\d{0,15}$"


class CustomRole(ApiModel):
    """Organization-defined role with an explicit permission list."""

    name: str
    permissions: list[str] = Field(default_factory=list)


class OrganizationSettings(ApiModel):
    allow_user_invites: bool = True
    require_approver_review: bool = True


class Organization(Document):
    """Tenant owning users, workflows and inspections."""

    name: str
    address: str
    phone: str
    email: str
    industry: str | None = None
    size: OrganizationSize = OrganizationSize.SMALL
    custom_roles: list[CustomRole] | None = None
    settings: OrganizationSettings = Field(default_factory=OrganizationSettings)
    is_default: bool = False

    def get_custom_role(self, name: str) -> CustomRole | None:
        for role in self.custom_roles or []:
            if role.name == name:
                return role
        return None


# =============================================================================
# Request Schemas
# =============================================================================


class OrganizationUpdate(ApiModel):
    """Request schema for updating an organization profile."""

    name: str = Field(min_length=2, max_length=200)
    address: str = Field(min_length=5, max_length=500)
    phone: str = Field(pattern=PHONE_PATTERN)
    email: EmailStr

    @field_validator("name", "address", "phone", "email", mode="before")
    @classmethod
    def strip_fields(cls, v):
        return strip_text(v)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return v.lower()


class OrganizationCreate(OrganizationUpdate):
    """Request schema for registering an organization."""

    industry: str | None = Field(default=None, max_length=100)
    size: OrganizationSize | None = None
    settings: OrganizationSettings | None = None


class CustomRoleCreate(ApiModel):
    """Request schema for adding a custom role to an organization."""

    name: str = Field(min_length=2, max_length=50)
    permissions: list[str] = Field(min_length=1)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return strip_text(v)
