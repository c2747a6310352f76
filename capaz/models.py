"""Capaz Pydantic models for type-safe data validation.

Wire format is camelCase (``skillId``, ``interestLevel``); attributes are
snake_case. Numeric capability dimensions are bounds-checked here and never
clamped.
"""

from __future__ import annotations

import json
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


class Role(str, Enum):
    """User roles, lowest to highest privilege."""

    USER = "USER"
    MANAGER = "MANAGER"
    ORG_ADMIN = "ORG_ADMIN"
    PLATFORM_ADMIN = "PLATFORM_ADMIN"

    @property
    def rank(self) -> int:
        return _ROLE_LADDER.index(self)


_ROLE_LADDER = [Role.USER, Role.MANAGER, Role.ORG_ADMIN, Role.PLATFORM_ADMIN]


class OrganizationType(str, Enum):
    """Position of an organization in the tenant tree."""

    PLATFORM_OWNER = "PLATFORM_OWNER"
    MSP_RESELLER = "MSP_RESELLER"
    END_CLIENT = "END_CLIENT"


class CamelModel(BaseModel):
    """Base model accepting and emitting camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Capability vector --------------------------------------------------------


class Certification(CamelModel):
    """A held certification attached to one skill rating."""

    name: str = Field(..., min_length=1)
    obtained: str = ""
    needs_renewal: bool = False


def coerce_certifications(value: Any) -> list[Any]:
    """Accept every certification shape the API has ever sent.

    - structured list (canonical)
    - JSON-array string, e.g. ``'[{"name": "CCNA"}]'``
    - plain single-name string, e.g. ``"CCNA"``

    Bare names inside a list are promoted to ``{"name": ...}``.
    """
    if value is None:
        return []

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        if text.startswith("["):
            try:
                value = json.loads(text)
            except json.JSONDecodeError:
                return [{"name": text}]
        else:
            return [{"name": text}]

    if not isinstance(value, list):
        # Let pydantic report the type error against the field
        return value

    return [{"name": item} if isinstance(item, str) else item for item in value]


class CapabilityResponseIn(CamelModel):
    """One skill rating as submitted. Optional dimensions stay None until stored."""

    skill_id: str = Field(..., min_length=1)

    # Capability vector dimensions
    level: int = Field(..., ge=0, le=5)
    interest_level: int | None = Field(None, ge=1, le=5)
    growth_desire: int | None = Field(None, ge=1, le=5)
    use_frequency: int | None = Field(None, ge=1, le=5)
    mentor_level: int | None = Field(None, ge=0, le=3)
    lead_level: int | None = Field(None, ge=0, le=3)

    # Experience
    years_experience: int | None = Field(None, ge=0, le=50)
    last_used: datetime | None = None

    # Training & certs
    training_source: str | None = None
    certifications: list[Certification] = Field(default_factory=list)

    # 1=Don't consider me, 2=If needed, 3=Happy to, 4=Highly eager
    future_willingness: int | None = Field(None, ge=1, le=4)
    mobility_for_skill: bool | None = None

    notes: str | None = None

    @field_validator("certifications", mode="before")
    @classmethod
    def normalize_certifications(cls, value: Any) -> Any:
        return coerce_certifications(value)


class AssessmentSubmission(CamelModel):
    """Body of ``POST /assessments``."""

    responses: list[CapabilityResponseIn]
    notes: str | None = None


# Read models ---------------------------------------------------------------


class SkillRef(CamelModel):
    """Skill summary embedded in a response; ``is_active`` may be False for history."""

    id: str
    name: str
    category_id: str
    category_name: str | None = None
    is_active: bool = True


class CapabilityResponse(CamelModel):
    """Canonical stored rating, after legacy shapes are upgraded."""

    id: str
    skill_id: str
    level: int
    interest_level: int | None = None
    growth_desire: int | None = None
    use_frequency: int | None = None
    mentor_level: int | None = None
    lead_level: int | None = None
    years_experience: int | None = None
    last_used: datetime | None = None
    training_source: str | None = None
    certifications: list[Certification] = Field(default_factory=list)
    future_willingness: int | None = None
    mobility_for_skill: bool = False
    notes: str | None = None
    skill: SkillRef | None = None


class AssessmentSnapshot(CamelModel):
    """One immutable assessment version with its responses."""

    id: str
    user_id: str
    version: int
    is_complete: bool
    is_current: bool
    submitted_at: datetime | None = None
    notes: str | None = None
    responses: list[CapabilityResponse] = Field(default_factory=list)


# Catalog ---------------------------------------------------------------------

LEVEL_KEYS = frozenset(str(level) for level in range(6))


def _check_level_keys(value: dict[str, str]) -> dict[str, str]:
    invalid = sorted(k for k in value if k not in LEVEL_KEYS)
    if invalid:
        raise ValueError(f"level keys must be 0-5, got {', '.join(invalid)}")
    return value


class CategoryCreate(CamelModel):
    name: str = Field(..., min_length=1)
    description: str | None = None
    icon: str | None = None
    parent_category_id: str | None = None
    sort_order: int = 0


class CategoryUpdate(CamelModel):
    name: str | None = Field(None, min_length=1)
    description: str | None = None
    icon: str | None = None
    parent_category_id: str | None = None
    sort_order: int | None = None


class SkillCreate(CamelModel):
    name: str = Field(..., min_length=1)
    category_id: str = Field(..., min_length=1)
    description: str | None = None
    tooltip: str | None = None
    level_descriptions: dict[str, str] = Field(default_factory=dict)
    is_certifiable: bool = False
    certification_names: list[str] = Field(default_factory=list)
    sort_order: int = 0

    @field_validator("level_descriptions")
    @classmethod
    def check_level_keys(cls, value: dict[str, str]) -> dict[str, str]:
        return _check_level_keys(value)


class SkillUpdate(CamelModel):
    name: str | None = Field(None, min_length=1)
    category_id: str | None = Field(None, min_length=1)
    description: str | None = None
    tooltip: str | None = None
    level_descriptions: dict[str, str] | None = None
    is_certifiable: bool | None = None
    certification_names: list[str] | None = None
    sort_order: int | None = None

    @field_validator("level_descriptions")
    @classmethod
    def check_level_keys(cls, value: dict[str, str] | None) -> dict[str, str] | None:
        if value is not None:
            _check_level_keys(value)
        return value


# Users ---------------------------------------------------------------------


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    organization_slug: str = Field(..., min_length=1)
    job_title: str | None = None
    department: str | None = None


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ProfileUpdate(CamelModel):
    first_name: str | None = Field(None, min_length=1)
    last_name: str | None = Field(None, min_length=1)
    job_title: str | None = None
    department: str | None = None
    language: str | None = None
    timezone: str | None = None


class ManagerAssignment(CamelModel):
    manager_id: str | None = None
