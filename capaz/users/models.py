"""Read models for users."""

from __future__ import annotations

from datetime import datetime

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from capaz.models import CamelModel


class _FromRow(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class PersonRef(_FromRow):
    id: str
    first_name: str
    last_name: str


class UserOut(_FromRow):
    id: str
    email: str
    first_name: str
    last_name: str
    job_title: str | None = None
    department: str | None = None
    language: str | None = None
    timezone: str | None = None
    role: str
    organization_id: str
    manager_id: str | None = None
    is_trainer: bool = False
    is_project_lead: bool = False
    is_mentor: bool = False
    is_active: bool = True
    last_login: datetime | None = None


class UserProfile(UserOut):
    manager: PersonRef | None = None
    direct_reports: list[PersonRef] = Field(default_factory=list)


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
