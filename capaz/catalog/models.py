"""Read models for the skill catalog."""

from __future__ import annotations

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from capaz.models import CamelModel


class _FromRow(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class SkillOut(_FromRow):
    id: str
    category_id: str
    name: str
    description: str | None = None
    tooltip: str | None = None
    level_descriptions: dict[str, str] = Field(default_factory=dict)
    is_certifiable: bool = False
    certification_names: list[str] = Field(default_factory=list)
    sort_order: int = 0
    is_active: bool = True


class ChildCategoryOut(_FromRow):
    id: str
    name: str
    description: str | None = None
    icon: str | None = None
    sort_order: int = 0


class CategoryOut(_FromRow):
    id: str
    organization_id: str | None = None
    is_template: bool = False
    template_type: str | None = None
    name: str
    description: str | None = None
    icon: str | None = None
    parent_category_id: str | None = None
    sort_order: int = 0
    is_active: bool = True


class CatalogCategory(CategoryOut):
    """Category with its active skills and active direct children."""

    skills: list[SkillOut] = Field(default_factory=list)
    child_categories: list[ChildCategoryOut] = Field(default_factory=list)
