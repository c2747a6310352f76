"""SQLAlchemy async database models for Capaz.

Maps to PostgreSQL schema (SQLite for tests). Assessments are versioned
snapshots: at most one current row per user, enforced by a partial unique index.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func


def _new_id() -> str:
    return str(uuid4())


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class OrganizationModel(Base):
    """Tenant node: platform owner, MSP reseller or end client."""

    __tablename__ = "organizations"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    type: Mapped[str] = mapped_column(String(32), nullable=False, default="END_CLIENT")
    parent_org_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("organizations.id"), index=True
    )
    description: Mapped[str | None] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        CheckConstraint(
            "type IN ('PLATFORM_OWNER', 'MSP_RESELLER', 'END_CLIENT')",
            name="check_org_type",
        ),
        CheckConstraint(
            "type != 'PLATFORM_OWNER' OR parent_org_id IS NULL",
            name="check_platform_owner_is_root",
        ),
        CheckConstraint(
            "type != 'END_CLIENT' OR parent_org_id IS NOT NULL",
            name="check_end_client_has_parent",
        ),
    )


class UserModel(Base):
    """Platform user. Email is stored lower-cased so uniqueness is case-insensitive."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)
    hashed_password: Mapped[str | None] = mapped_column(Text)
    first_name: Mapped[str] = mapped_column(Text, nullable=False)
    last_name: Mapped[str] = mapped_column(Text, nullable=False)
    job_title: Mapped[str | None] = mapped_column(Text)
    department: Mapped[str | None] = mapped_column(Text, index=True)
    language: Mapped[str | None] = mapped_column(String(16))
    timezone: Mapped[str | None] = mapped_column(String(64))

    role: Mapped[str] = mapped_column(String(32), nullable=False, default="USER")
    organization_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("organizations.id"), nullable=False, index=True
    )
    manager_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("users.id"), index=True
    )

    # Display metadata only
    is_trainer: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_project_lead: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_mentor: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_login: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        CheckConstraint(
            "role IN ('PLATFORM_ADMIN', 'ORG_ADMIN', 'MANAGER', 'USER')",
            name="check_user_role",
        ),
        Index("idx_users_org_active", "organization_id", "is_active"),
    )


class SkillCategoryModel(Base):
    """Skill category, either private to an organization or a shared template."""

    __tablename__ = "skill_categories"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    organization_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("organizations.id"), index=True
    )
    is_template: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    template_type: Mapped[str | None] = mapped_column(String(32))
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    icon: Mapped[str | None] = mapped_column(String(64))
    parent_category_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("skill_categories.id"), index=True
    )
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    skills: Mapped[list[SkillModel]] = relationship(back_populates="category")

    __table_args__ = (
        # Templates are never organization-scoped; org categories are never templates
        CheckConstraint(
            "(is_template AND organization_id IS NULL) "
            "OR (NOT is_template AND organization_id IS NOT NULL)",
            name="check_category_scope",
        ),
        Index("idx_categories_org_active", "organization_id", "is_active"),
    )


class SkillModel(Base):
    """A rateable skill inside a category."""

    __tablename__ = "skills"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    category_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("skill_categories.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    tooltip: Mapped[str | None] = mapped_column(Text)

    # {"0": "...", ..., "5": "..."}
    level_descriptions: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    is_certifiable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    certification_names: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    category: Mapped[SkillCategoryModel] = relationship(back_populates="skills")


class AssessmentModel(Base):
    """Immutable self-assessment snapshot, one version per submission."""

    __tablename__ = "assessments"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id"), nullable=False, index=True
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    is_complete: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_current: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    responses: Mapped[list[AssessmentResponseModel]] = relationship(
        back_populates="assessment",
        cascade="all, delete-orphan",
        order_by="AssessmentResponseModel.position",
    )

    __table_args__ = (
        CheckConstraint("version >= 1", name="check_assessment_version_positive"),
        UniqueConstraint("user_id", "version", name="uq_assessment_user_version"),
        # At most one current assessment per user
        Index(
            "idx_assessment_current_unique",
            "user_id",
            unique=True,
            postgresql_where=text("is_current = true"),
            sqlite_where=text("is_current = 1"),
        ),
    )


class AssessmentResponseModel(Base):
    """One skill's capability vector inside an assessment."""

    __tablename__ = "assessment_responses"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    assessment_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("assessments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    skill_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("skills.id"), nullable=False, index=True
    )
    # Submission order within the snapshot
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Capability vector dimensions
    level: Mapped[int] = mapped_column(Integer, nullable=False)
    interest_level: Mapped[int | None] = mapped_column(Integer)
    growth_desire: Mapped[int | None] = mapped_column(Integer)
    use_frequency: Mapped[int | None] = mapped_column(Integer)
    mentor_level: Mapped[int | None] = mapped_column(Integer)
    lead_level: Mapped[int | None] = mapped_column(Integer)

    # Experience
    years_experience: Mapped[int | None] = mapped_column(Integer)
    last_used: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Training & certifications
    training_source: Mapped[str | None] = mapped_column(Text)
    # List of {"name", "obtained", "needsRenewal"}; legacy rows may hold a bare string
    certifications: Mapped[Any] = mapped_column(JSON, default=list, nullable=True)

    # Intent: 1=don't consider me, 2=if needed, 3=happy to, 4=highly eager
    future_willingness: Mapped[int | None] = mapped_column(Integer)
    mobility_for_skill: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # Legacy boolean predecessor of future_willingness, never written
    willing_to_use: Mapped[bool | None] = mapped_column(Boolean)

    notes: Mapped[str | None] = mapped_column(Text)

    assessment: Mapped[AssessmentModel] = relationship(back_populates="responses")
    skill: Mapped[SkillModel] = relationship()

    __table_args__ = (
        UniqueConstraint("assessment_id", "skill_id", name="uq_response_assessment_skill"),
        CheckConstraint("level BETWEEN 0 AND 5", name="check_response_level"),
        CheckConstraint(
            "interest_level IS NULL OR interest_level BETWEEN 1 AND 5",
            name="check_response_interest",
        ),
        CheckConstraint(
            "growth_desire IS NULL OR growth_desire BETWEEN 1 AND 5",
            name="check_response_growth",
        ),
        CheckConstraint(
            "use_frequency IS NULL OR use_frequency BETWEEN 1 AND 5",
            name="check_response_frequency",
        ),
        CheckConstraint(
            "mentor_level IS NULL OR mentor_level BETWEEN 0 AND 3",
            name="check_response_mentor",
        ),
        CheckConstraint(
            "lead_level IS NULL OR lead_level BETWEEN 0 AND 3",
            name="check_response_lead",
        ),
        CheckConstraint(
            "years_experience IS NULL OR years_experience BETWEEN 0 AND 50",
            name="check_response_years",
        ),
        CheckConstraint(
            "future_willingness IS NULL OR future_willingness BETWEEN 1 AND 4",
            name="check_response_willingness",
        ),
    )
