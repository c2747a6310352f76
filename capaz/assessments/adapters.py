"""Read-time upgrades of historical response rows to the canonical shape.

Older snapshots hold certifications as a single string or a JSON-array string,
and intent as the boolean ``willing_to_use``. Rows are never rewritten; they
are upgraded every time they are read.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from capaz.db.models import AssessmentModel, AssessmentResponseModel, SkillModel
from capaz.models import (
    AssessmentSnapshot,
    CapabilityResponse,
    Certification,
    SkillRef,
    coerce_certifications,
)

logger = logging.getLogger(__name__)

# willing_to_use -> future_willingness
LEGACY_WILLINGNESS = {False: 1, True: 3}


def upgrade_certifications(raw: Any) -> list[Certification]:
    """Return the structured certification list for any stored shape.

    Entries that cannot be read as a certification (no name) are dropped.
    """
    items = coerce_certifications(raw)
    if not isinstance(items, list):
        logger.warning(f"Unreadable certifications value of type {type(raw).__name__}")
        return []

    certifications = []
    for item in items:
        try:
            certifications.append(Certification.model_validate(item))
        except PydanticValidationError:
            logger.warning(f"Dropping unreadable certification entry: {item!r}")
    return certifications


def upgrade_future_willingness(future_willingness: int | None, willing_to_use: bool | None) -> int | None:
    """Canonical ordinal intent; falls back to the legacy boolean when unset."""
    if future_willingness is not None:
        return future_willingness
    if willing_to_use is None:
        return None
    return LEGACY_WILLINGNESS[bool(willing_to_use)]


def skill_ref(skill: SkillModel | None) -> SkillRef | None:
    if skill is None:
        return None
    category = skill.__dict__.get("category")
    return SkillRef(
        id=skill.id,
        name=skill.name,
        category_id=skill.category_id,
        category_name=category.name if category is not None else None,
        is_active=skill.is_active,
    )


def response_from_row(row: AssessmentResponseModel, skill: SkillModel | None = None) -> CapabilityResponse:
    return CapabilityResponse(
        id=row.id,
        skill_id=row.skill_id,
        level=row.level,
        interest_level=row.interest_level,
        growth_desire=row.growth_desire,
        use_frequency=row.use_frequency,
        mentor_level=row.mentor_level,
        lead_level=row.lead_level,
        years_experience=row.years_experience,
        last_used=row.last_used,
        training_source=row.training_source,
        certifications=upgrade_certifications(row.certifications),
        future_willingness=upgrade_future_willingness(row.future_willingness, row.willing_to_use),
        mobility_for_skill=bool(row.mobility_for_skill),
        notes=row.notes,
        skill=skill_ref(skill),
    )


def snapshot_from_row(assessment: AssessmentModel) -> AssessmentSnapshot:
    """Build the read model; ``responses`` (and their skills) must already be loaded."""
    return AssessmentSnapshot(
        id=assessment.id,
        user_id=assessment.user_id,
        version=assessment.version,
        is_complete=assessment.is_complete,
        is_current=assessment.is_current,
        submitted_at=assessment.submitted_at,
        notes=assessment.notes,
        responses=[
            response_from_row(row, row.__dict__.get("skill"))
            for row in assessment.responses
        ],
    )
