"""Versioned assessment snapshots.

Submitting closes the user's current snapshot and inserts the next version in
one transaction. Enforces invariant: at most one current assessment per user
(partial unique index on ``user_id WHERE is_current``).
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from capaz.assessments.adapters import snapshot_from_row
from capaz.catalog.repository import visible_skill_ids
from capaz.core.errors import ConflictError, ValidationError, errors_from_pydantic
from capaz.db.models import AssessmentModel, AssessmentResponseModel, SkillModel, UserModel
from capaz.models import AssessmentSnapshot, AssessmentSubmission, CapabilityResponseIn

logger = structlog.get_logger(__name__)

# Stored when a submission omits the dimension
RESPONSE_DEFAULTS: dict[str, Any] = {
    "interest_level": 3,
    "growth_desire": 3,
    "use_frequency": 1,
    "mentor_level": 0,
    "lead_level": 0,
    "years_experience": 0,
    "future_willingness": 3,
    "mobility_for_skill": False,
}


def parse_submission(payload: dict[str, Any]) -> AssessmentSubmission:
    """Validate a raw submission body.

    Raises:
        ValidationError: naming each offending field, e.g. ``responses[0].level``
    """
    try:
        return AssessmentSubmission.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(errors=errors_from_pydantic(exc.errors())) from exc


def _response_row(position: int, response: CapabilityResponseIn) -> AssessmentResponseModel:
    values = response.model_dump(exclude={"certifications"})
    for field, default in RESPONSE_DEFAULTS.items():
        if values.get(field) is None:
            values[field] = default

    return AssessmentResponseModel(
        position=position,
        certifications=[c.model_dump(by_alias=True) for c in response.certifications],
        **values,
    )


class AssessmentHistory:
    """Append-only assessment history for users."""

    def __init__(self, session: AsyncSession):
        """Initialize with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def submit(self, user_id: str, submission: AssessmentSubmission) -> AssessmentSnapshot:
        """Store ``submission`` as the user's new current assessment.

        Args:
            user_id: Owner of the assessment
            submission: Validated responses and notes

        Returns:
            The new snapshot (version = previous max + 1)

        Raises:
            ValidationError: Duplicate skill ids, or ids the owner's organization
                cannot rate (nothing written)
            ConflictError: A concurrent submission for the same user won
        """
        await self._check_skills(user_id, submission.responses)

        try:
            # Step 1: Close current snapshot (if exists)
            await self.session.execute(
                update(AssessmentModel)
                .where(AssessmentModel.user_id == user_id, AssessmentModel.is_current.is_(True))
                .values(is_current=False)
            )

            # Step 2: Next version
            max_version = (
                await self.session.execute(
                    select(func.max(AssessmentModel.version)).where(AssessmentModel.user_id == user_id)
                )
            ).scalar_one_or_none()
            version = (max_version or 0) + 1

            # Step 3: Insert new current snapshot with all responses
            assessment = AssessmentModel(
                user_id=user_id,
                version=version,
                is_current=True,
                is_complete=True,
                submitted_at=datetime.now(timezone.utc),
                notes=submission.notes,
                responses=[_response_row(i, r) for i, r in enumerate(submission.responses)],
            )
            self.session.add(assessment)
            await self.session.flush()
            assessment_id = assessment.id

            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            logger.warning("submission_conflict", user_id=user_id, error=str(exc.orig))
            raise ConflictError() from exc
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "assessment_submitted",
            user_id=user_id,
            version=version,
            responses=len(submission.responses),
        )
        return await self._load(assessment_id)

    async def current(self, user_id: str) -> AssessmentSnapshot | None:
        """Return the user's current assessment, or None if they never submitted."""
        stmt = self._snapshot_query().where(
            AssessmentModel.user_id == user_id,
            AssessmentModel.is_current.is_(True),
        )
        row = (await self.session.execute(stmt)).scalar_one_or_none()
        return snapshot_from_row(row) if row else None

    async def history(self, user_id: str) -> list[AssessmentSnapshot]:
        """Return every version for the user, newest first."""
        stmt = (
            self._snapshot_query()
            .where(AssessmentModel.user_id == user_id)
            .order_by(AssessmentModel.version.desc())
        )
        rows = (await self.session.execute(stmt)).scalars().all()
        return [snapshot_from_row(row) for row in rows]

    async def current_for_users(self, user_ids: Sequence[str]) -> dict[str, AssessmentSnapshot]:
        """Current snapshots keyed by user id; users without one are absent."""
        if not user_ids:
            return {}
        stmt = self._snapshot_query().where(
            AssessmentModel.user_id.in_(list(user_ids)),
            AssessmentModel.is_current.is_(True),
        )
        rows = (await self.session.execute(stmt)).scalars().all()
        return {row.user_id: snapshot_from_row(row) for row in rows}

    async def count_current(self, user_id: str) -> int:
        """Number of current rows for the user (0 or 1 while the index holds)."""
        stmt = select(func.count()).where(
            AssessmentModel.user_id == user_id,
            AssessmentModel.is_current.is_(True),
        )
        return (await self.session.execute(stmt)).scalar_one()

    async def _load(self, assessment_id: str) -> AssessmentSnapshot:
        stmt = self._snapshot_query().where(AssessmentModel.id == assessment_id)
        row = (await self.session.execute(stmt)).scalar_one()
        return snapshot_from_row(row)

    @staticmethod
    def _snapshot_query():
        return (
            select(AssessmentModel)
            .options(
                selectinload(AssessmentModel.responses)
                .selectinload(AssessmentResponseModel.skill)
                .selectinload(SkillModel.category)
            )
            .execution_options(populate_existing=True)
        )

    async def _check_skills(self, user_id: str, responses: Sequence[CapabilityResponseIn]) -> None:
        """Reject duplicates and skills outside the owner's visible, active catalog.

        Foreign-tenant skills get the same "Unknown skill" as missing ones.
        """
        errors: list[dict[str, str]] = []

        seen: dict[str, int] = {}
        for index, response in enumerate(responses):
            if response.skill_id in seen:
                errors.append({
                    "path": f"responses[{index}].skillId",
                    "message": f"Duplicate skill, already rated in responses[{seen[response.skill_id]}]",
                })
            else:
                seen[response.skill_id] = index

        if seen:
            organization_id = (
                await self.session.execute(select(UserModel.organization_id).where(UserModel.id == user_id))
            ).scalar_one()
            known = await visible_skill_ids(self.session, organization_id, seen)
            for skill_id, index in seen.items():
                if skill_id not in known:
                    errors.append({"path": f"responses[{index}].skillId", "message": "Unknown skill"})

        if errors:
            raise ValidationError(errors=errors)
