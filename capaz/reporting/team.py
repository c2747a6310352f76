"""Team-level views over current assessments."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from capaz.access.policy import TEAM_VIEW_ROLES, Identity, require_org_scope, require_role
from capaz.assessments.snapshots import AssessmentHistory
from capaz.core.errors import NotFoundError
from capaz.db.models import SkillModel, UserModel
from capaz.models import AssessmentSnapshot
from capaz.reporting.rollup import MatrixRow, build_matrix_row, category_rollup


@dataclass(slots=True)
class TeamMember:
    """Active user with their current assessment (None if never submitted)."""

    id: str
    first_name: str
    last_name: str
    email: str
    job_title: str | None
    department: str | None
    assessment: AssessmentSnapshot | None = None
    rollup: dict[str, float] = field(default_factory=dict)

    @property
    def display(self) -> dict:
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "jobTitle": self.job_title,
            "department": self.department,
        }

    def to_dict(self) -> dict:
        return {
            **self.display,
            "email": self.email,
            "assessment": self.assessment.model_dump(mode="json", by_alias=True) if self.assessment else None,
            "categoryRollup": self.rollup,
        }


def skill_categories(snapshot: AssessmentSnapshot | None) -> dict[str, str]:
    """skill id -> category id for the skills rated in ``snapshot``."""
    if snapshot is None:
        return {}
    return {r.skill_id: r.skill.category_id for r in snapshot.responses if r.skill is not None}


async def fetch_team(session: AsyncSession, organization_id: str) -> list[TeamMember]:
    """Every active user of the organization with their current assessment.

    Sorted by last name, then first name. An organization without active users
    yields an empty list.
    """
    stmt = (
        select(UserModel)
        .where(UserModel.organization_id == organization_id, UserModel.is_active.is_(True))
        .order_by(UserModel.last_name.asc(), UserModel.first_name.asc())
    )
    users = (await session.execute(stmt)).scalars().all()
    if not users:
        return []

    current = await AssessmentHistory(session).current_for_users([u.id for u in users])

    team = []
    for user in users:
        snapshot = current.get(user.id)
        team.append(
            TeamMember(
                id=user.id,
                first_name=user.first_name,
                last_name=user.last_name,
                email=user.email,
                job_title=user.job_title,
                department=user.department,
                assessment=snapshot,
                rollup=category_rollup(snapshot.responses, skill_categories(snapshot)) if snapshot else {},
            )
        )
    return team


def build_team_matrix(team: Iterable[TeamMember], skills: Iterable[SkillModel]) -> list[MatrixRow]:
    """User x skill grid of levels; unrated cells hold NOT_RATED (None), not 0."""
    skill_ids = [s.id for s in skills]
    return [
        build_matrix_row(
            member.display,
            member.assessment.responses if member.assessment else [],
            skill_ids,
        )
        for member in team
    ]


async def team_for(
    session: AsyncSession, identity: Identity, organization_id: str | None = None
) -> list[TeamMember]:
    """Team view gated to managers and above.

    Only platform admins may name an organization other than their own.
    """
    require_role(identity, TEAM_VIEW_ROLES)
    target = organization_id or identity.organization_id
    require_org_scope(identity, target, "Organization")
    return await fetch_team(session, target)


async def user_assessment(
    session: AsyncSession, identity: Identity, user_id: str
) -> tuple[UserModel, AssessmentSnapshot]:
    """One user's current assessment, scoped to the caller's organization.

    Raises:
        AuthorizationError: Caller is below manager
        NotFoundError: Unknown user, other organization, or no current assessment
    """
    require_role(identity, TEAM_VIEW_ROLES)

    user = await session.get(UserModel, user_id)
    if user is None:
        raise NotFoundError("Assessment not found")
    require_org_scope(identity, user.organization_id, "Assessment")

    snapshot = await AssessmentHistory(session).current(user_id)
    if snapshot is None:
        raise NotFoundError("Assessment not found")
    return user, snapshot
