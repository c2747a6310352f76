"""Assessment routes: self-service history and submission, plus manager views."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from capaz.access.policy import TEAM_VIEW_ROLES, Identity
from capaz.assessments.snapshots import AssessmentHistory
from capaz.catalog.models import SkillOut
from capaz.catalog.repository import list_visible_skills
from capaz.db.connection import get_db
from capaz.models import AssessmentSubmission
from capaz.reporting import team as team_views
from capaz.reporting.rollup import category_rollup, summarize
from capaz.web.auth import get_current_identity, require_roles

router = APIRouter(prefix="/assessments", tags=["assessments"])


@router.get("")
async def list_assessments(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """Full version history of the caller, newest first."""
    assessments = await AssessmentHistory(db).history(identity.user_id)
    return {"assessments": assessments}


@router.get("/current")
async def current_assessment(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    assessment = await AssessmentHistory(db).current(identity.user_id)
    return {"assessment": assessment}


@router.get("/current/summary")
async def current_summary(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """Per-category averages (radar chart) and headline numbers."""
    assessment = await AssessmentHistory(db).current(identity.user_id)
    skills = await list_visible_skills(db, identity.organization_id)
    responses = assessment.responses if assessment else []

    rollup = category_rollup(responses, team_views.skill_categories(assessment))
    names = {r.skill.category_id: r.skill.category_name for r in responses if r.skill is not None}

    return {
        "summary": summarize(responses, len(skills)).to_dict(),
        "categories": [
            {"categoryId": category_id, "categoryName": names.get(category_id), "average": average}
            for category_id, average in rollup.items()
        ],
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_assessment(
    submission: AssessmentSubmission,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    assessment = await AssessmentHistory(db).submit(identity.user_id, submission)
    return {"assessment": assessment}


@router.get("/team")
async def team_assessments(
    organization_id: str | None = Query(None, alias="organizationId"),
    identity: Identity = Depends(require_roles(*TEAM_VIEW_ROLES)),
    db: AsyncSession = Depends(get_db),
):
    """Every active user of the organization with their current assessment."""
    team = await team_views.team_for(db, identity, organization_id)
    return {"users": [member.to_dict() for member in team]}


@router.get("/matrix")
async def team_matrix(
    organization_id: str | None = Query(None, alias="organizationId"),
    identity: Identity = Depends(require_roles(*TEAM_VIEW_ROLES)),
    db: AsyncSession = Depends(get_db),
):
    """User x skill grid; ``null`` cells are "not rated"."""
    team = await team_views.team_for(db, identity, organization_id)
    skills = await list_visible_skills(db, organization_id or identity.organization_id)
    rows = team_views.build_team_matrix(team, skills)
    return {
        "skills": [SkillOut.model_validate(s) for s in skills],
        "rows": [{"user": row.user, "levels": row.levels} for row in rows],
    }


@router.get("/user/{user_id}")
async def user_assessment(
    user_id: str,
    identity: Identity = Depends(require_roles(*TEAM_VIEW_ROLES)),
    db: AsyncSession = Depends(get_db),
):
    user, assessment = await team_views.user_assessment(db, identity, user_id)
    return {
        "assessment": assessment,
        "user": {"firstName": user.first_name, "lastName": user.last_name, "jobTitle": user.job_title},
    }
