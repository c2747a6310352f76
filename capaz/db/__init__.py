"""Database layer for Capaz with async SQLAlchemy."""

from capaz.db.connection import get_db, get_session, init_db
from capaz.db.models import (
    AssessmentModel,
    AssessmentResponseModel,
    Base,
    OrganizationModel,
    SkillCategoryModel,
    SkillModel,
    UserModel,
)

__all__ = [
    "Base",
    "OrganizationModel",
    "UserModel",
    "SkillCategoryModel",
    "SkillModel",
    "AssessmentModel",
    "AssessmentResponseModel",
    "get_db",
    "get_session",
    "init_db",
]
