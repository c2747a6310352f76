"""Capaz API route modules.

Each module exports a `router` object (APIRouter instance); the app mounts
them under the configured API prefix.

Usage:
    from capaz.web.routes import assessments
    app.include_router(assessments.router, prefix="/api/v1")
"""

from capaz.web.routes import assessments, auth, health, skills, users

__all__ = ["assessments", "auth", "health", "skills", "users"]
