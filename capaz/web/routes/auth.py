"""Authentication routes: registration, login and current profile."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from capaz.access.policy import Identity
from capaz.db.connection import get_db
from capaz.models import LoginRequest, RegisterRequest
from capaz.users import service as users
from capaz.users.models import UserOut
from capaz.web.auth import get_current_identity, issue_token

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(data: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Register into an existing organization by slug. New users get the USER role."""
    user = await users.register_user(db, data)
    return {"user": UserOut.model_validate(user), "token": issue_token(user)}


@router.post("/login")
async def login(data: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await users.authenticate_user(db, data.email, data.password)
    return {"user": UserOut.model_validate(user), "token": issue_token(user)}


@router.get("/me")
async def me(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    profile = await users.get_profile(db, identity, identity.user_id)
    return {"user": profile}
