"""
Endpoints de autenticación del panel.

El login deja el token de sesión en una cookie HttpOnly; el mismo token se
acepta también en la cabecera Authorization: Bearer.
"""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.core.config import settings
from app.db.models.user_model import User
from app.schemas import auth_schema
from app.schemas.base_schema import SuccessResponse
from app.services.auth_service import auth_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/login", response_model=auth_schema.LoginResponse)
async def login(
    credentials: auth_schema.LoginRequest,
    response: Response,
    db: AsyncSession = Depends(deps.get_db),
) -> auth_schema.LoginResponse:
    user = await auth_service.login(db, email=credentials.email, password=credentials.password)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=auth_service.create_user_token(user),
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return auth_schema.LoginResponse(user=auth_schema.UserResponse.model_validate(user))


@router.post("/logout", response_model=SuccessResponse)
async def logout(response: Response) -> SuccessResponse:
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME)
    return SuccessResponse()


@router.get("/me", response_model=auth_schema.UserResponse)
async def read_current_user(current_user: User = Depends(deps.get_current_user)) -> auth_schema.UserResponse:
    return current_user
