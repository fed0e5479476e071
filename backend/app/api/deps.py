# backend/app/api/deps.py
"""
Módulo de dependencias para FastAPI.

Este archivo centraliza todas las dependencias que pueden ser inyectadas
en los endpoints de la API: sesión de base de datos, configuración y
control de acceso al panel de administración.

La autorización se comprueba como dependencia, antes de cualquier acceso a datos:
- get_current_user: cualquier usuario con sesión válida (admin o autor)
- require_admin: solo usuarios con rol 'admin'
Ambas responden 401 {"error": "Unauthorized"} si no se cumplen.
"""

from typing import AsyncGenerator, Optional
from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.database import AsyncSessionLocal
from app.core.config import settings
from app.core import security
from app.crud import user_crud
from app.db.models.user_model import User

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependencia de FastAPI para obtener una sesión de base de datos asíncrona.
    Se asegura de que la sesión se cierre siempre después de la petición.
    """
    async with AsyncSessionLocal() as session:
        yield session

def get_settings():
    """
    Dependencia de FastAPI para obtener el objeto de configuración.
    """
    return settings


def _extract_token(request: Request) -> Optional[str]:
    """Busca el token de sesión en la cookie y, si no está, en Authorization: Bearer."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token:
        return token
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials
    return None


def _unauthorized() -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


async def get_current_user(request: Request, db: AsyncSession = Depends(get_db)) -> User:
    """
    Valida el token de sesión y devuelve el usuario autenticado.
    """
    token = _extract_token(request)
    if not token:
        raise _unauthorized()

    payload = security.decode_access_token(token)
    if not payload or not payload.get("sub"):
        raise _unauthorized()

    user = await user_crud.get_user(db, user_id=payload["sub"])
    if user is None:
        raise _unauthorized()
    return user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """
    Restringe el endpoint a administradores.
    """
    if not current_user.is_admin:
        raise _unauthorized()
    return current_user
