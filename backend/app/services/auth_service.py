# backend/app/services/auth_service.py
"""
Servicio de autenticación del panel.

Valida credenciales contra los hashes bcrypt de la tabla users y emite el
token de sesión firmado que el endpoint de login guarda en una cookie.
"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from app.core import security
from app.crud import user_crud
from app.db.models.user_model import User

logger = logging.getLogger(__name__)


class AuthService:

    async def authenticate_user(self, db: AsyncSession, email: str, password: str) -> Optional[User]:
        """Devuelve el usuario si email y contraseña coinciden, None en caso contrario."""
        user = await user_crud.get_user_by_email(db, email=email)
        if not user:
            return None
        if not security.verify_password(password, user.password_hash):
            return None
        return user

    async def login(self, db: AsyncSession, email: str, password: str) -> User:
        user = await self.authenticate_user(db, email=email, password=password)
        if user is None:
            logger.warning(f"Intento de inicio de sesión fallido para {email}")
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
        logger.info(f"Inicio de sesión de {user.email} ({user.role})")
        return user

    def create_user_token(self, user: User) -> str:
        """Token de sesión firmado; el claim `sub` es el ID del usuario."""
        return security.create_access_token(data={"sub": user.id, "role": user.role})

    async def ensure_admin(self, db: AsyncSession, email: str, password: str, name: str = "Admin") -> bool:
        """
        Crea el usuario administrador si no existe.

        Returns:
            True si se creó, False si ya existía un usuario con ese email
        """
        if await user_crud.get_user_by_email(db, email=email):
            return False
        await user_crud.create_user(
            db,
            name=name,
            email=email,
            password_hash=security.get_password_hash(password),
            role="admin",
        )
        return True


auth_service = AuthService()
