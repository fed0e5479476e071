# backend/app/crud/user_crud.py
"""
Operaciones CRUD para el modelo User.

Este módulo proporciona funciones para buscar y crear los usuarios del panel
(administradores y autores del blog).
"""

from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.user_model import User

async def get_user(db: AsyncSession, user_id: str) -> Optional[User]:
    """
    Obtiene un usuario por su ID de forma asíncrona.
    """
    result = await db.execute(select(User).filter(User.id == user_id))
    return result.scalars().first()

async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    """
    Busca un usuario por su dirección de correo electrónico (sin distinguir mayúsculas).
    """
    result = await db.execute(select(User).filter(User.email == email.strip().lower()))
    return result.scalars().first()

async def create_user(db: AsyncSession, name: str, email: str, password_hash: str, role: str = "author") -> User:
    """
    Crea un nuevo usuario. El email se guarda normalizado en minúsculas.
    """
    db_user = User(
        name=name,
        email=email.strip().lower(),
        password_hash=password_hash,
        role=role,
    )
    db.add(db_user)
    await db.commit()
    await db.refresh(db_user)
    return db_user
