"""
Endpoints REST del blog.

El público lee las entradas publicadas; cualquier usuario autenticado
(administrador o autor) puede listar todas y escribir.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.db.models.user_model import User
from app.schemas import post_schema
from app.schemas.base_schema import CreatedResponse, SuccessResponse
from app.services.post_service import post_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=List[post_schema.PostResponse])
async def read_posts(
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> List[post_schema.PostResponse]:
    """Todas las entradas, incluidos los borradores, las más recientes primero."""
    return await post_service.get_all_posts(db)


@router.get("/published", response_model=List[post_schema.PostResponse])
async def read_published_posts(db: AsyncSession = Depends(deps.get_db)) -> List[post_schema.PostResponse]:
    return await post_service.get_published_posts(db)


@router.get("/slug/{slug}", response_model=post_schema.PostResponse)
async def read_post_by_slug(slug: str, db: AsyncSession = Depends(deps.get_db)) -> post_schema.PostResponse:
    """Entrada publicada por su slug; los borradores responden 404."""
    return await post_service.get_published_post_by_slug(db, slug=slug)


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_in: post_schema.PostCreate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> CreatedResponse:
    logger.info(f"📝 Creando entrada '{post_in.title}'")
    post = await post_service.create_new_post(db, post_in=post_in, author=current_user)
    return CreatedResponse(id=post.id)


@router.put("/{post_id}", response_model=SuccessResponse)
async def update_post(
    post_id: int,
    post_in: post_schema.PostUpdate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> SuccessResponse:
    logger.info(f"📝 Actualizando entrada {post_id}")
    await post_service.update_existing_post(db, post_id=post_id, post_in=post_in)
    return SuccessResponse()


@router.delete("/{post_id}", response_model=SuccessResponse)
async def delete_post(
    post_id: int,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> SuccessResponse:
    logger.info(f"🗑️ Eliminando entrada {post_id}")
    await post_service.delete_existing_post(db, post_id=post_id)
    return SuccessResponse()
