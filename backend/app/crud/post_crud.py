# backend/app/crud/post_crud.py
"""
Operaciones CRUD para el modelo Post (entradas del blog).

Las funciones de escritura hacen flush pero no commit: la transacción la cierra
el servicio que orquesta la operación.
"""

from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.post_model import Post

# ========================================
# OPERACIONES DE LECTURA (READ)
# ========================================

async def get_post(db: AsyncSession, post_id: int) -> Optional[Post]:
    result = await db.execute(select(Post).filter(Post.id == post_id))
    return result.scalars().first()


async def get_post_by_slug(db: AsyncSession, slug: str, published_only: bool = False) -> Optional[Post]:
    """Obtiene una entrada por su slug; con published_only se ignoran los borradores."""
    query = select(Post).filter(Post.slug == slug)
    if published_only:
        query = query.filter(Post.published_at.is_not(None))
    result = await db.execute(query)
    return result.scalars().first()


async def get_posts(db: AsyncSession) -> List[Post]:
    """Todas las entradas, las más recientes primero (panel)."""
    result = await db.execute(select(Post).order_by(Post.created_at.desc(), Post.id.desc()))
    return result.scalars().all()


async def get_published_posts(db: AsyncSession) -> List[Post]:
    """Entradas publicadas, por fecha de publicación descendente."""
    result = await db.execute(
        select(Post)
        .filter(Post.published_at.is_not(None))
        .order_by(Post.published_at.desc(), Post.id.desc())
    )
    return result.scalars().all()


async def slug_in_use(db: AsyncSession, slug: str, exclude_post_id: Optional[int] = None) -> bool:
    query = select(Post.id).filter(Post.slug == slug)
    if exclude_post_id is not None:
        query = query.filter(Post.id != exclude_post_id)
    result = await db.execute(query)
    return result.first() is not None

# ========================================
# OPERACIONES DE ESCRITURA (CREATE, UPDATE, DELETE)
# ========================================

async def create_post(db: AsyncSession, values: dict) -> Post:
    db_post = Post(**values)
    db.add(db_post)
    await db.flush()
    return db_post


async def update_post(db: AsyncSession, db_post: Post, values: dict) -> Post:
    for key, value in values.items():
        setattr(db_post, key, value)
    db.add(db_post)
    await db.flush()
    return db_post


async def delete_post(db: AsyncSession, db_post: Post) -> None:
    await db.delete(db_post)
    await db.flush()
