# backend/app/services/post_service.py
"""
Servicio de negocio para las entradas del blog.

Cualquier usuario autenticado (administrador o autor) puede escribir entradas;
el público solo ve las publicadas. Publicar una entrada equivale a fijar
published_at; despublicarla lo vuelve a dejar en None.
"""

import logging
from typing import List

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from app.crud import post_crud
from app.db.database import utcnow
from app.db.models.post_model import Post
from app.db.models.user_model import User
from app.schemas import post_schema
from app.utils.slug_generator import generate_unique_slug

logger = logging.getLogger(__name__)


class PostService:

    async def get_all_posts(self, db: AsyncSession) -> List[Post]:
        return await post_crud.get_posts(db)

    async def get_published_posts(self, db: AsyncSession) -> List[Post]:
        return await post_crud.get_published_posts(db)

    async def get_published_post_by_slug(self, db: AsyncSession, slug: str) -> Post:
        post = await post_crud.get_post_by_slug(db, slug=slug, published_only=True)
        if post is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
        return post

    async def get_post_or_404(self, db: AsyncSession, post_id: int) -> Post:
        post = await post_crud.get_post(db, post_id=post_id)
        if post is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
        return post

    async def create_new_post(self, db: AsyncSession, post_in: post_schema.PostCreate, author: User) -> Post:
        """
        Crea una entrada. El slug se genera a partir del título y, si ya existe,
        se le añade un sufijo numérico.
        """
        async def slug_exists(candidate: str) -> bool:
            return await post_crud.slug_in_use(db, slug=candidate)

        slug = await generate_unique_slug(post_in.title, slug_exists, fallback="post")

        try:
            post = await post_crud.create_post(db, {
                "slug": slug,
                "title": post_in.title,
                "content_md": post_in.content_md,
                "image_path": post_in.image_path,
                "published_at": utcnow() if post_in.published else None,
                "author_id": author.id,
            })
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Slug already in use")
        except SQLAlchemyError:
            await db.rollback()
            logger.exception("Error al crear la entrada")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create post")

        logger.info(f"Entrada creada: {post.id} ({post.slug}) por {author.email}")
        return post

    async def update_existing_post(self, db: AsyncSession, post_id: int, post_in: post_schema.PostUpdate) -> Post:
        post = await self.get_post_or_404(db, post_id)

        if await post_crud.slug_in_use(db, slug=post_in.slug, exclude_post_id=post_id):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Slug already in use")

        values = {
            "slug": post_in.slug,
            "title": post_in.title,
            "content_md": post_in.content_md,
            "image_path": post_in.image_path,
        }
        # Se conserva la fecha original si la entrada ya estaba publicada
        if not post_in.published:
            values["published_at"] = None
        elif post.published_at is None:
            values["published_at"] = utcnow()

        try:
            post = await post_crud.update_post(db, post, values)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Slug already in use")
        except SQLAlchemyError:
            await db.rollback()
            logger.exception(f"Error al actualizar la entrada {post_id}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update post")

        return post

    async def delete_existing_post(self, db: AsyncSession, post_id: int) -> None:
        post = await self.get_post_or_404(db, post_id)
        try:
            await post_crud.delete_post(db, post)
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.exception(f"Error al eliminar la entrada {post_id}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete post")


post_service = PostService()
