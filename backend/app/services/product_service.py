# backend/app/services/product_service.py

"""
Capa de servicios para operaciones de negocio relacionadas con productos.

Esta capa orquesta las operaciones CRUD de productos, aplica las validaciones
de negocio y coordina las interacciones entre productos, categorías e imágenes.

Responsabilidades principales:
- Slugs únicos y categorías existentes
- Posición inicial del producto en su categoría principal (OrderingService)
- Categoría principal y categorías adicionales siempre disjuntas
- Marcado de vendido
- Galería de imágenes con una única miniatura por producto
"""

import logging
from typing import List, Optional, Sequence

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from app.crud import category_crud, product_crud
from app.db.database import utcnow
from app.db.models.product_model import Product, ProductImage
from app.schemas import image_schema, product_schema
from app.services.ordering_service import ordering_service

logger = logging.getLogger(__name__)


class ProductService:
    """
    Servicio para operaciones de negocio relacionadas con productos.

    Todas las escrituras cierran su transacción aquí: si algo falla se hace
    rollback y el endpoint recibe un HTTPException con un mensaje breve.
    """

    # ========================================
    # OPERACIONES DE CONSULTA
    # ========================================

    async def get_product_or_404(self, db: AsyncSession, product_id: int) -> Product:
        product = await product_crud.get_product(db, product_id=product_id)
        if product is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
        return product

    async def get_product_by_slug(self, db: AsyncSession, slug: str) -> Optional[Product]:
        return await product_crud.get_product_by_slug(db, slug=slug)

    async def get_all_products(self, db: AsyncSession) -> List[Product]:
        """Listado del panel, los más recientes primero."""
        return await product_crud.get_products(db)

    async def get_sold_products(self, db: AsyncSession) -> List[Product]:
        return await product_crud.get_sold_products(db)

    async def get_extra_category_ids(self, db: AsyncSession, product_id: int) -> List[int]:
        return await product_crud.get_extra_category_ids(db, product_id=product_id)

    # ========================================
    # VALIDACIONES
    # ========================================

    async def _validate_slug(self, db: AsyncSession, slug: str, product_id: Optional[int] = None) -> None:
        if await product_crud.slug_in_use(db, slug=slug, exclude_product_id=product_id):
            logger.warning(f"Slug de producto duplicado: {slug}")
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Slug already in use")

    async def _validate_categories(self, db: AsyncSession, category_ids: Sequence[Optional[int]]) -> None:
        for category_id in category_ids:
            if category_id is None:
                continue
            if await category_crud.get_category(db, category_id=category_id) is None:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")

    # ========================================
    # OPERACIONES DE ESCRITURA
    # ========================================

    async def create_new_product(self, db: AsyncSession, product_in: product_schema.ProductCreate) -> Product:
        """
        Crea un producto y lo coloca al final de su categoría principal.

        Args:
            db: Sesión de SQLAlchemy
            product_in: Datos del producto; category_ids ya viene sin la categoría principal

        Returns:
            El producto creado, con su sort_order asignado

        Raises:
            HTTPException 409 si el slug está en uso, 404 si alguna categoría no existe
        """
        extra_ids = product_in.category_ids or []
        await self._validate_slug(db, product_in.slug)
        await self._validate_categories(db, [product_in.category_id, *extra_ids])

        try:
            sort_order = await ordering_service.assign_initial_order(db, product_in.category_id)
            values = product_in.model_dump(exclude={"category_ids"})
            values["sort_order"] = sort_order

            product = await product_crud.create_product(db, values)
            if extra_ids:
                await product_crud.replace_extra_categories(db, product_id=product.id, category_ids=extra_ids)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Slug already in use")
        except SQLAlchemyError:
            await db.rollback()
            logger.exception("Error al crear el producto")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create product")

        logger.info(f"Producto creado: {product.id} en la categoría {product.category_id} (sort_order={sort_order})")
        return product

    async def update_existing_product(
        self, db: AsyncSession, product_id: int, product_in: product_schema.ProductUpdate
    ) -> Product:
        """
        Actualiza un producto (reemplazo completo de sus campos editables).

        - Si cambia la categoría principal, el producto pasa al final de la nueva
        - Si llega category_ids, sustituye el conjunto de categorías adicionales;
          si no, se conservan, salvo la nueva principal, que deja de ser adicional
        - sold=True marca la venta (si no estaba marcada), sold=False la anula
        """
        product = await self.get_product_or_404(db, product_id)

        extra_ids = product_in.category_ids
        await self._validate_slug(db, product_in.slug, product_id=product_id)
        await self._validate_categories(db, [product_in.category_id, *(extra_ids or [])])

        old_category_id = product.category_id
        new_category_id = product_in.category_id

        try:
            values = product_in.model_dump(exclude={"category_ids", "sold"})
            for key, value in values.items():
                setattr(product, key, value)

            if product_in.sold is True and product.sold_at is None:
                product.sold_at = utcnow()
            elif product_in.sold is False:
                product.sold_at = None

            await ordering_service.on_category_reassignment(db, product, old_category_id, new_category_id)

            if extra_ids is not None:
                await product_crud.replace_extra_categories(db, product_id=product.id, category_ids=extra_ids)
            elif new_category_id is not None:
                await product_crud.remove_extra_category(db, product_id=product.id, category_id=new_category_id)

            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Slug already in use")
        except SQLAlchemyError:
            await db.rollback()
            logger.exception(f"Error al actualizar el producto {product_id}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update product")

        logger.info(f"Producto actualizado: {product_id}")
        return product

    async def delete_existing_product(self, db: AsyncSession, product_id: int) -> None:
        """
        Elimina un producto. Imágenes, enlaces a categorías y pedidos se borran en cascada.
        Los demás productos de la categoría conservan su posición.
        """
        product = await self.get_product_or_404(db, product_id)

        try:
            await ordering_service.note_membership_change(db, product.category_id)
            await product_crud.delete_product(db, product)
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.exception(f"Error al eliminar el producto {product_id}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete product")

        logger.info(f"Producto eliminado: {product_id}")

    # ========================================
    # GALERÍA DE IMÁGENES
    # ========================================

    async def add_image(self, db: AsyncSession, product_id: int, image_in: image_schema.ImageCreate) -> ProductImage:
        """
        Añade una imagen a la galería. Solo puede haber una miniatura por producto:
        para cambiarla se usa set_thumbnail.
        """
        await self.get_product_or_404(db, product_id)

        if image_in.is_thumbnail and await product_crud.get_thumbnail(db, product_id=product_id):
            logger.warning(f"Segunda miniatura rechazada para el producto {product_id}")
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Product already has a thumbnail")

        try:
            image = await product_crud.add_image(
                db, product_id=product_id, image_path=image_in.image_path, is_thumbnail=image_in.is_thumbnail
            )
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.exception(f"Error al añadir una imagen al producto {product_id}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to add image")

        return image

    async def _get_image_or_404(self, db: AsyncSession, product_id: int, image_id: int) -> ProductImage:
        image = await product_crud.get_image(db, product_id=product_id, image_id=image_id)
        if image is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")
        return image

    async def set_thumbnail(self, db: AsyncSession, product_id: int, image_id: int) -> ProductImage:
        """Mueve la marca de miniatura a la imagen indicada en una sola transacción."""
        image = await self._get_image_or_404(db, product_id, image_id)

        try:
            await product_crud.clear_thumbnails(db, product_id=product_id)
            image.is_thumbnail = True
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.exception(f"Error al cambiar la miniatura del producto {product_id}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to set thumbnail")

        return image

    async def delete_image(self, db: AsyncSession, product_id: int, image_id: int) -> None:
        image = await self._get_image_or_404(db, product_id, image_id)

        try:
            await product_crud.delete_image(db, image)
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.exception(f"Error al eliminar la imagen {image_id}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete image")

# ========================================
# INSTANCIA SINGLETON DEL SERVICIO
# ========================================

product_service = ProductService()
