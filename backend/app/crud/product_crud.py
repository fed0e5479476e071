# backend/app/crud/product_crud.py

"""
Operaciones CRUD para el modelo Product.

Este módulo implementa las operaciones de Create, Read, Update, Delete para productos,
siendo el corazón del catálogo. Maneja las relaciones con categorías (principal y
adicionales) y con la galería de imágenes.

Funcionalidades principales:
- Consultas con eager loading (selectinload) para evitar N+1 queries y cargas
  perezosas, que no están permitidas en sesiones asíncronas
- Resolución de la pertenencia a un conjunto de categorías (principal ∪ adicionales)
- Cálculo de la máxima posición (sort_order) dentro de una categoría
- Gestión de enlaces many-to-many producto-categoría
- Gestión de la galería y de la miniatura

Las funciones de escritura hacen flush pero no commit: la transacción la cierra
el servicio que orquesta la operación.
"""

from typing import Iterable, List, Optional, Sequence
from sqlalchemy import select, update, delete, func, or_, and_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.db.models.product_model import Product, ProductCategory, ProductImage

import logging

logger = logging.getLogger(__name__)

# ========================================
# OPERACIONES DE LECTURA (READ)
# ========================================

async def get_product(db: AsyncSession, product_id: int) -> Optional[Product]:
    """Obtiene un producto por su ID, con sus imágenes precargadas."""
    result = await db.execute(
        select(Product)
        .options(selectinload(Product.images))
        .filter(Product.id == product_id)
    )
    return result.scalars().first()


async def get_product_by_slug(db: AsyncSession, slug: str) -> Optional[Product]:
    """Obtiene un producto por su slug, con relaciones precargadas."""
    result = await db.execute(
        select(Product)
        .options(selectinload(Product.images))
        .filter(Product.slug == slug)
    )
    return result.scalars().first()


async def get_products(db: AsyncSession) -> List[Product]:
    """Listado del panel: todos los productos, los más recientes primero."""
    result = await db.execute(
        select(Product)
        .options(selectinload(Product.category), selectinload(Product.images))
        .order_by(Product.created_at.desc(), Product.id.desc())
    )
    return result.scalars().all()


async def get_sold_products(db: AsyncSession) -> List[Product]:
    """Productos vendidos, los vendidos más recientemente primero."""
    result = await db.execute(
        select(Product)
        .options(selectinload(Product.images))
        .filter(Product.sold_at.is_not(None))
        .order_by(Product.sold_at.desc())
    )
    return result.scalars().all()


async def get_products_in_scope(
    db: AsyncSession,
    category_ids: Iterable[int],
    include_sold: bool = True,
) -> List[Product]:
    """
    Obtiene los productos que pertenecen a alguna de las categorías indicadas,
    ya sea como categoría principal o a través de la tabla product_categories.

    El resultado no tiene duplicados (un producto enlazado a varias categorías
    del ámbito aparece una sola vez) y se ordena por sort_order ascendente y,
    a igualdad, por fecha de creación descendente.

    Args:
        db: Sesión de SQLAlchemy
        category_ids: Ámbito de categorías
        include_sold: Si es False, se excluyen los vendidos que no se pueden volver a fabricar
    """
    scope = list(category_ids)
    if not scope:
        return []

    linked_ids = select(ProductCategory.product_id).filter(ProductCategory.category_id.in_(scope))
    query = (
        select(Product)
        .options(selectinload(Product.images))
        .filter(or_(Product.category_id.in_(scope), Product.id.in_(linked_ids)))
    )
    if not include_sold:
        query = query.filter(or_(Product.sold_at.is_(None), Product.is_recreatable.is_(True)))

    query = query.order_by(Product.sort_order.asc(), Product.created_at.desc(), Product.id.desc())
    result = await db.execute(query)
    return result.scalars().all()


async def get_primary_members(db: AsyncSession, category_id: int) -> List[Product]:
    """
    Productos cuya categoría principal es la indicada, en su orden de visualización.
    Es el conjunto sobre el que actúa la reordenación manual.
    """
    result = await db.execute(
        select(Product)
        .options(selectinload(Product.images))
        .filter(Product.category_id == category_id)
        .order_by(Product.sort_order.asc(), Product.created_at.desc(), Product.id.desc())
    )
    return result.scalars().all()


async def get_primary_member_ids(db: AsyncSession, category_id: int) -> List[int]:
    """IDs de los productos cuya categoría principal es la indicada."""
    result = await db.execute(select(Product.id).filter(Product.category_id == category_id))
    return [row[0] for row in result.all()]


async def get_max_sort_order(db: AsyncSession, category_id: int, exclude_product_id: Optional[int] = None) -> int:
    """Máximo sort_order entre los miembros principales de una categoría (0 si está vacía)."""
    query = select(func.max(Product.sort_order)).filter(Product.category_id == category_id)
    if exclude_product_id is not None:
        query = query.filter(Product.id != exclude_product_id)
    result = await db.execute(query)
    return result.scalar() or 0


async def slug_in_use(db: AsyncSession, slug: str, exclude_product_id: Optional[int] = None) -> bool:
    query = select(Product.id).filter(Product.slug == slug)
    if exclude_product_id is not None:
        query = query.filter(Product.id != exclude_product_id)
    result = await db.execute(query)
    return result.first() is not None


# ========================================
# OPERACIONES DE ESCRITURA (CREATE, UPDATE, DELETE)
# ========================================

async def create_product(db: AsyncSession, values: dict) -> Product:
    """Crea un nuevo producto (sin commit) y devuelve la instancia con ID asignado."""
    db_product = Product(**values)
    db.add(db_product)
    await db.flush()
    return db_product


async def set_sort_order(db: AsyncSession, product_id: int, sort_order: int) -> None:
    """Actualiza la posición de un único producto (una sentencia UPDATE por fila)."""
    await db.execute(
        update(Product)
        .where(Product.id == product_id)
        .values(sort_order=sort_order)
    )


async def replace_extra_categories(db: AsyncSession, product_id: int, category_ids: Sequence[int]) -> None:
    """Sustituye el conjunto de categorías adicionales de un producto."""
    await db.execute(delete(ProductCategory).where(ProductCategory.product_id == product_id))
    for category_id in category_ids:
        db.add(ProductCategory(product_id=product_id, category_id=category_id))
    await db.flush()


async def remove_extra_category(db: AsyncSession, product_id: int, category_id: int) -> None:
    """Elimina un enlace adicional concreto (p. ej. cuando pasa a ser la categoría principal)."""
    await db.execute(
        delete(ProductCategory).where(
            and_(ProductCategory.product_id == product_id, ProductCategory.category_id == category_id)
        )
    )


async def get_extra_category_ids(db: AsyncSession, product_id: int) -> List[int]:
    result = await db.execute(
        select(ProductCategory.category_id)
        .filter(ProductCategory.product_id == product_id)
        .order_by(ProductCategory.category_id)
    )
    return [row[0] for row in result.all()]


async def delete_product(db: AsyncSession, db_product: Product) -> Product:
    """Elimina un producto (sin commit). Imágenes, enlaces y pedidos se borran en cascada."""
    await db.delete(db_product)
    await db.flush()
    return db_product


# ========================================
# GALERÍA DE IMÁGENES
# ========================================

async def get_image(db: AsyncSession, product_id: int, image_id: int) -> Optional[ProductImage]:
    result = await db.execute(
        select(ProductImage).filter(ProductImage.id == image_id, ProductImage.product_id == product_id)
    )
    return result.scalars().first()


async def get_thumbnail(db: AsyncSession, product_id: int) -> Optional[ProductImage]:
    result = await db.execute(
        select(ProductImage).filter(ProductImage.product_id == product_id, ProductImage.is_thumbnail.is_(True))
    )
    return result.scalars().first()


async def add_image(db: AsyncSession, product_id: int, image_path: str, is_thumbnail: bool) -> ProductImage:
    image = ProductImage(product_id=product_id, image_path=image_path, is_thumbnail=is_thumbnail)
    db.add(image)
    await db.flush()
    return image


async def clear_thumbnails(db: AsyncSession, product_id: int) -> None:
    await db.execute(
        update(ProductImage)
        .where(ProductImage.product_id == product_id)
        .values(is_thumbnail=False)
    )


async def delete_image(db: AsyncSession, image: ProductImage) -> None:
    await db.delete(image)
    await db.flush()
