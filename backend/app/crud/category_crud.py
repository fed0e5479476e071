# backend/app/crud/category_crud.py

"""
Operaciones CRUD para el modelo Category.

Este módulo implementa las operaciones de Create, Read, Update, Delete para categorías,
proporcionando una capa de abstracción entre los servicios y la base de datos.

Funcionalidades principales:
- Consultas básicas por ID y slug
- Manejo de jerarquías (categorías raíz, hijos directos)
- Mapa id -> parent_id para el cálculo de profundidades
- Recuento de productos cuya categoría principal es una categoría dada

Las funciones de escritura hacen flush pero no commit: la transacción la cierra
el servicio que orquesta la operación.
"""

from typing import Dict, List, Optional
from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.category_model import Category
from app.db.models.product_model import Product
from app.schemas import category_schema # Importamos los schemas Pydantic para categorías

# ========================================
# OPERACIONES DE LECTURA (READ)
# ========================================

async def get_category(db: AsyncSession, category_id: int) -> Optional[Category]:
    """
    Obtiene una categoría por su ID.

    Args:
        db: Sesión de SQLAlchemy
        category_id: ID único de la categoría

    Returns:
        Objeto Category si existe, None si no se encuentra
    """
    result = await db.execute(select(Category).filter(Category.id == category_id))
    return result.scalars().first()


async def get_category_by_slug(db: AsyncSession, slug: str) -> Optional[Category]:
    """
    Obtiene una categoría por su slug. Se usa tanto en la página pública como
    para validar duplicados antes de crear o renombrar.
    """
    result = await db.execute(select(Category).filter(Category.slug == slug))
    return result.scalars().first()


async def get_categories(db: AsyncSession) -> List[Category]:
    """
    Obtiene todas las categorías ordenadas alfabéticamente por título.

    El catálogo de categorías de una tienda es pequeño, así que no se pagina:
    la navegación y el selector de padre necesitan la lista completa.
    """
    result = await db.execute(select(Category).order_by(Category.title, Category.id))
    return result.scalars().all()


async def get_root_categories(db: AsyncSession) -> List[Category]:
    """
    Obtiene las categorías principales (aquellas sin un padre) de forma asíncrona.
    """
    result = await db.execute(
        select(Category).filter(Category.parent_id.is_(None)).order_by(Category.title)
    )
    return result.scalars().all()


async def get_subcategories(db: AsyncSession, parent_id: int) -> List[Category]:
    """
    Obtiene las subcategorías directas de una categoría padre dada de forma asíncrona.
    """
    result = await db.execute(
        select(Category).filter(Category.parent_id == parent_id).order_by(Category.title)
    )
    return result.scalars().all()


async def get_child_ids(db: AsyncSession, parent_id: int) -> List[int]:
    """Obtiene solo los IDs de los hijos directos (un nivel)."""
    result = await db.execute(select(Category.id).filter(Category.parent_id == parent_id))
    return [row[0] for row in result.all()]


async def get_parent_map(db: AsyncSession) -> Dict[int, Optional[int]]:
    """Devuelve el mapa {id: parent_id} de todas las categorías."""
    result = await db.execute(select(Category.id, Category.parent_id))
    return {row.id: row.parent_id for row in result.all()}


async def count_primary_products(db: AsyncSession, category_id: int) -> int:
    """Cuenta los productos cuya categoría principal es la indicada."""
    result = await db.execute(
        select(func.count(Product.id)).filter(Product.category_id == category_id)
    )
    return result.scalar_one()


# ========================================
# OPERACIONES DE ESCRITURA (CREATE, UPDATE, DELETE)
# ========================================

async def create_category(db: AsyncSession, category: category_schema.CategoryCreate) -> Category:
    """
    Crea una nueva categoría (sin commit).

    Es importante validar slug y padre antes de llamar esta función;
    de eso se encarga CategoryService.
    """
    db_category = Category(
        title=category.title,
        slug=category.slug,
        parent_id=category.parent_id,
    )
    db.add(db_category)
    await db.flush()  # Asigna el ID autoincremental
    return db_category


async def update_category(db: AsyncSession, db_category: Category, category_update: category_schema.CategoryUpdate) -> Category:
    """
    Actualiza una categoría existente (sin commit).

    Validaciones que deben hacerse antes (CategoryService):
        - Que el nuevo slug no cause duplicados
        - Que el nuevo parent_id exista y no cree ciclos
    """
    update_data = category_update.model_dump()
    for key, value in update_data.items():
        setattr(db_category, key, value)

    db.add(db_category)  # Marca el objeto como modificado
    await db.flush()
    return db_category


async def reparent_children(db: AsyncSession, category_id: int, new_parent_id: Optional[int]) -> None:
    """Mueve los hijos directos de una categoría bajo otro padre (o a raíz)."""
    await db.execute(
        update(Category)
        .where(Category.parent_id == category_id)
        .values(parent_id=new_parent_id)
    )


async def delete_category(db: AsyncSession, db_category: Category) -> Category:
    """
    Elimina una categoría (sin commit).

    Efectos colaterales (manejados por las FK):
        - Enlaces de categorías adicionales (product_categories): se borran en cascada
        - Subcategorías: deben reubicarse antes con reparent_children()
    """
    await db.delete(db_category)
    await db.flush()
    return db_category


async def get_products_version(db: AsyncSession, category_id: int) -> Optional[int]:
    """Lee el sello de concurrencia directamente de la base de datos."""
    result = await db.execute(select(Category.products_version).filter(Category.id == category_id))
    return result.scalar_one_or_none()


async def bump_products_version(db: AsyncSession, category_id: int, expected_version: Optional[int] = None) -> bool:
    """
    Incrementa el sello de concurrencia del orden de productos de una categoría.

    Si se indica expected_version, el incremento solo se aplica si el sello
    almacenado coincide (compare-and-set en una única sentencia UPDATE).

    Returns:
        True si se actualizó la fila, False si el sello no coincidía
    """
    stmt = update(Category).where(Category.id == category_id)
    if expected_version is not None:
        stmt = stmt.where(Category.products_version == expected_version)
    stmt = stmt.values(products_version=Category.products_version + 1)
    result = await db.execute(stmt)
    return result.rowcount == 1
