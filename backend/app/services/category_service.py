# backend/app/services/category_service.py
"""
Servicio para operaciones de negocio relacionadas con categorías.

Este servicio se encarga de gestionar la lógica de negocio para el manejo de categorías,
incluyendo validaciones de la jerarquía, verificación de integridad referencial
y orquestación de operaciones que involucran múltiples entidades.
"""

import logging
from typing import List, Optional, Tuple

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from app.crud import category_crud
from app.db.models.category_model import Category
from app.schemas import category_schema
from app.services import category_tree

logger = logging.getLogger(__name__)


class CategoryService:
    """
    Servicio para operaciones de negocio relacionadas con categorías.

    Esta clase encapsula toda la lógica de negocio para el manejo de categorías:
    - Slugs únicos
    - Integridad de la jerarquía padre-hijo (sin ciclos, padre existente)
    - Política de borrado respecto a los productos
    - Resolución del ámbito de categorías de un listado
    """

    # ========================================
    # OPERACIONES DE CONSULTA
    # ========================================

    async def get_category_by_id(self, db: AsyncSession, category_id: int) -> Optional[Category]:
        """
        Obtiene una categoría por su ID.

        Actúa como proxy hacia la capa CRUD; el endpoint decide si la ausencia es un 404.
        """
        return await category_crud.get_category(db, category_id=category_id)

    async def get_category_or_404(self, db: AsyncSession, category_id: int) -> Category:
        category = await category_crud.get_category(db, category_id=category_id)
        if category is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
        return category

    async def get_all_categories(self, db: AsyncSession) -> List[Category]:
        """Todas las categorías ordenadas por título."""
        return await category_crud.get_categories(db)

    async def get_main_categories(self, db: AsyncSession) -> List[Category]:
        """
        Obtiene las categorías principales (nivel raíz) para navegación.

        Es la base de los menús de navegación de la tienda.
        """
        return await category_crud.get_root_categories(db)

    async def get_subcategories(self, db: AsyncSession, parent_id: int) -> List[Category]:
        """
        Obtiene las subcategorías directas de una categoría padre.

        Args:
            db: Sesión de SQLAlchemy
            parent_id: ID de la categoría padre

        Returns:
            Lista de categorías hijas directas, ordenadas por título
        """
        return await category_crud.get_subcategories(db, parent_id=parent_id)

    async def list_for_picker(self, db: AsyncSession, exclude_id: Optional[int] = None) -> List[Tuple[Category, int]]:
        """
        Categorías anotadas con su profundidad para el selector de categoría padre.

        La categoría que se está editando (exclude_id) no aparece: no puede ser su propio padre.
        """
        categories = await category_crud.get_categories(db)
        parent_by_id = {c.id: c.parent_id for c in categories}
        return category_tree.list_for_picker(exclude_id, categories, parent_by_id)

    async def resolve_category_scope(
        self,
        db: AsyncSession,
        category_id: int,
        subcategory_filter: Optional[str] = None,
    ) -> List[int]:
        """
        Determina qué categorías forman parte de un listado de productos.

        - Con un filtro de subcategoría numérico: solo esa subcategoría
        - Si no, la categoría más sus hijos directos (los nietos no se incluyen)

        Un filtro que no es un número se ignora, sin error.
        """
        subcategory_id = category_tree.parse_subcategory_filter(subcategory_filter)
        if subcategory_id is not None:
            return category_tree.scope_from_children(category_id, [], subcategory_id)

        child_ids = await category_crud.get_child_ids(db, parent_id=category_id)
        return category_tree.scope_from_children(category_id, child_ids)

    # ========================================
    # VALIDACIONES DE LA JERARQUÍA
    # ========================================

    async def _validate_slug(self, db: AsyncSession, slug: str, category_id: Optional[int] = None) -> None:
        existing = await category_crud.get_category_by_slug(db, slug=slug)
        if existing and existing.id != category_id:
            logger.warning(f"Slug de categoría duplicado: {slug}")
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Slug already in use")

    async def _validate_parent(self, db: AsyncSession, parent_id: Optional[int], category_id: Optional[int] = None) -> None:
        """
        Comprueba que el padre exista y que la asignación no cree un ciclo.

        Para una categoría nueva (category_id None) basta con que el padre exista.
        """
        if parent_id is None:
            return

        if category_id is not None and parent_id == category_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="A category cannot be its own parent",
            )

        parent = await category_crud.get_category(db, category_id=parent_id)
        if not parent:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Parent category not found")

        if category_id is not None:
            parent_by_id = await category_crud.get_parent_map(db)
            if category_tree.would_create_cycle(category_id, parent_id, parent_by_id):
                logger.warning(f"Asignación de padre {parent_id} a la categoría {category_id} rechazada: ciclo")
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Cannot move a category under one of its own descendants",
                )

    # ========================================
    # OPERACIONES DE ESCRITURA CON LÓGICA DE NEGOCIO
    # ========================================

    async def create_new_category(self, db: AsyncSession, category_in: category_schema.CategoryCreate) -> Category:
        """
        Crea una nueva categoría con validaciones completas de negocio.

        Args:
            db: Sesión de SQLAlchemy
            category_in: Esquema Pydantic con datos de la nueva categoría

        Returns:
            Objeto Category recién creado

        Raises:
            HTTPException 409 si el slug está en uso, 404 si el padre no existe
        """
        await self._validate_slug(db, category_in.slug)
        await self._validate_parent(db, category_in.parent_id)

        try:
            category = await category_crud.create_category(db=db, category=category_in)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Slug already in use")
        except SQLAlchemyError:
            await db.rollback()
            logger.exception("Error al crear la categoría")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create category")

        logger.info(f"Categoría creada: {category.id} ({category.slug})")
        return category

    async def update_existing_category(
        self, db: AsyncSession, category_id: int, category_in: category_schema.CategoryUpdate
    ) -> Category:
        """
        Actualiza una categoría existente (título, slug y padre).

        Un cambio de padre se valida contra la jerarquía actual antes de escribir:
        la categoría no puede colgar de sí misma ni de uno de sus descendientes.
        """
        db_category = await self.get_category_or_404(db, category_id)

        await self._validate_slug(db, category_in.slug, category_id=category_id)
        await self._validate_parent(db, category_in.parent_id, category_id=category_id)

        try:
            category = await category_crud.update_category(db, db_category, category_in)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Slug already in use")
        except SQLAlchemyError:
            await db.rollback()
            logger.exception(f"Error al actualizar la categoría {category_id}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update category")

        logger.info(f"Categoría actualizada: {category_id}")
        return category

    async def delete_existing_category(self, db: AsyncSession, category_id: int) -> None:
        """
        Elimina una categoría con validaciones de integridad de negocio.

        - Si alguna categoría principal de producto apunta a ella, se rechaza (409)
        - Los enlaces como categoría adicional se borran en cascada
        - Las subcategorías directas pasan a colgar del padre de la categoría borrada
        """
        category = await self.get_category_or_404(db, category_id)

        if await category_crud.count_primary_products(db, category_id=category_id) > 0:
            logger.warning(f"Borrado de la categoría {category_id} rechazado: tiene productos")
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Cannot delete category with associated products. Reassign products first.",
            )

        try:
            await category_crud.reparent_children(db, category_id=category_id, new_parent_id=category.parent_id)
            await category_crud.delete_category(db, category)
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.exception(f"Error al eliminar la categoría {category_id}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete category")

        logger.info(f"Categoría eliminada: {category_id}")

# ========================================
# INSTANCIA SINGLETON DEL SERVICIO
# ========================================

# Instancia única del servicio para uso en endpoints
category_service = CategoryService()
