# backend/app/services/ordering_service.py
"""
Servicio de orden manual de productos dentro de una categoría.

Cada producto tiene un sort_order cuyo ámbito es su categoría principal
(products.category_id). Este servicio se encarga de:

- Resolver los productos de un conjunto de categorías (principal ∪ adicionales)
- Calcular la posición inicial al crear un producto o moverlo de categoría
- Reordenar por completo los productos de una categoría tras un arrastrar y soltar

Concurrencia: cada categoría lleva un sello products_version que se incrementa
en cada cambio de orden o de pertenencia. Una reordenación que declara un sello
distinto del almacenado se rechaza con 409 y el cliente debe volver a cargar la lista.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from app.crud import category_crud, product_crud
from app.db.models.product_model import Product

logger = logging.getLogger(__name__)

MISMATCHED_PRODUCT_SET = "Mismatched product set"
INVALID_PRODUCT_IN_ORDER = "Invalid product in order list"
STALE_PRODUCT_ORDER = "Stale product order"


class OrderingService:
    """
    Orquesta la pertenencia ordenada de productos a categorías.

    Las operaciones assign_initial_order y on_category_reassignment no hacen commit:
    forman parte de la transacción del alta o edición del producto que las invoca.
    reorder sí cierra su propia transacción.
    """

    # ========================================
    # CONSULTA
    # ========================================

    async def members_of(
        self, db: AsyncSession, scope: Iterable[int], include_sold: bool = True
    ) -> List[Product]:
        """
        Productos de un ámbito de categorías, sin duplicados, ordenados por
        sort_order ascendente y, a igualdad, por fecha de creación descendente.

        Args:
            db: Sesión de SQLAlchemy
            scope: IDs de categoría (ver CategoryService.resolve_category_scope)
            include_sold: False para ocultar los vendidos que no se vuelven a fabricar
        """
        return await product_crud.get_products_in_scope(db, scope, include_sold=include_sold)

    async def primary_members(self, db: AsyncSession, category_id: int) -> List[Product]:
        """Productos cuya categoría principal es category_id, en orden de visualización."""
        return await product_crud.get_primary_members(db, category_id=category_id)

    async def current_version(self, db: AsyncSession, category_id: int) -> Optional[int]:
        return await category_crud.get_products_version(db, category_id=category_id)

    # ========================================
    # POSICIÓN INICIAL Y CAMBIOS DE CATEGORÍA
    # ========================================

    async def assign_initial_order(
        self, db: AsyncSession, category_id: Optional[int], exclude_product_id: Optional[int] = None
    ) -> int:
        """
        Siguiente posición libre al final de la categoría: máximo sort_order actual + 1
        (1 si la categoría está vacía o si el producto no tiene categoría).

        El producto indicado en exclude_product_id no cuenta para el máximo, de modo
        que un producto que ya apunta a la categoría no se compara consigo mismo.
        """
        if category_id is None:
            return 1

        max_order = await product_crud.get_max_sort_order(
            db, category_id=category_id, exclude_product_id=exclude_product_id
        )
        await category_crud.bump_products_version(db, category_id=category_id)
        return max_order + 1

    async def on_category_reassignment(
        self,
        db: AsyncSession,
        product: Product,
        old_category_id: Optional[int],
        new_category_id: Optional[int],
    ) -> int:
        """
        Recoloca un producto al final de su nueva categoría principal.

        Si la categoría no cambia, la posición se conserva. La categoría de origen
        no se renumera: los huecos en sort_order son normales.
        """
        if old_category_id == new_category_id:
            return product.sort_order

        product.sort_order = await self.assign_initial_order(
            db, new_category_id, exclude_product_id=product.id
        )
        if old_category_id is not None:
            await category_crud.bump_products_version(db, category_id=old_category_id)

        logger.info(
            f"Producto {product.id} movido de la categoría {old_category_id} a {new_category_id} "
            f"(sort_order={product.sort_order})"
        )
        return product.sort_order

    async def note_membership_change(self, db: AsyncSession, category_id: Optional[int]) -> None:
        """Invalida las listas de orden abiertas de una categoría (p. ej. al borrar un producto)."""
        if category_id is not None:
            await category_crud.bump_products_version(db, category_id=category_id)

    # ========================================
    # REORDENACIÓN
    # ========================================

    def _validate_order(self, ordered_ids: Sequence[int], member_ids: Iterable[int]) -> None:
        """
        La lista recibida debe ser exactamente el conjunto de miembros actual.

        Un ID repetido cuenta como discrepancia de tamaño.
        """
        members = set(member_ids)
        if len(ordered_ids) != len(members) or len(set(ordered_ids)) != len(ordered_ids):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=MISMATCHED_PRODUCT_SET)

        for product_id in ordered_ids:
            if product_id not in members:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_PRODUCT_IN_ORDER)

    async def reorder(
        self,
        db: AsyncSession,
        category_id: int,
        ordered_ids: Sequence[int],
        expected_version: Optional[int] = None,
    ) -> int:
        """
        Reescribe sort_order = 1..N siguiendo el orden de ordered_ids.

        Toda la validación ocurre antes de la primera escritura, y las escrituras
        (una sentencia UPDATE por producto más el incremento del sello) van en una
        única transacción: o se aplica el orden completo o no cambia nada.

        Args:
            db: Sesión de SQLAlchemy
            category_id: Categoría cuyos miembros principales se reordenan
            ordered_ids: Lista completa y ordenada de IDs de producto
            expected_version: Sello observado por el cliente (opcional)

        Returns:
            El nuevo sello products_version de la categoría

        Raises:
            HTTPException 404 si la categoría no existe, 409 si el sello no coincide,
            400 si la lista no coincide con los miembros, 500 si falla la base de datos
        """
        category = await category_crud.get_category(db, category_id=category_id)
        if category is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")

        stored_version = await category_crud.get_products_version(db, category_id=category_id)
        if expected_version is not None and stored_version != expected_version:
            logger.warning(
                f"Reordenación de la categoría {category_id} rechazada: sello {expected_version} != {stored_version}"
            )
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=STALE_PRODUCT_ORDER)

        member_ids = await product_crud.get_primary_member_ids(db, category_id=category_id)
        try:
            self._validate_order(ordered_ids, member_ids)
        except HTTPException as e:
            logger.warning(f"Reordenación de la categoría {category_id} rechazada: {e.detail}")
            raise

        try:
            for position, product_id in enumerate(ordered_ids, start=1):
                await product_crud.set_sort_order(db, product_id=product_id, sort_order=position)

            # Compare-and-set solo si el cliente envió su sello; sin él gana la última escritura
            if not await category_crud.bump_products_version(
                db, category_id=category_id, expected_version=expected_version
            ):
                await db.rollback()
                raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=STALE_PRODUCT_ORDER)

            new_version = await category_crud.get_products_version(db, category_id=category_id)
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.exception(f"Error al reordenar los productos de la categoría {category_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to reorder products"
            )

        logger.info(f"Categoría {category_id} reordenada ({len(ordered_ids)} productos, versión {new_version})")
        return new_version

# ========================================
# INSTANCIA SINGLETON DEL SERVICIO
# ========================================

ordering_service = OrderingService()
