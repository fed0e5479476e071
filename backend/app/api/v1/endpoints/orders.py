"""
Endpoints REST de pedidos.

Cualquier visitante puede dejar un pedido (email o teléfono de contacto) desde
la ficha de un producto; el panel los lista y los marca como vistos.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.crud import order_crud, product_crud
from app.db.models.user_model import User
from app.schemas import order_schema
from app.schemas.base_schema import CreatedResponse, SuccessResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    order_in: order_schema.OrderCreate,
    db: AsyncSession = Depends(deps.get_db),
) -> CreatedResponse:
    """Registra una solicitud de pedido sobre un producto."""
    logger.info(f"🛒 Pedido recibido para el producto {order_in.product_id} ({order_in.contact_type.value})")

    product = await product_crud.get_product(db, product_id=order_in.product_id)
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    if not product.is_orderable:
        logger.warning(f"Pedido rechazado: el producto {product.id} está vendido y no se vuelve a fabricar")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Product is not available")

    try:
        order = await order_crud.create_order(db, order=order_in)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Error al registrar el pedido")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create order")

    logger.info(f"✅ Pedido {order.id} registrado")
    return CreatedResponse(id=order.id)


@router.get("", response_model=List[order_schema.OrderResponse])
async def read_orders(
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> List[order_schema.OrderResponse]:
    """Pedidos, los más recientes primero, con el título del producto."""
    orders = await order_crud.get_orders(db)
    items = []
    for order in orders:
        item = order_schema.OrderResponse.model_validate(order)
        item.product_title = order.product.title if order.product else None
        items.append(item)
    return items


@router.put("/{order_id}/seen", response_model=SuccessResponse)
async def mark_order_seen(
    order_id: int,
    seen_in: order_schema.OrderSeenUpdate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> SuccessResponse:
    order = await order_crud.get_order(db, order_id=order_id)
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")

    try:
        await order_crud.set_seen(db, order, seen=seen_in.seen)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception(f"Error al actualizar el pedido {order_id}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update order")

    return SuccessResponse()
