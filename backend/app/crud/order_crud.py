# backend/app/crud/order_crud.py
"""
Operaciones CRUD para el modelo Order.

Un pedido es una solicitud de contacto sobre un producto. Este módulo
proporciona funciones para registrarlos, listarlos en el panel y marcarlos
como vistos.
"""

from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.db.models.order_model import Order
from app.schemas.order_schema import OrderCreate

async def create_order(db: AsyncSession, order: OrderCreate) -> Order:
    """
    Crea un nuevo pedido en la base de datos de forma asíncrona.
    """
    db_order = Order(
        product_id=order.product_id,
        contact_type=order.contact_type.value,
        contact_value=order.contact_value,
    )
    db.add(db_order)
    await db.commit()
    await db.refresh(db_order)
    return db_order

async def get_order(db: AsyncSession, order_id: int) -> Optional[Order]:
    """
    Obtiene un pedido por su ID de forma asíncrona.
    """
    result = await db.execute(select(Order).filter(Order.id == order_id))
    return result.scalars().first()

async def get_orders(db: AsyncSession) -> List[Order]:
    """
    Obtiene todos los pedidos, los más recientes primero, con su producto precargado.
    """
    query = (
        select(Order)
        .options(selectinload(Order.product))
        .order_by(Order.created_at.desc(), Order.id.desc())
    )
    result = await db.execute(query)
    return result.scalars().all()

async def set_seen(db: AsyncSession, db_order: Order, seen: bool) -> Order:
    """
    Marca un pedido como visto (o lo vuelve a marcar como pendiente).
    """
    db_order.seen = seen
    db.add(db_order)
    await db.commit()
    await db.refresh(db_order)
    return db_order
