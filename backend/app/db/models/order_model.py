# backend/app/db/models/order_model.py
"""
Este archivo contiene el modelo de pedido para la aplicación.

Un pedido es una solicitud de contacto sobre un producto: el cliente deja
un email o un teléfono y el administrador lo marca como visto.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Boolean
from sqlalchemy.orm import relationship

from app.db.database import Base, utcnow

class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    contact_type = Column(String(20), nullable=False)  # 'email' | 'phone'
    contact_value = Column(String(255), nullable=False)
    seen = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    product = relationship("Product", back_populates="orders")

    def __repr__(self):
        return f"<Order(id={self.id}, product_id={self.product_id}, contact_type='{self.contact_type}')>"
