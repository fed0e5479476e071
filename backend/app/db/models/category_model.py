# backend/app/db/models/category_model.py
"""
Se encarga de definir los modelos de categoría para la aplicación.
"""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from app.db.database import Base, utcnow

class Category(Base):
    """
    Categorías jerárquicas del catálogo (parent_id auto-referenciado).
    Ejemplo: Joyería > Collares > Perlas
    """
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    parent_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)
    # Sello de concurrencia optimista del orden de productos de la categoría
    products_version = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    children = relationship("Category", back_populates="parent", passive_deletes=True)
    parent = relationship("Category", remote_side=[id], back_populates="children")
    products = relationship("Product", back_populates="category", passive_deletes=True)

    def __repr__(self):
        return f"<Category(id={self.id}, slug='{self.slug}', parent_id={self.parent_id})>"
