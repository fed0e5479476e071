# backend/app/db/models/product_model.py
from sqlalchemy import Column, Integer, String, ForeignKey, Text, Boolean, DateTime, CheckConstraint
from sqlalchemy.orm import relationship

from app.db.database import Base, utcnow

class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    title = Column(String(255), nullable=False)
    description_md = Column(Text, nullable=False)
    price_cents = Column(Integer, nullable=False)
    # Imagen de portada heredada; la galería vive en product_images
    image_path = Column(Text, nullable=True)
    # Categoría principal: define el ámbito de sort_order
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)
    sort_order = Column(Integer, nullable=False, default=1)
    sold_at = Column(DateTime(timezone=True), nullable=True)
    is_recreatable = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    category = relationship("Category", back_populates="products")
    images = relationship(
        "ProductImage",
        back_populates="product",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ProductImage.created_at",
    )
    category_links = relationship(
        "ProductCategory",
        back_populates="product",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    orders = relationship("Order", back_populates="product", cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (
        CheckConstraint("price_cents >= 1", name="ck_products_price_positive"),
    )

    @property
    def is_sold(self) -> bool:
        return self.sold_at is not None

    @property
    def is_orderable(self) -> bool:
        """Un producto vendido sigue siendo pedible si puede volver a fabricarse."""
        return not self.is_sold or bool(self.is_recreatable)

    def thumbnail_path(self):
        """Ruta de la miniatura; requiere `images` precargado. Cae en image_path si no hay miniatura."""
        for image in self.images:
            if image.is_thumbnail:
                return image.image_path
        return self.image_path

    def __repr__(self):
        return f"<Product(id={self.id}, slug='{self.slug}', category_id={self.category_id}, sort_order={self.sort_order})>"


class ProductCategory(Base):
    """Categorías adicionales de un producto (la principal vive en products.category_id)."""
    __tablename__ = "product_categories"

    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), primary_key=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True, index=True)

    product = relationship("Product", back_populates="category_links")
    category = relationship("Category")


class ProductImage(Base):
    __tablename__ = "product_images"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    image_path = Column(Text, nullable=False)
    is_thumbnail = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    product = relationship("Product", back_populates="images")
