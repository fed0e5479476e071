# backend/app/schemas/product_schema.py
"""
Esquemas Pydantic para el modelo Product.

Se encarga de definir los esquemas de entrada (alta/edición desde el panel)
y de salida (listado de administración, ficha pública, tarjetas de categoría).
"""

from datetime import datetime
from typing import Optional, List
from pydantic import Field, PositiveInt, model_validator

from .base_schema import CamelModel, CreatedResponse
from .category_schema import CategoryResponse, SLUG_PATTERN
from .image_schema import ImageResponse

# ========================================
# ESQUEMA BASE
# ========================================

class ProductBase(CamelModel):
    """Propiedades comunes compartidas entre esquemas de producto."""
    title: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1, pattern=SLUG_PATTERN)
    description_md: str = Field(..., min_length=1)
    price_cents: int = Field(..., ge=1)
    # Categoría principal; si falta y hay category_ids, la principal es la primera de la lista
    category_id: Optional[PositiveInt] = None
    category_ids: Optional[List[PositiveInt]] = None
    image_path: Optional[str] = Field(default=None, min_length=1)
    is_recreatable: bool = False

    @model_validator(mode="after")
    def resolve_primary_category(self):
        """Separa la categoría principal de las adicionales y elimina duplicados."""
        if self.category_ids is not None:
            extra: List[int] = []
            for cid in self.category_ids:
                if cid not in extra:
                    extra.append(cid)
            if self.category_id is None and extra:
                self.category_id = extra[0]
            self.category_ids = [cid for cid in extra if cid != self.category_id]
        return self


# ========================================
# ESQUEMAS PARA OPERACIONES
# ========================================

class ProductCreate(ProductBase):
    """Esquema para crear un nuevo producto."""
    pass


class ProductUpdate(ProductBase):
    """Esquema para actualizar un producto. `sold` marca o desmarca la venta."""
    sold: Optional[bool] = None


class ProductCreatedResponse(CreatedResponse):
    """Respuesta del alta: ID y posición asignada al final de su categoría."""
    sort_order: int


# ========================================
# ESQUEMAS DE RESPUESTA
# ========================================

class ProductAdminItem(CamelModel):
    """Fila del listado de productos del panel."""
    id: int
    slug: str
    title: str
    price_cents: int
    category_id: Optional[int] = None
    category_title: Optional[str] = None
    sort_order: int
    sold_at: Optional[datetime] = None
    is_recreatable: bool
    image_path: Optional[str] = None
    created_at: datetime


class ProductCard(CamelModel):
    """Tarjeta de producto en las páginas públicas de categoría y de vendidos."""
    id: int
    slug: str
    title: str
    price_cents: int
    image_path: Optional[str] = None
    sort_order: int
    sold_at: Optional[datetime] = None
    is_recreatable: bool

    @classmethod
    def from_product(cls, product):
        """Construye la tarjeta mostrando la miniatura (requiere `images` precargado)."""
        card = cls.model_validate(product)
        card.image_path = product.thumbnail_path()
        return card


class ProductDetail(ProductCard):
    """Ficha pública de un producto con su galería."""
    description_md: str
    category_id: Optional[int] = None
    category_ids: List[int] = []
    is_orderable: bool
    images: List[ImageResponse] = []
    created_at: datetime


class CategoryPageResponse(CamelModel):
    """Página pública de una categoría: subcategorías y productos del ámbito elegido."""
    category: CategoryResponse
    subcategories: List[CategoryResponse] = []
    products: List[ProductCard] = []
