# backend/app/schemas/category_schema.py

"""
Esquemas Pydantic para el modelo Category.

Los esquemas definen la estructura de datos que fluye a través de la API:
- Validación automática de tipos de datos
- Serialización/deserialización JSON (camelCase en la API)
- Documentación automática en OpenAPI/Swagger
- Separación entre modelo de base de datos y API

Patrón de esquemas utilizado:
- CategoryBase: Propiedades comunes compartidas
- CategoryCreate / CategoryUpdate: Para escribir categorías (POST/PUT)
- CategoryResponse: Para respuestas de la API (GET)
- CategoryPickerItem: Categoría anotada con su profundidad para el selector de padre
- CategoryProductsReorder / CategoryProductItem: Orden manual de productos
"""

from datetime import datetime
from typing import Optional, List
from pydantic import Field, PositiveInt

from .base_schema import CamelModel

SLUG_PATTERN = r"^[a-z0-9-]+$"

# ========================================
# ESQUEMA BASE
# ========================================

class CategoryBase(CamelModel):
    """Propiedades comunes compartidas entre esquemas de categoría."""
    title: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1, pattern=SLUG_PATTERN)
    parent_id: Optional[int] = Field(default=None, ge=1)


# ========================================
# ESQUEMAS PARA OPERACIONES
# ========================================

class CategoryCreate(CategoryBase):
    """Esquema para crear una nueva categoría. El ID lo asigna la base de datos."""
    pass


class CategoryUpdate(CategoryBase):
    """Esquema para actualizar una categoría (reemplazo completo de title, slug y parentId)."""
    pass


# ========================================
# ESQUEMAS DE RESPUESTA
# ========================================

class CategoryResponse(CategoryBase):
    """Esquema para las respuestas de la API al leer categorías."""
    id: int
    slug: str
    created_at: Optional[datetime] = None


class CategoryPickerItem(CategoryResponse):
    """Categoría anotada con su profundidad para el desplegable de categoría padre."""
    depth: int
    label: str


# ========================================
# ORDEN MANUAL DE PRODUCTOS
# ========================================

class CategoryProductsReorder(CamelModel):
    """Lista completa y ordenada de IDs de producto enviada tras arrastrar y soltar."""
    ordered_product_ids: List[PositiveInt] = Field(..., min_length=1)
    # Sello observado por el cliente (cabecera X-Products-Version del GET)
    version: Optional[int] = Field(default=None, ge=0)


class CategoryProductItem(CamelModel):
    """Producto tal y como se muestra en el diálogo de ordenación."""
    id: int
    title: str
    sort_order: int
    image_path: Optional[str] = None

    @classmethod
    def from_product(cls, product):
        item = cls.model_validate(product)
        item.image_path = product.thumbnail_path()
        return item
