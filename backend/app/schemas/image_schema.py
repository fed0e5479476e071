# backend/app/schemas/image_schema.py
"""
Se encarga de definir los esquemas Pydantic para el modelo ProductImage.
"""

from datetime import datetime
from typing import Optional
from pydantic import Field

from .base_schema import CamelModel

# ========================================
# ESQUEMA BASE
# ========================================

class ImageBase(CamelModel):
    """Propiedades comunes compartidas entre esquemas de imagen."""
    image_path: str = Field(..., min_length=1)  # Ruta devuelta por /upload
    is_thumbnail: bool = False  # Como mucho una miniatura por producto


# ========================================
# ESQUEMAS PARA OPERACIONES
# ========================================

class ImageCreate(ImageBase):
    """Esquema para añadir una imagen a la galería de un producto."""
    pass


# ========================================
# ESQUEMA DE RESPUESTA
# ========================================

class ImageResponse(ImageBase):
    """Esquema para las respuestas de la API al leer imágenes."""
    id: int
    product_id: int
    created_at: Optional[datetime] = None
