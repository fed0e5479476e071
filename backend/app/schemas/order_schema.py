# backend/app/schemas/order_schema.py
"""
Se encarga de definir los esquemas Pydantic para el modelo Order.
"""

from pydantic import EmailStr, Field, model_validator
from typing import Optional
from datetime import datetime
import enum

from .base_schema import CamelModel

class ContactType(str, enum.Enum):
    """Define los medios de contacto posibles de un pedido."""
    EMAIL = "email"
    PHONE = "phone"

class OrderCreate(CamelModel):
    """Esquema para crear un pedido desde la ficha pública: basta con un email o un teléfono."""
    product_id: int = Field(..., description="ID del producto")
    email: Optional[EmailStr] = Field(None, description="Email de contacto")
    phone: Optional[str] = Field(None, description="Teléfono de contacto")

    @model_validator(mode="after")
    def validate_contact(self):
        if self.phone is not None:
            self.phone = self.phone.strip() or None
        if not self.email and not self.phone:
            raise ValueError("Either email or phone is required")
        return self

    @property
    def contact_type(self) -> ContactType:
        return ContactType.EMAIL if self.email else ContactType.PHONE

    @property
    def contact_value(self) -> str:
        return str(self.email) if self.email else self.phone

class OrderSeenUpdate(CamelModel):
    """Esquema para marcar un pedido como visto o no visto."""
    seen: bool

class OrderResponse(CamelModel):
    """Esquema de respuesta para un pedido en el panel."""
    id: int
    product_id: int
    product_title: Optional[str] = None
    contact_type: ContactType
    contact_value: str
    seen: bool
    created_at: datetime
