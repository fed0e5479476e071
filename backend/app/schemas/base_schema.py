# backend/app/schemas/base_schema.py
"""
Esquema base compartido.

La API expone los campos en camelCase (orderedProductIds, sortOrder, imagePath...)
mientras que en Python se usan en snake_case. Se aceptan ambas formas en la entrada.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Modelo Pydantic con alias camelCase y lectura desde objetos ORM."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SuccessResponse(CamelModel):
    """Respuesta mínima de las operaciones de escritura."""
    success: bool = True


class CreatedResponse(SuccessResponse):
    """Respuesta de creación con el ID asignado."""
    id: int
