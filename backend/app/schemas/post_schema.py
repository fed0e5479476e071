# backend/app/schemas/post_schema.py
"""
Esquemas Pydantic para las entradas del blog.
"""

from datetime import datetime
from typing import Optional
from pydantic import Field

from .base_schema import CamelModel
from .category_schema import SLUG_PATTERN


class PostCreate(CamelModel):
    """Alta de una entrada: el slug se genera a partir del título."""
    title: str = Field(..., min_length=1)
    content_md: str = Field(..., min_length=1)
    image_path: Optional[str] = None
    published: bool


class PostUpdate(PostCreate):
    """Edición de una entrada: el slug pasa a ser editable."""
    slug: str = Field(..., min_length=1, pattern=SLUG_PATTERN)


class PostResponse(CamelModel):
    id: int
    slug: str
    title: str
    content_md: str
    image_path: Optional[str] = None
    published_at: Optional[datetime] = None
    author_id: str
    created_at: datetime
