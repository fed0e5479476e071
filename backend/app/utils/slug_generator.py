# backend/app/utils/slug_generator.py
"""
Utilidades para generar slugs.

Convierte títulos en identificadores aptos para URL y garantiza que el slug
resultante sea único en la tabla correspondiente.
"""

import re
import time
import unicodedata
from typing import Awaitable, Callable

# Número de sufijos numéricos que se prueban antes de recurrir a la marca de tiempo
MAX_SLUG_ATTEMPTS = 100


def slugify(text: str) -> str:
    """
    Convierte un texto en un slug: minúsculas, sin acentos, sin signos de puntuación
    y con los espacios, guiones bajos y guiones agrupados en un único guion.

    Ejemplo: "  ¡Jarrón de Cerámica_Azul! " -> "jarron-de-ceramica-azul"
    """
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    text = text.lower().strip()
    text = re.sub(r"[^\w\s-]", "", text)
    text = re.sub(r"[\s_-]+", "-", text)
    return text.strip("-")


async def generate_unique_slug(
    text: str,
    slug_exists: Callable[[str], Awaitable[bool]],
    fallback: str = "item",
) -> str:
    """
    Genera un slug único a partir de un texto, añadiendo "-1", "-2"... si ya existe.

    Args:
        text: Texto de partida (normalmente el título)
        slug_exists: Corrutina que indica si un slug ya está en uso
        fallback: Slug base cuando el texto no contiene ningún carácter aprovechable

    Returns:
        Slug que no está en uso
    """
    base_slug = slugify(text) or fallback
    slug = base_slug
    counter = 1

    while await slug_exists(slug):
        slug = f"{base_slug}-{counter}"
        counter += 1
        if counter > MAX_SLUG_ATTEMPTS:
            slug = f"{base_slug}-{int(time.time())}"
            break

    return slug
