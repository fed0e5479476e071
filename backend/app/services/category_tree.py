# backend/app/services/category_tree.py
"""
Funciones puras sobre la jerarquía de categorías.

Trabajan sobre el mapa {id: parent_id} de todas las categorías (ver
category_crud.get_parent_map), de modo que no tocan la base de datos y se
pueden probar sin sesión:

- compute_depth: profundidad de una categoría, tolerante a ciclos
- list_for_picker: categorías ordenadas para el selector de categoría padre
- would_create_cycle: comprobación previa a asignar un padre
- picker_label: etiqueta con sangría para el desplegable
"""

from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from app.core.config import settings
from app.db.models.category_model import Category

MAX_CATEGORY_DEPTH = settings.MAX_CATEGORY_DEPTH

PICKER_INDENT = "— "

# Mayor id representable en una columna INTEGER (32 bits en PostgreSQL)
MAX_CATEGORY_ID = 2**31 - 1

ParentMap = Mapping[int, Optional[int]]


def compute_depth(category_id: int, parent_by_id: ParentMap, max_depth: int = MAX_CATEGORY_DEPTH) -> int:
    """
    Número de saltos desde la categoría hasta su ancestro raíz (0 para una raíz).

    El recorrido se corta al repetir un nodo o al alcanzar max_depth, así que
    termina aunque los datos contengan un ciclo. Un ID desconocido cuenta como raíz.
    """
    depth = 0
    visited = {category_id}
    current = parent_by_id.get(category_id)
    while current is not None and current not in visited and depth < max_depth:
        visited.add(current)
        depth += 1
        current = parent_by_id.get(current)
    return depth


def list_for_picker(
    exclude_id: Optional[int],
    categories: Iterable[Category],
    parent_by_id: Optional[ParentMap] = None,
) -> List[Tuple[Category, int]]:
    """
    Devuelve pares (categoría, profundidad) ordenados por profundidad y, a igualdad,
    por título sin distinguir mayúsculas. La categoría exclude_id no aparece.
    """
    categories = list(categories)
    if parent_by_id is None:
        parent_by_id = {c.id: c.parent_id for c in categories}

    annotated = [
        (category, compute_depth(category.id, parent_by_id))
        for category in categories
        if exclude_id is None or category.id != exclude_id
    ]
    annotated.sort(key=lambda pair: (pair[1], pair[0].title.casefold(), pair[0].id))
    return annotated


def picker_label(title: str, depth: int) -> str:
    return f"{PICKER_INDENT * depth}{title}"


def would_create_cycle(category_id: int, new_parent_id: Optional[int], parent_by_id: ParentMap) -> bool:
    """
    Indica si asignar new_parent_id como padre de category_id cerraría un ciclo,
    es decir, si category_id aparece entre los ancestros de new_parent_id.
    """
    if new_parent_id is None:
        return False
    if new_parent_id == category_id:
        return True

    visited = set()
    current: Optional[int] = new_parent_id
    while current is not None and current not in visited:
        if current == category_id:
            return True
        visited.add(current)
        current = parent_by_id.get(current)
    return False


def parse_subcategory_filter(raw: Optional[str]) -> Optional[int]:
    """
    Interpreta el parámetro ?subcategory=. Se ignora (None) todo lo que no sea
    un entero positivo dentro del rango de ids de la base de datos.
    """
    if raw is None:
        return None
    try:
        value = int(str(raw).strip())
    except ValueError:
        return None
    if value < 1 or value > MAX_CATEGORY_ID:
        return None
    return value


def scope_from_children(category_id: int, child_ids: Sequence[int], subcategory_id: Optional[int] = None) -> List[int]:
    """
    Ámbito de categorías de un listado: la subcategoría elegida si la hay; si no,
    la categoría más sus hijos directos (un solo nivel).
    """
    if subcategory_id is not None:
        return [subcategory_id]
    return [category_id, *[cid for cid in child_ids if cid != category_id]]
