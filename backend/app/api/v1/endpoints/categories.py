"""
Endpoints REST para categorías y para el orden manual de sus productos.

Lectura pública: listado, página de categoría por slug, productos de una categoría.
Escritura (solo administradores): alta, edición, borrado y reordenación.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.crud import category_crud
from app.db.models.user_model import User
from app.schemas import category_schema, product_schema
from app.schemas.base_schema import CreatedResponse, SuccessResponse
from app.services import category_tree
from app.services.category_service import category_service
from app.services.ordering_service import ordering_service

logger = logging.getLogger(__name__)

router = APIRouter()

PRODUCTS_VERSION_HEADER = "X-Products-Version"

# ========================================
# CONSULTAS
# ========================================

@router.get("", response_model=List[category_schema.CategoryResponse])
async def read_categories(
    db: AsyncSession = Depends(deps.get_db),
    parent_id: Optional[int] = Query(default=None, alias="parentId", ge=1),
    roots_only: bool = Query(default=False, alias="rootsOnly"),
) -> List[category_schema.CategoryResponse]:
    """Obtiene las categorías: todas, solo las raíz o los hijos directos de una categoría."""
    if roots_only and parent_id is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot use 'parentId' and 'rootsOnly' filters simultaneously.",
        )

    if roots_only:
        return await category_service.get_main_categories(db=db)
    if parent_id is not None:
        return await category_service.get_subcategories(db=db, parent_id=parent_id)
    return await category_service.get_all_categories(db=db)


@router.get("/picker", response_model=List[category_schema.CategoryPickerItem])
async def read_categories_for_picker(
    db: AsyncSession = Depends(deps.get_db),
    exclude_id: Optional[int] = Query(default=None, alias="excludeId"),
    current_user: User = Depends(deps.require_admin),
) -> List[category_schema.CategoryPickerItem]:
    """Categorías por profundidad y título, con la etiqueta sangrada del selector de padre."""
    pairs = await category_service.list_for_picker(db=db, exclude_id=exclude_id)
    return [
        category_schema.CategoryPickerItem(
            id=category.id,
            title=category.title,
            slug=category.slug,
            parent_id=category.parent_id,
            created_at=category.created_at,
            depth=depth,
            label=category_tree.picker_label(category.title, depth),
        )
        for category, depth in pairs
    ]


@router.get("/slug/{slug}", response_model=product_schema.CategoryPageResponse)
async def read_category_page(
    slug: str,
    db: AsyncSession = Depends(deps.get_db),
    subcategory: Optional[str] = None,
) -> product_schema.CategoryPageResponse:
    """
    Página pública de una categoría: sus subcategorías y los productos del ámbito
    elegido (la subcategoría filtrada, o la categoría con sus hijos directos).
    Los vendidos que no se vuelven a fabricar no aparecen.
    """
    category = await category_crud.get_category_by_slug(db, slug=slug)
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")

    subcategories = await category_service.get_subcategories(db=db, parent_id=category.id)
    scope = await category_service.resolve_category_scope(db, category.id, subcategory)
    products = await ordering_service.members_of(db, scope, include_sold=False)

    return product_schema.CategoryPageResponse(
        category=category_schema.CategoryResponse.model_validate(category),
        subcategories=[category_schema.CategoryResponse.model_validate(c) for c in subcategories],
        products=[product_schema.ProductCard.from_product(p) for p in products],
    )


@router.get("/{category_id}", response_model=category_schema.CategoryResponse)
async def read_category(
    category_id: int,
    db: AsyncSession = Depends(deps.get_db),
) -> category_schema.CategoryResponse:
    """Obtiene los detalles de una categoría específica por su ID."""
    category = await category_service.get_category_by_id(db=db, category_id=category_id)
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return category

# ========================================
# ESCRITURA (ADMINISTRADORES)
# ========================================

@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_in: category_schema.CategoryCreate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> CreatedResponse:
    """Crea una nueva categoría."""
    logger.info(f"📁 Creando categoría '{category_in.slug}'")
    category = await category_service.create_new_category(db=db, category_in=category_in)
    logger.info(f"✅ Categoría {category.id} creada")
    return CreatedResponse(id=category.id)


@router.put("/{category_id}", response_model=SuccessResponse)
async def update_category(
    category_id: int,
    category_in: category_schema.CategoryUpdate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> SuccessResponse:
    """Actualiza título, slug y categoría padre."""
    logger.info(f"📁 Actualizando categoría {category_id}")
    await category_service.update_existing_category(db=db, category_id=category_id, category_in=category_in)
    return SuccessResponse()


@router.delete("/{category_id}", response_model=SuccessResponse)
async def delete_category(
    category_id: int,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> SuccessResponse:
    """Elimina una categoría sin productos principales; sus hijos pasan a su padre."""
    logger.info(f"🗑️ Eliminando categoría {category_id}")
    await category_service.delete_existing_category(db=db, category_id=category_id)
    return SuccessResponse()

# ========================================
# ORDEN MANUAL DE PRODUCTOS
# ========================================

@router.get("/{category_id}/products", response_model=List[category_schema.CategoryProductItem])
async def read_category_products(
    category_id: int,
    response: Response,
    db: AsyncSession = Depends(deps.get_db),
) -> List[category_schema.CategoryProductItem]:
    """
    Productos cuya categoría principal es esta, en su orden actual.

    La cabecera X-Products-Version lleva el sello que debe reenviarse al reordenar.
    """
    version = await ordering_service.current_version(db, category_id=category_id)
    if version is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")

    products = await ordering_service.primary_members(db, category_id=category_id)
    response.headers[PRODUCTS_VERSION_HEADER] = str(version)
    return [category_schema.CategoryProductItem.from_product(p) for p in products]


@router.put("/{category_id}/products", response_model=SuccessResponse)
async def reorder_category_products(
    category_id: int,
    reorder_in: category_schema.CategoryProductsReorder,
    response: Response,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> SuccessResponse:
    """Guarda el nuevo orden: sortOrder = 1..N según la posición en orderedProductIds."""
    logger.info(f"🔀 Reordenando {len(reorder_in.ordered_product_ids)} productos de la categoría {category_id}")
    new_version = await ordering_service.reorder(
        db,
        category_id=category_id,
        ordered_ids=reorder_in.ordered_product_ids,
        expected_version=reorder_in.version,
    )
    response.headers[PRODUCTS_VERSION_HEADER] = str(new_version)
    logger.info(f"✅ Categoría {category_id} reordenada")
    return SuccessResponse()
