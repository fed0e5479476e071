# backend/app/api/v1/endpoints/products.py

"""
Endpoints REST para productos y su galería de imágenes.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from app.api import deps
from app.db.models.user_model import User
from app.schemas import image_schema, product_schema
from app.schemas.base_schema import SuccessResponse
from app.services.product_service import product_service

logger = logging.getLogger(__name__)
router = APIRouter()

# ========================================
# CONSULTAS
# ========================================

@router.get("", response_model=List[product_schema.ProductAdminItem])
async def read_products(
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> List[product_schema.ProductAdminItem]:
    """Listado del panel, los más recientes primero, con el título de su categoría principal."""
    products = await product_service.get_all_products(db)
    items = []
    for product in products:
        item = product_schema.ProductAdminItem.model_validate(product)
        item.category_title = product.category.title if product.category else None
        item.image_path = product.thumbnail_path()
        items.append(item)
    return items


@router.get("/sold", response_model=List[product_schema.ProductCard])
async def read_sold_products(
    db: AsyncSession = Depends(deps.get_db),
) -> List[product_schema.ProductCard]:
    """Productos vendidos, los vendidos más recientemente primero."""
    products = await product_service.get_sold_products(db)
    return [product_schema.ProductCard.from_product(p) for p in products]


@router.get("/slug/{slug}", response_model=product_schema.ProductDetail)
async def read_product_by_slug(
    slug: str,
    db: AsyncSession = Depends(deps.get_db),
) -> product_schema.ProductDetail:
    """Ficha pública de un producto con sus categorías y su galería."""
    product = await product_service.get_product_by_slug(db, slug=slug)
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")

    detail = product_schema.ProductDetail.from_product(product)
    detail.category_ids = await product_service.get_extra_category_ids(db, product_id=product.id)
    return detail

# ========================================
# ESCRITURA (ADMINISTRADORES)
# ========================================

@router.post("", response_model=product_schema.ProductCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product_in: product_schema.ProductCreate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> product_schema.ProductCreatedResponse:
    """Crea un producto al final de su categoría principal."""
    logger.info(f"🆕 PRODUCTO: Creando producto '{product_in.slug}'")
    product = await product_service.create_new_product(db=db, product_in=product_in)
    logger.info(f"✅ PRODUCTO: Creado {product.id} con sortOrder {product.sort_order}")
    return product_schema.ProductCreatedResponse(id=product.id, sort_order=product.sort_order)


@router.put("/{product_id}", response_model=SuccessResponse)
async def update_product(
    product_id: int,
    product_in: product_schema.ProductUpdate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> SuccessResponse:
    """Actualiza un producto; si cambia de categoría principal pasa al final de la nueva."""
    logger.info(f"🔄 PRODUCTO: Actualizando producto {product_id}")
    await product_service.update_existing_product(db=db, product_id=product_id, product_in=product_in)
    return SuccessResponse()


@router.delete("/{product_id}", response_model=SuccessResponse)
async def delete_product(
    product_id: int,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> SuccessResponse:
    """Elimina un producto junto con sus imágenes, enlaces y pedidos."""
    logger.info(f"🗑️ PRODUCTO: Eliminando producto {product_id}")
    await product_service.delete_existing_product(db=db, product_id=product_id)
    return SuccessResponse()

# ========================================
# GALERÍA DE IMÁGENES
# ========================================

@router.post("/{product_id}/images", response_model=image_schema.ImageResponse, status_code=status.HTTP_201_CREATED)
async def add_product_image(
    product_id: int,
    image_in: image_schema.ImageCreate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> image_schema.ImageResponse:
    """Añade una imagen a la galería. Solo se admite una miniatura por producto."""
    return await product_service.add_image(db=db, product_id=product_id, image_in=image_in)


@router.put("/{product_id}/images/{image_id}/thumbnail", response_model=image_schema.ImageResponse)
async def set_product_thumbnail(
    product_id: int,
    image_id: int,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> image_schema.ImageResponse:
    """Convierte la imagen indicada en la miniatura del producto."""
    return await product_service.set_thumbnail(db=db, product_id=product_id, image_id=image_id)


@router.delete("/{product_id}/images/{image_id}", response_model=SuccessResponse)
async def delete_product_image(
    product_id: int,
    image_id: int,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> SuccessResponse:
    await product_service.delete_image(db=db, product_id=product_id, image_id=image_id)
    return SuccessResponse()
