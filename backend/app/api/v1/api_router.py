# backend/app/api/v1/api_router.py
"""
Este archivo contiene el router principal para la API versión 1.

Se encarga de registrar y configurar todos los routers de la versión 1 de la API.
"""

from fastapi import APIRouter

# Importación de routers especializados por dominio
from app.api.v1.endpoints import (
    auth,
    categories,
    orders,
    posts,
    products,
    uploads,
)

# ========================================
# CONFIGURACIÓN DEL ROUTER PRINCIPAL V1
# ========================================

# Contenedor para todos los sub-routers de la v1
api_router_v1 = APIRouter()

# ========================================
# REGISTRO DE ROUTERS POR DOMINIO
# ========================================

# ROUTER DE AUTENTICACIÓN
# Login, logout y usuario actual del panel
api_router_v1.include_router(
    auth.router,
    prefix="/auth",                 # Prefijo: /api/v1/auth
    tags=["Auth"]
)

# ROUTER DE CATEGORÍAS
# CRUD del árbol de categorías y orden manual de sus productos
api_router_v1.include_router(
    categories.router,              # Router con endpoints de categorías
    prefix="/categories",           # Prefijo: /api/v1/categories
    tags=["Categories"]             # Tag para documentación OpenAPI/Swagger
)

# ROUTER DE PRODUCTOS
# CRUD del catálogo y galería de imágenes
api_router_v1.include_router(
    products.router,
    prefix="/products",
    tags=["Products"]
)

# ROUTER DEL BLOG
api_router_v1.include_router(
    posts.router,
    prefix="/posts",
    tags=["Posts"]
)

# ROUTER DE PEDIDOS
# Solicitudes de contacto sobre productos
api_router_v1.include_router(
    orders.router,
    prefix="/orders",
    tags=["Orders"]
)

# ROUTER DE FICHEROS
# /upload (panel) y /uploads/{ruta} (público), sin prefijo propio
api_router_v1.include_router(
    uploads.router,
    tags=["Uploads"]
)
