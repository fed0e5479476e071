# backend/app/main.py
"""
Punto de entrada principal de la aplicación FastAPI.

Este módulo configura y inicializa la aplicación FastAPI completa,
incluyendo la configuración de logging, el registro de rutas, el formato
común de los errores y los eventos del ciclo de vida de la aplicación.

Características principales:
- Configuración centralizada de la aplicación
- Registro de routers de la API con prefijos
- Errores con la forma {"error": ..., "details"?: ...}
- Creación de tablas al arrancar (lifespan)
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings  # Configuración centralizada de la aplicación
from app.api.v1.api_router import api_router_v1  # Router principal de la API v1
from app.db.database import init_db

# ========================================
# CONFIGURACIÓN DE LOGGING
# ========================================

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format=settings.LOG_FORMAT,
)
logger = logging.getLogger(__name__)

# ========================================
# EVENTOS DEL CICLO DE VIDA DE LA APLICACIÓN
# ========================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Arranque: crea las tablas que falten y el directorio de subidas.
    """
    logger.info("Inicializando base de datos...")
    await init_db()
    Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
    logger.info(f"✅ {settings.PROJECT_NAME} v{settings.PROJECT_VERSION} listo")
    yield
    logger.info("Apagando la aplicación")

# ========================================
# CONFIGURACIÓN DE LA APLICACIÓN FASTAPI
# ========================================

app = FastAPI(
    title=settings.PROJECT_NAME,  # Nombre del proyecto desde configuración
    openapi_url=f"{settings.API_V1_STR}/openapi.json",  # URL del schema OpenAPI personalizada
    version=settings.PROJECT_VERSION,  # Versión del proyecto desde configuración
    description="API de la tienda y el blog, con panel de administración",
    lifespan=lifespan,
)

# ========================================
# MANEJO DE ERRORES
# ========================================

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Cualquier HTTPException se devuelve como {"error": detail}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Los errores de validación de cuerpo, ruta o query se devuelven como 400 con el detalle por campo."""
    logger.warning(f"Petición inválida en {request.method} {request.url.path}: {len(exc.errors())} errores")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Excepción no controlada: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal Server Error"},
    )

# ========================================
# REGISTRO DE ROUTERS DE LA API
# ========================================

# El prefijo se obtiene de settings (típicamente "/api/v1")
app.include_router(api_router_v1, prefix=settings.API_V1_STR)

# ========================================
# ENDPOINTS RAÍZ Y VERIFICACIÓN DE ESTADO
# ========================================

@app.get("/", tags=["Root"])
async def read_root():
    """
    Endpoint raíz para verificación básica del estado de la API.

    Returns:
        dict: Mensaje de bienvenida con información del proyecto

    Example:
        GET /
        Response: {"message": "Bienvenido a Addy Storefront API v0.1.0"}
    """
    return {"message": f"Bienvenido a {settings.PROJECT_NAME} v{settings.PROJECT_VERSION}"}
