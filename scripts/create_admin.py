# scripts/create_admin.py

"""
Script de alta del usuario administrador.

Propósito:
Crea las tablas que falten y da de alta al administrador del panel con las
credenciales de ADMIN_EMAIL y ADMIN_PASSWORD (variables de entorno o .env).
Si ya existe un usuario con ese email no hace nada, así que se puede ejecutar
en cada despliegue.

Uso:
    python scripts/create_admin.py [--name "Nombre"] [--email ...] [--password ...]
"""

import argparse
import asyncio
import logging
import os
import sys

# Añadir el directorio backend al PYTHONPATH
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "backend"))
sys.path.insert(0, project_root)

from app.core.config import settings
from app.db.database import AsyncSessionLocal, engine, init_db
from app.services.auth_service import auth_service

logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=settings.LOG_FORMAT)
logger = logging.getLogger("create_admin")


async def create_admin(name: str, email: str, password: str) -> None:
    await init_db()
    async with AsyncSessionLocal() as db:
        created = await auth_service.ensure_admin(db, email=email, password=password, name=name)
    await engine.dispose()

    if created:
        logger.info(f"✅ Administrador {email} creado")
    else:
        logger.info(f"ℹ️  Ya existe un usuario con el email {email}, no se modifica")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Crea el usuario administrador si no existe.")
    parser.add_argument("--name", type=str, default="Admin", help="Nombre visible del administrador.")
    parser.add_argument("--email", type=str, default=settings.ADMIN_EMAIL, help="Email (por defecto ADMIN_EMAIL).")
    parser.add_argument("--password", type=str, default=settings.ADMIN_PASSWORD, help="Contraseña (por defecto ADMIN_PASSWORD).")
    args = parser.parse_args()

    if not args.email or not args.password:
        logger.error("❌ Faltan ADMIN_EMAIL y/o ADMIN_PASSWORD")
        sys.exit(1)

    asyncio.run(create_admin(args.name, args.email, args.password))
