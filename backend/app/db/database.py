# backend/app/db/database.py

"""
Configuración principal de la base de datos para la aplicación.

Este módulo establece la conexión con la base de datos usando SQLAlchemy asíncrono
y define los componentes básicos que serán utilizados por toda la aplicación:
- Motor de base de datos (engine)
- Fábrica de sesiones (AsyncSessionLocal)
- Clase base para modelos (Base)
- Creación de tablas al arrancar (init_db)

En despliegue se usa PostgreSQL (asyncpg); en local y en los tests, SQLite (aiosqlite).
"""

from datetime import datetime, timezone
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession, AsyncEngine
from sqlalchemy.orm import declarative_base
from app.core.config import settings # Importamos nuestra configuración


def enable_sqlite_foreign_keys(sync_engine: Engine) -> None:
    """
    SQLite no aplica las claves foráneas (ni ON DELETE CASCADE) salvo que se
    active el pragma en cada conexión.
    """
    @event.listens_for(sync_engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Crear el motor de base de datos asíncrono
engine = create_async_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO, pool_pre_ping=True)

if settings.DATABASE_URL.startswith("sqlite"):
    enable_sqlite_foreign_keys(engine.sync_engine)

# Crear un sessionmaker asíncrono
# expire_on_commit=False es importante para que los objetos sigan siendo utilizables
# después de que la transacción se haya confirmado.
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

# Clase base declarativa para todos los modelos ORM
# Todos los modelos en app/db/models heredarán de esta clase
Base = declarative_base()


def utcnow() -> datetime:
    """Marca temporal por defecto de las columnas created_at (UTC)."""
    return datetime.now(timezone.utc)


async def init_db(bind: AsyncEngine = engine) -> None:
    """
    Crea las tablas que falten. Importa los modelos para registrarlos en Base.metadata.
    """
    from app.db.models import category_model, product_model, order_model, post_model, user_model  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

