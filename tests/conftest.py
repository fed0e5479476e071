"""
Configuración de pytest - fixtures comunes

Cada test usa su propia base de datos SQLite en memoria (aiosqlite + StaticPool,
con claves foráneas activadas) y un cliente httpx contra la app FastAPI con
get_db sustituido.
"""
import os
import itertools

# Antes de importar la app: sin PostgreSQL en los tests
os.environ.setdefault("DATABASE_URI", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db
from app.core import security
from app.core.config import settings
from app.crud import user_crud
from app.db.database import enable_sqlite_foreign_keys, init_db, utcnow
from app.db.models.category_model import Category
from app.db.models.product_model import Product, ProductCategory, ProductImage
from app.main import app

API = settings.API_V1_STR

_slugs = itertools.count(1)


@pytest.fixture
async def engine():
    """Base de datos SQLite en memoria compartida por todas las sesiones del test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(engine.sync_engine)
    await init_db(bind=engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    """Cliente anónimo."""
    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def _make_user(db, role: str, email: str, password: str = "secret-password"):
    return await user_crud.create_user(
        db,
        name=role.capitalize(),
        email=email,
        password_hash=security.get_password_hash(password),
        role=role,
    )


@pytest.fixture
async def admin_user(db):
    return await _make_user(db, "admin", "admin@example.com")


@pytest.fixture
async def author_user(db):
    return await _make_user(db, "author", "author@example.com")


def _session_cookie(user) -> dict:
    return {settings.SESSION_COOKIE_NAME: security.create_access_token({"sub": user.id})}


@pytest.fixture
async def admin_client(client, admin_user):
    """Cliente con la cookie de sesión de un administrador."""
    client.cookies.update(_session_cookie(admin_user))
    return client


@pytest.fixture
async def author_client(client, author_user):
    """Cliente con la cookie de sesión de un autor (no administrador)."""
    client.cookies.update(_session_cookie(author_user))
    return client


@pytest.fixture
def make_category(db):
    async def _make(title: str = "Category", parent_id=None, slug=None) -> Category:
        category = Category(title=title, slug=slug or f"category-{next(_slugs)}", parent_id=parent_id)
        db.add(category)
        await db.commit()
        return category
    return _make


@pytest.fixture
def make_product(db):
    async def _make(
        category_id=None,
        sort_order: int = 1,
        title: str = "Product",
        extra_category_ids=(),
        sold: bool = False,
        is_recreatable: bool = False,
        image_path=None,
    ) -> Product:
        product = Product(
            slug=f"product-{next(_slugs)}",
            title=title,
            description_md="Handmade.",
            price_cents=1500,
            category_id=category_id,
            sort_order=sort_order,
            is_recreatable=is_recreatable,
            image_path=image_path,
        )
        if sold:
            product.sold_at = utcnow()
        db.add(product)
        await db.flush()
        for category_id in extra_category_ids:
            db.add(ProductCategory(product_id=product.id, category_id=category_id))
        await db.commit()
        return product
    return _make


@pytest.fixture
def make_image(db):
    async def _make(product_id: int, image_path: str = "/uploads/1-a.png", is_thumbnail: bool = False) -> ProductImage:
        image = ProductImage(product_id=product_id, image_path=image_path, is_thumbnail=is_thumbnail)
        db.add(image)
        await db.commit()
        return image
    return _make


@pytest.fixture
def sort_orders(db):
    """Lee {product_id: sort_order} directamente de la base de datos."""
    async def _read(category_id: int) -> dict:
        result = await db.execute(select(Product.id, Product.sort_order).filter(Product.category_id == category_id))
        return {row.id: row.sort_order for row in result.all()}
    return _read
