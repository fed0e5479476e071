"""
Tests de los endpoints de productos y de su galería
"""
from sqlalchemy import select

from app.core.config import settings
from app.db.models.product_model import Product, ProductCategory

API = settings.API_V1_STR


def product_body(slug: str, **overrides) -> dict:
    body = {
        "title": "Pearl necklace",
        "slug": slug,
        "descriptionMd": "Freshwater pearls.",
        "priceCents": 4500,
    }
    body.update(overrides)
    return body


async def extra_links(db, product_id: int) -> list:
    result = await db.execute(
        select(ProductCategory.category_id)
        .filter(ProductCategory.product_id == product_id)
        .order_by(ProductCategory.category_id)
    )
    return [row[0] for row in result.all()]


async def stored(db, product_id: int):
    result = await db.execute(
        select(Product.category_id, Product.sort_order, Product.sold_at).filter(Product.id == product_id)
    )
    return result.one()


class TestCreate:

    async def test_appends_to_category(self, admin_client, make_category, make_product):
        category = await make_category()
        await make_product(category.id, sort_order=5)

        response = await admin_client.post(f"{API}/products", json=product_body("pearl", categoryId=category.id))
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["sortOrder"] == 6

    async def test_without_category(self, admin_client):
        response = await admin_client.post(f"{API}/products", json=product_body("pearl"))
        assert response.status_code == 201
        assert response.json()["sortOrder"] == 1

    async def test_first_category_id_becomes_primary(self, admin_client, db, make_category):
        a = await make_category()
        b = await make_category()

        response = await admin_client.post(
            f"{API}/products", json=product_body("pearl", categoryIds=[a.id, b.id, a.id])
        )
        product_id = response.json()["id"]

        assert (await stored(db, product_id)).category_id == a.id
        assert await extra_links(db, product_id) == [b.id]

    async def test_primary_is_never_a_link(self, admin_client, db, make_category):
        a = await make_category()
        b = await make_category()

        response = await admin_client.post(
            f"{API}/products", json=product_body("pearl", categoryId=b.id, categoryIds=[a.id, b.id])
        )
        product_id = response.json()["id"]

        assert (await stored(db, product_id)).category_id == b.id
        assert await extra_links(db, product_id) == [a.id]

    async def test_duplicate_slug(self, admin_client, make_product):
        existing = await make_product()
        response = await admin_client.post(f"{API}/products", json=product_body(existing.slug))
        assert response.status_code == 409
        assert response.json() == {"error": "Slug already in use"}

    async def test_unknown_category(self, admin_client):
        response = await admin_client.post(f"{API}/products", json=product_body("pearl", categoryId=999))
        assert response.status_code == 404

    async def test_price_must_be_positive(self, admin_client):
        response = await admin_client.post(f"{API}/products", json=product_body("pearl", priceCents=0))
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request"

    async def test_requires_admin(self, author_client):
        response = await author_client.post(f"{API}/products", json=product_body("pearl"))
        assert response.status_code == 401


class TestUpdate:

    async def test_move_to_other_category_goes_to_end(self, admin_client, db, make_category, make_product):
        a = await make_category()
        b = await make_category()
        product = await make_product(a.id, sort_order=1)
        await make_product(b.id, sort_order=4)

        response = await admin_client.put(
            f"{API}/products/{product.id}", json=product_body(product.slug, categoryId=b.id)
        )
        assert response.status_code == 200
        assert response.json() == {"success": True}

        row = await stored(db, product.id)
        assert (row.category_id, row.sort_order) == (b.id, 5)

    async def test_same_category_keeps_position(self, admin_client, db, make_category, make_product):
        a = await make_category()
        product = await make_product(a.id, sort_order=3)
        await make_product(a.id, sort_order=7)

        await admin_client.put(f"{API}/products/{product.id}", json=product_body(product.slug, categoryId=a.id))
        assert (await stored(db, product.id)).sort_order == 3

    async def test_new_primary_leaves_links(self, admin_client, db, make_category, make_product):
        a = await make_category()
        b = await make_category()
        product = await make_product(a.id, extra_category_ids=[b.id])

        await admin_client.put(f"{API}/products/{product.id}", json=product_body(product.slug, categoryId=b.id))
        assert await extra_links(db, product.id) == []

    async def test_replaces_links(self, admin_client, db, make_category, make_product):
        a = await make_category()
        b = await make_category()
        c = await make_category()
        product = await make_product(a.id, extra_category_ids=[b.id])

        await admin_client.put(
            f"{API}/products/{product.id}", json=product_body(product.slug, categoryId=a.id, categoryIds=[c.id])
        )
        assert await extra_links(db, product.id) == [c.id]

    async def test_sold_toggle(self, admin_client, db, make_product):
        product = await make_product()
        url = f"{API}/products/{product.id}"

        await admin_client.put(url, json=product_body(product.slug, sold=True))
        sold_at = (await stored(db, product.id)).sold_at
        assert sold_at is not None

        await admin_client.put(url, json=product_body(product.slug, sold=True))
        assert (await stored(db, product.id)).sold_at == sold_at

        await admin_client.put(url, json=product_body(product.slug, sold=False))
        assert (await stored(db, product.id)).sold_at is None

    async def test_unknown_product(self, admin_client):
        response = await admin_client.put(f"{API}/products/999", json=product_body("pearl"))
        assert response.status_code == 404
        assert response.json() == {"error": "Product not found"}


class TestReadAndDelete:

    async def test_detail_by_slug(self, client, make_category, make_product, make_image):
        a = await make_category()
        b = await make_category()
        product = await make_product(a.id, extra_category_ids=[b.id])
        await make_image(product.id, "/uploads/1-front.png", is_thumbnail=True)
        await make_image(product.id, "/uploads/2-back.png")

        response = await client.get(f"{API}/products/slug/{product.slug}")
        assert response.status_code == 200
        body = response.json()
        assert body["categoryId"] == a.id
        assert body["categoryIds"] == [b.id]
        assert body["isOrderable"] is True
        assert body["imagePath"] == "/uploads/1-front.png"
        assert [image["imagePath"] for image in body["images"]] == ["/uploads/1-front.png", "/uploads/2-back.png"]

    async def test_detail_unknown(self, client):
        assert (await client.get(f"{API}/products/slug/missing")).status_code == 404

    async def test_sold_listing(self, client, make_product):
        await make_product()
        sold = await make_product(sold=True)

        response = await client.get(f"{API}/products/sold")
        assert [p["id"] for p in response.json()] == [sold.id]

    async def test_admin_listing(self, admin_client, make_category, make_product):
        category = await make_category(title="Rings")
        older = await make_product(category.id)
        newer = await make_product()

        items = (await admin_client.get(f"{API}/products")).json()
        assert [item["id"] for item in items] == [newer.id, older.id]
        assert items[1]["categoryTitle"] == "Rings"
        assert items[0]["categoryTitle"] is None

    async def test_delete(self, admin_client, make_product, make_image):
        product = await make_product()
        await make_image(product.id)

        response = await admin_client.delete(f"{API}/products/{product.id}")
        assert response.status_code == 200
        assert (await admin_client.get(f"{API}/products/slug/{product.slug}")).status_code == 404
        assert (await admin_client.delete(f"{API}/products/{product.id}")).status_code == 404


class TestImages:

    async def test_single_thumbnail(self, admin_client, make_product):
        product = await make_product()
        url = f"{API}/products/{product.id}/images"

        first = await admin_client.post(url, json={"imagePath": "/uploads/1-a.png", "isThumbnail": True})
        assert first.status_code == 201
        assert first.json()["isThumbnail"] is True

        second = await admin_client.post(url, json={"imagePath": "/uploads/2-b.png", "isThumbnail": True})
        assert second.status_code == 409
        assert second.json() == {"error": "Product already has a thumbnail"}

        plain = await admin_client.post(url, json={"imagePath": "/uploads/2-b.png"})
        assert plain.status_code == 201

    async def test_move_thumbnail(self, admin_client, client, make_product, make_image):
        product = await make_product()
        old = await make_image(product.id, "/uploads/1-a.png", is_thumbnail=True)
        new = await make_image(product.id, "/uploads/2-b.png")

        response = await admin_client.put(f"{API}/products/{product.id}/images/{new.id}/thumbnail")
        assert response.status_code == 200

        images = (await client.get(f"{API}/products/slug/{product.slug}")).json()["images"]
        assert {image["id"]: image["isThumbnail"] for image in images} == {old.id: False, new.id: True}

    async def test_delete_image(self, admin_client, make_product, make_image):
        product = await make_product()
        image = await make_image(product.id)
        url = f"{API}/products/{product.id}/images/{image.id}"

        assert (await admin_client.delete(url)).status_code == 200
        assert (await admin_client.delete(url)).status_code == 404

    async def test_image_of_unknown_product(self, admin_client):
        response = await admin_client.post(f"{API}/products/999/images", json={"imagePath": "/uploads/a.png"})
        assert response.status_code == 404
