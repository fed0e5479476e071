"""
Tests del servicio de orden manual de productos
"""
import pytest
from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError

from app.crud import category_crud, product_crud
from app.services.category_service import category_service
from app.services.ordering_service import ordering_service


class TestAssignInitialOrder:

    async def test_empty_category_starts_at_one(self, db, make_category):
        category = await make_category()
        assert await ordering_service.assign_initial_order(db, category.id) == 1

    async def test_appends_after_current_max(self, db, make_category, make_product):
        category = await make_category()
        await make_product(category.id, sort_order=2)
        await make_product(category.id, sort_order=5)
        assert await ordering_service.assign_initial_order(db, category.id) == 6

    async def test_no_category(self, db):
        assert await ordering_service.assign_initial_order(db, None) == 1

    async def test_bumps_version(self, db, make_category):
        category = await make_category()
        await ordering_service.assign_initial_order(db, category.id)
        await db.commit()
        assert await category_crud.get_products_version(db, category.id) == 1


class TestReorder:

    async def test_rewrites_positions_in_sequence(self, db, make_category, make_product, sort_orders):
        category = await make_category()
        p1 = await make_product(category.id, sort_order=1)
        p2 = await make_product(category.id, sort_order=2)
        p3 = await make_product(category.id, sort_order=3)

        await ordering_service.reorder(db, category.id, [p3.id, p1.id, p2.id])

        assert await sort_orders(category.id) == {p3.id: 1, p1.id: 2, p2.id: 3}
        members = await ordering_service.members_of(db, [category.id])
        assert [p.id for p in members] == [p3.id, p1.id, p2.id]

    async def test_size_mismatch_writes_nothing(self, db, make_category, make_product, sort_orders):
        category = await make_category()
        p1 = await make_product(category.id, sort_order=1)
        p2 = await make_product(category.id, sort_order=2)

        with pytest.raises(HTTPException) as exc_info:
            await ordering_service.reorder(db, category.id, [p2.id])

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Mismatched product set"
        assert await sort_orders(category.id) == {p1.id: 1, p2.id: 2}

    async def test_duplicates_count_as_mismatch(self, db, make_category, make_product):
        category = await make_category()
        p1 = await make_product(category.id, sort_order=1)
        await make_product(category.id, sort_order=2)

        with pytest.raises(HTTPException) as exc_info:
            await ordering_service.reorder(db, category.id, [p1.id, p1.id])
        assert exc_info.value.detail == "Mismatched product set"

    async def test_foreign_product_rejected(self, db, make_category, make_product, sort_orders):
        category = await make_category()
        other = await make_category()
        p1 = await make_product(category.id, sort_order=1)
        await make_product(category.id, sort_order=2)
        stranger = await make_product(other.id, sort_order=1)

        with pytest.raises(HTTPException) as exc_info:
            await ordering_service.reorder(db, category.id, [p1.id, stranger.id])

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Invalid product in order list"
        assert (await sort_orders(category.id))[p1.id] == 1

    async def test_unknown_category(self, db):
        with pytest.raises(HTTPException) as exc_info:
            await ordering_service.reorder(db, 999, [1])
        assert exc_info.value.status_code == 404

    async def test_stale_version_rejected(self, db, make_category, make_product, sort_orders):
        category = await make_category()
        p1 = await make_product(category.id, sort_order=1)
        p2 = await make_product(category.id, sort_order=2)

        new_version = await ordering_service.reorder(db, category.id, [p2.id, p1.id], expected_version=0)
        assert new_version == 1

        with pytest.raises(HTTPException) as exc_info:
            await ordering_service.reorder(db, category.id, [p1.id, p2.id], expected_version=0)

        assert exc_info.value.status_code == 409
        assert exc_info.value.detail == "Stale product order"
        assert await sort_orders(category.id) == {p2.id: 1, p1.id: 2}

    async def test_concurrent_bump_without_version_last_write_wins(
        self, db, make_category, make_product, sort_orders, monkeypatch
    ):
        category = await make_category()
        p1 = await make_product(category.id, sort_order=1)
        p2 = await make_product(category.id, sort_order=2)

        original = product_crud.set_sort_order
        bumped = []

        # Otro administrador añade un producto a la categoría durante la reordenación
        async def set_sort_order_with_concurrent_bump(db, product_id, sort_order):
            if not bumped:
                bumped.append(product_id)
                await category_crud.bump_products_version(db, category_id=category.id)
            await original(db, product_id=product_id, sort_order=sort_order)

        monkeypatch.setattr(product_crud, "set_sort_order", set_sort_order_with_concurrent_bump)

        new_version = await ordering_service.reorder(db, category.id, [p2.id, p1.id])

        assert new_version == 2
        assert await sort_orders(category.id) == {p2.id: 1, p1.id: 2}

    async def test_concurrent_bump_with_version_rejected(
        self, db, make_category, make_product, sort_orders, monkeypatch
    ):
        category = await make_category()
        category_id = category.id
        p1 = await make_product(category.id, sort_order=1)
        p2 = await make_product(category.id, sort_order=2)
        id1, id2 = p1.id, p2.id

        original = product_crud.set_sort_order
        bumped = []

        async def set_sort_order_with_concurrent_bump(db, product_id, sort_order):
            if not bumped:
                bumped.append(product_id)
                await category_crud.bump_products_version(db, category_id=category_id)
            await original(db, product_id=product_id, sort_order=sort_order)

        monkeypatch.setattr(product_crud, "set_sort_order", set_sort_order_with_concurrent_bump)

        with pytest.raises(HTTPException) as exc_info:
            await ordering_service.reorder(db, category_id, [id2, id1], expected_version=0)

        assert exc_info.value.status_code == 409
        assert await sort_orders(category_id) == {id1: 1, id2: 2}
        assert await category_crud.get_products_version(db, category_id) == 0

    async def test_storage_failure_keeps_previous_order(
        self, db, make_category, make_product, sort_orders, monkeypatch
    ):
        category = await make_category()
        category_id = category.id
        p1 = await make_product(category.id, sort_order=1)
        p2 = await make_product(category.id, sort_order=2)
        p3 = await make_product(category.id, sort_order=3)
        # Se leen antes: el rollback expira los objetos de la sesión
        id1, id2, id3 = p1.id, p2.id, p3.id

        original = product_crud.set_sort_order
        calls = []

        async def failing_set_sort_order(db, product_id, sort_order):
            calls.append(product_id)
            if len(calls) == 2:
                raise SQLAlchemyError("disk I/O error")
            await original(db, product_id=product_id, sort_order=sort_order)

        monkeypatch.setattr(product_crud, "set_sort_order", failing_set_sort_order)

        with pytest.raises(HTTPException) as exc_info:
            await ordering_service.reorder(db, category_id, [id3, id2, id1])

        assert exc_info.value.status_code == 500
        assert await sort_orders(category_id) == {id1: 1, id2: 2, id3: 3}
        assert await category_crud.get_products_version(db, category_id) == 0


class TestMembership:

    async def test_union_of_primary_and_links(self, db, make_category, make_product):
        a = await make_category()
        b = await make_category()
        primary = await make_product(a.id, sort_order=2)
        linked = await make_product(b.id, sort_order=1, extra_category_ids=[a.id])
        await make_product(b.id, sort_order=3)

        members = await ordering_service.members_of(db, [a.id])
        assert [p.id for p in members] == [linked.id, primary.id]

    async def test_no_duplicates_across_scope(self, db, make_category, make_product):
        a = await make_category()
        b = await make_category()
        product = await make_product(a.id, extra_category_ids=[b.id])

        members = await ordering_service.members_of(db, [a.id, b.id])
        assert [p.id for p in members] == [product.id]

    async def test_equal_positions_newest_first(self, db, make_category, make_product):
        a = await make_category()
        older = await make_product(a.id, sort_order=1)
        newer = await make_product(a.id, sort_order=1)

        members = await ordering_service.members_of(db, [a.id])
        assert [p.id for p in members] == [newer.id, older.id]

    async def test_sold_filter(self, db, make_category, make_product):
        a = await make_category()
        available = await make_product(a.id, sort_order=1)
        sold = await make_product(a.id, sort_order=2, sold=True)
        recreatable = await make_product(a.id, sort_order=3, sold=True, is_recreatable=True)

        everything = await ordering_service.members_of(db, [a.id])
        assert [p.id for p in everything] == [available.id, sold.id, recreatable.id]

        public = await ordering_service.members_of(db, [a.id], include_sold=False)
        assert [p.id for p in public] == [available.id, recreatable.id]


class TestReassignment:

    async def test_moved_product_goes_to_end(self, db, make_category, make_product):
        a = await make_category()
        b = await make_category()
        product = await make_product(a.id, sort_order=1)
        await make_product(b.id, sort_order=3)

        product.category_id = b.id
        new_order = await ordering_service.on_category_reassignment(db, product, a.id, b.id)
        assert new_order == 4
        assert product.sort_order == 4

    async def test_same_category_keeps_position(self, db, make_category, make_product):
        a = await make_category()
        product = await make_product(a.id, sort_order=7)
        assert await ordering_service.on_category_reassignment(db, product, a.id, a.id) == 7


class TestCategoryScope:

    async def test_children_one_level(self, db, make_category):
        a = await make_category()
        b = await make_category(parent_id=a.id)
        c = await make_category(parent_id=a.id)
        await make_category(parent_id=b.id)

        scope = await category_service.resolve_category_scope(db, a.id)
        assert sorted(scope) == sorted([a.id, b.id, c.id])

    async def test_subcategory_filter(self, db, make_category):
        a = await make_category()
        b = await make_category(parent_id=a.id)
        assert await category_service.resolve_category_scope(db, a.id, str(b.id)) == [b.id]

    async def test_malformed_filter_ignored(self, db, make_category):
        a = await make_category()
        assert await category_service.resolve_category_scope(db, a.id, "not-a-number") == [a.id]

    async def test_out_of_range_filter_ignored(self, db, make_category):
        a = await make_category()
        b = await make_category(parent_id=a.id)
        for raw in ("99999999999999999999", "0", "-1"):
            assert await category_service.resolve_category_scope(db, a.id, raw) == [a.id, b.id]
