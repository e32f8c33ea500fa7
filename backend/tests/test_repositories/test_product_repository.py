"""
Tests for the product, store and translation repositories

Run against the in-memory SQLite schema from conftest.
"""
from datetime import datetime, timedelta, timezone

import pytest

from store_admin.models import Category, Product, ProductTranslation, ProductVariant, StoreSettings
from store_admin.repositories import ProductRepository, StoreRepository, TranslationRepository


@pytest.fixture
def products(db_session, store, foreign_store):
    """Three products in the demo store, one in another store"""
    category = Category(store_id=store.id, name="Teas", slug="teas")
    db_session.add(category)
    db_session.commit()

    long_ago = datetime.now(timezone.utc) - timedelta(days=30)
    rows = [
        (store, "Green Tea", category.id, True, ["tea"], [2, 8], None),
        (store, "Black Tea", category.id, False, ["tea", "sale"], [0], long_ago),
        (store, "Teapot", None, True, [], [12], None),
        (foreign_store, "Foreign Kettle", None, True, ["sale"], [0], None),
    ]
    created = {}
    for owner_store, name, category_id, active, tags, stocks, created_at in rows:
        product = Product(
            store_id=owner_store.id,
            name=name,
            slug=name.lower().replace(" ", "-"),
            category_id=category_id,
            is_active=active,
            tags=tags,
        )
        if created_at is not None:
            product.created_at = created_at
        for position, stock in enumerate(stocks):
            product.variants.append(ProductVariant(name=f"V{position}", price=5, stock=stock, position=position))
        db_session.add(product)
        db_session.commit()
        created[name] = product
    return created


class TestProductRepository:
    """ProductRepository queries are always scoped to one store"""

    def test_find_by_id_is_store_scoped(self, db_session, store, foreign_store, products):
        repo = ProductRepository(db_session)

        assert repo.find_by_id(store.id, products["Teapot"].id).name == "Teapot"
        assert repo.find_by_id(store.id, products["Foreign Kettle"].id) is None

    def test_find_by_id_active_only(self, db_session, store, products):
        repo = ProductRepository(db_session)

        assert repo.find_by_id(store.id, products["Black Tea"].id, active_only=True) is None

    def test_find_all_paginates(self, db_session, store, products):
        repo = ProductRepository(db_session)

        page, total = repo.find_all(store.id, limit=2, offset=0)

        assert total == 3
        assert len(page) == 2

    def test_find_matching_filters(self, db_session, store, products):
        repo = ProductRepository(db_session)

        out_of_stock = repo.find_matching(store.id, out_of_stock=True)
        tagged = repo.find_matching(store.id, tags=["sale"])
        recent = repo.find_matching(store.id, created_since=datetime.now(timezone.utc) - timedelta(days=7))
        inactive = repo.find_matching(store.id, is_active=False)

        assert [p.name for p in out_of_stock] == ["Black Tea"]
        assert [p.name for p in tagged] == ["Black Tea"]
        assert sorted(p.name for p in recent) == ["Green Tea", "Teapot"]
        assert [p.name for p in inactive] == ["Black Tea"]

    def test_find_newest_excludes_ids(self, db_session, store, products):
        repo = ProductRepository(db_session)

        newest = repo.find_newest(store.id, limit=5, exclude_ids=[products["Teapot"].id])

        assert [p.name for p in newest] == ["Green Tea", "Black Tea"]

    def test_find_low_stock_variants(self, db_session, store, products):
        repo = ProductRepository(db_session)

        variants = repo.find_low_stock_variants(store.id, threshold=5, limit=5)

        assert sorted((v.product.name, v.stock) for v in variants) == [("Black Tea", 0), ("Green Tea", 2)]

    def test_count_in_category(self, db_session, products):
        repo = ProductRepository(db_session)

        assert repo.count_in_category(products["Green Tea"].category_id) == 2


class TestStoreRepository:

    def test_find_owned(self, db_session, store, foreign_store):
        repo = StoreRepository(db_session)

        assert repo.find_owned("demo", store.user_id).id == store.id
        assert repo.find_owned(foreign_store.subdomain, store.user_id) is None

    def test_get_stats(self, db_session, store, products):
        repo = StoreRepository(db_session)

        stats = repo.get_stats(store.id, since=datetime.now(timezone.utc) - timedelta(days=30))

        assert stats["products"] == 3
        assert stats["categories"] == 1
        assert stats["orders"] == 0
        assert stats["recent_orders"] == []

    def test_get_or_create_settings(self, db_session, store):
        repo = StoreRepository(db_session)

        created = repo.get_or_create_settings(store.id)
        again = repo.get_or_create_settings(store.id)

        assert created is again
        assert db_session.query(StoreSettings).count() == 1


class TestTranslationRepository:

    def test_upsert_creates_then_updates(self, db_session, store, products):
        repo = TranslationRepository(db_session)
        tea = products["Green Tea"]

        first = repo.upsert("product", tea.id, "de", {"name": "Grüner Tee"})
        second = repo.upsert("product", tea.id, "de", {"name": "Grüntee", "description": "Mild"})

        assert first.id == second.id
        rows = db_session.query(ProductTranslation).filter_by(product_id=tea.id).all()
        assert [(r.language, r.name, r.description) for r in rows] == [("de", "Grüntee", "Mild")]

    def test_translated_product_ids(self, db_session, store, products):
        repo = TranslationRepository(db_session)
        repo.upsert("product", products["Teapot"].id, "tr", {"name": "Demlik"})

        assert repo.translated_product_ids(store.id, "tr") == {products["Teapot"].id}
        assert repo.translated_product_ids(store.id, "de") == set()

    def test_find_content_is_store_scoped(self, db_session, store, products):
        repo = TranslationRepository(db_session)

        assert repo.find_content("product", store.id, products["Foreign Kettle"].id) is None
        assert repo.find_content("product", store.id, products["Teapot"].id).name == "Teapot"
