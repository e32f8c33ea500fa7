"""
Product Repository - Data Access Layer for Products

Handles all database queries for products and their variants.
"""
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from store_admin.models import Product, ProductVariant


class ProductRepository:
    """
    Repository for Product data access

    All queries for products are centralized here and always scoped by store.
    """

    def __init__(self, db: Session):
        self.db = db

    def _base_query(self, store_id: str):
        return (
            self.db.query(Product)
            .options(selectinload(Product.variants), selectinload(Product.category))
            .filter(Product.store_id == store_id)
        )

    def find_by_id(self, store_id: str, product_id: str, active_only: bool = False) -> Optional[Product]:
        """
        Find product by ID inside a store

        Args:
            store_id: Owning store
            product_id: Product ID
            active_only: Only return the product if it is active (storefront reads)

        Returns:
            Product or None if not found
        """
        query = self._base_query(store_id).filter(Product.id == product_id)
        if active_only:
            query = query.filter(Product.is_active.is_(True))
        return query.first()

    def find_all(
        self,
        store_id: str,
        search: Optional[str] = None,
        category_id: Optional[str] = None,
        is_active: Optional[bool] = None,
        limit: int = 50,
        offset: int = 0
    ) -> Tuple[List[Product], int]:
        """
        Find products with filters, newest first

        Args:
            search: Case-insensitive match on name, slug or variant SKU
            category_id: Filter by category
            is_active: Filter by active status
            limit: Maximum results to return
            offset: Number of results to skip

        Returns:
            Tuple of (products list, total count)
        """
        query = self._base_query(store_id)

        if category_id:
            query = query.filter(Product.category_id == category_id)
        if is_active is not None:
            query = query.filter(Product.is_active.is_(is_active))
        if search:
            pattern = f"%{search.lower()}%"
            sku_match = select(ProductVariant.product_id).where(func.lower(ProductVariant.sku).like(pattern))
            query = query.filter(or_(
                func.lower(Product.name).like(pattern),
                func.lower(Product.slug).like(pattern),
                Product.id.in_(sku_match),
            ))

        total = query.count()
        products = (
            query.order_by(Product.created_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return products, total

    def find_matching(
        self,
        store_id: str,
        category_id: Optional[str] = None,
        is_active: Optional[bool] = None,
        out_of_stock: bool = False,
        created_since: Optional[datetime] = None,
        tags: Optional[Iterable[str]] = None,
    ) -> List[Product]:
        """
        Products selected by a bulk operation filter

        tags matches products carrying any of the given tags.
        """
        query = self._base_query(store_id)

        if category_id:
            query = query.filter(Product.category_id == category_id)
        if is_active is not None:
            query = query.filter(Product.is_active.is_(is_active))
        if out_of_stock:
            empty_variants = (
                select(ProductVariant.product_id)
                .join(Product, Product.id == ProductVariant.product_id)
                .where(Product.store_id == store_id, ProductVariant.stock == 0)
            )
            query = query.filter(Product.id.in_(empty_variants))
        if created_since is not None:
            query = query.filter(Product.created_at >= created_since)

        products = query.order_by(Product.created_at.desc()).all()

        # JSON arrays are filtered in Python so the query stays portable
        if tags:
            wanted = set(tags)
            products = [p for p in products if wanted.intersection(p.tags or [])]

        return products

    def find_newest(
        self,
        store_id: str,
        limit: int,
        category_id: Optional[str] = None,
        exclude_ids: Optional[Iterable[str]] = None,
    ) -> List[Product]:
        query = self._base_query(store_id)
        if category_id:
            query = query.filter(Product.category_id == category_id)
        exclude_ids = list(exclude_ids or [])
        if exclude_ids:
            query = query.filter(Product.id.notin_(exclude_ids))
        return query.order_by(Product.created_at.desc()).limit(limit).all()

    def find_all_for_export(self, store_id: str) -> List[Product]:
        return self._base_query(store_id).order_by(Product.created_at.desc()).all()

    def create(self, store_id: str, fields: Dict, variants: List[Dict]) -> Product:
        """
        Create a product together with its variants

        Args:
            fields: Product column values
            variants: Variant column values, in display order
        """
        product = Product(store_id=store_id, **fields)
        for position, variant in enumerate(variants):
            product.variants.append(ProductVariant(position=position, **variant))
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def update(self, product: Product, fields: Dict) -> Product:
        for key, value in fields.items():
            setattr(product, key, value)
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete(self, product: Product) -> None:
        self.db.delete(product)
        self.db.commit()

    def count_in_category(self, category_id: str) -> int:
        return self.db.query(func.count(Product.id)).filter(Product.category_id == category_id).scalar()

    def find_low_stock_variants(self, store_id: str, threshold: int = 5, limit: int = 5) -> List[ProductVariant]:
        """Variants with stock below threshold, with their product loaded"""
        return (
            self.db.query(ProductVariant)
            .join(Product, Product.id == ProductVariant.product_id)
            .options(selectinload(ProductVariant.product))
            .filter(Product.store_id == store_id, ProductVariant.stock < threshold)
            .limit(limit)
            .all()
        )
