"""
Category Repository - Data Access Layer for categories (collections)
"""
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from store_admin.models import Category, Product


class CategoryRepository:

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, store_id: str, category_id: str) -> Optional[Category]:
        return (
            self.db.query(Category)
            .filter(Category.store_id == store_id, Category.id == category_id)
            .first()
        )

    def find_by_name_contains(self, store_id: str, fragment: str) -> Optional[Category]:
        """First category whose name contains fragment (case-insensitive)"""
        return (
            self.db.query(Category)
            .filter(
                Category.store_id == store_id,
                func.lower(Category.name).contains(fragment.lower()),
            )
            .order_by(Category.sort_order, Category.created_at)
            .first()
        )

    def slug_exists(self, store_id: str, slug: str, exclude_id: Optional[str] = None) -> bool:
        query = self.db.query(Category.id).filter(Category.store_id == store_id, Category.slug == slug)
        if exclude_id:
            query = query.filter(Category.id != exclude_id)
        return query.first() is not None

    def find_all_with_counts(self, store_id: str, active_products_only: bool = False) -> List[Tuple[Category, int]]:
        """
        Categories of a store with their product counts

        Returns:
            List of (category, product_count), ordered by sort_order then name
        """
        join_on = Product.category_id == Category.id
        if active_products_only:
            join_on = join_on & Product.is_active.is_(True)

        rows = (
            self.db.query(Category, func.count(Product.id))
            .outerjoin(Product, join_on)
            .filter(Category.store_id == store_id)
            .group_by(Category.id)
            .order_by(Category.sort_order, Category.name)
            .all()
        )
        return [(category, count) for category, count in rows]

    def count_products(self, category_id: str, active_only: bool = False) -> int:
        query = self.db.query(func.count(Product.id)).filter(Product.category_id == category_id)
        if active_only:
            query = query.filter(Product.is_active.is_(True))
        return query.scalar()

    def find_products(self, category_id: str) -> List[Product]:
        return (
            self.db.query(Product)
            .filter(Product.category_id == category_id)
            .order_by(Product.name)
            .all()
        )

    def create(self, store_id: str, fields: Dict) -> Category:
        category = Category(store_id=store_id, **fields)
        self.db.add(category)
        self.db.flush()
        return category

    def update(self, category: Category, fields: Dict) -> Category:
        for key, value in fields.items():
            setattr(category, key, value)
        self.db.flush()
        return category

    def assign_products(self, store_id: str, category_id: str, product_ids: List[str]) -> None:
        """Replace the product membership of a manual collection"""
        (
            self.db.query(Product)
            .filter(Product.category_id == category_id)
            .update({Product.category_id: None}, synchronize_session=False)
        )
        if product_ids:
            (
                self.db.query(Product)
                .filter(Product.store_id == store_id, Product.id.in_(product_ids))
                .update({Product.category_id: category_id}, synchronize_session=False)
            )
        self.db.flush()

    def delete(self, category: Category) -> None:
        self.db.delete(category)
        self.db.commit()

    def commit(self) -> None:
        self.db.commit()
