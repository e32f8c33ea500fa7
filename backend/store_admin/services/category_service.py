"""
Category (collection) Service

Validation and persistence rules shared by category create and update:
- name is required, type is manual or automatic
- slug defaults to a URL-safe form of the name and is unique per store
- automatic collections store their rule groups as {"groups": [...]}
- manual collections may reassign their products by id
"""
import logging
import re
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from store_admin.domain.category import CATEGORY_TYPES, Category as CategorySchema, CategoryInput, CategoryProduct
from store_admin.models import Category, Product
from store_admin.models.common import new_id
from store_admin.repositories import CategoryRepository

logger = logging.getLogger(__name__)


def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def _product_summary(product: Product) -> CategoryProduct:
    first_variant = product.variants[0] if product.variants else None
    return CategoryProduct(
        id=product.id,
        name=product.name,
        slug=product.slug,
        images=product.images or [],
        price=first_variant.price if first_variant else None,
    )


class CategoryService:

    def __init__(self, db: Session):
        self.db = db
        self.categories = CategoryRepository(db)

    def to_payload(
        self,
        category: Category,
        product_count: int,
        products: Optional[List[Product]] = None
    ) -> Dict[str, Any]:
        schema = CategorySchema.model_validate(category)
        schema.product_count = product_count
        exclude = None
        if products is None:
            exclude = {"products"}
        else:
            schema.products = [_product_summary(p) for p in products]
        return schema.to_dict(exclude=exclude)

    def list(self, store_id: str, public: bool = False) -> List[Dict[str, Any]]:
        rows = self.categories.find_all_with_counts(store_id, active_products_only=public)
        if public:
            rows = [(category, count) for category, count in rows if category.is_active]
        return [self.to_payload(category, count) for category, count in rows]

    def get(self, store_id: str, category_id: str, public: bool = False) -> Dict[str, Any]:
        """
        Single category; the admin view also embeds its products
        """
        category = self.categories.find_by_id(store_id, category_id)
        if category is None:
            raise LookupError("Category not found")

        count = self.categories.count_products(category.id, active_only=public)
        products = None if public else self.categories.find_products(category.id)
        return self.to_payload(category, count, products)

    def save(self, store_id: str, payload: CategoryInput, category: Optional[Category] = None) -> Dict[str, Any]:
        """
        Create (category=None) or update a category

        Raises:
            ValueError: name missing, invalid type or duplicate slug
        """
        if not payload.name:
            raise ValueError("Name is required")
        if payload.type and payload.type not in CATEGORY_TYPES:
            raise ValueError("Invalid collection type")

        category_id = category.id if category else new_id()
        # Names without ASCII letters or digits get an id-based slug
        slug = payload.slug or slugify(payload.name) or f"category-{category_id[:8]}"
        if self.categories.slug_exists(store_id, slug, exclude_id=category.id if category else None):
            raise ValueError("Category with this name already exists")

        fields: Dict[str, Any] = {
            "name": payload.name,
            "slug": slug,
            "description": payload.description,
            "image": payload.image,
        }
        for attr in ("is_active", "type", "sort_order", "seo_title", "seo_description"):
            value = getattr(payload, attr)
            if value is not None:
                fields[attr] = value

        if payload.type == "automatic" and "conditions" in payload.model_fields_set:
            fields["conditions"] = {"groups": payload.conditions} if payload.conditions else None

        if category is None:
            category = self.categories.create(store_id, {"id": category_id, **fields})
        else:
            category = self.categories.update(category, fields)

        if payload.type == "manual" and payload.product_ids is not None:
            self.categories.assign_products(store_id, category.id, payload.product_ids)

        self.categories.commit()
        self.db.refresh(category)
        logger.info(f"Category {category.id} saved in store {store_id}")

        products = self.categories.find_products(category.id) if category.type == "manual" else None
        return self.to_payload(category, self.categories.count_products(category.id), products)

    def delete(self, store_id: str, category_id: str) -> None:
        """
        Raises:
            LookupError: category not found
            ValueError: category still has products
        """
        category = self.categories.find_by_id(store_id, category_id)
        if category is None:
            raise LookupError("Category not found")
        if self.categories.count_products(category.id) > 0:
            raise ValueError("Cannot delete category with products. Remove all products first.")
        self.categories.delete(category)
