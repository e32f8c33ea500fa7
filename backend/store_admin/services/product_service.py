"""
Product Service

Catalog defaults and the write paths shared by the product endpoints and the
AI actions (create, partial update, full update with variant replacement).
"""
import logging
import re
import time
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from store_admin.domain.product import ProductCreate, ProductPatch, ProductUpdate, VariantInput
from store_admin.models import Product, ProductVariant
from store_admin.repositories import ProductRepository

logger = logging.getLogger(__name__)

META_DESCRIPTION_LENGTH = 160


def slug_from_name(name: str) -> str:
    """Lowercase the name and join words with dashes"""
    return re.sub(r"\s+", "-", name.strip().lower())


def default_sku() -> str:
    return f"SKU-{int(time.time() * 1000)}"


def default_meta_description(description: Optional[str]) -> str:
    return (description or "")[:META_DESCRIPTION_LENGTH]


def parse_amount(value: Any, field: str) -> Decimal:
    """Decimal from a loose JSON number or numeric string"""
    if value is None or isinstance(value, bool):
        raise ValueError(f"{field} must be a number")
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"{field} must be a number")
    if not amount.is_finite():
        raise ValueError(f"{field} must be a number")
    return amount


def _variant_fields(variant: VariantInput) -> Dict[str, Any]:
    return {
        "name": variant.name,
        "price": variant.price,
        "compare_at_price": variant.compare_at_price,
        "stock": variant.stock,
        "sku": variant.sku or default_sku(),
        "options": variant.options or {},
    }


class ProductService:
    """
    Service for product writes
    """

    def __init__(self, db: Session):
        self.db = db
        self.products = ProductRepository(db)

    def create_from_action(self, store_id: str, data: Dict[str, Any]) -> Product:
        """
        Create a product with a single Default variant from loose action data

        Defaults: slug from name, meta title = name, meta description = first
        160 chars of the description, price 0, SKU-<epoch millis>, stock 0.
        """
        name = data.get("name")
        if not name:
            raise ValueError("Product name is required")

        description = data.get("description") or ""
        fields = {
            "name": name,
            "description": description,
            "slug": data.get("slug") or slug_from_name(name),
            "is_active": True if data.get("isActive") is None else bool(data["isActive"]),
            "product_type": data.get("productType") or "physical",
            "images": data.get("images") or [],
            "meta_title": data.get("metaTitle") or name,
            "meta_description": data.get("metaDescription") or default_meta_description(description),
            "tags": data.get("tags") or [],
            "category_id": data.get("categoryId") or None,
        }
        variant = {
            "name": "Default",
            "price": parse_amount(data.get("price") or 0, "price"),
            "compare_at_price": parse_amount(data["compareAtPrice"], "compareAtPrice") if data.get("compareAtPrice") else None,
            "sku": data.get("sku") or default_sku(),
            "stock": int(data.get("stock") or data.get("quantity") or 0),
            "options": {},
        }

        return self.products.create(store_id, fields, [variant])

    def update_from_action(self, store_id: str, data: Dict[str, Any]) -> Product:
        """
        Partial update from loose action data

        Only truthy fields are applied (isActive is applied whenever present).
        price / compareAtPrice go to the variant named Default, or the first one.
        """
        product_id = data.get("productId")
        product = self.products.find_by_id(store_id, product_id) if product_id else None
        if product is None:
            raise LookupError("Product not found")

        price = parse_amount(data["price"], "price") if "price" in data else None
        compare = data.get("compareAtPrice")
        compare_at_price = parse_amount(compare, "compareAtPrice") if compare is not None else None

        for key, column in (
            ("name", "name"),
            ("description", "description"),
            ("images", "images"),
            ("tags", "tags"),
            ("metaTitle", "meta_title"),
            ("metaDescription", "meta_description"),
        ):
            if data.get(key):
                setattr(product, column, data[key])
        if data.get("isActive") is not None:
            product.is_active = data["isActive"]

        if "price" in data or "compareAtPrice" in data:
            variant = next((v for v in product.variants if v.name == "Default"), None)
            if variant is None and product.variants:
                variant = product.variants[0]
            if variant is not None:
                if price is not None:
                    variant.price = price
                if "compareAtPrice" in data:
                    variant.compare_at_price = compare_at_price

        self.db.commit()
        self.db.refresh(product)
        return product

    def create(self, store_id: str, payload: ProductCreate) -> Product:
        fields = {
            "name": payload.name,
            "slug": payload.slug or slug_from_name(payload.name),
            "description": payload.description,
            "product_type": payload.product_type,
            "category_id": payload.category_id,
            "is_active": payload.is_active,
            "images": payload.images,
            "tags": payload.tags,
            "meta_title": payload.meta_title or payload.name,
            "meta_description": payload.meta_description or default_meta_description(payload.description),
        }
        product = self.products.create(store_id, fields, [_variant_fields(v) for v in payload.variants])
        logger.info(f"Product {product.id} created in store {store_id}")
        return product

    def patch(self, product: Product, payload: ProductPatch) -> Product:
        """Apply only the fields present in the request body"""
        return self.products.update(product, payload.model_dump(exclude_unset=True))

    def replace(self, product: Product, payload: ProductUpdate) -> Product:
        """
        Full update: product fields are overwritten and variants replaced.

        Variants whose id is not posted are deleted, posted ids are updated
        and entries without a known id are created.
        """
        product.name = payload.name
        product.description = payload.description
        product.product_type = payload.product_type or product.product_type
        product.category_id = payload.category_id
        product.meta_title = payload.meta_title
        product.meta_description = payload.meta_description
        product.slug = payload.slug or product.slug
        if payload.is_active is not None:
            product.is_active = payload.is_active
        if payload.tags is not None:
            product.tags = payload.tags
        if payload.images is not None:
            product.images = payload.images

        existing: Dict[str, ProductVariant] = {v.id: v for v in product.variants}
        kept: List[ProductVariant] = []

        for position, variant_input in enumerate(payload.variants):
            variant = existing.get(variant_input.id) if variant_input.id else None
            if variant is None:
                variant = ProductVariant(**_variant_fields(variant_input))
            else:
                variant.name = variant_input.name
                variant.price = variant_input.price
                variant.compare_at_price = variant_input.compare_at_price
                variant.stock = variant_input.stock
                variant.sku = variant_input.sku
                variant.options = variant_input.options or {}
            variant.position = position
            kept.append(variant)

        # delete-orphan cascade removes variants that were not posted
        product.variants = kept

        self.db.commit()
        self.db.refresh(product)
        return product

    def delete(self, product: Product) -> None:
        self.products.delete(product)
        logger.info(f"Product {product.id} deleted")
