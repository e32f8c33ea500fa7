"""
Products API Endpoints
Handles product catalog management for a store

Storefront reads pass ?public=true and only see active products.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from store_admin.api.dependencies import get_owned_store, get_readable_store, server_error
from store_admin.core.database import get_db
from store_admin.domain.product import Product as ProductSchema, ProductCreate, ProductPatch, ProductUpdate
from store_admin.models import Store
from store_admin.repositories import ProductRepository
from store_admin.services.product_service import ProductService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stores/{subdomain}/products", tags=["Products"])


def _product_or_404(db: Session, store: Store, product_id: str, active_only: bool = False):
    product = ProductRepository(db).find_by_id(store.id, product_id, active_only=active_only)
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


@router.get("")
def list_products(
    search: Optional[str] = Query(None, description="Search by name, slug or SKU"),
    category_id: Optional[str] = Query(None, alias="categoryId"),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    store: Store = Depends(get_owned_store),
    db: Session = Depends(get_db),
):
    """
    Get the store's products with optional filters, newest first
    """
    products, total = ProductRepository(db).find_all(
        store.id,
        search=search,
        category_id=category_id,
        is_active=is_active,
        limit=limit,
        offset=(page - 1) * limit,
    )
    return {
        "products": [ProductSchema.model_validate(p).to_dict() for p in products],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": (total + limit - 1) // limit,
        },
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    store: Store = Depends(get_owned_store),
    db: Session = Depends(get_db),
):
    try:
        product = ProductService(db).create(store.id, payload)
        return ProductSchema.model_validate(product).to_dict()
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create product in {store.subdomain}: {e}", exc_info=True)
        raise server_error("Failed to create product", e)


@router.get("/{product_id}")
def get_product(
    product_id: str,
    public: bool = Query(False),
    store: Store = Depends(get_readable_store),
    db: Session = Depends(get_db),
):
    product = _product_or_404(db, store, product_id, active_only=public)
    return ProductSchema.model_validate(product).to_dict()


@router.patch("/{product_id}")
def patch_product(
    product_id: str,
    payload: ProductPatch,
    store: Store = Depends(get_owned_store),
    db: Session = Depends(get_db),
):
    """Partial update used by the editor's auto-save"""
    product = _product_or_404(db, store, product_id)
    try:
        product = ProductService(db).patch(product, payload)
        return ProductSchema.model_validate(product).to_dict()
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update product {product_id}: {e}", exc_info=True)
        raise server_error("Failed to update product", e)


@router.put("/{product_id}")
def update_product(
    product_id: str,
    payload: ProductUpdate,
    store: Store = Depends(get_owned_store),
    db: Session = Depends(get_db),
):
    product = _product_or_404(db, store, product_id)
    try:
        product = ProductService(db).replace(product, payload)
        return ProductSchema.model_validate(product).to_dict()
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update product {product_id}: {e}", exc_info=True)
        raise server_error("Failed to update product", e)


@router.delete("/{product_id}")
def delete_product(
    product_id: str,
    store: Store = Depends(get_owned_store),
    db: Session = Depends(get_db),
):
    product = _product_or_404(db, store, product_id)
    ProductService(db).delete(product)
    return {"message": "Product deleted successfully"}
