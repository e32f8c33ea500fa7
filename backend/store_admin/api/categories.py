"""
Categories (collections) API Endpoints
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from store_admin.api.dependencies import get_owned_store, get_readable_store, server_error
from store_admin.core.database import get_db
from store_admin.domain.category import CategoryInput
from store_admin.models import Store
from store_admin.repositories import CategoryRepository
from store_admin.services.category_service import CategoryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stores/{subdomain}/categories", tags=["Categories"])


@router.get("")
def list_categories(
    public: bool = Query(False),
    store: Store = Depends(get_readable_store),
    db: Session = Depends(get_db),
):
    """
    Categories with product counts

    Public listings only include active categories and count active products.
    """
    return {"categories": CategoryService(db).list(store.id, public=public)}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryInput,
    store: Store = Depends(get_owned_store),
    db: Session = Depends(get_db),
):
    try:
        return CategoryService(db).save(store.id, payload)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create category in {store.subdomain}: {e}", exc_info=True)
        raise server_error("Failed to create category", e)


@router.get("/{category_id}")
def get_category(
    category_id: str,
    public: bool = Query(False),
    store: Store = Depends(get_readable_store),
    db: Session = Depends(get_db),
):
    try:
        return CategoryService(db).get(store.id, category_id, public=public)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.put("/{category_id}")
def update_category(
    category_id: str,
    payload: CategoryInput,
    store: Store = Depends(get_owned_store),
    db: Session = Depends(get_db),
):
    category = CategoryRepository(db).find_by_id(store.id, category_id)
    if category is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")

    try:
        return CategoryService(db).save(store.id, payload, category=category)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update category {category_id}: {e}", exc_info=True)
        raise server_error("Failed to update category", e)


@router.delete("/{category_id}")
def delete_category(
    category_id: str,
    store: Store = Depends(get_owned_store),
    db: Session = Depends(get_db),
):
    try:
        CategoryService(db).delete(store.id, category_id)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"success": True}
