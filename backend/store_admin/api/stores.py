"""
Stores API Endpoints
Lists, creates and edits the stores owned by the signed-in user
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from store_admin.api.dependencies import get_owned_store, server_error
from store_admin.core.auth import TokenUser, get_current_user
from store_admin.core.config import settings
from store_admin.core.database import get_db
from store_admin.domain.store import Store as StoreSchema, StoreCreate, StoreUpdate
from store_admin.models import Store
from store_admin.repositories import StoreRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stores", tags=["Stores"])


@router.get("")
def list_stores(user: TokenUser = Depends(get_current_user), db: Session = Depends(get_db)):
    stores = StoreRepository(db).find_all_for_user(user.id)
    return {"stores": [StoreSchema.model_validate(s).to_dict() for s in stores]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_store(
    payload: StoreCreate,
    user: TokenUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Create a store for the current user

    Subdomains are unique across all users.
    """
    if not payload.name or not payload.subdomain:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Name and subdomain are required")

    repo = StoreRepository(db)
    try:
        if repo.subdomain_taken(payload.subdomain):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="This subdomain is already taken")
        if repo.find_user(user.id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

        store = repo.create(
            user.id,
            name=payload.name,
            subdomain=payload.subdomain,
            description=payload.description,
            currency=payload.currency or settings.DEFAULT_CURRENCY,
        )
        logger.info(f"Store {store.subdomain} created by {user.email}")
        return StoreSchema.model_validate(store).to_dict()

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create store {payload.subdomain}: {e}", exc_info=True)
        raise server_error("Failed to create store", e)


@router.get("/{subdomain}")
def get_store(store: Store = Depends(get_owned_store)):
    return StoreSchema.model_validate(store).to_dict()


@router.put("/{subdomain}")
def update_store(
    payload: StoreUpdate,
    store: Store = Depends(get_owned_store),
    db: Session = Depends(get_db),
):
    try:
        store = StoreRepository(db).update(store, payload.model_dump(exclude_unset=True))
        return StoreSchema.model_validate(store).to_dict()
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update store {store.subdomain}: {e}", exc_info=True)
        raise server_error("Failed to update store", e)


@router.delete("/{subdomain}")
def delete_store(store: Store = Depends(get_owned_store), db: Session = Depends(get_db)):
    subdomain = store.subdomain
    StoreRepository(db).delete(store)
    logger.info(f"Store {subdomain} deleted")
    return {"message": "Store deleted successfully"}
