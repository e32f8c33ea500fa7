"""
Shared route dependencies
"""
from typing import Optional

from fastapi import Depends, HTTPException, Query, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from store_admin.core.auth import TokenUser, get_current_user, get_current_user_optional
from store_admin.core.database import get_db
from store_admin.core.exception_handlers import invalid_input
from store_admin.models import Store
from store_admin.repositories import StoreRepository


def store_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Store not found")


def get_owned_store(
    subdomain: str,
    user: TokenUser = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> Store:
    """
    Resolve {subdomain} to a store owned by the current user.

    A store owned by someone else is reported exactly like a missing one.
    """
    store = StoreRepository(db).find_owned(subdomain, user.id)
    if store is None:
        raise store_not_found()
    return store


def get_readable_store(
    subdomain: str,
    public: bool = Query(False),
    user: Optional[TokenUser] = Depends(get_current_user_optional),
    db: Session = Depends(get_db)
) -> Store:
    """
    Store for read endpoints that also serve the storefront.

    With ?public=true any store is readable without a session; otherwise
    the usual ownership rule applies.
    """
    repo = StoreRepository(db)
    if public:
        store = repo.find_by_subdomain(subdomain)
    else:
        if user is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
        store = repo.find_owned(subdomain, user.id)

    if store is None:
        raise store_not_found()
    return store


def parse_body(model, body):
    """Validate a raw JSON body, turning pydantic errors into 400 Invalid input"""
    try:
        return model.model_validate(body or {})
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=invalid_input(e))


def server_error(message: str, e: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": message, "details": str(e)},
    )
