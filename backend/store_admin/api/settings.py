"""
Store Settings API Endpoints

GET returns the store with its settings (dashboard defaults applied);
PUT validates and persists the settings form in one transaction.
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from store_admin.api.dependencies import get_owned_store, server_error
from store_admin.core.database import get_db
from store_admin.domain.store import StoreSettingsUpdate
from store_admin.models import Store
from store_admin.services.settings_service import SettingsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stores/{subdomain}/settings", tags=["Settings"])


@router.get("")
def get_settings(store: Store = Depends(get_owned_store), db: Session = Depends(get_db)):
    return SettingsService(db).get_settings_payload(store)


@router.put("")
def update_settings(
    payload: StoreSettingsUpdate,
    store: Store = Depends(get_owned_store),
    db: Session = Depends(get_db),
):
    """
    Update store settings

    name / description / defaultCurrency go to the store row; every other
    field is upserted on the settings row. Blobs are replaced wholesale.
    """
    try:
        return SettingsService(db).update_settings(store, payload)
    except Exception as e:
        logger.error(f"Failed to update settings for {store.subdomain}: {e}", exc_info=True)
        raise server_error("Failed to update settings", e)
