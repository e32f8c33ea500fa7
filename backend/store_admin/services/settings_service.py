"""
Store Settings Service

Reads and writes the store profile together with its 1:1 settings row.
Two write paths exist:
- PUT /settings: validated StoreSettingsUpdate, blobs replaced wholesale
- the `update_settings` AI action: loose field names mapped through aliases
Both commit store and settings in one transaction.
"""
import copy
import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic.alias_generators import to_snake
from sqlalchemy.orm import Session

from store_admin.domain.store import Store as StoreSchema
from store_admin.domain.store import StoreSettings as StoreSettingsSchema
from store_admin.domain.store import StoreSettingsUpdate
from store_admin.models import Store, StoreSettings
from store_admin.repositories import StoreRepository

logger = logging.getLogger(__name__)

# Columns of store_settings that can be written directly (blobs included)
SETTINGS_COLUMNS = {
    column.key for column in StoreSettings.__table__.columns
} - {"id", "store_id", "created_at", "updated_at", "extra"}

# Store columns reachable from the AI action
ACTION_STORE_FIELDS = {
    "name", "description", "currency", "email", "phone", "address",
    "facebook", "instagram", "twitter", "youtube", "primaryColor", "logo",
}

# Loose names the assistant may use -> canonical camelCase field
ACTION_FIELD_ALIASES = {
    "storeName": "name",
    "storeDescription": "description",
    "timezone": "timeZone",
    "googleAnalytics": "googleAnalyticsId",
    "facebookPixel": "facebookPixelId",
}

STANDARD_SHIPPING_DAYS = (3, 7)


def default_currency_entry(code: Optional[str]) -> Dict[str, Any]:
    return {
        "code": code or "USD",
        "rate": 1,
        "enabled": True,
        "symbol": "$",
        "symbolPosition": "before",
        "decimalPlaces": 2,
        "thousandsSeparator": ",",
        "decimalSeparator": ".",
        "roundingMode": "nearest",
    }


def standard_shipping_rate(price) -> Dict[str, Any]:
    min_days, max_days = STANDARD_SHIPPING_DAYS
    return {"name": "Standard Shipping", "price": price, "minDays": min_days, "maxDays": max_days}


def apply_tax_rate(tax_settings: Optional[Dict], rate) -> Dict:
    """Set the default tax rate and switch taxes on"""
    updated = copy.deepcopy(tax_settings) if tax_settings else {}
    updated["defaultRate"] = rate
    updated["enabled"] = True
    return updated


def apply_shipping_rate(shipping_zones: Optional[List[Dict]], rate) -> List[Dict]:
    """
    Replace the rates of the first zone with a single standard rate, or
    create a worldwide default zone when none exists
    """
    zones = copy.deepcopy(shipping_zones) if shipping_zones else []
    if zones:
        zones[0]["rates"] = [standard_shipping_rate(rate)]
    else:
        zones = [{
            "name": "Default Zone",
            "countries": ["*"],
            "rates": [standard_shipping_rate(rate)],
        }]
    return zones


def split_action_fields(data: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Split loose action fields into store and settings updates

    Returns:
        Tuple of (store_updates, settings_updates), both keyed by camelCase name
    """
    store_updates: Dict[str, Any] = {}
    settings_updates: Dict[str, Any] = {}

    for key, value in data.items():
        field = ACTION_FIELD_ALIASES.get(key, key)
        if field in ACTION_STORE_FIELDS:
            store_updates[field] = value
        else:
            settings_updates[field] = value

    return store_updates, settings_updates


class SettingsService:
    """
    Service for store settings reads and writes
    """

    def __init__(self, db: Session):
        self.db = db
        self.stores = StoreRepository(db)

    def get_settings_payload(self, store: Store) -> Dict[str, Any]:
        """
        Store fields plus a `settings` object with dashboard defaults applied
        """
        row = self.stores.get_settings(store.id)
        settings = StoreSettingsSchema.model_validate(row).to_dict() if row else {}

        settings["currencies"] = settings.get("currencies") or [default_currency_entry(store.currency)]
        settings["defaultCurrency"] = store.currency or "USD"
        settings["checkoutSettings"] = settings.get("checkoutSettings") or {}

        return {**StoreSchema.model_validate(store).to_dict(), "settings": settings}

    def update_settings(self, store: Store, payload: StoreSettingsUpdate) -> Dict[str, Any]:
        """
        Apply PUT /settings in one transaction

        `name`, `description` and `defaultCurrency` update the store row;
        every other provided field is upserted on the settings row.
        """
        # Blobs keep the dashboard's camelCase keys; only column names are snake_case
        values = {
            to_snake(key): value
            for key, value in payload.model_dump(by_alias=True, exclude_unset=True).items()
        }

        name = values.pop("name", None)
        has_description = "description" in values
        description = values.pop("description", None)
        default_currency = values.pop("default_currency", None)

        payments = values.pop("payments", None)
        if payments is not None and "payment_methods" not in values:
            values["payment_methods"] = payments

        try:
            if name:
                store.name = name
            if has_description:
                store.description = description
            if default_currency:
                store.currency = default_currency

            settings = self.stores.get_or_create_settings(store.id)
            for key, value in values.items():
                setattr(settings, key, value)

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(store)
        self.db.refresh(settings)
        logger.info(f"Settings updated for store {store.subdomain}: {sorted(values)}")

        return {
            **StoreSchema.model_validate(store).to_dict(),
            "settings": StoreSettingsSchema.model_validate(settings).to_dict(),
        }

    def apply_action_updates(self, store: Store, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply the loose field set of the `update_settings` action

        taxRate and shippingRate rewrite the tax settings and shipping zones
        blobs. Fields that match no settings column are kept in `extra`.

        Returns:
            The applied updates, keyed by canonical camelCase name
        """
        fields = dict(data or {})
        tax_rate = fields.pop("taxRate", None)
        shipping_rate = fields.pop("shippingRate", None)

        store_updates, settings_updates = split_action_fields(fields)

        try:
            for field, value in store_updates.items():
                setattr(store, to_snake(field), value)

            touches_settings = settings_updates or tax_rate is not None or shipping_rate is not None
            if touches_settings:
                settings = self.stores.get_or_create_settings(store.id)

                extra = dict(settings.extra or {})
                for field, value in settings_updates.items():
                    column = to_snake(field)
                    if column in SETTINGS_COLUMNS:
                        setattr(settings, column, value)
                    else:
                        extra[field] = value
                if extra != (settings.extra or {}):
                    settings.extra = extra

                if tax_rate is not None:
                    settings.tax_settings = apply_tax_rate(settings.tax_settings, tax_rate)
                if shipping_rate is not None:
                    settings.shipping_zones = apply_shipping_rate(settings.shipping_zones, shipping_rate)

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        applied = {**store_updates, **settings_updates}
        if tax_rate is not None:
            applied["taxRate"] = tax_rate
        if shipping_rate is not None:
            applied["shippingRate"] = shipping_rate
        return applied
