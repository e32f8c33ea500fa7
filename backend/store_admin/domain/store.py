"""
Store and Store Settings domain models

Settings blobs (checkout, orders, stock, shipping zones, ...) are nested
JSON objects the dashboard edits wholesale. Only the pieces the backend
relies on are typed; unknown keys are kept as-is.
"""
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import ConfigDict, Field, field_validator

from store_admin.domain.base import CamelModel
from store_admin.domain.order import validate_email


class Store(CamelModel):
    id: str
    user_id: str
    subdomain: str
    name: str
    description: Optional[str] = None
    currency: Optional[str] = "USD"
    logo: Optional[str] = None
    primary_color: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    twitter: Optional[str] = None
    youtube: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    keywords: Optional[str] = None
    banner_image: Optional[str] = None
    banner_title: Optional[str] = None
    banner_subtitle: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StoreCreate(CamelModel):
    name: Optional[str] = None
    subdomain: Optional[str] = None
    description: Optional[str] = None
    currency: Optional[str] = Field(None, min_length=3, max_length=3)


class StoreUpdate(CamelModel):
    """Editable store profile fields; omitted fields are left untouched"""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    logo: Optional[str] = None
    primary_color: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    twitter: Optional[str] = None
    youtube: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    keywords: Optional[str] = None
    banner_image: Optional[str] = None
    banner_title: Optional[str] = None
    banner_subtitle: Optional[str] = None


# ============================================================================
# Settings blobs
# ============================================================================

class Blob(CamelModel):
    """Settings blob: typed keys are validated, the rest pass through"""
    model_config = ConfigDict(extra="allow")


class CurrencyEntry(Blob):
    code: str = Field(..., min_length=3, max_length=3)  # ISO 4217
    rate: float = Field(..., gt=0)
    enabled: bool = True
    symbol: str = "$"
    symbol_position: Literal["before", "after"] = "before"
    decimal_places: int = Field(2, ge=0, le=4)
    thousands_separator: str = ","
    decimal_separator: str = "."
    rounding_mode: Literal["up", "down", "nearest"] = "nearest"


class OrderSettings(Blob):
    order_number_prefix: Optional[str] = None
    order_number_suffix: Optional[str] = None
    order_number_format: Literal["sequential", "random", "date-based"] = "sequential"
    order_number_start_value: Optional[int] = Field(None, ge=1)
    auto_archive_after_days: Optional[int] = Field(None, ge=0)


class StockSettings(Blob):
    track_inventory: bool = False
    allow_backorders: bool = False
    hide_out_of_stock: bool = False
    low_stock_threshold: Optional[int] = Field(None, ge=0)
    stock_display_format: Literal["exact", "range", "availability"] = "exact"
    reserve_stock_minutes: Optional[int] = Field(None, ge=0)


class StoreSettingsUpdate(CamelModel):
    """
    Body of PUT /settings. `name`, `description` and `defaultCurrency` go to
    the store row, everything else to store_settings.
    """
    # Store row
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    default_currency: Optional[str] = Field(None, min_length=3, max_length=3)

    # General
    time_zone: Optional[str] = None
    weight_unit: Optional[Literal["kg", "g", "lb", "oz"]] = None
    length_unit: Optional[Literal["cm", "m", "in", "ft"]] = None

    # Currencies
    currencies: Optional[List[CurrencyEntry]] = None
    auto_update_rates: Optional[bool] = None

    # Business details
    business_name: Optional[str] = None
    business_email: Optional[str] = None
    business_phone: Optional[str] = None
    business_address: Optional[str] = None
    business_city: Optional[str] = None
    business_state: Optional[str] = None
    business_zip: Optional[str] = None
    business_country: Optional[str] = None
    business_type: Optional[str] = None
    tax_id: Optional[str] = None

    # Analytics
    google_analytics_id: Optional[str] = None
    facebook_pixel_id: Optional[str] = None
    tiktok_pixel_id: Optional[str] = None

    # Social
    facebook_url: Optional[str] = None
    instagram_url: Optional[str] = None
    twitter_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    youtube_url: Optional[str] = None
    tiktok_url: Optional[str] = None

    # SEO
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: Optional[str] = None

    # Advanced
    enable_password_protection: Optional[bool] = None
    store_password: Optional[str] = None
    enable_age_verification: Optional[bool] = None
    minimum_age: Optional[int] = None
    enable_maintenance_mode: Optional[bool] = None
    maintenance_message: Optional[str] = None

    # Blobs
    business_hours: Optional[Dict[str, Any]] = None
    checkout_settings: Optional[Dict[str, Any]] = None
    order_settings: Optional[OrderSettings] = None
    stock_settings: Optional[StockSettings] = None
    tax_settings: Optional[Dict[str, Any]] = None
    payment_methods: Optional[Dict[str, Any]] = None
    payments: Optional[Dict[str, Any]] = None  # older dashboards post payment methods under this key
    shipping_zones: Optional[List[Dict[str, Any]]] = None
    gift_card_settings: Optional[Dict[str, Any]] = None
    locations: Optional[List[Dict[str, Any]]] = None
    staff_users: Optional[List[Dict[str, Any]]] = None
    email_settings: Optional[Dict[str, Any]] = None
    inventory: Optional[List[Dict[str, Any]]] = None

    @field_validator("business_email")
    @classmethod
    def _check_business_email(cls, v):
        return validate_email(v)


class StoreSettings(CamelModel):
    """Settings row as returned by GET /settings"""
    id: Optional[str] = None
    store_id: Optional[str] = None

    time_zone: Optional[str] = None
    weight_unit: Optional[str] = None
    length_unit: Optional[str] = None

    business_name: Optional[str] = None
    business_email: Optional[str] = None
    business_phone: Optional[str] = None
    business_address: Optional[str] = None
    business_city: Optional[str] = None
    business_state: Optional[str] = None
    business_zip: Optional[str] = None
    business_country: Optional[str] = None
    business_type: Optional[str] = None
    tax_id: Optional[str] = None

    google_analytics_id: Optional[str] = None
    facebook_pixel_id: Optional[str] = None
    tiktok_pixel_id: Optional[str] = None

    facebook_url: Optional[str] = None
    instagram_url: Optional[str] = None
    twitter_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    youtube_url: Optional[str] = None
    tiktok_url: Optional[str] = None

    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: Optional[str] = None

    enable_password_protection: Optional[bool] = None
    store_password: Optional[str] = None
    enable_age_verification: Optional[bool] = None
    minimum_age: Optional[int] = None
    enable_maintenance_mode: Optional[bool] = None
    maintenance_message: Optional[str] = None

    currencies: Optional[List[Dict[str, Any]]] = None
    auto_update_rates: Optional[bool] = None
    business_hours: Optional[Dict[str, Any]] = None
    checkout_settings: Optional[Dict[str, Any]] = None
    order_settings: Optional[Dict[str, Any]] = None
    stock_settings: Optional[Dict[str, Any]] = None
    tax_settings: Optional[Dict[str, Any]] = None
    payment_methods: Optional[Dict[str, Any]] = None
    shipping_zones: Optional[List[Dict[str, Any]]] = None
    gift_card_settings: Optional[Dict[str, Any]] = None
    locations: Optional[List[Dict[str, Any]]] = None
    staff_users: Optional[List[Dict[str, Any]]] = None
    email_settings: Optional[Dict[str, Any]] = None
    inventory: Optional[List[Dict[str, Any]]] = None
    extra: Optional[Dict[str, Any]] = None

    updated_at: Optional[datetime] = None
