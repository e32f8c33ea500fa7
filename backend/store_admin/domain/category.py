"""
Category (collection) domain models
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from store_admin.domain.base import CamelModel

CATEGORY_TYPES = ("manual", "automatic")


class CategoryProduct(CamelModel):
    """Product summary shown when editing a manual collection"""
    id: str
    name: str
    slug: str
    images: List[str] = Field(default_factory=list)
    price: Optional[Decimal] = None

    @field_validator("images", mode="before")
    @classmethod
    def _none_to_list(cls, v):
        return v or []


class Category(CamelModel):
    id: str
    store_id: str
    name: str
    slug: str
    description: Optional[str] = None
    image: Optional[str] = None
    type: str = "manual"
    sort_order: int = 0
    conditions: Optional[Dict[str, Any]] = None
    is_active: bool = True
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    product_count: int = 0
    products: Optional[List[CategoryProduct]] = None


class CategoryInput(CamelModel):
    """
    Body for create/update. Name and type are checked by the service so the
    dashboard gets its specific messages ("Name is required", ...).
    """
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    type: Optional[str] = None
    sort_order: Optional[int] = None
    conditions: Optional[List[Dict[str, Any]]] = None
    product_ids: Optional[List[str]] = None
    is_active: Optional[bool] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
