"""
Product Domain Models

Read models returned by the API and the write schemas the product editor
posts. Price and stock live on variants; a product always has at least one.
"""
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Literal, Optional

from pydantic import Field, field_validator

from store_admin.domain.base import CamelModel

ProductType = Literal["physical", "digital", "service"]


class CategoryRef(CamelModel):
    id: str
    name: str
    slug: str


class Variant(CamelModel):
    id: str
    name: str
    price: Decimal = Decimal("0")
    compare_at_price: Optional[Decimal] = None
    sku: Optional[str] = None
    stock: int = 0
    options: Dict = Field(default_factory=dict)

    @field_validator("options", mode="before")
    @classmethod
    def _none_to_dict(cls, v):
        return v or {}

    @field_validator("stock", mode="before")
    @classmethod
    def _none_to_zero(cls, v):
        return v or 0


class Product(CamelModel):
    """
    Product as the dashboard sees it, with variants and category embedded
    """
    id: str
    store_id: str
    category_id: Optional[str] = None
    name: str
    slug: str
    description: Optional[str] = None
    product_type: str = "physical"
    is_active: bool = True
    images: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    variants: List[Variant] = Field(default_factory=list)
    category: Optional[CategoryRef] = None

    @field_validator("images", "tags", mode="before")
    @classmethod
    def _none_to_list(cls, v):
        return v or []

    @property
    def total_stock(self) -> int:
        return sum(v.stock for v in self.variants)


class VariantInput(CamelModel):
    """Variant as posted by the product editor"""
    id: Optional[str] = None
    name: str = "Default"
    price: Decimal = Field(Decimal("0"), ge=0, description="Price must be a positive number")
    compare_at_price: Optional[Decimal] = Field(None, ge=0)
    stock: int = Field(0, ge=0, description="Stock must be a positive integer")
    sku: Optional[str] = None
    options: Dict[str, str] = Field(default_factory=dict)


class ProductCreate(CamelModel):
    """Schema for creating a new product"""
    name: str = Field(..., min_length=1)
    slug: Optional[str] = None
    description: Optional[str] = None
    product_type: ProductType = "physical"
    category_id: Optional[str] = None
    is_active: bool = True
    images: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    variants: List[VariantInput] = Field(..., min_length=1)


class ProductPatch(CamelModel):
    """Schema for partial updates (editor auto-save)"""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    product_type: Optional[ProductType] = None
    category_id: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    slug: Optional[str] = None
    is_active: Optional[bool] = None
    images: Optional[List[str]] = None
    tags: Optional[List[str]] = None


class ProductUpdate(CamelModel):
    """
    Schema for full updates. Variants are replaced: entries with an id are
    updated, entries without one are created, missing ones are deleted.
    """
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    product_type: Optional[ProductType] = None
    category_id: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    slug: Optional[str] = None
    is_active: Optional[bool] = None
    images: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    variants: List[VariantInput] = Field(..., min_length=1)
