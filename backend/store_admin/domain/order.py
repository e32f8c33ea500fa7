"""
Order Domain Models

Read models for orders and line items, plus the create/update schemas the
admin order screens post.
"""
import re
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Literal, Optional

from pydantic import Field, field_validator

from store_admin.domain.base import CamelModel

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

FinancialStatus = Literal[
    "pending", "authorized", "paid", "partially_paid", "refunded", "partially_refunded", "voided"
]
FulfillmentStatus = Literal["unfulfilled", "partial", "fulfilled", "restocked"]
CancelReason = Literal["customer", "fraud", "inventory", "declined", "other"]


def validate_email(value: Optional[str]) -> Optional[str]:
    if value is not None and not EMAIL_RE.match(value):
        raise ValueError("Invalid email address")
    return value


class Address(CamelModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    company: Optional[str] = None
    address1: str = Field(..., min_length=1)
    address2: Optional[str] = None
    city: str = Field(..., min_length=1)
    province: Optional[str] = None
    country: str = Field(..., min_length=2, max_length=2)  # ISO 3166-1 alpha-2
    zip: str = Field(..., min_length=1)
    phone: Optional[str] = None


class LineItemInput(CamelModel):
    product_id: Optional[str] = None
    variant_id: Optional[str] = None
    sku: Optional[str] = None
    title: str
    variant_title: Optional[str] = None
    quantity: int = Field(..., ge=1)
    price: Decimal = Field(..., ge=0)


class ShippingLine(CamelModel):
    title: str
    price: Decimal = Field(..., ge=0)
    code: Optional[str] = None
    source: Optional[str] = None


class OrderCreate(CamelModel):
    """Schema for creating an order from the admin"""
    customer_id: Optional[str] = None
    email: str
    phone: Optional[str] = None

    line_items: List[LineItemInput] = Field(..., min_length=1)

    shipping_address: Address
    billing_address: Optional[Address] = None
    shipping_lines: List[ShippingLine] = Field(default_factory=list)

    subtotal_price: Decimal = Field(..., ge=0)
    total_tax: Decimal = Field(Decimal("0"), ge=0)
    total_shipping: Decimal = Field(Decimal("0"), ge=0)
    total_discount: Decimal = Field(Decimal("0"), ge=0)
    total_price: Decimal = Field(..., ge=0)

    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    financial_status: FinancialStatus = "pending"
    fulfillment_status: Optional[FulfillmentStatus] = None

    tags: List[str] = Field(default_factory=list)
    note: Optional[str] = None

    @field_validator("email")
    @classmethod
    def _check_email(cls, v):
        return validate_email(v)


class OrderUpdate(CamelModel):
    """Partial update; line items are immutable once the order exists"""
    order_id: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    shipping_address: Optional[Address] = None
    billing_address: Optional[Address] = None
    status: Optional[str] = None
    financial_status: Optional[FinancialStatus] = None
    fulfillment_status: Optional[FulfillmentStatus] = None
    tags: Optional[List[str]] = None
    note: Optional[str] = None
    cancel_reason: Optional[CancelReason] = None

    @field_validator("email")
    @classmethod
    def _check_email(cls, v):
        return validate_email(v)


class LineItem(CamelModel):
    id: str
    product_id: Optional[str] = None
    variant_id: Optional[str] = None
    sku: Optional[str] = None
    title: str
    variant_title: Optional[str] = None
    quantity: int
    price: Decimal
    total_price: Decimal
    position: int = 1


class OrderCustomer(CamelModel):
    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class Order(CamelModel):
    id: str
    store_id: str
    customer_id: Optional[str] = None
    order_number: str
    customer_email: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    currency: str = "USD"

    status: str = "open"
    financial_status: Optional[str] = None
    fulfillment_status: Optional[str] = None

    subtotal_price: Decimal = Decimal("0")
    total_tax: Decimal = Decimal("0")
    total_shipping: Decimal = Decimal("0")
    total_discount: Decimal = Decimal("0")
    total_price: Decimal = Decimal("0")

    shipping_address: Optional[Dict] = None
    billing_address: Optional[Dict] = None
    shipping_lines: List[Dict] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    note: Optional[str] = None

    cancel_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    line_items: List[LineItem] = Field(default_factory=list)
    customer: Optional[OrderCustomer] = None

    @field_validator("shipping_lines", "tags", mode="before")
    @classmethod
    def _none_to_list(cls, v):
        return v or []
