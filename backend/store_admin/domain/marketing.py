"""
Discount and marketing campaign domain models
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Literal, Optional

from pydantic import Field

from store_admin.domain.base import CamelModel


class DiscountInput(CamelModel):
    code: Optional[str] = None
    type: Literal["percentage", "fixed"] = "percentage"
    value: Decimal = Field(Decimal("10"), gt=0)
    min_purchase: Decimal = Field(Decimal("0"), ge=0)
    usage_limit: Optional[int] = Field(None, ge=1)
    expires_at: Optional[datetime] = None


class Discount(CamelModel):
    id: str
    store_id: str
    code: str
    type: str
    value: Decimal
    min_purchase: Optional[Decimal] = None
    usage_limit: Optional[int] = None
    usage_count: int = 0
    expires_at: Optional[datetime] = None
    is_active: bool = True
    created_at: Optional[datetime] = None


class CampaignInput(CamelModel):
    name: str = "New Campaign"
    type: Literal["email", "sms", "social"] = "email"
    subject: Optional[str] = None
    content: Optional[str] = None
    target_audience: Any = "all"
    scheduled_for: Optional[datetime] = None


class Campaign(CamelModel):
    id: str
    store_id: str
    name: str
    type: str
    status: str
    subject: Optional[str] = None
    content: Optional[str] = None
    target_audience: Any = None
    scheduled_for: Optional[datetime] = None
    created_at: Optional[datetime] = None
