"""
Email template domain models

Templates are stored inside StoreSettings.email_settings["templates"] as a
list of camelCase dicts.
"""
from typing import List, Literal, Optional

from pydantic import Field

from store_admin.domain.base import CamelModel

TemplateType = Literal[
    "order_confirmation",
    "order_shipped",
    "order_delivered",
    "order_cancelled",
    "order_refunded",
    "welcome_email",
    "password_reset",
    "account_created",
    "newsletter_welcome",
    "abandoned_cart",
    "back_in_stock",
    "low_stock_alert",
    "new_order_notification",
    "custom",
]


class EmailTemplateInput(CamelModel):
    type: TemplateType
    name: str = Field(..., min_length=1)
    subject: str = Field(..., min_length=1)
    html_content: str = Field(..., min_length=1)
    text_content: Optional[str] = None
    enabled: bool = True
    variables: Optional[List[str]] = None
    blocks: Optional[str] = None  # editor blocks, serialized JSON


class EmailTemplateUpdate(CamelModel):
    id: str = Field(..., min_length=1)
    type: Optional[TemplateType] = None
    name: Optional[str] = Field(None, min_length=1)
    subject: Optional[str] = Field(None, min_length=1)
    html_content: Optional[str] = Field(None, min_length=1)
    text_content: Optional[str] = None
    enabled: Optional[bool] = None
    variables: Optional[List[str]] = None
    blocks: Optional[str] = None
