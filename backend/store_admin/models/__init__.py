"""
Modelos de base de datos
"""
from .store import User, Store, StoreSettings
from .catalog import Category, Product, ProductVariant, ProductTranslation, CategoryTranslation
from .page import Page, PageTranslation
from .order import Customer, Order, OrderLineItem
from .marketing import Discount, MarketingCampaign

__all__ = [
    "User",
    "Store",
    "StoreSettings",
    "Category",
    "Product",
    "ProductVariant",
    "ProductTranslation",
    "CategoryTranslation",
    "Page",
    "PageTranslation",
    "Customer",
    "Order",
    "OrderLineItem",
    "Discount",
    "MarketingCampaign",
]
