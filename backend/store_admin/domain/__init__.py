"""
Domain Layer - Business Entities

Pydantic models for the dashboard's camelCase wire format: read models built
from ORM rows and the write schemas request bodies are validated against.
"""
from store_admin.domain.product import Product
from store_admin.domain.category import Category
from store_admin.domain.order import Order, LineItem
from store_admin.domain.store import Store, StoreSettings
from store_admin.domain.marketing import Discount, Campaign

__all__ = ['Product', 'Category', 'Order', 'LineItem', 'Store', 'StoreSettings', 'Discount', 'Campaign']
