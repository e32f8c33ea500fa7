"""
Repository Layer - Data Access

This layer handles all database queries behind SQLAlchemy sessions.
Repositories keep query details out of services and routes.
"""
from store_admin.repositories.store_repository import StoreRepository
from store_admin.repositories.product_repository import ProductRepository
from store_admin.repositories.category_repository import CategoryRepository
from store_admin.repositories.order_repository import OrderRepository
from store_admin.repositories.translation_repository import TranslationRepository
from store_admin.repositories.marketing_repository import MarketingRepository

__all__ = [
    'StoreRepository',
    'ProductRepository',
    'CategoryRepository',
    'OrderRepository',
    'TranslationRepository',
    'MarketingRepository',
]
