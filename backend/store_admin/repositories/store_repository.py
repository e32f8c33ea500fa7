"""
Store Repository - Data Access Layer for stores and their settings

Every store-scoped endpoint resolves its tenant here: a store is only visible
to the user that owns it.
"""
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from store_admin.models import (
    Category,
    Customer,
    Order,
    Product,
    Store,
    StoreSettings,
    User,
)


class StoreRepository:
    """
    Repository for Store / StoreSettings data access
    """

    def __init__(self, db: Session):
        self.db = db

    def find_owned(self, subdomain: str, user_id: str) -> Optional[Store]:
        """
        Find a store by subdomain that belongs to user_id

        Returns:
            Store or None when it does not exist or belongs to someone else
        """
        return (
            self.db.query(Store)
            .filter(Store.subdomain == subdomain, Store.user_id == user_id)
            .first()
        )

    def find_by_subdomain(self, subdomain: str) -> Optional[Store]:
        return self.db.query(Store).filter(Store.subdomain == subdomain).first()

    def find_all_for_user(self, user_id: str) -> List[Store]:
        return (
            self.db.query(Store)
            .filter(Store.user_id == user_id)
            .order_by(Store.created_at.desc())
            .all()
        )

    def subdomain_taken(self, subdomain: str) -> bool:
        return self.find_by_subdomain(subdomain) is not None

    def find_user(self, user_id: str) -> Optional[User]:
        return self.db.get(User, user_id)

    def create(self, user_id: str, **fields) -> Store:
        store = Store(user_id=user_id, **fields)
        self.db.add(store)
        self.db.commit()
        self.db.refresh(store)
        return store

    def update(self, store: Store, fields: Dict) -> Store:
        for key, value in fields.items():
            setattr(store, key, value)
        self.db.commit()
        self.db.refresh(store)
        return store

    def delete(self, store: Store) -> None:
        self.db.delete(store)
        self.db.commit()

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def get_settings(self, store_id: str) -> Optional[StoreSettings]:
        return self.db.query(StoreSettings).filter(StoreSettings.store_id == store_id).first()

    def get_or_create_settings(self, store_id: str) -> StoreSettings:
        """
        Settings row for store_id, added to the session (not committed)
        when it does not exist yet
        """
        settings = self.get_settings(store_id)
        if settings is None:
            settings = StoreSettings(store_id=store_id)
            self.db.add(settings)
            self.db.flush()
        return settings

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def get_stats(self, store_id: str, since: datetime) -> Dict:
        """
        Catalog/customer counts plus the orders created since `since`

        Returns:
            Dictionary with totals and the recent order totals/status
        """
        counts = {
            "products": self.db.query(func.count(Product.id)).filter(Product.store_id == store_id).scalar(),
            "orders": self.db.query(func.count(Order.id)).filter(Order.store_id == store_id).scalar(),
            "customers": self.db.query(func.count(Customer.id)).filter(Customer.store_id == store_id).scalar(),
            "categories": self.db.query(func.count(Category.id)).filter(Category.store_id == store_id).scalar(),
        }

        recent_orders = (
            self.db.query(Order.total_price, Order.status)
            .filter(Order.store_id == store_id, Order.created_at >= since)
            .all()
        )

        return {
            **counts,
            "recent_orders": [{"total": row.total_price, "status": row.status} for row in recent_orders],
        }
