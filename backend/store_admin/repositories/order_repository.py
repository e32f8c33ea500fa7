"""
Order Repository - Data Access Layer for Orders

Handles all database queries for orders and their line items.
"""
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, selectinload

from store_admin.models import Order


class OrderRepository:
    """
    Repository for Order data access

    All queries are scoped by store.
    """

    def __init__(self, db: Session):
        self.db = db

    def _base_query(self, store_id: str):
        return (
            self.db.query(Order)
            .options(selectinload(Order.line_items), selectinload(Order.customer))
            .filter(Order.store_id == store_id)
        )

    def find_by_id(self, store_id: str, order_id: str) -> Optional[Order]:
        return self._base_query(store_id).filter(Order.id == order_id).first()

    def find_all(
        self,
        store_id: str,
        status: Optional[str] = None,
        financial_status: Optional[str] = None,
        fulfillment_status: Optional[str] = None,
        customer_id: Optional[str] = None,
        email: Optional[str] = None,
        search: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        limit: int = 50,
        offset: int = 0
    ) -> Tuple[List[Order], int]:
        """
        Find orders with filters, newest first

        Args:
            search: Case-insensitive match on order number, customer email or name
            date_from / date_to: Inclusive bounds on created_at

        Returns:
            Tuple of (orders list, total count)
        """
        query = self._base_query(store_id)

        if status:
            query = query.filter(Order.status == status)
        if financial_status:
            query = query.filter(Order.financial_status == financial_status)
        if fulfillment_status:
            query = query.filter(Order.fulfillment_status == fulfillment_status)
        if customer_id:
            query = query.filter(Order.customer_id == customer_id)
        if email:
            query = query.filter(Order.customer_email == email)
        if search:
            pattern = f"%{search.lower()}%"
            query = query.filter(or_(
                func.lower(Order.order_number).like(pattern),
                func.lower(Order.customer_email).like(pattern),
                func.lower(Order.customer_name).like(pattern),
            ))
        if date_from:
            query = query.filter(Order.created_at >= date_from)
        if date_to:
            query = query.filter(Order.created_at <= date_to)

        total = query.count()
        orders = (
            query.order_by(Order.created_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return orders, total

    def find_last_order_number(self, store_id: str) -> Optional[str]:
        row = (
            self.db.query(Order.order_number)
            .filter(Order.store_id == store_id)
            .order_by(Order.created_at.desc())
            .first()
        )
        return row.order_number if row else None

    def add(self, order: Order) -> Order:
        self.db.add(order)
        self.db.flush()
        return order
