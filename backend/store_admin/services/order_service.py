"""
Order Service

Admin order lifecycle: numbering, creation with line items, partial updates
and cancellation. When the store tracks inventory, creating an order moves
stock of tracked SKUs into reserved, cancelling moves it back.
"""
import copy
import logging
import random
import re
import string
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from store_admin.domain.order import OrderCreate, OrderUpdate
from store_admin.models import Order, OrderLineItem, Store, StoreSettings
from store_admin.repositories import OrderRepository, StoreRepository

logger = logging.getLogger(__name__)

DEFAULT_START_VALUE = 1000
SEQUENCE_WIDTH = 5
RANDOM_ALPHABET = string.ascii_uppercase + string.digits

CANCEL_REASONS = ("customer", "fraud", "inventory", "declined", "other")


# ============================================================================
# Order numbers
# ============================================================================

def generate_order_number(
    order_settings: Optional[Dict],
    last_order_number: Optional[str],
    now: Optional[datetime] = None
) -> str:
    """
    Next order number for a store

    Formats (orderSettings.orderNumberFormat):
        sequential  first run of digits in the last number + 1, zero-padded
                    to 5; orderNumberStartValue (default 1000) for the first order
        date-based  YYYYMMDD + last 4 digits of the epoch millis
        random      8 uppercase alphanumerics
    orderNumberPrefix / orderNumberSuffix wrap the result.
    """
    settings = order_settings or {}
    prefix = settings.get("orderNumberPrefix") or ""
    suffix = settings.get("orderNumberSuffix") or ""
    number_format = settings.get("orderNumberFormat") or "sequential"
    now = now or datetime.now(timezone.utc)

    if number_format == "date-based":
        millis = str(int(now.timestamp() * 1000))
        number = f"{now.strftime('%Y%m%d')}{millis[-4:]}"
    elif number_format == "random":
        number = "".join(random.choices(RANDOM_ALPHABET, k=8))
    elif last_order_number:
        match = re.search(r"\d+", last_order_number)
        last = int(match.group(0)) if match else 0
        number = str(last + 1).zfill(SEQUENCE_WIDTH)
    else:
        start = settings.get("orderNumberStartValue") or DEFAULT_START_VALUE
        number = str(start).zfill(SEQUENCE_WIDTH)

    return f"{prefix}{number}{suffix}"


# ============================================================================
# Inventory
# ============================================================================

def reserve_inventory(inventory: Optional[List[Dict]], lines: List[Tuple[Optional[str], int]]) -> List[Dict]:
    """
    Move quantity into reservedQuantity for each (sku, quantity) line whose
    inventory entry has trackQuantity set

    Returns:
        Updated copy of the inventory list
    """
    updated = copy.deepcopy(inventory or [])
    for sku, quantity in lines:
        if not sku:
            continue
        item = next((i for i in updated if i.get("sku") == sku), None)
        if item and item.get("trackQuantity"):
            item["quantity"] = (item.get("quantity") or 0) - quantity
            item["reservedQuantity"] = (item.get("reservedQuantity") or 0) + quantity
    return updated


def release_inventory(inventory: Optional[List[Dict]], lines: List[Tuple[Optional[str], int]]) -> List[Dict]:
    """Inverse of reserve_inventory; reservedQuantity never drops below 0"""
    updated = copy.deepcopy(inventory or [])
    for sku, quantity in lines:
        if not sku:
            continue
        item = next((i for i in updated if i.get("sku") == sku), None)
        if item and item.get("trackQuantity"):
            item["quantity"] = (item.get("quantity") or 0) + quantity
            item["reservedQuantity"] = max(0, (item.get("reservedQuantity") or 0) - quantity)
    return updated


def _tracks_inventory(settings: Optional[StoreSettings]) -> bool:
    return bool(settings and (settings.stock_settings or {}).get("trackInventory"))


# ============================================================================
# MAIN SERVICE CLASS
# ============================================================================

class OrderService:

    def __init__(self, db: Session):
        self.db = db
        self.orders = OrderRepository(db)
        self.stores = StoreRepository(db)

    def list(self, store_id: str, page: int = 1, limit: int = 50, **filters) -> Tuple[List[Order], Dict]:
        """
        Returns:
            Tuple of (orders, pagination dict with page/limit/total/totalPages)
        """
        page = max(page, 1)
        orders, total = self.orders.find_all(store_id, limit=limit, offset=(page - 1) * limit, **filters)
        total_pages = (total + limit - 1) // limit if limit else 0
        return orders, {"page": page, "limit": limit, "total": total, "totalPages": total_pages}

    def create(self, store: Store, payload: OrderCreate) -> Order:
        settings = self.stores.get_settings(store.id)
        order_number = generate_order_number(
            settings.order_settings if settings else None,
            self.orders.find_last_order_number(store.id),
        )

        shipping_address = payload.shipping_address.to_dict()
        billing_address = payload.billing_address.to_dict() if payload.billing_address else shipping_address

        order = Order(
            store_id=store.id,
            customer_id=payload.customer_id,
            order_number=order_number,
            customer_email=payload.email,
            customer_name=f"{payload.shipping_address.first_name} {payload.shipping_address.last_name}",
            customer_phone=payload.phone,
            currency=payload.currency or store.currency or "USD",
            status="open",
            financial_status=payload.financial_status,
            fulfillment_status=payload.fulfillment_status or "unfulfilled",
            subtotal_price=payload.subtotal_price,
            total_tax=payload.total_tax,
            total_shipping=payload.total_shipping,
            total_discount=payload.total_discount,
            total_price=payload.total_price,
            shipping_address=shipping_address,
            billing_address=billing_address,
            shipping_lines=[line.to_dict() for line in payload.shipping_lines],
            tags=payload.tags,
            note=payload.note,
        )
        for position, item in enumerate(payload.line_items, start=1):
            order.line_items.append(OrderLineItem(
                product_id=item.product_id,
                variant_id=item.variant_id,
                sku=item.sku,
                title=item.title,
                variant_title=item.variant_title,
                quantity=item.quantity,
                price=item.price,
                total_price=item.price * item.quantity,
                position=position,
            ))

        try:
            self.orders.add(order)
            if _tracks_inventory(settings):
                settings.inventory = reserve_inventory(
                    settings.inventory,
                    [(item.sku, item.quantity) for item in payload.line_items],
                )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Order {order_number} created for store {store.subdomain}")
        return self.orders.find_by_id(store.id, order.id)

    def update(self, store: Store, payload: OrderUpdate) -> Order:
        """
        Raises:
            ValueError: orderId missing
            LookupError: order not found in this store
        """
        if not payload.order_id:
            raise ValueError("Order ID is required")

        order = self.orders.find_by_id(store.id, payload.order_id)
        if order is None:
            raise LookupError("Order not found")

        values = payload.model_dump(exclude_unset=True, exclude={"order_id"})
        if "email" in values:
            order.customer_email = values.pop("email")
        if "phone" in values:
            order.customer_phone = values.pop("phone")
        for key in ("shipping_address", "billing_address"):
            address = values.pop(key, None)
            if address:
                setattr(order, key, getattr(payload, key).to_dict())
        for key, value in values.items():
            setattr(order, key, value)

        self.db.commit()
        return self.orders.find_by_id(store.id, order.id)

    def cancel(self, store: Store, order_id: Optional[str], reason: Optional[str] = None) -> Order:
        """
        Cancel an order and release its tracked inventory

        Raises:
            ValueError: orderId missing or unknown reason
            LookupError: order not found in this store
        """
        if not order_id:
            raise ValueError("Order ID is required")
        reason = reason or "other"
        if reason not in CANCEL_REASONS:
            raise ValueError(f"Invalid cancel reason: {reason}")

        order = self.orders.find_by_id(store.id, order_id)
        if order is None:
            raise LookupError("Order not found")

        settings = self.stores.get_settings(store.id)
        try:
            order.status = "cancelled"
            order.cancel_reason = reason
            order.cancelled_at = datetime.now(timezone.utc)

            if _tracks_inventory(settings):
                settings.inventory = release_inventory(
                    settings.inventory,
                    [(item.sku, item.quantity) for item in order.line_items],
                )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Order {order.order_number} cancelled ({reason})")
        return self.orders.find_by_id(store.id, order.id)
