"""
Orders API Endpoints
Admin order list, manual order creation, updates and cancellation
"""
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from store_admin.api.dependencies import get_owned_store, server_error
from store_admin.core.database import get_db
from store_admin.domain.order import Order as OrderSchema, OrderCreate, OrderUpdate
from store_admin.models import Store
from store_admin.services.order_service import OrderService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stores/{subdomain}/orders", tags=["Orders"])


@router.get("")
def list_orders(
    status_filter: Optional[str] = Query(None, alias="status"),
    financial_status: Optional[str] = Query(None, alias="financialStatus"),
    fulfillment_status: Optional[str] = Query(None, alias="fulfillmentStatus"),
    customer_id: Optional[str] = Query(None, alias="customerId"),
    email: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Order number, customer email or name"),
    date_from: Optional[datetime] = Query(None, alias="dateFrom"),
    date_to: Optional[datetime] = Query(None, alias="dateTo"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=250),
    store: Store = Depends(get_owned_store),
    db: Session = Depends(get_db),
):
    orders, pagination = OrderService(db).list(
        store.id,
        page=page,
        limit=limit,
        status=status_filter,
        financial_status=financial_status,
        fulfillment_status=fulfillment_status,
        customer_id=customer_id,
        email=email,
        search=search,
        date_from=date_from,
        date_to=date_to,
    )
    return {
        "orders": [OrderSchema.model_validate(o).to_dict() for o in orders],
        "pagination": pagination,
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create_order(
    payload: OrderCreate,
    store: Store = Depends(get_owned_store),
    db: Session = Depends(get_db),
):
    """
    Create an order from the admin

    The order number follows the store's orderSettings; tracked inventory
    is reserved when stockSettings.trackInventory is on.
    """
    try:
        order = OrderService(db).create(store, payload)
    except Exception as e:
        logger.error(f"Failed to create order in {store.subdomain}: {e}", exc_info=True)
        raise server_error("Failed to create order", e)

    return {"message": "Order created successfully", "order": OrderSchema.model_validate(order).to_dict()}


@router.put("")
def update_order(
    payload: OrderUpdate,
    store: Store = Depends(get_owned_store),
    db: Session = Depends(get_db),
):
    try:
        order = OrderService(db).update(store, payload)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return {"message": "Order updated successfully", "order": OrderSchema.model_validate(order).to_dict()}


@router.delete("")
def cancel_order(
    order_id: Optional[str] = Query(None, alias="orderId"),
    reason: Optional[str] = Query(None),
    store: Store = Depends(get_owned_store),
    db: Session = Depends(get_db),
):
    """Cancel an order; tracked inventory is released"""
    try:
        order = OrderService(db).cancel(store, order_id, reason)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return {"message": "Order cancelled successfully", "order": OrderSchema.model_validate(order).to_dict()}
