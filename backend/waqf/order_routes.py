from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from . import ledger, order_schemas
from .database import get_db
from .enums import OrderStatus
from .paging import Page, paginate
from .security import require_admin

router = APIRouter(prefix="/api/v1/orders", tags=["orders"])


@router.post("", response_model=order_schemas.Order)
def create_order(payload: order_schemas.OrderCreate, db: Session = Depends(get_db)):
    """Place an order; prices are taken from the catalog at this moment"""
    return ledger.create_order(db, payload)


@router.get("", response_model=Page[order_schemas.Order], dependencies=[Depends(require_admin)])
def list_orders(
    status: Optional[OrderStatus] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db)
):
    return paginate(ledger.list_orders(db, order_schemas.OrderFilter(status=status)), page, limit)


@router.get("/stats", response_model=order_schemas.OrderStats, dependencies=[Depends(require_admin)])
def get_order_stats(db: Session = Depends(get_db)):
    return ledger.order_stats(db)


@router.get("/number/{order_number}", response_model=order_schemas.Order)
def get_order_by_number(order_number: str, db: Session = Depends(get_db)):
    """Public lookup for the customer's confirmation page"""
    return ledger.find_by_order_number(db, order_number)


@router.get("/{order_id}", response_model=order_schemas.Order, dependencies=[Depends(require_admin)])
def get_order(order_id: int, db: Session = Depends(get_db)):
    return ledger.get_order(db, order_id)


@router.put("/{order_id}/status", response_model=order_schemas.Order, dependencies=[Depends(require_admin)])
def update_order_status(order_id: int, payload: order_schemas.OrderStatusUpdate, db: Session = Depends(get_db)):
    return ledger.update_order_status(db, order_id, payload.status)
