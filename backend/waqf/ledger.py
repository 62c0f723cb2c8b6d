"""
Order ledger: totals from snapshot prices, order numbers and the status
lifecycle.

Lifecycle (not enforced on write):
PENDING -> CONFIRMED -> PROCESSING -> SHIPPED -> DELIVERED, with CANCELLED
and REFUNDED reachable from anywhere. Each milestone timestamp is stamped the
first time its status is reached and never overwritten.
"""
import datetime
import logging

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from . import order_models, order_schemas
from .config import settings
from .enums import OrderStatus
from .errors import NotFound
from .identifiers import generate_order_number
from .product_models import Product
from .user_models import User

logger = logging.getLogger(__name__)

Order = order_models.Order
OrderItem = order_models.OrderItem

# status -> milestone column stamped on first arrival
MILESTONES = {
    OrderStatus.CONFIRMED: 'paid_at',
    OrderStatus.SHIPPED: 'shipped_at',
    OrderStatus.DELIVERED: 'delivered_at',
    OrderStatus.CANCELLED: 'cancelled_at',
}


def shipping_cost_for(subtotal: int) -> int:
    return settings.SHIPPING_COST


def _order_query(db: Session):
    return db.query(Order).options(
        selectinload(Order.items).selectinload(OrderItem.product).selectinload(Product.translations)
    )


def create_order(db: Session, payload: order_schemas.OrderCreate) -> Order:
    if payload.user_id is not None:
        if not db.query(User.id).filter(User.id == payload.user_id).first():
            raise NotFound('User not found')

    product_ids = {item.product_id for item in payload.items}
    products = {p.id: p for p in db.query(Product).filter(Product.id.in_(product_ids)).all()}
    missing = product_ids - products.keys()
    if missing:
        raise NotFound(f"Product(s) not found: {', '.join(str(i) for i in sorted(missing))}")

    items = []
    subtotal = 0
    for item in payload.items:
        price = products[item.product_id].price
        subtotal += price * item.quantity
        items.append(OrderItem(product_id=item.product_id, quantity=item.quantity, price=price))

    shipping_cost = shipping_cost_for(subtotal)
    order = Order(
        order_number=generate_order_number(),
        user_id=payload.user_id,
        customer_name=payload.customer_name,
        customer_email=payload.customer_email,
        customer_phone=payload.customer_phone,
        shipping_address=payload.shipping_address,
        subtotal=subtotal,
        shipping_cost=shipping_cost,
        total=subtotal + shipping_cost,
        status=OrderStatus.PENDING,
        items=items,
    )
    db.add(order)
    db.commit()
    logger.info("order %s created: %d item(s), total %s", order.order_number, len(items), order.total)
    return get_order(db, order.id)


def get_order(db: Session, order_id: int) -> Order:
    order = _order_query(db).filter(Order.id == order_id).first()
    if not order:
        raise NotFound('Order not found')
    return order


def find_by_order_number(db: Session, order_number: str) -> Order:
    order = _order_query(db).filter(Order.order_number == order_number).first()
    if not order:
        raise NotFound('Order not found')
    return order


def update_order_status(db: Session, order_id: int, status: OrderStatus) -> Order:
    """Set the status without transition checks, stamping its milestone once."""
    order = db.query(Order).filter(Order.id == order_id).first()
    if not order:
        raise NotFound('Order not found')

    previous = order.status
    order.status = status
    milestone = MILESTONES.get(status)
    if milestone and getattr(order, milestone) is None:
        setattr(order, milestone, datetime.datetime.utcnow())
    db.commit()
    logger.info("order %s status %s -> %s", order.order_number, previous.value, status.value)
    return get_order(db, order_id)


def list_orders(db: Session, filters: order_schemas.OrderFilter):
    q = _order_query(db)
    if filters.status is not None:
        q = q.filter(Order.status == filters.status)
    return q.order_by(Order.created_at.desc(), Order.id.desc())


def order_stats(db: Session) -> order_schemas.OrderStats:
    def count(*statuses):
        return db.query(Order).filter(Order.status.in_(statuses)).count()

    revenue = db.query(func.coalesce(func.sum(Order.total), 0)).filter(
        Order.status == OrderStatus.DELIVERED
    ).scalar()
    return order_schemas.OrderStats(
        total=db.query(Order).count(),
        pending=count(OrderStatus.PENDING),
        processing=count(OrderStatus.CONFIRMED, OrderStatus.PROCESSING, OrderStatus.SHIPPED),
        delivered=count(OrderStatus.DELIVERED),
        cancelled=count(OrderStatus.CANCELLED, OrderStatus.REFUNDED),
        revenue=int(revenue or 0),
    )
