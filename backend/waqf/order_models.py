from sqlalchemy import BigInteger, Column, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from .database import Base
from .enums import OrderStatus
from .translations import display_translation
import datetime


class Order(Base):
    __tablename__ = 'orders'

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String(50), nullable=False, unique=True, index=True)  # ORD-<ms>-<base36>
    user_id = Column(Integer, ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True)

    customer_name = Column(String(200), nullable=False)
    customer_email = Column(String(200), nullable=False)
    customer_phone = Column(String(50), nullable=True)
    shipping_address = Column(Text, nullable=True)

    # Computed once at creation from snapshot prices
    subtotal = Column(BigInteger, nullable=False)
    shipping_cost = Column(BigInteger, nullable=False, default=0)
    total = Column(BigInteger, nullable=False)

    status = Column(Enum(OrderStatus), nullable=False, default=OrderStatus.PENDING, index=True)
    # Milestones, each stamped the first time its status is reached
    paid_at = Column(DateTime, nullable=True)
    shipped_at = Column(DateTime, nullable=True)
    delivered_at = Column(DateTime, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

    items = relationship('OrderItem', back_populates='order', cascade='all, delete-orphan', order_by='OrderItem.id')
    user = relationship('User', back_populates='orders')


class OrderItem(Base):
    __tablename__ = 'order_items'

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey('orders.id', ondelete='CASCADE'), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey('products.id', ondelete='SET NULL'), nullable=True, index=True)
    quantity = Column(Integer, nullable=False)
    price = Column(BigInteger, nullable=False)  # unit price at order time, not a live reference

    order = relationship('Order', back_populates='items')
    product = relationship('Product', back_populates='order_items')

    @property
    def product_name(self):
        if self.product is None:
            return None
        translation = display_translation(self.product)
        return translation.name if translation else self.product.slug
