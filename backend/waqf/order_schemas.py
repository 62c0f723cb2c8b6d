from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional
import datetime

from .enums import OrderStatus


class OrderItemIn(BaseModel):
    product_id: int
    quantity: int = Field(..., ge=1)


class OrderCreate(BaseModel):
    user_id: Optional[int] = None
    customer_name: str
    customer_email: EmailStr
    customer_phone: Optional[str] = None
    shipping_address: Optional[str] = None
    items: List[OrderItemIn] = Field(..., min_length=1)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderItem(BaseModel):
    id: int
    product_id: Optional[int] = None
    product_name: Optional[str] = None
    quantity: int
    price: int

    class Config:
        from_attributes = True


class Order(BaseModel):
    id: int
    order_number: str
    user_id: Optional[int] = None
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    shipping_address: Optional[str] = None
    subtotal: int
    shipping_cost: int
    total: int
    status: OrderStatus
    paid_at: Optional[datetime.datetime] = None
    shipped_at: Optional[datetime.datetime] = None
    delivered_at: Optional[datetime.datetime] = None
    cancelled_at: Optional[datetime.datetime] = None
    created_at: datetime.datetime
    items: List[OrderItem] = []

    class Config:
        from_attributes = True


class OrderFilter(BaseModel):
    status: Optional[OrderStatus] = None


class OrderStats(BaseModel):
    total: int
    pending: int
    processing: int
    delivered: int
    cancelled: int
    revenue: int
