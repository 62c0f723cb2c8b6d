from pydantic import BaseModel, EmailStr
from typing import Optional
import datetime


class Message(BaseModel):
    message: str


class ContactCreate(BaseModel):
    name: str
    email: EmailStr
    phone: Optional[str] = None
    subject: Optional[str] = None
    message: str


class Contact(ContactCreate):
    id: int
    is_read: bool
    replied_at: Optional[datetime.datetime] = None
    created_at: datetime.datetime

    class Config:
        from_attributes = True


class ContactReply(BaseModel):
    message: str


class ContactStats(BaseModel):
    total: int
    unread: int
    replied: int


class NewsletterSubscribe(BaseModel):
    email: EmailStr


class NewsletterSubscriber(NewsletterSubscribe):
    id: int
    is_subscribed: bool
    subscribed_at: datetime.datetime

    class Config:
        from_attributes = True
