from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from .database import Base
from .enums import UserRole
import datetime


class User(Base):
    """Donor or staff account. Either email or phone identifies the user."""
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(200), nullable=True, unique=True, index=True)
    phone = Column(String(50), nullable=True, unique=True, index=True)
    hashed_password = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    avatar = Column(String(1000), nullable=True)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.DONOR, index=True)
    is_verified = Column(Boolean, default=False)
    # accounts are deactivated, never deleted
    is_active = Column(Boolean, default=True, index=True)
    last_login_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

    donations = relationship('Donation', back_populates='user')
    orders = relationship('Order', back_populates='user')
    reset_token = relationship(
        'PasswordResetToken', back_populates='user', uselist=False, cascade='all, delete-orphan',
    )


class PasswordResetToken(Base):
    __tablename__ = 'password_reset_tokens'

    id = Column(Integer, primary_key=True, index=True)
    # one live token per user, a new request replaces it
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True)
    token = Column(String(128), nullable=False, unique=True, index=True)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    user = relationship('User', back_populates='reset_token')
