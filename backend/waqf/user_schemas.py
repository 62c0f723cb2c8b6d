from pydantic import BaseModel, EmailStr, Field, model_validator
from typing import List, Optional
import datetime

from .enums import UserRole


class UserCreate(BaseModel):
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    password: str = Field(..., min_length=8)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: UserRole = UserRole.DONOR

    @model_validator(mode='after')
    def needs_identifier(self):
        if not self.email and not self.phone:
            raise ValueError('email or phone is required')
        return self


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar: Optional[str] = None
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
    is_verified: Optional[bool] = None


class User(BaseModel):
    id: int
    email: Optional[str] = None
    phone: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar: Optional[str] = None
    role: UserRole
    is_verified: bool
    is_active: bool
    last_login_at: Optional[datetime.datetime] = None
    created_at: datetime.datetime
    updated_at: Optional[datetime.datetime] = None

    class Config:
        from_attributes = True


class UserDonation(BaseModel):
    id: int
    amount: int
    currency: str
    project_id: Optional[int] = None
    created_at: datetime.datetime

    class Config:
        from_attributes = True


class UserDetail(User):
    donation_count: int = 0
    order_count: int = 0
    recent_donations: List[UserDonation] = []


class UserFilter(BaseModel):
    search: Optional[str] = None  # email, phone or name
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None


class UserStats(BaseModel):
    total: int
    donors: int
    admins: int
    active_this_month: int


class ChangePassword(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=8)


class ForgotPassword(BaseModel):
    identifier: str  # email or phone


class ResetPassword(BaseModel):
    token: str
    new_password: str = Field(..., min_length=8)
