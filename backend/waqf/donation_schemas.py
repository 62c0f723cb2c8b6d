from pydantic import BaseModel, EmailStr, Field, model_validator
from typing import List, Optional
import datetime

from .enums import DonationType, PaymentMethod, TransactionStatus


class DonationCreate(BaseModel):
    amount: int = Field(..., ge=100)
    currency: Optional[str] = None  # defaults to settings.DEFAULT_CURRENCY
    type: DonationType = DonationType.ONE_TIME
    payment_method: PaymentMethod
    # at most one target; neither means the general fund
    project_id: Optional[int] = None
    campaign_id: Optional[int] = None
    user_id: Optional[int] = None
    donor_name: Optional[str] = None
    donor_email: Optional[EmailStr] = None
    donor_phone: Optional[str] = None
    is_anonymous: bool = False
    message: Optional[str] = None

    @model_validator(mode='after')
    def single_target(self):
        if self.project_id is not None and self.campaign_id is not None:
            raise ValueError('a donation targets a project or a campaign, not both')
        return self


class Transaction(BaseModel):
    id: int
    external_id: str
    amount: int
    currency: str
    payment_method: PaymentMethod
    status: TransactionStatus
    provider_ref: Optional[str] = None
    paid_at: Optional[datetime.datetime] = None
    created_at: datetime.datetime

    class Config:
        from_attributes = True


class Donation(BaseModel):
    id: int
    amount: int
    currency: str
    type: DonationType
    project_id: Optional[int] = None
    campaign_id: Optional[int] = None
    user_id: Optional[int] = None
    donor_name: Optional[str] = None
    donor_email: Optional[str] = None
    donor_phone: Optional[str] = None
    is_anonymous: bool
    message: Optional[str] = None
    created_at: datetime.datetime
    transaction: Optional[Transaction] = None

    class Config:
        from_attributes = True


class PaymentData(BaseModel):
    """What the client needs to hand the donor over to the payment provider."""
    checkout_url: str
    reference: str
    amount: int
    currency: str
    expires_at: datetime.datetime


class DonationCheckout(BaseModel):
    donation: Donation
    payment_data: PaymentData


class PaymentConfirm(BaseModel):
    provider_ref: str


class PublicDonation(BaseModel):
    """Donation as shown on public pages, donor masked when anonymous."""
    id: int
    amount: int
    currency: str
    type: DonationType
    donor_name: Optional[str] = Field(None, validation_alias='public_donor_name')
    message: Optional[str] = None
    project_id: Optional[int] = None
    campaign_id: Optional[int] = None
    created_at: datetime.datetime

    class Config:
        from_attributes = True


class DonationFilter(BaseModel):
    project_id: Optional[int] = None
    campaign_id: Optional[int] = None
    type: Optional[DonationType] = None


class DonationStats(BaseModel):
    total_donations: int
    total_amount: int
    unique_donors: int
    recent_donations: List[PublicDonation]
