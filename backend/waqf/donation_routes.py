from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from . import donation_schemas, fundraising
from .database import get_db
from .enums import DonationType
from .paging import Page, paginate
from .payments import PaymentProvider, get_payment_provider
from .security import require_admin

router = APIRouter(prefix="/api/v1/donations", tags=["donations"])


@router.post("", response_model=donation_schemas.DonationCheckout)
def create_donation(
    payload: donation_schemas.DonationCreate,
    db: Session = Depends(get_db),
    provider: PaymentProvider = Depends(get_payment_provider)
):
    """Create a donation awaiting payment and return the checkout data"""
    return fundraising.create_donation(db, payload, provider)


@router.post("/{donation_id}/confirm", response_model=donation_schemas.Donation,
             dependencies=[Depends(require_admin)])
def confirm_donation(donation_id: int, payload: donation_schemas.PaymentConfirm, db: Session = Depends(get_db)):
    """Called once the provider reports a successful payment; a second call is a 409"""
    return fundraising.confirm_payment(db, donation_id, payload.provider_ref)


@router.get("", response_model=Page[donation_schemas.PublicDonation])
def list_donations(
    project_id: Optional[int] = None,
    campaign_id: Optional[int] = None,
    type: Optional[DonationType] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """Confirmed donations only, anonymous donors masked"""
    filters = donation_schemas.DonationFilter(project_id=project_id, campaign_id=campaign_id, type=type)
    q = fundraising.apply_donation_filter(fundraising.confirmed_donations(db), filters)
    q = q.order_by(fundraising.Donation.created_at.desc(), fundraising.Donation.id.desc())
    return paginate(q, page, limit)


@router.get("/stats", response_model=donation_schemas.DonationStats)
def get_donation_stats(db: Session = Depends(get_db)):
    return fundraising.donation_stats(db)


@router.get("/{donation_id}", response_model=donation_schemas.Donation, dependencies=[Depends(require_admin)])
def get_donation(donation_id: int, db: Session = Depends(get_db)):
    return fundraising.get_donation(db, donation_id)
