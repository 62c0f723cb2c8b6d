"""
Donations and the project/campaign counters they feed.

A donation is created together with a PENDING transaction. Confirming the
payment flips the transaction to SUCCESS and bumps collected_amount (and
donor_count for projects) in the same database transaction. Counters are
always incremented in SQL, never read-modify-written in Python, so
concurrent confirmations on the same project do not lose updates.
"""
import datetime
import logging

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from . import donation_models, donation_schemas
from .campaign_models import Campaign
from .config import settings
from .enums import TransactionStatus
from .errors import Conflict, NotFound
from .identifiers import generate_external_id
from .payments import PaymentProvider
from .project_models import Project
from .user_models import User

logger = logging.getLogger(__name__)

Donation = donation_models.Donation
Transaction = donation_models.Transaction


def get_donation(db: Session, donation_id: int) -> Donation:
    donation = db.query(Donation).options(joinedload(Donation.transaction)).filter(
        Donation.id == donation_id
    ).first()
    if not donation:
        raise NotFound('Donation not found')
    return donation


def create_donation(db: Session, payload: donation_schemas.DonationCreate, provider: PaymentProvider) -> dict:
    """Create a donation and its PENDING transaction, then ask the provider for checkout data."""
    if payload.project_id is not None:
        if not db.query(Project.id).filter(Project.id == payload.project_id).first():
            raise NotFound('Project not found')
    if payload.campaign_id is not None:
        if not db.query(Campaign.id).filter(Campaign.id == payload.campaign_id).first():
            raise NotFound('Campaign not found')
    if payload.user_id is not None:
        if not db.query(User.id).filter(User.id == payload.user_id).first():
            raise NotFound('User not found')

    currency = payload.currency or settings.DEFAULT_CURRENCY
    external_id = generate_external_id()
    data = payload.model_dump(exclude={'payment_method', 'currency'})
    donation = Donation(**data, currency=currency)
    donation.transaction = Transaction(
        external_id=external_id,
        amount=payload.amount,
        currency=currency,
        payment_method=payload.payment_method,
        status=TransactionStatus.PENDING,
    )
    db.add(donation)
    db.commit()
    db.refresh(donation)
    logger.info("donation %s created: %s %s via %s (%s)",
                donation.id, donation.amount, currency, payload.payment_method.value, external_id)

    return {"donation": donation, "payment_data": provider.initiate(donation, external_id)}


def confirm_payment(db: Session, donation_id: int, provider_ref: str) -> Donation:
    """
    Mark the donation's transaction as paid and credit the target counters.

    Raises NotFound for an unknown donation and Conflict when the transaction
    is no longer PENDING, including when a concurrent call won the race.
    """
    donation = get_donation(db, donation_id)
    if donation.transaction is None:
        raise NotFound('Transaction not found')
    if donation.transaction.status == TransactionStatus.SUCCESS:
        raise Conflict('Donation already confirmed')

    amount = donation.amount
    project_id = donation.project_id
    campaign_id = donation.campaign_id
    try:
        flipped = db.query(Transaction).filter(
            Transaction.donation_id == donation_id,
            Transaction.status == TransactionStatus.PENDING,
        ).update({
            Transaction.status: TransactionStatus.SUCCESS,
            Transaction.provider_ref: provider_ref,
            Transaction.paid_at: datetime.datetime.utcnow(),
        }, synchronize_session=False)
        if flipped != 1:
            raise Conflict('Donation already confirmed')

        if project_id is not None:
            db.query(Project).filter(Project.id == project_id).update({
                Project.collected_amount: Project.collected_amount + amount,
                Project.donor_count: Project.donor_count + 1,
            }, synchronize_session=False)
        if campaign_id is not None:
            db.query(Campaign).filter(Campaign.id == campaign_id).update({
                Campaign.collected_amount: Campaign.collected_amount + amount,
            }, synchronize_session=False)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("donation %s confirmed (provider_ref=%s, project=%s, campaign=%s)",
                donation_id, provider_ref, project_id, campaign_id)
    # commit expired the instance; reload with the fresh transaction row
    return get_donation(db, donation_id)


def confirmed_donations(db: Session):
    return db.query(Donation).join(Donation.transaction).filter(
        Transaction.status == TransactionStatus.SUCCESS
    )


def apply_donation_filter(query, filters: donation_schemas.DonationFilter):
    if filters.project_id is not None:
        query = query.filter(Donation.project_id == filters.project_id)
    if filters.campaign_id is not None:
        query = query.filter(Donation.campaign_id == filters.campaign_id)
    if filters.type is not None:
        query = query.filter(Donation.type == filters.type)
    return query


def recent_confirmed(db: Session, limit: int = 5, project_id: int = None):
    q = confirmed_donations(db)
    if project_id is not None:
        q = q.filter(Donation.project_id == project_id)
    return q.order_by(Donation.created_at.desc(), Donation.id.desc()).limit(limit).all()


def donation_stats(db: Session) -> donation_schemas.DonationStats:
    confirmed = confirmed_donations(db)
    total_donations = confirmed.count()
    total_amount = confirmed.with_entities(func.coalesce(func.sum(Donation.amount), 0)).scalar()
    unique_donors = confirmed.filter(Donation.donor_email.isnot(None)).with_entities(
        func.count(func.distinct(Donation.donor_email))
    ).scalar()
    return donation_schemas.DonationStats(
        total_donations=total_donations,
        total_amount=int(total_amount or 0),
        unique_donors=unique_donors or 0,
        recent_donations=[donation_schemas.PublicDonation.model_validate(d) for d in recent_confirmed(db)],
    )
