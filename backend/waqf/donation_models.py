from sqlalchemy import BigInteger, Boolean, Column, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from .database import Base
from .enums import DonationType, PaymentMethod, TransactionStatus
import datetime


class Donation(Base):
    """
    A pledge towards a project, a campaign or the general fund (neither set).
    Payment state lives on the paired Transaction, created in the same write.
    """
    __tablename__ = 'donations'

    id = Column(Integer, primary_key=True, index=True)
    amount = Column(BigInteger, nullable=False)
    currency = Column(String(10), default='XOF')
    type = Column(Enum(DonationType), nullable=False, default=DonationType.ONE_TIME)

    project_id = Column(Integer, ForeignKey('projects.id', ondelete='SET NULL'), nullable=True, index=True)
    campaign_id = Column(Integer, ForeignKey('campaigns.id', ondelete='SET NULL'), nullable=True, index=True)
    # set when a signed-in donor gives
    user_id = Column(Integer, ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True)

    donor_name = Column(String(200), nullable=True)
    donor_email = Column(String(200), nullable=True, index=True)
    donor_phone = Column(String(50), nullable=True)
    is_anonymous = Column(Boolean, default=False)
    message = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.datetime.utcnow, index=True)

    project = relationship('Project', back_populates='donations')
    campaign = relationship('Campaign', back_populates='donations')
    user = relationship('User', back_populates='donations')
    transaction = relationship(
        'Transaction', back_populates='donation', uselist=False, cascade='all, delete-orphan',
    )

    @property
    def public_donor_name(self):
        return 'Anonyme' if self.is_anonymous else self.donor_name


class Transaction(Base):
    __tablename__ = 'transactions'

    id = Column(Integer, primary_key=True, index=True)
    donation_id = Column(Integer, ForeignKey('donations.id', ondelete='CASCADE'), nullable=False, unique=True)
    external_id = Column(String(100), nullable=False, unique=True, index=True)  # DON-<ms>-<hex>
    amount = Column(BigInteger, nullable=False)
    currency = Column(String(10), default='XOF')
    payment_method = Column(Enum(PaymentMethod), nullable=False)
    # PENDING -> SUCCESS happens at most once
    status = Column(Enum(TransactionStatus), nullable=False, default=TransactionStatus.PENDING, index=True)
    provider_ref = Column(String(200), nullable=True)
    paid_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    donation = relationship('Donation', back_populates='transaction')
