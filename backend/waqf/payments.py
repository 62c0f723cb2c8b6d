"""
Payment provider seam.

Donation creation hands the new donation to a provider and returns whatever
the provider needs the client to do next. No real gateway (Wave, Orange
Money, ...) is wired in yet: ``PlaceholderCheckout`` only builds a checkout
URL from the configured base, and confirmation arrives later through
``POST /api/v1/donations/{id}/confirm``.
"""
import abc
import datetime

from .config import settings
from .donation_schemas import PaymentData


class PaymentProvider(abc.ABC):
    name = 'base'

    @abc.abstractmethod
    def initiate(self, donation, external_id: str) -> PaymentData:
        """Start a checkout for ``donation``; ``external_id`` is the reference the provider echoes back."""


class PlaceholderCheckout(PaymentProvider):
    name = 'placeholder'

    def __init__(self, base_url: str = None, expiry_minutes: int = None):
        self.base_url = (base_url or settings.PAYMENT_CHECKOUT_URL).rstrip('/')
        self.expiry_minutes = expiry_minutes or settings.PAYMENT_EXPIRY_MINUTES

    def initiate(self, donation, external_id: str) -> PaymentData:
        return PaymentData(
            checkout_url=f"{self.base_url}/{external_id}",
            reference=external_id,
            amount=donation.amount,
            currency=donation.currency,
            expires_at=datetime.datetime.utcnow() + datetime.timedelta(minutes=self.expiry_minutes),
        )


def get_payment_provider() -> PaymentProvider:
    return PlaceholderCheckout()
