# medconnect/payment.py
"""Simulated checkout in front of booking.

Nothing here talks to a payment network. Card details get a format check,
then a fixed delay stands in for settlement; wallets only get the delay.
Booking is attempted only after the simulated payment resolves.
"""
import logging
import re
import time
import uuid
from datetime import date
from typing import Callable, Optional

from .client import ApiClient

logger = logging.getLogger(__name__)

CARD = "card"
PHONEPE = "phonepe"
GOOGLEPAY = "googlepay"
WALLETS = {PHONEPE: "PhonePe", GOOGLEPAY: "Google Pay"}

CARD_DELAY = 1.5
WALLET_DELAY = 1.0


class PaymentError(Exception):
    pass


class CardDetails:
    def __init__(self, name: str, number: str, expiry: str, cvc: str):
        self.name = name
        self.number = number
        self.expiry = expiry
        self.cvc = cvc


class PaymentReceipt:
    def __init__(self, method: str, reference: str):
        self.method = method
        self.reference = reference

    def __repr__(self):
        return f"<PaymentReceipt {self.method} {self.reference}>"


def validate_card(card: Optional[CardDetails], today: Optional[date] = None) -> None:
    """Raise PaymentError with a user-facing message if ``card`` is unusable."""
    if card is None or not all([card.name, card.number, card.expiry, card.cvc]):
        raise PaymentError("Please fill in all card details")

    if not re.fullmatch(r"\d{16}", card.number.replace(" ", "")):
        raise PaymentError("Please enter a valid 16-digit card number")

    match = re.fullmatch(r"(\d{2})/(\d{2})", card.expiry)
    if not match or not 1 <= int(match.group(1)) <= 12:
        raise PaymentError("Please enter a valid expiry date in MM/YY format")
    today = today or date.today()
    month, year = int(match.group(1)), 2000 + int(match.group(2))
    if (year, month) <= (today.year, today.month):
        raise PaymentError("Card has expired")

    if not re.fullmatch(r"\d{3,4}", card.cvc):
        raise PaymentError("Please enter a valid 3 or 4 digit CVC code")


def process_payment(
    method: str,
    card: Optional[CardDetails] = None,
    sleep: Callable[[float], None] = time.sleep,
    today: Optional[date] = None,
) -> PaymentReceipt:
    if method == CARD:
        validate_card(card, today=today)
        sleep(CARD_DELAY)
    elif method in WALLETS:
        sleep(WALLET_DELAY)
    else:
        raise PaymentError(f"Unsupported payment method: {method}")

    receipt = PaymentReceipt(method, f"SIM-{uuid.uuid4().hex[:10].upper()}")
    logger.info("Simulated %s payment succeeded (%s)", WALLETS.get(method, "card"), receipt.reference)
    return receipt


def book_with_payment(
    client: ApiClient,
    doctor_id: int,
    appointment_date: date,
    time_slot: str,
    reason: str,
    method: str = CARD,
    card: Optional[CardDetails] = None,
    sleep: Callable[[float], None] = time.sleep,
    today: Optional[date] = None,
) -> dict:
    """Pay first, then book as paid. A failed payment never reaches the API."""
    receipt = process_payment(method, card=card, sleep=sleep, today=today)
    return client.create_appointment(
        doctor_id,
        appointment_date,
        time_slot,
        reason,
        payment_method=receipt.method,
        is_paid=True,
    )
