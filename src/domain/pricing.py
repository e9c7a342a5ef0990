"""Credit pricing constants

Exchange rate, refund window, signup bonus and the static service price table.
"""

from datetime import timedelta
from decimal import Decimal
from typing import Optional

# 1 currency unit buys this many credits
CREDITS_PER_CURRENCY_UNIT = Decimal("10")

REFUND_WINDOW = timedelta(hours=24)

SIGNUP_BONUS_CREDITS = Decimal("15")

SERVICE_PRICING = {
    "ai-image-edit": Decimal("5"),
    "ai-image-generate": Decimal("10"),
    "high-resolution-edit": Decimal("15"),
    "batch-processing": Decimal("20"),
    "remove-background": Decimal("3"),
    "enhance-image": Decimal("4"),
    "resize-image": Decimal("2"),
    "ai-video-generate": Decimal("30"),
}

# Gateway limits for a single payment, in currency units
MIN_PAYMENT_AMOUNT = Decimal("0.01")
MAX_PAYMENT_AMOUNT = Decimal("10000")


def get_service_price(service_key: str) -> Optional[Decimal]:
    """Return the credit cost of a service, or None for unknown keys"""
    return SERVICE_PRICING.get(service_key)


def credits_for_amount(amount: Decimal) -> Decimal:
    return amount * CREDITS_PER_CURRENCY_UNIT
