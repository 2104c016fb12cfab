"""
Platform pricing: organizer take rate and subscription plans.

The platform fee is charged to the organizer and never appears on club
invoices. Subscription plans cap how many events an organizer can have
active at once; draft events are unlimited.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Mapping, Optional, Tuple

from services.settings import get_settings

PLATFORM_TAKE_RATE = Decimal("0.03")

_CENT = Decimal("0.01")


class SubscriptionPlanId(str, Enum):
    FREE = "free"
    PRO = "pro"


@dataclass(frozen=True, slots=True)
class SubscriptionPlan:
    id: SubscriptionPlanId
    name: str
    price_cents: int
    price_label: str
    billing_period: Optional[str]  # year, month, or None for free plans
    active_event_limit: int
    features: Tuple[str, ...]


SUBSCRIPTION_PLANS: Mapping[SubscriptionPlanId, SubscriptionPlan] = {
    SubscriptionPlanId.FREE: SubscriptionPlan(
        id=SubscriptionPlanId.FREE,
        name="Beginner",
        price_cents=0,
        price_label="$0",
        billing_period=None,
        active_event_limit=1,
        features=(
            "1 active event at a time",
            "Unlimited draft events",
            "3% platform fee on registrations",
        ),
    ),
    SubscriptionPlanId.PRO: SubscriptionPlan(
        id=SubscriptionPlanId.PRO,
        name="Organizer Pro",
        price_cents=15000,
        price_label="$150",
        billing_period="year",
        active_event_limit=10,
        features=(
            "Up to 10 active events at a time",
            "Unlimited draft events",
            "3% platform fee on registrations",
            "Priority support",
        ),
    ),
}


def calculate_platform_fee(subtotal: Decimal, take_rate: Optional[Decimal] = None) -> Decimal:
    """
    Platform fee for an invoice subtotal, rounded to the cent (half up).

    Uses the configured take rate unless `take_rate` is given.

    Raises:
        ValueError: If the take rate is negative
    """

    rate = get_settings().platform_take_rate if take_rate is None else take_rate
    if rate < 0:
        raise ValueError("take_rate must be >= 0")
    return (subtotal * rate).quantize(_CENT, rounding=ROUND_HALF_UP)


def get_plan(plan_id: str) -> SubscriptionPlan:
    """Get a subscription plan by id. Unknown ids get the free plan."""

    try:
        return SUBSCRIPTION_PLANS[SubscriptionPlanId(plan_id)]
    except ValueError:
        return SUBSCRIPTION_PLANS[SubscriptionPlanId.FREE]


def format_price_cents(cents: int) -> str:
    """Format a price in cents for display (15000 -> "$150", 15050 -> "$150.50")."""

    dollars = Decimal(cents) / 100
    if dollars == dollars.to_integral_value():
        return f"${dollars.to_integral_value()}"
    return f"${dollars.quantize(_CENT, rounding=ROUND_HALF_UP)}"


def format_plan_price(plan: SubscriptionPlan) -> str:
    """Plan price with billing period ("$150/year"), or "Free"."""

    if plan.price_cents == 0:
        return "Free"
    base = format_price_cents(plan.price_cents)
    return f"{base}/{plan.billing_period}" if plan.billing_period else base


def can_add_active_event(plan: SubscriptionPlan, current_active_count: int) -> bool:
    """Whether one more event may be made active under `plan`."""

    return current_active_count < plan.active_event_limit


__all__ = [
    "PLATFORM_TAKE_RATE",
    "SUBSCRIPTION_PLANS",
    "SubscriptionPlan",
    "SubscriptionPlanId",
    "calculate_platform_fee",
    "can_add_active_event",
    "format_plan_price",
    "format_price_cents",
    "get_plan",
]
