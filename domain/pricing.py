"""
Domain: Division pricing tiers.

A division is priced with a required regular tier and an optional early-bird
tier that applies until the end of its deadline day.

Contract:
- The early-bird deadline "YYYY-MM-DD" is a local calendar day, inclusive:
  a registration at 23:59:59.999 local time on that day still gets the
  early-bird price.
- Without an early-bird tier, or once its deadline has passed, the regular
  price applies.
- The resolver does not check that the early-bird price is below the
  regular price.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from .time import parse_local_deadline, resolve_reference_date

logger = logging.getLogger(__name__)


class PricingTier(str, Enum):
    EARLY_BIRD = "earlyBird"
    REGULAR = "regular"


@dataclass(frozen=True, slots=True)
class RegularTier:
    price: Decimal


@dataclass(frozen=True, slots=True)
class EarlyBirdTier:
    price: Decimal
    deadline: Optional[str] = None  # ISO calendar date, YYYY-MM-DD


@dataclass(frozen=True, slots=True)
class DivisionPricing:
    """
    Price schedule for one division.

    `name` identifies the division when an invoice groups entries by division.
    """

    regular: RegularTier
    early_bird: Optional[EarlyBirdTier] = None
    name: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ActiveDivisionRate:
    price: Decimal
    tier: PricingTier


def resolve_division_pricing(
    pricing: DivisionPricing,
    reference_date: Optional[datetime] = None,
) -> ActiveDivisionRate:
    """
    Resolve the unit price that applies at `reference_date` (default: now).

    Example:
        pricing = DivisionPricing(
            regular=RegularTier(Decimal("130")),
            early_bird=EarlyBirdTier(Decimal("100"), "2026-03-01"),
        )
        resolve_division_pricing(pricing, datetime(2026, 2, 15))
        # ActiveDivisionRate(price=Decimal('100'), tier=PricingTier.EARLY_BIRD)
    """

    early_bird = pricing.early_bird
    if early_bird is not None and early_bird.deadline:
        deadline = parse_local_deadline(early_bird.deadline)
        if deadline is None:
            logger.warning(
                "Early-bird deadline could not be parsed; regular pricing applies",
                extra={"division": pricing.name, "deadline": early_bird.deadline},
            )
        elif resolve_reference_date(reference_date) <= deadline:
            return ActiveDivisionRate(price=early_bird.price, tier=PricingTier.EARLY_BIRD)

    return ActiveDivisionRate(price=pricing.regular.price, tier=PricingTier.REGULAR)


__all__ = [
    "ActiveDivisionRate",
    "DivisionPricing",
    "EarlyBirdTier",
    "PricingTier",
    "RegularTier",
    "resolve_division_pricing",
]
