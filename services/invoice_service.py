"""
Invoice service for registration invoices.

Prices each division on a registration with the division's active tier,
applies GST/QST and payments, and numbers the invoice.

A revised invoice is compared with the entries of the previous version:
divisions are marked new, modified or removed, and modified line items keep
the quantity they had before.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Sequence

from domain.invoice_number import format_legacy_invoice_number, generate_invoice_number
from domain.pricing import DivisionPricing, PricingTier, RegularTier, resolve_division_pricing
from domain.roster import RosterMember, TeamRoster
from domain.time import parse_timestamp, resolve_reference_date
from services.settings import get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RegistrationEntry:
    """
    One team registered into a division.

    `members` is the registered roster; without it, `team_size` is the
    declared head count.
    """

    division: str
    members: Optional[Sequence[RosterMember]] = None
    team_size: Optional[int] = None
    team_name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.team_size is not None and self.team_size < 0:
            raise ValueError("team_size must be >= 0")

    @classmethod
    def from_roster(cls, division: str, roster: TeamRoster, team_name: Optional[str] = None) -> "RegistrationEntry":
        return cls(division=division, members=tuple(roster.members()), team_name=team_name)


@dataclass(frozen=True, slots=True)
class InvoicePayment:
    amount: Decimal
    method: Optional[str] = None  # Visa, e-transfer, cheque ...
    last_four: Optional[str] = None
    paid_at: Optional[datetime] = None


class ChangeStatus(str, Enum):
    NEW = "new"
    MODIFIED = "modified"
    REMOVED = "removed"


@dataclass(frozen=True, slots=True)
class InvoiceChanges:
    """Divisions that differ between two versions of an invoice."""

    new_divisions: FrozenSet[str] = frozenset()
    modified_divisions: FrozenSet[str] = frozenset()
    removed_divisions: FrozenSet[str] = frozenset()

    def status_of(self, division: str) -> Optional[ChangeStatus]:
        if division in self.new_divisions:
            return ChangeStatus.NEW
        if division in self.modified_divisions:
            return ChangeStatus.MODIFIED
        if division in self.removed_divisions:
            return ChangeStatus.REMOVED
        return None

    def has_changes(self) -> bool:
        return bool(self.new_divisions or self.modified_divisions or self.removed_divisions)


@dataclass(frozen=True, slots=True)
class InvoiceLineItem:
    """
    Line item for one division.

    A division with no pricing is billed at zero and has no tier.
    `original_qty` is set only on a modified division whose head count changed.
    """

    category: str
    qty: int
    unit_price: Decimal
    line_total: Decimal
    tier: Optional[PricingTier]
    change_status: Optional[ChangeStatus] = None
    original_qty: Optional[int] = None


@dataclass(frozen=True, slots=True)
class InvoiceTotals:
    line_items: List[InvoiceLineItem]
    subtotal: Decimal
    gst_amount: Decimal
    qst_amount: Decimal
    total_tax: Decimal
    total: Decimal
    total_paid: Decimal
    balance_due: Decimal
    changes: Optional[InvoiceChanges] = None


@dataclass(frozen=True, slots=True)
class Invoice:
    invoice_number: str
    issued_date: datetime
    status: str  # paid, unpaid
    totals: InvoiceTotals
    payments: List[InvoicePayment]


def get_entry_member_count(entry: RegistrationEntry) -> int:
    """Registered members, falling back to the declared team size."""

    if entry.members is not None:
        return len(entry.members)
    return entry.team_size or 0


def group_entries_by_division(entries: Sequence[RegistrationEntry]) -> Dict[str, List[RegistrationEntry]]:
    """Group entries by division, keeping first-seen division order."""

    grouped: Dict[str, List[RegistrationEntry]] = {}
    for entry in entries:
        grouped.setdefault(entry.division, []).append(entry)
    return grouped


def _entry_key(entry: RegistrationEntry) -> tuple:
    members = tuple(entry.members) if entry.members is not None else None
    return (entry.team_name, get_entry_member_count(entry), members)


def diff_invoice_entries(
    previous: Sequence[RegistrationEntry],
    current: Sequence[RegistrationEntry],
) -> InvoiceChanges:
    """
    Compare the entries of two invoice versions division by division.

    - new: the division only has entries in `current`
    - removed: the division only has entries in `previous`
    - modified: both have entries, but a team was added, dropped or its
      roster changed (entry order does not matter)
    """

    previous_by_division = group_entries_by_division(previous)
    current_by_division = group_entries_by_division(current)

    modified = frozenset(
        division
        for division, entries in current_by_division.items()
        if division in previous_by_division
        and Counter(map(_entry_key, entries)) != Counter(map(_entry_key, previous_by_division[division]))
    )

    return InvoiceChanges(
        new_divisions=frozenset(d for d in current_by_division if d not in previous_by_division),
        modified_divisions=modified,
        removed_divisions=frozenset(d for d in previous_by_division if d not in current_by_division),
    )


def ensure_division_pricing(
    division_pricing: Sequence[DivisionPricing],
    entries: Sequence[RegistrationEntry],
    invoice_total: Optional[Decimal] = None,
) -> List[DivisionPricing]:
    """
    Fill in pricing for divisions that have entries but no price schedule.

    The missing unit price is derived from the invoice total spread over the
    division's participants (at least 1), or zero without a total.
    """

    known = {pricing.name for pricing in division_pricing}
    participants: Dict[str, int] = {}
    for entry in entries:
        participants[entry.division] = participants.get(entry.division, 0) + get_entry_member_count(entry)

    ensured = list(division_pricing)
    for division, count in participants.items():
        if division in known:
            continue
        total = invoice_total if invoice_total is not None and invoice_total > 0 else Decimal("0")
        unit_price = total / max(count, 1)
        logger.info(
            "No pricing for division %s; derived unit price %s",
            division,
            unit_price,
            extra={"division": division, "participants": count, "unit_price": str(unit_price)},
        )
        ensured.append(DivisionPricing(regular=RegularTier(price=unit_price), name=division))

    return ensured


def calculate_invoice_totals(
    entries: Sequence[RegistrationEntry],
    division_pricing: Sequence[DivisionPricing],
    issued_date: Optional[datetime] = None,
    payments: Sequence[InvoicePayment] = (),
    gst_rate: Optional[Decimal] = None,
    qst_rate: Optional[Decimal] = None,
    previous_entries: Optional[Sequence[RegistrationEntry]] = None,
) -> InvoiceTotals:
    """
    Calculate invoice line items and totals.

    Args:
        entries: Registered teams on the invoice
        division_pricing: Price schedules, matched to entries by division name
        issued_date: Date the active pricing tier is resolved at (default: now)
        payments: Payments already received
        gst_rate: GST rate (default: configured rate)
        qst_rate: QST rate (default: configured rate)
        previous_entries: Entries of the previous invoice version, for revisions

    Returns:
        InvoiceTotals with one line item per division. With `previous_entries`,
        line items carry their change status and `changes` is set.

    Raises:
        ValueError: If a tax rate is negative

    Example:
        totals = calculate_invoice_totals(entries, event_divisions, issued_date)
        print(f"Total: ${totals.total}, due: ${totals.balance_due}")
    """
    settings = get_settings()
    gst_rate = settings.gst_rate if gst_rate is None else gst_rate
    qst_rate = settings.qst_rate if qst_rate is None else qst_rate
    if gst_rate < 0 or qst_rate < 0:
        raise ValueError("tax rates must be >= 0")

    reference_date = resolve_reference_date(issued_date)
    pricing_by_division = {pricing.name: pricing for pricing in division_pricing if pricing.name is not None}

    changes = None
    previous_by_division: Dict[str, List[RegistrationEntry]] = {}
    if previous_entries is not None:
        changes = diff_invoice_entries(previous_entries, entries)
        previous_by_division = group_entries_by_division(previous_entries)

    line_items: List[InvoiceLineItem] = []
    subtotal = Decimal("0")

    for division, division_entries in group_entries_by_division(entries).items():
        qty = sum(get_entry_member_count(entry) for entry in division_entries)
        pricing = pricing_by_division.get(division)

        change_status = changes.status_of(division) if changes is not None else None
        original_qty = None
        if change_status == ChangeStatus.MODIFIED:
            previous_qty = sum(get_entry_member_count(entry) for entry in previous_by_division[division])
            if previous_qty != qty:
                original_qty = previous_qty

        if pricing is None:
            line_items.append(InvoiceLineItem(
                category=division,
                qty=qty,
                unit_price=Decimal("0"),
                line_total=Decimal("0"),
                tier=None,
                change_status=change_status,
                original_qty=original_qty,
            ))
            continue

        rate = resolve_division_pricing(pricing, reference_date)
        line_total = rate.price * qty
        line_items.append(InvoiceLineItem(
            category=division,
            qty=qty,
            unit_price=rate.price,
            line_total=line_total,
            tier=rate.tier,
            change_status=change_status,
            original_qty=original_qty,
        ))
        subtotal += line_total

    gst_amount = subtotal * gst_rate
    qst_amount = subtotal * qst_rate
    total_tax = gst_amount + qst_amount
    total = subtotal + total_tax
    total_paid = sum((payment.amount for payment in payments), Decimal("0"))

    return InvoiceTotals(
        line_items=line_items,
        subtotal=subtotal,
        gst_amount=gst_amount,
        qst_amount=qst_amount,
        total_tax=total_tax,
        total=total,
        total_paid=total_paid,
        balance_due=total - total_paid,
        changes=changes,
    )


def build_invoice(
    organizer_name: str,
    year: int,
    event_sequence: Optional[int],
    club_sequence: Optional[int],
    entries: Sequence[RegistrationEntry],
    division_pricing: Sequence[DivisionPricing],
    issued_date: Optional[datetime] = None,
    version: int = 1,
    paid_at: Optional[str] = None,
    payments: Sequence[InvoicePayment] = (),
    invoice_total: Optional[Decimal] = None,
    previous_entries: Optional[Sequence[RegistrationEntry]] = None,
    invoice_id: Optional[str] = None,
    seed: Optional[str] = None,
) -> Invoice:
    """
    Price and number a registration invoice.

    Divisions without a price schedule are priced from `invoice_total`
    (see `ensure_division_pricing`).

    Without both sequence numbers the invoice gets a legacy "{id}-{VVV}"
    number from `invoice_id`, or from a hash of `seed` when there is no id.

    A paid invoice without recorded payments gets a single payment covering
    the full total, dated `paid_at` (or the issue date if that does not parse).

    Example:
        invoice = build_invoice(
            "Sapphire Productions", 2026, 2, 3, entries, event_divisions,
            version=2, previous_entries=original_entries,
        )
        # invoice.invoice_number == "SAP-2602-C003-02"
    """

    issued = resolve_reference_date(issued_date)
    if event_sequence is None or club_sequence is None:
        invoice_number = format_legacy_invoice_number(invoice_id, seed, version)
        logger.info(
            "No sequence numbers for invoice; using legacy number %s",
            invoice_number,
            extra={"invoice_number": invoice_number, "organizer_name": organizer_name},
        )
    else:
        invoice_number = generate_invoice_number(organizer_name, year, event_sequence, club_sequence, version)

    division_pricing = ensure_division_pricing(division_pricing, entries, invoice_total)
    totals = calculate_invoice_totals(
        entries, division_pricing, issued, payments, previous_entries=previous_entries
    )
    status = "paid" if paid_at else "unpaid"

    recorded = list(payments)
    if status == "paid" and not recorded:
        recorded = [InvoicePayment(amount=totals.total, paid_at=parse_timestamp(paid_at) or issued)]
        totals = calculate_invoice_totals(
            entries, division_pricing, issued, recorded, previous_entries=previous_entries
        )

    return Invoice(
        invoice_number=invoice_number,
        issued_date=issued,
        status=status,
        totals=totals,
        payments=recorded,
    )


__all__ = [
    "ChangeStatus",
    "Invoice",
    "InvoiceChanges",
    "InvoiceLineItem",
    "InvoicePayment",
    "InvoiceTotals",
    "RegistrationEntry",
    "build_invoice",
    "calculate_invoice_totals",
    "diff_invoice_entries",
    "ensure_division_pricing",
    "get_entry_member_count",
    "group_entries_by_division",
]
