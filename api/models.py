"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from domain.pricing import DivisionPricing, EarlyBirdTier, RegularTier
from domain.registration import RegistrationLockMeta
from domain.roster import RosterMember, TeamRoster


# ============================================================================
# Invoice Number Models
# ============================================================================

class InvoiceNumberRequest(BaseModel):
    """Request to generate an invoice number."""
    organizer_name: str = Field(..., min_length=1)
    year: int = Field(..., ge=2000, le=2099)
    event_sequence: int = Field(..., ge=1, le=99)
    club_sequence: int = Field(..., ge=1, le=999)
    version: int = Field(1, ge=1, le=99)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "organizer_name": "Sapphire Productions",
                "year": 2026,
                "event_sequence": 2,
                "club_sequence": 3,
                "version": 1
            }
        },
    )


class InvoiceNumberResponse(BaseModel):
    """Generated invoice number."""
    invoice_number: str
    organizer_code: str


class ParsedInvoiceNumberResponse(BaseModel):
    """Components of a parsed invoice number."""
    invoice_number: str
    organizer_code: str
    year: int
    event_sequence: int
    club_sequence: int
    version: int

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "invoice_number": "SAP-2602-C003-01",
                "organizer_code": "SAP",
                "year": 2026,
                "event_sequence": 2,
                "club_sequence": 3,
                "version": 1
            }
        },
    )


class InvoiceNumberListRequest(BaseModel):
    """Invoice numbers to sort."""
    invoice_numbers: List[str]


class InvoiceNumberListResponse(BaseModel):
    invoice_numbers: List[str]


# ============================================================================
# Pricing Models
# ============================================================================

class EarlyBirdTierModel(BaseModel):
    price: Decimal = Field(..., ge=0)
    deadline: Optional[str] = Field(None, description="Local calendar date, YYYY-MM-DD")


class RegularTierModel(BaseModel):
    price: Decimal = Field(..., ge=0)


class DivisionPricingModel(BaseModel):
    """Price schedule for a division."""
    name: Optional[str] = None
    early_bird: Optional[EarlyBirdTierModel] = None
    regular: RegularTierModel

    def to_domain(self) -> DivisionPricing:
        early_bird = None
        if self.early_bird is not None:
            early_bird = EarlyBirdTier(price=self.early_bird.price, deadline=self.early_bird.deadline)
        return DivisionPricing(
            regular=RegularTier(price=self.regular.price),
            early_bird=early_bird,
            name=self.name,
        )


class PricingResolveRequest(BaseModel):
    """Request to resolve the active price of a division."""
    pricing: DivisionPricingModel
    reference_date: Optional[datetime] = Field(
        None,
        description="Instant to price at; naive values are local time. Defaults to now."
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "pricing": {
                    "name": "Senior Elite",
                    "early_bird": {"price": "100.00", "deadline": "2026-03-01"},
                    "regular": {"price": "130.00"}
                },
                "reference_date": "2026-02-15T12:00:00"
            }
        },
    )


class PricingResolveResponse(BaseModel):
    price: Decimal
    tier: str  # "earlyBird" or "regular"


# ============================================================================
# Registration Models
# ============================================================================

class RosterMemberModel(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    dob: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    def to_domain(self) -> RosterMember:
        return RosterMember(
            first_name=self.first_name,
            last_name=self.last_name,
            dob=self.dob,
            email=self.email,
            phone=self.phone,
        )


class TeamRosterModel(BaseModel):
    team_id: Optional[str] = None
    coaches: List[RosterMemberModel] = Field(default_factory=list)
    athletes: List[RosterMemberModel] = Field(default_factory=list)
    reservists: List[RosterMemberModel] = Field(default_factory=list)
    chaperones: List[RosterMemberModel] = Field(default_factory=list)
    updated_at: Optional[str] = None

    def to_domain(self) -> TeamRoster:
        return TeamRoster(
            team_id=self.team_id,
            coaches=tuple(member.to_domain() for member in self.coaches),
            athletes=tuple(member.to_domain() for member in self.athletes),
            reservists=tuple(member.to_domain() for member in self.reservists),
            chaperones=tuple(member.to_domain() for member in self.chaperones),
            updated_at=self.updated_at,
        )


class LockStatusRequest(BaseModel):
    """Registration lock inputs (ISO strings, as stored)."""
    status: Optional[str] = None
    payment_deadline: Optional[str] = None
    registration_deadline: Optional[str] = None
    paid_at: Optional[str] = None
    reference_date: Optional[datetime] = None

    def to_domain(self) -> RegistrationLockMeta:
        return RegistrationLockMeta(
            status=self.status,
            payment_deadline=self.payment_deadline,
            registration_deadline=self.registration_deadline,
            paid_at=self.paid_at,
        )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "registration_deadline": "2026-03-01T23:59:59Z",
                "paid_at": None
            }
        },
    )


class LockStatusResponse(BaseModel):
    locked: bool
    reason: Optional[str] = None  # "paid" or "deadline"


class SnapshotStatusRequest(BaseModel):
    snapshot_taken_at: Optional[str] = None
    roster_updated_at: Optional[str] = None


class SnapshotStatusResponse(BaseModel):
    out_of_date: bool


class SnapshotHashRequest(BaseModel):
    roster: Optional[TeamRosterModel] = None


class SnapshotHashResponse(BaseModel):
    snapshot_hash: Optional[str] = None


# ============================================================================
# Invoice Models
# ============================================================================

class RegistrationEntryModel(BaseModel):
    """One team registered into a division."""
    division: str
    members: Optional[List[RosterMemberModel]] = None
    team_size: Optional[int] = Field(None, ge=0)
    team_name: Optional[str] = None


class InvoicePaymentModel(BaseModel):
    amount: Decimal
    method: Optional[str] = None
    last_four: Optional[str] = None
    paid_at: Optional[datetime] = None


class InvoiceTotalsRequest(BaseModel):
    """Request to price a registration invoice."""
    entries: List[RegistrationEntryModel]
    division_pricing: List[DivisionPricingModel]
    issued_date: Optional[datetime] = None
    payments: List[InvoicePaymentModel] = Field(default_factory=list)
    gst_rate: Optional[Decimal] = Field(None, ge=0)
    qst_rate: Optional[Decimal] = Field(None, ge=0)
    invoice_total: Optional[Decimal] = Field(
        None,
        ge=0,
        description="Registration total used to price divisions without a price schedule"
    )
    previous_entries: Optional[List[RegistrationEntryModel]] = Field(
        None,
        description="Entries of the previous invoice version, to mark revised divisions"
    )


class InvoiceLineItemModel(BaseModel):
    category: str
    qty: int
    unit_price: Decimal
    line_total: Decimal
    tier: Optional[str] = None
    change_status: Optional[str] = None  # "new", "modified" or "removed"
    original_qty: Optional[int] = None


class InvoiceTotalsResponse(BaseModel):
    line_items: List[InvoiceLineItemModel]
    subtotal: Decimal
    gst_amount: Decimal
    qst_amount: Decimal
    total_tax: Decimal
    total: Decimal
    total_paid: Decimal
    balance_due: Decimal
    new_divisions: List[str] = Field(default_factory=list)
    modified_divisions: List[str] = Field(default_factory=list)
    removed_divisions: List[str] = Field(default_factory=list)


# ============================================================================
# Platform Pricing Models
# ============================================================================

class SubscriptionPlanResponse(BaseModel):
    id: str
    name: str
    price_cents: int
    price_label: str
    display_price: str
    billing_period: Optional[str] = None
    active_event_limit: int
    features: List[str]


class PlatformFeeRequest(BaseModel):
    subtotal: Decimal = Field(..., ge=0)


class PlatformFeeResponse(BaseModel):
    subtotal: Decimal
    platform_fee: Decimal


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[str] = None
    status_code: int

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Not found",
                "detail": "Invalid invoice number: SAP-26-C3",
                "status_code": 404
            }
        },
    )
