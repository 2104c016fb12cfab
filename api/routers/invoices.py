"""
Invoice API Endpoints.

Endpoints for invoice numbers and invoice totals.
"""

from fastapi import APIRouter, Depends, HTTPException

from api.models import (
    ErrorResponse,
    InvoiceLineItemModel,
    InvoiceNumberListRequest,
    InvoiceNumberListResponse,
    InvoiceNumberRequest,
    InvoiceNumberResponse,
    InvoicePaymentModel,
    InvoiceTotalsRequest,
    InvoiceTotalsResponse,
    ParsedInvoiceNumberResponse,
    RegistrationEntryModel,
)
from domain.invoice_number import (
    InvoiceNumber,
    format_invoice_number,
    get_organizer_code,
    parse_invoice_number,
    sort_invoice_numbers,
)
from services.invoice_service import (
    InvoicePayment,
    RegistrationEntry,
    calculate_invoice_totals,
    ensure_division_pricing,
)
from services.settings import Settings, get_settings

router = APIRouter()


@router.post(
    "/invoice-numbers",
    response_model=InvoiceNumberResponse,
    summary="Generate Invoice Number",
    description="Generate an ORG-YYEE-CNNN-VV invoice number for a club registration."
)
def create_invoice_number(request: InvoiceNumberRequest):
    """
    Generate an invoice number.

    Sequence numbers are limited to their field width (event 1-99,
    club 1-999, version 1-99) so the number always parses back.

    **Example request:**
    ```json
    {
      "organizer_name": "Sapphire Productions",
      "year": 2026,
      "event_sequence": 2,
      "club_sequence": 3
    }
    ```

    **Response:** `{"invoice_number": "SAP-2602-C003-01", "organizer_code": "SAP"}`
    """
    organizer_code = get_organizer_code(request.organizer_name)
    config = InvoiceNumber(
        organizer_code=organizer_code,
        year=request.year,
        event_sequence=request.event_sequence,
        club_sequence=request.club_sequence,
        version=request.version,
    )
    if not config.fits_fixed_width():
        raise HTTPException(
            status_code=422,
            detail=f"Organizer name {request.organizer_name!r} does not yield a 3-letter code"
        )

    return InvoiceNumberResponse(
        invoice_number=format_invoice_number(config),
        organizer_code=organizer_code,
    )


@router.get(
    "/invoice-numbers/{invoice_number}",
    response_model=ParsedInvoiceNumberResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Parse Invoice Number",
)
def read_invoice_number(invoice_number: str, settings: Settings = Depends(get_settings)):
    """Split an invoice number into organizer code, year and sequence numbers."""
    parsed = parse_invoice_number(invoice_number, century=settings.invoice_century)
    if parsed is None:
        raise HTTPException(
            status_code=404,
            detail=f"Invalid invoice number: {invoice_number}"
        )

    return ParsedInvoiceNumberResponse(
        invoice_number=invoice_number,
        organizer_code=parsed.organizer_code,
        year=parsed.year,
        event_sequence=parsed.event_sequence,
        club_sequence=parsed.club_sequence,
        version=parsed.version,
    )


@router.post(
    "/invoice-numbers/sort",
    response_model=InvoiceNumberListResponse,
    summary="Sort Invoice Numbers",
)
def sort_invoice_number_list(request: InvoiceNumberListRequest):
    """Sort invoice numbers (by organizer code, then year, event, club and version)."""
    return InvoiceNumberListResponse(invoice_numbers=sort_invoice_numbers(request.invoice_numbers))


def _to_payment(payment: InvoicePaymentModel) -> InvoicePayment:
    return InvoicePayment(
        amount=payment.amount,
        method=payment.method,
        last_four=payment.last_four,
        paid_at=payment.paid_at,
    )


def _to_entry(entry: RegistrationEntryModel) -> RegistrationEntry:
    return RegistrationEntry(
        division=entry.division,
        members=None if entry.members is None else tuple(member.to_domain() for member in entry.members),
        team_size=entry.team_size,
        team_name=entry.team_name,
    )


@router.post(
    "/invoices/totals",
    response_model=InvoiceTotalsResponse,
    summary="Calculate Invoice Totals",
    description="Price registered teams by division, apply GST/QST and subtract payments."
)
def calculate_totals(request: InvoiceTotalsRequest):
    """
    Calculate invoice totals.

    Each division is priced with the tier active on `issued_date`
    (early-bird until the end of its deadline day, regular afterwards).
    Divisions without a price schedule are priced from `invoice_total`
    when it is given, and billed at zero otherwise.

    With `previous_entries` the invoice is treated as a revision: line items
    carry `change_status`, and modified ones whose head count changed carry
    `original_qty`.
    """
    entries = [_to_entry(entry) for entry in request.entries]
    division_pricing = [pricing.to_domain() for pricing in request.division_pricing]
    if request.invoice_total is not None:
        division_pricing = ensure_division_pricing(division_pricing, entries, request.invoice_total)
    previous_entries = None
    if request.previous_entries is not None:
        previous_entries = [_to_entry(entry) for entry in request.previous_entries]

    totals = calculate_invoice_totals(
        entries,
        division_pricing,
        issued_date=request.issued_date,
        payments=[_to_payment(payment) for payment in request.payments],
        gst_rate=request.gst_rate,
        qst_rate=request.qst_rate,
        previous_entries=previous_entries,
    )
    changes = totals.changes

    return InvoiceTotalsResponse(
        line_items=[
            InvoiceLineItemModel(
                category=item.category,
                qty=item.qty,
                unit_price=item.unit_price,
                line_total=item.line_total,
                tier=item.tier.value if item.tier is not None else None,
                change_status=item.change_status.value if item.change_status is not None else None,
                original_qty=item.original_qty,
            )
            for item in totals.line_items
        ],
        subtotal=totals.subtotal,
        gst_amount=totals.gst_amount,
        qst_amount=totals.qst_amount,
        total_tax=totals.total_tax,
        total=totals.total,
        total_paid=totals.total_paid,
        balance_due=totals.balance_due,
        new_divisions=sorted(changes.new_divisions) if changes else [],
        modified_divisions=sorted(changes.modified_divisions) if changes else [],
        removed_divisions=sorted(changes.removed_divisions) if changes else [],
    )
