"""
Domain: Invoice numbers.

Invoice Number Format: {ORG}-{YYEE}-C{NNN}-{VV}
- ORG: 3-letter organizer code
- YY: Year (last 2 digits)
- EE: Event sequence within that year for the organizer (01 = first event)
- C: Club prefix
- NNN: Club registration order for that event (001 = first club to register)
- VV: Invoice version (01 = original, 02 = revised)

Examples:
- SAP-2602-C003-01 (Sapphire Productions, 2nd event of 2026, 3rd club, original)
- CEE-2501-C001-01 (Cheer Elite Events, 1st event of 2025, 1st club, original)

Fields are zero-padded to a fixed width so that plain string ordering matches
numeric ordering for one organizer. Values wider than their field are
formatted as-is; such numbers no longer parse.

Compatibility: registrations numbered before organizer/event/club sequences
existed use "{6-digit id}-{VVV}" numbers (see the legacy section below).
`build_invoice` falls back to them when no sequence numbers are given.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import Iterable, List, Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_CENTURY = 2000

ORGANIZER_CODES: Mapping[str, str] = {
    "Cheer Elite Events": "CEE",
    "Sapphire Productions": "SAP",
    "East Region Events": "ERE",
    "Spirit Sports Co.": "SSC",
    "Midwest Athletics": "MWA",
    "Southern Spirit": "SOS",
    "West Coast Cheer": "WCC",
}

_INVOICE_NUMBER = re.compile(
    r"([A-Z]{3})-([0-9]{2})([0-9]{2})-C([0-9]{3})-([0-9]{2})"
)
_NON_ALPHA = re.compile(r"[^a-zA-Z]")
_ORGANIZER_CODE = re.compile(r"[A-Z]{3}")


@dataclass(frozen=True, slots=True)
class InvoiceNumber:
    """
    Structured invoice identity.

    Used both to format a new number and as the result of parsing one.
    Construction performs no range checks; see `fits_fixed_width`.
    """

    organizer_code: str
    year: int
    event_sequence: int
    club_sequence: int
    version: int = 1

    def fits_fixed_width(self) -> bool:
        """True if formatting this number produces a string that parses back."""

        return (
            _ORGANIZER_CODE.fullmatch(self.organizer_code) is not None
            and 0 <= self.event_sequence <= 99
            and 0 <= self.club_sequence <= 999
            and 0 <= self.version <= 99
        )

    def revised(self) -> "InvoiceNumber":
        """Next revision of the same invoice."""

        return replace(self, version=self.version + 1)

    def __str__(self) -> str:
        return format_invoice_number(self)


def get_organizer_code(organizer_name: str) -> str:
    """
    Get the 3-letter organizer code for a given organizer name.

    Known organizers map through ORGANIZER_CODES (exact match). Anything else
    falls back to the first 3 letters of the name, uppercased. Names with
    fewer than 3 letters give a shorter code.
    """

    code = ORGANIZER_CODES.get(organizer_name)
    if code is not None:
        return code
    return _NON_ALPHA.sub("", organizer_name)[:3].upper()


def format_invoice_number(config: InvoiceNumber) -> str:
    """Format an invoice number from its components (ORG-YYEE-CNNN-VV)."""

    yy = f"{config.year % 100:02d}"
    ee = f"{config.event_sequence:02d}"
    nnn = f"{config.club_sequence:03d}"
    vv = f"{config.version:02d}"
    invoice_number = f"{config.organizer_code}-{yy}{ee}-C{nnn}-{vv}"

    if not config.fits_fixed_width():
        logger.warning(
            "Invoice number %s exceeds its fixed-width fields",
            invoice_number,
            extra={
                "invoice_number": invoice_number,
                "organizer_code": config.organizer_code,
                "event_sequence": config.event_sequence,
                "club_sequence": config.club_sequence,
                "version": config.version,
            },
        )

    return invoice_number


def generate_invoice_number(
    organizer_name: str,
    year: int,
    event_sequence: int,
    club_sequence: int,
    version: int = 1,
) -> str:
    """Generate an invoice number from an organizer name and sequence numbers."""

    return format_invoice_number(
        InvoiceNumber(
            organizer_code=get_organizer_code(organizer_name),
            year=year,
            event_sequence=event_sequence,
            club_sequence=club_sequence,
            version=version,
        )
    )


def parse_invoice_number(
    invoice_number: object,
    century: int = DEFAULT_CENTURY,
) -> Optional[InvoiceNumber]:
    """
    Parse an invoice number into its components.

    The two-digit year is anchored to `century` (2000 unless overridden).
    Returns None if the format is invalid.
    """

    if not isinstance(invoice_number, str):
        return None

    match = _INVOICE_NUMBER.fullmatch(invoice_number)
    if match is None:
        return None

    organizer_code, yy, ee, nnn, vv = match.groups()
    return InvoiceNumber(
        organizer_code=organizer_code,
        year=century + int(yy),
        event_sequence=int(ee),
        club_sequence=int(nnn),
        version=int(vv),
    )


def compare_invoice_numbers(a: str, b: str) -> int:
    """
    Compare two invoice numbers for sorting.

    Returns negative if a < b, positive if a > b, 0 if equal. The comparison
    is plain string order; across organizers it sorts by organizer code.
    """

    return (a > b) - (a < b)


def sort_invoice_numbers(invoice_numbers: Iterable[str]) -> List[str]:
    """Invoice numbers in ascending order."""

    return sorted(invoice_numbers)


# ============================================================================
# Legacy hash-based invoice numbers
# Registrations created before explicit numbering carry a 6-digit id derived
# from "{registration_id}:{event_id}" and a 3-digit order version.
# ============================================================================

def _utf16_code_units(text: str) -> Iterable[int]:
    encoded = text.encode("utf-16-le", "surrogatepass")
    for index in range(0, len(encoded), 2):
        yield encoded[index] | (encoded[index + 1] << 8)


def compute_hash_based_invoice_id(seed: str) -> str:
    """Six-digit id (100000-999999) derived from `seed`."""

    hash_value = 0
    for code_unit in _utf16_code_units(seed):
        hash_value = (hash_value * 31 + code_unit) & 0xFFFFFFFF
    return f"{hash_value % 900000 + 100000:06d}"


def format_hash_based_invoice_number(
    registration_id: str,
    event_id: str,
    version: int = 1,
) -> str:
    return format_legacy_invoice_number(seed=f"{registration_id}:{event_id}", version=version)


def normalize_invoice_id(raw_id: Optional[str] = None, seed: Optional[str] = None) -> str:
    """
    Normalize a stored invoice id to six characters.

    - Ids containing digits keep their last six digits, left-padded with zeros.
    - Other non-empty ids keep their first six characters, right-padded with zeros.
    - Without an id, a hash-based id is derived from `seed`.
    """

    if raw_id:
        digits = "".join(ch for ch in raw_id if "0" <= ch <= "9")
        if digits:
            return digits[-6:].rjust(6, "0")
        return raw_id.strip()[:6].ljust(6, "0")

    return compute_hash_based_invoice_id(seed or "invoice")


def format_legacy_invoice_number(
    invoice_id: Optional[str] = None,
    seed: Optional[str] = None,
    version: int = 1,
) -> str:
    """
    Format a "{id}-{VVV}" invoice number for a registration without
    sequence numbers.

    `invoice_id` is normalized with `normalize_invoice_id`; without one the
    id is derived from `seed`.
    """

    return f"{normalize_invoice_id(invoice_id, seed)}-{version:03d}"


__all__ = [
    "DEFAULT_CENTURY",
    "ORGANIZER_CODES",
    "InvoiceNumber",
    "compare_invoice_numbers",
    "compute_hash_based_invoice_id",
    "format_hash_based_invoice_number",
    "format_invoice_number",
    "format_legacy_invoice_number",
    "generate_invoice_number",
    "get_organizer_code",
    "normalize_invoice_id",
    "parse_invoice_number",
    "sort_invoice_numbers",
]
