"""
Domain: Registration lock and roster snapshot rules.

Contract excerpts implemented here:
- A paid registration is locked, whatever its deadlines say.
- Otherwise the registration deadline (or, without one, the payment deadline)
  governs: the registration locks strictly after that instant.
- A deadline that does not parse leaves the registration open.
- A roster snapshot is out of date once the roster was updated strictly after
  the snapshot was taken.
- The snapshot hash is a change-detection fingerprint, independent of member
  order. It is not a cryptographic hash.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from .roster import RosterMember, TeamRoster
from .time import parse_timestamp, resolve_reference_date

logger = logging.getLogger(__name__)


class LockReason(str, Enum):
    PAID = "paid"
    DEADLINE = "deadline"


@dataclass(frozen=True, slots=True)
class RegistrationLockMeta:
    """
    Lock inputs for one registration, as stored (ISO strings).

    `status` is carried for callers; the lock decision uses `paid_at` and the
    deadlines only.
    """

    status: Optional[str] = None  # paid, unpaid, ...
    payment_deadline: Optional[str] = None
    registration_deadline: Optional[str] = None
    paid_at: Optional[str] = None


def registration_lock_reason(
    meta: RegistrationLockMeta,
    reference_date: Optional[datetime] = None,
) -> Optional[LockReason]:
    """Why the registration is locked at `reference_date`, or None if it is editable."""

    if meta.paid_at:
        return LockReason.PAID

    deadline_value = (
        meta.registration_deadline
        if meta.registration_deadline is not None
        else meta.payment_deadline
    )
    if not deadline_value:
        return None

    deadline = parse_timestamp(deadline_value)
    if deadline is None:
        logger.warning(
            "Registration deadline could not be parsed; registration left open",
            extra={"deadline": deadline_value},
        )
        return None

    if resolve_reference_date(reference_date) > deadline:
        return LockReason.DEADLINE
    return None


def is_registration_locked(
    meta: RegistrationLockMeta,
    reference_date: Optional[datetime] = None,
) -> bool:
    return registration_lock_reason(meta, reference_date) is not None


def is_snapshot_out_of_date(
    snapshot_taken_at: Optional[str] = None,
    roster_updated_at: Optional[str] = None,
) -> bool:
    """True if the roster changed after the snapshot; False if either stamp is missing or invalid."""

    if not snapshot_taken_at or not roster_updated_at:
        return False

    snapshot_date = parse_timestamp(snapshot_taken_at)
    roster_date = parse_timestamp(roster_updated_at)
    if snapshot_date is None or roster_date is None:
        return False

    return roster_date > snapshot_date


def _member_fingerprint(member: RosterMember) -> str:
    fields = (member.first_name, member.last_name, member.dob, member.email, member.phone)
    return "|".join("" if value is None else value for value in fields)


def _utf16_sort_key(text: str) -> bytes:
    # Big-endian UTF-16 bytes order the same way as UTF-16 code units.
    return text.encode("utf-16-be", "surrogatepass")


def _string_hash(text: str) -> str:
    encoded = text.encode("utf-16-le", "surrogatepass")
    hash_value = 0
    for index in range(0, len(encoded), 2):
        code_unit = encoded[index] | (encoded[index + 1] << 8)
        hash_value = (hash_value * 31 + code_unit) & 0xFFFFFFFF
    if hash_value >= 0x80000000:
        hash_value -= 0x100000000
    return str(hash_value)


def build_snapshot_hash(roster: Optional[TeamRoster] = None) -> Optional[str]:
    """
    Fingerprint the roster's members for snapshot change detection.

    Returns None for a missing roster or one without members. Two rosters
    with the same member field values hash identically regardless of order.
    """

    if roster is None:
        return None

    fingerprints = [_member_fingerprint(member) for member in roster.members()]
    if not fingerprints:
        return None

    payload = "||".join(sorted(fingerprints, key=_utf16_sort_key))
    return _string_hash(payload)


__all__ = [
    "LockReason",
    "RegistrationLockMeta",
    "build_snapshot_hash",
    "is_registration_locked",
    "is_snapshot_out_of_date",
    "registration_lock_reason",
]
