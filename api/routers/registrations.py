"""
Registrations API Endpoints.

Endpoints for registration locks and roster snapshots.
"""

from fastapi import APIRouter

from api.models import (
    LockStatusRequest,
    LockStatusResponse,
    SnapshotHashRequest,
    SnapshotHashResponse,
    SnapshotStatusRequest,
    SnapshotStatusResponse,
)
from domain.registration import (
    build_snapshot_hash,
    is_snapshot_out_of_date,
    registration_lock_reason,
)

router = APIRouter()


@router.post(
    "/registrations/lock-status",
    response_model=LockStatusResponse,
    summary="Registration Lock Status",
)
def lock_status(request: LockStatusRequest):
    """
    Check whether a registration's roster can still be edited.

    - A paid registration is always locked (`reason: "paid"`).
    - Otherwise it locks after the registration deadline, or the payment
      deadline when there is no registration deadline (`reason: "deadline"`).
    - A deadline that cannot be parsed leaves the registration open.
    """
    reason = registration_lock_reason(request.to_domain(), request.reference_date)
    return LockStatusResponse(
        locked=reason is not None,
        reason=reason.value if reason is not None else None,
    )


@router.post(
    "/registrations/snapshot-status",
    response_model=SnapshotStatusResponse,
    summary="Roster Snapshot Status",
)
def snapshot_status(request: SnapshotStatusRequest):
    """A snapshot is out of date once the roster was updated after it was taken."""
    return SnapshotStatusResponse(
        out_of_date=is_snapshot_out_of_date(request.snapshot_taken_at, request.roster_updated_at)
    )


@router.post(
    "/registrations/snapshot-hash",
    response_model=SnapshotHashResponse,
    summary="Roster Snapshot Hash",
)
def snapshot_hash(request: SnapshotHashRequest):
    """Order-independent fingerprint of a roster's members (null for an empty roster)."""
    roster = request.roster.to_domain() if request.roster is not None else None
    return SnapshotHashResponse(snapshot_hash=build_snapshot_hash(roster))
