"""
Domain: Team rosters.

A roster groups the people attached to a club team by role. Registrations
take a snapshot of the roster; see `domain.registration` for staleness checks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple


@dataclass(frozen=True, slots=True)
class RosterMember:
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    dob: Optional[str] = None  # YYYY-MM-DD
    email: Optional[str] = None
    phone: Optional[str] = None


@dataclass(frozen=True, slots=True)
class TeamRoster:
    """
    People on a team, by role.

    `updated_at` is the ISO timestamp of the last roster change, compared
    against registration snapshots.
    """

    team_id: Optional[str] = None
    coaches: Tuple[RosterMember, ...] = ()
    athletes: Tuple[RosterMember, ...] = ()
    reservists: Tuple[RosterMember, ...] = ()
    chaperones: Tuple[RosterMember, ...] = ()
    updated_at: Optional[str] = None

    def members(self) -> Iterator[RosterMember]:
        """All members: coaches, athletes, reservists, then chaperones."""

        yield from self.coaches
        yield from self.athletes
        yield from self.reservists
        yield from self.chaperones

    def member_count(self) -> int:
        return len(self.coaches) + len(self.athletes) + len(self.reservists) + len(self.chaperones)


__all__ = ["RosterMember", "TeamRoster"]
