"""Address validation and identity lookup."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from epoch_monitor.snapshot.models import ADDRESS_PATTERN, GradeLeaderboard, IdentityRow


class LookupState(Enum):
    """
    Mutually exclusive lookup outcomes.

    NOT_FOUND is only reachable for a well-formed address; empty input is
    NO_QUERY and malformed input is INVALID.
    """

    NO_QUERY = "no_query"
    INVALID = "invalid"
    FOUND = "found"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class LookupResult:
    state: LookupState
    query: str = ""
    """Normalized query (trimmed, lowercased)."""

    identity: IdentityRow | None = None

    @property
    def is_valid(self) -> bool:
        """True when the query was a well-formed address."""
        return self.state in (LookupState.FOUND, LookupState.NOT_FOUND)

    @property
    def rank(self) -> int | None:
        return self.identity.rank if self.identity is not None else None


def normalize_address(text: str | None) -> str:
    """Trim surrounding whitespace and lowercase."""
    return (text or "").strip().lower()


def is_valid_address(text: str | None) -> bool:
    """True iff text normalizes to "0x" followed by 40 hex characters."""
    return ADDRESS_PATTERN.match(normalize_address(text)) is not None


def lookup_source(leaderboard: GradeLeaderboard) -> tuple[IdentityRow, ...]:
    """Identity list used for full-rank search (top list when no override was sent)."""
    return leaderboard.identity_lookup or leaderboard.top_identities


def lookup_identity(
    query: str | None, identities: Sequence[IdentityRow]
) -> LookupResult:
    """
    Resolve free-text input against a ranked identity list.

    Args:
        query: Raw user input
        identities: Lookup list, e.g. lookup_source(leaderboard)

    Returns:
        LookupResult in exactly one of the LookupState states
    """
    normalized = normalize_address(query)

    if not normalized:
        return LookupResult(LookupState.NO_QUERY)

    if ADDRESS_PATTERN.match(normalized) is None:
        return LookupResult(LookupState.INVALID, query=normalized)

    # Addresses are unique within a snapshot; first match wins
    for identity in identities:
        if identity.address == normalized:
            return LookupResult(LookupState.FOUND, query=normalized, identity=identity)

    return LookupResult(LookupState.NOT_FOUND, query=normalized)
