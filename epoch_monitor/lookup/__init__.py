"""
Lookup module: resolve a user-supplied address to its leaderboard rank.

Usage:
    from epoch_monitor.lookup import lookup_identity, lookup_source

    result = lookup_identity(user_input, lookup_source(snapshot.grade_leaderboard))
    if result.state is LookupState.FOUND:
        print(f"Rank #{result.rank}")
"""

from .address import (
    ADDRESS_PATTERN,
    LookupResult,
    LookupState,
    is_valid_address,
    lookup_identity,
    lookup_source,
    normalize_address,
)

__all__ = [
    "ADDRESS_PATTERN",
    "LookupResult",
    "LookupState",
    "is_valid_address",
    "lookup_identity",
    "lookup_source",
    "normalize_address",
]
