"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import pytest

from epoch_monitor.clock import reset_clock

ADDRESS_A = "0x" + "a" * 40
ADDRESS_B = "0x" + "b" * 40
ADDRESS_C = "0x" + "c" * 40

NOW = datetime(2025, 3, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def reset_clock_after_test():
    """
    Reset wall clock source after each test.

    Usage in tests:
        from epoch_monitor.clock import set_clock

        def test_countdown():
            set_clock(lambda: NOW)
            ...
    """
    yield
    reset_clock()


@pytest.fixture
def now() -> datetime:
    return NOW


def make_identity(rank: int, address: str, **overrides: Any) -> dict[str, Any]:
    """Raw identity row as sent by the scan."""
    row = {
        "rank": rank,
        "address": address,
        "totalGradeScore": 30.0 - rank,
        "flipCount": 6,
        "avgGradeScore": 5.0 - rank / 10,
        "maxFlipGradeScore": 7.5,
        "scanUrl": f"https://scan.example.com/identity/{address}",
    }
    row.update(overrides)
    return row


@pytest.fixture
def raw_snapshot() -> dict[str, Any]:
    """A complete, well-formed raw snapshot."""
    return {
        "epoch": 152,
        "threshold": 3,
        "counts": {
            "authorsOverThreshold": 2,
            "totalExtraFlips": 5,
            "flipsSeen": 120,
            "uniqueAuthors": 40,
        },
        "note": "live scan",
        "timestamp": "2025-03-01T11:59:00Z",
        "session": {"nextValidationTime": "2025-03-02T13:30:00Z"},
        "gradeLeaderboard": {
            "epoch": 152,
            "topLimit": 2,
            "topFlipsLimit": 5,
            "excludedWrongWordsAuthorsCount": 1,
            "filters": {"status": ["Qualified", "WeaklyQualified"]},
            "topIdentities": [
                make_identity(1, ADDRESS_A),
                make_identity(2, ADDRESS_B),
            ],
            "identityLookup": [
                make_identity(1, ADDRESS_A),
                make_identity(2, ADDRESS_B),
                make_identity(3, ADDRESS_C),
            ],
            "topFlips": [
                {
                    "rank": 1,
                    "cid": "bafkflip1",
                    "author": ADDRESS_A,
                    "authorRank": 1,
                    "gradeScore": 7.5,
                    "status": "Qualified",
                    "word1": "apple",
                    "word2": "river",
                    "scanUrl": "https://scan.example.com/flip/bafkflip1",
                    "authorScanUrl": f"https://scan.example.com/identity/{ADDRESS_A}",
                }
            ],
        },
        "progress": {
            "cacheUsed": True,
            "minRefreshSeconds": 45,
            "secondsUntilNextRefresh": 30,
            "nextRefreshAt": "2025-03-01T12:00:30Z",
            "series": {
                "currentEpoch": {
                    "epoch": 152,
                    "points": [
                        {"timestamp": "2025-03-01T10:00:00Z", "flipsSeen": 0, "uniqueAuthors": 0},
                        {"timestamp": "2025-03-01T11:00:00Z", "flipsSeen": 60, "uniqueAuthors": 20},
                        {"timestamp": "2025-03-01T12:00:00Z", "flipsSeen": 120, "uniqueAuthors": 40},
                    ],
                },
                "previousEpochs": [
                    {
                        "epoch": 151,
                        "points": [
                            {"timestamp": "2025-02-28T10:00:00Z", "flipsSeen": 0, "uniqueAuthors": 0},
                            {"timestamp": "2025-02-28T14:00:00Z", "flipsSeen": 200, "uniqueAuthors": 50},
                        ],
                    },
                    {
                        "epoch": 150,
                        "points": [
                            {"timestamp": "2025-02-27T10:00:00Z", "flipsSeen": 10, "uniqueAuthors": 5},
                        ],
                    },
                ],
            },
        },
    }
