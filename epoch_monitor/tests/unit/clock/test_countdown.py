"""Unit tests for countdown formatting."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from epoch_monitor.clock import (
    ELAPSED_LABEL,
    UNAVAILABLE_LABEL,
    CountdownState,
    countdown,
    format_duration,
    parse_instant,
)

NOW = datetime(2025, 3, 1, 12, 0, 0, tzinfo=UTC)


class TestParseInstant:
    """Tests for parse_instant."""

    def test_zulu_suffix(self) -> None:
        assert parse_instant("2025-03-01T12:00:00Z") == NOW

    def test_offset(self) -> None:
        assert parse_instant("2025-03-01T14:00:00+02:00") == NOW

    def test_naive_is_utc(self) -> None:
        assert parse_instant("2025-03-01T12:00:00") == NOW

    def test_datetime_passthrough(self) -> None:
        assert parse_instant(NOW) is NOW

    @pytest.mark.parametrize("value", [None, "", "   ", "tomorrow", "2025-13-45", 12])
    def test_unparsable(self, value) -> None:
        assert parse_instant(value) is None


class TestFormatDuration:
    """Tests for format_duration."""

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [
            (0, "0d 00h 00m 00s"),
            (90, "0d 00h 01m 30s"),
            (90.99, "0d 00h 01m 30s"),
            (3_661, "0d 01h 01m 01s"),
            (86_400 * 12 + 5, "12d 00h 00m 05s"),
        ],
    )
    def test_format(self, seconds, expected) -> None:
        assert format_duration(seconds) == expected


class TestCountdown:
    """Tests for countdown."""

    def test_future_instant(self) -> None:
        """90 seconds ahead reads 0d 00h 01m 30s."""
        result = countdown("2025-03-01T12:01:30Z", NOW)

        assert result.state is CountdownState.PENDING
        assert result.remaining_seconds == 90
        assert result.label == "0d 00h 01m 30s"
        assert result.is_pending

    def test_past_instant_is_elapsed(self) -> None:
        result = countdown("2025-03-01T11:00:00Z", NOW)

        assert result.state is CountdownState.ELAPSED
        assert result.label == ELAPSED_LABEL
        assert not result.is_pending

    def test_exact_instant_is_elapsed(self) -> None:
        assert countdown(NOW, NOW).state is CountdownState.ELAPSED

    def test_sub_second_remaining_is_pending(self) -> None:
        """Half a second ahead is not yet started; only the label is floored."""
        result = countdown(NOW + timedelta(milliseconds=500), NOW)

        assert result.state is CountdownState.PENDING
        assert result.remaining_seconds == 0
        assert result.label == "0d 00h 00m 00s"

    def test_fraction_floored_in_label(self) -> None:
        result = countdown(NOW + timedelta(seconds=90, milliseconds=900), NOW)

        assert result.label == "0d 00h 01m 30s"

    def test_custom_elapsed_label(self) -> None:
        result = countdown("2025-03-01T11:00:00Z", NOW, elapsed_label="refresh available")

        assert result.label == "refresh available"

    @pytest.mark.parametrize("target", [None, "", "not a date"])
    def test_unavailable_is_distinct_from_zero(self, target) -> None:
        """Missing or unparsable targets are UNAVAILABLE, not a zero duration."""
        result = countdown(target, NOW)

        assert result.state is CountdownState.UNAVAILABLE
        assert result.remaining_seconds is None
        assert result.label == UNAVAILABLE_LABEL

    def test_naive_now_treated_as_utc(self) -> None:
        result = countdown("2025-03-01T12:00:10Z", datetime(2025, 3, 1, 12, 0, 0))

        assert result.remaining_seconds == 10

    def test_other_timezone_now(self) -> None:
        now = NOW.astimezone(timezone(timedelta(hours=-5)))

        assert countdown("2025-03-01T12:00:45Z", now).remaining_seconds == 45
