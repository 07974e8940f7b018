"""Unit tests for dashboard view derivation."""

import json

from epoch_monitor.charts import ChartConfig
from epoch_monitor.clock import CountdownState
from epoch_monitor.dashboard import build_view
from epoch_monitor.dashboard.view import REFRESH_AVAILABLE_LABEL
from epoch_monitor.lookup import LookupState
from epoch_monitor.snapshot import Snapshot, normalize_snapshot

ADDRESS_C = "0x" + "c" * 40


class TestBuildView:
    """Tests for build_view."""

    def test_full_view(self, raw_snapshot, now) -> None:
        """Charts, countdowns and leaderboards derive from one snapshot."""
        view = build_view(normalize_snapshot(raw_snapshot), now)

        assert view.flips_chart.latest_value == 120.0
        assert view.authors_chart.latest_value == 40.0
        assert [line.epoch for line in view.flips_chart.trailing] == [151, 150]
        assert view.next_refresh.label == "0d 00h 00m 30s"
        assert view.next_validation.label == "1d 01h 30m 00s"
        assert view.lookup.state is LookupState.NO_QUERY
        assert len(view.top_identities) == 2
        assert len(view.top_flips) == 1

    def test_lookup_uses_full_rank_list(self, raw_snapshot, now) -> None:
        """Rank 3 lives only in identityLookup and is still found."""
        view = build_view(normalize_snapshot(raw_snapshot), now, query=ADDRESS_C.upper())

        # Uppercasing also turned the prefix into "0X", which normalizes back
        assert view.lookup.state is LookupState.FOUND
        assert view.lookup.rank == 3

    def test_clock_only_changes_countdowns(self, raw_snapshot, now) -> None:
        """Re-deriving at a later instant moves countdowns, not charts."""
        from datetime import timedelta

        snapshot = normalize_snapshot(raw_snapshot)
        before = build_view(snapshot, now)
        after = build_view(snapshot, now + timedelta(seconds=31))

        assert after.flips_chart == before.flips_chart
        assert after.next_refresh.state is CountdownState.ELAPSED
        assert after.next_refresh.label == REFRESH_AVAILABLE_LABEL

    def test_empty_snapshot(self, now) -> None:
        """A snapshot without data renders empty charts and unavailable countdowns."""
        view = build_view(Snapshot(), now)

        assert view.flips_chart.current_path == ""
        assert view.flips_chart.trailing == ()
        assert view.next_validation.state is CountdownState.UNAVAILABLE
        assert view.next_refresh.state is CountdownState.UNAVAILABLE

    def test_chart_config_applied(self, raw_snapshot, now) -> None:
        view = build_view(
            normalize_snapshot(raw_snapshot), now, chart_config=ChartConfig(width=100, height=10)
        )

        assert view.flips_chart.current_path.startswith("M0.00,10.00")

    def test_to_dict_is_json_serializable(self, raw_snapshot, now) -> None:
        view = build_view(normalize_snapshot(raw_snapshot), now, query="0x123")

        output = json.loads(json.dumps(view.to_dict()))

        assert output["epoch"] == 152
        assert output["counts"]["flipsSeen"] == 120
        assert output["lookup"]["state"] == "invalid"
        assert output["charts"]["flipsSeen"]["trailing"][0]["opacity"] == 0.45
        assert output["topIdentities"][0]["rank"] == 1
