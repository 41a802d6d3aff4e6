"""Tests for round summaries and analytics sinks."""

from core.analytics import AggregateStats, InMemoryAnalytics, NullAnalytics, RoundSummary


def make_summary(theme="olympics", num_pairs=5, **overrides):
    fields = dict(
        player_names=["Ann", "Bob"],
        scores=[3, 2],
        winner_names=["Ann"],
        theme=theme,
        num_pairs=num_pairs,
        player_count=2,
        duration_seconds=61,
    )
    fields.update(overrides)
    return RoundSummary(**fields)


class TestRoundSummary:
    """Tests for the round summary record."""

    def test_to_record(self):
        """Test the row layout of the game-log table."""
        assert make_summary().to_record() == {
            "player_names": ["Ann", "Bob"],
            "player_scores": [3, 2],
            "winner_names": ["Ann"],
            "theme": "olympics",
            "num_pairs": 5,
            "num_players": 2,
            "duration_seconds": 61,
        }

    def test_record_lists_are_copies(self):
        """Test the record does not share lists with the summary."""
        summary = make_summary()
        record = summary.to_record()
        record["player_names"].append("Mallory")
        assert summary.player_names == ["Ann", "Bob"]


class TestAggregateStats:
    """Tests for community aggregates."""

    def test_from_rows_counts_descending(self):
        """Test counts are grouped and sorted by frequency."""
        rows = [
            {"theme": "fantasy", "num_pairs": 5},
            {"theme": "easter", "num_pairs": 8},
            {"theme": "fantasy", "num_pairs": 5},
            {"theme": "fantasy", "num_pairs": 10},
        ]
        stats = AggregateStats.from_rows(rows)

        assert stats.total_rounds == 4
        assert stats.counts_by_theme == [("fantasy", 3), ("easter", 1)]
        assert stats.counts_by_pair_count[0] == (5, 2)
        assert sorted(stats.counts_by_pair_count) == [(5, 2), (8, 1), (10, 1)]

    def test_from_rows_explicit_total(self):
        """Test a server-side total overrides the row count."""
        stats = AggregateStats.from_rows([{"theme": "sports", "num_pairs": "6"}], total=120)
        assert stats.total_rounds == 120
        assert stats.counts_by_pair_count == [(6, 1)]


class TestSinks:
    """Tests for the local sinks."""

    def test_null_sink(self):
        """Test the null sink discards everything."""
        sink = NullAnalytics()
        sink.log_completed_round(make_summary())
        assert sink.fetch_aggregate_stats() is None

    def test_in_memory_empty(self):
        """Test an empty log has no stats."""
        assert InMemoryAnalytics().fetch_aggregate_stats() is None

    def test_in_memory_aggregates(self):
        """Test logged rounds are aggregated."""
        sink = InMemoryAnalytics()
        sink.log_completed_round(make_summary("fantasy", 4))
        sink.log_completed_round(make_summary("fantasy", 6))
        sink.log_completed_round(make_summary("vehicles", 4))

        stats = sink.fetch_aggregate_stats()

        assert stats.total_rounds == 3
        assert stats.counts_by_theme == [("fantasy", 2), ("vehicles", 1)]
        assert stats.counts_by_pair_count == [(4, 2), (6, 1)]
