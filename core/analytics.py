"""Completed-round analytics: summaries, aggregates and sinks."""

from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Iterable


@dataclass(frozen=True)
class RoundSummary:
    """Summary of a finished round, as posted to analytics."""

    player_names: list[str]
    scores: list[int]
    winner_names: list[str]
    theme: str
    num_pairs: int
    player_count: int
    duration_seconds: int

    def to_record(self) -> dict[str, Any]:
        """Row layout used by the remote game-log table."""
        return {
            "player_names": list(self.player_names),
            "player_scores": list(self.scores),
            "winner_names": list(self.winner_names),
            "theme": self.theme,
            "num_pairs": self.num_pairs,
            "num_players": self.player_count,
            "duration_seconds": self.duration_seconds,
        }


@dataclass
class AggregateStats:
    """Community totals. Count lists are sorted by count, highest first."""

    total_rounds: int = 0
    counts_by_theme: list[tuple[str, int]] = field(default_factory=list)
    counts_by_pair_count: list[tuple[int, int]] = field(default_factory=list)

    @classmethod
    def from_rows(cls, rows: Iterable[dict[str, Any]], total: int | None = None) -> "AggregateStats":
        """Aggregate rows carrying 'theme' and 'num_pairs'."""
        rows = list(rows)
        themes = Counter(row["theme"] for row in rows)
        pairs = Counter(int(row["num_pairs"]) for row in rows)
        return cls(
            total_rounds=total if total is not None else len(rows),
            counts_by_theme=themes.most_common(),
            counts_by_pair_count=pairs.most_common(),
        )


class AnalyticsSink(ABC):
    """Where completed rounds are reported.

    Implementations must not raise out of log_completed_round in normal
    operation; the engine still guards the call.
    """

    @abstractmethod
    def log_completed_round(self, summary: RoundSummary) -> None:
        """Record a finished round (fire-and-forget)."""
        ...

    @abstractmethod
    def fetch_aggregate_stats(self) -> AggregateStats | None:
        """Return aggregate counts, or None if unavailable."""
        ...


class NullAnalytics(AnalyticsSink):
    """Discards everything."""

    def log_completed_round(self, summary: RoundSummary) -> None:
        pass

    def fetch_aggregate_stats(self) -> AggregateStats | None:
        return None


class InMemoryAnalytics(AnalyticsSink):
    """Keeps round summaries in process."""

    def __init__(self) -> None:
        self.rounds: list[RoundSummary] = []

    def log_completed_round(self, summary: RoundSummary) -> None:
        self.rounds.append(summary)

    def fetch_aggregate_stats(self) -> AggregateStats | None:
        if not self.rounds:
            return None
        return AggregateStats.from_rows(r.to_record() for r in self.rounds)
