"""Supabase-backed analytics sink for completed rounds."""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

import httpx

from config import AnalyticsConfig, config
from core.analytics import AggregateStats, AnalyticsSink, InMemoryAnalytics, RoundSummary

logger = logging.getLogger(__name__)


class SupabaseAnalytics(AnalyticsSink):
    """
    Posts round summaries to a Supabase table over its REST API.

    Logging is fire-and-forget: rows are posted from a single background
    worker so the game loop never waits on the network, and any HTTP
    failure is logged and dropped.
    """

    def __init__(
        self,
        settings: AnalyticsConfig | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._settings = settings or config.analytics
        self._client = client or httpx.Client(
            base_url=self._settings.supabase_url.rstrip("/"),
            timeout=self._settings.timeout,
        )
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="analytics")

    @property
    def _endpoint(self) -> str:
        return f"/rest/v1/{self._settings.table}"

    def _headers(self, **extra: str) -> dict[str, str]:
        headers = {
            "apikey": self._settings.supabase_key,
            "Authorization": f"Bearer {self._settings.supabase_key}",
            "Content-Type": "application/json",
        }
        headers.update(extra)
        return headers

    def log_completed_round(self, summary: RoundSummary) -> None:
        """Queue the summary for posting."""
        self.submit(summary)

    def submit(self, summary: RoundSummary) -> Future:
        """Queue the summary and return the worker future."""
        return self._executor.submit(self._post, summary.to_record())

    def _post(self, record: dict[str, Any]) -> bool:
        try:
            response = self._client.post(
                self._endpoint,
                json=record,
                headers=self._headers(Prefer="return=minimal"),
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Failed to log round to Supabase: %s", e)
            return False
        return True

    def fetch_aggregate_stats(self) -> AggregateStats | None:
        """Count rounds by theme and pair count, or None if unavailable."""
        try:
            response = self._client.get(
                self._endpoint,
                params={"select": "theme,num_pairs"},
                headers=self._headers(Prefer="count=exact"),
            )
            response.raise_for_status()
            rows = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Failed to fetch community stats: %s", e)
            return None

        if not rows:
            return None

        total = _total_from_content_range(response.headers.get("content-range"))
        return AggregateStats.from_rows(rows, total=total)

    def close(self) -> None:
        """Wait for queued posts, then release the HTTP client."""
        self._executor.shutdown(wait=True)
        self._client.close()


def _total_from_content_range(value: str | None) -> int | None:
    """Parse the exact count from a PostgREST Content-Range header ('0-24/3573')."""
    if not value or "/" not in value:
        return None
    total = value.rsplit("/", 1)[1]
    return int(total) if total.isdigit() else None


# Global analytics sink
_analytics: AnalyticsSink | None = None


def get_analytics() -> AnalyticsSink:
    """Get or create the analytics sink (Supabase when configured)."""
    global _analytics
    if _analytics is None:
        if config.analytics.enabled:
            _analytics = SupabaseAnalytics()
        else:
            _analytics = InMemoryAnalytics()
    return _analytics


def set_analytics(sink: AnalyticsSink | None) -> None:
    """Replace the analytics sink (None resets to the configured default)."""
    global _analytics
    _analytics = sink
