"""Statistics API endpoints."""

from fastapi import APIRouter

from api.analytics import get_analytics
from api.schemas import CommunityStatsResponse, CountEntry, ThemeResponse
from core.game.rules import MAX_PAIRS
from core.themes import CardTheme

router = APIRouter()

themes_router = APIRouter()


@router.get("/community")
def get_community_stats() -> CommunityStatsResponse:
    """
    Aggregate counts from the shared game log.

    Runs in the threadpool since the remote sink does blocking HTTP.
    """
    stats = get_analytics().fetch_aggregate_stats()
    if stats is None:
        return CommunityStatsResponse(available=False)

    return CommunityStatsResponse(
        available=True,
        total_rounds=stats.total_rounds,
        by_theme=[
            CountEntry(value=theme, count=count) for theme, count in stats.counts_by_theme
        ],
        by_pair_count=[
            CountEntry(value=str(pairs), count=count)
            for pairs, count in stats.counts_by_pair_count
        ],
    )


@themes_router.get("")
async def list_themes() -> list[ThemeResponse]:
    """List selectable card themes."""
    return [
        ThemeResponse(
            key=theme.value,
            name=theme.display_name,
            icon=theme.icon,
            max_pairs=min(MAX_PAIRS, len(theme.glyphs)),
        )
        for theme in CardTheme
    ]
