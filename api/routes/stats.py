"""Statistics API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from api.schemas import PlayerStatsResponse
from api.stats_store import StatsStore, get_stats_store

router = APIRouter()


@router.get("/{player_id}")
async def get_player_stats(
    player_id: str,
    store: Annotated[StatsStore, Depends(get_stats_store)],
) -> PlayerStatsResponse:
    """Get finished-game totals for a player."""
    stats = await store.get(player_id)
    played = stats["games_played"]
    win_rate = stats["wins"] / played if played > 0 else 0.0

    return PlayerStatsResponse(player_id=player_id, win_rate=win_rate, **stats)
