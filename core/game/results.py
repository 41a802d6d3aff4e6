"""End-of-round results: rankings, winners and medals."""

from core.player import Player

MEDALS = ("🥇", "🥈", "🥉")

BRONZE = 2


def rank_players(players: list[Player]) -> list[Player]:
    """Sort players by score, highest first. Ties keep seat order."""
    return sorted(players, key=lambda p: p.score, reverse=True)


def winners(players: list[Player]) -> list[Player]:
    """Return every player sharing the top score, in seat order."""
    if not players:
        return []
    high_score = max(p.score for p in players)
    return [p for p in players if p.score == high_score]


def medal_index(sorted_players: list[Player], position: int) -> int | None:
    """
    Medal for a position in an already-ranked list.

    A tied score inherits the medal of the position above it, looked up
    recursively so a run of ties all share one medal. Otherwise the medal
    is the position itself, saturating at bronze.

    Args:
        sorted_players: Players ranked by rank_players
        position: Index into the ranked list

    Returns:
        0 (gold), 1 (silver), 2 (bronze), or None for an out-of-range position
    """
    if position < 0 or position >= len(sorted_players):
        return None
    if position == 0:
        return 0

    if sorted_players[position].score == sorted_players[position - 1].score:
        return medal_index(sorted_players, position - 1)
    return min(position, BRONZE)


def medal_indices(players: list[Player]) -> list[int]:
    """Medals for the ranked order of players."""
    ranked = rank_players(players)
    return [medal_index(ranked, i) for i in range(len(ranked))]  # type: ignore[misc]


def solo_commentary(attempts: int, num_pairs: int) -> str:
    """Remark on a finished solo round, based on pair attempts used."""
    if attempts <= num_pairs:
        return "Perfect memory! Every attempt was a match."
    if attempts <= num_pairs * 1.5:
        return f"Great job! Cleared {num_pairs} pairs in {attempts} turns."
    if attempts <= num_pairs * 2:
        return f"Nice work! {attempts} turns for {num_pairs} pairs."
    return f"Finished in {attempts} turns. Keep practising!"
