"""Service for calculating player aggregate statistics across completed games."""

from loguru import logger

from chipledger.models import Game, GameStatus, PlayerCalculationResult, PlayerStats

# Percentages are reported on a 0-100 scale
PERCENT = 100


def _completed_games(games: list[Game]) -> list[Game]:
    """Completed games in chronological order. Deleted and unfinished games are skipped."""
    return sorted(
        (game for game in games if game.status == GameStatus.COMPLETED),
        key=lambda game: game.date.to_datetime(),
    )


def _find_result(game: Game, player_id: str) -> PlayerCalculationResult | None:
    for result in game.players_results:
        if result.id == player_id:
            return result
    return None


def calculate_player_stats(player_id: str, games: list[Game]) -> PlayerStats | None:
    """Calculate aggregate stats for a player from their completed games.

    This calculates:
    - net: Total cumulative final result
    - games_up / games_down: Games with positive / negative final result
    - average_net: Average final result per game
    - biggest_win: Largest single-game positive result
    - biggest_loss: Largest single-game negative result (stored as negative)
    - highest_net / lowest_net: Rolling max / min of the cumulative net
    - total_buy_ins, total_rebuys, total_investment: Money put in
    - win_rate: Share of games finished up, in percent
    - roi: Net as a percentage of total investment

    Args:
        player_id: ID of the player to calculate stats for
        games: Games to consider; only completed ones count

    Returns:
        PlayerStats, or None if the player has no completed games
    """
    stats = PlayerStats(player_id=player_id)
    cumulative_net = 0.0

    for game in _completed_games(games):
        result = _find_result(game, player_id)
        if result is None:
            continue

        game_net = result.final_result_money
        stats.player_name = result.name or stats.player_name
        stats.games_played += 1

        # Update cumulative for rolling high/low
        cumulative_net += game_net
        stats.highest_net = max(stats.highest_net, cumulative_net)
        stats.lowest_net = min(stats.lowest_net, cumulative_net)

        if game_net > 0:
            stats.games_up += 1
            stats.biggest_win = max(stats.biggest_win, game_net)
        elif game_net < 0:
            stats.games_down += 1
            stats.biggest_loss = min(stats.biggest_loss, game_net)

        stats.total_buy_ins += result.total_investment.buy_in_count
        stats.total_rebuys += result.total_investment.rebuy_count
        stats.total_investment += result.total_investment.overall

    if stats.games_played == 0:
        logger.debug(f"Player {player_id} has no completed games")
        return None

    stats.net = cumulative_net
    stats.average_net = cumulative_net / stats.games_played
    stats.win_rate = stats.games_up / stats.games_played * PERCENT
    stats.roi = (
        stats.net / stats.total_investment * PERCENT if stats.total_investment > 0 else 0.0
    )

    logger.debug(
        f"Stats for {player_id}: "
        + f"net={stats.net:.2f}, games={stats.games_played}, avg={stats.average_net:.2f}"
    )
    return stats


def calculate_all_player_stats(games: list[Game]) -> dict[str, PlayerStats]:
    """Calculate stats for every player who appears in a completed game."""
    player_ids: list[str] = []
    for game in _completed_games(games):
        for result in game.players_results:
            if result.id not in player_ids:
                player_ids.append(result.id)

    all_stats: dict[str, PlayerStats] = {}
    for player_id in player_ids:
        stats = calculate_player_stats(player_id, games)
        if stats is not None:
            all_stats[player_id] = stats

    logger.success(f"Calculated stats for {len(all_stats)} players")
    return all_stats
