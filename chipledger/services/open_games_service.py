"""Open games: compensating games that bring the ledger back to zero-sum."""

from collections import Counter

from loguru import logger

from chipledger.core.exceptions import ValidationError
from chipledger.models import OpenGame, OpenGamesBonus, PlayerCalculationResult


def create_open_games(count: int) -> list[OpenGame]:
    """Create ``count`` open games numbered from 1, none of them won yet."""
    return [OpenGame(id=game_id) for game_id in range(1, count + 1)]


def count_open_game_wins(open_games: list[OpenGame]) -> dict[str, int]:
    """Count open games won per player. Games without a winner are skipped."""
    return dict(Counter(game.winner for game in open_games if game.winner is not None))


def ensure_open_games_complete(open_games: list[OpenGame], player_ids: list[str]) -> None:
    """Check that every open game has a winner from the game's roster.

    Raises:
        ValidationError: If a game has no winner, or its winner is not in the game
    """
    unresolved = [game.id for game in open_games if game.winner is None]
    if unresolved:
        raise ValidationError(
            code="open_games_incomplete",
            message=f"{len(unresolved)} open game(s) have no winner yet",
            details={"open_game_ids": unresolved},
        )

    roster = set(player_ids)
    unknown = sorted({game.winner for game in open_games if game.winner not in roster})
    if unknown:
        raise ValidationError(
            code="unknown_open_game_winner",
            message=f"Open game winners not in this game: {', '.join(unknown)}",
            details={"winners": unknown},
        )


def calculate_final_player_result(
    player_result: PlayerCalculationResult, wins_count: int, rebuy_amount: float
) -> PlayerCalculationResult:
    """Add a player's open-game winnings to their result."""
    bonus = OpenGamesBonus(wins_count=wins_count, bonus_amount=wins_count * rebuy_amount)
    return player_result.model_copy(
        update={
            "open_games_bonus": bonus,
            "final_result_money": player_result.result_before_open_games
            + bonus.bonus_amount,
        }
    )


def resolve_open_games(
    players_results: list[PlayerCalculationResult],
    open_games: list[OpenGame],
    rebuy_amount: float,
) -> list[PlayerCalculationResult]:
    """Apply open-game bonuses to every player.

    A game without a recorded winner awards nothing to anyone. Callers that
    need every game resolved first should gate with
    :func:`ensure_open_games_complete`.
    """
    unresolved = sum(1 for game in open_games if game.winner is None)
    if unresolved:
        logger.warning(f"Resolving open games with {unresolved} game(s) missing a winner")

    wins = count_open_game_wins(open_games)
    results = [
        calculate_final_player_result(player, wins.get(player.id, 0), rebuy_amount)
        for player in players_results
    ]
    logger.info(
        f"Resolved {len(open_games) - unresolved} open game(s) "
        + f"across {len(results)} players"
    )
    return results
