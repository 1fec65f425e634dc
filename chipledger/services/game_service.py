"""Game-level flow: snapshotting, ending, open games and final settlement."""

from loguru import logger

from chipledger.core.exceptions import ConflictError, NotFoundError, ValidationError
from chipledger.models import (
    Game,
    GameDate,
    GameStatus,
    GameSummary,
    Group,
    OpenGame,
    PaymentUnit,
    Player,
)
from chipledger.services.open_games_service import create_open_games
from chipledger.services.summary_service import (
    calculate_final_game_summary,
    calculate_initial_game_summary,
    requires_open_games,
)
from chipledger.services.validation_service import validate_group_config


def create_game_snapshot(
    group: Group, game_id: str, date: GameDate, players: list[Player]
) -> Game:
    """Start a game, freezing the group's current buy-in/rebuy configuration.

    Later edits to the group never change a game that already started.
    """
    validate_group_config(group)
    game = Game(
        id=game_id,
        group_id=group.id,
        group_name_snapshot=group.name,
        date=date,
        status=GameStatus.ACTIVE,
        buy_in_snapshot=group.buy_in.model_copy(),
        rebuy_snapshot=group.rebuy.model_copy(),
        use_rounding_rule=group.use_rounding_rule,
        rounding_rule_percentage=group.rounding_rule_percentage,
        players=[player.model_copy() for player in players],
    )
    logger.info(f"Created game {game.id} for group {group.id} with {len(players)} players")
    return game


def _find_player(game: Game, player_id: str) -> Player:
    for player in game.players:
        if player.id == player_id:
            return player
    raise NotFoundError(
        code="player_not_found",
        message=f"Player {player_id} is not in game {game.id}",
        details={"game_id": game.id, "player_id": player_id},
    )


def record_final_chips(game: Game, player_id: str, final_chips: float) -> Game:
    """Record a player's final chip count while the game is still being played.

    Raises:
        NotFoundError: If the player is not in the game
        ConflictError: If the game has already moved past the active phase
    """
    if game.status != GameStatus.ACTIVE:
        raise ConflictError(
            code="game_not_active",
            message=f"Game {game.id} is {game.status.value}; chip counts are locked",
            details={"game_id": game.id, "status": game.status.value},
        )
    _find_player(game, player_id)
    players = [
        player.model_copy(update={"final_chips": final_chips})
        if player.id == player_id
        else player
        for player in game.players
    ]
    return game.model_copy(update={"players": players})


def summarize_game(game: Game) -> GameSummary:
    """Initial summary for a game using its frozen configuration."""
    return calculate_initial_game_summary(
        game.players,
        game.buy_in_snapshot,
        game.rebuy_snapshot,
        game.use_rounding_rule,
        game.rounding_rule_percentage,
    )


def next_status_after_end(summary: GameSummary, use_rounding_rule: bool) -> GameStatus:
    """Phase a game moves to once play has ended."""
    if requires_open_games(summary, use_rounding_rule):
        return GameStatus.OPEN_GAMES
    return GameStatus.FINAL_RESULTS


def end_game(game: Game) -> tuple[Game, GameSummary]:
    """Close play and create the open games the ledger needs, if any.

    Raises:
        ConflictError: If the game is not active
    """
    if game.status != GameStatus.ACTIVE:
        raise ConflictError(
            code="game_not_active",
            message=f"Game {game.id} cannot be ended from status {game.status.value}",
            details={"game_id": game.id, "status": game.status.value},
        )

    summary = summarize_game(game)
    status = next_status_after_end(summary, game.use_rounding_rule)
    open_games = (
        create_open_games(summary.open_games_count)
        if status == GameStatus.OPEN_GAMES
        else []
    )
    logger.info(f"Game {game.id} ended, moving to {status.value}")
    return game.model_copy(update={"status": status, "open_games": open_games}), summary


def record_open_game_winner(game: Game, open_game_id: int, player_id: str) -> Game:
    """Record who won one of the game's open games.

    Raises:
        ConflictError: If the game is not in the open-games phase
        NotFoundError: If the open game or the player does not exist
    """
    if game.status != GameStatus.OPEN_GAMES:
        raise ConflictError(
            code="not_in_open_games",
            message=f"Game {game.id} is {game.status.value}, not playing open games",
            details={"game_id": game.id, "status": game.status.value},
        )
    _find_player(game, player_id)
    if all(open_game.id != open_game_id for open_game in game.open_games):
        raise NotFoundError(
            code="open_game_not_found",
            message=f"Open game {open_game_id} does not exist in game {game.id}",
            details={"game_id": game.id, "open_game_id": open_game_id},
        )

    open_games = [
        open_game.model_copy(update={"winner": player_id})
        if open_game.id == open_game_id
        else open_game
        for open_game in game.open_games
    ]
    return game.model_copy(update={"open_games": open_games})


def settle_game(game: Game, payment_units: list[PaymentUnit]) -> GameSummary:
    """Run the whole calculation for a game whose open games are recorded.

    Raises:
        ValidationError: If the game has fewer open games than the ledger needs,
            or any of them is missing a winner
    """
    initial_summary = summarize_game(game)
    open_games: list[OpenGame] = []
    if requires_open_games(initial_summary, game.use_rounding_rule):
        open_games = game.open_games
        if len(open_games) != initial_summary.open_games_count:
            raise ValidationError(
                code="open_games_mismatch",
                message=(
                    f"Game {game.id} needs {initial_summary.open_games_count} "
                    + f"open game(s), {len(open_games)} recorded"
                ),
                details={
                    "required": initial_summary.open_games_count,
                    "recorded": len(open_games),
                },
            )
    return calculate_final_game_summary(
        initial_summary, open_games, game.rebuy_snapshot.amount, payment_units
    )


def complete_game(game: Game, summary: GameSummary) -> Game:
    """Store the final breakdown and payments on the game and archive it."""
    logger.success(f"Game {game.id} completed with {len(summary.payments or [])} payment(s)")
    return game.model_copy(
        update={
            "status": GameStatus.COMPLETED,
            "players_results": summary.players_results,
            "payments": summary.payments or [],
        }
    )
