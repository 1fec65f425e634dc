"""Game summaries: win/loss totals before and after open games."""

import math

from loguru import logger

from chipledger.core.exceptions import ValidationError
from chipledger.models import (
    ChipsConfig,
    GameSummary,
    OpenGame,
    PaymentUnit,
    Player,
    PlayerCalculationResult,
)
from chipledger.services.open_games_service import ensure_open_games_complete, resolve_open_games
from chipledger.services.payment_service import settle_balances
from chipledger.services.valuation_service import calculate_initial_player_result


def _wins_and_losses(amounts: list[float]) -> tuple[float, float]:
    total_wins = sum(amount for amount in amounts if amount > 0)
    total_losses = sum(abs(amount) for amount in amounts if amount < 0)
    return total_wins, total_losses


def reconcile_results(
    players_results: list[PlayerCalculationResult], rebuy_amount: float
) -> GameSummary:
    """Total the pre-bonus results and work out how many open games are needed.

    Rounding chips to whole rebuys creates or destroys money, so wins and losses
    rarely balance. Each open game moves one rebuy's worth of money, and enough
    of them are required to cover the difference.
    """
    if rebuy_amount <= 0:
        raise ValidationError(
            code="invalid_chips_config",
            message=f"rebuy.amount must be greater than 0, got {rebuy_amount}",
            details={"field": "rebuy.amount", "value": rebuy_amount},
        )

    total_wins, total_losses = _wins_and_losses(
        [p.result_before_open_games for p in players_results]
    )
    difference = abs(total_wins - total_losses)
    open_games_count = math.ceil(difference / rebuy_amount) if difference > 0 else 0

    logger.info(
        f"Initial summary: wins={total_wins:.2f}, losses={total_losses:.2f}, "
        + f"difference={difference:.2f}, open_games={open_games_count}"
    )

    return GameSummary(
        players_results=players_results,
        total_wins=total_wins,
        total_losses=total_losses,
        difference=difference,
        open_games_count=open_games_count,
    )


def calculate_initial_game_summary(
    players: list[Player],
    buy_in_snapshot: ChipsConfig,
    rebuy_snapshot: ChipsConfig,
    use_rounding_rule: bool,
    rounding_rule_percentage: int,
) -> GameSummary:
    """Compute every player's pre-bonus result and the open-games requirement."""
    players_results = [
        calculate_initial_player_result(
            player,
            buy_in_snapshot,
            rebuy_snapshot,
            use_rounding_rule,
            rounding_rule_percentage,
        )
        for player in players
    ]
    return reconcile_results(players_results, rebuy_snapshot.amount)


def requires_open_games(summary: GameSummary, use_rounding_rule: bool) -> bool:
    """Whether the open-games phase must run before final settlement."""
    return use_rounding_rule and summary.open_games_count > 0


def calculate_final_game_summary(
    initial_summary: GameSummary,
    open_games: list[OpenGame],
    rebuy_amount: float,
    payment_units: list[PaymentUnit],
) -> GameSummary:
    """Apply open-game winnings, then compute the payments that settle the game.

    Every open game must have a winner from the roster. Pass an empty
    ``open_games`` list when the open-games phase was skipped.

    Raises:
        ValidationError: If an open game is unresolved or won by an outsider
    """
    ensure_open_games_complete(
        open_games, [player.id for player in initial_summary.players_results]
    )
    final_results = resolve_open_games(
        initial_summary.players_results, open_games, rebuy_amount
    )

    total_wins, total_losses = _wins_and_losses([p.final_result_money for p in final_results])
    settlement = settle_balances(final_results, payment_units)

    logger.info(
        f"Final summary: wins={total_wins:.2f}, losses={total_losses:.2f}, "
        + f"payments={len(settlement.payments)}"
    )

    return GameSummary(
        players_results=final_results,
        total_wins=total_wins,
        total_losses=total_losses,
        difference=0.0,
        open_games_count=initial_summary.open_games_count,
        payments=settlement.payments,
        unsettled_amount=settlement.unsettled_amount,
    )
