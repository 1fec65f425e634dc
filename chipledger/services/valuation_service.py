"""Chip valuation and the rebuy rounding rule.

A final chip count is worth money in one of two ways:

- Exact mode converts chips proportionally to the rebuy price and rounds the
  money to cents.
- Rounding mode pays out whole rebuys only. A partial rebuy counts as a full one
  when its leftover chips reach the group's rounding percentage of a rebuy
  (e.g. 80 of 100 chips), and is dropped otherwise.
"""

import math

from loguru import logger

from chipledger.core.config import MONEY_DECIMALS
from chipledger.core.exceptions import ValidationError
from chipledger.models import ChipsConfig, ChipsValuation, Player, PlayerCalculationResult
from chipledger.services.investment_service import calculate_player_investment


def normalize_final_chips(final_chips: float | None) -> float:
    """Return a usable chip count, scoring missing or invalid counts as zero.

    A player with no recorded chips loses their whole investment; they are never
    dropped from the totals.
    """
    if final_chips is None:
        return 0.0
    if not math.isfinite(final_chips) or final_chips < 0:
        logger.warning(f"Invalid final chip count {final_chips!r}, scoring as 0")
        return 0.0
    return float(final_chips)


def _require_positive_chips(rebuy_snapshot: ChipsConfig) -> None:
    if rebuy_snapshot.chips <= 0:
        raise ValidationError(
            code="invalid_chips_config",
            message=f"rebuy.chips must be greater than 0, got {rebuy_snapshot.chips}",
            details={"field": "rebuy.chips", "value": rebuy_snapshot.chips},
        )


def calculate_chips_value(
    final_chips: float | None,
    rebuy_snapshot: ChipsConfig,
    use_rounding_rule: bool,
    rounding_rule_percentage: int,
) -> ChipsValuation:
    """Convert a final chip count into money under the game's rounding policy.

    Args:
        final_chips: Chips the player ended with; None or invalid counts as 0
        rebuy_snapshot: Rebuy configuration frozen on the game
        use_rounding_rule: Whether to pay out whole rebuys only
        rounding_rule_percentage: Share of a rebuy (1-100) that rounds up

    Returns:
        ChipsValuation with the exact value, rebuys paid out and final money value

    Raises:
        ValidationError: If the rebuy configuration has no chips
    """
    _require_positive_chips(rebuy_snapshot)
    chips = normalize_final_chips(final_chips)

    exact_rebuys = chips / rebuy_snapshot.chips
    exact_chips_value = exact_rebuys * rebuy_snapshot.amount

    if use_rounding_rule:
        complete_rebuys = math.floor(exact_rebuys)
        remainder_chips = chips % rebuy_snapshot.chips
        threshold = rebuy_snapshot.chips * rounding_rule_percentage / 100
        entitled_rebuys = (
            complete_rebuys + 1 if remainder_chips >= threshold else complete_rebuys
        )
        return ChipsValuation(
            exact_chips_value=exact_chips_value,
            rounded_rebuys_count=entitled_rebuys,
            final_chips_value=entitled_rebuys * rebuy_snapshot.amount,
        )

    return ChipsValuation(
        exact_chips_value=exact_chips_value,
        rounded_rebuys_count=math.floor(exact_rebuys),
        final_chips_value=round(exact_chips_value, MONEY_DECIMALS),
    )


def calculate_initial_player_result(
    player: Player,
    buy_in_snapshot: ChipsConfig,
    rebuy_snapshot: ChipsConfig,
    use_rounding_rule: bool,
    rounding_rule_percentage: int,
) -> PlayerCalculationResult:
    """Compute a player's result before any open games are played."""
    total_investment = calculate_player_investment(player, buy_in_snapshot, rebuy_snapshot)
    valuation = calculate_chips_value(
        player.final_chips, rebuy_snapshot, use_rounding_rule, rounding_rule_percentage
    )
    result_before_open_games = valuation.final_chips_value - total_investment.overall

    logger.debug(
        f"Player {player.id}: invested={total_investment.overall:.2f}, "
        + f"chips_value={valuation.final_chips_value:.2f}, "
        + f"result={result_before_open_games:.2f}"
    )

    return PlayerCalculationResult(
        **player.model_dump(include=set(Player.model_fields)),
        total_investment=total_investment,
        exact_chips_value=valuation.exact_chips_value,
        rounded_rebuys_count=valuation.rounded_rebuys_count,
        final_chips_value=valuation.final_chips_value,
        result_before_open_games=result_before_open_games,
        final_result_money=0.0,
    )
