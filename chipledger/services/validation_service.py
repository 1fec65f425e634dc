"""Boundary validation for group configuration and payment units.

These checks run before any calculation begins so that a bad group setup is
reported with a descriptive error instead of producing a division by zero or a
nonsensical ledger.
"""

import math

from loguru import logger

from chipledger.core.config import MAX_ROUNDING_PERCENTAGE, MIN_ROUNDING_PERCENTAGE
from chipledger.core.exceptions import ConflictError, ValidationError
from chipledger.models import ChipsConfig, Group, PaymentUnit

# A payment unit always joins exactly two players
PAYMENT_UNIT_SIZE = 2


def validate_chips_config(config: ChipsConfig, field_name: str = "chips_config") -> None:
    """Check that a chips configuration has positive chips and amount.

    Args:
        config: Buy-in or rebuy configuration to check
        field_name: Name reported in the error details, e.g. 'buy_in'

    Raises:
        ValidationError: If chips or amount is not strictly positive
    """
    if config.chips <= 0:
        raise ValidationError(
            code="invalid_chips_config",
            message=f"{field_name}.chips must be greater than 0, got {config.chips}",
            details={"field": f"{field_name}.chips", "value": config.chips},
        )
    if not math.isfinite(config.amount) or config.amount <= 0:
        raise ValidationError(
            code="invalid_chips_config",
            message=f"{field_name}.amount must be greater than 0, got {config.amount}",
            details={"field": f"{field_name}.amount", "value": config.amount},
        )


def validate_rounding_rule(use_rounding_rule: bool, rounding_rule_percentage: int) -> None:
    """Check the rounding rule percentage when the rule is enabled."""
    if not use_rounding_rule:
        return
    if not MIN_ROUNDING_PERCENTAGE <= rounding_rule_percentage <= MAX_ROUNDING_PERCENTAGE:
        raise ValidationError(
            code="invalid_rounding_rule",
            message=(
                "rounding_rule_percentage must be between "
                + f"{MIN_ROUNDING_PERCENTAGE} and {MAX_ROUNDING_PERCENTAGE}, "
                + f"got {rounding_rule_percentage}"
            ),
            details={
                "field": "rounding_rule_percentage",
                "value": rounding_rule_percentage,
            },
        )


def validate_group_config(group: Group) -> None:
    """Validate everything the calculation needs from a group's setup."""
    logger.debug(f"Validating configuration of group {group.id}")
    validate_chips_config(group.buy_in, "buy_in")
    validate_chips_config(group.rebuy, "rebuy")
    validate_rounding_rule(group.use_rounding_rule, group.rounding_rule_percentage)


def validate_payment_units(payment_units: list[PaymentUnit]) -> None:
    """Check payment unit membership before settlement.

    Every unit must join exactly two distinct players, and a player may belong
    to at most one active unit. Inactive units are only checked for shape.

    Raises:
        ValidationError: If a unit does not have exactly two distinct players
        ConflictError: If a player belongs to more than one active unit
    """
    owner_by_player: dict[str, str] = {}

    for unit in payment_units:
        if len(unit.players) != PAYMENT_UNIT_SIZE or len(set(unit.players)) != PAYMENT_UNIT_SIZE:
            raise ValidationError(
                code="invalid_payment_unit",
                message=f"Payment unit {unit.id} must contain exactly two distinct players",
                details={"unit_id": unit.id, "players": list(unit.players)},
            )

        if not unit.is_active:
            continue

        for player_id in unit.players:
            other_unit = owner_by_player.get(player_id)
            if other_unit is not None:
                raise ConflictError(
                    code="payment_unit_conflict",
                    message=(
                        f"Player {player_id} belongs to active payment units "
                        + f"{other_unit} and {unit.id}"
                    ),
                    details={"player_id": player_id, "units": [other_unit, unit.id]},
                )
            owner_by_player[player_id] = unit.id
