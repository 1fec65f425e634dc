"""Payment settlement: turn final results into a short list of transfers."""

from dataclasses import dataclass

from loguru import logger

from chipledger.core.config import MONEY_DECIMALS
from chipledger.models import (
    Payment,
    PaymentParty,
    PaymentUnit,
    PlayerCalculationResult,
    SettlementResult,
)
from chipledger.services.validation_service import validate_payment_units


@dataclass
class SettlementEntity:
    """A lone player or a payment unit, with the balance it still has to settle."""

    id: str
    amount: float
    is_unit: bool = False

    def party(self) -> PaymentParty:
        if self.is_unit:
            return PaymentParty(unit_id=self.id)
        return PaymentParty(user_id=self.id)


def _to_cents(amount: float) -> float:
    return round(amount, MONEY_DECIMALS)


def build_settlement_entities(
    players_results: list[PlayerCalculationResult],
    payment_units: list[PaymentUnit],
) -> list[SettlementEntity]:
    """Fold players of active payment units into one entity per unit.

    Lone players keep roster order; units follow, in the order their first
    member appears in the roster.
    """
    unit_by_player: dict[str, str] = {}
    for unit in payment_units:
        if unit.is_active:
            for player_id in unit.players:
                unit_by_player[player_id] = unit.id

    entities: list[SettlementEntity] = []
    unit_totals: dict[str, float] = {}

    for player in players_results:
        unit_id = unit_by_player.get(player.id)
        if unit_id is None:
            entities.append(SettlementEntity(id=player.id, amount=player.final_result_money))
        else:
            unit_totals[unit_id] = unit_totals.get(unit_id, 0.0) + player.final_result_money

    entities.extend(
        SettlementEntity(id=unit_id, amount=amount, is_unit=True)
        for unit_id, amount in unit_totals.items()
    )
    return entities


def solve_payments(entities: list[SettlementEntity]) -> SettlementResult:
    """Match the largest creditors with the largest debtors.

    Each winner in turn collects from the loser at the head of the list until
    it is paid in full; a loser leaves the list once its debt reaches zero.
    Balances are kept in cents, so this produces at most
    ``winners + losers - 1`` payments.

    If winners and losers do not balance, the loop stops when either side runs
    out and the leftover is reported as ``unsettled_amount``.
    """
    balances = [
        SettlementEntity(id=e.id, amount=_to_cents(e.amount), is_unit=e.is_unit)
        for e in entities
    ]
    winners = sorted((e for e in balances if e.amount > 0), key=lambda e: e.amount, reverse=True)
    losers = sorted((e for e in balances if e.amount < 0), key=lambda e: e.amount)

    payments: list[Payment] = []

    for winner in winners:
        while winner.amount > 0 and losers:
            loser = losers[0]
            transfer = _to_cents(min(winner.amount, -loser.amount))

            payments.append(Payment(from_=loser.party(), to=winner.party(), amount=transfer))

            winner.amount = _to_cents(winner.amount - transfer)
            loser.amount = _to_cents(loser.amount + transfer)

            if loser.amount == 0:
                losers.pop(0)

    unsettled_amount = _to_cents(
        sum(w.amount for w in winners) + sum(-loser.amount for loser in losers)
    )
    if unsettled_amount > 0:
        logger.warning(
            f"Settlement left {unsettled_amount:.2f} unsettled; "
            + "results do not sum to zero (open games unresolved?)"
        )

    return SettlementResult(payments=payments, unsettled_amount=unsettled_amount)


def settle_balances(
    players_results: list[PlayerCalculationResult],
    payment_units: list[PaymentUnit],
) -> SettlementResult:
    """Compute payments for final results, routing payment units as one entity."""
    validate_payment_units(payment_units)
    entities = build_settlement_entities(players_results, payment_units)
    result = solve_payments(entities)
    logger.success(
        f"Settled {len(entities)} entities with {len(result.payments)} payment(s)"
    )
    return result


def calculate_optimal_payments(
    players_results: list[PlayerCalculationResult],
    payment_units: list[PaymentUnit],
) -> list[Payment]:
    """Return the payments that settle every player's final result."""
    return settle_balances(players_results, payment_units).payments
