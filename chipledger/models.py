"""Pydantic data models for the chipledger settlement engine."""

from datetime import datetime
from enum import Enum
import math

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class LedgerModel(BaseModel):
    """Base model accepting both snake_case and the store's camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChipsConfig(LedgerModel):
    """Money value of one unit of chips, used for buy-in and rebuy denominations."""

    model_config = ConfigDict(frozen=True)

    chips: int
    amount: float


class Player(LedgerModel):
    """A player within a single game."""

    id: str
    name: str = ""
    buy_in_count: int = 0
    rebuy_count: int = 0
    # None while the game is still active
    final_chips: float | None = None

    @field_validator("buy_in_count", "rebuy_count", mode="before")
    @classmethod
    def _missing_count_is_zero(cls, value: object) -> object:
        if value is None or (isinstance(value, float) and math.isnan(value)):
            return 0
        return value

    @field_validator("final_chips", mode="before")
    @classmethod
    def _unparseable_chips_are_unset(cls, value: object) -> object:
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, int | float):
            return value
        try:
            return float(str(value).strip())
        except ValueError:
            return None


class PlayerInvestment(LedgerModel):
    """Money a player put into the game."""

    buy_in_count: int
    buy_in_total: float
    rebuy_count: int
    rebuy_total: float
    overall: float


class OpenGamesBonus(LedgerModel):
    """Open games a player won and the money they earned from them."""

    wins_count: int = 0
    bonus_amount: float = 0.0


class PlayerCalculationResult(Player):
    """Settlement breakdown for one player."""

    total_investment: PlayerInvestment
    exact_chips_value: float
    rounded_rebuys_count: int
    final_chips_value: float
    result_before_open_games: float
    open_games_bonus: OpenGamesBonus | None = None
    # Filled in once open games are resolved
    final_result_money: float = 0.0


class ChipsValuation(LedgerModel):
    """Money value of a final chip count under the group's rounding policy."""

    exact_chips_value: float
    rounded_rebuys_count: int
    final_chips_value: float


class OpenGame(LedgerModel):
    """A compensating game worth one rebuy, played to balance the ledger."""

    id: int
    winner: str | None = None


class PaymentUnit(LedgerModel):
    """Two players who settle as a single financial entity."""

    id: str
    name: str = ""
    players: list[str]
    is_active: bool = True


class PaymentParty(LedgerModel):
    """One side of a payment: either a lone player or a payment unit."""

    user_id: str | None = None
    unit_id: str | None = None

    @model_validator(mode="after")
    def _exactly_one_side(self) -> "PaymentParty":
        if (self.user_id is None) == (self.unit_id is None):
            msg = "Exactly one of user_id or unit_id must be set"
            raise ValueError(msg)
        return self

    @property
    def entity_id(self) -> str:
        return self.user_id if self.user_id is not None else str(self.unit_id)


class Payment(LedgerModel):
    """A directed money transfer that settles part of a debt."""

    from_: PaymentParty = Field(alias="from")
    to: PaymentParty
    amount: float = Field(gt=0)


class SettlementResult(LedgerModel):
    """Payments produced by the solver plus any balance it could not settle."""

    payments: list[Payment]
    unsettled_amount: float = 0.0


class GameSummary(LedgerModel):
    """Win/loss totals, open-games requirement and payments for a game."""

    players_results: list[PlayerCalculationResult]
    total_wins: float
    total_losses: float
    difference: float
    open_games_count: int
    payments: list[Payment] | None = None
    unsettled_amount: float = 0.0


class Group(LedgerModel):
    """A poker group and its current buy-in/rebuy configuration."""

    id: str
    name: str = ""
    buy_in: ChipsConfig
    rebuy: ChipsConfig
    use_rounding_rule: bool = False
    rounding_rule_percentage: int = 80
    permanent_players: list[str] = Field(default_factory=list)
    guest_players: list[str] = Field(default_factory=list)
    is_active: bool = True


class GameStatus(str, Enum):
    """Phases a game goes through, from play to archived history."""

    ACTIVE = "active"
    ENDED = "ended"
    OPEN_GAMES = "open_games"
    FINAL_RESULTS = "final_results"
    PAYMENTS = "payments"
    COMPLETED = "completed"
    DELETED = "deleted"


class GameDate(LedgerModel):
    """Calendar date a game was played on."""

    day: int
    month: int
    year: int

    def to_datetime(self) -> datetime:
        """Return a datetime usable for chronological ordering."""
        return datetime(self.year, self.month, self.day)


class Game(LedgerModel):
    """A single poker night with its frozen configuration snapshot."""

    id: str
    group_id: str
    group_name_snapshot: str = ""
    date: GameDate
    status: GameStatus = GameStatus.ACTIVE
    buy_in_snapshot: ChipsConfig
    rebuy_snapshot: ChipsConfig
    use_rounding_rule: bool = False
    rounding_rule_percentage: int = 80
    players: list[Player] = Field(default_factory=list)
    open_games: list[OpenGame] = Field(default_factory=list)
    payments: list[Payment] = Field(default_factory=list)
    # Final breakdown, stored once the game is settled
    players_results: list[PlayerCalculationResult] = Field(default_factory=list)


class PlayerStats(LedgerModel):
    """Aggregate results of one player across completed games."""

    player_id: str
    player_name: str = ""
    games_played: int = 0
    games_up: int = 0
    games_down: int = 0
    net: float = 0.0
    average_net: float = 0.0
    biggest_win: float = 0.0
    biggest_loss: float = 0.0
    highest_net: float = 0.0
    lowest_net: float = 0.0
    total_buy_ins: int = 0
    total_rebuys: int = 0
    total_investment: float = 0.0
    win_rate: float = 0.0
    roi: float = 0.0
