"""Pytest configuration and shared fixtures."""

from collections.abc import Generator

from loguru import logger
import pytest

from chipledger.models import (
    ChipsConfig,
    Game,
    GameDate,
    GameStatus,
    Group,
    PaymentUnit,
    Player,
)


@pytest.fixture
def buy_in() -> ChipsConfig:
    """Buy-in: 100 chips for 50."""
    return ChipsConfig(chips=100, amount=50)


@pytest.fixture
def rebuy() -> ChipsConfig:
    """Rebuy: 100 chips for 50."""
    return ChipsConfig(chips=100, amount=50)


@pytest.fixture
def sample_group(buy_in, rebuy) -> Group:
    """A group playing with the 80% rounding rule."""
    return Group(
        id="group-1",
        name="Thursday Night",
        buy_in=buy_in,
        rebuy=rebuy,
        use_rounding_rule=True,
        rounding_rule_percentage=80,
        permanent_players=["alice", "bob", "carol"],
    )


@pytest.fixture
def sample_players() -> list[Player]:
    """Three players with recorded chips.

    alice: 1 buy-in, 1 rebuy  -> invested 100, ends with 370 chips
    bob:   1 buy-in           -> invested 50, ends with 0 chips
    carol: 1 buy-in, 2 rebuys -> invested 150, ends with 230 chips

    With the 80% rule the results are +50, -50, -50, so one open game is needed.
    """
    return [
        Player(id="alice", name="Alice", buy_in_count=1, rebuy_count=1, final_chips=370),
        Player(id="bob", name="Bob", buy_in_count=1, rebuy_count=0, final_chips=0),
        Player(id="carol", name="Carol", buy_in_count=1, rebuy_count=2, final_chips=230),
    ]


@pytest.fixture
def sample_game(sample_group, sample_players) -> Game:
    """An active game snapshotted from the sample group."""
    return Game(
        id="game-1",
        group_id=sample_group.id,
        group_name_snapshot=sample_group.name,
        date=GameDate(day=7, month=10, year=2025),
        status=GameStatus.ACTIVE,
        buy_in_snapshot=sample_group.buy_in,
        rebuy_snapshot=sample_group.rebuy,
        use_rounding_rule=True,
        rounding_rule_percentage=80,
        players=sample_players,
    )


@pytest.fixture
def couple_unit() -> PaymentUnit:
    """An active payment unit joining alice and bob."""
    return PaymentUnit(id="unit-1", name="Alice & Bob", players=["alice", "bob"])


@pytest.fixture
def log_messages() -> Generator[list[str], None, None]:
    """Capture loguru messages emitted during a test."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
