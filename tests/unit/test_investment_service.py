"""Unit tests for player investment calculation."""

import pytest

from chipledger.models import ChipsConfig, Player
from chipledger.services.investment_service import calculate_player_investment


class TestCalculatePlayerInvestment:
    """Tests for calculate_player_investment."""

    def test_buy_ins_and_rebuys_add_up(self):
        """Test that overall is buy-in total plus rebuy total."""
        player = Player(id="p1", buy_in_count=2, rebuy_count=3)
        buy_in = ChipsConfig(chips=200, amount=100)
        rebuy = ChipsConfig(chips=100, amount=40)

        investment = calculate_player_investment(player, buy_in, rebuy)

        assert investment.buy_in_count == 2
        assert investment.buy_in_total == pytest.approx(200.0)
        assert investment.rebuy_count == 3
        assert investment.rebuy_total == pytest.approx(120.0)
        assert investment.overall == pytest.approx(320.0)

    @pytest.mark.parametrize(
        ("buy_in_count", "rebuy_count"), [(0, 0), (1, 0), (0, 4), (3, 7)]
    )
    def test_additivity(self, buy_in, rebuy, buy_in_count, rebuy_count):
        """Test overall equals count times amount for both denominations."""
        player = Player(id="p1", buy_in_count=buy_in_count, rebuy_count=rebuy_count)

        investment = calculate_player_investment(player, buy_in, rebuy)

        assert investment.overall == buy_in_count * buy_in.amount + rebuy_count * rebuy.amount
        assert investment.overall >= 0

    def test_missing_counts_default_to_zero(self, buy_in, rebuy):
        """Test that counts missing from the store are treated as zero."""
        player = Player.model_validate({"id": "p1", "buyInCount": None, "rebuyCount": None})

        investment = calculate_player_investment(player, buy_in, rebuy)

        assert investment.buy_in_count == 0
        assert investment.rebuy_count == 0
        assert investment.overall == pytest.approx(0.0)
