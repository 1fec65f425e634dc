"""Unit tests for configuration and payment unit validation."""

import pytest

from chipledger.core.exceptions import ConflictError, ValidationError
from chipledger.models import ChipsConfig, PaymentUnit
from chipledger.services.validation_service import (
    validate_chips_config,
    validate_group_config,
    validate_payment_units,
    validate_rounding_rule,
)


class TestValidateChipsConfig:
    """Tests for validate_chips_config."""

    def test_valid_config_passes(self, rebuy):
        """Test that positive chips and amount are accepted."""
        validate_chips_config(rebuy, "rebuy")

    @pytest.mark.parametrize("chips", [0, -100])
    def test_non_positive_chips_rejected(self, chips):
        """Test that zero or negative chips are rejected with details."""
        with pytest.raises(ValidationError, match="rebuy.chips") as exc:
            validate_chips_config(ChipsConfig(chips=chips, amount=50), "rebuy")

        assert exc.value.code == "invalid_chips_config"
        assert exc.value.details == {"field": "rebuy.chips", "value": chips}

    @pytest.mark.parametrize("amount", [0, -5.5, float("nan")])
    def test_non_positive_amount_rejected(self, amount):
        """Test that a zero, negative or NaN amount is rejected."""
        with pytest.raises(ValidationError, match="buy_in.amount"):
            validate_chips_config(ChipsConfig(chips=100, amount=amount), "buy_in")


class TestValidateRoundingRule:
    """Tests for validate_rounding_rule."""

    @pytest.mark.parametrize("percentage", [1, 50, 80, 100])
    def test_valid_percentages(self, percentage):
        """Test percentages inside 1-100 are accepted."""
        validate_rounding_rule(True, percentage)

    @pytest.mark.parametrize("percentage", [0, -10, 101])
    def test_out_of_range_rejected(self, percentage):
        """Test percentages outside 1-100 are rejected."""
        with pytest.raises(ValidationError) as exc:
            validate_rounding_rule(True, percentage)

        assert exc.value.code == "invalid_rounding_rule"

    def test_ignored_when_rule_disabled(self):
        """Test that the percentage is not checked when the rule is off."""
        validate_rounding_rule(False, 0)


class TestValidateGroupConfig:
    """Tests for validate_group_config."""

    def test_valid_group(self, sample_group):
        """Test that the sample group passes validation."""
        validate_group_config(sample_group)

    def test_bad_rebuy_reported(self, sample_group):
        """Test that the failing field is named in the error."""
        group = sample_group.model_copy(update={"rebuy": ChipsConfig(chips=0, amount=50)})

        with pytest.raises(ValidationError, match="rebuy.chips"):
            validate_group_config(group)

    def test_bad_percentage_reported(self, sample_group):
        """Test that an invalid rounding percentage fails the group."""
        group = sample_group.model_copy(update={"rounding_rule_percentage": 150})

        with pytest.raises(ValidationError, match="rounding_rule_percentage"):
            validate_group_config(group)


class TestValidatePaymentUnits:
    """Tests for validate_payment_units."""

    def test_disjoint_units_pass(self):
        """Test that units with different players are accepted."""
        validate_payment_units(
            [
                PaymentUnit(id="u1", players=["a", "b"]),
                PaymentUnit(id="u2", players=["c", "d"]),
            ]
        )

    @pytest.mark.parametrize("players", [["a"], ["a", "b", "c"], ["a", "a"]])
    def test_wrong_size_rejected(self, players):
        """Test that a unit must join exactly two distinct players."""
        with pytest.raises(ValidationError) as exc:
            validate_payment_units([PaymentUnit(id="u1", players=players)])

        assert exc.value.code == "invalid_payment_unit"

    def test_player_in_two_active_units(self):
        """Test that overlapping active units are a conflict."""
        units = [
            PaymentUnit(id="u1", players=["a", "b"]),
            PaymentUnit(id="u2", players=["b", "c"]),
        ]

        with pytest.raises(ConflictError) as exc:
            validate_payment_units(units)

        assert exc.value.code == "payment_unit_conflict"
        assert exc.value.details == {"player_id": "b", "units": ["u1", "u2"]}

    def test_overlap_with_inactive_unit_allowed(self):
        """Test that a player may still appear in a deactivated unit."""
        validate_payment_units(
            [
                PaymentUnit(id="u1", players=["a", "b"], is_active=False),
                PaymentUnit(id="u2", players=["b", "c"]),
            ]
        )
