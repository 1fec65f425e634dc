"""Player investment calculation."""

from chipledger.models import ChipsConfig, Player, PlayerInvestment


def calculate_player_investment(
    player: Player, buy_in_snapshot: ChipsConfig, rebuy_snapshot: ChipsConfig
) -> PlayerInvestment:
    """Convert a player's buy-in and rebuy counts into money invested."""
    buy_in_total = player.buy_in_count * buy_in_snapshot.amount
    rebuy_total = player.rebuy_count * rebuy_snapshot.amount

    return PlayerInvestment(
        buy_in_count=player.buy_in_count,
        buy_in_total=buy_in_total,
        rebuy_count=player.rebuy_count,
        rebuy_total=rebuy_total,
        overall=buy_in_total + rebuy_total,
    )
