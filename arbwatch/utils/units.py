"""Fixed-point token amount conversions.

On-chain amounts are integers scaled by ``10 ** decimals``. Everything that
turns a raw amount into a human-unit ``Decimal`` (or back) goes through here.
"""

from decimal import ROUND_DOWN, Decimal


def to_base_units(amount: Decimal, decimals: int) -> int:
    """
    Convert a human-unit amount to integer base units.

    Digits beyond the token's precision are truncated, matching how a
    router would interpret the integer amount.

    Args:
        amount: Amount in whole-token units (e.g. Decimal("1.5") WETH)
        decimals: Token decimal precision

    Returns:
        Integer amount in base units
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")
    scaled = Decimal(amount).scaleb(decimals)
    return int(scaled.quantize(Decimal("1"), rounding=ROUND_DOWN))


def from_base_units(amount: int, decimals: int) -> Decimal:
    """
    Convert integer base units to a human-unit Decimal.

    Exact: scaling by a power of ten never rounds.

    Args:
        amount: Raw integer amount
        decimals: Token decimal precision

    Returns:
        Amount in whole-token units
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")
    return Decimal(int(amount)).scaleb(-decimals)
