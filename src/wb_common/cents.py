"""Integer arithmetic utilities for cents-based pools.

All stakes, pools, payouts and fees are int (cents). Odds and shares are
Decimal ratios, never float.
"""

from decimal import ROUND_DOWN, Decimal

BPS_DENOMINATOR = 10_000
RATIO_QUANTUM = Decimal("0.0001")


def validate_fee_bps(fee_bps: int) -> None:
    """Validate a fee rate in basis points: 0 <= fee_bps < 10000."""
    if not (0 <= fee_bps < BPS_DENOMINATOR):
        raise ValueError(f"fee_bps must be between 0 and 9999, got {fee_bps}")


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 6500 -> '$65.00', -1200 -> '-$12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"


def calc_charity_fee(amount: int, fee_bps: int) -> int:
    """Charity fee with floor division.

    fee = floor(amount * fee_bps / 10000). Flooring keeps the recorded fee
    at or below ``fee_bps`` of the amount it was taken from.
    """
    if amount == 0 or fee_bps == 0:
        return 0
    return (amount * fee_bps) // BPS_DENOMINATOR


def ratio(numerator: int, denominator: int) -> Decimal:
    """numerator / denominator as a Decimal truncated to 4 places."""
    return (Decimal(numerator) / Decimal(denominator)).quantize(RATIO_QUANTUM, rounding=ROUND_DOWN)


def scale_cents(cents: int, factor: Decimal) -> int:
    """cents * factor, floored to a whole cent."""
    return int((Decimal(cents) * factor).to_integral_value(rounding=ROUND_DOWN))
