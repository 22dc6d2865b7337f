"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class MarketStatus(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    SETTLED = "SETTLED"
    CANCELLED = "CANCELLED"


class Side(str, Enum):
    """The two mutually exclusive outcomes of a market: the condition, or its complement."""
    YES = "YES"
    NO = "NO"


class StakeStatus(str, Enum):
    """Derived from the stake and its market; not stored."""
    PENDING = "PENDING"
    WON = "WON"
    LOST = "LOST"
    REFUNDED = "REFUNDED"


class CharityStatus(str, Enum):
    PENDING = "PENDING"
    DISTRIBUTED = "DISTRIBUTED"


def parse_side(value: object) -> Side:
    """Coerce 'YES'/'NO' (any case) or a Side into a Side. Raises ValueError otherwise."""
    if isinstance(value, Side):
        return value
    if isinstance(value, str):
        try:
            return Side(value.upper())
        except ValueError:
            pass
    raise ValueError(f"Unknown side: {value!r}")
