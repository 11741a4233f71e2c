"""
Money normalization for base-currency arithmetic.
"""
from decimal import Decimal, ROUND_DOWN
from typing import Optional
from tripledger.core.config import settings

CENT = Decimal("0.01")


def normalize_rate(exchange_rate: Optional[Decimal]) -> Decimal:
    """
    Return the rate to apply for a conversion.
    
    A missing, zero or negative rate is a data error, not a debt reversal,
    so it falls back to identity conversion.
    """
    if exchange_rate is None or exchange_rate <= 0:
        return Decimal(1)
    return exchange_rate


def to_base_currency(amount: Decimal, exchange_rate: Optional[Decimal] = None) -> Decimal:
    """
    Convert amount from an expense's currency to the trip's base currency.
    
    Args:
        amount: Amount in the source currency
        exchange_rate: Exchange rate (1 source_currency = rate base_currency)
    
    Returns:
        Exact decimal product; no cent rounding is applied here so that
        sums over many splits do not accumulate rounding error.
    """
    return amount * normalize_rate(exchange_rate)


def floor_money(amount: Decimal) -> Decimal:
    """Cut a non-negative amount down to whole cents; never exceeds the input."""
    return amount.quantize(CENT, rounding=ROUND_DOWN)


def get_epsilon() -> Decimal:
    """Tolerance under which a balance is treated as settled."""
    return settings.SETTLEMENT_EPSILON


def is_settled(amount: Decimal, epsilon: Optional[Decimal] = None) -> bool:
    """Check whether a balance is within epsilon of zero."""
    if epsilon is None:
        epsilon = get_epsilon()
    return abs(amount) <= epsilon
