"""Denomination conversion between wei, gwei and ether."""

from decimal import Decimal, InvalidOperation, localcontext
from typing import Union

from eth_wallet.exceptions import InvalidAmount

WEI_PER_GWEI = 10 ** 9
WEI_PER_ETH = 10 ** 18
ETH_DECIMALS = 18

# 2**256 has 78 digits; keeps every conversion exact
_PRECISION = 100


def wei_to_eth(wei: int) -> Decimal:
    """Convert a wei-denominated integer to ether."""
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return Decimal(int(wei)) / Decimal(WEI_PER_ETH)


def eth_to_wei(eth: Union[Decimal, str, int]) -> int:
    """
    Convert an ether-denominated value to wei.

    Raises InvalidAmount for negative values, non-numeric input, and values
    with more than 18 fractional digits.
    """
    if isinstance(eth, float):
        raise InvalidAmount("Ether amounts must be given as Decimal or str, not float")

    try:
        value = Decimal(eth)
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidAmount(f"Not a decimal amount: {eth!r}")

    if not value.is_finite():
        raise InvalidAmount(f"Not a finite amount: {eth!r}")
    if value < 0:
        raise InvalidAmount(f"Amount must not be negative: {eth!r}")

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        wei = value.scaleb(ETH_DECIMALS)
        if wei != wei.to_integral_value():
            raise InvalidAmount(f"Amount {eth!r} has more than {ETH_DECIMALS} decimal places")
        return int(wei)


def gwei_to_wei(gwei: int) -> int:
    """Convert gwei to wei (adds nine zeros)."""
    return int(gwei) * WEI_PER_GWEI


def wei_to_gwei(wei: int) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return Decimal(int(wei)) / Decimal(WEI_PER_GWEI)
