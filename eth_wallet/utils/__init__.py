"""Utility functions and helpers."""

from eth_wallet.utils.units import eth_to_wei, gwei_to_wei, wei_to_eth, wei_to_gwei
from eth_wallet.utils.time import to_utc_timestamp, block_time, format_local, get_current_utc

__all__ = [
    "eth_to_wei",
    "gwei_to_wei",
    "wei_to_eth",
    "wei_to_gwei",
    "to_utc_timestamp",
    "block_time",
    "format_local",
    "get_current_utc",
]
