"""Address validation and matching."""

import re
from typing import Optional

from eth_wallet.models.blockchain import Direction

HEX_ADDRESS_PATTERN = re.compile(r'(0[xX])?[0-9a-fA-F]{40}')


def is_valid_address(address: Optional[str]) -> bool:
    """True when the value is hex (optionally 0x-prefixed) decoding to 20 bytes."""
    if not address or not isinstance(address, str):
        return False

    if not HEX_ADDRESS_PATTERN.fullmatch(address):
        return False

    try:
        return len(bytes.fromhex(strip_hex_prefix(address))) == 20
    except ValueError:
        return False


def strip_hex_prefix(value: str) -> str:
    if value[:2] in ('0x', '0X'):
        return value[2:]
    return value


def normalize_address(address: str) -> str:
    """Lower-cased, 0x-prefixed form used as a comparison key."""
    return '0x' + strip_hex_prefix(address).lower()


def addresses_equal(left: Optional[str], right: Optional[str]) -> bool:
    """Case-insensitive address equality. A missing address never matches."""
    if not left or not right:
        return False
    return normalize_address(left) == normalize_address(right)


def classify(sender: Optional[str], recipient: Optional[str], owned: str) -> Direction:
    """Classify a transaction relative to the owned address."""
    from_me = addresses_equal(sender, owned)
    for_me = addresses_equal(recipient, owned)

    if from_me and for_me:
        return Direction.SELF
    if for_me:
        return Direction.INCOMING
    if from_me:
        return Direction.OUTGOING
    return Direction.IRRELEVANT
