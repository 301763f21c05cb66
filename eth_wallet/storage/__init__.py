"""Wallet document storage and the persistence protocol."""

from eth_wallet.storage.store import FileStore
from eth_wallet.storage.persistence import WalletPersistence, serialize_state, deserialize_state
from eth_wallet.storage.schema import SCHEMA_VERSION, WalletDocument

__all__ = [
    "FileStore",
    "WalletPersistence",
    "serialize_state",
    "deserialize_state",
    "SCHEMA_VERSION",
    "WalletDocument",
]
