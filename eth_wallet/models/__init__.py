"""Data models and configuration."""

from eth_wallet.models.config import WalletConfig
from eth_wallet.models.blockchain import (
    BlockData,
    BlockRef,
    CandidateTransaction,
    Direction,
    MergeResult,
    SyncReport,
    TransactionRecord,
)

__all__ = [
    "WalletConfig",
    "BlockData",
    "BlockRef",
    "CandidateTransaction",
    "Direction",
    "MergeResult",
    "SyncReport",
    "TransactionRecord",
]
