"""Blockchain data models for the wallet ledger."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from dataclasses import dataclass, field

from eth_wallet.utils.units import wei_to_eth


class Direction(str, Enum):
    """How a transaction relates to the owned address."""
    INCOMING = "incoming"
    OUTGOING = "outgoing"
    SELF = "self"
    IRRELEVANT = "irrelevant"


@dataclass(frozen=True)
class BlockRef:
    """A ledger checkpoint: block number and the time it was mined."""
    number: int
    timestamp: datetime


@dataclass(frozen=True)
class CandidateTransaction:
    """A transaction as reported by the remote node inside a block."""
    tx_hash: str
    sender: str
    recipient: Optional[str]
    value_wei: int
    gas: int
    gas_price_wei: int
    block_number: Optional[int] = None

    @property
    def fee_wei(self) -> int:
        """Maximum fee paid: gas allowance times gas price."""
        return self.gas * self.gas_price_wei


@dataclass
class BlockData:
    """A block with its full transaction list."""
    number: int
    timestamp: datetime
    transactions: List[CandidateTransaction] = field(default_factory=list)
    block_hash: Optional[str] = None

    @property
    def ref(self) -> BlockRef:
        return BlockRef(number=self.number, timestamp=self.timestamp)


@dataclass(frozen=True)
class TransactionRecord:
    """A locally known transaction involving the owned address."""
    block: BlockRef
    tx_hash: str
    sender: str
    recipient: Optional[str]
    amount_wei: int
    fee_wei: int

    @property
    def amount_eth(self) -> Decimal:
        """Amount sent, excluding the fee, in ether."""
        return wei_to_eth(self.amount_wei)

    @property
    def fee_eth(self) -> Decimal:
        return wei_to_eth(self.fee_wei)


@dataclass
class MergeResult:
    """Outcome of merging one block into the ledger."""
    block_number: int
    added: int = 0
    skipped: int = 0
    irrelevant: int = 0
    cursor_advanced: bool = False


@dataclass
class SyncReport:
    """Outcome of a synchronization run."""
    start_block: int
    tip_block: int
    blocks_merged: int = 0
    transactions_added: int = 0
    transactions_skipped: int = 0
    stalled_at: Optional[int] = None

    @property
    def reached_tip(self) -> bool:
        return self.stalled_at is None
