"""Deduplicated local transaction ledger and synchronization cursor."""

from typing import Iterable, Iterator, List, Optional, Set, Tuple
import structlog

from eth_wallet.models.blockchain import (
    BlockRef, CandidateTransaction, Direction, MergeResult, TransactionRecord
)
from eth_wallet.utils.address import classify

logger = structlog.get_logger(__name__)


class TransactionQuery:
    """Restartable, sorted view over the ledger's records."""

    def __init__(self, ledger: "TransactionLedger", descending: bool = True):
        self._ledger = ledger
        self.descending = descending

    def __iter__(self) -> Iterator[TransactionRecord]:
        # sorted() is stable with reverse=True, so equal block numbers keep insertion order
        return iter(sorted(self._ledger.records,
                           key=lambda record: record.block.number,
                           reverse=self.descending))


class TransactionLedger:
    """
    Append-only collection of transactions involving one address.

    Owns the cursor (last processed block). Hashes are unique under
    case-insensitive comparison and the cursor never moves backwards.
    Nothing here persists; callers go through WalletPersistence.mutate.
    """

    def __init__(self, owned_address: str, cursor: BlockRef,
                 records: Optional[Iterable[TransactionRecord]] = None):
        self.owned_address = owned_address
        self._cursor = cursor
        self._records: List[TransactionRecord] = []
        self._known_hashes: Set[str] = set()
        self.logger = logger.bind(component="transaction_ledger")

        for record in records or ():
            self._append(record)

    @property
    def cursor(self) -> BlockRef:
        return self._cursor

    @property
    def records(self) -> Tuple[TransactionRecord, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def contains(self, tx_hash: str) -> bool:
        return tx_hash.lower() in self._known_hashes

    def _append(self, record: TransactionRecord) -> bool:
        key = record.tx_hash.lower()
        if key in self._known_hashes:
            return False
        self._known_hashes.add(key)
        self._records.append(record)
        return True

    def advance_cursor(self, block_ref: BlockRef) -> bool:
        """Move the cursor to block_ref unless that would move it backwards."""
        if block_ref.number < self._cursor.number:
            self.logger.warning("Refusing to move cursor backwards",
                                cursor=self._cursor.number,
                                requested=block_ref.number)
            return False
        self._cursor = block_ref
        return True

    def merge_block(self, block_ref: BlockRef,
                    candidates: Iterable[CandidateTransaction]) -> MergeResult:
        """
        Merge the transactions of one block.

        Irrelevant transactions are dropped, already known hashes are
        skipped, and new relevant ones are appended with the block's time.
        Merging the same block twice leaves the ledger unchanged.
        """
        result = MergeResult(block_number=block_ref.number)

        for tx in candidates:
            direction = classify(tx.sender, tx.recipient, self.owned_address)

            if direction is Direction.IRRELEVANT:
                result.irrelevant += 1
                continue

            if self.contains(tx.tx_hash):
                self.logger.info("Not saving transaction locally because it is already known",
                                 tx_hash=tx.tx_hash)
                result.skipped += 1
                continue

            self.logger.info("Found transaction",
                             tx_hash=tx.tx_hash,
                             direction=direction.value,
                             block_number=block_ref.number)

            self._append(TransactionRecord(
                block=BlockRef(number=block_ref.number, timestamp=block_ref.timestamp),
                tx_hash=tx.tx_hash,
                sender=tx.sender,
                recipient=tx.recipient,
                amount_wei=tx.value_wei,
                fee_wei=tx.fee_wei,
            ))
            result.added += 1

        result.cursor_advanced = self.advance_cursor(block_ref)
        return result

    def query(self, descending: bool = True) -> TransactionQuery:
        """Records ordered by block number, newest first by default."""
        return TransactionQuery(self, descending=descending)

    def direction_of(self, record: TransactionRecord) -> Direction:
        return classify(record.sender, record.recipient, self.owned_address)
