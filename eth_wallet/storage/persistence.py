"""
Wallet persistence protocol.

Every state change goes through ``WalletPersistence.mutate``: the change is
applied in memory under a lock, then the entire wallet (key, cursor and
transactions) is serialized and overwrites the previous document. There is
no delta persistence. When the write fails the in-memory change stays
applied; the next successful save commits the accumulated state.
"""

import threading
from typing import Callable, Optional, TypeVar
from pydantic import ValidationError
import structlog

from eth_wallet.exceptions import PersistenceError, UnsupportedSchemaVersion
from eth_wallet.models.blockchain import BlockRef, Direction, TransactionRecord
from eth_wallet.core.signer import OfflineTransactionSigner
from eth_wallet.core.state import WalletState
from eth_wallet.storage.schema import (
    SCHEMA_VERSION, BlockDocument, TransactionDocument, WalletDocument
)
from eth_wallet.storage.store import FileStore
from eth_wallet.utils.time import to_utc_timestamp

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def _block_document(block: BlockRef) -> BlockDocument:
    return BlockDocument(number=block.number, timestamp=block.timestamp)


def _block_ref(document: BlockDocument) -> BlockRef:
    return BlockRef(number=document.number, timestamp=to_utc_timestamp(document.timestamp))


def serialize_state(state: WalletState) -> bytes:
    """Render the whole wallet as a JSON document."""
    document = WalletDocument(
        schema_version=SCHEMA_VERSION,
        private_key=state.private_key,
        last_processed_block=_block_document(state.cursor),
        transactions=[
            TransactionDocument(
                block=_block_document(record.block),
                tx_hash=record.tx_hash,
                sender=record.sender,
                recipient=record.recipient,
                amount_wei=record.amount_wei,
                fee_wei=record.fee_wei,
            )
            for record in state.ledger.records
        ],
        **state.extras,
    )
    return document.model_dump_json(indent=2).encode("utf-8")


def deserialize_state(data: bytes, path: str, signer: OfflineTransactionSigner) -> WalletState:
    """Rebuild a wallet from its JSON document, preserving record order."""
    try:
        document = WalletDocument.model_validate_json(data)
    except ValidationError as e:
        raise PersistenceError(f"Wallet document {path} is invalid: {e}") from e

    if document.schema_version > SCHEMA_VERSION:
        raise UnsupportedSchemaVersion(document.schema_version, SCHEMA_VERSION)

    records = [
        TransactionRecord(
            block=_block_ref(tx.block),
            tx_hash=tx.tx_hash,
            sender=tx.sender,
            recipient=tx.recipient,
            amount_wei=tx.amount_wei,
            fee_wei=tx.fee_wei,
        )
        for tx in document.transactions
    ]

    try:
        state = WalletState(
            private_key=document.private_key,
            signer=signer,
            cursor=_block_ref(document.last_processed_block),
            path=path,
            records=records,
            extras=document.model_extra,
        )
    except ValueError as e:
        raise PersistenceError(f"Wallet document {path} holds an unusable private key") from e

    _check_ledger(state, len(records), path)
    return state


def _check_ledger(state: WalletState, stored_count: int, path: str) -> None:
    """Refuse documents whose records break the ledger's own invariants."""
    if len(state.ledger) != stored_count:
        raise PersistenceError(f"Wallet document {path} contains duplicate transaction hashes")

    for record in state.ledger.records:
        if state.ledger.direction_of(record) is Direction.IRRELEVANT:
            raise PersistenceError(
                f"Wallet document {path} contains transaction {record.tx_hash} "
                f"that does not involve {state.owned_address}"
            )


class WalletPersistence:
    """Single-writer persistence for one wallet document."""

    def __init__(self, store: FileStore, signer: OfflineTransactionSigner):
        self.store = store
        self.signer = signer
        self._lock = threading.RLock()
        self.logger = logger.bind(component="wallet_persistence")

    def exists(self, path: str) -> bool:
        return self.store.exists(path)

    def load(self, path: str) -> Optional[WalletState]:
        """Load the wallet stored at path, or None when there is none."""
        data = self.store.read_all(path)
        if data is None:
            return None

        state = deserialize_state(data, path, self.signer)
        self.logger.info("Wallet loaded",
                         path=path,
                         address=state.owned_address,
                         cursor=state.cursor.number,
                         transactions=len(state.ledger))
        return state

    def save(self, state: WalletState) -> None:
        """Serialize the whole wallet and overwrite its document."""
        with self._lock:
            try:
                data = serialize_state(state)
            except (ValueError, TypeError) as e:
                raise PersistenceError(f"Failed to serialize wallet: {e}") from e

            try:
                self.store.write_all(state.path, data)
            except PersistenceError as e:
                self.logger.error("Failed to persist wallet", path=state.path, error=str(e))
                raise

            self.logger.debug("Wallet saved",
                              path=state.path,
                              cursor=state.cursor.number,
                              transactions=len(state.ledger))

    def mutate(self, state: WalletState, proc: Callable[[WalletState], T]) -> T:
        """
        Apply proc to the wallet and persist the result.

        Nothing is written if proc raises. Returns whatever proc returns.
        """
        with self._lock:
            result = proc(state)
            self.save(state)
            return result
