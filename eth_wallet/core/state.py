"""Wallet aggregate root."""

from typing import Any, Dict, Iterable, Optional

from eth_wallet.models.blockchain import BlockRef, TransactionRecord
from eth_wallet.core.ledger import TransactionLedger
from eth_wallet.core.signer import OfflineTransactionSigner


class WalletState:
    """
    Everything the wallet persists: key, cursor and known transactions.

    The owned address is always re-derived from the private key. Unknown
    fields found in a loaded document are kept in ``extras`` so that saving
    writes them back unchanged.
    """

    def __init__(self, private_key: str, signer: OfflineTransactionSigner,
                 cursor: BlockRef, path: str,
                 records: Optional[Iterable[TransactionRecord]] = None,
                 extras: Optional[Dict[str, Any]] = None):
        self._private_key = private_key
        self.owned_address = signer.address_for(private_key)
        self.path = path
        self.ledger = TransactionLedger(self.owned_address, cursor, records)
        self.extras: Dict[str, Any] = dict(extras or {})

    @property
    def private_key(self) -> str:
        return self._private_key

    @property
    def cursor(self) -> BlockRef:
        return self.ledger.cursor

    def __repr__(self) -> str:
        return (f"WalletState(address={self.owned_address!r}, "
                f"cursor={self.cursor.number}, transactions={len(self.ledger)})")
