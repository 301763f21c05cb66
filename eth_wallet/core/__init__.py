"""Core wallet components."""

from eth_wallet.core.ledger import TransactionLedger
from eth_wallet.core.rpc_client import EthereumRPCClient
from eth_wallet.core.signer import OfflineTransactionSigner
from eth_wallet.core.state import WalletState
from eth_wallet.core.transaction_parser import TransactionParser

__all__ = [
    "TransactionLedger",
    "EthereumRPCClient",
    "OfflineTransactionSigner",
    "WalletState",
    "TransactionParser",
]
