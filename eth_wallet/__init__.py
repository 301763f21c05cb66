"""
Ethereum Single-Address Wallet

Keeps a persisted local view of one account's transaction history,
synchronizes it block by block with a remote JSON-RPC node, and signs
transfers offline before submitting them.
"""

__version__ = "1.0.0"
__author__ = "Wallet Engineering Team"
__description__ = "Single-address Ethereum wallet with incremental block synchronization"

from eth_wallet.core.wallet import Wallet
from eth_wallet.core.rpc_client import EthereumRPCClient
from eth_wallet.core.signer import OfflineTransactionSigner
from eth_wallet.models.config import WalletConfig

__all__ = [
    "Wallet",
    "EthereumRPCClient",
    "OfflineTransactionSigner",
    "WalletConfig",
]
