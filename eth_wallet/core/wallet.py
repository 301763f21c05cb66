"""Main wallet orchestrator."""

from typing import Optional
import structlog

from eth_wallet.models.blockchain import BlockRef, SyncReport, TransactionRecord
from eth_wallet.models.config import WalletConfig
from eth_wallet.core.ledger import TransactionQuery
from eth_wallet.core.rpc_client import EthereumRPCClient
from eth_wallet.core.sender import TransactionSender
from eth_wallet.core.signer import OfflineTransactionSigner
from eth_wallet.core.state import WalletState
from eth_wallet.core.synchronizer import ProgressCallback, WalletSynchronizer
from eth_wallet.storage.persistence import WalletPersistence
from eth_wallet.storage.store import FileStore
from eth_wallet.utils.address import addresses_equal
from eth_wallet.utils.time import get_current_utc

logger = structlog.get_logger(__name__)


class Wallet:
    """A single-address wallet bound to one persisted document."""

    def __init__(self, config: WalletConfig, state: WalletState,
                 client: EthereumRPCClient, signer: OfflineTransactionSigner,
                 persistence: WalletPersistence):
        self.config = config
        self.state = state
        self.client = client
        self.signer = signer
        self.persistence = persistence
        self.synchronizer = WalletSynchronizer(state, persistence, config)
        self.sender = TransactionSender(state)

    @classmethod
    def load_or_create(cls, config: WalletConfig,
                       client: Optional[EthereumRPCClient] = None,
                       signer: Optional[OfflineTransactionSigner] = None,
                       store: Optional[FileStore] = None) -> "Wallet":
        """
        Load the wallet document at config.wallet_file, creating it if absent.

        A new wallet starts with its cursor at the remote tip, so it never
        scans history that predates it.
        """
        client = client or EthereumRPCClient(config)
        signer = signer or OfflineTransactionSigner(config.chain_id)
        persistence = WalletPersistence(store or FileStore(), signer)

        state = persistence.load(config.wallet_file)
        if state is None:
            state = cls._create_state(config, client, signer, persistence)

        return cls(config, state, client, signer, persistence)

    @staticmethod
    def _create_state(config: WalletConfig, client: EthereumRPCClient,
                      signer: OfflineTransactionSigner,
                      persistence: WalletPersistence) -> WalletState:
        tip = client.latest_block_number()
        tip_block = client.block_with_transactions(tip)

        # The node can briefly report its own tip as missing; the time is only for display
        if tip_block is None:
            logger.warning("Tip block unavailable, using current time for new wallet", tip=tip)
            timestamp = get_current_utc()
        else:
            timestamp = tip_block.timestamp

        state = WalletState(
            private_key=signer.generate_private_key(),
            signer=signer,
            cursor=BlockRef(number=tip, timestamp=timestamp),
            path=config.wallet_file,
        )
        persistence.save(state)

        logger.info("Created new wallet",
                    path=config.wallet_file,
                    address=state.owned_address,
                    cursor=tip)
        return state

    @property
    def address(self) -> str:
        return self.state.owned_address

    @property
    def last_processed_block(self) -> BlockRef:
        return self.state.cursor

    def synchronize(self, on_progress: Optional[ProgressCallback] = None) -> SyncReport:
        return self.synchronizer.synchronize(self.client, on_progress=on_progress)

    def fetch_balance(self) -> int:
        """Wei balance of the wallet as of the last processed block."""
        return self.sender.fetch_known_balance(self.client)

    def send(self, recipient: str, amount_wei: int, gas_price_wei: int,
             gas_limit: Optional[int] = None, nonce_override: Optional[int] = None) -> str:
        return self.sender.prepare_and_send(
            recipient,
            amount_wei,
            gas_price_wei,
            gas_limit if gas_limit is not None else self.config.default_gas_limit,
            nonce_override,
            self.client,
            self.signer,
        )

    def transactions(self, descending: bool = True) -> TransactionQuery:
        return self.state.ledger.query(descending=descending)

    def is_incoming(self, record: TransactionRecord) -> bool:
        return addresses_equal(record.recipient, self.address)

    def explorer_url(self, tx_hash: str) -> str:
        return self.config.explorer_url(tx_hash)

    def close(self):
        self.client.close()
