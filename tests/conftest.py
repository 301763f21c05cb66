"""Pytest configuration and fixtures for wallet tests."""

from datetime import datetime, timezone, timedelta
from typing import Dict, List, Optional, Set

import pytest

from eth_wallet.exceptions import TransportError
from eth_wallet.models.blockchain import BlockData, BlockRef, CandidateTransaction
from eth_wallet.models.config import WalletConfig
from eth_wallet.core.signer import OfflineTransactionSigner
from eth_wallet.core.state import WalletState
from eth_wallet.storage.persistence import WalletPersistence
from eth_wallet.storage.store import FileStore


# ============================================================================
# CONSTANTS
# ============================================================================

TEST_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
OTHER_ADDRESS = "0x" + "ab" * 20
THIRD_ADDRESS = "0x" + "cd" * 20
GENESIS_TIME = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def block_time(number: int) -> datetime:
    """Deterministic 12-second block spacing."""
    return GENESIS_TIME + timedelta(seconds=12 * number)


def make_tx(tx_hash: str, sender: str, recipient: Optional[str], value: int = 1000,
            gas: int = 21, gas_price: int = 1) -> CandidateTransaction:
    return CandidateTransaction(
        tx_hash=tx_hash,
        sender=sender,
        recipient=recipient,
        value_wei=value,
        gas=gas,
        gas_price_wei=gas_price,
    )


def make_block(number: int, transactions: Optional[List[CandidateTransaction]] = None) -> BlockData:
    return BlockData(number=number, timestamp=block_time(number), transactions=transactions or [])


# ============================================================================
# FAKE REMOTE LEDGER
# ============================================================================

class FakeLedgerClient:
    """In-memory stand-in for the JSON-RPC client."""

    def __init__(self, tip: int = 100):
        self.tip = tip
        self.blocks: Dict[int, BlockData] = {}
        self.missing: Set[int] = set()
        self.failing: Set[int] = set()
        self.balances: Dict[int, int] = {}
        self.default_balance = 0
        self.pending_count = 0
        self.submitted: List[bytes] = []
        self.fetched: List[int] = []
        self.submit_error: Optional[Exception] = None
        self.closed = False

    def latest_block_number(self) -> int:
        return self.tip

    def block_with_transactions(self, number: int) -> Optional[BlockData]:
        self.fetched.append(number)
        if number in self.failing:
            raise TransportError(f"connection reset while fetching {number}",
                                 method="eth_getBlockByNumber")
        if number in self.missing:
            return None
        return self.blocks.get(number) or make_block(number)

    def transaction_count(self, address: str, pending: bool = True) -> int:
        return self.pending_count

    def balance(self, address: str, at_block: Optional[int] = None) -> int:
        return self.balances.get(at_block, self.default_balance)

    def submit_raw_transaction(self, raw_transaction: bytes) -> str:
        if self.submit_error is not None:
            raise self.submit_error
        self.submitted.append(raw_transaction)
        return "0x" + "ee" * 32

    def close(self):
        self.closed = True


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def signer():
    return OfflineTransactionSigner(chain_id=1337)


@pytest.fixture
def wallet_path(tmp_path):
    return str(tmp_path / "wallet.json")


@pytest.fixture
def config(wallet_path):
    return WalletConfig(
        wallet_file=wallet_path,
        rpc_url="http://localhost:8545",
        rpc_retry_attempts=2,
        rpc_retry_delay=0,
        chain_id=1337,
        sync_missing_block_retry_delay=0,
        log_file=None,
    )


@pytest.fixture
def state(signer, wallet_path):
    """Wallet with cursor at block 100 and an empty ledger."""
    return WalletState(
        private_key=TEST_PRIVATE_KEY,
        signer=signer,
        cursor=BlockRef(number=100, timestamp=block_time(100)),
        path=wallet_path,
    )


@pytest.fixture
def owned(state):
    return state.owned_address


@pytest.fixture
def persistence(signer):
    return WalletPersistence(FileStore(), signer)


@pytest.fixture
def client():
    return FakeLedgerClient(tip=100)
