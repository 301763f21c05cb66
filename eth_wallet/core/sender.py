"""Nonce resolution, affordability check and offline-signed submission."""

from typing import Optional
import structlog

from eth_wallet.exceptions import (
    InsufficientFunds, InvalidAmount, InvalidRecipient, SigningIntegrityError
)
from eth_wallet.core.rpc_client import EthereumRPCClient
from eth_wallet.core.signer import OfflineTransactionSigner
from eth_wallet.core.state import WalletState
from eth_wallet.utils.address import is_valid_address

logger = structlog.get_logger(__name__)


def max_fee(gas_price_wei: int, gas_limit: int) -> int:
    """Most the network can charge for a transaction: gas price times gas allowance."""
    return gas_price_wei * gas_limit


class TransactionSender:
    """
    Prepares and submits transfers from the owned address.

    Submission never touches the ledger: a sent transaction becomes known
    locally only once a later synchronization finds it in a mined block.
    """

    def __init__(self, state: WalletState):
        self.state = state
        self.logger = logger.bind(component="transaction_sender")

    def resolve_nonce(self, client: EthereumRPCClient, nonce_override: Optional[int] = None) -> int:
        """Use the override when given, otherwise the pending transaction count."""
        if nonce_override is not None:
            if nonce_override < 0:
                raise InvalidAmount(f"Nonce must not be negative: {nonce_override}")
            self.logger.debug("Using nonce override", nonce=nonce_override)
            return nonce_override

        nonce = client.transaction_count(self.state.owned_address, pending=True)
        self.logger.debug("Resolved nonce from pending transaction count", nonce=nonce)
        return nonce

    def fetch_known_balance(self, client: EthereumRPCClient) -> int:
        """Balance of the owned address as of the last processed block."""
        return client.balance(self.state.owned_address, self.state.cursor.number)

    def check_affordability(self, client: EthereumRPCClient, amount_wei: int,
                            gas_price_wei: int, gas_limit: int) -> int:
        """
        Raise InsufficientFunds when amount plus maximum fee exceeds the
        balance known at the cursor. Returns the maximum spend.

        Advisory only: the remote balance may have changed since the cursor.
        """
        max_spend = max_fee(gas_price_wei, gas_limit) + amount_wei
        balance = self.fetch_known_balance(client)

        if max_spend > balance:
            self.logger.warning("Transaction may require more ETH than available",
                                max_spend=max_spend,
                                balance=balance,
                                cursor=self.state.cursor.number)
            raise InsufficientFunds(required_wei=max_spend, available_wei=balance)

        return max_spend

    def prepare_and_send(self, recipient: str, amount_wei: int, gas_price_wei: int,
                         gas_limit: int, nonce_override: Optional[int],
                         client: EthereumRPCClient,
                         signer: OfflineTransactionSigner) -> str:
        """
        Sign a transfer offline and submit it.

        Returns the transaction hash reported by the node. A transport
        failure on submission discards the signed payload; retrying needs a
        fresh nonce resolution.
        """
        if not is_valid_address(recipient):
            raise InvalidRecipient(recipient)
        for name, value in (("amount", amount_wei), ("gas price", gas_price_wei),
                            ("gas limit", gas_limit)):
            if value < 0:
                raise InvalidAmount(f"The {name} must not be negative: {value}")

        nonce = self.resolve_nonce(client, nonce_override)
        self.check_affordability(client, amount_wei, gas_price_wei, gas_limit)

        signed = signer.sign(
            self.state.private_key,
            recipient,
            amount_wei,
            nonce,
            gas_price_wei,
            gas_limit,
        )

        if not signer.verify(signed, expected_sender=self.state.owned_address):
            raise SigningIntegrityError("Failed to create a valid offline transaction")

        self.logger.info("Submitting transaction",
                         recipient=recipient,
                         amount_wei=amount_wei,
                         nonce=nonce,
                         gas_price_wei=gas_price_wei,
                         gas_limit=gas_limit)

        tx_hash = client.submit_raw_transaction(signed)

        self.logger.info("Transaction submitted", tx_hash=tx_hash, nonce=nonce)
        return tx_hash
