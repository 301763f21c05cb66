"""Offline key management and transaction signing."""

from typing import Optional
import structlog
from eth_account import Account
from eth_utils import to_checksum_address

from eth_wallet.utils.address import addresses_equal, normalize_address

logger = structlog.get_logger(__name__)


class OfflineTransactionSigner:
    """
    Signs legacy (EIP-155) value transfers without contacting the network.

    Stateless apart from the chain id baked into every signature.
    """

    def __init__(self, chain_id: int):
        self.chain_id = chain_id
        self.logger = logger.bind(component="offline_signer")

    def generate_private_key(self) -> str:
        """Create a fresh secp256k1 key, returned as 0x-prefixed hex."""
        account = Account.create()
        return "0x" + bytes(account.key).hex()

    def address_for(self, private_key_hex: str) -> str:
        """Derive the checksummed address that owns a private key."""
        return Account.from_key(private_key_hex).address

    def sign(self, private_key_hex: str, recipient: str, amount: int, nonce: int,
             gas_price: int, gas_limit: int) -> bytes:
        """Build and sign a transfer, returning the raw RLP-encoded bytes."""
        transaction = {
            'to': to_checksum_address(normalize_address(recipient)),
            'value': amount,
            'nonce': nonce,
            'gasPrice': gas_price,
            'gas': gas_limit,
            'data': b'',
            'chainId': self.chain_id,
        }
        signed = Account.sign_transaction(transaction, private_key_hex)

        self.logger.debug("Signed transaction offline",
                          nonce=nonce,
                          tx_hash="0x" + bytes(signed.hash).hex())
        return bytes(signed.raw_transaction)

    def verify(self, signed_transaction: bytes, expected_sender: Optional[str] = None) -> bool:
        """
        Check that a signed payload decodes and carries a recoverable signature.

        When expected_sender is given, the recovered address must match it.
        """
        try:
            sender = Account.recover_transaction(signed_transaction)
        except Exception as e:
            self.logger.warning("Signed transaction failed verification", error=str(e))
            return False

        if expected_sender is not None and not addresses_equal(sender, expected_sender):
            self.logger.warning("Signed transaction recovers to an unexpected sender",
                                sender=sender,
                                expected=expected_sender)
            return False

        return True
