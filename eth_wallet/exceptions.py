"""Wallet error taxonomy."""

from typing import Optional


class WalletError(Exception):
    """Base class for every error surfaced by the wallet core."""
    pass


class InvalidInput(WalletError):
    """Malformed address or amount supplied by a caller."""
    pass


class InvalidRecipient(InvalidInput):
    """Recipient is not a 20-byte hex address."""

    def __init__(self, recipient: str):
        super().__init__(f"Invalid recipient address: {recipient!r}")
        self.recipient = recipient


class InvalidAmount(InvalidInput):
    """Amount cannot be represented in the base unit."""
    pass


class TransportError(WalletError):
    """Remote call failed at the network or protocol layer."""

    def __init__(self, message: str, method: Optional[str] = None):
        super().__init__(message)
        self.method = method


class InsufficientFunds(WalletError):
    """Known balance does not cover amount plus maximum fee."""

    def __init__(self, required_wei: int, available_wei: int):
        super().__init__(
            f"Transaction may require {required_wei} wei but only {available_wei} wei is available"
        )
        self.required_wei = required_wei
        self.available_wei = available_wei


class SigningIntegrityError(WalletError):
    """Signed payload failed self-verification and was not submitted."""
    pass


class PersistenceError(WalletError):
    """Wallet state could not be read from or written to its store."""
    pass


class UnsupportedSchemaVersion(PersistenceError):
    """Persisted document was written by a newer schema."""

    def __init__(self, found: int, supported: int):
        super().__init__(
            f"Wallet document schema version {found} is newer than supported version {supported}"
        )
        self.found = found
        self.supported = supported
