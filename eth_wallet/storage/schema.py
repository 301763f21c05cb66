"""Persisted wallet document schema."""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_serializer

SCHEMA_VERSION = 1


class BlockDocument(BaseModel):
    """Block number and mining time."""

    number: int = Field(..., ge=0, description="Block number")
    timestamp: datetime = Field(..., description="Block timestamp (UTC)")


class TransactionDocument(BaseModel):
    """One known transaction."""

    block: BlockDocument
    tx_hash: str = Field(..., description="Transaction hash (hex)")
    sender: str = Field(..., description="Sender address (hex)")
    recipient: Optional[str] = Field(default=None, description="Recipient address (hex)")
    amount_wei: int = Field(..., ge=0, description="Amount sent, excluding fee")
    fee_wei: int = Field(..., ge=0, description="Gas allowance times gas price")

    @field_serializer('amount_wei', 'fee_wei')
    def serialize_wei(self, value: int) -> str:
        """Wei values are written as decimal strings to survive any JSON reader."""
        return str(value)


class WalletDocument(BaseModel):
    """
    The whole wallet as one self-describing document.

    Unknown top-level fields are accepted and exposed through
    ``model_extra`` so they can be written back on the next save.
    """

    model_config = ConfigDict(extra="allow")

    schema_version: int = Field(default=SCHEMA_VERSION, ge=1, description="Document schema version")
    private_key: str = Field(..., description="Owned private key (hex)")
    last_processed_block: BlockDocument
    transactions: List[TransactionDocument] = Field(default_factory=list)
