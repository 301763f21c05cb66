"""Block and transaction parsing for JSON-RPC responses."""

from typing import Dict, Any, List, Optional, Union
import structlog

from eth_wallet.models.blockchain import BlockData, CandidateTransaction
from eth_wallet.utils.time import block_time

logger = structlog.get_logger(__name__)


def parse_quantity(value: Union[str, int, None], default: Optional[int] = None) -> Optional[int]:
    """Decode a JSON-RPC hex quantity ("0x1a") into an int."""
    if value is None:
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value[:2] in ('0x', '0X'):
        return int(value, 16) if len(value) > 2 else 0
    return int(value)


class TransactionParser:
    """Parse Ethereum blocks and extract value-transfer data."""

    def __init__(self):
        self.logger = logger.bind(component="transaction_parser")

    def parse_transaction(self, tx_data: Dict[str, Any],
                          block_number: int) -> CandidateTransaction:
        """Parse a single full transaction object from eth_getBlockByNumber."""
        return CandidateTransaction(
            tx_hash=tx_data['hash'],
            sender=tx_data['from'],
            # None for contract creation
            recipient=tx_data.get('to'),
            value_wei=parse_quantity(tx_data.get('value'), 0),
            gas=parse_quantity(tx_data.get('gas'), 0),
            gas_price_wei=parse_quantity(tx_data.get('gasPrice'), 0),
            block_number=parse_quantity(tx_data.get('blockNumber'), block_number),
        )

    def parse_block(self, block_data: Dict[str, Any]) -> BlockData:
        """
        Parse a block returned with full transaction objects.

        Transaction entries that are bare hashes (block fetched without
        transaction details) cannot be classified and raise ValueError.
        """
        block_number = parse_quantity(block_data['number'])
        mined_at = block_time(parse_quantity(block_data['timestamp']))

        transactions: List[CandidateTransaction] = []
        for tx_data in block_data.get('transactions', []):
            if not isinstance(tx_data, dict):
                raise ValueError(
                    f"Block {block_number} was fetched without full transaction objects"
                )
            transactions.append(self.parse_transaction(tx_data, block_number))

        self.logger.debug("Parsed block transactions",
                          block_number=block_number,
                          tx_count=len(transactions))

        return BlockData(
            number=block_number,
            timestamp=mined_at,
            transactions=transactions,
            block_hash=block_data.get('hash'),
        )
