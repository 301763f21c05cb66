"""Ethereum JSON-RPC client for remote ledger access."""

import json
import time
from typing import Dict, Any, Optional, List
import requests
import structlog

from eth_wallet.exceptions import TransportError
from eth_wallet.models.config import WalletConfig
from eth_wallet.models.blockchain import BlockData
from eth_wallet.core.transaction_parser import TransactionParser, parse_quantity

logger = structlog.get_logger(__name__)


class EthereumRPCClient:
    """Ethereum JSON-RPC client with retry logic and error handling."""

    def __init__(self, config: WalletConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()
        self.session.headers.update({
            'Content-Type': 'application/json',
            'User-Agent': 'eth-wallet/1.0.0'
        })
        self.rpc_url = config.rpc_url
        self.parser = TransactionParser()
        self._request_id = 0

        logger.info("Ethereum RPC client initialized", url=self.rpc_url)

    def _make_request(self, method: str, params: List[Any] = None) -> Any:
        """Make RPC request with retry logic."""
        if params is None:
            params = []

        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params
        }

        attempts = max(1, self.config.rpc_retry_attempts)
        for attempt in range(attempts):
            try:
                response = self.session.post(
                    self.rpc_url,
                    json=payload,
                    timeout=self.config.rpc_timeout
                )
                response.raise_for_status()

                data = response.json()
                break

            except (requests.RequestException, json.JSONDecodeError) as e:
                logger.warning("RPC request failed",
                               method=method,
                               attempt=attempt + 1,
                               error=str(e))

                if attempt == attempts - 1:
                    raise TransportError(
                        f"RPC request {method} failed after {attempts} attempts: {e}",
                        method=method,
                    ) from e

                time.sleep(self.config.rpc_retry_delay)

        if not isinstance(data, dict):
            raise TransportError(f"Malformed RPC response for {method}", method=method)

        if data.get('error') is not None:
            error = data['error']
            error_msg = error.get('message', 'Unknown RPC error') if isinstance(error, dict) else str(error)
            error_code = error.get('code', -1) if isinstance(error, dict) else -1
            raise TransportError(f"RPC Error {error_code}: {error_msg}", method=method)

        return data.get('result')

    def _request_quantity(self, method: str, params: List[Any] = None) -> int:
        """Make a request whose result must be a non-negative hex quantity."""
        result = self._make_request(method, params)
        if result is None:
            raise TransportError(f"{method} returned no result", method=method)

        try:
            value = parse_quantity(result)
        except (ValueError, TypeError) as e:
            raise TransportError(f"{method} returned a malformed quantity: {result!r}",
                                 method=method) from e

        if value < 0:
            raise TransportError(f"{method} returned a negative quantity: {result!r}", method=method)
        return value

    def latest_block_number(self) -> int:
        """Get the current tip block number (eth_blockNumber)."""
        return self._request_quantity("eth_blockNumber")

    def block_with_transactions(self, number: int) -> Optional[BlockData]:
        """
        Get a block with full transaction objects.

        Returns None when the node reports that the block does not exist.
        """
        result = self._make_request("eth_getBlockByNumber", [hex(number), True])
        if result is None:
            logger.debug("Block not found on remote node", block_number=number)
            return None

        try:
            return self.parser.parse_block(result)
        except (KeyError, ValueError, TypeError) as e:
            raise TransportError(
                f"Malformed block {number} in RPC response: {e}",
                method="eth_getBlockByNumber",
            ) from e

    def transaction_count(self, address: str, pending: bool = True) -> int:
        """Get the number of transactions sent from an address."""
        tag = "pending" if pending else "latest"
        return self._request_quantity("eth_getTransactionCount", [address, tag])

    def balance(self, address: str, at_block: Optional[int] = None) -> int:
        """Get the wei-denominated balance of an address at a block."""
        block_param = hex(at_block) if at_block is not None else "latest"
        return self._request_quantity("eth_getBalance", [address, block_param])

    def submit_raw_transaction(self, raw_transaction: bytes) -> str:
        """Broadcast a signed transaction and return its hash."""
        method = "eth_sendRawTransaction"
        tx_hash = self._make_request(method, ["0x" + bytes(raw_transaction).hex()])
        if not isinstance(tx_hash, str) or not tx_hash:
            raise TransportError(f"{method} returned no transaction hash: {tx_hash!r}", method=method)
        return tx_hash

    def test_connection(self) -> bool:
        """Test RPC connection."""
        try:
            number = self.latest_block_number()
            logger.info("RPC connection successful", latest_block=number)
            return True
        except TransportError as e:
            logger.error("RPC connection failed", error=str(e))
            return False

    def close(self):
        """Close the RPC session."""
        self.session.close()
        logger.info("RPC client session closed")
