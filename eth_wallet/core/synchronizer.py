"""Incremental synchronization of the local ledger with the remote chain."""

import time
from typing import Callable, Optional
import structlog

from eth_wallet.exceptions import TransportError
from eth_wallet.models.blockchain import BlockData, SyncReport
from eth_wallet.models.config import WalletConfig
from eth_wallet.core.rpc_client import EthereumRPCClient
from eth_wallet.core.state import WalletState
from eth_wallet.storage.persistence import WalletPersistence

logger = structlog.get_logger(__name__)

# (block_number, tip, completion fraction in [0, 1])
ProgressCallback = Callable[[int, int, float], None]


def completion_fraction(current: int, start: int, tip: int) -> float:
    """Share of the catch-up range processed once block `current` is done."""
    if tip <= start:
        return 1.0
    return (current - start) / (tip - start)


class WalletSynchronizer:
    """
    Walks the chain from the wallet's cursor to the remote tip.

    The cursor block itself is re-scanned on every run so a block whose
    merge was interrupted before it was persisted gets completed. Each
    merged block is persisted before the next one is fetched.
    """

    def __init__(self, state: WalletState, persistence: WalletPersistence,
                 config: WalletConfig):
        self.state = state
        self.persistence = persistence
        self.config = config
        self.logger = logger.bind(component="wallet_synchronizer")

    def synchronize(self, client: EthereumRPCClient,
                    on_progress: Optional[ProgressCallback] = None) -> SyncReport:
        """
        Catch up with the remote chain.

        TransportError from the client aborts the run immediately; blocks
        merged before the failure stay persisted. A block the node reports
        missing stops the run without advancing past it.
        """
        tip = client.latest_block_number()
        start = self.state.cursor.number

        self.logger.debug("Max known block", number=tip)
        self.logger.debug("Latest processed block", number=start)
        self.logger.info("Starting wallet synchronization",
                         start_block=start,
                         tip_block=tip,
                         catchup_delta=tip - start)

        report = SyncReport(start_block=start, tip_block=tip)

        for number in range(start, tip + 1):
            block = self._fetch_block(client, number)

            if block is None:
                self.logger.warning("Block not found on remote node, stopping synchronization",
                                    block_number=number,
                                    cursor=self.state.cursor.number)
                report.stalled_at = number
                return report

            if block.number != number:
                raise TransportError(
                    f"Requested block {number} but the node returned block {block.number}",
                    method="eth_getBlockByNumber",
                )

            result = self.persistence.mutate(
                self.state,
                lambda state: state.ledger.merge_block(block.ref, block.transactions),
            )

            report.blocks_merged += 1
            report.transactions_added += result.added
            report.transactions_skipped += result.skipped

            fraction = completion_fraction(number, start, tip)
            self.logger.info("Processed block",
                             block_number=number,
                             max_known=tip,
                             percentage=f"{fraction * 100.0:.2f}%",
                             added=result.added)
            if on_progress is not None:
                on_progress(number, tip, fraction)

        self.logger.info("Wallet synchronization completed",
                         start_block=start,
                         tip_block=tip,
                         blocks_merged=report.blocks_merged,
                         transactions_added=report.transactions_added)
        return report

    def _fetch_block(self, client: EthereumRPCClient, number: int) -> Optional[BlockData]:
        """Fetch a block, re-asking a configured number of times if it is reported missing."""
        block = client.block_with_transactions(number)
        retries = self.config.sync_missing_block_retries

        while block is None and retries > 0:
            retries -= 1
            self.logger.debug("Retrying missing block",
                              block_number=number,
                              retries_left=retries)
            time.sleep(self.config.sync_missing_block_retry_delay)
            block = client.block_with_transactions(number)

        return block
