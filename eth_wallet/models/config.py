"""Configuration management using Pydantic settings."""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings


class WalletConfig(BaseSettings):
    """Configuration for the single-address wallet client."""

    # Remote node JSON-RPC Settings
    rpc_url: str = Field(default="https://ethereum-sepolia-rpc.publicnode.com",
                         description="Ethereum JSON-RPC endpoint")
    rpc_timeout: int = Field(default=30, description="RPC timeout in seconds")
    rpc_retry_attempts: int = Field(default=3, description="Attempts per RPC call on transport failure")
    rpc_retry_delay: float = Field(default=2.0, description="Delay between RPC retries in seconds")
    chain_id: int = Field(default=11155111, description="EIP-155 chain id used when signing")

    # Wallet Settings
    wallet_file: str = Field(default="wallet.json", description="Path of the persisted wallet document")
    explorer_tx_url: str = Field(default="https://sepolia.etherscan.io/tx/{tx_hash}",
                                 description="Block explorer URL template for transactions")

    # Transaction Defaults
    default_gas_price_gwei: int = Field(default=40, description="Default gas price in Gwei")
    default_gas_limit: int = Field(default=21000, description="Gas allowance for plain value transfers")

    # Sync Settings
    sync_missing_block_retries: int = Field(default=0, description="Re-fetch attempts for a block the node reports missing")
    sync_missing_block_retry_delay: float = Field(default=1.0, description="Delay between missing block re-fetches in seconds")

    # Logging Settings
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="text", description="Log format (json|text)")
    log_file: Optional[str] = Field(default="logs/eth_wallet.log", description="Log file path")
    log_max_size_mb: int = Field(default=10, description="Max log file size in MB")
    log_backup_count: int = Field(default=5, description="Number of log backups")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "WALLET_"
        case_sensitive = False

    def explorer_url(self, tx_hash: str) -> str:
        """Build the block explorer link for a transaction hash."""
        return self.explorer_tx_url.format(tx_hash=tx_hash)
