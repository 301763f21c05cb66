"""Command-line interface for the wallet."""

import sys
from decimal import Decimal
from typing import Optional
import click
import structlog

from eth_wallet.exceptions import InsufficientFunds, WalletError
from eth_wallet.models.config import WalletConfig
from eth_wallet.core.sender import max_fee
from eth_wallet.core.wallet import Wallet
from eth_wallet.utils.address import is_valid_address
from eth_wallet.utils.logging import setup_logging
from eth_wallet.utils.time import format_local
from eth_wallet.utils.units import eth_to_wei, gwei_to_wei, wei_to_eth

logger = structlog.get_logger(__name__)


def _open_wallet(ctx) -> Wallet:
    config = ctx.obj['config']
    try:
        return Wallet.load_or_create(config)
    except WalletError as e:
        click.echo(f"❌ Failed to open wallet: {e}", err=True)
        sys.exit(1)


def _print_header(wallet: Wallet) -> None:
    cursor = wallet.last_processed_block
    click.echo()
    click.echo("=" * 45)
    click.echo()
    click.echo(f"Address: {wallet.address}")
    click.echo(f"Balance: {wei_to_eth(wallet.fetch_balance())} ETH (at block {cursor.number})")
    click.echo()
    click.echo(f"\tBalance and transactions were last updated at {format_local(cursor.timestamp)}")
    click.echo()


def _run_sync(wallet: Wallet) -> None:
    click.echo("🔄 Synchronizing wallet with the network...")

    def on_progress(number: int, tip: int, fraction: float) -> None:
        click.echo(f"Processing block {number} / {tip} ({fraction * 100.0:.2f}%)")

    report = wallet.synchronize(on_progress=on_progress)

    click.echo(f"📊 Blocks merged: {report.blocks_merged}")
    click.echo(f"📊 New transactions: {report.transactions_added}")
    if report.reached_tip:
        click.echo(f"✅ Synchronized up to block {report.tip_block}")
    else:
        click.echo(f"⚠️  Block {report.stalled_at} is not available on the remote node; "
                   f"stopped at block {wallet.last_processed_block.number}")


def _print_transactions(wallet: Wallet) -> None:
    click.echo("Transaction history: ")

    for tx in wallet.transactions():
        click.echo()
        incoming = wallet.is_incoming(tx)

        if incoming:
            click.echo("RECEIVED: ")
            click.echo(f"\tFrom: {tx.sender}")
        else:
            click.echo("SENT: ")
            click.echo(f"\tTo: {tx.recipient}")

        click.echo(f"\tHash: {tx.tx_hash}")
        click.echo(f"\tTime: {format_local(tx.block.timestamp)}")
        click.echo(f"\tAmount (without fee): {tx.amount_eth} ETH")
        # The sender pays the fee, so only show it for our own transactions
        if not incoming:
            click.echo(f"\tPaid transaction fee: {tx.fee_eth} ETH")
        click.echo()
        click.echo("\tSee this transaction on the block explorer:")
        click.echo(f"\t{wallet.explorer_url(tx.tx_hash)}")
        click.echo()


def _run_send(wallet: Wallet, recipient: str, amount_eth: Decimal, gas_price_gwei: int,
              gas_limit: int, nonce: Optional[int], assume_yes: bool) -> None:
    amount_wei = eth_to_wei(amount_eth)
    gas_price_wei = gwei_to_wei(gas_price_gwei)
    max_fee_eth = wei_to_eth(max_fee(gas_price_wei, gas_limit))

    click.echo()
    click.echo("Do you want to send this transaction?")
    click.echo(f"\tFrom: {wallet.address}")
    click.echo(f"\tTo: {recipient}")
    click.echo(f"\tAmount: {amount_eth} ETH")
    click.echo(f"\tMax fee: {max_fee_eth} ETH")
    click.echo(f"\tNonce: {nonce if nonce is not None else '<automatic>'}")
    click.echo()

    if not assume_yes and not click.confirm("Send", default=False):
        click.echo("Transaction cancelled")
        return

    click.echo("Sending... ", nl=False)
    try:
        tx_hash = wallet.send(recipient, amount_wei, gas_price_wei, gas_limit, nonce)
    except InsufficientFunds:
        click.echo("SORRY! I can not send this transaction:")
        click.echo("\tThis transaction may require more ETH than you have.")
        click.echo("\tIf you think this is an error, try re-synchronizing the wallet.")
        raise

    click.echo("done.")
    click.echo()
    click.echo("You can see your transaction status at:")
    click.echo(f"\t{wallet.explorer_url(tx_hash)}")
    click.echo()


class EtherAmount(click.ParamType):
    """Decimal ether amount."""

    name = "amount"

    def convert(self, value, param, ctx):
        if isinstance(value, Decimal):
            return value
        try:
            return Decimal(str(value).strip())
        except ArithmeticError:
            self.fail(f"{value!r} is not a decimal amount", param, ctx)


def _parse_optional_int(value: str) -> Optional[int]:
    if not value.strip():
        return None
    try:
        return int(value)
    except ValueError:
        raise click.BadParameter(f"{value!r} is not an integer")


def _validate_recipient(ctx, param, value):
    if value is not None and not is_valid_address(value):
        raise click.BadParameter("expected a 20-byte hex address")
    return value


@click.group()
@click.option('--config-file', '-c', type=click.Path(exists=True),
              help='Path to configuration file')
@click.option('--wallet-file', '-w', type=click.Path(dir_okay=False),
              help='Path to the wallet document (overrides configuration)')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, config_file: Optional[str], wallet_file: Optional[str], verbose: bool):
    """Single-address Ethereum wallet CLI."""
    ctx.ensure_object(dict)

    try:
        if config_file:
            config = WalletConfig(_env_file=config_file)
        else:
            config = WalletConfig()

        if wallet_file:
            config.wallet_file = wallet_file

        ctx.obj['config'] = config

    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)

    setup_logging(config, verbose=verbose)


@cli.command()
@click.pass_context
def sync(ctx):
    """Synchronize the wallet with the remote node."""
    wallet = _open_wallet(ctx)

    try:
        _run_sync(wallet)
    except WalletError as e:
        click.echo(f"❌ Synchronization failed: {e}", err=True)
        sys.exit(1)
    finally:
        wallet.close()


@cli.command()
@click.pass_context
def transactions(ctx):
    """List locally known transactions, newest block first."""
    wallet = _open_wallet(ctx)
    try:
        _print_transactions(wallet)
    finally:
        wallet.close()


@cli.command()
@click.option('--to', 'recipient', prompt='Recipient (hex notation)',
              callback=_validate_recipient, help='Recipient address')
@click.option('--amount', type=EtherAmount(), prompt='Amount (in ETH)', help='Amount in ETH')
@click.option('--gas-price', type=int, default=None, help='Gas price in Gwei')
@click.option('--gas-limit', type=int, default=None, help='Gas allowance')
@click.option('--nonce', type=int, default=None, help='Nonce override (default: automatic)')
@click.option('--yes', '-y', 'assume_yes', is_flag=True, help='Do not ask for confirmation')
@click.pass_context
def send(ctx, recipient: str, amount: Decimal, gas_price: Optional[int],
         gas_limit: Optional[int], nonce: Optional[int], assume_yes: bool):
    """Sign a transfer offline and submit it."""
    config = ctx.obj['config']
    wallet = _open_wallet(ctx)

    try:
        _run_send(
            wallet,
            recipient,
            amount,
            gas_price if gas_price is not None else config.default_gas_price_gwei,
            gas_limit if gas_limit is not None else config.default_gas_limit,
            nonce,
            assume_yes,
        )
    except WalletError as e:
        click.echo(f"❌ FAILED: {e}", err=True)
        sys.exit(1)
    finally:
        wallet.close()


@cli.command()
@click.pass_context
def status(ctx):
    """Show address, balance and last processed block."""
    wallet = _open_wallet(ctx)

    try:
        _print_header(wallet)
        click.echo(f"Known transactions: {len(wallet.state.ledger)}")
    except WalletError as e:
        click.echo(f"❌ Failed to get status: {e}", err=True)
        sys.exit(1)
    finally:
        wallet.close()


@cli.command()
@click.pass_context
def menu(ctx):
    """Interactive menu: synchronize, send, list transactions, quit."""
    config = ctx.obj['config']
    wallet = _open_wallet(ctx)
    choices = ["Synchronize", "Send transaction", "List transactions", "Quit"]

    try:
        while True:
            try:
                _print_header(wallet)
            except WalletError as e:
                click.echo(f"⚠️  Balance unavailable: {e}")

            for index, choice in enumerate(choices):
                click.echo(f"{index}) {choice}")
            click.echo()

            selected = choices[click.prompt("Choice", type=click.IntRange(0, len(choices) - 1))]

            try:
                if selected == "Synchronize":
                    _run_sync(wallet)
                elif selected == "Send transaction":
                    recipient = click.prompt("Recipient (hex notation)",
                                             value_proc=lambda v: _validate_recipient(None, None, v))
                    amount = click.prompt("Amount (in ETH)", type=EtherAmount())
                    gas_price = click.prompt("Gas price (in Gwei)", type=int,
                                             default=config.default_gas_price_gwei)
                    nonce = click.prompt("Nonce override (empty == automatic)", default="",
                                         show_default=False, value_proc=_parse_optional_int)
                    _run_send(wallet, recipient, amount, gas_price,
                              config.default_gas_limit, nonce, assume_yes=False)
                elif selected == "List transactions":
                    _print_transactions(wallet)
                else:
                    break
            except WalletError as e:
                click.echo(f"FAILED: {e}")
                logger.error("Menu action failed", action=selected, error=str(e))
    finally:
        wallet.close()


@cli.command()
def version():
    """Show version information."""
    from eth_wallet import __version__, __description__

    click.echo(f"Ethereum Wallet v{__version__}")
    click.echo(__description__)


if __name__ == '__main__':
    cli()
