"""
Sequestre CLI.

Usage:
    sequestre derive --initializer ADDR --beneficiary ADDR --release-at WHEN
    sequestre to-base AMOUNT [--decimals N]
    sequestre hold --keypair PATH --beneficiary ADDR --amount AMOUNT --release-at WHEN
    sequestre release --keypair PATH --initializer ADDR --beneficiary ADDR --release-at WHEN

WHEN is a local date-time (2026-07-01T11:00) or unix seconds.
"""

import asyncio
import sys

import click

from sequestre.config.settings import get_settings, load_config
from sequestre.di.container import Container
from sequestre.domain.exceptions import (
    EscrowClientException,
    InvalidAddressException,
    TransactionException,
    is_user_actionable,
)
from sequestre.infrastructure.blockchain.address_derivation import derive_token_account
from sequestre.infrastructure.wallet import KeypairWallet
from sequestre.utils.amounts import base_units_to_decimal, decimal_to_base_units
from sequestre.utils.timestamps import (
    local_datetime_to_unix_seconds,
    unix_seconds_to_local_datetime,
)


def parse_release_at(value: str) -> int:
    """Unix seconds from either raw seconds or a local date-time."""
    value = value.strip()
    if value.lstrip("-").isdigit():
        return int(value)
    try:
        return local_datetime_to_unix_seconds(value)
    except ValueError as e:
        raise click.BadParameter(f"Not a date-time or unix seconds: {value}") from e


def _fail(error: EscrowClientException) -> None:
    click.echo(f"Error ({type(error).__name__}): {error.message}", err=True)
    if isinstance(error, TransactionException) and error.logs:
        click.echo("Program logs:", err=True)
        for line in error.logs:
            click.echo(f"  {line}", err=True)
    if not is_user_actionable(error):
        click.echo("Restarting the flow will not help; check configuration and inputs.", err=True)
    sys.exit(1)


async def _run_hold(container, wallet, beneficiary, amount_base, release_ts, via_api):
    try:
        if via_api:
            use_case = container.server_assisted_hold()
        else:
            use_case = container.hold_funds()
        return await use_case.execute(
            wallet=wallet,
            initializer=wallet.public_key,
            beneficiary=beneficiary,
            amount_base=amount_base,
            release_ts=release_ts,
        )
    finally:
        await container.close()


async def _run_release(container, wallet, initializer, beneficiary, release_ts, via_api):
    try:
        if via_api:
            return await container.server_assisted_release().execute(
                initializer, beneficiary, release_ts
            )
        return await container.release_funds().execute(
            wallet=wallet,
            initializer=initializer,
            beneficiary=beneficiary,
            release_ts=release_ts,
        )
    finally:
        await container.close()


@click.group()
@click.option("--config", "-c", default=None, help="Config file (in config/)")
@click.pass_context
def cli(ctx, config):
    """Sequestre - time-locked escrow client."""
    ctx.obj = load_config(config) if config else get_settings()


@cli.command()
@click.option("--initializer", required=True, help="Initializer address")
@click.option("--beneficiary", required=True, help="Beneficiary address")
@click.option("--release-at", required=True, help="Release time")
@click.pass_obj
def derive(settings, initializer, beneficiary, release_at):
    """Print escrow, vault and token accounts of a booking."""
    container = Container(settings)
    release_ts = parse_release_at(release_at)

    hold_funds = container.hold_funds()
    try:
        key = hold_funds.escrow_key(initializer, beneficiary, release_ts)
        accounts = hold_funds.preview(initializer, beneficiary, release_ts)
    except EscrowClientException as e:
        _fail(e)

    try:
        beneficiary_ata = str(derive_token_account(key.beneficiary, key.mint))
    except InvalidAddressException:
        beneficiary_ata = "none (off-curve owner)"

    click.echo(f"release_ts:        {release_ts} ({unix_seconds_to_local_datetime(release_ts)})")
    click.echo(f"escrow:            {accounts.escrow} (bump {accounts.bump})")
    click.echo(f"vault:             {accounts.vault}")
    click.echo(f"initializer ATA:   {accounts.initializer_token_account}")
    click.echo(f"beneficiary ATA:   {beneficiary_ata}")


@cli.command("to-base")
@click.argument("amount")
@click.option("--decimals", type=int, default=None, help="Token decimals")
@click.pass_obj
def to_base(settings, amount, decimals):
    """Convert a decimal amount to base units."""
    decimals = settings.usdc_decimals if decimals is None else decimals
    try:
        base = decimal_to_base_units(amount, decimals)
    except ValueError as e:
        raise click.BadParameter(f"Not a decimal amount: {amount}") from e
    click.echo(f"{base} ({base_units_to_decimal(base, decimals)})")


@cli.command()
@click.option("--keypair", required=True, help="Initializer keypair JSON")
@click.option("--beneficiary", required=True, help="Beneficiary address")
@click.option("--amount", required=True, help="Decimal amount, e.g. 120.5")
@click.option("--release-at", required=True, help="Release time")
@click.option("--via-api", is_flag=True, help="Use the server-assisted escrow API")
@click.pass_obj
def hold(settings, keypair, beneficiary, amount, release_at, via_api):
    """Hold funds in a new escrow."""
    container = Container(settings)
    wallet = KeypairWallet.from_file(keypair)
    release_ts = parse_release_at(release_at)

    try:
        amount_base = decimal_to_base_units(amount, container.program.decimals)
    except ValueError as e:
        raise click.BadParameter(f"Not a decimal amount: {amount}") from e
    except EscrowClientException as e:
        _fail(e)

    try:
        signature = asyncio.run(
            _run_hold(container, wallet, beneficiary, amount_base, release_ts, via_api)
        )
    except EscrowClientException as e:
        _fail(e)

    click.echo(f"Held {amount} until {unix_seconds_to_local_datetime(release_ts)}")
    click.echo(f"Signature: {signature}")


@cli.command()
@click.option("--keypair", required=True, help="Payer keypair JSON")
@click.option("--initializer", required=True, help="Initializer address")
@click.option("--beneficiary", required=True, help="Beneficiary address")
@click.option("--release-at", required=True, help="Release time of the escrow")
@click.option("--via-api", is_flag=True, help="Let the escrow API sign and submit")
@click.pass_obj
def release(settings, keypair, initializer, beneficiary, release_at, via_api):
    """Release an escrow to its beneficiary."""
    container = Container(settings)
    wallet = KeypairWallet.from_file(keypair)
    release_ts = parse_release_at(release_at)

    try:
        signature = asyncio.run(
            _run_release(container, wallet, initializer, beneficiary, release_ts, via_api)
        )
    except EscrowClientException as e:
        _fail(e)

    click.echo(f"Released. Signature: {signature}")


if __name__ == "__main__":
    cli()
