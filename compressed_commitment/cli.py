"""
Command-Line Interface for compressed Pedersen commitments

Generates, inspects and uses commitment parameters stored on disk.
"""

import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from compressed_commitment import __version__
from compressed_commitment.commitment.config import (
    CommitmentSettings,
    load_config_file,
    resolve_settings,
)
from compressed_commitment.commitment.exceptions import CommitmentError
from compressed_commitment.commitment.group import get_group
from compressed_commitment.commitment.layout import WindowLayout
from compressed_commitment.commitment.pedersen.compressed import (
    PedersenCompressedCommitment,
)
from compressed_commitment.commitment.security import (
    RandomnessSource,
    SeededRandomness,
)


def _fail(exc: Exception) -> None:
    click.echo(
        click.style(f"✗ {type(exc).__name__}: {exc}", fg="red"), err=True
    )
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', is_flag=True, help='Enable debug logging')
def main(verbose):
    """
    Compressed Pedersen commitment tool.

    ⚠️  DRAFT - requires crypto review before production use
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


@main.command()
@click.option(
    '--out',
    'out_path',
    type=click.Path(dir_okay=False),
    required=True,
    help='Destination file for the parameters'
)
@click.option(
    '--seed',
    type=str,
    help='Hex seed for deterministic parameters (testing only)'
)
@click.option(
    '--config',
    'config_path',
    type=click.Path(exists=True, dir_okay=False),
    help='YAML file with curve, num_windows and window_size'
)
@click.option('--curve', type=str, help='Curve name (default: secp256k1)')
@click.option('--num-windows', type=int, help='Number of message windows')
@click.option('--window-size', type=int, help='Bits per window')
def setup(out_path, seed, config_path, curve, num_windows, window_size):
    """
    Generate parameters and store them.

    Examples:

        # Fresh parameters with the default layout
        compressed-commitment setup --out params.cbor

        # Reproducible parameters for tests
        compressed-commitment setup --out params.cbor --seed 00ff
    """
    try:
        if config_path:
            base = load_config_file(config_path)
            settings = CommitmentSettings(
                curve=base.curve if curve is None else curve,
                num_windows=base.num_windows if num_windows is None else num_windows,
                window_size=base.window_size if window_size is None else window_size,
            )
        else:
            settings = resolve_settings(curve, num_windows, window_size)

        if seed is not None:
            try:
                rng = SeededRandomness(bytes.fromhex(seed))
            except ValueError as exc:
                raise click.BadParameter(str(exc), param_hint="--seed")
            click.echo(
                click.style(
                    "⚠️  Seeded parameters are reproducible by anyone with the seed",
                    fg="yellow",
                ),
                err=True,
            )
        else:
            rng = RandomnessSource()

        scheme = PedersenCompressedCommitment.setup(
            rng=rng,
            group=get_group(settings.curve),
            layout=WindowLayout(settings.num_windows, settings.window_size),
        )
        scheme.store(out_path)
    except CommitmentError as exc:
        _fail(exc)

    click.echo(click.style(f"✓ Parameters written to {out_path}", fg="green"))
    click.echo(f"Fingerprint: {scheme.parameters.fingerprint()}")


@main.command()
@click.option(
    '--params',
    'params_path',
    type=click.Path(dir_okay=False),
    required=True,
    help='Parameters file written by setup'
)
@click.option('--message', type=str, help='UTF-8 message to commit to')
@click.option('--message-hex', type=str, help='Hex-encoded message to commit to')
@click.option(
    '--randomness',
    type=str,
    help='Blinding scalar (decimal or 0x-prefixed hex); random if omitted'
)
@click.option(
    '--with-parity',
    is_flag=True,
    help='Also print the y parity of the commitment point'
)
def commit(params_path, message, message_hex, randomness, with_parity):
    """Commit to a message and print the x-coordinate."""
    if (message is None) == (message_hex is None):
        raise click.UsageError("Give exactly one of --message or --message-hex")

    try:
        payload = (
            message.encode("utf-8") if message is not None
            else bytes.fromhex(message_hex)
        )
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--message-hex")

    try:
        scheme = PedersenCompressedCommitment.load(params_path)
        blinding = _parse_scalar(randomness, scheme.group.order)

        if with_parity:
            output, parity = scheme.commit_with_parity(payload, blinding)
        else:
            output, parity = scheme.commit(payload, blinding), None
    except CommitmentError as exc:
        _fail(exc)

    click.echo(f"commitment: {output.hex()}")
    if parity is not None:
        click.echo(f"y_parity: {parity}")
    if randomness is None:
        click.echo(f"randomness: {blinding}")


@main.command()
@click.option(
    '--params',
    'params_path',
    type=click.Path(dir_okay=False),
    required=True,
    help='Parameters file written by setup'
)
def inspect(params_path):
    """Validate a parameters file and show its layout."""
    try:
        scheme = PedersenCompressedCommitment.load(params_path)
    except CommitmentError as exc:
        _fail(exc)

    params = scheme.parameters
    table = Table(title="Commitment Parameters")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("curve", params.group.name)
    table.add_row("num_windows", str(params.layout.num_windows))
    table.add_row("window_size", str(params.layout.window_size))
    table.add_row("capacity_bytes", str(params.layout.capacity_bytes))
    table.add_row("fingerprint", params.fingerprint())
    Console().print(table)


@main.command()
def version():
    """Show version information."""
    click.echo(f"\nCompressed Pedersen Commitment Tool v{__version__}")
    click.echo("Draft - requires crypto review before production use\n")


def _parse_scalar(value: Optional[str], order: int) -> int:
    if value is None:
        return RandomnessSource().get_random_scalar_mod_order(order)
    try:
        return int(value, 0)
    except ValueError:
        raise click.BadParameter(
            f"{value!r} is not an integer", param_hint="--randomness"
        )


if __name__ == "__main__":
    main()
