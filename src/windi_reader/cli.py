"""windi CLI: offline verification, hashing, shelf strings and remote checks."""
import json
import logging
import sys

import anyio
import click

from . import __version__
from .client import ClientSettings, WindiVerifyClient
from .errors import WindiError
from .fields import build_payment_shelves, shelf_fingerprints
from .hashing import sha256_urn_from_file
from .policy import decide
from .summary import format_result_summary
from .verify import VerificationStatus, VerifyOptions, verify_document


def print_json(data: dict) -> None:
    click.echo(json.dumps(data, indent=2, sort_keys=True))


def print_error(message: str) -> None:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool):
    """WINDI reader: verify governed documents without sharing their content."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--strict", is_flag=True, help="Treat a broken chain link as INVALID.")
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON.")
def verify(file: str, strict: bool, as_json: bool):
    """Verify FILE against its embedded Virtue Receipt (offline)."""
    result = verify_document(file, VerifyOptions(strict=strict))

    if as_json:
        print_json(result.to_dict())
    else:
        color = "green" if result.verified else (
            "yellow" if result.status == VerificationStatus.NO_GOVERNANCE else "red"
        )
        click.echo(click.style(format_result_summary(result), fg=color))
        for error in result.errors:
            click.echo(f"  error: {error}")
        for warning in result.warnings:
            click.echo(f"  warning: {warning}")

    sys.exit(0 if result.verified else 1)


@cli.command(name="hash")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def hash_file(file: str):
    """Print the sha256 URN of FILE."""
    click.echo(sha256_urn_from_file(file))


@cli.command()
@click.option("--iban", help="Beneficiary IBAN")
@click.option("--amount", help="Payment amount, any common notation")
@click.option("--currency", help="Currency code, symbol or name")
@click.option("--beneficiary", help="Beneficiary name")
@click.option("--reference", help="End-to-end reference")
def shelf(iban, amount, currency, beneficiary, reference):
    """Print canonical shelf strings and their fingerprints."""
    shelves = build_payment_shelves(
        iban=iban,
        amount=amount,
        currency=currency,
        beneficiary=beneficiary,
        reference=reference,
    )
    if not shelves:
        print_error("No payment fields given")
        sys.exit(2)

    for value, fingerprint in shelf_fingerprints(shelves).items():
        click.echo(f"{fingerprint}  {value}")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--document-id", required=True, help="WINDI document identifier")
@click.option("--issuer-key-id", required=True, help="WINDI issuer key identifier")
@click.option("--manifest-id", default=None, help="Optional manifest reference")
@click.option("--proof-level", type=click.Choice(["L1", "L2", "L3"]), default="L2", show_default=True)
@click.option("--amount-eur", type=float, default=None, help="Payment amount for a policy decision")
def remote(file, document_id, issuer_key_id, manifest_id, proof_level, amount_eur):
    """Verify FILE by hash against the remote API (WINDI_BASE_URL, WINDI_API_KEY)."""

    async def run():
        async with WindiVerifyClient.from_settings(ClientSettings.from_env()) as client:
            return await client.verify_from_file(
                file,
                document_id=document_id,
                issuer_key_id=issuer_key_id,
                manifest_id=manifest_id,
                proof_level=proof_level,
            )

    try:
        response = anyio.run(run)
    except WindiError as e:
        print_error(e.message)
        sys.exit(2)

    output = {"verify": response.to_dict()}
    if amount_eur is not None:
        output["decision"] = decide(amount_eur, response).to_dict()
    print_json(output)
    sys.exit(0 if response.verdict == "VALID" else 1)


if __name__ == "__main__":
    cli()
