#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, network_option

from deployment.constants import SUPPORTED_CHAINS, VAULT_WANT_ABI
from deployment.probe import get_vault_want
from deployment.types import ChecksumAddress
from deployment.utils import contract_at


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@click.option("--vault", "-v", help="Vault address", type=ChecksumAddress(), required=True)
@click.option(
    "--chain",
    "-c",
    help="Chain whose wrapped native token is the fallback",
    type=click.Choice(SUPPORTED_CHAINS),
    required=False,
)
def cli(network, vault, chain):
    """Show the deposit token of a vault and how it was found."""
    report = get_vault_want(contract_at(vault, VAULT_WANT_ABI), chain_name=chain)
    for attempt in report.attempts:
        print(f"\t{attempt.capability}(): {attempt.outcome.value}")
    print(f"Want: {report.value} (via {report.selected.capability})")


if __name__ == "__main__":
    cli()
