#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, account_option, network_option

from deployment.admin import AdminOutcome, get_strategy, transfer_ownership
from deployment.options import autosign_option, contracts_option
from deployment.params import Transactor
from deployment.types import ChecksumAddress


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
@contracts_option
@click.option(
    "--new-owner",
    "-o",
    help="Address receiving ownership of every contract",
    type=ChecksumAddress(),
    required=True,
)
@autosign_option
def cli(network, account, contract_addresses, new_owner, autosign):
    """Transfer ownership of a batch of contracts."""
    transactor = Transactor(account, autosign=autosign)
    contracts = [get_strategy(address) for address in contract_addresses]
    results = transfer_ownership(transactor, contracts, new_owner)
    if any(r.outcome is AdminOutcome.FAILED for r in results):
        raise click.ClickException("Some ownership transfers failed")


if __name__ == "__main__":
    cli()
