#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, account_option, network_option

from deployment.admin import AdminOutcome, get_strategy, set_call_fees
from deployment.constants import SUPPORTED_CHAINS
from deployment.options import autosign_option, contracts_option
from deployment.params import Transactor


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
@contracts_option
@click.option(
    "--chain",
    "-c",
    help="Chain whose call fee the strategies should use",
    type=click.Choice(SUPPORTED_CHAINS),
    required=True,
)
@autosign_option
def cli(network, account, contract_addresses, chain, autosign):
    """Set the chain's call fee on strategies that use a different one."""
    transactor = Transactor(account, autosign=autosign)
    strategies = [get_strategy(address) for address in contract_addresses]
    results = set_call_fees(transactor, strategies, chain)

    failed = [r for r in results if r.outcome is AdminOutcome.FAILED]
    for result in failed:
        click.secho(f"Could not set the call fee of {result.address}: {result.detail}", fg="red")
    if failed:
        raise click.ClickException(
            f"{len(failed)} of {len(results)} strategies failed to update their call fee"
        )


if __name__ == "__main__":
    cli()
