#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, account_option, network_option

from deployment.admin import AdminOutcome, get_strategy, panic_strategies
from deployment.options import autosign_option, contracts_option
from deployment.params import Transactor


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
@contracts_option
@autosign_option
def cli(network, account, contract_addresses, autosign):
    """Panic a batch of strategies; already paused strategies are skipped."""
    transactor = Transactor(account, autosign=autosign)
    strategies = [get_strategy(address) for address in contract_addresses]
    results = panic_strategies(transactor, strategies)

    failed = [r for r in results if r.outcome is AdminOutcome.FAILED]
    for result in failed:
        click.secho(f"Could not panic {result.address}: {result.detail}", fg="red")
    if failed:
        raise click.ClickException(f"{len(failed)} of {len(results)} strategies failed to panic")


if __name__ == "__main__":
    cli()
