#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, account_option, network_option

from deployment.factory import clone_vault_and_strategy, get_vault_factory
from deployment.options import autosign_option, params_option
from deployment.params import Deployer
from deployment.utils import get_contract_container


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
@params_option
@autosign_option
def cli(network, account, params_filepath, autosign):
    """Clone a vault and strategy through the vault factory, then initialize both.

    Clones are not recorded in the deployment registry; the factory's clone
    events are their record.
    """
    deployer = Deployer.from_yaml(
        filepath=params_filepath, verify=False, account=account, autosign=autosign
    )
    if not deployer.pair_names:
        raise click.UsageError(f"'pair' is not set in {params_filepath}")
    vault_name, strategy_name = deployer.pair_names

    factory = get_vault_factory(deployer.constants.VAULT_FACTORY)
    pair = clone_vault_and_strategy(
        deployer, factory, deployer.constants.STRATEGY_IMPLEMENTATION
    )
    deployer.pair.bind(vault=pair.vault, strategy=pair.strategy)

    vault = get_contract_container(vault_name).at(pair.vault)
    strategy = get_contract_container(strategy_name).at(pair.strategy)
    deployer.initialize(vault)
    deployer.initialize(strategy)

    print(f"\nVault: {vault.address}", f"Strategy: {strategy.address}", sep="\n")


if __name__ == "__main__":
    cli()
