#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, account_option, network_option

from deployment.admin import set_correct_call_fee
from deployment.options import autosign_option, params_option, verify_option
from deployment.params import Deployer


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
@params_option
@verify_option
@autosign_option
def cli(network, account, params_filepath, verify, autosign):
    """Deploy a vault and its strategy, each constructed with the other's predicted address."""
    deployer = Deployer.from_yaml(
        filepath=params_filepath, verify=verify, account=account, autosign=autosign
    )
    vault, strategy = deployer.deploy_pair()

    print("\nRunning post deployment")
    chain_name = deployer.config["deployment"].get("chain")
    if chain_name:
        set_correct_call_fee(deployer, strategy, chain_name)

    deployer.finalize(deployments=[vault, strategy])


if __name__ == "__main__":
    cli()
