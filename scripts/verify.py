#!/usr/bin/python3

from pathlib import Path

import click
from ape import networks
from ape.cli import ConnectedProviderCommand, network_option

from deployment.registry import contracts_from_registry
from deployment.utils import check_etherscan_plugin, registry_filepath_from_name, verify_contracts


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@click.option(
    "--registry-name",
    "-n",
    help="Name of a registry in deployment/artifacts, e.g. moo-sushi-eth-usdt",
    type=click.STRING,
    required=False,
)
@click.option(
    "--registry-filepath",
    "-f",
    help="Path of a registry kept elsewhere",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    required=False,
)
@click.option(
    "--contract-name",
    "-c",
    "contract_names",
    help="Contract to verify; defaults to every contract of the registry on this chain",
    multiple=True,
)
def cli(network, registry_name, registry_filepath, contract_names):
    """Publish the source of registered contracts to the block explorer."""
    if bool(registry_name) == bool(registry_filepath):
        raise click.BadOptionUsage(
            option_name="--registry-name",
            message="Provide exactly one of --registry-name or --registry-filepath.",
        )
    check_etherscan_plugin()

    registry_filepath = registry_filepath or registry_filepath_from_name(name=registry_name)
    chain_id = networks.provider.network.chain_id
    contracts = contracts_from_registry(registry_filepath, chain_id=chain_id)

    missing = set(contract_names) - set(contracts)
    if missing:
        raise click.ClickException(
            f"{', '.join(sorted(missing))} not recorded in {registry_filepath} for chain {chain_id}"
        )

    selected = [contracts[name] for name in contract_names] or list(contracts.values())
    verify_contracts(selected)


if __name__ == "__main__":
    cli()
