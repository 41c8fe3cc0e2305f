from pathlib import Path

import click

from deployment.constants import RPC_REQUEST_TIMEOUT, SUPPORTED_CHAINS
from deployment.types import ChecksumAddress, MinInt, RpcEndpoint

chain_option = click.option(
    "--chain",
    "-c",
    help="Chain name; used to look up the RPC endpoint and chain settings.",
    type=click.Choice(SUPPORTED_CHAINS),
    required=False,
)

sender_option = click.option(
    "--sender",
    "-s",
    help="Deployer account whose next contract addresses are predicted.",
    type=ChecksumAddress(),
    required=True,
)

rpc_option = click.option(
    "--rpc",
    "-r",
    help="JSON-RPC endpoint; use instead of --chain.",
    type=RpcEndpoint(),
    required=False,
)

timeout_option = click.option(
    "--timeout",
    "-t",
    help="RPC request timeout in seconds.",
    type=MinInt(1),
    default=RPC_REQUEST_TIMEOUT,
    show_default=True,
)

params_option = click.option(
    "--params",
    "-p",
    "params_filepath",
    help="Deployment parameters YAML file.",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    required=True,
)

verify_option = click.option(
    "--verify/--no-verify",
    help="Publish the deployed contracts to the block explorer.",
    default=False,
)

autosign_option = click.option(
    "--autosign",
    help="Sign transactions without asking for confirmation.",
    is_flag=True,
    default=False,
)

contracts_option = click.option(
    "--contract",
    "-a",
    "contract_addresses",
    help="Address of a contract to act on; may be repeated.",
    type=ChecksumAddress(),
    multiple=True,
    required=True,
)
