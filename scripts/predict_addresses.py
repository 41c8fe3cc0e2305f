#!/usr/bin/python3

import click

from deployment.networks import get_network_rpc
from deployment.options import chain_option, rpc_option, sender_option, timeout_option
from deployment.predict import PredictionError, PredictorConfig, predict_addresses


@click.command()
@sender_option
@rpc_option
@chain_option
@timeout_option
def cli(sender, rpc, chain, timeout):
    """Predict the addresses of the next two contracts deployed by a sender."""
    if not (bool(rpc) ^ bool(chain)):
        raise click.BadOptionUsage(
            option_name="--rpc",
            message=f"Provide either 'rpc' or 'chain'; got {rpc}, {chain}",
        )

    try:
        config = PredictorConfig(
            sender=sender, rpc_endpoint=rpc or get_network_rpc(chain), timeout=timeout
        )
        predicted = predict_addresses(config)
    except PredictionError as e:
        raise click.ClickException(str(e))

    print(
        f"Sender: {config.sender}",
        f"Nonce: {predicted.nonce}",
        f"Vault: {predicted.first}",
        f"Strategy: {predicted.second}",
        sep="\n",
    )


if __name__ == "__main__":
    cli()
