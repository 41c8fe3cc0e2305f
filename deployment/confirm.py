from collections import OrderedDict

import click
from ape.utils import ZERO_ADDRESS

from deployment.predict import PredictedAddresses


def _confirm(message: str) -> None:
    """Asks the user to confirm; aborts the deployment otherwise."""
    if not click.confirm(message, default=True):
        print("Aborting deployment!")
        raise click.Abort()


def _continue() -> None:
    _confirm("Continue?")


def _confirm_resolution(resolved_params: OrderedDict, contract_name: str) -> None:
    """Asks the user to confirm the resolved constructor parameters for a single contract."""
    if len(resolved_params) == 0:
        print(f"\n(i) No constructor parameters for {contract_name}")
        _confirm(f"Deploy {contract_name}?")
        return

    print(f"\nConstructor parameters for {contract_name}")
    contains_zero_address = False
    for name, resolved_value in resolved_params.items():
        print(f"\t{name}={resolved_value}")
        contains_zero_address = contains_zero_address or resolved_value == ZERO_ADDRESS
    _confirm(f"Deploy {contract_name}?")
    if contains_zero_address:
        _confirm("Zero Address detected for deployment parameter; Continue?")


def _confirm_prediction(predicted: PredictedAddresses) -> None:
    print(
        f"\nPredicted addresses at nonce {predicted.nonce}",
        f"\tvault={predicted.first}",
        f"\tstrategy={predicted.second}",
        "Do not send any other transaction from this account until both are deployed.",
        sep="\n",
    )
    _continue()
