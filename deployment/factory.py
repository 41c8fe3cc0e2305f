from typing import NamedTuple

from ape.contracts import ContractInstance
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address

from deployment.constants import VAULT_FACTORY_ABI
from deployment.params import Transactor
from deployment.utils import contract_at


class ClonedPair(NamedTuple):
    vault: ChecksumAddress
    strategy: ChecksumAddress


def get_vault_factory(address: ChecksumAddress) -> ContractInstance:
    return contract_at(address, VAULT_FACTORY_ABI)


def _clone(transactor: Transactor, method, *args) -> ChecksumAddress:
    """Learns the clone address with a static call, then sends the cloning transaction."""
    address = to_checksum_address(method.call(*args))
    receipt = transactor.transact(method, *args)
    print(f"Clone {address} deployed with tx: {receipt.txn_hash}")
    return address


def clone_vault_and_strategy(
    transactor: Transactor, factory: ContractInstance, strategy_implementation: ChecksumAddress
) -> ClonedPair:
    """
    Clones an uninitialized vault and strategy through a vault factory.
    Unlike plain deployments, the addresses come from the factory, not from the deployer's nonce.
    """
    strategy_implementation = to_checksum_address(strategy_implementation)
    vault = _clone(transactor, factory.cloneVault)
    strategy = _clone(transactor, factory.cloneContract, strategy_implementation)
    return ClonedPair(vault=vault, strategy=strategy)
