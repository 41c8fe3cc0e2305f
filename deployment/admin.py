from enum import Enum
from typing import Iterable, List, NamedTuple, Optional

from ape.contracts import ContractInstance
from ape.exceptions import TransactionError
from eth_typing import ChecksumAddress
from eth_utils import is_address, to_checksum_address

from deployment.constants import STRATEGY_ADMIN_ABI
from deployment.networks import get_chain
from deployment.params import Transactor
from deployment.probe import REVERT_ERRORS
from deployment.utils import contract_at

TRANSACTION_ERRORS = (TransactionError, *REVERT_ERRORS)


class AdminOutcome(Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


class AdminResult(NamedTuple):
    address: ChecksumAddress
    action: str
    outcome: AdminOutcome
    detail: Optional[str] = None


def get_strategy(address: ChecksumAddress) -> ContractInstance:
    return contract_at(address, STRATEGY_ADMIN_ABI)


def set_correct_call_fee(
    transactor: Transactor, strategy: ContractInstance, chain_name: str
) -> AdminResult:
    """Sets the strategy call fee to the one expected on the chain, if it differs."""
    expected_call_fee = get_chain(chain_name).call_fee
    current_call_fee = strategy.callFee()
    if current_call_fee == expected_call_fee:
        return AdminResult(strategy.address, "setCallFee", AdminOutcome.SKIPPED, "already set")
    print(f"Setting call fee to '{expected_call_fee}'")
    transactor.transact(strategy.setCallFee, expected_call_fee)
    return AdminResult(strategy.address, "setCallFee", AdminOutcome.SUCCESS)


def set_call_fees(
    transactor: Transactor, strategies: Iterable[ContractInstance], chain_name: str
) -> List[AdminResult]:
    get_chain(chain_name)
    return _run_batch(
        "setCallFee",
        strategies,
        lambda strategy: set_correct_call_fee(transactor, strategy, chain_name),
    )


def unpause_if_paused(transactor: Transactor, strategy: ContractInstance) -> AdminResult:
    if not strategy.paused():
        return AdminResult(strategy.address, "unpause", AdminOutcome.SKIPPED, "not paused")
    transactor.transact(strategy.unpause)
    return AdminResult(strategy.address, "unpause", AdminOutcome.SUCCESS)


def _run_batch(action: str, contracts: Iterable[ContractInstance], step) -> List[AdminResult]:
    """Runs an action over many contracts; a reverting contract does not stop the batch."""
    results = list()
    for contract in contracts:
        try:
            result = step(contract)
        except TRANSACTION_ERRORS as e:
            result = AdminResult(contract.address, action, AdminOutcome.FAILED, str(e))
        print(f"{action} {contract.address}: {result.outcome.value}")
        results.append(result)
    return results


def panic_strategies(
    transactor: Transactor, strategies: Iterable[ContractInstance]
) -> List[AdminResult]:
    def _panic(strategy: ContractInstance) -> AdminResult:
        if strategy.paused():
            return AdminResult(strategy.address, "panic", AdminOutcome.SKIPPED, "already paused")
        receipt = transactor.transact(strategy.panic)
        return AdminResult(strategy.address, "panic", AdminOutcome.SUCCESS, receipt.txn_hash)

    return _run_batch("panic", strategies, _panic)


def transfer_ownership(
    transactor: Transactor, contracts: Iterable[ContractInstance], new_owner: str
) -> List[AdminResult]:
    if not isinstance(new_owner, str) or not is_address(new_owner):
        raise ValueError(f"Malformed new owner address '{new_owner}'.")
    new_owner = to_checksum_address(new_owner)

    def _transfer(contract: ContractInstance) -> AdminResult:
        if to_checksum_address(contract.owner()) == new_owner:
            return AdminResult(contract.address, "transferOwnership", AdminOutcome.SKIPPED)
        receipt = transactor.transact(contract.transferOwnership, new_owner)
        return AdminResult(
            contract.address, "transferOwnership", AdminOutcome.SUCCESS, receipt.txn_hash
        )

    return _run_batch("transferOwnership", contracts, _transfer)
