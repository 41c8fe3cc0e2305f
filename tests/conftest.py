from types import SimpleNamespace

import pytest
from web3 import EthereumTesterProvider, Web3

# Init code returning a runtime that always answers 42.
ANSWER_CONTRACT_BYTECODE = "0x600a600c600039600a6000f3602a60505260206050f3"

FAKE_TX_HASH = "0x" + "ab" * 32


# Utility functions
def fake_instance(name, address):
    return SimpleNamespace(address=address, contract_type=SimpleNamespace(name=name))


class FakeTransactor:
    """Stands in for deployment.params.Transactor: sends without prompting and records calls."""

    def __init__(self):
        self.transactions = list()

    def transact(self, method, *args):
        self.transactions.append((method, args))
        method(*args)
        return SimpleNamespace(txn_hash=FAKE_TX_HASH)


class FakeStrategy:
    def __init__(
        self,
        address,
        call_fee=111,
        paused=False,
        owner=None,
        panic_error=None,
        call_fee_error=None,
    ):
        self.address = address
        self._call_fee = call_fee
        self._paused = paused
        self._owner = owner or address
        self._panic_error = panic_error
        self._call_fee_error = call_fee_error

    def callFee(self):
        return self._call_fee

    def setCallFee(self, fee):
        if self._call_fee_error:
            raise self._call_fee_error
        self._call_fee = fee

    def paused(self):
        return self._paused

    def panic(self):
        if self._panic_error:
            raise self._panic_error
        self._paused = True

    def unpause(self):
        self._paused = False

    def owner(self):
        return self._owner

    def transferOwnership(self, new_owner):
        self._owner = new_owner


# Fixtures
@pytest.fixture
def w3():
    return Web3(EthereumTesterProvider())


@pytest.fixture
def sender(w3):
    return w3.eth.accounts[0]


@pytest.fixture
def deploy_contract(w3, sender):
    def _deploy(from_address=None):
        tx_hash = w3.eth.send_transaction(
            {"from": from_address or sender, "data": ANSWER_CONTRACT_BYTECODE}
        )
        receipt = w3.eth.wait_for_transaction_receipt(tx_hash)
        return receipt["contractAddress"]

    return _deploy


@pytest.fixture
def transactor():
    return FakeTransactor()
