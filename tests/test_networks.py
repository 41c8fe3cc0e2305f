import pytest

from deployment.constants import DEFAULT_CALL_FEE, REDUCED_CALL_FEE, SUPPORTED_CHAINS
from deployment.networks import (
    CHAINS,
    exceeds_safe_gas_price,
    get_chain,
    get_chain_by_id,
    get_network_rpc,
)


def test_all_supported_chains_are_configured():
    assert set(SUPPORTED_CHAINS) == set(CHAINS)
    chain_ids = [chain.chain_id for chain in CHAINS.values()]
    assert len(chain_ids) == len(set(chain_ids))


def test_get_chain():
    bsc = get_chain("bsc")
    assert bsc.chain_id == 56
    assert bsc.call_fee == DEFAULT_CALL_FEE
    assert get_chain("polygon").call_fee == REDUCED_CALL_FEE

    with pytest.raises(ValueError, match="Unsupported chain"):
        get_chain("ropsten")


def test_get_chain_by_id():
    assert get_chain_by_id(1285).name == "moonriver"
    assert get_chain_by_id(97).name == "testnet"
    with pytest.raises(ValueError):
        get_chain_by_id(1)


def test_default_rpc(monkeypatch):
    monkeypatch.delenv("BSC_RPC", raising=False)
    assert get_network_rpc("bsc") == "https://bsc-dataseed.binance.org/"


def test_rpc_environment_override(monkeypatch):
    monkeypatch.setenv("BSC_RPC", "https://bsc.example.org/rpc")
    assert get_network_rpc("bsc") == "https://bsc.example.org/rpc"

    # an empty variable does not clear the endpoint
    monkeypatch.setenv("BSC_RPC", "")
    assert get_network_rpc("bsc") == "https://bsc-dataseed.binance.org/"


def test_rpc_of_unknown_chain():
    with pytest.raises(ValueError):
        get_network_rpc("ropsten")


def test_safe_gas_price():
    assert not exceeds_safe_gas_price("bsc", 5_000_000_000)
    assert exceeds_safe_gas_price("bsc", 5_000_000_001)
    assert exceeds_safe_gas_price("polygon", 300_000_000_000)
    # no reference price, never flagged
    assert not exceeds_safe_gas_price("fantom", 10**15)
