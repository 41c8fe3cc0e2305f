import click
import pytest
from click.testing import CliRunner

from deployment.predict import NetworkError, PredictedAddresses, compute_contract_address
from deployment.types import MinInt
from scripts import deploy_vault_clone, predict_addresses

SENDER = "0x6ac7ea33f8831ea9dcc53393aaa88b25a785dbf0"
RPC = "https://rpc.example.org"


@pytest.fixture
def requests_made(monkeypatch):
    configs = list()

    def fake_predict(config):
        configs.append(config)
        return PredictedAddresses(
            nonce=2,
            first=compute_contract_address(config.sender, 2),
            second=compute_contract_address(config.sender, 3),
        )

    monkeypatch.setattr(predict_addresses, "predict_addresses", fake_predict)
    return configs


def test_predict_with_rpc(requests_made):
    result = CliRunner().invoke(predict_addresses.cli, ["--sender", SENDER, "--rpc", RPC])

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[1] == "Nonce: 2"
    assert lines[2].lower() == "vault: 0xf778b86fa74e846c4f0a1fbd1335fe81c00a0c91"
    assert lines[3].lower() == "strategy: 0xfffd933a0bc612844eaf0c6fe3e5b8e9b6c1d19c"

    (config,) = requests_made
    assert config.rpc_endpoint == RPC
    assert config.timeout == 30


def test_predict_with_chain(requests_made, monkeypatch):
    monkeypatch.setenv("MOONRIVER_RPC", RPC)
    result = CliRunner().invoke(
        predict_addresses.cli, ["-s", SENDER, "-c", "moonriver", "-t", "5"]
    )

    assert result.exit_code == 0, result.output
    (config,) = requests_made
    assert config.rpc_endpoint == RPC
    assert config.timeout == 5


@pytest.mark.parametrize(
    "args",
    [
        ["--sender", SENDER],
        ["--sender", SENDER, "--rpc", RPC, "--chain", "bsc"],
        ["--sender", "0x1234", "--rpc", RPC],
        ["--sender", SENDER, "--rpc", "ws://127.0.0.1:8546"],
        ["--sender", SENDER, "--rpc", RPC, "--timeout", "0"],
        ["--rpc", RPC],
    ],
)
def test_usage_errors(requests_made, args):
    result = CliRunner().invoke(predict_addresses.cli, args)
    assert result.exit_code == 2
    assert requests_made == []


def test_network_error(monkeypatch):
    def unreachable(config):
        raise NetworkError("Could not fetch the transaction count")

    monkeypatch.setattr(predict_addresses, "predict_addresses", unreachable)
    result = CliRunner().invoke(predict_addresses.cli, ["--sender", SENDER, "--rpc", RPC])

    assert result.exit_code == 1
    assert "Could not fetch the transaction count" in result.output
    assert "Vault:" not in result.output


@pytest.mark.parametrize("value", ["--5", "-", "5s", "", "0", "-3", None])
def test_timeout_must_be_a_positive_integer(value):
    with pytest.raises(click.BadParameter):
        MinInt(1).convert(value, None, None)


def test_timeout_conversion():
    assert MinInt(1).convert("5", None, None) == 5
    assert MinInt(1).convert(" 12 ", None, None) == 12
    assert MinInt(1).convert(30, None, None) == 30


def test_clone_help_states_clones_are_not_recorded():
    result = CliRunner().invoke(deploy_vault_clone.cli, ["--help"])
    assert result.exit_code == 0, result.output
    assert "not recorded in the deployment registry" in " ".join(result.output.split())
