import pytest
from eth_utils import to_checksum_address
from requests.exceptions import ConnectionError
from web3.exceptions import ContractLogicError

from deployment.networks import get_chain
from deployment.probe import (
    WANT_CAPABILITIES,
    Capability,
    CapabilityNotFound,
    ProbeOutcome,
    get_vault_want,
    probe_capabilities,
    probe_capability,
)

USDT = "0xb44a9b6905af7c801311e8f4e76932ee959c663c"
WMOVR = get_chain("moonriver").wrapped_native


class LegacyVault:
    def token(self):
        return USDT


class ModernVault:
    def want(self):
        return USDT


class RevertingTokenVault:
    def token(self):
        raise ContractLogicError("execution reverted")

    def want(self):
        return USDT


class NativeVault:
    def token(self):
        raise ContractLogicError("execution reverted")


class OfflineVault:
    def token(self):
        raise ConnectionError("node is down")


def test_missing_method():
    result = probe_capability(ModernVault(), Capability(name="token", method="token"))
    assert result.outcome is ProbeOutcome.MISSING
    assert result.value is None


def test_reverting_method():
    result = probe_capability(NativeVault(), Capability(name="token", method="token"))
    assert result.outcome is ProbeOutcome.REVERTED


def test_first_capability_wins():
    report = probe_capabilities(LegacyVault(), WANT_CAPABILITIES)
    assert report.selected.capability == "token"
    assert report.selected.outcome is ProbeOutcome.FOUND
    assert report.value == USDT
    assert len(report.attempts) == 1


def test_second_capability_after_missing():
    report = probe_capabilities(ModernVault(), WANT_CAPABILITIES)
    assert [a.outcome for a in report.attempts] == [ProbeOutcome.MISSING, ProbeOutcome.FOUND]
    assert report.selected.capability == "want"


def test_second_capability_after_revert():
    report = probe_capabilities(RevertingTokenVault(), WANT_CAPABILITIES)
    assert [a.outcome for a in report.attempts] == [ProbeOutcome.REVERTED, ProbeOutcome.FOUND]
    assert report.value == USDT


def test_fallback():
    report = probe_capabilities(NativeVault(), WANT_CAPABILITIES, fallback=WMOVR)
    assert report.selected.outcome is ProbeOutcome.FALLBACK
    assert report.value == WMOVR
    assert [a.outcome for a in report.attempts] == [ProbeOutcome.REVERTED, ProbeOutcome.MISSING]


def test_no_capability_and_no_fallback():
    with pytest.raises(CapabilityNotFound, match="token=reverted, want=missing"):
        probe_capabilities(NativeVault(), WANT_CAPABILITIES)


def test_network_errors_are_not_swallowed():
    with pytest.raises(ConnectionError):
        probe_capabilities(OfflineVault(), WANT_CAPABILITIES, fallback=WMOVR)


def test_vault_want_is_checksummed():
    report = get_vault_want(LegacyVault())
    assert report.value == to_checksum_address(USDT)
    assert report.value != USDT


def test_vault_want_falls_back_to_wrapped_native():
    report = get_vault_want(NativeVault(), chain_name="moonriver")
    assert report.selected.outcome is ProbeOutcome.FALLBACK
    assert report.value.lower() == WMOVR.lower()


def test_vault_want_without_chain():
    with pytest.raises(CapabilityNotFound):
        get_vault_want(NativeVault())
