"""
Ordered capability checks against contracts of unknown vintage.

Older vaults expose their deposit token as ``token()``, newer ones as ``want()``,
and some expose neither. Instead of nesting try/except blocks, a probe walks an
explicit list of capabilities and records a typed outcome for each attempt.
"""
from enum import Enum
from typing import Any, List, NamedTuple, Optional, Sequence

from ape.exceptions import ContractLogicError as ApeContractLogicError
from eth_utils import to_checksum_address
from web3.exceptions import BadFunctionCallOutput
from web3.exceptions import ContractLogicError as Web3ContractLogicError

from deployment.networks import get_chain

# A call that reached the contract and failed there; anything else propagates.
REVERT_ERRORS = (ApeContractLogicError, Web3ContractLogicError, BadFunctionCallOutput)


class ProbeOutcome(Enum):
    FOUND = "found"
    MISSING = "missing"
    REVERTED = "reverted"
    FALLBACK = "fallback"


class Capability(NamedTuple):
    name: str
    method: str


class ProbeResult(NamedTuple):
    capability: str
    outcome: ProbeOutcome
    value: Any = None


class ProbeReport(NamedTuple):
    selected: ProbeResult
    attempts: List[ProbeResult]

    @property
    def value(self) -> Any:
        return self.selected.value


class CapabilityNotFound(Exception):
    """Raised when no capability is supported and there is no fallback."""


FALLBACK_CAPABILITY = "fallback"

WANT_CAPABILITIES = (
    Capability(name="token", method="token"),
    Capability(name="want", method="want"),
)


def probe_capability(contract, capability: Capability) -> ProbeResult:
    method = getattr(contract, capability.method, None)
    if method is None:
        return ProbeResult(capability=capability.name, outcome=ProbeOutcome.MISSING)
    try:
        value = method()
    except REVERT_ERRORS:
        return ProbeResult(capability=capability.name, outcome=ProbeOutcome.REVERTED)
    return ProbeResult(capability=capability.name, outcome=ProbeOutcome.FOUND, value=value)


def probe_capabilities(
    contract, capabilities: Sequence[Capability], fallback: Optional[Any] = None
) -> ProbeReport:
    """Returns the first supported capability in order, or the fallback value."""
    attempts = list()
    for capability in capabilities:
        result = probe_capability(contract, capability)
        attempts.append(result)
        if result.outcome is ProbeOutcome.FOUND:
            return ProbeReport(selected=result, attempts=attempts)

    if fallback is None:
        tried = ", ".join(f"{r.capability}={r.outcome.value}" for r in attempts)
        raise CapabilityNotFound(f"No supported capability on {contract} ({tried}).")

    selected = ProbeResult(
        capability=FALLBACK_CAPABILITY, outcome=ProbeOutcome.FALLBACK, value=fallback
    )
    return ProbeReport(selected=selected, attempts=attempts)


def get_vault_want(vault, chain_name: Optional[str] = None) -> ProbeReport:
    """Finds the deposit token of a vault, defaulting to the chain's wrapped native token."""
    fallback = None
    if chain_name:
        wrapped_native = get_chain(chain_name).wrapped_native
        fallback = to_checksum_address(wrapped_native) if wrapped_native else None
    report = probe_capabilities(vault, WANT_CAPABILITIES, fallback=fallback)
    if report.selected.outcome is ProbeOutcome.FOUND:
        found = report.selected._replace(value=to_checksum_address(report.value))
        report = report._replace(selected=found)
    return report
