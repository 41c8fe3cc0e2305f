"""
Predicts the addresses of contracts a sender has not deployed yet.

A contract created by a plain transaction (or the CREATE opcode) lands at
``keccak256(rlp([sender, nonce]))[12:]``. Deployment scripts use this to wire a
vault and its strategy together: the vault is constructed with the address the
strategy *will* have, and the strategy with the vault's.

The prediction only holds while the sender sends nothing else between the nonce
lookup and the two deployments; deploy from a dedicated account and one
deployment at a time.
"""
from typing import NamedTuple

import rlp
from eth_typing import ChecksumAddress
from eth_utils import is_address, keccak, to_canonical_address, to_checksum_address
from requests.exceptions import RequestException
from rlp.exceptions import RLPException
from web3 import Web3
from web3.exceptions import Web3Exception

from deployment.constants import PENDING_BLOCK, RPC_REQUEST_TIMEOUT


class PredictionError(Exception):
    """Base class for address prediction failures."""


class InvalidInputError(PredictionError, ValueError):
    """Raised when the sender, nonce or endpoint is malformed."""


class NetworkError(PredictionError):
    """Raised when the sender's transaction count cannot be fetched."""


class EncodingError(PredictionError):
    """Raised when the creation preimage cannot be RLP-encoded."""


class PredictedAddresses(NamedTuple):
    """Addresses of the next two contracts created by a sender."""

    nonce: int
    first: ChecksumAddress
    second: ChecksumAddress


class PredictorConfig:
    """
    Where and for whom to predict.
    Both values are mandatory, there is no default deployer or endpoint.
    """

    def __init__(self, sender: str, rpc_endpoint: str, timeout: int = RPC_REQUEST_TIMEOUT):
        self.sender = validate_sender(sender)
        if not rpc_endpoint or not isinstance(rpc_endpoint, str):
            raise InvalidInputError("An RPC endpoint is required to predict addresses.")
        self.rpc_endpoint = rpc_endpoint
        self.timeout = timeout

    def __repr__(self) -> str:
        return f"PredictorConfig(sender={self.sender}, rpc_endpoint={self.rpc_endpoint})"


def validate_sender(sender: str) -> ChecksumAddress:
    """Returns the checksummed sender, or raises if it is not a valid address."""
    if not isinstance(sender, str) or not is_address(sender):
        raise InvalidInputError(f"Malformed sender address '{sender}'.")
    return to_checksum_address(sender)


def _validate_nonce(nonce: int) -> int:
    if isinstance(nonce, bool) or not isinstance(nonce, int) or nonce < 0:
        raise InvalidInputError(f"Nonce must be a non-negative integer, got {nonce!r}.")
    return nonce


def encode_creation_preimage(sender: str, nonce: int) -> bytes:
    """
    RLP-encodes ``[sender, nonce]``.

    Integers are encoded as their minimal big-endian bytes, so nonce 0
    becomes the empty string (``0x80``) rather than a single zero byte.
    """
    sender = validate_sender(sender)
    nonce = _validate_nonce(nonce)
    try:
        return rlp.encode([to_canonical_address(sender), nonce])
    except RLPException as e:
        raise EncodingError(f"Cannot encode creation preimage for {sender} at nonce {nonce}") from e


def compute_contract_address(sender: str, nonce: int) -> ChecksumAddress:
    """Returns the address of the contract created by ``sender`` with transaction ``nonce``."""
    digest = keccak(encode_creation_preimage(sender, nonce))
    return to_checksum_address(digest[-20:])


def get_pending_nonce(web3: Web3, sender: str) -> int:
    """Fetches the transaction count of ``sender``, including pending transactions."""
    sender = validate_sender(sender)
    try:
        nonce = web3.eth.get_transaction_count(sender, PENDING_BLOCK)
    except (RequestException, Web3Exception, ValueError, OSError) as e:
        raise NetworkError(f"Could not fetch the transaction count of {sender}: {e}") from e
    return int(nonce)


def predict_addresses_from_web3(web3: Web3, sender: str) -> PredictedAddresses:
    """Predicts the next two contract addresses of ``sender`` using a connected web3 instance."""
    sender = validate_sender(sender)
    nonce = get_pending_nonce(web3, sender)
    return PredictedAddresses(
        nonce=nonce,
        first=compute_contract_address(sender, nonce),
        second=compute_contract_address(sender, nonce + 1),
    )


def predict_addresses(config: PredictorConfig) -> PredictedAddresses:
    """Predicts the next two contract addresses of ``config.sender`` over HTTP JSON-RPC."""
    # a failed lookup is reported, not retried
    provider = Web3.HTTPProvider(
        config.rpc_endpoint,
        request_kwargs={"timeout": config.timeout},
        exception_retry_configuration=None,
    )
    return predict_addresses_from_web3(Web3(provider), config.sender)
