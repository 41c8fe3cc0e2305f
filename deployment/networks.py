import os
from typing import Dict, NamedTuple, Optional

from ape import networks
from ape.api.networks import LOCAL_NETWORK_NAME

from deployment.constants import (
    ARBITRUM,
    AVAX,
    BSC,
    BSC_TESTNET,
    CRONOS,
    DEFAULT_CALL_FEE,
    FANTOM,
    HECO,
    LOCALHOST,
    MOONRIVER,
    POLYGON,
    REDUCED_CALL_FEE,
)


class Chain(NamedTuple):
    """Static settings of a chain targeted by the deployment scripts."""

    name: str
    chain_id: int
    rpc: str
    call_fee: int
    wrapped_native: Optional[str] = None
    safe_gas_price: Optional[int] = None

    @property
    def rpc_envvar(self) -> str:
        return f"{self.name.upper()}_RPC"


CHAINS: Dict[str, Chain] = {
    chain.name: chain
    for chain in (
        Chain(
            name=BSC,
            chain_id=56,
            rpc="https://bsc-dataseed.binance.org/",
            call_fee=DEFAULT_CALL_FEE,
            wrapped_native="0xbb4CdB9CBd36B01bD1cBaEBF2De08d9173bc095c",
            safe_gas_price=5_000_000_000,
        ),
        Chain(
            name=HECO,
            chain_id=128,
            rpc="https://http-mainnet-node.huobichain.com",
            call_fee=REDUCED_CALL_FEE,
            wrapped_native="0x5545153CCFcA01fbd7Dd11C0b23ba694D9509A6F",
        ),
        Chain(
            name=AVAX,
            chain_id=43114,
            rpc="https://api.avax.network/ext/bc/C/rpc",
            call_fee=DEFAULT_CALL_FEE,
            wrapped_native="0xB31f66AA3C1e785363F0875A1B74E27b85FD66c7",
        ),
        Chain(
            name=POLYGON,
            chain_id=137,
            rpc="https://rpc-mainnet.maticvigil.com/",
            call_fee=REDUCED_CALL_FEE,
            wrapped_native="0x0d500B1d8E8eF31E21C99d1Db9A6444d3ADf1270",
            safe_gas_price=50_000_000_000,
        ),
        Chain(
            name=FANTOM,
            chain_id=250,
            rpc="https://rpc.ftm.tools",
            call_fee=REDUCED_CALL_FEE,
            wrapped_native="0x21be370D5312f44cB42ce377BC9b8a0cEF1A4C83",
        ),
        Chain(
            name=ARBITRUM,
            chain_id=42161,
            rpc="https://arb1.arbitrum.io/rpc",
            call_fee=DEFAULT_CALL_FEE,
            wrapped_native="0x82aF49447D8a07e3bd95BD0d56f35241523fBab1",
        ),
        Chain(
            name=CRONOS,
            chain_id=25,
            rpc="https://evm.cronos.org",
            call_fee=DEFAULT_CALL_FEE,
            wrapped_native="0x5C7F8A570d578ED84E63fdFA7b1eE72dEae1AE23",
        ),
        Chain(
            name=MOONRIVER,
            chain_id=1285,
            rpc="https://rpc.api.moonriver.moonbeam.network",
            call_fee=REDUCED_CALL_FEE,
            wrapped_native="0x98878B06940aE243284CA214f92Bb71a2b032B8A",
        ),
        Chain(
            name=BSC_TESTNET,
            chain_id=97,
            rpc="https://data-seed-prebsc-1-s1.binance.org:8545/",
            call_fee=DEFAULT_CALL_FEE,
        ),
        Chain(
            name=LOCALHOST,
            chain_id=31337,
            rpc="http://127.0.0.1:8545",
            call_fee=REDUCED_CALL_FEE,
        ),
    )
}


def get_chain(name: str) -> Chain:
    try:
        return CHAINS[name]
    except KeyError:
        raise ValueError(f"Unsupported chain '{name}'; expected one of {', '.join(CHAINS)}.")


def get_chain_by_id(chain_id: int) -> Chain:
    for chain in CHAINS.values():
        if chain.chain_id == chain_id:
            return chain
    raise ValueError(f"No supported chain with chain ID {chain_id}.")


def get_network_rpc(name: str) -> str:
    """
    Returns the RPC endpoint for a chain.
    The <CHAIN>_RPC environment variable takes precedence over the public endpoint.
    """
    chain = get_chain(name)
    return os.environ.get(chain.rpc_envvar) or chain.rpc


def is_local_network() -> bool:
    """Returns True if the connected ape provider is a local development network."""
    return networks.provider.network.name == LOCAL_NETWORK_NAME


def exceeds_safe_gas_price(name: str, gas_price: int) -> bool:
    """Returns True if ``gas_price`` (wei) is above what is usually paid on the chain."""
    safe_gas_price = get_chain(name).safe_gas_price
    return safe_gas_price is not None and gas_price > safe_gas_price
