from pathlib import Path

import deployment

#
# Filesystem
#

DEPLOYMENT_DIR = Path(deployment.__file__).parent
CONSTRUCTOR_PARAMS_DIR = DEPLOYMENT_DIR / "constructor_params"
ARTIFACTS_DIR = DEPLOYMENT_DIR / "artifacts"
ABI_DIR = DEPLOYMENT_DIR / "abi"

#
# Chains
#

BSC = "bsc"
HECO = "heco"
AVAX = "avax"
POLYGON = "polygon"
FANTOM = "fantom"
ARBITRUM = "arbitrum"
CRONOS = "cronos"
MOONRIVER = "moonriver"
BSC_TESTNET = "testnet"
LOCALHOST = "localhost"

SUPPORTED_CHAINS = [
    BSC,
    HECO,
    AVAX,
    POLYGON,
    FANTOM,
    ARBITRUM,
    CRONOS,
    MOONRIVER,
    BSC_TESTNET,
    LOCALHOST,
]

#
# Fees
#

DEFAULT_CALL_FEE = 111
REDUCED_CALL_FEE = 11

#
# RPC
#

# seconds
RPC_REQUEST_TIMEOUT = 30

# nonce lookups include transactions still sitting in the mempool
PENDING_BLOCK = "pending"

#
# Contracts
#

VAULT_ROLE = "vault"
STRATEGY_ROLE = "strategy"

STRATEGY_ADMIN_ABI = ABI_DIR / "strategy_admin.json"
VAULT_WANT_ABI = ABI_DIR / "vault_want.json"
VAULT_FACTORY_ABI = ABI_DIR / "vault_factory.json"
