import json
import os
from pathlib import Path
from typing import Any, Dict, List

import yaml
from ape import Contract, networks, project
from ape.contracts import ContractContainer, ContractInstance
from eth_typing import ChecksumAddress

from deployment.constants import ARTIFACTS_DIR
from deployment.networks import get_chain_by_id, is_local_network


def _load_yaml(filepath: Path) -> Dict[str, Any]:
    with open(filepath) as f:
        return yaml.safe_load(f)


def _load_json(filepath: Path) -> Any:
    with open(filepath) as f:
        return json.load(f)


def get_artifact_filepath(config: Dict) -> Path:
    """Where the registry of a deployment file is written."""
    artifacts = config.get("artifacts") or dict()
    if not artifacts.get("filename"):
        raise ValueError("artifacts.filename is not set in params file.")
    return Path(artifacts.get("dir", ARTIFACTS_DIR)) / artifacts["filename"]


def _config_chain_id(config: Dict) -> int:
    deployment = config.get("deployment") or dict()
    if not deployment.get("chain_id"):
        raise ValueError("deployment.chain_id is not set in params file.")
    chain_id = int(deployment["chain_id"])

    chain_name = deployment.get("chain")
    if chain_name and get_chain_by_id(chain_id).name != chain_name:
        raise ValueError(f"chain '{chain_name}' does not have chain_id {chain_id}.")
    return chain_id


def validate_config(config: Dict) -> Path:
    """
    Checks a deployment file against the connected network and returns its registry path.

    The file must target the connected chain (any chain on a local network), list
    at least one contract and not be published for that chain already.
    """
    print("Validating parameters YAML...")
    chain_id = _config_chain_id(config)
    if not config.get("contracts"):
        raise ValueError("'contracts' is not set in params file.")

    connected_chain_id = networks.provider.network.chain_id
    if chain_id != connected_chain_id and not is_local_network():
        raise ValueError(
            f"Params file targets chain_id {chain_id} but the network has {connected_chain_id}."
        )

    registry_filepath = get_artifact_filepath(config)
    if registry_filepath.exists() and str(chain_id) in _load_json(registry_filepath):
        raise ValueError(f"{registry_filepath} already has a deployment for chain_id {chain_id}.")
    return registry_filepath


def check_etherscan_plugin() -> None:
    """Block explorer publishing needs ape-etherscan and an API key, except on local networks."""
    if is_local_network():
        return
    try:
        from ape_etherscan.utils import API_KEY_ENV_KEY_MAP
    except ImportError:
        raise ImportError("The ape-etherscan plugin is required: ape plugins install etherscan")

    envvar = API_KEY_ENV_KEY_MAP.get(networks.provider.network.ecosystem.name)
    if not envvar or not os.environ.get(envvar):
        raise ValueError(f"{envvar or 'The explorer API key'} is not set.")


def check_plugins() -> None:
    print("Checking plugins...")
    check_etherscan_plugin()


def verify_contracts(contracts: List[ContractInstance]) -> None:
    explorer = networks.provider.network.explorer
    for instance in contracts:
        print(f"(i) Verifying {instance.contract_type.name} at {instance.address}...")
        explorer.publish_contract(instance.address)


def get_contract_container(name: str) -> ContractContainer:
    container = getattr(project, name, None)
    if container is None:
        raise ValueError(f"No contract found with name '{name}'.")
    return container


def contract_at(address: ChecksumAddress, abi_filepath: Path) -> ContractInstance:
    """An external contract, typed with a minimal ABI fragment."""
    return Contract(address, abi=_load_json(abi_filepath))


def registry_filepath_from_name(name: str) -> Path:
    filepath = ARTIFACTS_DIR / f"{name}.json"
    if not filepath.exists():
        raise ValueError(f"No registry named '{name}' in {ARTIFACTS_DIR}")
    return filepath
