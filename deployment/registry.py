"""
Deployment registries: what was deployed, where, by whom and with which constructor arguments.

Layout::

    {"<chain_id>": {"<ContractName>": {"address": ..., "tx_hash": ..., "block_number": ...,
                                       "deployer": ..., "args": [...]}}}
"""
import json
from collections import defaultdict
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Tuple

import click
from ape.contracts import ContractInstance
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address

from deployment.utils import _load_json, get_contract_container

ChainId = int
ContractName = str

REGISTRY_JSON_FORMAT = {"indent": 4, "separators": (",", ": ")}
UNMERGED_SUFFIX = ".unmerged.json"


class RegistryEntry(NamedTuple):
    chain_id: ChainId
    name: ContractName
    address: ChecksumAddress
    tx_hash: str
    block_number: int
    deployer: str
    args: List[Any] = []

    @property
    def key(self) -> Tuple[ChainId, ContractName]:
        return self.chain_id, self.name

    def to_json(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "tx_hash": self.tx_hash,
            "block_number": int(self.block_number),
            "deployer": self.deployer,
            "args": list(self.args),
        }

    @classmethod
    def from_json(cls, chain_id: str, name: ContractName, data: Dict[str, Any]) -> "RegistryEntry":
        return cls(
            chain_id=int(chain_id),
            name=name,
            address=data["address"],
            tx_hash=data["tx_hash"],
            block_number=data["block_number"],
            deployer=data["deployer"],
            args=data.get("args", []),
        )


def _entry_from_deployment(instance: ContractInstance, args: List[Any]) -> RegistryEntry:
    receipt = instance.receipt
    return RegistryEntry(
        chain_id=receipt.chain_id,
        name=instance.contract_type.name,
        address=to_checksum_address(instance.address),
        tx_hash=receipt.txn_hash,
        block_number=receipt.block_number,
        deployer=receipt.transaction.sender,
        args=args,
    )


def _to_registry_data(entries: Iterable[RegistryEntry]) -> Dict[str, Dict[str, Any]]:
    data = defaultdict(dict)
    for entry in sorted(entries, key=lambda e: (str(e.chain_id), e.name)):
        data[str(entry.chain_id)][entry.name] = entry.to_json()
    return dict(data)


def read_registry(filepath: Path) -> List[RegistryEntry]:
    return [
        RegistryEntry.from_json(chain_id, name, data)
        for chain_id, contracts in _load_json(filepath).items()
        for name, data in contracts.items()
    ]


def write_registry(entries: List[RegistryEntry], filepath: Path, silent: bool = False) -> Path:
    """
    Writes entries to a registry file and returns the path actually written.

    An existing registry is extended with chains it does not know yet. Entries for
    a chain it already has go to a sibling ``.unmerged.json`` file instead, so
    published addresses are never overwritten.
    """
    if not entries:
        print("No entries provided.")
        return filepath

    data = _to_registry_data(entries)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    if not filepath.exists():
        if not silent:
            print(f"Creating new registry at {filepath}.")
    else:
        existing = _load_json(filepath)
        overlapping = sorted(set(existing) & set(data))
        if overlapping:
            filepath = filepath.with_suffix(UNMERGED_SUFFIX)
            if not silent:
                print(
                    f"Registry already has entries for chain(s) {', '.join(overlapping)}.\n"
                    f"Writing to {filepath} instead."
                )
        else:
            if not silent:
                print(f"Adding chain(s) {', '.join(data)} to {filepath}.")
            existing.update(data)
            data = existing

    with open(filepath, "w") as file:
        json.dump(data, file, **REGISTRY_JSON_FORMAT)
    return filepath


def registry_from_ape_deployments(
    deployments: List[ContractInstance],
    output_filepath: Path,
    constructor_args: Optional[Dict[ContractName, List[Any]]] = None,
) -> Path:
    """Records ape deployments, with the constructor arguments needed to verify them later."""
    constructor_args = constructor_args or dict()
    entries = [
        _entry_from_deployment(instance, constructor_args.get(instance.contract_type.name, []))
        for instance in deployments
    ]
    output_filepath = write_registry(entries=entries, filepath=output_filepath)
    print(f"(i) Registry written to {output_filepath}!")
    return output_filepath


class ConflictResolution(Enum):
    USE_1 = 1
    USE_2 = 2


def _select_conflict_resolution(
    registry_1_entry: RegistryEntry,
    registry_1_filepath: Path,
    registry_2_entry: RegistryEntry,
    registry_2_filepath: Path,
) -> ConflictResolution:
    print(
        f"\n! {registry_1_entry.name} has two addresses on chain {registry_1_entry.chain_id}:",
        f"[1]: {registry_1_entry.address} ({registry_1_filepath})",
        f"[2]: {registry_2_entry.address} ({registry_2_filepath})",
        "[A]: Abort merge",
        sep="\n",
    )
    answer = click.prompt("Keep", type=click.Choice(["1", "2", "A"]))
    if answer == "A":
        print("Merge aborted!")
        raise click.Abort()
    return ConflictResolution(int(answer))


def _indexed_entries(
    filepath: Path, excluded: List[ContractName]
) -> Dict[Tuple[ChainId, ContractName], RegistryEntry]:
    return {e.key: e for e in read_registry(filepath) if e.name not in excluded}


def merge_registries(
    registry_1_filepath: Path,
    registry_2_filepath: Path,
    output_filepath: Path,
    deprecated_contracts: Optional[List[ContractName]] = None,
) -> Path:
    """
    Merges two registries into ``output_filepath``, dropping deprecated contracts.
    A contract recorded at two different addresses is resolved by the user.
    """
    excluded = deprecated_contracts or []
    entries_1 = _indexed_entries(registry_1_filepath, excluded)
    entries_2 = _indexed_entries(registry_2_filepath, excluded)

    merged = list()
    for key in sorted(set(entries_1) | set(entries_2)):
        entry_1, entry_2 = entries_1.get(key), entries_2.get(key)
        if entry_1 is None or entry_2 is None or entry_1.address == entry_2.address:
            merged.append(entry_1 or entry_2)
            continue
        resolution = _select_conflict_resolution(
            registry_1_entry=entry_1,
            registry_1_filepath=registry_1_filepath,
            registry_2_entry=entry_2,
            registry_2_filepath=registry_2_filepath,
        )
        merged.append(entry_1 if resolution is ConflictResolution.USE_1 else entry_2)

    # the output may be one of the inputs when merging several registries in turn
    if output_filepath.exists():
        output_filepath.unlink()
    write_registry(entries=merged, filepath=output_filepath)
    print(f"Merged registry written to {output_filepath}")
    return output_filepath


def contracts_from_registry(filepath: Path, chain_id: ChainId) -> Dict[str, ContractInstance]:
    """Returns the contracts recorded for a chain as ape contract instances."""
    return {
        entry.name: get_contract_container(entry.name).at(entry.address)
        for entry in read_registry(filepath)
        if entry.chain_id == chain_id
    }
