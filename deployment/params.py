from abc import ABC, abstractmethod
from collections import OrderedDict, namedtuple
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ape import networks
from ape.api import AccountAPI, ReceiptAPI
from ape.cli.choices import select_account
from ape.contracts.base import ContractContainer, ContractInstance, ContractTransactionHandler
from ape.utils import ZERO_ADDRESS
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address
from ethpm_types import MethodABI
from web3.auto import w3

from deployment.confirm import _confirm_prediction, _confirm_resolution, _continue
from deployment.constants import STRATEGY_ROLE, VAULT_ROLE
from deployment.networks import exceeds_safe_gas_price
from deployment.predict import PredictedAddresses, predict_addresses_from_web3
from deployment.registry import registry_from_ape_deployments
from deployment.utils import (
    _load_yaml,
    check_plugins,
    get_contract_container,
    validate_config,
    verify_contracts,
)

CONTRACT_CONSTRUCTOR_PARAMETER_KEY = "constructor"
CONTRACT_INITIALIZE_PARAMETER_KEY = "initialize"
PAIR_KEY = "pair"


class DeploymentConfigError(ValueError):
    pass


class PredictionMismatch(Exception):
    """Raised when a contract did not land at its predicted address."""


class PairAddresses:
    """
    Vault and strategy addresses shared by all variables of one deployment file.
    They stay unbound (zero address) until predicted or cloned.
    """

    ROLES = (VAULT_ROLE, STRATEGY_ROLE)

    def __init__(self):
        self._addresses = dict()

    def bind(self, vault: str, strategy: str) -> None:
        self._addresses = {
            VAULT_ROLE: to_checksum_address(vault),
            STRATEGY_ROLE: to_checksum_address(strategy),
        }

    def get(self, role: str) -> ChecksumAddress:
        if role not in self.ROLES:
            raise ValueError(f"Unknown pair role '{role}'")
        return self._addresses.get(role, ZERO_ADDRESS)

    @property
    def is_bound(self) -> bool:
        return bool(self._addresses)


class VariableContext:
    """What a `$variable` of one contract can refer to."""

    def __init__(
        self,
        contract_names: List[str],
        contract_name: str,
        constants: Optional[Dict[str, Any]] = None,
        pair: Optional[PairAddresses] = None,
        deployments: Optional[Dict[str, ContractInstance]] = None,
    ):
        self.contract_names = contract_names
        self.contract_name = contract_name
        self.constants = constants or dict()
        self.pair = pair if pair is not None else PairAddresses()
        self.deployments = deployments if deployments is not None else dict()


# Variables


class Variable(ABC):
    PREFIX = "$"

    def __init__(self, name: str, context: VariableContext):
        self.name = name
        self.context = context

    @classmethod
    @abstractmethod
    def matches(cls, name: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def resolve(self) -> Any:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.PREFIX}{self.name}"


class DeployerAccount(Variable):
    @classmethod
    def matches(cls, name: str) -> bool:
        return name == "deployer"

    def resolve(self) -> Any:
        account = Deployer.get_account()
        return ZERO_ADDRESS if account is None else account.address


class PairAddress(Variable):
    """The vault or strategy of the pair being deployed; known before either exists."""

    @classmethod
    def matches(cls, name: str) -> bool:
        return name in PairAddresses.ROLES

    def resolve(self) -> Any:
        return self.context.pair.get(self.name)


class Constant(Variable):
    def __init__(self, name: str, context: VariableContext):
        super().__init__(name, context)
        if name not in context.constants:
            raise DeploymentConfigError(f"Constant '{name}' not found in deployment file.")

    @classmethod
    def matches(cls, name: str) -> bool:
        return name.isupper()

    def resolve(self) -> Any:
        return self.context.constants[self.name]


class ContractName(Variable):
    """Another contract of the same deployment file, deployed earlier in the run."""

    def __init__(self, name: str, context: VariableContext):
        super().__init__(name, context)
        if name not in context.contract_names:
            raise DeploymentConfigError(f"Contract name {name} not found")

    @classmethod
    def matches(cls, name: str) -> bool:
        return True

    def resolve(self) -> Any:
        instance = self.context.deployments.get(self.name)
        # zero address until deployed, so parameters can be validated up front
        return ZERO_ADDRESS if instance is None else instance.address


# checked in order; ContractName matches anything
VARIABLE_TYPES = (DeployerAccount, PairAddress, Constant, ContractName)


def _parse_value(value: Any, context: VariableContext) -> Any:
    if isinstance(value, list):
        return [_parse_value(v, context) for v in value]
    if not (isinstance(value, str) and value.startswith(Variable.PREFIX)):
        return value
    name = value[len(Variable.PREFIX) :]
    variable_type = next(t for t in VARIABLE_TYPES if t.matches(name))
    return variable_type(name, context)


def _resolve_value(value: Any) -> Any:
    if isinstance(value, list):
        return [_resolve_value(v) for v in value]
    if isinstance(value, Variable):
        return value.resolve()
    return value


def _get_contract_names(config: Dict) -> List[str]:
    names = list()
    for entry in config["contracts"]:
        if isinstance(entry, str):
            names.append(entry)
        elif isinstance(entry, dict) and len(entry) == 1:
            names.extend(entry)
        else:
            raise DeploymentConfigError("Malformed constructor parameters YAML.")
    return names


def _get_pair_names(config: Dict) -> Optional[Tuple[str, str]]:
    """Returns the (vault, strategy) contract names of a pair deployment, if any."""
    pair = config.get(PAIR_KEY)
    if not pair:
        return None
    try:
        vault, strategy = pair[VAULT_ROLE], pair[STRATEGY_ROLE]
    except (KeyError, TypeError):
        raise DeploymentConfigError(f"'{PAIR_KEY}' must name both a vault and a strategy.")
    contract_names = _get_contract_names(config)
    for name in (vault, strategy):
        if name not in contract_names:
            raise DeploymentConfigError(f"Pair contract {name} is not listed in 'contracts'.")
    return vault, strategy


def _match_method_abi(method_abis: List[MethodABI], args: Sequence[Any]) -> Dict[str, Any]:
    """Returns the arguments by name for the first overload that can encode them."""
    for abi in method_abis:
        if len(abi.inputs) != len(args):
            continue
        if all(w3.is_encodable(i.type, arg) for i, arg in zip(abi.inputs, args)):
            return {i.name: arg for i, arg in zip(abi.inputs, args)}
    name = method_abis[0].name if method_abis else "<unknown>"
    raise ValueError(f"No ABI for '{name}' accepts {len(args)} argument(s) of the given types")


class ConstructorParameters:
    """
    The constructor (or initializer) parameters of the contracts of a deployment file.
    Variables stay unresolved until the moment of deployment.
    """

    class Invalid(Exception):
        """Raised when parameters do not fit the contract ABI"""

    def __init__(self, parameters: OrderedDict, key: str = CONTRACT_CONSTRUCTOR_PARAMETER_KEY):
        self.parameters = parameters
        self.key = key

    @classmethod
    def from_config(
        cls,
        config: Dict,
        key: str = CONTRACT_CONSTRUCTOR_PARAMETER_KEY,
        pair: Optional[PairAddresses] = None,
        deployments: Optional[Dict[str, ContractInstance]] = None,
    ) -> "ConstructorParameters":
        print(f"Processing contract {key} parameters...")
        contract_names = _get_contract_names(config)
        pair = pair if pair is not None else PairAddresses()
        deployments = deployments if deployments is not None else dict()

        parameters = OrderedDict()
        for entry in config["contracts"]:
            if isinstance(entry, str):
                parameters[entry] = OrderedDict()
                continue
            ((contract_name, contract_data),) = entry.items()
            context = VariableContext(
                contract_names=contract_names,
                contract_name=contract_name,
                constants=config.get("constants"),
                pair=pair,
                deployments=deployments,
            )
            raw = (contract_data or dict()).get(key) or dict()
            parameters[contract_name] = OrderedDict()
            for name, value in raw.items():
                if value is None:
                    raise DeploymentConfigError(
                        f"Parameter '{name}' of {contract_name} is undefined."
                    )
                parameters[contract_name][name] = _parse_value(value, context)

        return cls(parameters=parameters, key=key)

    def resolve(self, contract_name: str) -> OrderedDict:
        """Resolves the parameters of a single contract."""
        if contract_name not in self.parameters:
            raise DeploymentConfigError(f"No parameters for {contract_name} in deployment file.")
        return OrderedDict(
            (name, _resolve_value(value)) for name, value in self.parameters[contract_name].items()
        )

    def _abi_inputs(self, contract_name: str) -> Optional[List[Any]]:
        container = get_contract_container(contract_name)
        if self.key == CONTRACT_CONSTRUCTOR_PARAMETER_KEY:
            return container.constructor.abi.inputs
        if not self.parameters[contract_name]:
            # nothing to call
            return None
        for method in container.contract_type.methods:
            if method.name == self.key:
                return method.inputs
        raise self.Invalid(f"{contract_name} has no '{self.key}' method.")

    def validate(self) -> None:
        """Checks names, count and encodability of every parameter against the compiled ABI."""
        for contract_name in self.parameters:
            abi_inputs = self._abi_inputs(contract_name)
            if abi_inputs is None:
                continue
            resolved = self.resolve(contract_name)
            if len(resolved) != len(abi_inputs):
                raise self.Invalid(
                    f"{contract_name} {self.key} takes {len(abi_inputs)} parameters, "
                    f"{len(resolved)} given."
                )
            for position, (abi_input, (name, value)) in enumerate(zip(abi_inputs, resolved.items())):
                if abi_input.name != name:
                    raise self.Invalid(
                        f"{contract_name} parameter '{name}' at position {position} "
                        f"should be '{abi_input.name}'."
                    )
                if not w3.is_encodable(abi_input.type, value):
                    raise self.Invalid(
                        f"{contract_name} parameter '{name}' = '{value}' "
                        f"is not a valid '{abi_input.type}'."
                    )


class Transactor:
    """
    An ape account that prints, confirms and sends contract transactions.
    """

    def __init__(self, account: Optional[AccountAPI] = None, autosign: bool = False):
        self._account = account if account is not None else select_account()
        if autosign:
            print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
        self._autosign = autosign
        self._account.set_autosign(autosign)

    def get_account(self) -> AccountAPI:
        return self._account

    def transact(self, method: ContractTransactionHandler, *args) -> ReceiptAPI:
        named_args = _match_method_abi(method.abis, args)
        contract = method.contract
        print(f"\nTransacting {contract.contract_type.name}[{contract.address[:10]}].{method}")
        for name, value in named_args.items():
            print(f"\t{name}={value}")
        if not self._autosign:
            _continue()
        return method(*args, sender=self._account)


class Deployer(Transactor):
    """
    A transactor that also owns a deployment file: its parameters, the pair
    addresses and everything deployed so far in the run.
    """

    __DEPLOYER_ACCOUNT: AccountAPI = None

    def __init__(
        self,
        config: Dict,
        path: Path,
        verify: bool,
        account: Optional[AccountAPI] = None,
        autosign: bool = False,
    ):
        super().__init__(account, autosign)
        check_plugins()
        self.path = path
        self.config = config
        self.verify = verify
        self.registry_filepath = validate_config(config=config)

        self.pair_names = _get_pair_names(config)
        self.pair = PairAddresses()
        self.deployments: Dict[str, ContractInstance] = dict()
        self.constructor_args: Dict[str, List[Any]] = dict()
        self.constructor_parameters, self.initialize_parameters = (
            ConstructorParameters.from_config(
                config, key=key, pair=self.pair, deployments=self.deployments
            )
            for key in (CONTRACT_CONSTRUCTOR_PARAMETER_KEY, CONTRACT_INITIALIZE_PARAMETER_KEY)
        )
        self.constructor_parameters.validate()
        self.initialize_parameters.validate()

        # constants as attributes, e.g. deployer.constants.VAULT_FACTORY
        constants = config.get("constants") or dict()
        self.constants = namedtuple("Constants", list(constants))(**constants)

        self._set_account(self._account)
        self._print_deployment_info()
        if not self._autosign:
            _continue()

    @classmethod
    def from_yaml(cls, filepath: Path, *args, **kwargs) -> "Deployer":
        return cls(_load_yaml(filepath), filepath, *args, **kwargs)

    @classmethod
    def get_account(cls) -> AccountAPI:
        return cls.__DEPLOYER_ACCOUNT

    @classmethod
    def _set_account(cls, deployer: AccountAPI) -> None:
        cls.__DEPLOYER_ACCOUNT = deployer

    def deploy(self, container: ContractContainer) -> ContractInstance:
        contract_name = container.contract_type.name
        resolved_params = self.constructor_parameters.resolve(contract_name)
        if not self._autosign:
            _confirm_resolution(resolved_params, contract_name)

        args = list(resolved_params.values())
        instance = self.get_account().deploy(container, *args, publish=self.verify)
        self.deployments[contract_name] = instance
        self.constructor_args[contract_name] = args
        return instance

    def predict(self) -> PredictedAddresses:
        """Predicts the vault and strategy addresses from the deployer's pending nonce."""
        return predict_addresses_from_web3(networks.provider.web3, self.get_account().address)

    def deploy_pair(self) -> Tuple[ContractInstance, ContractInstance]:
        """
        Deploys a vault and its strategy, each constructed with the address of the other.
        The vault goes first, at the deployer's current nonce; the strategy right after.
        """
        if not self.pair_names:
            raise DeploymentConfigError(f"'{PAIR_KEY}' is not set in {self.path}.")
        vault_name, strategy_name = self.pair_names

        predicted = self.predict()
        self.pair.bind(vault=predicted.first, strategy=predicted.second)
        if not self._autosign:
            _confirm_prediction(predicted)

        vault = self.deploy(get_contract_container(vault_name))
        _check_prediction(vault, predicted.first)
        strategy = self.deploy(get_contract_container(strategy_name))
        _check_prediction(strategy, predicted.second)

        print(f"\nVault: {vault.address}", f"Strategy: {strategy.address}", sep="\n")
        return vault, strategy

    def initialize(self, instance: ContractInstance) -> ReceiptAPI:
        """Calls `initialize` on a cloned contract with its resolved initialize parameters."""
        resolved_params = self.initialize_parameters.resolve(instance.contract_type.name)
        return self.transact(instance.initialize, *resolved_params.values())

    def finalize(self, deployments: List[ContractInstance]) -> None:
        """Records the deployments in the registry and publishes them if requested."""
        registry_from_ape_deployments(
            deployments=deployments,
            output_filepath=self.registry_filepath,
            constructor_args=self.constructor_args,
        )
        if self.verify:
            verify_contracts(contracts=deployments)

    def _print_deployment_info(self):
        network = networks.provider.network
        gas_price = networks.provider.gas_price
        print(
            f"Account: {self.get_account().address}",
            f"Config: {self.path}",
            f"Registry: {self.registry_filepath}",
            f"Verify: {self.verify}",
            f"Network: {network.ecosystem.name}:{network.name} (chain ID {network.chain_id})",
            f"Gas Price: {gas_price}",
            sep="\n",
        )
        chain_name = self.config["deployment"].get("chain")
        if chain_name and exceeds_safe_gas_price(chain_name, gas_price):
            print(f"WARNING: gas price is above the usual price on {chain_name}.")


def _check_prediction(instance: ContractInstance, expected: ChecksumAddress) -> None:
    if to_checksum_address(instance.address) != expected:
        raise PredictionMismatch(
            f"{instance.contract_type.name} was deployed at {instance.address} "
            f"but {expected} was predicted; another transaction was sent from the deployer."
        )
