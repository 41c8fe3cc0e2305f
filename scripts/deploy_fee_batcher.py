#!/usr/bin/python3

from deployment.constants import CONSTRUCTOR_PARAMS_DIR
from deployment.params import Deployer
from deployment.utils import get_contract_container

VERIFY = False
CONSTRUCTOR_PARAMS_FILEPATH = CONSTRUCTOR_PARAMS_DIR / "avax" / "fee_batcher.yml"


def main():
    deployer = Deployer.from_yaml(filepath=CONSTRUCTOR_PARAMS_FILEPATH, verify=VERIFY)
    fee_batcher = deployer.deploy(get_contract_container("BeefyFeeBatch"))
    deployer.finalize(deployments=[fee_batcher])
