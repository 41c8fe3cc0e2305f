#!/usr/bin/python3

from deployment.constants import CONSTRUCTOR_PARAMS_DIR
from deployment.params import Deployer
from deployment.utils import get_contract_container

VERIFY = False
CONSTRUCTOR_PARAMS_FILEPATH = CONSTRUCTOR_PARAMS_DIR / "bsc" / "launchpool.yml"


def main():
    deployer = Deployer.from_yaml(filepath=CONSTRUCTOR_PARAMS_FILEPATH, verify=VERIFY)
    launchpool = deployer.deploy(get_contract_container("BeefyLaunchpool"))
    deployer.finalize(deployments=[launchpool])
