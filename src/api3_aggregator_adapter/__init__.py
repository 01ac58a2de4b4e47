"""
Api3 aggregator adapter package.

Serves Api3 proxy readings through the legacy AggregatorV2V3Interface and
deploys the on-chain adapter at its deterministic address.
"""

from .aggregator_adapter import Api3AggregatorAdapter
from .config import ChainConfig, DeployConfig, ReaderConfig
from .deploy import (
    CREATE2_FACTORY_ADDRESS,
    SALT,
    get_deterministic_deployment_address,
    get_init_code,
)
from .deployer import DeterministicDeployer
from .models import DeploymentResult, FeedReading, RoundData

__all__ = [
    "Api3AggregatorAdapter",
    "ChainConfig",
    "DeployConfig",
    "ReaderConfig",
    "CREATE2_FACTORY_ADDRESS",
    "SALT",
    "get_deterministic_deployment_address",
    "get_init_code",
    "DeterministicDeployer",
    "DeploymentResult",
    "FeedReading",
    "RoundData",
]
__version__ = "0.1.0"
