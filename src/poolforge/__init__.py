from .checksum_cache import get_checksum_address
from .config import settings
from .connection import (
    async_connection_manager,
    get_async_web3,
    set_async_web3,
)
from .version import __version__

# isort: split

from .deployment import (
    ArbitrumOne,
    AssetType,
    CryptoPoolSpec,
    EthereumMainnet,
    GaugeSpec,
    NetworkContext,
    OptimismMainnet,
    OracleSpec,
    PoolDeployer,
    PoolKind,
    StableMetaPoolSpec,
    StablePlainPoolSpec,
    TricryptoPoolSpec,
    Web3ChainTransport,
)
from .logging import logger
from .registry import PoolRegistryEntry, pool_registry

__all__ = (
    "ArbitrumOne",
    "AssetType",
    "CryptoPoolSpec",
    "EthereumMainnet",
    "GaugeSpec",
    "NetworkContext",
    "OptimismMainnet",
    "OracleSpec",
    "PoolDeployer",
    "PoolKind",
    "PoolRegistryEntry",
    "StableMetaPoolSpec",
    "StablePlainPoolSpec",
    "TricryptoPoolSpec",
    "Web3ChainTransport",
    "__version__",
    "async_connection_manager",
    "get_async_web3",
    "get_checksum_address",
    "logger",
    "pool_registry",
    "set_async_web3",
    "settings",
)
