from . import (
    abi as abi,
)  # excluded from __all__ so it doesn't bubble back up to the top level package namespace
from .deployer import PoolDeployer
from .networks import (
    ArbitrumOne,
    EthereumMainnet,
    NetworkContext,
    OptimismMainnet,
    get_network,
    register_network,
)
from .resolver import resolve_deployed_address
from .routing import plain_pool_routing, select_target
from .submitter import GasMeteredSubmitter
from .transport import ChainTransport, FeeParameterCache, Web3ChainTransport
from .types import (
    AssetType,
    CryptoPoolSpec,
    DeploymentReceipt,
    EventRecord,
    GaugeSpec,
    OracleSpec,
    PendingTransaction,
    PlainPoolRouting,
    PoolKind,
    ResolvedCallTarget,
    StableMetaPoolSpec,
    StablePlainPoolSpec,
    TricryptoPoolSpec,
)
from .validation import validate

__all__ = (
    "ArbitrumOne",
    "AssetType",
    "ChainTransport",
    "CryptoPoolSpec",
    "DeploymentReceipt",
    "EthereumMainnet",
    "EventRecord",
    "FeeParameterCache",
    "GasMeteredSubmitter",
    "GaugeSpec",
    "NetworkContext",
    "OptimismMainnet",
    "OracleSpec",
    "PendingTransaction",
    "PlainPoolRouting",
    "PoolDeployer",
    "PoolKind",
    "ResolvedCallTarget",
    "StableMetaPoolSpec",
    "StablePlainPoolSpec",
    "TricryptoPoolSpec",
    "Web3ChainTransport",
    "get_network",
    "plain_pool_routing",
    "register_network",
    "resolve_deployed_address",
    "select_target",
    "validate",
)
