"""
Selection of the contract, entry point and ordered arguments for each deployment.

Plain stableswap pools are routed through a decision table. Each row is a predicate over the chain,
coin count, implementation variant and EMA time; the first matching row wins, and a spec matching no
row uses the public factory.
"""

import dataclasses
from collections.abc import Callable
from decimal import Decimal

from eth_typing import ChecksumAddress

from poolforge.checksum_cache import get_checksum_address
from poolforge.deployment.abi import (
    CRYPTO_FACTORY_ABI,
    PLAIN_POOL_ORACLE_ABI,
    STABLE_FACTORY_ABI,
    STABLE_FACTORY_ADMIN_ABI,
    TRICRYPTO_FACTORY_ABI,
)
from poolforge.deployment.encoding import (
    encode_crypto_pool,
    encode_ema_time,
    encode_method_id,
    encode_stable_meta_pool,
    encode_stable_plain_pool,
    encode_tricrypto_pool,
    encode_uint256,
)
from poolforge.deployment.networks import (
    ARBITRUM_CHAIN_ID,
    ETHEREUM_CHAIN_ID,
    OPTIMISM_CHAIN_ID,
    NetworkContext,
)
from poolforge.deployment.types import (
    CryptoPoolSpec,
    DeploymentSpec,
    GaugeSpec,
    OracleSpec,
    PlainPoolRouting,
    PoolKind,
    ResolvedCallTarget,
    StableMetaPoolSpec,
    StablePlainPoolSpec,
    TricryptoPoolSpec,
)
from poolforge.deployment.validation import to_decimal
from poolforge.exceptions import PoolforgeTypeError, RoutingError
from poolforge.types.aliases import ChainId

DEFAULT_EMA_TIME = Decimal(600)

# Chains where the oracle-enabled plain pool implementation is installed at variant 2
ORACLE_CHAINS: frozenset[ChainId] = frozenset({ARBITRUM_CHAIN_ID, OPTIMISM_CHAIN_ID})

DEPLOY_PLAIN_POOL = "deploy_plain_pool"
DEPLOY_PLAIN_POOL_AND_SET_ORACLE = "deploy_plain_pool_and_set_oracle"
DEPLOY_METAPOOL = "deploy_metapool"
DEPLOY_POOL = "deploy_pool"
DEPLOY_GAUGE = "deploy_gauge"
SET_ORACLE = "set_oracle"


@dataclasses.dataclass(slots=True, frozen=True)
class PlainPoolRoute:
    chain_ids: frozenset[ChainId]
    coin_count: int
    implementation_index: int
    requires_custom_ema: bool
    routing: PlainPoolRouting

    def matches(
        self,
        chain_id: ChainId,
        coin_count: int,
        implementation_index: int,
        ema_time: Decimal,
    ) -> bool:
        return (
            chain_id in self.chain_ids
            and coin_count == self.coin_count
            and implementation_index == self.implementation_index
            and (not self.requires_custom_ema or ema_time != DEFAULT_EMA_TIME)
        )


PLAIN_POOL_ROUTES: tuple[PlainPoolRoute, ...] = (
    PlainPoolRoute(
        chain_ids=ORACLE_CHAINS,
        coin_count=2,
        implementation_index=2,
        requires_custom_ema=False,
        routing=PlainPoolRouting.SET_ORACLE,
    ),
    PlainPoolRoute(
        chain_ids=frozenset({ETHEREUM_CHAIN_ID}),
        coin_count=2,
        implementation_index=4,
        requires_custom_ema=True,
        routing=PlainPoolRouting.USE_PROXY,
    ),
    PlainPoolRoute(
        chain_ids=frozenset({ETHEREUM_CHAIN_ID}),
        coin_count=2,
        implementation_index=5,
        requires_custom_ema=True,
        routing=PlainPoolRouting.USE_PROXY,
    ),
    PlainPoolRoute(
        chain_ids=ORACLE_CHAINS,
        coin_count=2,
        implementation_index=0,
        requires_custom_ema=True,
        routing=PlainPoolRouting.USE_PROXY,
    ),
)


def plain_pool_routing(
    chain_id: ChainId,
    coin_count: int,
    implementation_index: int,
    ema_time: int | float | str | Decimal,
) -> PlainPoolRouting:
    ema = to_decimal("ema_time", ema_time)
    for route in PLAIN_POOL_ROUTES:
        if route.matches(chain_id, coin_count, implementation_index, ema):
            return route.routing
    return PlainPoolRouting.DEFAULT


def _require(network: NetworkContext, role: str) -> ChecksumAddress:
    address: ChecksumAddress | None = getattr(network, role)
    if address is None:
        raise RoutingError(message=f"{network.name} has no known {role} contract.")
    return address


def select_stable_plain_pool_target(
    spec: StablePlainPoolSpec,
    network: NetworkContext,
) -> ResolvedCallTarget:
    routing = plain_pool_routing(
        chain_id=network.chain_id,
        coin_count=len(spec.coins),
        implementation_index=spec.implementation_index,
        ema_time=spec.ema_time,
    )
    args = encode_stable_plain_pool(spec)

    if routing is PlainPoolRouting.DEFAULT:
        return ResolvedCallTarget(
            address=_require(network, "factory"),
            method=DEPLOY_PLAIN_POOL,
            args=args,
            abi=STABLE_FACTORY_ABI,
            kind=PoolKind.STABLE_PLAIN,
            routing=routing,
        )

    args = (*args, encode_uint256("ema_time", encode_ema_time(spec.ema_time)))
    method = DEPLOY_PLAIN_POOL
    if routing is PlainPoolRouting.SET_ORACLE:
        args = (
            *args,
            encode_method_id(spec.oracle_method),
            get_checksum_address(spec.oracle_address),
        )
        method = DEPLOY_PLAIN_POOL_AND_SET_ORACLE

    return ResolvedCallTarget(
        address=_require(network, "factory_admin"),
        method=method,
        args=args,
        abi=STABLE_FACTORY_ADMIN_ABI,
        kind=PoolKind.STABLE_PLAIN,
        routing=routing,
    )


def select_stable_meta_pool_target(
    spec: StableMetaPoolSpec,
    network: NetworkContext,
) -> ResolvedCallTarget:
    return ResolvedCallTarget(
        address=_require(network, "factory"),
        method=DEPLOY_METAPOOL,
        args=encode_stable_meta_pool(spec),
        abi=STABLE_FACTORY_ABI,
        kind=PoolKind.STABLE_META,
    )


def select_crypto_pool_target(
    spec: CryptoPoolSpec,
    network: NetworkContext,
) -> ResolvedCallTarget:
    return ResolvedCallTarget(
        address=_require(network, "crypto_factory"),
        method=DEPLOY_POOL,
        args=encode_crypto_pool(spec),
        abi=CRYPTO_FACTORY_ABI,
        kind=PoolKind.CRYPTO,
    )


def select_tricrypto_pool_target(
    spec: TricryptoPoolSpec,
    network: NetworkContext,
) -> ResolvedCallTarget:
    return ResolvedCallTarget(
        address=_require(network, "tricrypto_factory"),
        method=DEPLOY_POOL,
        args=encode_tricrypto_pool(spec, network.wrapped_native_token),
        abi=TRICRYPTO_FACTORY_ABI,
        kind=PoolKind.TRICRYPTO,
    )


def select_gauge_target(
    spec: GaugeSpec,
    network: NetworkContext,
) -> ResolvedCallTarget:
    # Each factory emits its own LiquidityGaugeDeployed layout, so decode with the matching ABI
    factory = get_checksum_address(spec.factory)
    if factory == network.crypto_factory:
        abi = CRYPTO_FACTORY_ABI
    elif factory == network.tricrypto_factory:
        abi = TRICRYPTO_FACTORY_ABI
    else:
        abi = STABLE_FACTORY_ABI

    return ResolvedCallTarget(
        address=factory,
        method=DEPLOY_GAUGE,
        args=(get_checksum_address(spec.pool),),
        abi=abi,
        kind=PoolKind.GAUGE,
    )


def select_oracle_target(
    spec: OracleSpec,
    network: NetworkContext,  # noqa: ARG001
) -> ResolvedCallTarget:
    return ResolvedCallTarget(
        address=get_checksum_address(spec.pool),
        method=SET_ORACLE,
        args=(
            encode_method_id(spec.oracle_method),
            get_checksum_address(spec.oracle_address),
        ),
        abi=PLAIN_POOL_ORACLE_ABI,
        kind=PoolKind.ORACLE,
    )


TARGET_SELECTORS: dict[type, Callable[..., ResolvedCallTarget]] = {
    StablePlainPoolSpec: select_stable_plain_pool_target,
    StableMetaPoolSpec: select_stable_meta_pool_target,
    CryptoPoolSpec: select_crypto_pool_target,
    TricryptoPoolSpec: select_tricrypto_pool_target,
    GaugeSpec: select_gauge_target,
    OracleSpec: select_oracle_target,
}


def select_target(spec: DeploymentSpec, network: NetworkContext) -> ResolvedCallTarget:
    try:
        selector = TARGET_SELECTORS[type(spec)]
    except KeyError:
        raise PoolforgeTypeError(
            message=f"Unsupported deployment spec {type(spec).__name__}"
        ) from None
    return selector(spec, network)
