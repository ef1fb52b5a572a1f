from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from eth_typing import ChecksumAddress

from poolforge.checksum_cache import get_checksum_address
from poolforge.exceptions import PoolforgeValueError
from poolforge.types.aliases import ChainId

ETHEREUM_CHAIN_ID: ChainId = 1
OPTIMISM_CHAIN_ID: ChainId = 10
ARBITRUM_CHAIN_ID: ChainId = 42161


# Plain pool implementations installed by default, keyed by coin count
DEFAULT_PLAIN_IMPLEMENTATIONS: Mapping[int, int] = MappingProxyType({2: 4, 3: 4, 4: 4})
HOME_CHAIN_PLAIN_IMPLEMENTATIONS: Mapping[int, int] = MappingProxyType({2: 6, 3: 4, 4: 4})


@dataclass(slots=True, frozen=True, kw_only=True)
class NetworkContext:
    """
    The contracts used for pool deployment on a single chain. Roles that have no known deployment
    are `None`, and routing to them raises `RoutingError`.

    The built-in Arbitrum and Optimism contexts are incomplete: neither carries the admin factory
    that the custom-EMA and oracle-setting plain pool routes call, and Optimism carries no two-coin
    or three-coin volatility factory. Derive a context with those roles filled in using
    `dataclasses.replace` and pass it to `PoolDeployer` to deploy through them.
    """

    name: str
    chain_id: ChainId
    wrapped_native_token: ChecksumAddress
    factory: ChecksumAddress | None = None
    factory_admin: ChecksumAddress | None = None
    crypto_factory: ChecksumAddress | None = None
    tricrypto_factory: ChecksumAddress | None = None
    plain_implementations: Mapping[int, int] = field(default=DEFAULT_PLAIN_IMPLEMENTATIONS)
    meta_implementations: int = 2

    def plain_implementation_count(self, coin_count: int) -> int:
        return self.plain_implementations.get(coin_count, 0)


NETWORKS: dict[ChainId, NetworkContext] = {}


def register_network(network: NetworkContext) -> None:
    if network.chain_id in NETWORKS:
        raise PoolforgeValueError(message="Network is already registered.")

    NETWORKS[network.chain_id] = network


def get_network(chain_id: ChainId) -> NetworkContext:
    try:
        return NETWORKS[chain_id]
    except KeyError:
        raise PoolforgeValueError(
            message=f"No network context is registered for chain ID {chain_id}."
        ) from None


EthereumMainnet = NetworkContext(
    name="Ethereum Mainnet",
    chain_id=ETHEREUM_CHAIN_ID,
    wrapped_native_token=get_checksum_address("0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"),
    factory=get_checksum_address("0xB9fC157394Af804a3578134A6585C0dc9cc990d4"),
    factory_admin=get_checksum_address("0x742C3cF9Af45f91B109a81EfEaf11535ECDe9571"),
    crypto_factory=get_checksum_address("0xF18056Bbd320E96A48e3Fbf8bC061322531aac99"),
    tricrypto_factory=get_checksum_address("0x0c0e5f2fF0ff18a3be9b835635039256dC4B4963"),
    plain_implementations=HOME_CHAIN_PLAIN_IMPLEMENTATIONS,
)
ArbitrumOne = NetworkContext(
    name="Arbitrum One",
    chain_id=ARBITRUM_CHAIN_ID,
    wrapped_native_token=get_checksum_address("0x82aF49447D8a07e3bd95BD0d56f35241523fBab1"),
    factory=get_checksum_address("0xb17b674D9c5CB2e441F8e196a2f048A81355d031"),
    tricrypto_factory=get_checksum_address("0xbC0797015fcFc47d9C1856639CaE50D0e69FbEE8"),
)
OptimismMainnet = NetworkContext(
    name="Optimism",
    chain_id=OPTIMISM_CHAIN_ID,
    wrapped_native_token=get_checksum_address("0x4200000000000000000000000000000000000006"),
    factory=get_checksum_address("0x2db0E83599a91b508Ac268a6197b8B14F5e72840"),
)

for _network in (EthereumMainnet, ArbitrumOne, OptimismMainnet):
    register_network(_network)
