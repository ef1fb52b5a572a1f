import dataclasses

from eth_typing import ChecksumAddress

from poolforge.checksum_cache import get_checksum_address
from poolforge.exceptions import PoolforgeValueError

type Address = bytes | str


@dataclasses.dataclass(slots=True, frozen=True, kw_only=True)
class PoolRegistryEntry:
    """
    The registry's view of an existing pool. Only the fields needed to reason about event ordering
    in deployment receipts are kept.
    """

    address: ChecksumAddress
    coin_addresses: tuple[ChecksumAddress, ...]
    underlying_coin_addresses: tuple[ChecksumAddress, ...] = ()

    @property
    def underlying_coin_count(self) -> int:
        # Plain pools have no separate underlying coins, so their own coins count instead
        return len(self.underlying_coin_addresses or self.coin_addresses)


class PoolRegistry:
    """
    Pools known to the deployer, keyed by chain ID and pool address.
    """

    def __init__(self) -> None:
        self._all_pools: dict[
            tuple[
                int,  # chain ID
                ChecksumAddress,  # pool address
            ],
            PoolRegistryEntry,
        ] = {}

    def get(
        self,
        chain_id: int,
        pool_address: Address,
    ) -> PoolRegistryEntry | None:
        return self._all_pools.get(
            (
                chain_id,
                get_checksum_address(pool_address),
            ),
        )

    def add(
        self,
        pool: PoolRegistryEntry,
        chain_id: int,
    ) -> None:
        if self.get(
            chain_id=chain_id,
            pool_address=pool.address,
        ):
            raise PoolforgeValueError(message="Pool is already registered")

        self._all_pools[(chain_id, pool.address)] = pool

    def remove(
        self,
        chain_id: int,
        pool_address: Address,
    ) -> None:
        self._all_pools.pop(
            (
                chain_id,
                get_checksum_address(pool_address),
            ),
            None,
        )
