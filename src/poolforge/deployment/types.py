import dataclasses
import enum
from collections.abc import Sequence
from decimal import Decimal
from typing import Any

from eth_typing import ChecksumAddress
from hexbytes import HexBytes

from poolforge.constants import ZERO_ADDRESS, ZERO_METHOD_ID
from poolforge.types.aliases import BlockNumber, Gas

type Numeric = int | float | str | Decimal


class PoolKind(enum.Enum):
    STABLE_PLAIN = "stable_plain"
    STABLE_META = "stable_meta"
    CRYPTO = "crypto"
    TRICRYPTO = "tricrypto"
    GAUGE = "gauge"
    ORACLE = "oracle"


class AssetType(enum.IntEnum):
    USD = 0
    ETH = 1
    BTC = 2
    OTHER = 3


class PlainPoolRouting(enum.Enum):
    """
    The entry point used to deploy a plain stableswap pool.
    """

    #: `deploy_plain_pool` on the public factory
    DEFAULT = "default"

    #: `deploy_plain_pool` on the admin factory, with an EMA time argument
    USE_PROXY = "use_proxy"

    #: `deploy_plain_pool_and_set_oracle` on the admin factory
    SET_ORACLE = "set_oracle"


@dataclasses.dataclass(slots=True, frozen=True, kw_only=True)
class StablePlainPoolSpec:
    name: str
    symbol: str
    coins: Sequence[str]
    A: Numeric  # noqa: N815
    fee: Numeric  # percent
    asset_type: AssetType | int
    implementation_index: int
    ema_time: Numeric = 600  # seconds
    oracle_address: str = ZERO_ADDRESS
    oracle_method: str = ZERO_METHOD_ID


@dataclasses.dataclass(slots=True, frozen=True, kw_only=True)
class StableMetaPoolSpec:
    base_pool: str
    name: str
    symbol: str
    coin: str
    A: Numeric  # noqa: N815
    fee: Numeric  # percent
    implementation_index: int


@dataclasses.dataclass(slots=True, frozen=True, kw_only=True)
class CryptoPoolSpec:
    name: str
    symbol: str
    coins: Sequence[str]
    A: Numeric  # noqa: N815
    gamma: Numeric
    mid_fee: Numeric  # percent
    out_fee: Numeric  # percent
    allowed_extra_profit: Numeric
    fee_gamma: Numeric
    adjustment_step: Numeric
    ma_half_time: Numeric  # seconds
    initial_price: Numeric


@dataclasses.dataclass(slots=True, frozen=True, kw_only=True)
class TricryptoPoolSpec:
    name: str
    symbol: str
    coins: Sequence[str]
    A: Numeric  # noqa: N815
    gamma: Numeric
    mid_fee: Numeric  # percent
    out_fee: Numeric  # percent
    allowed_extra_profit: Numeric
    fee_gamma: Numeric
    adjustment_step: Numeric
    ema_time: Numeric  # seconds
    initial_prices: Sequence[Numeric]


@dataclasses.dataclass(slots=True, frozen=True, kw_only=True)
class GaugeSpec:
    pool: str
    factory: str


@dataclasses.dataclass(slots=True, frozen=True, kw_only=True)
class OracleSpec:
    pool: str
    oracle_address: str = ZERO_ADDRESS
    oracle_method: str = ZERO_METHOD_ID


type PoolSpec = StablePlainPoolSpec | StableMetaPoolSpec | CryptoPoolSpec | TricryptoPoolSpec
type DeploymentSpec = PoolSpec | GaugeSpec | OracleSpec


@dataclasses.dataclass(slots=True, frozen=True)
class ResolvedCallTarget:
    """
    A fully encoded contract call: the address, method and ordered arguments to submit.
    """

    address: ChecksumAddress
    method: str
    args: tuple[Any, ...]
    abi: list[Any]
    kind: PoolKind
    routing: PlainPoolRouting | None = None


@dataclasses.dataclass(slots=True, frozen=True)
class PendingTransaction:
    """
    A submitted transaction that has not yet been awaited.
    """

    tx_hash: HexBytes
    target: ResolvedCallTarget
    gas_limit: Gas


@dataclasses.dataclass(slots=True, frozen=True)
class EventRecord:
    address: str
    args: tuple[Any, ...] | None = None
    event: str | None = None


@dataclasses.dataclass(slots=True, frozen=True)
class DeploymentReceipt:
    tx_hash: HexBytes
    status: int
    block_number: BlockNumber
    logs: tuple[EventRecord, ...]

    @property
    def succeeded(self) -> bool:
        return self.status == 1
