"""
Bounds checks for pool deployment parameters.

Every check raises `DeploymentValidationError` naming the offending field, the value passed, and
the violated bound. Checks run in a fixed order and stop at the first failure. Nothing here touches
the network.
"""

from collections.abc import Iterable, Sequence
from decimal import Decimal, InvalidOperation
from typing import Any

from eth_utils.address import is_address

from poolforge.constants import MAX_UINT256
from poolforge.deployment.networks import NetworkContext
from poolforge.deployment.types import (
    AssetType,
    CryptoPoolSpec,
    DeploymentSpec,
    GaugeSpec,
    Numeric,
    OracleSpec,
    StableMetaPoolSpec,
    StablePlainPoolSpec,
    TricryptoPoolSpec,
)
from poolforge.exceptions import DeploymentValidationError, PoolforgeTypeError

STABLE_NAME_MAX_LENGTH = 32
STABLE_SYMBOL_MAX_LENGTH = 10
TRICRYPTO_NAME_MAX_LENGTH = 64
TRICRYPTO_SYMBOL_MAX_LENGTH = 32

STABLE_PLAIN_COIN_COUNTS = (2, 3, 4)
STABLE_MIN_A = Decimal(1)
STABLE_MAX_A = Decimal(MAX_UINT256)
STABLE_MIN_FEE = Decimal("0.04")
STABLE_MAX_FEE = Decimal(1)
# floor(ema_time / ln 2) must fit a uint256
STABLE_MAX_EMA_TIME = Decimal(MAX_UINT256 // 2)

CRYPTO_MIN_A = Decimal(4000)
CRYPTO_MAX_A = Decimal(4 * 10**9)
CRYPTO_MIN_GAMMA = Decimal("1e-8")
CRYPTO_MAX_GAMMA = Decimal("0.02")
CRYPTO_MIN_MID_FEE = Decimal("0.005")
CRYPTO_MAX_ALLOWED_EXTRA_PROFIT = Decimal("0.01")
CRYPTO_MIN_MA_HALF_TIME = Decimal(0)

TRICRYPTO_MIN_A = Decimal(2700)
TRICRYPTO_MAX_A = Decimal(27 * 10**7)
TRICRYPTO_MIN_GAMMA = Decimal("1e-8")
TRICRYPTO_MAX_GAMMA = Decimal("0.05")
TRICRYPTO_MIN_MID_FEE = Decimal(0)
TRICRYPTO_MAX_ALLOWED_EXTRA_PROFIT = Decimal(1)
TRICRYPTO_MIN_EMA_TIME = Decimal(60)

MAX_FEE_PERCENT = Decimal(100)
MAX_FEE_GAMMA = Decimal(1)
MAX_ADJUSTMENT_STEP = Decimal(1)
MAX_HALF_TIME = Decimal(604800)  # 1 week
MIN_INITIAL_PRICE = Decimal("1e-12")
MAX_INITIAL_PRICE = Decimal("1e12")


def to_decimal(field: str, value: Numeric) -> Decimal:
    """
    Convert a user-supplied number to a finite `Decimal`, using its string form so that floats keep
    the digits the user typed instead of their binary expansion.
    """

    if isinstance(value, bool):
        raise DeploymentValidationError(field, value, "a number")
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation:
        raise DeploymentValidationError(field, value, "a number") from None
    if not result.is_finite():
        raise DeploymentValidationError(field, value, "a finite number")
    return result


def check_range(
    field: str,
    value: Numeric,
    minimum: Decimal | None = None,
    maximum: Decimal | None = None,
    *,
    exclusive_minimum: bool = False,
) -> Decimal:
    amount = to_decimal(field, value)
    if minimum is not None:
        if exclusive_minimum and amount <= minimum:
            raise DeploymentValidationError(field, value, f"> {minimum}")
        if amount < minimum:
            raise DeploymentValidationError(field, value, f">= {minimum}")
    if maximum is not None and amount > maximum:
        raise DeploymentValidationError(field, value, f"<= {maximum}")
    return amount


def check_max_length(field: str, value: str, max_length: int) -> None:
    if not isinstance(value, str):
        raise DeploymentValidationError(field, value, "a string")
    if len(value) > max_length:
        raise DeploymentValidationError(field, value, f"at most {max_length} characters")


def check_address(field: str, value: Any) -> None:
    if not isinstance(value, str) or not is_address(value):
        raise DeploymentValidationError(field, value, "a hex-encoded address")


def check_choice(field: str, value: Any, choices: Iterable[int]) -> None:
    choices = tuple(choices)
    if isinstance(value, bool) or not isinstance(value, int) or value not in choices:
        raise DeploymentValidationError(
            field, value, f"one of {', '.join(str(choice) for choice in choices)}"
        )


def check_coins(field: str, coins: Sequence[str], counts: Iterable[int], *, distinct: bool) -> None:
    counts = tuple(counts)
    if not isinstance(coins, Sequence) or isinstance(coins, str) or len(coins) not in counts:
        raise DeploymentValidationError(
            field,
            coins,
            f"a list of {' or '.join(str(count) for count in counts)} addresses",
        )
    for i, coin in enumerate(coins):
        check_address(f"{field}[{i}]", coin)
    if distinct and len({coin.lower() for coin in coins}) != len(coins):
        raise DeploymentValidationError(field, coins, "a list of different addresses")


def check_method_name(field: str, value: Any) -> None:
    if not isinstance(value, str) or not value:
        raise DeploymentValidationError(field, value, "a non-empty method name")


def validate_stable_plain_pool(spec: StablePlainPoolSpec, network: NetworkContext) -> None:
    check_max_length("name", spec.name, STABLE_NAME_MAX_LENGTH)
    check_max_length("symbol", spec.symbol, STABLE_SYMBOL_MAX_LENGTH)
    check_coins("coins", spec.coins, STABLE_PLAIN_COIN_COUNTS, distinct=False)
    check_range("A", spec.A, STABLE_MIN_A, STABLE_MAX_A)
    check_range("fee", spec.fee, STABLE_MIN_FEE, STABLE_MAX_FEE)
    check_choice("asset_type", spec.asset_type, iter(AssetType))
    check_choice(
        "implementation_index",
        spec.implementation_index,
        range(network.plain_implementation_count(len(spec.coins))),
    )
    check_range(
        "ema_time",
        spec.ema_time,
        Decimal(0),
        STABLE_MAX_EMA_TIME,
        exclusive_minimum=True,
    )
    check_address("oracle_address", spec.oracle_address)
    check_method_name("oracle_method", spec.oracle_method)


def validate_stable_meta_pool(spec: StableMetaPoolSpec, network: NetworkContext) -> None:
    check_max_length("name", spec.name, STABLE_NAME_MAX_LENGTH)
    check_max_length("symbol", spec.symbol, STABLE_SYMBOL_MAX_LENGTH)
    check_address("base_pool", spec.base_pool)
    check_address("coin", spec.coin)
    check_range("A", spec.A, STABLE_MIN_A, STABLE_MAX_A)
    check_range("fee", spec.fee, STABLE_MIN_FEE, STABLE_MAX_FEE)
    check_choice(
        "implementation_index",
        spec.implementation_index,
        range(network.meta_implementations),
    )


def validate_crypto_pool(spec: CryptoPoolSpec, network: NetworkContext) -> None:  # noqa: ARG001
    check_max_length("name", spec.name, STABLE_NAME_MAX_LENGTH)
    check_max_length("symbol", spec.symbol, STABLE_SYMBOL_MAX_LENGTH)
    check_coins("coins", spec.coins, (2,), distinct=True)
    check_range("A", spec.A, CRYPTO_MIN_A, CRYPTO_MAX_A)
    check_range("gamma", spec.gamma, CRYPTO_MIN_GAMMA, CRYPTO_MAX_GAMMA)
    mid_fee = check_range("mid_fee", spec.mid_fee, CRYPTO_MIN_MID_FEE, MAX_FEE_PERCENT)
    check_range("out_fee", spec.out_fee, mid_fee, MAX_FEE_PERCENT)
    check_range(
        "allowed_extra_profit",
        spec.allowed_extra_profit,
        Decimal(0),
        CRYPTO_MAX_ALLOWED_EXTRA_PROFIT,
    )
    check_range("fee_gamma", spec.fee_gamma, Decimal(0), MAX_FEE_GAMMA)
    check_range("adjustment_step", spec.adjustment_step, Decimal(0), MAX_ADJUSTMENT_STEP)
    check_range("ma_half_time", spec.ma_half_time, CRYPTO_MIN_MA_HALF_TIME, MAX_HALF_TIME)
    check_range("initial_price", spec.initial_price, MIN_INITIAL_PRICE, MAX_INITIAL_PRICE)


def validate_tricrypto_pool(spec: TricryptoPoolSpec, network: NetworkContext) -> None:  # noqa: ARG001
    check_max_length("name", spec.name, TRICRYPTO_NAME_MAX_LENGTH)
    check_max_length("symbol", spec.symbol, TRICRYPTO_SYMBOL_MAX_LENGTH)
    check_coins("coins", spec.coins, (3,), distinct=True)
    check_range("A", spec.A, TRICRYPTO_MIN_A, TRICRYPTO_MAX_A)
    check_range("gamma", spec.gamma, TRICRYPTO_MIN_GAMMA, TRICRYPTO_MAX_GAMMA)
    mid_fee = check_range("mid_fee", spec.mid_fee, TRICRYPTO_MIN_MID_FEE, MAX_FEE_PERCENT)
    check_range("out_fee", spec.out_fee, mid_fee, MAX_FEE_PERCENT)
    check_range(
        "allowed_extra_profit",
        spec.allowed_extra_profit,
        Decimal(0),
        TRICRYPTO_MAX_ALLOWED_EXTRA_PROFIT,
    )
    check_range("fee_gamma", spec.fee_gamma, Decimal(0), MAX_FEE_GAMMA)
    check_range("adjustment_step", spec.adjustment_step, Decimal(0), MAX_ADJUSTMENT_STEP)
    check_range("ema_time", spec.ema_time, TRICRYPTO_MIN_EMA_TIME, MAX_HALF_TIME)
    if (
        not isinstance(spec.initial_prices, Sequence)
        or isinstance(spec.initial_prices, str)
        or len(spec.initial_prices) != 2
    ):
        raise DeploymentValidationError("initial_prices", spec.initial_prices, "a list of 2 prices")
    for i, price in enumerate(spec.initial_prices):
        check_range(f"initial_prices[{i}]", price, MIN_INITIAL_PRICE, MAX_INITIAL_PRICE)


def validate_gauge(spec: GaugeSpec, network: NetworkContext) -> None:  # noqa: ARG001
    check_address("pool", spec.pool)
    check_address("factory", spec.factory)


def validate_oracle(spec: OracleSpec, network: NetworkContext) -> None:  # noqa: ARG001
    check_address("pool", spec.pool)
    check_address("oracle_address", spec.oracle_address)
    check_method_name("oracle_method", spec.oracle_method)


def validate(spec: DeploymentSpec, network: NetworkContext) -> None:
    match spec:
        case StablePlainPoolSpec():
            validate_stable_plain_pool(spec, network)
        case StableMetaPoolSpec():
            validate_stable_meta_pool(spec, network)
        case CryptoPoolSpec():
            validate_crypto_pool(spec, network)
        case TricryptoPoolSpec():
            validate_tricrypto_pool(spec, network)
        case GaugeSpec():
            validate_gauge(spec, network)
        case OracleSpec():
            validate_oracle(spec, network)
        case _:
            raise PoolforgeTypeError(message=f"Unsupported deployment spec {type(spec).__name__}")
