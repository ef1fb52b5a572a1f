"""
Conversion of validated pool parameters into the fixed-point integers the factory contracts expect.

Fee percentages use 8 decimal places, ratios and prices use 18, and counts, amplification and
seconds use 0. Extra fractional digits are truncated, never rounded.
"""

import decimal
import math
from decimal import Decimal

from eth_typing import ChecksumAddress
from eth_utils.crypto import keccak
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from poolforge.checksum_cache import get_checksum_address
from poolforge.constants import ZERO_ADDRESS, ZERO_METHOD_ID
from poolforge.deployment.types import (
    CryptoPoolSpec,
    Numeric,
    StableMetaPoolSpec,
    StablePlainPoolSpec,
    TricryptoPoolSpec,
)
from poolforge.deployment.validation import to_decimal
from poolforge.exceptions import DeploymentValidationError
from poolforge.validation.evm_values import ValidatedUint8, ValidatedUint256

COUNT_DECIMALS = 0
FEE_DECIMALS = 8
RATIO_DECIMALS = 18

STABLE_PLAIN_MAX_COINS = 4

# Fixed admin fee for two-coin volatility pools: 50% at 10 decimals
CRYPTO_ADMIN_FEE = 5_000_000_000

# Precision generous enough for any uint256 scaled by 10**18
_CONTEXT = decimal.Context(prec=100, rounding=decimal.ROUND_DOWN)

_uint256_adapter: TypeAdapter[int] = TypeAdapter(ValidatedUint256)
_uint8_adapter: TypeAdapter[int] = TypeAdapter(ValidatedUint8)


def truncate(value: Numeric, decimals: int) -> Decimal:
    """
    Drop all fractional digits past `decimals`, rounding towards zero.
    """

    with decimal.localcontext(_CONTEXT):
        return to_decimal("value", value).quantize(Decimal(1).scaleb(-decimals))


def parse_units(value: Numeric, decimals: int = RATIO_DECIMALS) -> int:
    """
    Convert a decimal amount to an integer with `decimals` implied fractional digits.
    """

    with decimal.localcontext(_CONTEXT):
        return int(truncate(value, decimals).scaleb(decimals))


def format_units(amount: int, decimals: int = RATIO_DECIMALS) -> Decimal:
    """
    Convert a fixed-point integer back to a `Decimal`.
    """

    with decimal.localcontext(_CONTEXT):
        return Decimal(amount).scaleb(-decimals)


def encode_ema_time(seconds: Numeric) -> int:
    """
    Convert a half-time in seconds into the exponential decay time the contracts store:
    `floor(seconds / ln(2))`.
    """

    return parse_units(math.floor(float(to_decimal("ema_time", seconds)) / math.log(2)), 0)


def encode_method_id(method_name: str) -> bytes:
    """
    Return the 4-byte selector for `method_name`, or four zero bytes for the sentinel "0x00000000".
    """

    if method_name == ZERO_METHOD_ID:
        return bytes(4)
    return keccak(text=method_name)[:4]


def encode_uint256(field: str, value: int) -> int:
    try:
        return _uint256_adapter.validate_python(value)
    except PydanticValidationError:
        raise DeploymentValidationError(field, value, "representable as uint256") from None


def _encode(field: str, value: Numeric, decimals: int) -> int:
    return encode_uint256(field, parse_units(value, decimals))


def pad_coins(coins: list[ChecksumAddress], length: int) -> list[ChecksumAddress]:
    return coins + [ZERO_ADDRESS] * (length - len(coins))


def encode_stable_plain_pool(spec: StablePlainPoolSpec) -> tuple:
    """
    Arguments shared by every plain pool entry point:
    (name, symbol, coins[4], A, fee, asset_type, implementation_index)
    """

    return (
        spec.name,
        spec.symbol,
        pad_coins(
            [get_checksum_address(coin) for coin in spec.coins],
            STABLE_PLAIN_MAX_COINS,
        ),
        _encode("A", spec.A, COUNT_DECIMALS),
        _encode("fee", spec.fee, FEE_DECIMALS),
        _uint8_adapter.validate_python(int(spec.asset_type)),
        spec.implementation_index,
    )


def encode_stable_meta_pool(spec: StableMetaPoolSpec) -> tuple:
    """
    (base_pool, name, symbol, coin, A, fee, implementation_index)
    """

    return (
        get_checksum_address(spec.base_pool),
        spec.name,
        spec.symbol,
        get_checksum_address(spec.coin),
        _encode("A", spec.A, COUNT_DECIMALS),
        _encode("fee", spec.fee, FEE_DECIMALS),
        spec.implementation_index,
    )


def encode_crypto_pool(spec: CryptoPoolSpec) -> tuple:
    """
    (name, symbol, coins[2], A, gamma, mid_fee, out_fee, allowed_extra_profit, fee_gamma,
    adjustment_step, admin_fee, ma_half_time, initial_price)

    The two-coin factory stores the half-time directly, so `ma_half_time` is passed as seconds.
    """

    return (
        spec.name,
        spec.symbol,
        [get_checksum_address(coin) for coin in spec.coins],
        _encode("A", spec.A, COUNT_DECIMALS),
        _encode("gamma", spec.gamma, RATIO_DECIMALS),
        _encode("mid_fee", spec.mid_fee, FEE_DECIMALS),
        _encode("out_fee", spec.out_fee, FEE_DECIMALS),
        _encode("allowed_extra_profit", spec.allowed_extra_profit, RATIO_DECIMALS),
        _encode("fee_gamma", spec.fee_gamma, RATIO_DECIMALS),
        _encode("adjustment_step", spec.adjustment_step, RATIO_DECIMALS),
        CRYPTO_ADMIN_FEE,
        _encode("ma_half_time", spec.ma_half_time, COUNT_DECIMALS),
        _encode("initial_price", spec.initial_price, RATIO_DECIMALS),
    )


def encode_tricrypto_pool(spec: TricryptoPoolSpec, wrapped_native_token: ChecksumAddress) -> tuple:
    """
    (name, symbol, coins[3], weth, implementation_id, A, gamma, mid_fee, out_fee, fee_gamma,
    allowed_extra_profit, adjustment_step, ma_exp_time, initial_prices[2])

    Note the order of `fee_gamma` and `allowed_extra_profit` differs from the two-coin factory.
    """

    return (
        spec.name,
        spec.symbol,
        [get_checksum_address(coin) for coin in spec.coins],
        get_checksum_address(wrapped_native_token),
        0,
        _encode("A", spec.A, COUNT_DECIMALS),
        _encode("gamma", spec.gamma, RATIO_DECIMALS),
        _encode("mid_fee", spec.mid_fee, FEE_DECIMALS),
        _encode("out_fee", spec.out_fee, FEE_DECIMALS),
        _encode("fee_gamma", spec.fee_gamma, RATIO_DECIMALS),
        _encode("allowed_extra_profit", spec.allowed_extra_profit, RATIO_DECIMALS),
        _encode("adjustment_step", spec.adjustment_step, RATIO_DECIMALS),
        encode_uint256("ema_time", encode_ema_time(spec.ema_time)),
        [
            _encode(f"initial_prices[{i}]", price, RATIO_DECIMALS)
            for i, price in enumerate(spec.initial_prices)
        ],
    )
