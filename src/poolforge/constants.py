__all__ = (
    "MAX_UINT8",
    "MAX_UINT256",
    "MIN_UINT8",
    "MIN_UINT256",
    "ZERO_ADDRESS",
    "ZERO_METHOD_ID",
)

import typing

from eth_typing import ChecksumAddress

from poolforge.checksum_cache import get_checksum_address


def _min_uint(_: int) -> int:
    return 0


def _max_uint(bits: int) -> int:
    return typing.cast("int", 2**bits - 1)


MIN_UINT8 = _min_uint(8)
MAX_UINT8 = _max_uint(8)

MIN_UINT256 = _min_uint(256)
MAX_UINT256 = _max_uint(256)

ZERO_ADDRESS: ChecksumAddress = get_checksum_address("0x0000000000000000000000000000000000000000")

# Sentinel selector accepted by the factories in place of a real oracle method ID
ZERO_METHOD_ID = "0x00000000"
