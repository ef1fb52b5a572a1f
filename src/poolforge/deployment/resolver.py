"""
Recovery of deployed contract addresses from finalized deployment receipts.

The factories do not return the new address in a form visible to a transaction sender, so each pool
kind is resolved by a heuristic tied to the order of the event records its factory emits.
"""

from typing import Any

from eth_abi.exceptions import DecodingError
from eth_utils.address import is_address

from poolforge.deployment.transport import ChainTransport
from poolforge.deployment.types import DeploymentReceipt, EventRecord, PoolKind
from poolforge.exceptions import DeploymentReverted, PoolforgeTypeError, ResolutionError
from poolforge.logging import logger
from poolforge.registry import PoolRegistry
from poolforge.types.aliases import ChainId


def _cannot_resolve(kind: PoolKind, reason: str) -> ResolutionError:
    return ResolutionError(message=f"Cannot resolve deployed {kind.value} address: {reason}")


def _as_address(kind: PoolKind, value: Any) -> str:
    if not isinstance(value, str) or not is_address(value):
        raise _cannot_resolve(kind, f"{value!r} is not an address")
    return value.lower()


def _first_record(kind: PoolKind, receipt: DeploymentReceipt) -> EventRecord:
    if not receipt.logs:
        raise _cannot_resolve(kind, "the receipt has no event records")
    return receipt.logs[0]


def _last_decoded_record(kind: PoolKind, receipt: DeploymentReceipt) -> EventRecord:
    for record in reversed(receipt.logs):
        if record.args is not None:
            return record
    raise _cannot_resolve(kind, "the receipt has no decoded event records")


def check_receipt(receipt: DeploymentReceipt) -> None:
    if not receipt.succeeded:
        raise DeploymentReverted(receipt.tx_hash)


def resolve_stable_plain_pool_address(receipt: DeploymentReceipt) -> str:
    """
    The new pool emits the first record of the receipt.
    """

    return _as_address(
        PoolKind.STABLE_PLAIN,
        _first_record(PoolKind.STABLE_PLAIN, receipt).address,
    )


def resolve_stable_meta_pool_address(
    receipt: DeploymentReceipt,
    pool_registry: PoolRegistry,
    chain_id: ChainId,
) -> str:
    """
    The factory's deployment record (the last decoded record) names the base pool as its second
    argument. The new metapool emits its first record after one record per underlying coin of the
    base pool, so it is found at the index equal to the base pool's underlying coin count.
    """

    kind = PoolKind.STABLE_META
    record = _last_decoded_record(kind, receipt)
    if record.args is None or len(record.args) < 2:
        raise _cannot_resolve(kind, "the deployment record has no base pool argument")
    base_pool_address = _as_address(kind, record.args[1])

    base_pool = pool_registry.get(chain_id=chain_id, pool_address=base_pool_address)
    if base_pool is None:
        raise _cannot_resolve(kind, f"base pool {base_pool_address} is not in the pool registry")

    index = base_pool.underlying_coin_count
    if index >= len(receipt.logs):
        raise _cannot_resolve(
            kind,
            f"expected at least {index + 1} event records, found {len(receipt.logs)}",
        )
    return _as_address(kind, receipt.logs[index].address)


async def resolve_crypto_pool_address(
    receipt: DeploymentReceipt,
    transport: ChainTransport,
) -> str:
    """
    The first record is emitted by the new LP token, whose `minter` is the pool.
    """

    kind = PoolKind.CRYPTO
    lp_token_address = _as_address(kind, _first_record(kind, receipt).address)
    try:
        (minter,) = await transport.read_call(
            address=lp_token_address,
            function_prototype="minter()",
            args=(),
            return_types=("address",),
        )
    except DecodingError:
        raise _cannot_resolve(kind, f"{lp_token_address} has no minter") from None
    return _as_address(kind, minter)


def resolve_tricrypto_pool_address(receipt: DeploymentReceipt) -> str:
    """
    The factory's deployment record (the last decoded record) names the pool as its first argument.
    """

    kind = PoolKind.TRICRYPTO
    record = _last_decoded_record(kind, receipt)
    if not record.args:
        raise _cannot_resolve(kind, "the deployment record has no arguments")
    return _as_address(kind, record.args[0])


def resolve_gauge_address(receipt: DeploymentReceipt) -> str:
    """
    The gauge is the last argument of the first record.
    """

    kind = PoolKind.GAUGE
    record = _first_record(kind, receipt)
    if not record.args:
        raise _cannot_resolve(kind, "the first event record has no decoded arguments")
    return _as_address(kind, record.args[-1])


async def resolve_deployed_address(
    kind: PoolKind,
    receipt: DeploymentReceipt,
    *,
    transport: ChainTransport | None = None,
    pool_registry: PoolRegistry | None = None,
    chain_id: ChainId | None = None,
) -> str:
    check_receipt(receipt)

    match kind:
        case PoolKind.STABLE_PLAIN:
            address = resolve_stable_plain_pool_address(receipt)
        case PoolKind.STABLE_META:
            if pool_registry is None or chain_id is None:
                raise PoolforgeTypeError(
                    message="Metapool resolution requires a pool registry and chain ID."
                )
            address = resolve_stable_meta_pool_address(receipt, pool_registry, chain_id)
        case PoolKind.CRYPTO:
            if transport is None:
                raise PoolforgeTypeError(message="Crypto pool resolution requires a transport.")
            address = await resolve_crypto_pool_address(receipt, transport)
        case PoolKind.TRICRYPTO:
            address = resolve_tricrypto_pool_address(receipt)
        case PoolKind.GAUGE:
            address = resolve_gauge_address(receipt)
        case _:
            raise PoolforgeTypeError(message=f"{kind.value} transactions do not deploy a contract.")

    logger.info(f"Resolved deployed {kind.value} address {address}")
    return address
