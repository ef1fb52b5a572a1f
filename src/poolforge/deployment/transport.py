"""
Chain access used by the deployer.

`ChainTransport` is the interface the submitter and resolver depend on. `Web3ChainTransport`
implements it on top of an `AsyncWeb3` connection and a locally held signing account.
"""

import dataclasses
import enum
import time
from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING, Any, Protocol, Self

import eth_abi.abi
from eth_abi.exceptions import DecodingError
from eth_typing import ChecksumAddress
from hexbytes import HexBytes
from web3 import AsyncBaseProvider, AsyncWeb3
from web3.exceptions import Web3Exception
from web3.types import LogReceipt, TxParams, TxReceipt

from poolforge.config import settings
from poolforge.connection import async_connection_manager, get_async_web3
from poolforge.deployment.types import (
    DeploymentReceipt,
    EventRecord,
    PendingTransaction,
    ResolvedCallTarget,
)
from poolforge.exceptions import SimulationError, SubmissionError
from poolforge.functions import encode_function_calldata, event_topic
from poolforge.logging import logger
from poolforge.types.aliases import ChainId

if TYPE_CHECKING:
    from eth_account.signers.local import LocalAccount
    from web3.contract.async_contract import AsyncContractFunction


class ChainTransport(Protocol):
    """
    The chain operations needed to deploy a pool and recover its address.
    """

    async def estimate_call(self, target: ResolvedCallTarget) -> int:
        """
        Simulate the call against current chain state and return its gas cost.
        """

    async def submit_call(self, target: ResolvedCallTarget, gas_limit: int) -> PendingTransaction:
        """
        Sign and broadcast the call with the given gas limit.
        """

    async def refresh_fee_parameters(self) -> None:
        """
        Fetch current fee parameters for the next submission.
        """

    async def await_finality(self, tx: PendingTransaction) -> DeploymentReceipt:
        """
        Wait for the transaction receipt and decode its event records.
        """

    async def read_call(
        self,
        address: str,
        function_prototype: str,
        args: Sequence[Any],
        return_types: Sequence[str],
    ) -> tuple[Any, ...]:
        """
        Perform a read-only call and decode the result.
        """


class FeeMethod(enum.Enum):
    #: Chains without a base fee
    LEGACY = "legacy"

    #: EIP-1559 chains
    LONDON = "london"


@dataclasses.dataclass(slots=True, frozen=True)
class FeeParameters:
    method: FeeMethod
    legacy_gas_price: int | None = None
    base_fee: int | None = None
    max_priority_fee_per_gas: int | None = None
    max_fee_per_gas: int | None = None

    def get_tx_gas_params(self) -> dict[str, int | None]:
        """
        Get gas params as they are applied to ContractFunction.build_transaction()
        """

        if self.method is FeeMethod.LONDON:
            return {
                "maxPriorityFeePerGas": self.max_priority_fee_per_gas,
                "maxFeePerGas": self.max_fee_per_gas,
            }
        return {"gasPrice": self.legacy_gas_price}


class FeeParameterCache:
    """
    Holds the most recently fetched fee parameters for `ttl` seconds.
    """

    def __init__(
        self,
        ttl: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self._clock = clock
        self._value: FeeParameters | None = None
        self._fetched_at: float = 0.0

    def get(self) -> FeeParameters | None:
        if self._value is None or self._clock() - self._fetched_at > self.ttl:
            return None
        return self._value

    def set(self, value: FeeParameters) -> None:
        self._value = value
        self._fetched_at = self._clock()

    def clear(self) -> None:
        self._value = None


def decode_event_record(
    log: LogReceipt | dict[str, Any],
    events_by_topic: dict[bytes, dict[str, Any]],
) -> EventRecord:
    """
    Decode a raw log against the known events. Logs with no matching event keep only their emitting
    address.
    """

    address = str(log["address"]).lower()
    topics = [HexBytes(topic) for topic in log["topics"]]
    if not topics or (event_abi := events_by_topic.get(bytes(topics[0]))) is None:
        return EventRecord(address=address)

    inputs = event_abi["inputs"]
    indexed_topics = iter(topics[1:])
    try:
        data_values = iter(
            eth_abi.abi.decode(
                types=[item["type"] for item in inputs if not item.get("indexed")],
                data=HexBytes(log["data"]),
            )
        )
        args: list[Any] = []
        for item in inputs:
            if not item.get("indexed"):
                args.append(next(data_values))
            elif item["type"] in {"string", "bytes"} or item["type"].endswith("]"):
                # Indexed dynamic values are stored as their hash
                args.append(next(indexed_topics))
            else:
                (value,) = eth_abi.abi.decode(types=[item["type"]], data=next(indexed_topics))
                args.append(value)
    except (DecodingError, StopIteration):
        # Same topic, different layout. Treat it as an undecoded record.
        logger.debug(f"Could not decode {event_abi['name']} log from {address}")
        return EventRecord(address=address)

    return EventRecord(address=address, args=tuple(args), event=event_abi["name"])


def decode_receipt(
    receipt: TxReceipt | dict[str, Any],
    abi: Iterable[dict[str, Any]],
) -> DeploymentReceipt:
    """
    Convert a web3 receipt into a `DeploymentReceipt`, decoding every log whose topic matches an
    event in `abi`.
    """

    events_by_topic = {event_topic(item): item for item in abi if item.get("type") == "event"}
    return DeploymentReceipt(
        tx_hash=HexBytes(receipt["transactionHash"]),
        status=receipt["status"],
        block_number=receipt["blockNumber"],
        logs=tuple(decode_event_record(log, events_by_topic) for log in receipt["logs"]),
    )


class Web3ChainTransport:
    """
    A `ChainTransport` that estimates, signs and sends transactions from `account` through `w3`.
    """

    def __init__(
        self,
        w3: AsyncWeb3[AsyncBaseProvider],
        account: "LocalAccount",
        fee_cache: FeeParameterCache | None = None,
        receipt_timeout: float | None = None,
    ) -> None:
        self.w3 = w3
        self.account = account
        self.fee_cache = (
            fee_cache
            if fee_cache is not None
            else FeeParameterCache(ttl=settings.deployment.fee_cache_ttl)
        )
        self.receipt_timeout = (
            receipt_timeout if receipt_timeout is not None else settings.deployment.receipt_timeout
        )

    @classmethod
    def from_connection_manager(
        cls,
        account: "LocalAccount",
        chain_id: ChainId | None = None,
        fee_cache: FeeParameterCache | None = None,
        receipt_timeout: float | None = None,
    ) -> Self:
        """
        Build a transport over the `AsyncWeb3` instance registered for `chain_id`, or over the
        default instance if no chain ID is given.
        """

        w3 = (
            get_async_web3()
            if chain_id is None
            else async_connection_manager.get_web3(chain_id=chain_id)
        )
        return cls(w3=w3, account=account, fee_cache=fee_cache, receipt_timeout=receipt_timeout)

    @property
    def sender(self) -> ChecksumAddress:
        return self.account.address

    def _contract_function(self, target: ResolvedCallTarget) -> "AsyncContractFunction":
        contract = self.w3.eth.contract(address=target.address, abi=target.abi)
        return contract.functions[target.method](*target.args)

    async def estimate_call(self, target: ResolvedCallTarget) -> int:
        try:
            return await self._contract_function(target).estimate_gas({"from": self.sender})
        except Web3Exception as exc:
            raise SimulationError(method=target.method, error=str(exc)) from exc

    async def fetch_fee_parameters(self) -> FeeParameters:
        last_block = await self.w3.eth.get_block("latest")
        base_fee = last_block.get("baseFeePerGas")

        if base_fee is None:
            return FeeParameters(
                method=FeeMethod.LEGACY,
                legacy_gas_price=await self.w3.eth.gas_price,
            )

        max_priority_fee_per_gas = await self.w3.eth.max_priority_fee
        max_fee_per_gas = max_priority_fee_per_gas + 2 * base_fee
        return FeeParameters(
            method=FeeMethod.LONDON,
            base_fee=base_fee,
            max_priority_fee_per_gas=max_priority_fee_per_gas,
            max_fee_per_gas=max_fee_per_gas,
        )

    async def refresh_fee_parameters(self) -> None:
        try:
            fees = await self.fetch_fee_parameters()
        except Web3Exception as exc:
            raise SubmissionError(method="refresh_fee_parameters", error=str(exc)) from exc
        self.fee_cache.set(fees)
        logger.debug(f"Refreshed fee parameters: {fees}")

    async def current_fee_parameters(self) -> FeeParameters:
        if (fees := self.fee_cache.get()) is None:
            await self.refresh_fee_parameters()
            fees = self.fee_cache.get()
            if TYPE_CHECKING:
                assert fees is not None
        return fees

    async def submit_call(self, target: ResolvedCallTarget, gas_limit: int) -> PendingTransaction:
        fees = await self.current_fee_parameters()
        try:
            tx = await self._contract_function(target).build_transaction(
                TxParams(
                    {
                        "from": self.sender,
                        "gas": gas_limit,
                        "chainId": await self.w3.eth.chain_id,
                        "nonce": await self.w3.eth.get_transaction_count(self.sender, "pending"),
                        **fees.get_tx_gas_params(),  # type: ignore[typeddict-item]
                    }
                )
            )
            signed = self.account.sign_transaction(tx)  # type: ignore[arg-type]
            tx_hash = await self.w3.eth.send_raw_transaction(signed.raw_transaction)
        except (Web3Exception, ValueError, TypeError) as exc:
            raise SubmissionError(method=target.method, error=str(exc)) from exc

        logger.info(f"Sent {target.method} transaction {tx_hash.to_0x_hex()} to {target.address}")
        return PendingTransaction(tx_hash=HexBytes(tx_hash), target=target, gas_limit=gas_limit)

    async def await_finality(self, tx: PendingTransaction) -> DeploymentReceipt:
        receipt = await self.w3.eth.wait_for_transaction_receipt(
            tx.tx_hash,
            timeout=self.receipt_timeout,  # type: ignore[arg-type]
        )
        return decode_receipt(receipt, tx.target.abi)

    async def read_call(
        self,
        address: str,
        function_prototype: str,
        args: Sequence[Any],
        return_types: Sequence[str],
    ) -> tuple[Any, ...]:
        result = await self.w3.eth.call(
            TxParams(
                to=address,  # type: ignore[typeddict-item]
                data=encode_function_calldata(function_prototype, args),
            )
        )
        return tuple(eth_abi.abi.decode(types=list(return_types), data=result))
