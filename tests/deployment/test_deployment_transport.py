import eth_abi.abi
import pytest
from eth_abi.exceptions import DecodingError
from hexbytes import HexBytes
from web3.exceptions import ContractLogicError, Web3Exception

from poolforge.checksum_cache import get_checksum_address
from poolforge.connection import async_connection_manager, set_async_web3
from poolforge.deployment.abi import CRYPTO_FACTORY_ABI, STABLE_FACTORY_ABI
from poolforge.deployment.transport import (
    FeeMethod,
    FeeParameterCache,
    FeeParameters,
    Web3ChainTransport,
    decode_event_record,
    decode_receipt,
)
from poolforge.deployment.types import PendingTransaction, PoolKind, ResolvedCallTarget
from poolforge.exceptions import PoolforgeValueError, SimulationError, SubmissionError
from poolforge.functions import encode_function_calldata, event_topic

FACTORY_ADDRESS = "0xB9fC157394Af804a3578134A6585C0dc9cc990d4"
POOL_ADDRESS = "0x1111111111111111111111111111111111111111"
GAUGE_ADDRESS = "0x3333333333333333333333333333333333333333"
TRANSFER_TOPIC = HexBytes("0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef")

STABLE_GAUGE_EVENT = next(
    item for item in STABLE_FACTORY_ABI if item.get("name") == "LiquidityGaugeDeployed"
)
STABLE_EVENTS = {event_topic(item): item for item in STABLE_FACTORY_ABI if item["type"] == "event"}


def gauge_log(data: bytes) -> dict:
    return {
        "address": FACTORY_ADDRESS,
        "topics": [HexBytes(event_topic(STABLE_GAUGE_EVENT))],
        "data": HexBytes(data),
    }


def test_decode_matching_event():
    log = gauge_log(eth_abi.abi.encode(["address", "address"], [POOL_ADDRESS, GAUGE_ADDRESS]))

    record = decode_event_record(log, STABLE_EVENTS)

    assert record.address == FACTORY_ADDRESS.lower()
    assert record.event == "LiquidityGaugeDeployed"
    assert record.args == (get_checksum_address(POOL_ADDRESS), get_checksum_address(GAUGE_ADDRESS))


def test_decode_unknown_event_keeps_address_only():
    log = {
        "address": POOL_ADDRESS,
        "topics": [TRANSFER_TOPIC, HexBytes(bytes(32)), HexBytes(bytes(32))],
        "data": HexBytes(eth_abi.abi.encode(["uint256"], [1])),
    }

    record = decode_event_record(log, STABLE_EVENTS)

    assert record.address == POOL_ADDRESS
    assert record.args is None
    assert record.event is None


def test_decode_log_without_topics():
    log = {"address": POOL_ADDRESS, "topics": [], "data": b""}
    record = decode_event_record(log, STABLE_EVENTS)
    assert record.args is None


def test_decode_truncated_event_data():
    record = decode_event_record(gauge_log(bytes(32)), STABLE_EVENTS)
    assert record.address == FACTORY_ADDRESS.lower()
    assert record.args is None


def test_decode_receipt_uses_target_abi():
    gauge_data = eth_abi.abi.encode(["address", "address"], [POOL_ADDRESS, GAUGE_ADDRESS])
    receipt = decode_receipt(
        {
            "transactionHash": HexBytes(b"\x01" * 32),
            "status": 1,
            "blockNumber": 19_000_000,
            "logs": [
                {
                    "address": POOL_ADDRESS,
                    "topics": [TRANSFER_TOPIC],
                    "data": HexBytes(b""),
                },
                gauge_log(gauge_data),
            ],
        },
        STABLE_FACTORY_ABI,
    )

    assert receipt.succeeded
    assert receipt.block_number == 19_000_000
    assert [record.args is not None for record in receipt.logs] == [False, True]

    # The two-coin factory emits a three-argument gauge record with a different topic
    crypto_receipt = decode_receipt(
        {
            "transactionHash": HexBytes(b"\x01" * 32),
            "status": 1,
            "blockNumber": 19_000_000,
            "logs": [gauge_log(gauge_data)],
        },
        CRYPTO_FACTORY_ABI,
    )
    assert crypto_receipt.logs[0].args is None


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_fee_parameter_cache_expires():
    clock = FakeClock()
    cache = FeeParameterCache(ttl=15.0, clock=clock)
    fees = FeeParameters(method=FeeMethod.LEGACY, legacy_gas_price=10**9)

    assert cache.get() is None
    cache.set(fees)
    assert cache.get() is fees

    clock.now += 15.0
    assert cache.get() is fees

    clock.now += 0.1
    assert cache.get() is None

    cache.set(fees)
    cache.clear()
    assert cache.get() is None


def test_fee_parameters_tx_gas_params():
    assert FeeParameters(
        method=FeeMethod.LONDON,
        base_fee=10,
        max_priority_fee_per_gas=2,
        max_fee_per_gas=22,
    ).get_tx_gas_params() == {"maxPriorityFeePerGas": 2, "maxFeePerGas": 22}
    assert FeeParameters(method=FeeMethod.LEGACY, legacy_gas_price=7).get_tx_gas_params() == {
        "gasPrice": 7
    }


async def _value(value):
    return value


class FakeContractFunction:
    def __init__(self, eth: "FakeEth", address: str, method: str, args: tuple) -> None:
        self.eth = eth
        self.address = address
        self.method = method
        self.args = args

    async def estimate_gas(self, transaction: dict) -> int:
        self.eth.estimated.append((self.method, self.args, transaction))
        if isinstance(self.eth.estimate, Exception):
            raise self.eth.estimate
        return self.eth.estimate

    async def build_transaction(self, transaction: dict) -> dict:
        return {**transaction, "to": self.address, "data": f"{self.method}{self.args}"}


class FakeContractFunctions:
    def __init__(self, eth: "FakeEth", address: str) -> None:
        self.eth = eth
        self.address = address

    def __getitem__(self, method: str):
        return lambda *args: FakeContractFunction(self.eth, self.address, method, args)


class FakeContract:
    def __init__(self, eth: "FakeEth", address: str) -> None:
        self.functions = FakeContractFunctions(eth, address)


class FakeEth:
    def __init__(
        self,
        block: dict | Exception | None = None,
        max_priority_fee: int = 0,
        gas_price: int = 0,
        estimate: int | Exception = 250_000,
        chain_id: int = 1,
        nonce: int = 7,
    ) -> None:
        self.block = block if block is not None else {}
        self._max_priority_fee = max_priority_fee
        self._gas_price = gas_price
        self._chain_id = chain_id
        self.estimate = estimate
        self.nonce = nonce
        self.estimated: list[tuple] = []
        self.sent: list[bytes] = []
        self.send_error: Exception | None = None
        self.receipt: dict | None = None
        self.receipt_waits: list[tuple] = []
        self.call_result = b""
        self.eth_calls: list[dict] = []

    async def get_block(self, block_identifier):
        if isinstance(self.block, Exception):
            raise self.block
        return self.block

    @property
    def max_priority_fee(self):
        return _value(self._max_priority_fee)

    @property
    def gas_price(self):
        return _value(self._gas_price)

    @property
    def chain_id(self):
        return _value(self._chain_id)

    def contract(self, address, abi):
        return FakeContract(self, address)

    async def get_transaction_count(self, account, block_identifier):
        assert block_identifier == "pending"
        return self.nonce

    async def send_raw_transaction(self, raw_transaction: bytes) -> HexBytes:
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(raw_transaction)
        return HexBytes(b"\x0a" * 32)

    async def wait_for_transaction_receipt(self, transaction_hash, timeout):
        self.receipt_waits.append((transaction_hash, timeout))
        return self.receipt

    async def call(self, transaction: dict) -> bytes:
        self.eth_calls.append(transaction)
        return self.call_result


class FakeWeb3:
    def __init__(self, eth: FakeEth) -> None:
        self.eth = eth


class FakeSignedTransaction:
    def __init__(self, raw_transaction: bytes) -> None:
        self.raw_transaction = raw_transaction


class FakeAccount:
    address = get_checksum_address("0x4444444444444444444444444444444444444444")

    def __init__(self) -> None:
        self.signed: list[dict] = []

    def sign_transaction(self, transaction: dict) -> FakeSignedTransaction:
        self.signed.append(transaction)
        return FakeSignedTransaction(b"signed")


def make_transport(eth: FakeEth, account: FakeAccount | None = None) -> Web3ChainTransport:
    return Web3ChainTransport(
        w3=FakeWeb3(eth),  # type: ignore[arg-type]
        account=account,  # type: ignore[arg-type]
        fee_cache=FeeParameterCache(ttl=15.0),
        receipt_timeout=10.0,
    )


def gauge_target() -> ResolvedCallTarget:
    return ResolvedCallTarget(
        address=get_checksum_address(FACTORY_ADDRESS),
        method="deploy_gauge",
        args=(get_checksum_address(POOL_ADDRESS),),
        abi=STABLE_FACTORY_ABI,
        kind=PoolKind.GAUGE,
    )


async def test_fetch_london_fee_parameters():
    transport = make_transport(
        FakeEth(block={"baseFeePerGas": 30 * 10**9}, max_priority_fee=10**9)
    )
    fees = await transport.fetch_fee_parameters()

    assert fees.method is FeeMethod.LONDON
    assert fees.base_fee == 30 * 10**9
    assert fees.max_priority_fee_per_gas == 10**9
    assert fees.max_fee_per_gas == 61 * 10**9


async def test_fetch_legacy_fee_parameters():
    transport = make_transport(FakeEth(block={}, gas_price=5 * 10**9))
    fees = await transport.fetch_fee_parameters()

    assert fees.method is FeeMethod.LEGACY
    assert fees.legacy_gas_price == 5 * 10**9
    assert fees.get_tx_gas_params() == {"gasPrice": 5 * 10**9}


async def test_refresh_fee_parameters_fills_cache():
    transport = make_transport(FakeEth(block={}, gas_price=5 * 10**9))
    assert transport.fee_cache.get() is None

    await transport.refresh_fee_parameters()
    cached = transport.fee_cache.get()
    assert cached is not None
    assert cached.legacy_gas_price == 5 * 10**9
    assert await transport.current_fee_parameters() is cached


async def test_refresh_fee_parameters_failure():
    eth = FakeEth(block=Web3Exception("connection refused"))  # type: ignore[arg-type]
    transport = make_transport(eth)

    with pytest.raises(SubmissionError, match="connection refused") as exc_info:
        await transport.refresh_fee_parameters()
    assert isinstance(exc_info.value.__cause__, Web3Exception)
    assert transport.fee_cache.get() is None


async def test_estimate_call():
    eth = FakeEth(estimate=321_000)
    transport = make_transport(eth, FakeAccount())

    assert await transport.estimate_call(gauge_target()) == 321_000
    ((method, args, transaction),) = eth.estimated
    assert method == "deploy_gauge"
    assert args == (get_checksum_address(POOL_ADDRESS),)
    assert transaction == {"from": FakeAccount.address}


async def test_estimate_call_failure():
    eth = FakeEth(estimate=ContractLogicError("execution reverted"))
    transport = make_transport(eth, FakeAccount())

    with pytest.raises(SimulationError, match="execution reverted") as exc_info:
        await transport.estimate_call(gauge_target())
    assert exc_info.value.method == "deploy_gauge"
    assert isinstance(exc_info.value.__cause__, ContractLogicError)


async def test_submit_call_builds_signed_transaction():
    eth = FakeEth(
        block={"baseFeePerGas": 30 * 10**9},
        max_priority_fee=10**9,
        chain_id=42161,
        nonce=12,
    )
    account = FakeAccount()
    transport = make_transport(eth, account)

    tx = await transport.submit_call(gauge_target(), gas_limit=325_000)

    (transaction,) = account.signed
    assert transaction["from"] == FakeAccount.address
    assert transaction["to"] == get_checksum_address(FACTORY_ADDRESS)
    assert transaction["gas"] == 325_000
    assert transaction["chainId"] == 42161
    assert transaction["nonce"] == 12
    assert transaction["maxPriorityFeePerGas"] == 10**9
    assert transaction["maxFeePerGas"] == 61 * 10**9
    assert "gasPrice" not in transaction
    assert eth.sent == [b"signed"]

    assert tx.tx_hash == HexBytes(b"\x0a" * 32)
    assert tx.gas_limit == 325_000
    assert tx.target.method == "deploy_gauge"


async def test_submit_call_uses_cached_legacy_fees():
    eth = FakeEth(gas_price=5 * 10**9)
    account = FakeAccount()
    transport = make_transport(eth, account)
    transport.fee_cache.set(FeeParameters(method=FeeMethod.LEGACY, legacy_gas_price=3 * 10**9))

    await transport.submit_call(gauge_target(), gas_limit=100_000)

    assert account.signed[0]["gasPrice"] == 3 * 10**9
    assert "maxFeePerGas" not in account.signed[0]


async def test_submit_call_failure():
    eth = FakeEth(gas_price=5 * 10**9)
    eth.send_error = Web3Exception("nonce too low")
    transport = make_transport(eth, FakeAccount())

    with pytest.raises(SubmissionError, match="nonce too low") as exc_info:
        await transport.submit_call(gauge_target(), gas_limit=100_000)
    assert exc_info.value.method == "deploy_gauge"
    assert isinstance(exc_info.value.__cause__, Web3Exception)
    assert eth.sent == []


async def test_await_finality_decodes_with_target_abi():
    eth = FakeEth()
    eth.receipt = {
        "transactionHash": HexBytes(b"\x0a" * 32),
        "status": 1,
        "blockNumber": 19_000_000,
        "logs": [
            gauge_log(eth_abi.abi.encode(["address", "address"], [POOL_ADDRESS, GAUGE_ADDRESS]))
        ],
    }
    transport = make_transport(eth, FakeAccount())
    tx = PendingTransaction(
        tx_hash=HexBytes(b"\x0a" * 32),
        target=gauge_target(),
        gas_limit=100_000,
    )

    receipt = await transport.await_finality(tx)

    assert eth.receipt_waits == [(HexBytes(b"\x0a" * 32), 10.0)]
    assert receipt.succeeded
    (record,) = receipt.logs
    assert record.event == "LiquidityGaugeDeployed"
    assert record.args == (get_checksum_address(POOL_ADDRESS), get_checksum_address(GAUGE_ADDRESS))


async def test_read_call():
    eth = FakeEth()
    eth.call_result = eth_abi.abi.encode(["address"], [POOL_ADDRESS])
    transport = make_transport(eth, FakeAccount())

    result = await transport.read_call(
        address=GAUGE_ADDRESS,
        function_prototype="minter()",
        args=(),
        return_types=("address",),
    )

    assert result == (get_checksum_address(POOL_ADDRESS),)
    assert eth.eth_calls == [
        {"to": GAUGE_ADDRESS, "data": encode_function_calldata("minter()", ())}
    ]


async def test_read_call_undecodable_result():
    eth = FakeEth()
    transport = make_transport(eth, FakeAccount())

    with pytest.raises(DecodingError):
        await transport.read_call(
            address=GAUGE_ADDRESS,
            function_prototype="minter()",
            args=(),
            return_types=("address",),
        )


class FakeProvider:
    def decode_rpc_response(self, raw_response: bytes) -> dict:
        raise NotImplementedError


class FakeConnectedWeb3(FakeWeb3):
    def __init__(self, eth: FakeEth) -> None:
        super().__init__(eth)
        self.provider = FakeProvider()

    async def is_connected(self) -> bool:
        return True


async def test_transport_from_default_connection():
    w3 = FakeConnectedWeb3(FakeEth(chain_id=10))
    await set_async_web3(w3)  # type: ignore[arg-type]

    # RPC responses are decoded with ujson after registration
    assert w3.provider.decode_rpc_response(b'{"jsonrpc": "2.0", "id": 1, "result": "0xa"}') == {
        "jsonrpc": "2.0",
        "id": 1,
        "result": "0xa",
    }

    transport = Web3ChainTransport.from_connection_manager(account=FakeAccount())  # type: ignore[arg-type]
    assert transport.w3 is w3
    assert async_connection_manager.default_chain_id == 10


async def test_transport_from_chain_connection():
    mainnet_w3 = FakeConnectedWeb3(FakeEth(chain_id=1))
    arbitrum_w3 = FakeConnectedWeb3(FakeEth(chain_id=42161))
    await async_connection_manager.register_web3(mainnet_w3, optimize=False)  # type: ignore[arg-type]
    await async_connection_manager.register_web3(arbitrum_w3, optimize=False)  # type: ignore[arg-type]

    transport = Web3ChainTransport.from_connection_manager(
        account=FakeAccount(),  # type: ignore[arg-type]
        chain_id=42161,
        receipt_timeout=30.0,
    )
    assert transport.w3 is arbitrum_w3
    assert transport.receipt_timeout == 30.0

    with pytest.raises(PoolforgeValueError):
        Web3ChainTransport.from_connection_manager(account=FakeAccount(), chain_id=10)  # type: ignore[arg-type]
