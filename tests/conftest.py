import logging
from collections.abc import Sequence
from typing import Any

import pytest
from eth_abi.exceptions import DecodingError
from hexbytes import HexBytes

from poolforge.connection import async_connection_manager
from poolforge.deployment.types import (
    CryptoPoolSpec,
    DeploymentReceipt,
    PendingTransaction,
    ResolvedCallTarget,
    StableMetaPoolSpec,
    StablePlainPoolSpec,
    TricryptoPoolSpec,
)
from poolforge.logging import logger
from poolforge.registry import pool_registry

DAI_ADDRESS = "0x6b175474e89094c44da98b954eedeac495271d0f"
USDC_ADDRESS = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
USDT_ADDRESS = "0xdac17f958d2ee523a2206206994597c13d831ec7"
WBTC_ADDRESS = "0x2260fac5e5542a773aa44fbcfedf7c193bc2c599"
WETH_ADDRESS = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"
CURVE_3POOL_ADDRESS = "0xbebc44782c7db0a1a60cb6fe97d0b483032ff1c7"

FAKE_TX_HASH = HexBytes(b"\x01" * 32)


@pytest.fixture(autouse=True)
def _initialize_and_reset_after_each_test():
    """
    Before each test, clear/reset global values and singletons
    """
    async_connection_manager.connections.clear()
    async_connection_manager._default_chain_id = None
    pool_registry._all_pools.clear()


@pytest.fixture(scope="session", autouse=True)
def _set_poolforge_logging():
    """
    Set the logging level to DEBUG for the test run
    """
    logger.setLevel(logging.DEBUG)


class FakeTransport:
    """
    An in-memory chain transport. Every call is recorded in `calls`, in order, so tests can check
    which chain operations ran and in what sequence.
    """

    def __init__(
        self,
        estimate: int = 250_000,
        receipt: DeploymentReceipt | None = None,
        minter: str | None = None,
    ) -> None:
        self.estimate = estimate
        self.receipt = receipt
        self.minter = minter
        self.calls: list[tuple[Any, ...]] = []

    @property
    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]

    async def estimate_call(self, target: ResolvedCallTarget) -> int:
        self.calls.append(("estimate_call", target))
        return self.estimate

    async def refresh_fee_parameters(self) -> None:
        self.calls.append(("refresh_fee_parameters",))

    async def submit_call(self, target: ResolvedCallTarget, gas_limit: int) -> PendingTransaction:
        self.calls.append(("submit_call", target, gas_limit))
        return PendingTransaction(tx_hash=FAKE_TX_HASH, target=target, gas_limit=gas_limit)

    async def await_finality(self, tx: PendingTransaction) -> DeploymentReceipt:
        self.calls.append(("await_finality", tx))
        assert self.receipt is not None
        return self.receipt

    async def read_call(
        self,
        address: str,
        function_prototype: str,
        args: Sequence[Any],
        return_types: Sequence[str],
    ) -> tuple[Any, ...]:
        self.calls.append(("read_call", address, function_prototype))
        if self.minter is None:
            msg = "Insufficient data bytes"
            raise DecodingError(msg)
        return (self.minter,)


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def stable_plain_pool_spec() -> StablePlainPoolSpec:
    return StablePlainPoolSpec(
        name="Test DAI/USDC",
        symbol="tDAIUSDC",
        coins=[DAI_ADDRESS, USDC_ADDRESS],
        A=200,
        fee="0.04",
        asset_type=0,
        implementation_index=0,
    )


@pytest.fixture
def stable_meta_pool_spec() -> StableMetaPoolSpec:
    return StableMetaPoolSpec(
        base_pool=CURVE_3POOL_ADDRESS,
        name="Test WBTC/3CRV",
        symbol="tWBTC3CRV",
        coin=WBTC_ADDRESS,
        A=100,
        fee=0.04,
        implementation_index=0,
    )


@pytest.fixture
def crypto_pool_spec() -> CryptoPoolSpec:
    return CryptoPoolSpec(
        name="Test WETH/USDC",
        symbol="tWETHUSDC",
        coins=[WETH_ADDRESS, USDC_ADDRESS],
        A=400000,
        gamma="0.000145",
        mid_fee="0.26",
        out_fee="0.45",
        allowed_extra_profit="0.000002",
        fee_gamma="0.00023",
        adjustment_step="0.000146",
        ma_half_time=600,
        initial_price=1500,
    )


@pytest.fixture
def tricrypto_pool_spec() -> TricryptoPoolSpec:
    return TricryptoPoolSpec(
        name="Test USDT/WBTC/WETH",
        symbol="tTRI",
        coins=[USDT_ADDRESS, WBTC_ADDRESS, WETH_ADDRESS],
        A=2700,
        gamma="0.0000135",
        mid_fee="0.01",
        out_fee="0.045",
        allowed_extra_profit="0.000002",
        fee_gamma="0.0005",
        adjustment_step="0.00049",
        ema_time=600,
        initial_prices=[30000, 2000],
    )
