from typing import Literal, overload

from poolforge.deployment.networks import NetworkContext
from poolforge.deployment.resolver import resolve_deployed_address
from poolforge.deployment.routing import select_target
from poolforge.deployment.submitter import GasMeteredSubmitter
from poolforge.deployment.transport import ChainTransport
from poolforge.deployment.types import (
    CryptoPoolSpec,
    DeploymentReceipt,
    DeploymentSpec,
    GaugeSpec,
    OracleSpec,
    PendingTransaction,
    PoolKind,
    ResolvedCallTarget,
    StableMetaPoolSpec,
    StablePlainPoolSpec,
    TricryptoPoolSpec,
)
from poolforge.deployment.validation import validate
from poolforge.logging import logger
from poolforge.registry import PoolRegistry, pool_registry


class PoolDeployer:
    """
    Deploys pools, gauges and oracle settings on a single network.

    Every operation validates its spec and selects the contract entry point before touching the
    network, so invalid input is rejected without an RPC call. The `estimate_*` methods simulate
    the call and return the gas estimate. The `deploy_*` methods submit the call and return the
    pending transaction, which is passed to the matching `get_deployed_*_address` method once the
    caller is ready to wait for it.
    """

    def __init__(
        self,
        network: NetworkContext,
        transport: ChainTransport,
        registry: PoolRegistry | None = None,
    ) -> None:
        self.network = network
        self.transport = transport
        self.registry = registry if registry is not None else pool_registry
        self.submitter = GasMeteredSubmitter(transport)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(network={self.network.name})"

    def prepare(self, spec: DeploymentSpec) -> ResolvedCallTarget:
        validate(spec, self.network)
        return select_target(spec, self.network)

    @overload
    async def _submit(
        self, spec: DeploymentSpec, *, estimate_only: Literal[True]
    ) -> int: ...

    @overload
    async def _submit(
        self, spec: DeploymentSpec, *, estimate_only: Literal[False] = False
    ) -> PendingTransaction: ...

    async def _submit(
        self,
        spec: DeploymentSpec,
        *,
        estimate_only: bool = False,
    ) -> int | PendingTransaction:
        target = self.prepare(spec)
        if estimate_only:
            return await self.submitter.submit(target, estimate_only=True)

        logger.info(
            f"Deploying {target.kind.value} via {target.method} at {target.address} "
            f"on {self.network.name}"
        )
        return await self.submitter.submit(target)

    async def estimate_deploy(self, spec: DeploymentSpec) -> int:
        return await self._submit(spec, estimate_only=True)

    async def deploy(self, spec: DeploymentSpec) -> PendingTransaction:
        return await self._submit(spec)

    async def wait_for_receipt(self, tx: PendingTransaction) -> DeploymentReceipt:
        return await self.transport.await_finality(tx)

    async def resolve_deployed_address(self, kind: PoolKind, receipt: DeploymentReceipt) -> str:
        return await resolve_deployed_address(
            kind,
            receipt,
            transport=self.transport,
            pool_registry=self.registry,
            chain_id=self.network.chain_id,
        )

    async def _get_deployed_address(self, kind: PoolKind, tx: PendingTransaction) -> str:
        receipt = await self.wait_for_receipt(tx)
        return await self.resolve_deployed_address(kind, receipt)

    # Plain stableswap pools

    async def estimate_deploy_stable_plain_pool(self, spec: StablePlainPoolSpec) -> int:
        return await self.estimate_deploy(spec)

    async def deploy_stable_plain_pool(self, spec: StablePlainPoolSpec) -> PendingTransaction:
        return await self.deploy(spec)

    async def get_deployed_stable_plain_pool_address(self, tx: PendingTransaction) -> str:
        return await self._get_deployed_address(PoolKind.STABLE_PLAIN, tx)

    # Stableswap metapools

    async def estimate_deploy_stable_meta_pool(self, spec: StableMetaPoolSpec) -> int:
        return await self.estimate_deploy(spec)

    async def deploy_stable_meta_pool(self, spec: StableMetaPoolSpec) -> PendingTransaction:
        return await self.deploy(spec)

    async def get_deployed_stable_meta_pool_address(self, tx: PendingTransaction) -> str:
        return await self._get_deployed_address(PoolKind.STABLE_META, tx)

    # Two-coin volatility pools

    async def estimate_deploy_crypto_pool(self, spec: CryptoPoolSpec) -> int:
        return await self.estimate_deploy(spec)

    async def deploy_crypto_pool(self, spec: CryptoPoolSpec) -> PendingTransaction:
        return await self.deploy(spec)

    async def get_deployed_crypto_pool_address(self, tx: PendingTransaction) -> str:
        return await self._get_deployed_address(PoolKind.CRYPTO, tx)

    # Three-coin volatility pools

    async def estimate_deploy_tricrypto_pool(self, spec: TricryptoPoolSpec) -> int:
        return await self.estimate_deploy(spec)

    async def deploy_tricrypto_pool(self, spec: TricryptoPoolSpec) -> PendingTransaction:
        return await self.deploy(spec)

    async def get_deployed_tricrypto_pool_address(self, tx: PendingTransaction) -> str:
        return await self._get_deployed_address(PoolKind.TRICRYPTO, tx)

    # Gauges

    async def estimate_deploy_gauge(self, spec: GaugeSpec) -> int:
        return await self.estimate_deploy(spec)

    async def deploy_gauge(self, spec: GaugeSpec) -> PendingTransaction:
        return await self.deploy(spec)

    async def get_deployed_gauge_address(self, tx: PendingTransaction) -> str:
        return await self._get_deployed_address(PoolKind.GAUGE, tx)

    # Rate oracles

    async def estimate_set_oracle(self, spec: OracleSpec) -> int:
        return await self.estimate_deploy(spec)

    async def set_oracle(self, spec: OracleSpec) -> PendingTransaction:
        return await self.deploy(spec)
