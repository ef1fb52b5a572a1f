from typing import Literal, overload

from poolforge.deployment.transport import ChainTransport
from poolforge.deployment.types import PendingTransaction, ResolvedCallTarget
from poolforge.logging import logger
from poolforge.types.aliases import Gas

# Gas limit safety margin applied to the simulated cost: 130 / 100
GAS_LIMIT_MULTIPLIER_NUMERATOR = 130
GAS_LIMIT_MULTIPLIER_DENOMINATOR = 100


def gas_limit_from_estimate(estimate: Gas) -> Gas:
    return estimate * GAS_LIMIT_MULTIPLIER_NUMERATOR // GAS_LIMIT_MULTIPLIER_DENOMINATOR


class GasMeteredSubmitter:
    """
    Simulates a call, then either reports the gas estimate or submits the call with a gas limit 30%
    above the estimate. Each step is attempted once and failures propagate to the caller.
    """

    def __init__(self, transport: ChainTransport) -> None:
        self.transport = transport

    @overload
    async def submit(
        self, target: ResolvedCallTarget, *, estimate_only: Literal[True]
    ) -> Gas: ...

    @overload
    async def submit(
        self, target: ResolvedCallTarget, *, estimate_only: Literal[False] = False
    ) -> PendingTransaction: ...

    async def submit(
        self,
        target: ResolvedCallTarget,
        *,
        estimate_only: bool = False,
    ) -> Gas | PendingTransaction:
        estimate = await self.transport.estimate_call(target)
        logger.debug(f"Estimated {estimate} gas for {target.method} at {target.address}")
        if estimate_only:
            return estimate

        gas_limit = gas_limit_from_estimate(estimate)
        # Fee parameters may have gone stale while the estimate was running
        await self.transport.refresh_fee_parameters()
        return await self.transport.submit_call(target, gas_limit)
