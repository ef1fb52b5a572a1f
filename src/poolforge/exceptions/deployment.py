from typing import Any

from hexbytes import HexBytes

from poolforge.exceptions.base import PoolforgeError

"""
Exceptions defined here are raised by classes and functions in the `deployment` module.
"""


class DeploymentError(PoolforgeError):
    """
    Exception raised inside pool deployment helpers.
    """


class DeploymentValidationError(DeploymentError):
    """
    Raised when a pool specification violates a protocol bound. Raised before any network call.
    """

    def __init__(self, field: str, value: Any, bound: str) -> None:
        self.field = field
        self.value = value
        self.bound = bound
        super().__init__(message=f"{field} must be {bound}. Passed {field} = {value!r}")

    def __reduce__(self) -> tuple[Any, ...]:
        # Pickling will raise an exception if a reduction method is not defined
        return self.__class__, (self.field, self.value, self.bound)


class RoutingError(DeploymentError):
    """
    Raised when no contract entry point exists for the requested network, coin count and
    implementation variant.
    """


class SimulationError(DeploymentError):
    """
    Raised when the gas estimate for a call fails because the current chain state rejects it.
    """

    def __init__(self, method: str, error: str) -> None:
        self.method = method
        self.error = error
        super().__init__(message=f"Simulation of {method} failed: {error}")

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (self.method, self.error)


class SubmissionError(DeploymentError):
    """
    Raised when a transaction could not be signed or broadcast.
    """

    def __init__(self, method: str, error: str) -> None:
        self.method = method
        self.error = error
        super().__init__(message=f"Submission of {method} failed: {error}")

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (self.method, self.error)


class DeploymentReverted(DeploymentError):
    """
    Raised when a deployment transaction was mined but reverted.
    """

    def __init__(self, tx_hash: bytes | str) -> None:
        self.tx_hash = HexBytes(tx_hash).to_0x_hex()
        super().__init__(message=f"Transaction {self.tx_hash} reverted.")

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (self.tx_hash,)


class ResolutionError(DeploymentError):
    """
    Raised when a receipt does not contain the event records expected for the deployment.
    """
