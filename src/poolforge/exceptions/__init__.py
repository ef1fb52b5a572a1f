from poolforge.exceptions.base import PoolforgeError, PoolforgeTypeError, PoolforgeValueError
from poolforge.exceptions.deployment import (
    DeploymentError,
    DeploymentReverted,
    DeploymentValidationError,
    ResolutionError,
    RoutingError,
    SimulationError,
    SubmissionError,
)

from . import deployment

__all__ = (
    "DeploymentError",
    "DeploymentReverted",
    "DeploymentValidationError",
    "PoolforgeError",
    "PoolforgeTypeError",
    "PoolforgeValueError",
    "ResolutionError",
    "RoutingError",
    "SimulationError",
    "SubmissionError",
    "deployment",
)
