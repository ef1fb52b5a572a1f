from .aliases import BlockNumber, ChainId, Gas

__all__ = (
    "BlockNumber",
    "ChainId",
    "Gas",
)
