from .pool import PoolRegistry, PoolRegistryEntry

pool_registry = PoolRegistry()

__all__ = (
    "PoolRegistry",
    "PoolRegistryEntry",
    "pool_registry",
)
