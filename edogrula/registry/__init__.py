"""Registry collaborators for the verified business and blacklist collections."""
from edogrula.registry.base import BusinessRegistry, DenylistRegistry
from edogrula.registry.memory_registry import InMemoryBusinessRegistry, InMemoryDenylistRegistry
from edogrula.registry.mongo_registry import MongoBusinessRegistry, MongoClientProvider, MongoDenylistRegistry

__all__ = [
    "BusinessRegistry",
    "DenylistRegistry",
    "InMemoryBusinessRegistry",
    "InMemoryDenylistRegistry",
    "MongoBusinessRegistry",
    "MongoDenylistRegistry",
    "MongoClientProvider",
]
