"""
MongoDB-backed registries with rate limiting using aiolimiter.
"""
from typing import Any, Dict, List, Optional, Sequence, Tuple

from aiolimiter import AsyncLimiter
from bson import ObjectId
from bson.errors import InvalidId
from loguru import logger
from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from edogrula.config import (
    BLACKLIST_COLLECTION,
    BUSINESS_COLLECTION,
    CONCURRENCY,
    MONGO_DB,
    MONGO_URI,
)
from edogrula.exceptions import RegistryUnavailable
from edogrula.models import FieldMatch, Record


def build_or_filter(clauses: Sequence[FieldMatch]) -> Dict[str, Any]:
    """
    Translate probe clauses into a MongoDB filter.

    Example:
        [FieldMatch("slug", "^kule-sapanca$")]
        -> {"$or": [{"slug": {"$regex": "^kule-sapanca$", "$options": "i"}}]}
    """
    return {
        "$or": [
            {clause.field: {"$regex": clause.pattern, "$options": "i"}}
            for clause in clauses
        ]
    }


def build_and_filter(groups: Sequence[Sequence[FieldMatch]], where: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    AND together OR-groups of clauses and exact field conditions.

    Example:
        [[FieldMatch("type", "bungalov"), FieldMatch("type", "bungalow")]], {"verified": True}
        -> {"verified": True, "$and": [{"$or": [{"type": {...}}, {"type": {...}}]}]}
    """
    query = dict(where or {})
    conditions = [build_or_filter(group) for group in groups if group]
    if conditions:
        query["$and"] = conditions
    return query


def _lean(doc: Optional[Record]) -> Optional[Record]:
    """Make a document JSON-friendly by turning its ObjectId into a string."""
    if doc is not None and "_id" in doc:
        doc["_id"] = str(doc["_id"])
    return doc


class MongoClientProvider:
    """
    Singleton holder for the AsyncMongoClient and the probe rate limiter.
    """
    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not MongoClientProvider._initialized:
            self.client = AsyncMongoClient(MONGO_URI)
            self.db = self.client[MONGO_DB]
            # Rate limiter: allow CONCURRENCY probes per second
            self.rate_limiter = AsyncLimiter(max_rate=CONCURRENCY, time_period=1.0)
            MongoClientProvider._initialized = True

    def business_registry(self) -> "MongoBusinessRegistry":
        return MongoBusinessRegistry(self.db[BUSINESS_COLLECTION], self.rate_limiter)

    def denylist_registry(self) -> "MongoDenylistRegistry":
        return MongoDenylistRegistry(self.db[BLACKLIST_COLLECTION], self.rate_limiter)

    async def close(self):
        """Close the MongoDB client."""
        await self.client.close()
        MongoClientProvider._instance = None
        MongoClientProvider._initialized = False


class MongoBusinessRegistry:
    def __init__(self, collection, rate_limiter: Optional[AsyncLimiter] = None):
        self.collection = collection
        self.rate_limiter = rate_limiter or AsyncLimiter(max_rate=CONCURRENCY, time_period=1.0)

    async def find(self, clauses: Sequence[FieldMatch], limit: int) -> List[Record]:
        """
        Return up to `limit` documents matching any clause, in natural order.

        Raises:
            RegistryUnavailable: If the MongoDB query fails.
        """
        if not clauses:
            return []
        async with self.rate_limiter:
            try:
                cursor = self.collection.find(build_or_filter(clauses)).limit(limit)
                docs = await cursor.to_list(length=limit)
                return [_lean(doc) for doc in docs]
            except PyMongoError as e:
                logger.debug(f"⚠️ Registry find failed on '{self.collection.name}': {e}")
                raise RegistryUnavailable(f"{self.collection.name} query failed: {e}") from e

    async def find_one(self, clauses: Sequence[FieldMatch]) -> Optional[Record]:
        """
        Return the first document matching any clause, or None.

        Raises:
            RegistryUnavailable: If the MongoDB query fails.
        """
        if not clauses:
            return None
        async with self.rate_limiter:
            try:
                return _lean(await self.collection.find_one(build_or_filter(clauses)))
            except PyMongoError as e:
                logger.debug(f"⚠️ Registry find_one failed on '{self.collection.name}': {e}")
                raise RegistryUnavailable(f"{self.collection.name} query failed: {e}") from e

    async def find_by_id(self, record_id: str) -> Optional[Record]:
        """
        Return the document whose `_id` is the given ObjectId hex string, or
        None when the string is not a valid ObjectId.

        Raises:
            RegistryUnavailable: If the MongoDB query fails.
        """
        try:
            oid = ObjectId(record_id)
        except (InvalidId, TypeError):
            return None
        async with self.rate_limiter:
            try:
                return _lean(await self.collection.find_one({"_id": oid}))
            except PyMongoError as e:
                logger.debug(f"⚠️ Registry find_by_id failed on '{self.collection.name}': {e}")
                raise RegistryUnavailable(f"{self.collection.name} query failed: {e}") from e

    async def find_page(
        self,
        groups: Sequence[Sequence[FieldMatch]],
        where: Dict[str, Any],
        skip: int,
        limit: int,
    ) -> Tuple[List[Record], int]:
        """
        Return one page of matching documents and the total match count.

        Raises:
            RegistryUnavailable: If the MongoDB query fails.
        """
        query = build_and_filter(groups, where)
        async with self.rate_limiter:
            try:
                cursor = self.collection.find(query).skip(skip).limit(limit)
                docs = await cursor.to_list(length=limit)
                total = await self.collection.count_documents(query)
                return [_lean(doc) for doc in docs], total
            except PyMongoError as e:
                logger.debug(f"⚠️ Registry page query failed on '{self.collection.name}': {e}")
                raise RegistryUnavailable(f"{self.collection.name} query failed: {e}") from e


class MongoDenylistRegistry(MongoBusinessRegistry):
    pass
