import copy
from typing import Any, Dict, Optional

from loguru import logger

from edogrula.cache import NullCache, SearchCache
from edogrula.config import DEFAULT_LIMIT, MAX_LIMIT, MAX_QUERY_LENGTH, SEARCH_CACHE_TTL_SECONDS
from edogrula.matchers.match_resolver import resolve
from edogrula.models import MatchResult, MatchStatus
from edogrula.query_classifier import classify
from edogrula.registry.base import BusinessRegistry, DenylistRegistry


def cap_query(raw: Any) -> str:
    """Trim the raw query and cap it at MAX_QUERY_LENGTH characters."""
    return str(raw or "").strip()[:MAX_QUERY_LENGTH]


def clamp_limit(value: Any, default: int = DEFAULT_LIMIT) -> int:
    """Coerce a caller-supplied limit into [1, MAX_LIMIT]."""
    try:
        n = int(value)
    except (TypeError, ValueError):
        n = default
    if n <= 0:
        n = default
    return max(1, min(n, MAX_LIMIT))


def to_payload(result: MatchResult) -> Dict[str, Any]:
    """Shape a MatchResult as the public search response."""
    if result.status == MatchStatus.VERIFIED:
        return {
            "success": True,
            "status": result.status.value,
            "business": result.primary,
            "businesses": result.all,
        }
    if result.status == MatchStatus.BLACKLIST:
        return {"success": True, "status": result.status.value, "business": result.primary}
    return {"success": True, "status": result.status.value, "businesses": []}


class SearchService:
    """
    Caller-side search flow: cap the input, classify it, consult the cache,
    resolve against the registries and shape the response payload.

    Cached payloads are not invalidated when the registries change; a write
    becomes visible once the entry expires.
    """

    def __init__(
        self,
        registry: BusinessRegistry,
        denylist: DenylistRegistry,
        cache: Optional[SearchCache] = None,
        cache_ttl: float = SEARCH_CACHE_TTL_SECONDS,
    ):
        self.registry = registry
        self.denylist = denylist
        self.cache = cache or NullCache()
        self.cache_ttl = cache_ttl

    async def search(self, raw: str, hint: Optional[str] = None, limit: Any = None) -> Dict[str, Any]:
        q = cap_query(raw)
        limit = clamp_limit(limit)

        classified = classify(q, hint)
        if not classified.ok:
            return {"success": True, "status": "not_found", "reason": classified.reason, "businesses": []}

        logger.debug(f"Search '{q}' (hint={hint!r}) classified as {classified.kind.value}: {classified.canonical_value}")

        cache_key = (classified.kind.value, classified.canonical_value, limit)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Cache hit for {cache_key}")
            return copy.deepcopy(cached)

        result = await resolve(classified, self.registry, self.denylist, limit)
        payload = to_payload(result)
        # Callers own the returned payload; the cache keeps its own copy
        self.cache.set(cache_key, copy.deepcopy(payload), self.cache_ttl)
        return payload
