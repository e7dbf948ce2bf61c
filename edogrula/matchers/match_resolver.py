# edogrula/matchers/match_resolver.py

from loguru import logger

from edogrula.matchers.probe_builder import build_denylist_probe, build_registry_probe
from edogrula.models import ClassifiedQuery, MatchResult, MatchStatus
from edogrula.registry.base import BusinessRegistry, DenylistRegistry


async def resolve(
    classified: ClassifiedQuery,
    registry: BusinessRegistry,
    denylist: DenylistRegistry,
    limit: int,
) -> MatchResult:
    """
    Resolve a classified query against the verified registry, then the denylist.

    A verified match always wins: the denylist is only probed once the
    registry probe has come back empty, never concurrently with it.

    Args:
        classified (ClassifiedQuery): Output of the classifier.
        registry (BusinessRegistry): Verified business collection.
        denylist (DenylistRegistry): Blacklist collection.
        limit (int): Maximum number of verified records to return.

    Returns:
        MatchResult: verified (primary + all), blacklist (primary) or not_found.

    Raises:
        RegistryUnavailable: Propagated unchanged from either collaborator.
    """
    registry_probe = build_registry_probe(classified)
    verified = await registry.find(registry_probe, limit) if registry_probe else []
    if verified:
        logger.debug(f"✅ {len(verified)} verified match(es) for {classified.kind.value} '{classified.canonical_value}'")
        return MatchResult(status=MatchStatus.VERIFIED, primary=verified[0], all=list(verified))

    denylist_probe = build_denylist_probe(classified)
    black = await denylist.find_one(denylist_probe) if denylist_probe else None
    if black:
        logger.debug(f"⛔ Blacklist match for {classified.kind.value} '{classified.canonical_value}'")
        return MatchResult(status=MatchStatus.BLACKLIST, primary=black)

    logger.debug(f"❔ No match for {classified.kind.value} '{classified.canonical_value}'")
    return MatchResult(status=MatchStatus.NOT_FOUND)
