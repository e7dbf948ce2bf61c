"""
Direct lookups used by the detail endpoints: by slug, by handle, or by an
identifier that may be a MongoDB ObjectId, a slug or a handle.
"""
import re
from typing import Optional

from edogrula.models import FieldMatch, MatchResult, MatchStatus, Record
from edogrula.normalizers import normalize_handle, slugify
from edogrula.registry.base import BusinessRegistry, DenylistRegistry

OBJECT_ID_RE = re.compile(r"^[0-9a-fA-F]{24}$")


def looks_like_object_id(value: str) -> bool:
    return bool(OBJECT_ID_RE.match(str(value or "").strip()))


async def find_by_slug(registry: BusinessRegistry, slug: str) -> Optional[Record]:
    key = slugify(slug)
    if not key:
        return None
    return await registry.find_one([FieldMatch.exact("slug", key)])


async def find_by_handle(registry: BusinessRegistry, handle: str) -> Optional[Record]:
    key = normalize_handle(handle)
    if not key:
        return None
    return await registry.find_one([
        FieldMatch.exact("handle", key),
        FieldMatch.handle("instagramUsername", key),
    ])


async def find_blacklist_entry(denylist: DenylistRegistry, id_or_slug: str) -> Optional[Record]:
    """Blacklist entry by ObjectId, else by exact `businessSlug`."""
    key = str(id_or_slug or "").strip()
    if not key:
        return None
    if looks_like_object_id(key):
        entry = await denylist.find_by_id(key)
        if entry:
            return entry
    return await denylist.find_one([FieldMatch.exact("businessSlug", key)])


async def find_business(
    registry: BusinessRegistry,
    denylist: DenylistRegistry,
    identifier: str,
) -> MatchResult:
    """
    Look a business up by id, slug or handle, falling back to the blacklist.

    An identifier shaped like an ObjectId is tried against `_id` before the
    slug and handle fields, on each collection in turn.

    Args:
        registry (BusinessRegistry): Verified business collection.
        denylist (DenylistRegistry): Blacklist collection.
        identifier (str): An id ("64f1c2a9e4b0a1b2c3d4e5f1"), a slug
            ("kule-sapanca") or a handle ("@kule_sapanca").

    Returns:
        MatchResult: verified or blacklist with `primary` set, else not_found.
    """
    raw = str(identifier or "").strip()
    is_id = looks_like_object_id(raw)
    slug = slugify(raw)
    handle = normalize_handle(raw)

    if is_id:
        business = await registry.find_by_id(raw)
        if business:
            return MatchResult(status=MatchStatus.VERIFIED, primary=business)

    clauses = []
    if slug:
        clauses.append(FieldMatch.exact("slug", slug))
    if handle:
        clauses.append(FieldMatch.exact("handle", handle))
        clauses.append(FieldMatch.handle("instagramUsername", handle))

    business = await registry.find_one(clauses) if clauses else None
    if business:
        return MatchResult(status=MatchStatus.VERIFIED, primary=business)

    if is_id:
        black = await denylist.find_by_id(raw)
        if black:
            return MatchResult(status=MatchStatus.BLACKLIST, primary=black)

    if slug:
        black = await denylist.find_one([
            FieldMatch.exact("businessSlug", slug),
            FieldMatch.exact("slug", slug),
        ])
        if black:
            return MatchResult(status=MatchStatus.BLACKLIST, primary=black)

    return MatchResult(status=MatchStatus.NOT_FOUND)
