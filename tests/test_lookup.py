import pytest
from unittest.mock import AsyncMock, MagicMock

from edogrula.lookup import (
    find_blacklist_entry,
    find_business,
    find_by_handle,
    find_by_slug,
    looks_like_object_id,
)
from edogrula.models import MatchStatus
from edogrula.registry import InMemoryBusinessRegistry, InMemoryDenylistRegistry

KULE_ID = "64f1c2a9e4b0a1b2c3d4e5f1"
SCAM_ID = "64f1c2a9e4b0a1b2c3d4e5f3"


@pytest.mark.asyncio
async def test_find_by_slug_slugifies_input(registry):
    business = await find_by_slug(registry, "Şirince Bağ Evi")
    assert business["_id"] == "64f1c2a9e4b0a1b2c3d4e5f2"


@pytest.mark.asyncio
async def test_find_by_slug_skips_probe_for_empty_slug():
    registry = MagicMock()
    registry.find_one = AsyncMock()
    assert await find_by_slug(registry, "  ") is None
    registry.find_one.assert_not_called()


@pytest.mark.asyncio
async def test_find_by_handle_matches_handle_or_instagram_username(registry):
    assert (await find_by_handle(registry, "@KULE_SAPANCA"))["_id"] == "64f1c2a9e4b0a1b2c3d4e5f1"
    assert await find_by_handle(registry, "kule") is None


@pytest.mark.asyncio
async def test_find_business_prefers_registry(registry, denylist):
    result = await find_business(registry, denylist, "kule_sapanca")
    assert result.status == MatchStatus.VERIFIED
    assert result.primary["_id"] == "64f1c2a9e4b0a1b2c3d4e5f1"


@pytest.mark.asyncio
async def test_find_business_falls_back_to_blacklist(registry, denylist):
    result = await find_business(registry, denylist, "scam-co")
    assert result.status == MatchStatus.BLACKLIST
    assert result.primary["_id"] == "64f1c2a9e4b0a1b2c3d4e5f3"


@pytest.mark.asyncio
async def test_find_business_not_found(registry, denylist):
    result = await find_business(registry, denylist, "olmayan-isletme")
    assert result.status == MatchStatus.NOT_FOUND
    assert result.primary is None


@pytest.mark.asyncio
async def test_find_blacklist_entry(denylist):
    assert (await find_blacklist_entry(denylist, "scam-co"))["name"] == "Scam Co"
    assert await find_blacklist_entry(denylist, "") is None


@pytest.mark.parametrize(
    "value,expected",
    [(KULE_ID, True), (KULE_ID.upper(), True), (f" {KULE_ID} ", True), ("kule-sapanca", False), (KULE_ID[:-1], False)],
)
def test_looks_like_object_id(value, expected):
    assert looks_like_object_id(value) is expected


@pytest.mark.asyncio
async def test_find_business_by_object_id(registry, denylist):
    result = await find_business(registry, denylist, KULE_ID)
    assert result.status == MatchStatus.VERIFIED
    assert result.primary["slug"] == "kule-sapanca"


@pytest.mark.asyncio
async def test_find_business_by_blacklist_object_id(registry, denylist):
    result = await find_business(registry, denylist, SCAM_ID)
    assert result.status == MatchStatus.BLACKLIST
    assert result.primary["name"] == "Scam Co"


@pytest.mark.asyncio
async def test_find_business_tries_id_before_slug():
    registry = MagicMock()
    registry.find_by_id = AsyncMock(return_value={"_id": KULE_ID, "name": "Kule Sapanca"})
    registry.find_one = AsyncMock()
    denylist = MagicMock()
    denylist.find_by_id = AsyncMock()
    denylist.find_one = AsyncMock()

    result = await find_business(registry, denylist, KULE_ID)

    assert result.primary["name"] == "Kule Sapanca"
    registry.find_by_id.assert_awaited_once_with(KULE_ID)
    registry.find_one.assert_not_called()
    denylist.find_by_id.assert_not_called()


@pytest.mark.asyncio
async def test_find_business_skips_id_lookup_for_slugs():
    registry = MagicMock()
    registry.find_by_id = AsyncMock()
    registry.find_one = AsyncMock(return_value=None)
    denylist = MagicMock()
    denylist.find_by_id = AsyncMock()
    denylist.find_one = AsyncMock(return_value=None)

    result = await find_business(registry, denylist, "kule-sapanca")

    assert result.status == MatchStatus.NOT_FOUND
    registry.find_by_id.assert_not_called()
    denylist.find_by_id.assert_not_called()


@pytest.mark.asyncio
async def test_find_business_hex_slug_still_matches_by_slug():
    registry = InMemoryBusinessRegistry([{"_id": "other", "slug": "cafe" * 6, "name": "Cafe"}])
    result = await find_business(registry, InMemoryDenylistRegistry([]), "cafe" * 6)
    assert result.status == MatchStatus.VERIFIED
    assert result.primary["name"] == "Cafe"


@pytest.mark.asyncio
async def test_find_blacklist_entry_by_object_id(denylist):
    assert (await find_blacklist_entry(denylist, SCAM_ID))["businessSlug"] == "scam-co"
    assert await find_blacklist_entry(denylist, "64f1c2a9e4b0a1b2c3d4e5f9") is None
