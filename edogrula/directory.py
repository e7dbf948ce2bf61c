"""
Paged directory listing of businesses, filtered by address, type and
verification, sorted by rating or review count within the page.
"""
import json
import math
import re
from typing import Any, Dict, Iterable, List, Optional

from loguru import logger

from edogrula.config import FILTER_DEFAULT_PER_PAGE, FILTER_MAX_PER_PAGE, MAX_FILTER_TERM_LENGTH
from edogrula.models import FieldMatch, Record
from edogrula.registry.base import BusinessRegistry

# "bungalov" is the Turkish spelling; listings use both
TYPE_SPELLINGS = {"bungalov": ("bungalov", "bungalow")}

MEDIA_FIELDS = (
    "galleryAbs",
    "coverImage",
    "coverUrl",
    "cover",
    "gallery",
    "photos",
    "images",
    "media",
    "image",
    "imageUrl",
    "featuredImage",
    "photo",
)
MEDIA_URL_KEYS = ("url", "src", "path", "image", "imageUrl", "href", "secure_url")
MAX_GALLERY = 5

GOOGLE_RATING_FIELDS = ("googleRating", "google_rate", "google_rating", "google.rating")
GOOGLE_REVIEW_FIELDS = (
    "googleReviewsCount",
    "google_reviews_count",
    "google_reviews",
    "google.reviewsCount",
    "google.user_ratings_total",
)

LIST_SEPARATORS_RE = re.compile(r"[,\n;]")


def to_number(value: Any) -> float:
    """Lenient numeric coercion: accepts "4,5", falls back to 0."""
    if value is None:
        return 0
    try:
        n = float(str(value).replace(",", "."))
    except ValueError:
        return 0
    if not math.isfinite(n):
        return 0
    return int(n) if n.is_integer() else n


def _parse_int(value: Any, default: int) -> int:
    try:
        n = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return n or default


def _lookup(record: Record, dotted: str) -> Any:
    value: Any = record
    for part in dotted.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def _first_present(record: Record, fields: Iterable[str]) -> Any:
    for field in fields:
        value = _lookup(record, field)
        if value is not None:
            return value
    return None


def _clean_term(value: Any) -> str:
    return " ".join(str(value or "").split())[:MAX_FILTER_TERM_LENGTH]


def collect_gallery(record: Record) -> List[str]:
    """
    Gather image URLs from the media fields, in field order, without
    duplicates. Lists, JSON array strings, comma/semicolon/newline separated
    strings and `{url: ...}`-style objects are all unpacked.
    """
    urls: List[str] = []

    def push(value: Any) -> None:
        if not value:
            return
        if isinstance(value, (list, tuple)):
            for v in value:
                push(v)
            return
        if isinstance(value, dict):
            for key in MEDIA_URL_KEYS:
                push(value.get(key))
            if isinstance(value.get("items"), list):
                push(value["items"])
            return
        s = str(value).strip()
        if not s:
            return
        if s.startswith("[") and s.endswith("]"):
            try:
                parsed = json.loads(s)
            except ValueError:
                parsed = None
            if isinstance(parsed, list):
                push(parsed)
                return
        if LIST_SEPARATORS_RE.search(s):
            push([part.strip() for part in LIST_SEPARATORS_RE.split(s)])
            return
        if s not in urls:
            urls.append(s)

    for field in MEDIA_FIELDS:
        push(record.get(field))
    return urls


def to_listing_item(record: Record) -> Record:
    """Shape a stored business as a directory card."""
    gallery = collect_gallery(record)[:MAX_GALLERY]
    record_id = str(record.get("_id", ""))
    return {
        "_id": record_id,
        "slug": record.get("slug") or record_id,
        "name": record.get("name") or "İsimsiz İşletme",
        "verified": bool(record.get("verified")),
        "address": record.get("address") or "",
        "phone": record.get("phone") or "",
        "website": record.get("website") or "",
        "instagramUsername": record.get("instagramUsername") or record.get("handle") or "",
        "instagramUrl": record.get("instagramUrl") or "",
        "type": record.get("type") or "Bungalov",
        "gallery": gallery,
        "galleryAbs": gallery,
        "photo": gallery[0] if gallery else "",
        "summary": record.get("summary") or record.get("description") or "",
        "rating": to_number(record.get("rating")),
        "reviewsCount": to_number(record.get("reviewsCount")),
        "googleRating": to_number(_first_present(record, GOOGLE_RATING_FIELDS)),
        "googleReviewsCount": to_number(_first_present(record, GOOGLE_REVIEW_FIELDS)),
    }


def rating_score(item: Record) -> float:
    return item["rating"] if item["rating"] > 0 else item["googleRating"] or 0


def review_score(item: Record) -> float:
    return item["reviewsCount"] if item["reviewsCount"] > 0 else item["googleReviewsCount"] or 0


def build_filter_groups(address: Any = "", business_type: Any = "") -> List[List[FieldMatch]]:
    groups = []
    address_term = _clean_term(address)
    if address_term:
        groups.append([FieldMatch.contains("address", address_term)])
    type_term = _clean_term(business_type)
    if type_term:
        spellings = TYPE_SPELLINGS.get(type_term.lower(), (type_term,))
        groups.append([FieldMatch.contains("type", s) for s in spellings])
    return groups


async def filter_businesses(
    registry: BusinessRegistry,
    address: Any = "",
    business_type: Any = "",
    only_verified: Any = False,
    sort: Optional[str] = "rating",
    page: Any = 1,
    per_page: Any = FILTER_DEFAULT_PER_PAGE,
) -> Dict[str, Any]:
    """
    One page of the business directory.

    Args:
        registry (BusinessRegistry): Verified business collection.
        address (str): Case-insensitive substring of the address.
        business_type (str): Case-insensitive substring of the type;
            "bungalov" also matches "bungalow".
        only_verified (bool | str): Keep only `verified: true` records.
        sort (str): "reviews" sorts by review count, anything else by rating.
            Sorting applies within the returned page.
        page (int | str): 1-based page number.
        per_page (int | str): Page size, clamped to [1, 50], default 20.

    Returns:
        Dict[str, Any]: {"items", "total", "page", "perPage"}.

    Raises:
        RegistryUnavailable: If the registry query fails.
    """
    page_num = max(1, _parse_int(page, 1))
    limit = min(FILTER_MAX_PER_PAGE, max(1, _parse_int(per_page, FILTER_DEFAULT_PER_PAGE)))
    where = {"verified": True} if str(only_verified).strip().lower() == "true" else {}
    groups = build_filter_groups(address, business_type)

    records, total = await registry.find_page(groups, where, (page_num - 1) * limit, limit)
    logger.debug(f"Directory page {page_num} (perPage={limit}): {len(records)} of {total}")

    items = [to_listing_item(r) for r in records]
    score = review_score if sort == "reviews" else rating_score
    items.sort(key=score, reverse=True)
    return {"items": items, "total": total, "page": page_num, "perPage": limit}
