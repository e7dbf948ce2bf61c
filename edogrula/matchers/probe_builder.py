from typing import List

from edogrula.config import MIN_NAME_KEY_LENGTH, MIN_PHONE_DIGITS
from edogrula.models import ClassifiedQuery, FieldMatch, QueryKind
from edogrula.normalizers import digits_only, extract_host, normalize_handle, phone_suffix, slugify

# Kinds whose canonical value is worth matching against stored URLs
URL_KINDS = (QueryKind.IG_URL, QueryKind.WEBSITE, QueryKind.TEXT)


def name_key_for(classified: ClassifiedQuery) -> str:
    """
    Pick the string used for name, slug and handle probes.

    Instagram queries use the bare username, websites use the first label of
    the host ("www.kulesapanca.com" -> "kulesapanca"), everything else uses
    the canonical value.
    """
    if classified.kind in (QueryKind.IG_URL, QueryKind.IG_USERNAME) and classified.username:
        return classified.username.strip()
    if classified.kind == QueryKind.WEBSITE:
        host = extract_host(classified.canonical_value)
        if host:
            return host.split(".")[0]
    return classified.canonical_value.strip()


def build_registry_probe(classified: ClassifiedQuery) -> List[FieldMatch]:
    """
    Build the OR'd clause list used to look a classified query up in the
    verified business registry.

    Args:
        classified (ClassifiedQuery): Output of the classifier.

    Returns:
        List[FieldMatch]: Clauses to OR together. May be empty.
    """
    clauses: List[FieldMatch] = []
    name_key = name_key_for(classified)

    slug_key = slugify(name_key)
    if slug_key:
        clauses.append(FieldMatch.exact("slug", slug_key))

    handle_key = normalize_handle(classified.username) if classified.username else ""
    if handle_key:
        clauses.append(FieldMatch.exact("handle", handle_key))
        clauses.append(FieldMatch.handle("instagramUsername", handle_key))

    if len(name_key) >= MIN_NAME_KEY_LENGTH:
        clauses.append(FieldMatch.contains("name", name_key))

    if classified.kind in URL_KINDS and classified.canonical_value:
        clauses.append(FieldMatch.contains("instagramUrl", classified.canonical_value))
        clauses.append(FieldMatch.contains("website", classified.canonical_value))
        if classified.kind == QueryKind.WEBSITE:
            host = extract_host(classified.canonical_value)
            if host:
                clauses.append(FieldMatch.contains("website", host))

    if classified.kind == QueryKind.PHONE:
        if classified.canonical_value:
            clauses.append(FieldMatch.contains("phone", classified.canonical_value))
        suffix = phone_suffix(classified.canonical_value)
        # Suffix match tolerates a missing or differently written country code
        if len(suffix) >= MIN_PHONE_DIGITS:
            clauses.append(FieldMatch.loose_digits("phone", suffix))
            clauses.append(FieldMatch.loose_digits("phones", suffix))

    return clauses


def build_denylist_probe(classified: ClassifiedQuery) -> List[FieldMatch]:
    """
    Build the reduced clause list used against the denylist: name substring,
    handle, Instagram URL substring and phone.
    """
    clauses: List[FieldMatch] = []
    name_key = name_key_for(classified)

    if len(name_key) >= MIN_NAME_KEY_LENGTH:
        clauses.append(FieldMatch.contains("name", name_key))

    if classified.username:
        handle_key = normalize_handle(classified.username)
        if handle_key:
            clauses.append(FieldMatch.handle("instagramUsername", handle_key))

    if classified.kind in URL_KINDS and classified.canonical_value:
        clauses.append(FieldMatch.contains("instagramUrl", classified.canonical_value))

    if classified.kind == QueryKind.PHONE:
        suffix = phone_suffix(classified.canonical_value)
        if len(suffix) >= MIN_PHONE_DIGITS:
            clauses.append(FieldMatch.loose_digits("phone", suffix))
    elif len(digits_only(classified.canonical_value)) >= MIN_PHONE_DIGITS:
        clauses.append(FieldMatch.contains("phone", classified.canonical_value))

    return clauses
