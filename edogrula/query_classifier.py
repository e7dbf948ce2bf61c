import re
from typing import Callable, Dict, Optional, Tuple, Union

from loguru import logger

from edogrula.models import ClassificationFailure, ClassifiedQuery, QueryKind
from edogrula.normalizers import normalize_phone

IG_URL_RE = re.compile(
    r"^(https?://)?(www\.)?(instagram\.com|instagr\.am)/([A-Za-z0-9._]{1,30})/?([?#].*)?$",
    re.IGNORECASE,
)
WEBSITE_RE = re.compile(r"^(https?://)?([a-z0-9-]+\.)+[a-z]{2,}([:/?#].*)?$", re.IGNORECASE)
# At least one digit, so the normalized value is never empty.
PHONE_RE = re.compile(r"^(?=.*\d)\+?[0-9 ()\-.]{10,20}$")
IG_USERNAME_RE = re.compile(r"^@?([A-Za-z0-9._]{1,30})$")
_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


def _ig_url(q: str, m: re.Match) -> ClassifiedQuery:
    username = m.group(4)
    return ClassifiedQuery(QueryKind.IG_URL, f"https://instagram.com/{username}", username)


def _website(q: str, m: re.Match) -> ClassifiedQuery:
    url = q if _SCHEME_RE.match(q) else f"https://{q}"
    return ClassifiedQuery(QueryKind.WEBSITE, url)


def _phone(q: str, m: re.Match) -> ClassifiedQuery:
    return ClassifiedQuery(QueryKind.PHONE, normalize_phone(q))


def _ig_username(q: str, m: re.Match) -> ClassifiedQuery:
    username = m.group(1)
    return ClassifiedQuery(QueryKind.IG_USERNAME, username, username)


# Evaluation order matters: a domain like "example.com" also satisfies the
# bare-handle pattern, and digit-heavy strings must not become handles.
DETECTORS: Dict[QueryKind, Tuple[re.Pattern, Callable[[str, re.Match], ClassifiedQuery]]] = {
    QueryKind.IG_URL: (IG_URL_RE, _ig_url),
    QueryKind.WEBSITE: (WEBSITE_RE, _website),
    QueryKind.PHONE: (PHONE_RE, _phone),
    QueryKind.IG_USERNAME: (IG_USERNAME_RE, _ig_username),
}


def classify(raw: str, hint: Optional[str] = None) -> Union[ClassifiedQuery, ClassificationFailure]:
    """
    Decide what kind of identifier a free-text search string represents and
    normalize it for registry lookup.

    Args:
        raw (str): User-supplied search text, already length-capped by the caller.
        hint (Optional[str]): One of "ig_url", "ig_username", "phone", "website".
            Honored only when the input also matches that kind's pattern;
            otherwise automatic detection runs as if no hint was given.

    Returns:
        ClassifiedQuery, or ClassificationFailure(reason="empty") for blank input.
    """
    q = str(raw or "").strip()
    if not q:
        return ClassificationFailure(reason="empty")

    hinted = str(hint or "").strip().lower()
    for kind, (pattern, build) in DETECTORS.items():
        if kind.value == hinted:
            m = pattern.match(q)
            if m:
                return build(q, m)
            logger.debug(f"Hint '{hinted}' does not match '{q}', falling back to detection")
            break

    for kind, (pattern, build) in DETECTORS.items():
        m = pattern.match(q)
        if m:
            return build(q, m)

    return ClassifiedQuery(QueryKind.TEXT, q)
