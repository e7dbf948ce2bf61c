"""
Pure string normalizers shared by the classifier and the probe builder.

None of these functions raise: any str (or None) input yields a str.
"""
import re
import unicodedata
from urllib.parse import urlsplit

import phonenumbers
from phonenumbers import NumberParseException, PhoneNumberFormat

from edogrula.config import DEFAULT_REGION

# Turkish letters are mapped before generic diacritic stripping so that
# dotless "ı" and dotted "İ" both end up as a plain "i".
_TR_TRANSLATION = str.maketrans("şŞıİğĞüÜöÖçÇ", "ssiigguuoocc")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_NON_PHONE = re.compile(r"[^\d+]")
_NON_DIGIT = re.compile(r"\D")
_SCHEME = re.compile(r"^https?://", re.IGNORECASE)


def slugify(value: str) -> str:
    """
    Build a URL slug from free text.

    Example:
        "Şirince Bağ Evi" -> "sirince-bag-evi"
    """
    text = str(value or "").translate(_TR_TRANSLATION).lower()
    text = unicodedata.normalize("NFKD", text)
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    return _NON_ALNUM.sub("-", text).strip("-")


def normalize_handle(value: str) -> str:
    """Strip leading '@' characters and lowercase an Instagram handle."""
    return str(value or "").strip().lstrip("@").lower()


def normalize_phone(raw: str, region: str = DEFAULT_REGION) -> str:
    """
    Normalize a phone number to E.164 (e.g. "+905321234567").

    Falls back to keeping only digits and '+' when the number cannot be
    parsed as a valid number for the region.
    """
    text = str(raw or "").strip()
    if not text:
        return ""
    try:
        parsed = phonenumbers.parse(text, region)
        if phonenumbers.is_valid_number(parsed):
            return phonenumbers.format_number(parsed, PhoneNumberFormat.E164)
    except NumberParseException:
        pass
    return _NON_PHONE.sub("", text)


def digits_only(value: str) -> str:
    return _NON_DIGIT.sub("", str(value or ""))


def phone_suffix(value: str, length: int = 10) -> str:
    """
    Last `length` digits of a phone number, so "+905069990554",
    "0506 999 05 54" and "5069990554" all reduce to "5069990554".
    """
    digits = digits_only(value)
    return digits[-length:] if len(digits) >= length else digits


def extract_host(value: str) -> str:
    """Bare lowercase hostname without "www.", or "" if there is none."""
    text = str(value or "").strip()
    if not text:
        return ""
    if not _SCHEME.match(text):
        text = "https://" + text
    try:
        host = urlsplit(text).hostname or ""
    except ValueError:
        return ""
    if host.startswith("www."):
        host = host[4:]
    return host
