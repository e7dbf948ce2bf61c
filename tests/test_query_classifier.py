import pytest

from edogrula.models import ClassificationFailure, ClassifiedQuery, QueryKind
from edogrula.query_classifier import classify


@pytest.mark.parametrize("raw", ["", "   ", "\t\n", None])
def test_empty_input_is_a_failure_not_a_query(raw):
    result = classify(raw)
    assert isinstance(result, ClassificationFailure)
    assert result.ok is False
    assert result.reason == "empty"


@pytest.mark.parametrize(
    "raw,username",
    [
        ("https://instagram.com/kule_sapanca", "kule_sapanca"),
        ("http://www.instagram.com/kule.sapanca/", "kule.sapanca"),
        ("instagram.com/kule_sapanca?igshid=abc", "kule_sapanca"),
        ("instagr.am/kule_sapanca#top", "kule_sapanca"),
        ("HTTPS://INSTAGRAM.COM/Kule_Sapanca", "Kule_Sapanca"),
    ],
)
def test_instagram_url(raw, username):
    result = classify(raw)
    assert result.kind == QueryKind.IG_URL
    assert result.username == username
    assert result.canonical_value == f"https://instagram.com/{username}"


def test_website_gets_https_prefix():
    result = classify("sapanca.com")
    assert result == ClassifiedQuery(QueryKind.WEBSITE, "https://sapanca.com")
    assert result.username is None


def test_website_keeps_existing_scheme():
    result = classify("http://www.kulesapanca.com/iletisim")
    assert result.kind == QueryKind.WEBSITE
    assert result.canonical_value == "http://www.kulesapanca.com/iletisim"


def test_website_wins_over_bare_handle():
    # "sapanca.com" also satisfies the bare handle pattern
    assert classify("sapanca.com").kind == QueryKind.WEBSITE


def test_phone_is_normalized():
    result = classify("0532 123 45 67")
    assert result.kind == QueryKind.PHONE
    assert result.canonical_value == "+905321234567"
    assert result.username is None


def test_digit_string_is_phone_not_handle():
    assert classify("5321234567").kind == QueryKind.PHONE


def test_bare_handle():
    result = classify("@kule_sapanca")
    assert result == ClassifiedQuery(QueryKind.IG_USERNAME, "kule_sapanca", "kule_sapanca")


@pytest.mark.parametrize("raw", ["Kule Sapanca", "  şirince bağ evi  ", "kule sapanca 0532"])
def test_free_text(raw):
    result = classify(raw)
    assert result.kind == QueryKind.TEXT
    assert result.canonical_value == raw.strip()
    assert result.username is None


def test_punctuation_only_phone_shape_does_not_yield_empty_phone():
    result = classify("(((((((((((")
    assert result.kind == QueryKind.TEXT
    assert result.canonical_value == "((((((((((("


def test_hint_forces_matching_kind():
    # Without a hint this would be a website
    result = classify("instagram.com/kule_sapanca", "ig_url")
    assert result.kind == QueryKind.IG_URL
    # "kule.sapanca" looks like a domain, but the handle hint is honored
    result = classify("kule.sapanca", "ig_username")
    assert result == ClassifiedQuery(QueryKind.IG_USERNAME, "kule.sapanca", "kule.sapanca")


def test_hint_is_case_insensitive():
    assert classify("kule.sapanca", "IG_USERNAME").kind == QueryKind.IG_USERNAME


def test_mismatched_hint_falls_back_to_detection():
    result = classify("Kule Sapanca", "phone")
    assert result.kind == QueryKind.TEXT
    result = classify("sapanca.com", "phone")
    assert result.kind == QueryKind.WEBSITE


def test_unknown_hint_is_ignored():
    assert classify("@kule_sapanca", "email").kind == QueryKind.IG_USERNAME


@pytest.mark.parametrize(
    "raw",
    ["0532 123 45 67", "https://instagram.com/kule_sapanca", "sapanca.com", "@kule_sapanca", "Kule Sapanca"],
)
def test_reclassifying_canonical_value_is_stable(raw):
    first = classify(raw)
    second = classify(first.canonical_value)
    assert second.kind == first.kind
    assert second.canonical_value == first.canonical_value


def test_dotted_handle_reclassifies_as_website():
    # Websites are detected before handles, so a dotted handle's canonical
    # value reads as a domain once the "@" is gone.
    first = classify("@kule.sapanca")
    assert first.kind == QueryKind.IG_USERNAME
    assert first.canonical_value == "kule.sapanca"

    second = classify(first.canonical_value)
    assert second.kind == QueryKind.WEBSITE
