"""
Typed data models for the business search core.
All data structures shared between the classifier, resolver and registries live here.
"""
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

# A registry record is a lean document: plain field -> value mapping.
Record = Dict[str, Any]


class QueryKind(str, Enum):
    """What a raw search string most likely identifies."""
    IG_URL = "ig_url"
    IG_USERNAME = "ig_username"
    PHONE = "phone"
    WEBSITE = "website"
    TEXT = "text"


class MatchStatus(str, Enum):
    VERIFIED = "verified"
    BLACKLIST = "blacklist"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class ClassifiedQuery:
    """Normalized search input produced by the classifier."""
    kind: QueryKind
    canonical_value: str
    username: Optional[str] = None  # Only set for Instagram kinds

    ok = True


@dataclass(frozen=True)
class ClassificationFailure:
    """Returned instead of a ClassifiedQuery when there is nothing to search."""
    reason: str

    ok = False


@dataclass(frozen=True)
class FieldMatch:
    """
    One clause of a registry probe: a case-insensitive regular expression
    applied to a single record field. A list of clauses is OR'd together.
    """
    field: str
    pattern: str

    @classmethod
    def exact(cls, field: str, value: str) -> "FieldMatch":
        return cls(field, f"^{re.escape(value)}$")

    @classmethod
    def contains(cls, field: str, value: str) -> "FieldMatch":
        return cls(field, re.escape(value))

    @classmethod
    def handle(cls, field: str, handle: str) -> "FieldMatch":
        """Exact handle match that tolerates a stored leading '@'."""
        return cls(field, f"^@?{re.escape(handle)}$")

    @classmethod
    def loose_digits(cls, field: str, digits: str) -> "FieldMatch":
        """Match the digit sequence with any non-digit separators in between."""
        return cls(field, r"\D*".join(re.escape(d) for d in digits))


@dataclass
class MatchResult:
    """Final resolution for a single search."""
    status: MatchStatus
    primary: Optional[Record] = None
    all: List[Record] = field(default_factory=list)  # Only populated for verified
