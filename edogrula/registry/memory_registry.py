"""
In-memory registries over lists of lean documents.

Used by the batch CLI (records loaded from CSV) and by tests. Results are
copies, so callers can mutate them without touching the stored records.
"""
import copy
import re
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from edogrula.models import FieldMatch, Record


def _field_matches(value: Any, regex: re.Pattern) -> bool:
    if value is None:
        return False
    if isinstance(value, (list, tuple)):
        return any(_field_matches(v, regex) for v in value)
    return regex.search(str(value)) is not None


def record_matches(record: Record, clauses: Sequence[FieldMatch]) -> bool:
    """True if any clause matches its field on the record (case-insensitive)."""
    for clause in clauses:
        regex = re.compile(clause.pattern, re.IGNORECASE)
        if _field_matches(record.get(clause.field), regex):
            return True
    return False


class InMemoryBusinessRegistry:
    def __init__(self, records: Optional[Iterable[Record]] = None):
        self.records: List[Record] = list(records or [])

    async def find(self, clauses: Sequence[FieldMatch], limit: int) -> List[Record]:
        if not clauses:
            return []
        found = []
        for record in self.records:
            if record_matches(record, clauses):
                found.append(copy.deepcopy(record))
                if len(found) >= limit:
                    break
        return found

    async def find_one(self, clauses: Sequence[FieldMatch]) -> Optional[Record]:
        found = await self.find(clauses, 1)
        return found[0] if found else None

    async def find_by_id(self, record_id: str) -> Optional[Record]:
        for record in self.records:
            if "_id" in record and str(record["_id"]) == str(record_id):
                return copy.deepcopy(record)
        return None

    async def find_page(
        self,
        groups: Sequence[Sequence[FieldMatch]],
        where: Dict[str, Any],
        skip: int,
        limit: int,
    ) -> Tuple[List[Record], int]:
        matched = [
            record for record in self.records
            if all(record_matches(record, group) for group in groups)
            and all(record.get(field) == value for field, value in where.items())
        ]
        return [copy.deepcopy(r) for r in matched[skip:skip + limit]], len(matched)


class InMemoryDenylistRegistry(InMemoryBusinessRegistry):
    pass
