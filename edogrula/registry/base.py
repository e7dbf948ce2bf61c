from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

from edogrula.models import FieldMatch, Record


class BusinessRegistry(Protocol):
    """Read access to the verified business collection."""

    async def find(self, clauses: Sequence[FieldMatch], limit: int) -> List[Record]:
        ...

    async def find_one(self, clauses: Sequence[FieldMatch]) -> Optional[Record]:
        ...

    async def find_by_id(self, record_id: str) -> Optional[Record]:
        ...

    async def find_page(
        self,
        groups: Sequence[Sequence[FieldMatch]],
        where: Dict[str, Any],
        skip: int,
        limit: int,
    ) -> Tuple[List[Record], int]:
        """
        One page of documents matching every clause group (each group OR'd
        internally) and every exact `where` field, plus the total match count.
        """
        ...


class DenylistRegistry(Protocol):
    """Read access to the blacklist collection."""

    async def find_one(self, clauses: Sequence[FieldMatch]) -> Optional[Record]:
        ...

    async def find_by_id(self, record_id: str) -> Optional[Record]:
        ...
