from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .model import PunchRecord


class PunchRepository(Protocol):
    """Append-only punch store.

    Time range queries are inclusive on both bounds.
    """

    def append(self, record: PunchRecord) -> int:
        raise NotImplementedError

    def distinct_identities_in_range(self, start: datetime, end: datetime) -> Sequence[str]:
        raise NotImplementedError

    def query_by_time_range(self, start: datetime, end: datetime) -> Sequence[PunchRecord]:
        raise NotImplementedError

    def query_by_identity_and_time_range(self, identity: str, start: datetime, end: datetime) -> Sequence[PunchRecord]:
        """Punches for one identity, ordered ascending by timestamp."""

        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[PunchRecord]:
        raise NotImplementedError
