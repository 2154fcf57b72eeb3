"""
PullLogStore abstract interface.

The pull log is the ingestion boundary: it holds at most one event per
external_id and hands replay a deduplicated snapshot.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List

from ..core.events import PullEvent


@dataclass(frozen=True)
class UpsertResult:
    """
    Result of an upsert.

    Fields:
        added: Pulls whose external_id was new
        updated: Pulls that superseded a stored pull with different content
        unchanged: Pulls identical to what was stored
        events: Full log after the upsert
    """
    added: int
    updated: int
    unchanged: int
    events: List[PullEvent]


class PullLogStore(ABC):
    """
    Abstract pull log storage.

    Implementations must guarantee:
    - At most one event per external_id in load() output
    - Last write wins when the same external_id is upserted again
    - A superseding event keeps the stored id and ingested_at
    """

    @abstractmethod
    def load(self) -> List[PullEvent]:
        """
        Load the deduplicated pull log.

        Raises:
            PullLogError: If the log cannot be read
            EventValidationError: If a stored record is malformed
        """
        ...

    @abstractmethod
    def upsert(self, events: Iterable[PullEvent]) -> UpsertResult:
        """
        Insert or supersede pulls keyed by external_id.

        Raises:
            PullLogError: If the write fails
        """
        ...
