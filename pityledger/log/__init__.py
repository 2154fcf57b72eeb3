"""
Pull log storage and ingestion.

This module provides:
- PullLogStore: Abstract interface for the deduplicated pull log
- FilePullLogStore: File-based JSONL storage
- Ingestion helpers: new_pull_event, event_from_record, merge_events
"""

from .store import PullLogStore, UpsertResult
from .file_store import FilePullLogStore
from .ingest import event_from_record, merge_events, new_pull_event

__all__ = [
    "PullLogStore",
    "UpsertResult",
    "FilePullLogStore",
    "event_from_record",
    "merge_events",
    "new_pull_event",
]
