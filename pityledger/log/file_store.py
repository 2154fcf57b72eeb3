"""
File-based pull log using append-only JSONL.

Each line is one canonical JSON pull event. Upserts append the new or
superseding lines; loading collapses lines by external_id, last line wins.
compact() rewrites the file with one line per pull.
"""

import json
import os
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List

from ..core.canonical import canonical_json_str
from ..core.events import PullEvent
from ..core.errors import EventValidationError, PullLogError
from ..logging_config import get_logger
from .ingest import merge_events
from .store import PullLogStore, UpsertResult

try:
    import fcntl
except ImportError:  # Windows or unsupported platform
    fcntl = None


class FilePullLogStore(PullLogStore):
    """
    File-based pull log.

    Storage format: JSONL (newline-delimited JSON)
    Each line: {"banner": "...", "external_id": "...", "id": "...", ...}

    Guarantees:
    - Appends and compaction hold an exclusive lock on <path>.lock
    - Appends are fsynced
    - load() returns at most one event per external_id
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self.lock_path = f"{path}.lock"
        self.logger = get_logger(__name__, trace_id=path)

        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

        if not os.path.exists(path):
            with open(path, "wb") as f:
                f.write(b"")

    def _iter_records(self) -> Iterator[PullEvent]:
        with open(self.path, "rb") as f:
            for lineno, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                try:
                    rec = json.loads(line)
                except ValueError as ex:
                    raise EventValidationError(f"{self.path}:{lineno}: invalid JSON") from ex
                yield PullEvent.from_dict(rec)

    def load(self) -> List[PullEvent]:
        try:
            latest: Dict[str, PullEvent] = {}
            for ev in self._iter_records():
                latest[ev.external_id] = ev
            return list(latest.values())
        except OSError as ex:
            raise PullLogError(str(ex)) from ex

    def read_raw(self) -> List[dict]:
        """All stored lines as dicts, including superseded ones, in file order."""
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return [json.loads(line) for line in f if line.strip()]
        except OSError as ex:
            raise PullLogError(str(ex)) from ex
        except ValueError as ex:
            raise EventValidationError(f"{self.path}: invalid JSON") from ex

    @contextmanager
    def _locked(self) -> Iterator[None]:
        """
        Hold the exclusive log lock.

        The lock lives on a sidecar file so it survives compact() swapping
        the log's inode.
        """
        with open(self.lock_path, "a+b") as lock:
            if fcntl:
                fcntl.flock(lock.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                if fcntl:
                    fcntl.flock(lock.fileno(), fcntl.LOCK_UN)

    def upsert(self, events: Iterable[PullEvent]) -> UpsertResult:
        incoming = list(events)
        try:
            with self._locked():
                existing = self.load()
                merged, added, updated, unchanged = merge_events(existing, incoming)

                before = {ev.external_id: ev for ev in existing}
                lines = [
                    canonical_json_str(ev) + "\n"
                    for ev in merged
                    if before.get(ev.external_id) != ev
                ]
                if lines:
                    with open(self.path, "ab") as f:
                        f.write("".join(lines).encode("utf-8"))
                        f.flush()
                        os.fsync(f.fileno())
        except OSError as ex:
            raise PullLogError(str(ex)) from ex

        self.logger.info(f"Upserted pulls: added={added} updated={updated} unchanged={unchanged}")
        return UpsertResult(added=added, updated=updated, unchanged=unchanged, events=merged)

    def compact(self) -> int:
        """
        Rewrite the log with one line per external_id.

        Runs under the same lock as upsert() so no concurrent write is lost.

        Returns:
            Number of superseded lines dropped
        """
        try:
            with self._locked():
                total = len(self.read_raw())
                events = self.load()
                tmp_path = f"{self.path}.compact"
                with open(tmp_path, "wb") as f:
                    for ev in events:
                        f.write((canonical_json_str(ev) + "\n").encode("utf-8"))
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, self.path)
        except OSError as ex:
            raise PullLogError(str(ex)) from ex

        dropped = total - len(events)
        self.logger.info(f"Compacted pull log, dropped {dropped} superseded lines")
        return dropped
