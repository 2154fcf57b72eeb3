"""
Replay runner: reconstruct pity state from the pull log.

Replay is pure: it validates and orders the events, then folds every event
through the reducer. Nothing is cached between calls.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from ..core.errors import EventValidationError
from ..core.events import PullEvent
from ..core.ordering import order_events
from ..core.reducer import Reducer
from ..core.rules import ReplayConfig
from ..core.state import BannerPityState, PullAnnotation
from ..logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReplayResult:
    """
    Result of replay operation.

    Fields:
        state: Final state of every banner
        annotations: event_id -> annotation, for rare pulls only
        applied: Number of events applied
    """
    state: BannerPityState
    annotations: Dict[str, PullAnnotation]
    applied: int

    def to_dict(self) -> Dict[str, object]:
        return {
            "state": self.state.to_dict(),
            "annotations": {k: v.to_dict() for k, v in self.annotations.items()},
            "applied": self.applied,
        }


def replay(
    events: Iterable[PullEvent],
    config: Optional[ReplayConfig] = None,
    reducer: Optional[Reducer] = None,
    to_event_id: Optional[str] = None,
) -> ReplayResult:
    """
    Replay pull events to reconstruct pity state.

    Args:
        events: Pull events in any order (must not contain duplicates)
        config: Banner rules and tracked target (None = defaults)
        reducer: Reducer with registered state machines (None = all four)
        to_event_id: Stop after this event, inclusive (None = all)

    Returns:
        ReplayResult with final state, annotations and count

    Raises:
        EventValidationError: If any event is malformed, duplicated, or
            to_event_id is not in the log
    """
    config = config or ReplayConfig()
    reducer = reducer or Reducer.default()
    ordered = order_events(events)

    if to_event_id is not None and not any(ev.id == to_event_id for ev in ordered):
        raise EventValidationError(f"to_event_id not found in pull log: {to_event_id!r}")

    st = BannerPityState.initial()
    annotations: Dict[str, PullAnnotation] = {}
    count = 0

    for ev in ordered:
        st, annotation = reducer.apply(st, ev, config)
        if annotation is not None:
            annotations[ev.id] = annotation
        count += 1
        if ev.id == to_event_id:
            break

    logger.debug(f"Replayed {count} pulls, {len(annotations)} rare")
    return ReplayResult(state=st, annotations=annotations, applied=count)
