"""
Reducer: dispatch pull events to their banner's state machine.

Handlers must be:
- Pure (no side effects, no I/O)
- Deterministic (same input -> same output)
"""

from typing import Callable, Dict, Optional, Tuple

from .events import BannerCategory, PullEvent
from .rules import ReplayConfig
from .state import BannerPityState, BannerState, PullAnnotation
from .errors import InvalidTransitionError

# Handler signature: (banner_state, event, config) -> (new_banner_state, annotation)
Handler = Callable[[BannerState, PullEvent, ReplayConfig], Tuple[BannerState, Optional[PullAnnotation]]]


class Reducer:
    """
    Registry of banner state machines.

    Usage:
        reducer = Reducer.default()
        new_state, annotation = reducer.apply(state, event, config)
    """

    def __init__(self) -> None:
        self._handlers: Dict[BannerCategory, Handler] = {}

    @classmethod
    def default(cls) -> "Reducer":
        """Reducer with all four banner machines registered."""
        from .machines import register_machines

        reducer = cls()
        register_machines(reducer)
        reducer.require_complete()
        return reducer

    def register(self, banner: BannerCategory, handler: Handler) -> None:
        """
        Register state machine for a banner.

        Args:
            banner: Banner category
            handler: Pure function (banner_state, event, config) -> (new_state, annotation)
        """
        self._handlers[banner] = handler

    def require_complete(self) -> None:
        """
        Raises:
            InvalidTransitionError: If any banner category has no handler
        """
        missing = [b.value for b in BannerCategory if b not in self._handlers]
        if missing:
            raise InvalidTransitionError(f"No state machine for banners: {', '.join(missing)}")

    def apply(
        self, state: BannerPityState, event: PullEvent, config: ReplayConfig
    ) -> Tuple[BannerPityState, Optional[PullAnnotation]]:
        """
        Apply event to the state of its banner.

        Returns:
            New BannerPityState with only the event's banner changed, and the
            annotation for the event (None for non-rare pulls)

        Raises:
            InvalidTransitionError: If no handler registered for the banner
        """
        handler = self._handlers.get(event.banner)
        if handler is None:
            raise InvalidTransitionError(f"No state machine for banner: {event.banner!r}")

        current = state.for_banner(event.banner)
        new_banner_state, annotation = handler(current, event, config)
        return state.with_banner(event.banner, new_banner_state), annotation
