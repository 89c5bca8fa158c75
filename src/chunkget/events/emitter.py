"""In-process event emitter supporting sync and async handlers."""

import inspect
import typing as t
from collections import defaultdict

from ..infrastructure.logging import get_logger
from .base import BaseEmitter

if t.TYPE_CHECKING:
    import loguru


class EventEmitter(BaseEmitter):
    """Dispatches events to subscribed handlers in subscription order.

    A failing handler is logged and skipped so one bad subscriber cannot
    break a download or starve the other subscribers.
    """

    def __init__(self, logger: "loguru.Logger" = get_logger(__name__)) -> None:
        self._logger = logger
        self._handlers: dict[str, list[t.Callable]] = defaultdict(list)

    def on(self, event_type: str, handler: t.Callable) -> None:
        self._handlers[event_type].append(handler)

    def off(self, event_type: str, handler: t.Callable) -> None:
        try:
            self._handlers[event_type].remove(handler)
        except ValueError:
            self._logger.warning(f"Handler {handler} not found for event {event_type}")

    async def emit(self, event_type: str, event_data: t.Any) -> None:
        # Copy so handlers may unsubscribe while being dispatched
        for handler in list(self._handlers.get(event_type, ())):
            try:
                result = handler(event_data)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                self._logger.exception(f"Error in handler for event {event_type}")
