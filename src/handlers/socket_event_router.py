"""
Socket Event Router

Declarative event-to-handler mapping for Socket.IO events, with middleware
and before/after hooks so every game command is logged the same way.
"""

import logging
import time
from functools import wraps
from typing import Any, Callable, Dict, List, Optional

from flask import request

logger = logging.getLogger(__name__)


class EventRouteNotFoundError(Exception):
    """Raised when an event route is not found."""
    pass


class SocketEventRouter:
    """
    Router for Socket.IO events with middleware support and logging.

    Middleware may replace the event data by returning a new value.
    After-request hooks run even when the handler raises.
    """

    def __init__(self):
        self._routes: Dict[str, Callable] = {}
        self._middleware: List[Callable] = []
        self._before_request_handlers: List[Callable] = []
        self._after_request_handlers: List[Callable] = []

    def register_route(self, event_name: str, handler: Callable) -> None:
        self._routes[event_name] = handler
        logger.debug(f"Registered route: {event_name} -> {handler.__name__}")

    def add_middleware(self, middleware: Callable) -> None:
        self._middleware.append(middleware)

    def add_before_request(self, handler: Callable) -> None:
        self._before_request_handlers.append(handler)

    def add_after_request(self, handler: Callable) -> None:
        self._after_request_handlers.append(handler)

    def route(self, event_name: str):
        """Decorator for registering event handlers."""
        def decorator(handler: Callable):
            self.register_route(event_name, handler)
            return handler
        return decorator

    def handle_event(self, event_name: str, data: Any = None) -> Any:
        """
        Handle an incoming Socket.IO event.

        Raises:
            EventRouteNotFoundError: If no handler is registered for the event
        """
        if event_name not in self._routes:
            raise EventRouteNotFoundError(f"No handler registered for event: {event_name}")

        logger.info(f"Handling event: {event_name} from client: {request.sid}")  # type: ignore[attr-defined]
        if data is not None:
            logger.debug(f"Event data: {data}")

        try:
            for hook in self._before_request_handlers:
                hook(event_name, data)

            for middleware in self._middleware:
                data = middleware(event_name, data) or data

            result = self._routes[event_name](data)

            for hook in self._after_request_handlers:
                hook(event_name, data, result)

            return result

        except Exception as e:
            logger.error(f"Error handling event {event_name}: {str(e)}")
            for hook in self._after_request_handlers:
                try:
                    hook(event_name, data, None, error=e)
                except Exception as after_error:
                    logger.error(f"Error in after_request handler: {str(after_error)}")
            raise

    def get_registered_events(self) -> List[str]:
        return list(self._routes.keys())

    def has_route(self, event_name: str) -> bool:
        return event_name in self._routes

    def register_with_socketio(self, socketio_instance) -> None:
        """Bind every registered route to the SocketIO instance."""
        for event_name in self.get_registered_events():
            socketio_instance.on_event(event_name, self._create_socketio_handler(event_name))
            logger.debug(f"Registered SocketIO handler for: {event_name}")

    def _create_socketio_handler(self, event_name: str):
        @wraps(self.handle_event)
        def socketio_handler(data=None):
            return self.handle_event(event_name, data)
        return socketio_handler


def timing_middleware_pair():
    """Before/after hooks that log how long each event took."""
    started: Dict[str, float] = {}

    def before(event_name: str, data: Any) -> None:
        started[request.sid] = time.monotonic()  # type: ignore[attr-defined]

    def after(event_name: str, data: Any, result: Any, error: Optional[Exception] = None) -> None:
        start = started.pop(request.sid, None)  # type: ignore[attr-defined]
        if start is not None:
            elapsed_ms = (time.monotonic() - start) * 1000
            status = 'failed' if error else 'ok'
            logger.debug(f"Event {event_name} {status} in {elapsed_ms:.1f}ms")

    return before, after


def setup_router() -> SocketEventRouter:
    """Create a router with the timing hooks installed."""
    router = SocketEventRouter()

    before, after = timing_middleware_pair()
    router.add_before_request(before)
    router.add_after_request(after)

    logger.info("Socket event router initialized")
    return router
