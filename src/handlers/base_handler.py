"""
Base Handler Classes

This module provides base classes for Socket.IO handlers with common patterns
for service access, session lookup and response formatting.
"""

import logging
from typing import Any, Dict, Optional

from flask import request
from flask_socketio import emit

from container import get_container
from src.core.errors import ErrorCode, ValidationError

logger = logging.getLogger(__name__)


class BaseHandler:
    """
    Base class for all Socket.IO handlers.

    Services are looked up in the application container on each access so
    handlers keep working after the container is reconfigured in tests.
    """

    @property
    def _container(self):
        return get_container()

    @property
    def game_manager(self):
        return self._container.get('GameManager')

    @property
    def validation_service(self):
        return self._container.get('ValidationService')

    @property
    def error_response_factory(self):
        return self._container.get('ErrorResponseFactory')

    @property
    def session_service(self):
        return self._container.get('SessionService')

    @property
    def broadcast_service(self):
        return self._container.get('BroadcastService')

    def require_game_id(self) -> str:
        """
        Get the game driven by the requesting connection.

        Raises:
            ValidationError: If the connection has no game
        """
        game_id = self.session_service.get_game_id(request.sid)  # type: ignore[attr-defined]
        if not game_id:
            raise ValidationError(
                ErrorCode.NOT_IN_GAME,
                'No game is associated with this connection'
            )
        return game_id

    def validate_data_dict(self, data: Any, required_fields: Optional[list] = None) -> Dict[str, Any]:
        """Validate that data is a dictionary holding the required fields."""
        return self.validation_service.validate_socket_data(data, required_fields)

    def emit_success(self, event_name: str, data: Optional[Dict[str, Any]] = None) -> None:
        """
        Emit a success response to the requesting client.

        Args:
            event_name: The name of the event to emit
            data: Optional data to include in the response
        """
        response = self.error_response_factory.create_success_response(data or {})
        emit(event_name, response)

    def emit_error(self, event_name: str, error_code: ErrorCode, message: str,
                   details: Optional[Dict[str, Any]] = None) -> None:
        response = self.error_response_factory.create_error_response(error_code, message, details)
        emit(event_name, response)

    def log_handler_start(self, handler_name: str, data: Any = None) -> None:
        logger.info(f'{handler_name} called by client: {request.sid}')  # type: ignore[attr-defined]
        if data:
            logger.debug(f'{handler_name} data: {data}')

    def log_handler_success(self, handler_name: str, message: Optional[str] = None) -> None:
        log_msg = f'{handler_name} completed successfully for client: {request.sid}'  # type: ignore[attr-defined]
        if message:
            log_msg += f' - {message}'
        logger.info(log_msg)
