"""
Error Handler for TriviaDuel

Decorator giving Socket.IO handlers consistent error reporting.
"""

import functools
import logging

from src.core.errors import ValidationError
from src.services.error_response_factory import ErrorResponseFactory

logger = logging.getLogger(__name__)


def with_error_handling(func):
    """
    Decorator for Socket.IO event handlers to provide consistent error handling.

    ValidationErrors are reported to the client with their own code; anything
    else is logged and reported as an internal error.

    Args:
        func: Socket.IO event handler function

    Returns:
        Wrapped function with error handling
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ValidationError as e:
            factory = ErrorResponseFactory()
            factory.emit_validation_error(e)
        except Exception as e:
            factory = ErrorResponseFactory()
            error_code, error_message = factory.handle_exception(e, func.__name__)
            factory.emit_error(error_code, error_message)

    return wrapper
