"""
Core error definitions for TriviaDuel

Provides error codes and exceptions that don't depend on other services.
"""

from enum import Enum
from typing import Dict, Optional


class ErrorCode(Enum):
    """Standardized error codes for the application."""

    # Payload Errors
    INVALID_DATA = "INVALID_DATA"
    MISSING_DATA = "MISSING_DATA"

    # Player Setup Errors
    MISSING_PLAYER_NAME = "MISSING_PLAYER_NAME"
    DUPLICATE_PLAYER_NAME = "DUPLICATE_PLAYER_NAME"
    PLAYER_NAME_TOO_LONG = "PLAYER_NAME_TOO_LONG"

    # Game Session Errors
    GAME_NOT_FOUND = "GAME_NOT_FOUND"
    NOT_IN_GAME = "NOT_IN_GAME"

    # Game Flow Errors
    WRONG_PHASE = "WRONG_PHASE"
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"

    # Category Errors
    MISSING_CATEGORY = "MISSING_CATEGORY"
    UNKNOWN_CATEGORY = "UNKNOWN_CATEGORY"
    CATEGORY_ALREADY_USED = "CATEGORY_ALREADY_USED"
    FETCH_IN_PROGRESS = "FETCH_IN_PROGRESS"

    # Answer Errors
    MISSING_ANSWER = "MISSING_ANSWER"
    INVALID_ANSWER_FORMAT = "INVALID_ANSWER_FORMAT"
    INVALID_CONTINUE_CHOICE = "INVALID_CONTINUE_CHOICE"

    # Trivia Source Errors
    TRIVIA_SOURCE_UNAVAILABLE = "TRIVIA_SOURCE_UNAVAILABLE"
    NO_QUESTIONS_AVAILABLE = "NO_QUESTIONS_AVAILABLE"

    # System Errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ValidationError(Exception):
    """Custom exception for validation errors."""

    def __init__(self, code: ErrorCode, message: str, details: Optional[Dict] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvalidStateTransition(ValidationError):
    """Raised when a command is not legal in the session's current state."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INVALID_STATE_TRANSITION,
                 details: Optional[Dict] = None):
        super().__init__(code, message, details)


class TriviaSourceError(Exception):
    """Raised when the trivia API cannot be reached or returns an unusable payload."""

    def __init__(self, message: str, url: Optional[str] = None):
        self.message = message
        self.url = url
        super().__init__(message)
