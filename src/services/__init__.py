"""
Services package for TriviaDuel

Each service owns one concern: locking, question loading, validation,
presentation, broadcasting and connection sessions.
"""

from .concurrency_control_service import ConcurrencyControlService
from .question_batch_service import QuestionBatchService
from .validation_service import ValidationService
from .session_service import SessionService

__all__ = [
    'ConcurrencyControlService',
    'QuestionBatchService',
    'ValidationService',
    'SessionService'
]
