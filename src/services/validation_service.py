"""
Validation Service for TriviaDuel

Provides input validation for Socket.IO payloads, separated from error response handling.
Game rules (empty or duplicate names, category availability) are enforced by the GameManager.
"""

import json
import logging
import re
from typing import Any, Dict, Optional, Tuple

from src.core.errors import ErrorCode, ValidationError

logger = logging.getLogger(__name__)


class ValidationService:
    """Service responsible for payload shape and size validation."""

    MAX_PAYLOAD_SIZE = 10240  # 10KB max payload size
    MAX_CATEGORY_ID_LENGTH = 200

    # Control characters other than tab and newline
    CONTROL_CHARS = re.compile(r'[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]')

    def __init__(self, max_player_name_length: Optional[int] = None):
        self._max_player_name_length = max_player_name_length

    @property
    def max_player_name_length(self) -> int:
        if self._max_player_name_length is None:
            try:
                from config_factory import get_config
                self._max_player_name_length = get_config().max_player_name_length
            except Exception:
                self._max_player_name_length = 20
        return self._max_player_name_length

    def validate_socket_data(self, data: Any, required_fields: Optional[list] = None) -> Dict:
        """
        Validate Socket.IO event data.

        Args:
            data: Raw data from Socket.IO event
            required_fields: List of required field names

        Returns:
            Validated data dictionary

        Raises:
            ValidationError: If data is invalid
        """
        if not isinstance(data, dict):
            raise ValidationError(
                ErrorCode.INVALID_DATA,
                "Invalid data format - expected dictionary"
            )

        try:
            size = len(json.dumps(data))
        except (TypeError, ValueError):
            raise ValidationError(ErrorCode.INVALID_DATA, "Payload is not JSON serializable")
        if size > self.MAX_PAYLOAD_SIZE:
            raise ValidationError(
                ErrorCode.INVALID_DATA,
                f"Payload size exceeds maximum allowed size of {self.MAX_PAYLOAD_SIZE} bytes",
                {"size": size, "max_size": self.MAX_PAYLOAD_SIZE}
            )

        if required_fields:
            missing_fields = [field for field in required_fields if field not in data]
            if missing_fields:
                raise ValidationError(
                    ErrorCode.MISSING_DATA,
                    f"Missing required fields: {', '.join(missing_fields)}",
                    {"missing_fields": missing_fields, "required_fields": required_fields}
                )

        return data

    def validate_player_names(self, data: Dict) -> Tuple[str, str]:
        """
        Extract both player names from a start_game payload.

        Names are stripped of control characters. Emptiness and duplicates
        are left to the game rules.

        Raises:
            ValidationError: If a name is not a string or is too long
        """
        names = []
        for field in ('player1_name', 'player2_name'):
            name = data.get(field, '')
            if name is None:
                name = ''
            if not isinstance(name, str):
                raise ValidationError(
                    ErrorCode.INVALID_DATA,
                    "Player names must be strings",
                    {"field": field}
                )
            name = self.CONTROL_CHARS.sub('', name)
            if len(name.strip()) > self.max_player_name_length:
                raise ValidationError(
                    ErrorCode.PLAYER_NAME_TOO_LONG,
                    f"Player name must be {self.max_player_name_length} characters or less",
                    {"field": field, "max_length": self.max_player_name_length,
                     "actual_length": len(name.strip())}
                )
            names.append(name)
        return names[0], names[1]

    def validate_category_selection(self, data: Dict) -> Tuple[str, Optional[str]]:
        """
        Validate a select_category payload.

        Returns:
            Tuple of (category_id, category_name or None)
        """
        category_id = data.get('category_id')
        if not category_id or not isinstance(category_id, str):
            raise ValidationError(
                ErrorCode.MISSING_CATEGORY,
                "Category is required"
            )
        if len(category_id) > self.MAX_CATEGORY_ID_LENGTH:
            raise ValidationError(
                ErrorCode.INVALID_DATA,
                "Category id is too long",
                {"max_length": self.MAX_CATEGORY_ID_LENGTH}
            )

        category_name = data.get('category_name')
        if category_name is not None and not isinstance(category_name, str):
            raise ValidationError(
                ErrorCode.INVALID_DATA,
                "Category name must be a string"
            )
        return category_id, category_name or None

    def validate_answer(self, answer: Any) -> str:
        """
        Validate an answer submission.

        The answer is returned untouched; scoring compares it exactly.
        """
        if answer is None:
            raise ValidationError(
                ErrorCode.MISSING_ANSWER,
                "Answer is required"
            )
        if not isinstance(answer, str):
            raise ValidationError(
                ErrorCode.INVALID_ANSWER_FORMAT,
                "Answer must be a string"
            )
        return answer

    def validate_continue_choice(self, choice: Any) -> bool:
        if not isinstance(choice, bool):
            raise ValidationError(
                ErrorCode.INVALID_CONTINUE_CHOICE,
                "Continue choice must be true or false"
            )
        return choice
