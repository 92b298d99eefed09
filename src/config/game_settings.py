"""
Game Settings Configuration Module

Provides centralized access to game-specific configuration values,
replacing hardcoded constants throughout the codebase.
"""

import logging
from typing import Dict, List
from src.core.game_phases import Difficulty

logger = logging.getLogger(__name__)


class GameSettings:
    """Centralized game settings management."""

    def __init__(self, app_config=None):
        """
        Initialize game settings.

        Args:
            app_config: Application configuration instance from config_factory
        """
        self._config = app_config
        if app_config is None:
            try:
                from config_factory import get_config
                self._config = get_config()
            except (ImportError, Exception) as e:
                logger.warning(f"Could not load configuration: {e}, using defaults")
                self._config = None

    @property
    def difficulty_points(self) -> Dict[Difficulty, int]:
        """
        Get points awarded for a correct answer, by difficulty.

        Returns:
            Dictionary mapping difficulties to points
        """
        if self._config is None:
            return {
                Difficulty.EASY: 10,
                Difficulty.MEDIUM: 15,
                Difficulty.HARD: 20
            }

        return {
            Difficulty.EASY: self._config.easy_points,
            Difficulty.MEDIUM: self._config.medium_points,
            Difficulty.HARD: self._config.hard_points
        }

    @property
    def difficulties(self) -> List[Difficulty]:
        """Difficulties fetched for every category, in load order."""
        return [Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD]

    @property
    def questions_per_difficulty(self) -> int:
        """
        Get number of questions requested per difficulty.

        Returns:
            Question limit for each difficulty request
        """
        if self._config is None:
            return 2  # Fallback default

        return self._config.questions_per_difficulty

    @property
    def trivia_api_url(self) -> str:
        """Base URL of the trivia API."""
        if self._config is None:
            return 'https://the-trivia-api.com/v2'

        return self._config.trivia_api_url

    @property
    def trivia_api_timeout(self) -> float:
        """Per-request timeout in seconds."""
        if self._config is None:
            return 10.0

        return self._config.trivia_api_timeout

    @property
    def max_player_name_length(self) -> int:
        """
        Get maximum player name length in characters.

        Returns:
            Maximum allowed name length
        """
        if self._config is None:
            return 20  # Fallback default

        return self._config.max_player_name_length

    @property
    def strict_transitions(self) -> bool:
        """Whether out-of-turn commands raise instead of being ignored."""
        if self._config is None:
            return False

        return self._config.strict_transitions


# Global instance for easy access
_game_settings_instance = None


def get_game_settings(app_config=None) -> GameSettings:
    """
    Get or create the global game settings instance.

    Args:
        app_config: Optional app config to use

    Returns:
        GameSettings instance
    """
    global _game_settings_instance

    if _game_settings_instance is None or app_config is not None:
        _game_settings_instance = GameSettings(app_config)

    return _game_settings_instance


def reset_game_settings():
    """Reset the global game settings instance (mainly for testing)."""
    global _game_settings_instance
    _game_settings_instance = None
