"""
Game Phase Enumeration

Defines the game phase states and question difficulties used throughout the application.
"""

from enum import Enum


class GamePhase(Enum):
    """Game phase enumeration."""
    SETUP = "setup"
    CATEGORY = "category"
    PLAYING = "playing"
    FINISHED = "finished"


class Difficulty(Enum):
    """Question difficulty, in the order batches are loaded."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
