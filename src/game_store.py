"""
Game Store for TriviaDuel

Keeps every live GameSession in memory, keyed by game id, and hands out
locked access to them.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from src.core.errors import ErrorCode, ValidationError
from src.game_session import GameSession
from src.services.concurrency_control_service import ConcurrencyControlService

logger = logging.getLogger(__name__)


class GameStore:
    """In-memory registry of game sessions with thread-safe operations."""

    def __init__(self):
        self.concurrency_control = ConcurrencyControlService()
        self._games: Dict[str, GameSession] = {}
        self._games_lock = threading.Lock()

    def create_game(self, game_id: str) -> GameSession:
        """
        Create a new game session.

        Args:
            game_id: Unique identifier for the game

        Returns:
            The new GameSession

        Raises:
            ValueError: If a game with this id already exists
        """
        with self._games_lock:
            if game_id in self._games:
                raise ValueError(f"Game {game_id} already exists")
            session = GameSession(game_id=game_id)
            self._games[game_id] = session
        logger.info(f"Created game {game_id}")
        return session

    def get_game(self, game_id: str) -> Optional[GameSession]:
        with self._games_lock:
            return self._games.get(game_id)

    def game_exists(self, game_id: str) -> bool:
        with self._games_lock:
            return game_id in self._games

    def delete_game(self, game_id: str) -> bool:
        """
        Delete a game and clean up its lock.

        Returns:
            True if the game was deleted, False if it didn't exist
        """
        with self._games_lock:
            removed = self._games.pop(game_id, None)
        if removed is None:
            return False
        self.concurrency_control.cleanup_game_lock(game_id)
        logger.info(f"Deleted game {game_id}")
        return True

    def game_count(self) -> int:
        with self._games_lock:
            return len(self._games)

    @contextmanager
    def game_operation(self, game_id: str) -> Iterator[GameSession]:
        """
        Lock a game and yield its session.

        Raises:
            ValidationError: If the game does not exist
        """
        if not self.game_exists(game_id):
            raise ValidationError(ErrorCode.GAME_NOT_FOUND, f"Game {game_id} not found")

        with self.concurrency_control.game_operation(game_id):
            # May have been deleted while waiting for the lock
            session = self.get_game(game_id)
            if session is None:
                raise ValidationError(ErrorCode.GAME_NOT_FOUND, f"Game {game_id} not found")
            session.touch()
            yield session
