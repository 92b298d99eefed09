"""
Concurrency Control Service for TriviaDuel

Handles per-game locking so every session mutation is serialized behind a single owner.
Fetch completions and client events both go through these locks.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Dict

logger = logging.getLogger(__name__)


class ConcurrencyControlService:
    """Manages per-game re-entrant locks."""

    def __init__(self):
        # Per-game locks for fine-grained control
        self._game_locks: Dict[str, threading.RLock] = {}
        # Lock for managing game locks themselves
        self._locks_lock = threading.Lock()

    def get_game_lock(self, game_id: str) -> threading.RLock:
        """Get or create a lock for a specific game."""
        with self._locks_lock:
            if game_id not in self._game_locks:
                self._game_locks[game_id] = threading.RLock()
            return self._game_locks[game_id]

    def cleanup_game_lock(self, game_id: str):
        """Clean up lock for a deleted game."""
        with self._locks_lock:
            if game_id in self._game_locks:
                del self._game_locks[game_id]

    @contextmanager
    def game_operation(self, game_id: str):
        """Context manager for thread-safe game operations."""
        game_lock = self.get_game_lock(game_id)
        with game_lock:
            yield

    def lock_count(self) -> int:
        with self._locks_lock:
            return len(self._game_locks)
