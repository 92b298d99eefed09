"""
Session Service - Maps Socket.IO connections to game sessions.

Each browser connection drives exactly one two-player game. This service
keeps the socket id to game id mapping used by the socket handlers.
"""

import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class SessionService:
    """Tracks which game each Socket.IO connection controls."""

    def __init__(self):
        """Initialize the session service."""
        # socket_id -> {'game_id': ...}
        self._sessions: Dict[str, Dict[str, str]] = {}
        logger.info("SessionService initialized")

    def create_session(self, socket_id: str, game_id: str) -> None:
        """Create or update the session for a connection.

        Args:
            socket_id: Socket.IO connection ID
            game_id: Game driven by this connection
        """
        self._sessions[socket_id] = {'game_id': game_id}
        logger.debug(f"Created session for socket {socket_id} -> game {game_id}")

    def get_session(self, socket_id: str) -> Optional[Dict[str, str]]:
        return self._sessions.get(socket_id)

    def get_game_id(self, socket_id: str) -> Optional[str]:
        """Game id for a connection, or None if the socket has no session."""
        session_info = self._sessions.get(socket_id)
        return session_info['game_id'] if session_info else None

    def has_session(self, socket_id: str) -> bool:
        return socket_id in self._sessions

    def remove_session(self, socket_id: str) -> Optional[Dict[str, str]]:
        """Remove a connection's session.

        Returns:
            The removed session info or None if not found
        """
        session_info = self._sessions.pop(socket_id, None)
        if session_info:
            logger.debug(f"Removed session for socket {socket_id} (game {session_info['game_id']})")
        return session_info

    def get_sessions_count(self) -> int:
        return len(self._sessions)
