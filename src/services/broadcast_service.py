"""
Broadcast Service - Centralized Socket.IO message broadcasting.

This service handles all Socket.IO emissions in a centralized way:
- Game-wide state updates after every transition
- End-of-category continue prompts
- Individual connection messages and errors
"""

import logging
from typing import Any, Dict, Optional

from src.game_session import GameSession
from src.services.game_state_presenter import GameStatePresenter

logger = logging.getLogger(__name__)


class BroadcastService:
    """Centralized service for all Socket.IO broadcasting operations."""

    def __init__(self, socketio, game_state_presenter: Optional[GameStatePresenter] = None):
        """Initialize the broadcast service.

        Args:
            socketio: Flask-SocketIO instance for emitting messages
            game_state_presenter: Presenter turning sessions into payloads
        """
        self.socketio = socketio
        self.game_state_presenter = game_state_presenter or GameStatePresenter()

    # Core emission methods

    def emit_to_game(self, event: str, data: Dict[str, Any], game_id: str):
        """Emit an event to every connection watching a game."""
        try:
            self.socketio.emit(event, data, room=game_id)
            logger.debug(f'Emitted {event} to game {game_id}')
        except Exception as e:
            logger.error(f'Error emitting {event} to game {game_id}: {e}')

    def emit_to_player(self, event: str, data: Dict[str, Any], socket_id: str):
        """Emit an event to a single connection."""
        try:
            self.socketio.emit(event, data, room=socket_id)
            logger.debug(f'Emitted {event} to socket {socket_id}')
        except Exception as e:
            logger.error(f'Error emitting {event} to socket {socket_id}: {e}')

    # High-level broadcast methods

    def broadcast_game_state(self, game_id: str, session: GameSession):
        """Render a session snapshot to its game.

        Registered as a GameManager state listener, so it runs after every transition.
        """
        try:
            game_state = self.game_state_presenter.create_safe_game_state(session)
            self.emit_to_game('game_state_updated', game_state, game_id)

            prompt = self.game_state_presenter.create_continue_prompt(session)
            if prompt is not None:
                self.emit_to_game('continue_prompt', prompt, game_id)

            logger.debug(f'Broadcasted game state ({session.phase.value}) to game {game_id}')
        except Exception as e:
            logger.error(f'Error broadcasting game state: {e}')

    def send_game_state_to_player(self, session: GameSession, socket_id: str):
        """Send the complete game state to one connection (initial connect or refresh)."""
        try:
            game_state = self.game_state_presenter.create_safe_game_state(session)
            self.emit_to_player('game_state', game_state, socket_id)

            prompt = self.game_state_presenter.create_continue_prompt(session)
            if prompt is not None:
                self.emit_to_player('continue_prompt', prompt, socket_id)
        except Exception as e:
            logger.error(f'Error sending game state to socket {socket_id}: {e}')
