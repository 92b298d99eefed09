"""
Socket.IO event handlers for TriviaDuel.

This module provides the registration function and the connection/disconnection
handlers. Each connection owns one game session, keyed by its socket id.
"""

import logging
import os

from flask import request
from flask_socketio import emit, join_room

from config_factory import get_config
from container import get_container
from .game_action_handler import GameActionHandler
from .socket_event_router import setup_router

logger = logging.getLogger(__name__)


def register_socket_handlers(socketio_instance):
    """Register all socket handlers with the SocketIO instance."""
    router = setup_router()
    game_handler = GameActionHandler()

    # Connection lifecycle bypasses the router
    socketio_instance.on_event('connect', handle_connect)
    socketio_instance.on_event('disconnect', handle_disconnect)

    router.register_route('start_game', game_handler.handle_start_game)
    router.register_route('select_category', game_handler.handle_select_category)
    router.register_route('submit_answer', game_handler.handle_submit_answer)
    router.register_route('next_question', game_handler.handle_next_question)
    router.register_route('continue_game', game_handler.handle_continue_game)
    router.register_route('play_another_category', game_handler.handle_play_another_category)
    router.register_route('retry_fetch', game_handler.handle_retry_fetch)
    router.register_route('restart_game', game_handler.handle_restart_game)
    router.register_route('quit_game', game_handler.handle_quit_game)
    router.register_route('get_game_state', game_handler.handle_get_game_state)

    router.register_with_socketio(socketio_instance)

    logger.info(f"Registered {len(router.get_registered_events())} socket event handlers")
    return router


def handle_connect(auth=None):
    """Create a game for the new connection, with Origin enforcement in production."""
    app_config = get_config()
    allowed_origins_env = os.environ.get('SOCKETIO_CORS_ALLOWED_ORIGINS', '')

    origin = request.headers.get('Origin')
    if app_config.is_production and allowed_origins_env:
        allowed = {o.strip() for o in allowed_origins_env.split(',') if o.strip()}
        if origin and origin not in allowed:
            logger.warning(f'Rejecting connection from disallowed Origin: {origin}')
            return False

    container = get_container()
    game_manager = container.get('GameManager')
    session_service = container.get('SessionService')
    broadcast_service = container.get('BroadcastService')

    game_id = request.sid  # type: ignore[attr-defined]
    join_room(game_id)
    session = game_manager.create_game(game_id)
    session_service.create_session(request.sid, game_id)  # type: ignore[attr-defined]

    logger.info(f'Client connected: {request.sid} from Origin: {origin}')  # type: ignore[attr-defined]
    emit('connected', {'status': 'Connected to TriviaDuel server', 'game_id': game_id})
    broadcast_service.send_game_state_to_player(session, request.sid)  # type: ignore[attr-defined]


def handle_disconnect(reason=None):
    """Drop the connection's game; in-flight fetches for it are discarded."""
    container = get_container()
    session_service = container.get('SessionService')
    game_manager = container.get('GameManager')

    logger.info(f'Client disconnected: {request.sid}')  # type: ignore[attr-defined]

    session_info = session_service.remove_session(request.sid)  # type: ignore[attr-defined]
    if session_info:
        game_manager.delete_game(session_info['game_id'])
