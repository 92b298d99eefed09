"""
REST API endpoints for the TriviaDuel application.
"""

import logging

from flask import Blueprint, jsonify

logger = logging.getLogger(__name__)


def create_api_blueprint(services):
    """Create and configure the API Blueprint with service dependencies."""
    game_manager = services['game_manager']
    game_state_presenter = services['game_state_presenter']
    session_service = services['session_service']

    api = Blueprint('api', __name__)

    @api.route('/api/health')
    def health():
        """Liveness check with game and connection counts."""
        return jsonify({
            'status': 'ok',
            'active_games': game_manager.game_store.game_count(),
            'connected_clients': session_service.get_sessions_count()
        })

    @api.route('/api/games/<game_id>')
    def game_state(game_id):
        """Read-only render model of one game."""
        session = game_manager.get_game_state(game_id)
        if session is None:
            logger.info(f'Game state requested for unknown game {game_id}')
            return jsonify({
                'success': False,
                'error': {'code': 'GAME_NOT_FOUND', 'message': 'Game not found', 'details': {}}
            }), 404

        return jsonify({
            'success': True,
            'data': game_state_presenter.create_safe_game_state(session)
        })

    return api
