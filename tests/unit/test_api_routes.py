"""
API Routes Unit Tests

Tests for the REST endpoints in src/routes/api.py.
"""

import pytest
from flask import Flask

from src.routes.api import create_api_blueprint
from src.services.game_state_presenter import GameStatePresenter


@pytest.fixture
def api_services(game_manager, session_service):
    return {
        'game_manager': game_manager,
        'game_state_presenter': GameStatePresenter(),
        'session_service': session_service
    }


@pytest.fixture
def api_client(api_services):
    test_app = Flask(__name__)
    test_app.config['TESTING'] = True
    test_app.register_blueprint(create_api_blueprint(api_services))
    return test_app.test_client()


class TestApiRoutes:

    def test_blueprint_name(self, api_services):
        assert create_api_blueprint(api_services).name == 'api'

    def test_health_counts_games_and_connections(self, api_client, game_manager, session_service):
        game_manager.create_game('g1')
        game_manager.create_game('g2')
        session_service.create_session('sid-1', 'g1')

        response = api_client.get('/api/health')

        assert response.status_code == 200
        assert response.get_json() == {'status': 'ok', 'active_games': 2, 'connected_clients': 1}

    def test_game_state(self, api_client, game_manager):
        game_manager.create_game('g1')
        game_manager.start('g1', 'Ann', 'Bo')

        response = api_client.get('/api/games/g1')

        body = response.get_json()
        assert response.status_code == 200
        assert body['success'] is True
        assert body['data']['phase'] == 'category'
        assert [p['name'] for p in body['data']['players']] == ['Ann', 'Bo']

    def test_unknown_game_is_404(self, api_client):
        response = api_client.get('/api/games/missing')

        assert response.status_code == 404
        body = response.get_json()
        assert body['success'] is False
        assert body['error']['code'] == 'GAME_NOT_FOUND'
