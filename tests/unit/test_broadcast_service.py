"""
Unit tests for BroadcastService.
"""

from unittest.mock import Mock

from src.core.game_phases import GamePhase
from src.game_session import GameSession, Player
from src.services.broadcast_service import BroadcastService
from src.services.game_state_presenter import GameStatePresenter
from tests.helpers.socket_mocks import create_mock_socketio, emitted_events


class TestBroadcastService:

    def setup_method(self):
        self.socketio = create_mock_socketio()
        self.service = BroadcastService(self.socketio, GameStatePresenter())
        self.session = GameSession(game_id='g1')
        self.session.players = [Player('Ann'), Player('Bo')]

    def test_emit_to_game_targets_game_room(self):
        self.service.emit_to_game('ping', {'a': 1}, 'g1')
        self.socketio.emit.assert_called_once_with('ping', {'a': 1}, room='g1')

    def test_emit_to_player_targets_socket(self):
        self.service.emit_to_player('ping', {}, 'sid-1')
        self.socketio.emit.assert_called_once_with('ping', {}, room='sid-1')

    def test_emit_errors_are_logged_not_raised(self):
        self.socketio.emit.side_effect = RuntimeError('socket closed')
        self.service.emit_to_game('ping', {}, 'g1')
        self.service.emit_to_player('ping', {}, 'sid-1')

    def test_broadcast_game_state(self):
        self.service.broadcast_game_state('g1', self.session)

        [(event, data, room)] = emitted_events(self.socketio)
        assert event == 'game_state_updated'
        assert room == 'g1'
        assert data['phase'] == 'setup'
        assert data['players'][0]['name'] == 'Ann'

    def test_broadcast_includes_continue_prompt_when_awaiting(self):
        self.session.phase = GamePhase.PLAYING
        self.session.current_category = 'music'
        self.session.awaiting_continue = True

        self.service.broadcast_game_state('g1', self.session)

        events = [event for event, _, _ in emitted_events(self.socketio)]
        assert events == ['game_state_updated', 'continue_prompt']

    def test_broadcast_survives_presenter_failure(self):
        presenter = Mock()
        presenter.create_safe_game_state.side_effect = KeyError('boom')
        service = BroadcastService(self.socketio, presenter)

        service.broadcast_game_state('g1', self.session)

        self.socketio.emit.assert_not_called()

    def test_send_game_state_to_player(self):
        self.service.send_game_state_to_player(self.session, 'sid-1')

        [(event, data, room)] = emitted_events(self.socketio)
        assert event == 'game_state'
        assert room == 'sid-1'

    def test_default_presenter(self):
        assert isinstance(BroadcastService(self.socketio).game_state_presenter, GameStatePresenter)
