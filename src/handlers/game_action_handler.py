"""
Game Action Handler

This module handles Socket.IO events that drive a game: starting it,
choosing categories, answering, advancing, and restarting.
State broadcasts are sent by the BroadcastService after each transition;
these handlers only acknowledge the command to the caller.
"""

import logging

from flask import request

from src.core.errors import ErrorCode
from src.error_handler import with_error_handling
from src.game_session import FetchOutcome
from .base_handler import BaseHandler

logger = logging.getLogger(__name__)


class GameActionHandler(BaseHandler):
    """Handler for the commands of the game phase state machine."""

    @with_error_handling
    def handle_start_game(self, data):
        """
        Handle the setup form.

        Expected data format:
        {
            'player1_name': 'Ann',
            'player2_name': 'Bo'
        }
        """
        self.log_handler_start('handle_start_game', data)
        game_id = self.require_game_id()

        validated_data = self.validate_data_dict(data)
        name1, name2 = self.validation_service.validate_player_names(validated_data)

        outcome = self.game_manager.start(game_id, name1, name2)
        self._emit_fetch_outcome('game_started', outcome)

    @with_error_handling
    def handle_select_category(self, data):
        """
        Handle category choice.

        Expected data format:
        {
            'category_id': 'music',
            'category_name': 'Music'  # optional
        }
        """
        self.log_handler_start('handle_select_category', data)
        game_id = self.require_game_id()

        validated_data = self.validate_data_dict(data, ['category_id'])
        category_id, category_name = self.validation_service.validate_category_selection(validated_data)

        outcome = self.game_manager.select_category(game_id, category_id, category_name)
        self._emit_fetch_outcome('category_selected', outcome)

    @with_error_handling
    def handle_submit_answer(self, data):
        """
        Handle an answer click.

        Expected data format:
        {
            'answer': 'Paris'
        }
        """
        self.log_handler_start('handle_submit_answer', data)
        game_id = self.require_game_id()

        validated_data = self.validate_data_dict(data, ['answer'])
        answer = self.validation_service.validate_answer(validated_data['answer'])

        result = self.game_manager.submit_answer(game_id, answer)
        if result is None:
            # Second click on an already answered question
            return

        self.log_handler_success('handle_submit_answer', f'correct={result.correct}')
        self.emit_success('answer_result', result.to_dict())

    @with_error_handling
    def handle_next_question(self, data=None):
        """Handle the Next button."""
        self.log_handler_start('handle_next_question', data)
        game_id = self.require_game_id()

        phase = self.game_manager.advance(game_id)
        self.emit_success('advanced', {'phase': phase.value})

    @with_error_handling
    def handle_continue_game(self, data):
        """
        Handle the end-of-category decision.

        Expected data format:
        {
            'continue': true
        }
        """
        self.log_handler_start('handle_continue_game', data)
        game_id = self.require_game_id()

        validated_data = self.validate_data_dict(data, ['continue'])
        choice = self.validation_service.validate_continue_choice(validated_data['continue'])

        phase = self.game_manager.continue_with_another_category(game_id, choice)
        self.emit_success('continue_resolved', {'phase': phase.value})

    @with_error_handling
    def handle_play_another_category(self, data=None):
        self.log_handler_start('handle_play_another_category', data)
        game_id = self.require_game_id()

        phase = self.game_manager.play_another_category(game_id)
        self.emit_success('phase_changed', {'phase': phase.value})

    @with_error_handling
    def handle_retry_fetch(self, data=None):
        """Handle the Retry button shown after a failed load."""
        self.log_handler_start('handle_retry_fetch', data)
        game_id = self.require_game_id()

        outcome = self.game_manager.retry_last_fetch(game_id)
        self._emit_fetch_outcome('fetch_retried', outcome)

    @with_error_handling
    def handle_restart_game(self, data=None):
        self.log_handler_start('handle_restart_game', data)
        game_id = self.require_game_id()

        phase = self.game_manager.restart(game_id)
        self.emit_success('game_restarted', {'phase': phase.value})

    @with_error_handling
    def handle_quit_game(self, data=None):
        self.log_handler_start('handle_quit_game', data)
        game_id = self.require_game_id()

        phase = self.game_manager.quit(game_id)
        self.emit_success('game_restarted', {'phase': phase.value})

    @with_error_handling
    def handle_get_game_state(self, data=None):
        """Send the full render model to the requesting client only."""
        game_id = self.require_game_id()

        session = self.game_manager.get_game_state(game_id)
        if session is None:
            self.emit_error('error', ErrorCode.GAME_NOT_FOUND, 'Game not found')
            return

        self.broadcast_service.send_game_state_to_player(session, request.sid)  # type: ignore[attr-defined]

    def _emit_fetch_outcome(self, event_name: str, outcome: FetchOutcome) -> None:
        if outcome.success:
            self.emit_success(event_name, outcome.to_dict())
            return

        error_code = (ErrorCode.TRIVIA_SOURCE_UNAVAILABLE if outcome.retryable
                      else ErrorCode.NO_QUESTIONS_AVAILABLE)
        self.emit_error(event_name, error_code, outcome.error, {'retryable': outcome.retryable})
