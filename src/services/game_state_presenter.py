"""
Game State Presenter - Centralized game state transformation for broadcasts.

This service turns a GameSession snapshot into the payloads sent to clients,
ensuring consistent shapes, HTML-escaped text and no answer leaks while a
question is still open.
"""

import html
import logging
import random
from typing import Any, Dict, List, Optional

from src.core.game_phases import GamePhase
from src.game_manager import build_continue_prompt, format_category_name
from src.game_session import GameResult, GameSession, Question

logger = logging.getLogger(__name__)


class GameStatePresenter:
    """Centralized service for transforming game state data for client broadcasts."""

    def create_safe_game_state(self, session: GameSession) -> Dict[str, Any]:
        """Create a safe game state object for client consumption.

        Args:
            session: Snapshot of the game session

        Returns:
            Dict containing the render model for the current phase
        """
        state = {
            'game_id': session.game_id,
            'phase': session.phase.value,
            'players': self.create_player_list(session),
            'current_player': session.current_player,
            'loading': session.fetch_in_progress,
            'error': self._escape(session.last_error) if session.last_error else None,
            'can_retry': session.last_error is not None and session.pending_request is not None
        }

        if session.phase == GamePhase.CATEGORY:
            state['categories'] = self.create_category_list(session)
        elif session.phase == GamePhase.PLAYING:
            state.update(self._create_playing_phase_data(session))
        elif session.phase == GamePhase.FINISHED:
            state['results'] = self.create_results(session)
            state['categories_left'] = session.has_categories_left()

        return state

    def create_player_list(self, session: GameSession) -> List[Dict[str, Any]]:
        return [
            {'name': self._escape(player.name), 'score': player.score}
            for player in session.players
        ]

    def create_category_list(self, session: GameSession) -> List[Dict[str, Any]]:
        """Unused categories only; ids stay raw because clients send them back."""
        return [
            {'id': category.id, 'name': self._escape(category.name)}
            for category in session.available_categories()
        ]

    def create_continue_prompt(self, session: GameSession) -> Optional[Dict[str, Any]]:
        """Prompt shown after the last question of a category, or None when not waiting."""
        if not session.awaiting_continue:
            return None
        return {
            'category': self._escape(format_category_name(session.current_category)),
            'message': self._escape(build_continue_prompt(session.current_category))
        }

    def create_results(self, session: GameSession) -> Dict[str, Any]:
        """Final scores with the winner's name, or a tie marker."""
        result = GameResult.from_players(session.players)
        results = result.to_dict()
        if result.is_tie:
            results['winner'] = None
            results['message'] = "It's a tie!"
        else:
            winner = self._escape(session.players[result.winner_index].name)
            results['winner'] = winner
            results['message'] = f'{winner} wins!'
        return results

    def shuffle_answers(self, question: Question) -> List[Dict[str, str]]:
        """Shuffle a question's answers for display.

        Every call draws a fresh order, so a redisplayed question is reshuffled
        and nothing in the public state predicts where the correct answer sits.
        """
        answers = question.answers
        random.shuffle(answers)
        return [{'label': self._escape(answer), 'value': answer} for answer in answers]

    def _create_playing_phase_data(self, session: GameSession) -> Dict[str, Any]:
        question = session.current_question()
        data = {
            'category': self._escape(format_category_name(session.current_category)),
            'question_number': session.question_index + 1,
            'question_count': len(session.questions),
            'answering': session.answering,
            'awaiting_continue': session.awaiting_continue
        }
        if question is not None:
            data['question'] = {
                'text': self._escape(question.text),
                'difficulty': question.difficulty.value,
                'answers': self.shuffle_answers(question)
            }
        if session.last_answer is not None:
            answer = session.last_answer.to_dict()
            answer['selected'] = self._escape(answer['selected'])
            answer['correct_answer'] = self._escape(answer['correct_answer'])
            data['last_answer'] = answer
        return data

    @staticmethod
    def _escape(text: str) -> str:
        return html.escape(text or '')
