"""
Game Manager for TriviaDuel

Runs the game phase state machine: player setup, category selection,
turn-based answering, end-of-category decisions and restarts.
Works with GameStore to hold sessions and with the trivia sources to load content.
"""

import copy
import logging
from typing import Callable, List, Optional, Tuple

from src.config.game_settings import GameSettings, get_game_settings
from src.core.errors import ErrorCode, InvalidStateTransition, TriviaSourceError, ValidationError
from src.core.game_phases import GamePhase
from src.game_session import (
    AnswerResult, FetchKind, FetchOutcome, FetchRequest, GameResult, GameSession, Player
)
from src.game_store import GameStore

logger = logging.getLogger(__name__)

StateListener = Callable[[str, GameSession], None]


def format_category_name(name: str) -> str:
    """Turn a category slug like 'film_and_tv,music' into 'Film And Tv, Music'."""
    spaced = name.replace('_', ' ').replace(',', ', ')
    return ' '.join(word[:1].upper() + word[1:] for word in spaced.split(' '))


def build_continue_prompt(category_name: str) -> str:
    return f'Category "{format_category_name(category_name)}" completed!\n\nPlay another category?'


class GameManager:
    """Manages game state transitions and scoring logic."""

    FETCH_ERROR_MESSAGES = {
        FetchKind.CATEGORIES: 'Failed to load categories',
        FetchKind.QUESTIONS: 'Failed to load questions'
    }

    def __init__(self, game_store: GameStore, trivia_client, question_batch_service,
                 game_settings: Optional[GameSettings] = None):
        self.game_store = game_store
        self.trivia_client = trivia_client
        self.question_batch_service = question_batch_service
        self.game_settings = game_settings or get_game_settings()

        # Points per correct answer from configuration
        self.POINTS = self.game_settings.difficulty_points

        self._state_listeners: List[StateListener] = []

    # Render sink registration

    def add_state_listener(self, listener: StateListener) -> None:
        """Register a callback invoked with (game_id, session snapshot) after every transition."""
        self._state_listeners.append(listener)

    def _notify(self, game_id: str, snapshot: GameSession) -> None:
        for listener in self._state_listeners:
            try:
                listener(game_id, snapshot)
            except Exception as e:
                logger.error(f"State listener failed for game {game_id}: {e}")

    # Session lifecycle

    def create_game(self, game_id: str) -> GameSession:
        """Create a fresh session in setup phase."""
        session = self.game_store.create_game(game_id)
        return copy.deepcopy(session)

    def delete_game(self, game_id: str) -> bool:
        return self.game_store.delete_game(game_id)

    def get_game_state(self, game_id: str) -> Optional[GameSession]:
        """
        Get a snapshot of a game session.

        Returns:
            Copy of the session, or None if the game doesn't exist
        """
        try:
            with self.game_store.game_operation(game_id) as session:
                return copy.deepcopy(session)
        except ValidationError:
            return None

    def get_results(self, game_id: str) -> Optional[GameResult]:
        """Current standings; the winner has a strictly higher score."""
        session = self.get_game_state(game_id)
        if session is None:
            return None
        return GameResult.from_players(session.players)

    # Commands

    def start(self, game_id: str, name1: str, name2: str) -> FetchOutcome:
        """
        Assign player names and move from setup to category selection.

        Loads the category list unless an earlier game already fetched it.

        Raises:
            ValidationError: If a name is empty or both names are equal
            InvalidStateTransition: If the game is not in setup
        """
        name1, name2 = self._validate_player_names(name1, name2)

        request = None
        with self.game_store.game_operation(game_id) as session:
            self._require_phase(session, GamePhase.SETUP, 'start a game')
            session.players = [Player(name=name1), Player(name=name2)]
            session.phase = GamePhase.CATEGORY
            if session.categories:
                self._finish_if_exhausted(session)
            else:
                request = self._begin_fetch(session, FetchRequest.categories(session.epoch))
            snapshot = copy.deepcopy(session)

        logger.info(f"Game {game_id} started by {name1} and {name2}")
        self._notify(game_id, snapshot)

        if request is None:
            return FetchOutcome.ok()
        return self._run_fetch(game_id, request)

    def select_category(self, game_id: str, category_id: str, category_name: Optional[str] = None) -> FetchOutcome:
        """
        Pick a category and load its questions.

        The category is only marked used once its questions arrive, so a failed
        load can be retried.

        Raises:
            InvalidStateTransition: If the game is not choosing a category
            ValidationError: If the category is unknown, already used, or a fetch is in flight
        """
        with self.game_store.game_operation(game_id) as session:
            self._require_phase(session, GamePhase.CATEGORY, 'select a category')
            if session.fetch_in_progress:
                raise ValidationError(
                    ErrorCode.FETCH_IN_PROGRESS,
                    'Questions are already loading'
                )
            if category_id in session.used_categories:
                raise ValidationError(
                    ErrorCode.CATEGORY_ALREADY_USED,
                    'This category has already been played',
                    {'category_id': category_id}
                )
            category = session.find_category(category_id)
            if category is None:
                raise ValidationError(
                    ErrorCode.UNKNOWN_CATEGORY,
                    'Unknown category',
                    {'category_id': category_id}
                )
            request = self._begin_fetch(
                session,
                FetchRequest.questions(session.epoch, category.id, category_name or category.name)
            )
            snapshot = copy.deepcopy(session)

        logger.info(f"Game {game_id} selected category {category.id}")
        self._notify(game_id, snapshot)
        return self._run_fetch(game_id, request)

    def submit_answer(self, game_id: str, selected: str) -> Optional[AnswerResult]:
        """
        Score the current player's answer.

        Returns:
            The AnswerResult, or None when no answer is expected (already answered)
        """
        with self.game_store.game_operation(game_id) as session:
            if session.phase != GamePhase.PLAYING or not session.answering:
                self._ignore(game_id, 'submit_answer while no answer is expected')
                return None

            question = session.current_question()
            session.answering = False
            correct = question.is_correct(selected)
            points = self.POINTS[question.difficulty] if correct else 0
            session.players[session.current_player].score += points

            result = AnswerResult(
                player_index=session.current_player,
                selected=selected,
                correct_answer=question.correct_answer,
                correct=correct,
                points_awarded=points
            )
            session.last_answer = result
            snapshot = copy.deepcopy(session)

        logger.info(
            f"Game {game_id}: player {result.player_index} answered "
            f"{'correctly' if correct else 'incorrectly'} (+{points})"
        )
        self._notify(game_id, snapshot)
        return result

    def advance(self, game_id: str, confirm: Optional[Callable[[str], bool]] = None) -> GamePhase:
        """
        Move to the next question, or end the category after the last one.

        After the last question the game finishes if no category is left.
        Otherwise the players decide whether to continue: `confirm` is asked
        right away when given, else the session waits for
        continue_with_another_category().

        Returns:
            Phase after the command
        """
        prompt = None
        with self.game_store.game_operation(game_id) as session:
            if session.phase != GamePhase.PLAYING or session.answering or session.awaiting_continue:
                self._ignore(game_id, 'advance while the current question is unresolved')
                return session.phase

            if not session.is_last_question():
                session.question_index += 1
                session.current_player = 1 - session.current_player
                session.answering = True
                session.last_answer = None
            elif not session.has_categories_left():
                self._finish(session)
            else:
                session.awaiting_continue = True
                prompt = build_continue_prompt(session.current_category)

            phase = session.phase
            snapshot = copy.deepcopy(session)

        self._notify(game_id, snapshot)

        if prompt is not None and confirm is not None:
            return self.continue_with_another_category(game_id, bool(confirm(prompt)))
        return phase

    def continue_with_another_category(self, game_id: str, yes: bool) -> GamePhase:
        """Resolve the end-of-category decision."""
        with self.game_store.game_operation(game_id) as session:
            if not session.awaiting_continue:
                self._ignore(game_id, 'continue decision while none is pending')
                return session.phase

            session.awaiting_continue = False
            self._clear_round(session)
            if yes and session.has_categories_left():
                session.phase = GamePhase.CATEGORY
            else:
                self._finish(session)

            phase = session.phase
            snapshot = copy.deepcopy(session)

        logger.info(f"Game {game_id} continue decision: {'yes' if yes else 'no'} -> {phase.value}")
        self._notify(game_id, snapshot)
        return phase

    def play_another_category(self, game_id: str) -> GamePhase:
        """From the final screen, go back to category selection, or to setup if none are left."""
        with self.game_store.game_operation(game_id) as session:
            self._require_phase(session, GamePhase.FINISHED, 'play another category')
            if session.has_categories_left():
                self._clear_round(session)
                session.phase = GamePhase.CATEGORY
            else:
                session.reset()

            phase = session.phase
            snapshot = copy.deepcopy(session)

        self._notify(game_id, snapshot)
        return phase

    def restart(self, game_id: str) -> GamePhase:
        """Reset everything except the cached category list."""
        with self.game_store.game_operation(game_id) as session:
            session.reset()
            snapshot = copy.deepcopy(session)

        logger.info(f"Game {game_id} restarted")
        self._notify(game_id, snapshot)
        return GamePhase.SETUP

    def quit(self, game_id: str) -> GamePhase:
        """Abandon the current game from any phase."""
        return self.restart(game_id)

    def retry_last_fetch(self, game_id: str) -> FetchOutcome:
        """
        Re-issue the last failed fetch.

        A no-op returning success when there is nothing to retry.

        Raises:
            ValidationError: If a fetch is already in flight
        """
        with self.game_store.game_operation(game_id) as session:
            if session.fetch_in_progress:
                raise ValidationError(
                    ErrorCode.FETCH_IN_PROGRESS,
                    'A request is already in progress'
                )
            if session.pending_request is None or session.last_error is None:
                return FetchOutcome.ok()

            request = self._begin_fetch(session, session.pending_request)
            snapshot = copy.deepcopy(session)

        logger.info(f"Game {game_id} retrying {request.kind.value} fetch")
        self._notify(game_id, snapshot)
        return self._run_fetch(game_id, request)

    # Fetch plumbing

    def _begin_fetch(self, session: GameSession, request: FetchRequest) -> FetchRequest:
        session.fetch_in_progress = True
        session.pending_request = request
        session.last_error = None
        return request

    def _run_fetch(self, game_id: str, request: FetchRequest) -> FetchOutcome:
        # Network I/O happens outside the game lock
        payload = None
        error = None
        try:
            if request.kind == FetchKind.CATEGORIES:
                payload = self.trivia_client.fetch_categories()
            else:
                payload = self.question_batch_service.fetch_batch(request.category_id)
        except TriviaSourceError as e:
            error = e
        except Exception as e:
            logger.error(f"Game {game_id}: unexpected error during {request.kind.value} fetch: {e}")
            error = TriviaSourceError(f"Unexpected error: {e}")

        if not self.game_store.game_exists(game_id):
            return self._game_gone(game_id, request)

        if error is not None:
            return self._record_fetch_failure(game_id, request, error)
        return self._apply_fetch_result(game_id, request, payload)

    def _game_gone(self, game_id: str, request: FetchRequest) -> FetchOutcome:
        logger.info(f"Game {game_id} was deleted while a {request.kind.value} fetch was in flight")
        return FetchOutcome.failed('Game no longer exists', retryable=False)

    def _record_fetch_failure(self, game_id: str, request: FetchRequest, error: TriviaSourceError) -> FetchOutcome:
        message = self.FETCH_ERROR_MESSAGES[request.kind]
        logger.warning(f"Game {game_id}: {message}: {error}")

        try:
            with self.game_store.game_operation(game_id) as session:
                if session.epoch != request.epoch:
                    logger.info(f"Game {game_id}: discarding failure of a fetch from before restart")
                    return FetchOutcome.failed(message, retryable=False)

                session.fetch_in_progress = False
                session.last_error = message
                session.pending_request = request
                snapshot = copy.deepcopy(session)
        except ValidationError as e:
            if e.code != ErrorCode.GAME_NOT_FOUND:
                raise
            return self._game_gone(game_id, request)

        self._notify(game_id, snapshot)
        return FetchOutcome.failed(message)

    def _apply_fetch_result(self, game_id: str, request: FetchRequest, payload) -> FetchOutcome:
        try:
            with self.game_store.game_operation(game_id) as session:
                if session.epoch != request.epoch:
                    logger.info(f"Game {game_id}: discarding result of a fetch from before restart")
                    return FetchOutcome.failed('Game was restarted', retryable=False)

                session.fetch_in_progress = False
                session.pending_request = None
                session.last_error = None
                outcome = FetchOutcome.ok()

                if request.kind == FetchKind.CATEGORIES:
                    session.categories = list(payload)
                    self._finish_if_exhausted(session)
                else:
                    session.used_categories.add(request.category_id)
                    if not payload:
                        message = f'No questions available for {format_category_name(request.category_name or "")}'
                        session.last_error = message
                        outcome = FetchOutcome.failed(message, retryable=False)
                        self._finish_if_exhausted(session)
                    else:
                        session.questions = list(payload)
                        session.question_index = 0
                        session.current_player = 0
                        session.current_category = request.category_name or request.category_id
                        session.last_answer = None
                        session.awaiting_continue = False
                        session.phase = GamePhase.PLAYING
                        session.answering = True

                snapshot = copy.deepcopy(session)
        except ValidationError as e:
            if e.code != ErrorCode.GAME_NOT_FOUND:
                raise
            return self._game_gone(game_id, request)

        self._notify(game_id, snapshot)
        return outcome

    # Helpers

    def _validate_player_names(self, name1, name2) -> Tuple[str, str]:
        name1 = name1.strip() if isinstance(name1, str) else ''
        name2 = name2.strip() if isinstance(name2, str) else ''

        if not name1 or not name2:
            raise ValidationError(
                ErrorCode.MISSING_PLAYER_NAME,
                'Please enter names for both players!',
                {'reason': 'empty'}
            )
        if name1 == name2:
            raise ValidationError(
                ErrorCode.DUPLICATE_PLAYER_NAME,
                'Players must have different names!',
                {'reason': 'duplicate'}
            )
        return name1, name2

    def _require_phase(self, session: GameSession, phase: GamePhase, action: str) -> None:
        if session.phase != phase:
            raise InvalidStateTransition(
                f'Cannot {action} during {session.phase.value} phase',
                ErrorCode.WRONG_PHASE,
                {'phase': session.phase.value, 'required_phase': phase.value}
            )

    def _ignore(self, game_id: str, message: str) -> None:
        if self.game_settings.strict_transitions:
            raise InvalidStateTransition(message)
        logger.debug(f"Game {game_id}: ignored {message}")

    def _clear_round(self, session: GameSession) -> None:
        session.questions = []
        session.question_index = 0
        session.current_player = 0
        session.answering = False
        session.last_answer = None

    def _finish_if_exhausted(self, session: GameSession) -> None:
        if session.phase == GamePhase.CATEGORY and not session.has_categories_left():
            self._finish(session)

    def _finish(self, session: GameSession) -> None:
        session.phase = GamePhase.FINISHED
        session.answering = False
        session.awaiting_continue = False
        result = GameResult.from_players(session.players)
        if result.is_tie:
            logger.info(f"Game {session.game_id} finished in a tie at {result.scores[0]}")
        else:
            winner = session.players[result.winner_index]
            logger.info(f"Game {session.game_id} won by {winner.name} with {winner.score}")
