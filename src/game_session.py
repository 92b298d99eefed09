"""
Game Session model for TriviaDuel

Data structures for players, categories, questions and the session aggregate
owned by the GameManager.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from src.core.game_phases import Difficulty, GamePhase


@dataclass
class Player:
    """A player seat. Score only ever grows."""
    name: str = ''
    score: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'score': self.score}


@dataclass(frozen=True)
class Category:
    """A trivia category as listed by the category source."""
    id: str
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'name': self.name}


@dataclass(frozen=True)
class Question:
    """A multiple choice question."""
    text: str
    correct_answer: str
    incorrect_answers: tuple
    difficulty: Difficulty
    id: Optional[str] = None

    @property
    def answers(self) -> List[str]:
        """All answers, unshuffled, correct answer last."""
        return list(self.incorrect_answers) + [self.correct_answer]

    def is_correct(self, selected: str) -> bool:
        """Exact string comparison, no normalisation."""
        return selected == self.correct_answer

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'text': self.text,
            'correct_answer': self.correct_answer,
            'incorrect_answers': list(self.incorrect_answers),
            'difficulty': self.difficulty.value
        }


class FetchKind(Enum):
    """Which collaborator a fetch goes to."""
    CATEGORIES = "categories"
    QUESTIONS = "questions"


@dataclass(frozen=True)
class FetchRequest:
    """
    Descriptor of a network fetch.

    Kept on the session after a failure so the same request can be re-issued.
    The epoch ties the request to the session generation that issued it.
    """
    kind: FetchKind
    epoch: int
    category_id: Optional[str] = None
    category_name: Optional[str] = None

    @classmethod
    def categories(cls, epoch: int) -> 'FetchRequest':
        return cls(kind=FetchKind.CATEGORIES, epoch=epoch)

    @classmethod
    def questions(cls, epoch: int, category_id: str, category_name: str) -> 'FetchRequest':
        return cls(kind=FetchKind.QUESTIONS, epoch=epoch,
                   category_id=category_id, category_name=category_name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind.value,
            'category_id': self.category_id,
            'category_name': self.category_name
        }


@dataclass(frozen=True)
class FetchOutcome:
    """Result of a fetch-triggering command."""
    success: bool
    error: Optional[str] = None
    retryable: bool = False

    @classmethod
    def ok(cls) -> 'FetchOutcome':
        return cls(success=True)

    @classmethod
    def failed(cls, error: str, retryable: bool = True) -> 'FetchOutcome':
        return cls(success=False, error=error, retryable=retryable)

    def to_dict(self) -> Dict[str, Any]:
        return {'success': self.success, 'error': self.error, 'retryable': self.retryable}


@dataclass(frozen=True)
class AnswerResult:
    """Outcome of a single answer submission."""
    player_index: int
    selected: str
    correct_answer: str
    correct: bool
    points_awarded: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'player_index': self.player_index,
            'selected': self.selected,
            'correct_answer': self.correct_answer,
            'correct': self.correct,
            'points_awarded': self.points_awarded
        }


@dataclass(frozen=True)
class GameResult:
    """Final standings. winner_index is None on a tie."""
    scores: tuple
    winner_index: Optional[int]

    @property
    def is_tie(self) -> bool:
        return self.winner_index is None

    @classmethod
    def from_players(cls, players: List[Player]) -> 'GameResult':
        first, second = players
        if first.score > second.score:
            winner = 0
        elif second.score > first.score:
            winner = 1
        else:
            winner = None
        return cls(scores=(first.score, second.score), winner_index=winner)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'scores': list(self.scores),
            'winner_index': self.winner_index,
            'is_tie': self.is_tie
        }


def _new_players() -> List[Player]:
    return [Player(), Player()]


@dataclass
class GameSession:
    """Root aggregate for one two-player game."""
    game_id: str
    players: List[Player] = field(default_factory=_new_players)
    categories: List[Category] = field(default_factory=list)
    used_categories: Set[str] = field(default_factory=set)
    questions: List[Question] = field(default_factory=list)
    question_index: int = 0
    current_player: int = 0
    current_category: str = ''
    phase: GamePhase = GamePhase.SETUP
    answering: bool = False
    awaiting_continue: bool = False
    fetch_in_progress: bool = False
    last_error: Optional[str] = None
    pending_request: Optional[FetchRequest] = None
    last_answer: Optional[AnswerResult] = None
    epoch: int = 0
    created_at: datetime = field(default_factory=datetime.now)
    last_activity: datetime = field(default_factory=datetime.now)

    def available_categories(self) -> List[Category]:
        """Categories not yet played in this session."""
        return [c for c in self.categories if c.id not in self.used_categories]

    def has_categories_left(self) -> bool:
        return bool(self.available_categories())

    def find_category(self, category_id: str) -> Optional[Category]:
        for category in self.categories:
            if category.id == category_id:
                return category
        return None

    def current_question(self) -> Optional[Question]:
        if self.phase != GamePhase.PLAYING or not self.questions:
            return None
        return self.questions[self.question_index]

    def is_last_question(self) -> bool:
        return self.question_index >= len(self.questions) - 1

    def reset(self) -> None:
        """Full reset back to setup. Only the category list survives."""
        self.players = _new_players()
        self.used_categories = set()
        self.questions = []
        self.question_index = 0
        self.current_player = 0
        self.current_category = ''
        self.phase = GamePhase.SETUP
        self.answering = False
        self.awaiting_continue = False
        self.fetch_in_progress = False
        self.last_error = None
        self.pending_request = None
        self.last_answer = None
        self.epoch += 1

    def touch(self) -> None:
        self.last_activity = datetime.now()
