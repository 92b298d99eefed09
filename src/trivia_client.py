"""
Trivia API Client for TriviaDuel

Category and question source backed by the Trivia API
(https://the-trivia-api.com/v2). Payloads are checked for basic shape only.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from src.config.game_settings import get_game_settings
from src.core.errors import TriviaSourceError
from src.core.game_phases import Difficulty
from src.game_session import Category, Question

logger = logging.getLogger(__name__)


class TriviaApiClient:
    """Fetches categories and questions over HTTP."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 http_client: Optional[httpx.Client] = None):
        """
        Initialize the client.

        Args:
            base_url: API root, defaults to the configured trivia_api_url
            timeout: Per-request timeout in seconds
            http_client: Pre-built httpx client (tests pass one with a MockTransport)
        """
        settings = get_game_settings()
        self.base_url = (base_url or settings.trivia_api_url).rstrip('/')
        self.timeout = timeout if timeout is not None else settings.trivia_api_timeout
        self._client = http_client or httpx.Client(timeout=self.timeout)

    def fetch_categories(self) -> List[Category]:
        """
        Fetch the category list.

        The API maps a display name to its category slugs. A plain
        id -> name mapping is accepted as well.

        Returns:
            Categories in the order the API listed them

        Raises:
            TriviaSourceError: On any network failure or unusable payload
        """
        data = self._get_json('/categories')
        if not isinstance(data, dict):
            raise TriviaSourceError("Category payload must be an object", self._url('/categories'))

        categories = []
        for key, value in data.items():
            if isinstance(value, list):
                slugs = [str(slug) for slug in value if slug]
                if not slugs:
                    continue
                categories.append(Category(id=','.join(slugs), name=str(key)))
            else:
                categories.append(Category(id=str(key), name=str(value)))

        logger.info(f"Fetched {len(categories)} categories from trivia API")
        return categories

    def fetch_questions(self, category_id: str, difficulty: Difficulty, limit: int) -> List[Question]:
        """
        Fetch up to `limit` questions of one difficulty for a category.

        Raises:
            TriviaSourceError: On any network failure or unusable payload
        """
        params = {
            'categories': category_id,
            'difficulties': difficulty.value,
            'limit': limit
        }
        data = self._get_json('/questions', params)
        if not isinstance(data, list):
            raise TriviaSourceError("Question payload must be a list", self._url('/questions'))

        questions = [self._parse_question(item, difficulty) for item in data[:limit]]
        logger.debug(f"Fetched {len(questions)} {difficulty.value} questions for {category_id}")
        return questions

    def close(self) -> None:
        """Close the underlying connection pool."""
        self._client.close()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = self._url(path)
        try:
            response = self._client.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Trivia API returned {e.response.status_code} for {url}")
            raise TriviaSourceError(f"Trivia API returned status {e.response.status_code}", url) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Trivia API request failed for {url}: {e}")
            raise TriviaSourceError("Trivia API request failed", url) from e
        except ValueError as e:
            logger.warning(f"Trivia API returned invalid JSON for {url}")
            raise TriviaSourceError("Trivia API returned invalid JSON", url) from e

    def _parse_question(self, item: Any, requested: Difficulty) -> Question:
        if not isinstance(item, dict):
            raise TriviaSourceError("Question item must be an object")

        text = item.get('question')
        if isinstance(text, dict):
            text = text.get('text')
        correct_answer = item.get('correctAnswer')
        incorrect_answers = item.get('incorrectAnswers')

        if not isinstance(text, str) or not isinstance(correct_answer, str):
            raise TriviaSourceError("Question item is missing its text or correct answer")
        if not isinstance(incorrect_answers, list) or not all(isinstance(a, str) for a in incorrect_answers):
            raise TriviaSourceError("Question item has malformed incorrect answers")

        try:
            difficulty = Difficulty(item.get('difficulty', requested.value))
        except ValueError:
            difficulty = requested

        return Question(
            text=text,
            correct_answer=correct_answer,
            incorrect_answers=tuple(incorrect_answers),
            difficulty=difficulty,
            id=item.get('id')
        )
