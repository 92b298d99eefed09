"""
Question Batch Service for TriviaDuel

Loads the questions for one category by issuing one request per difficulty
concurrently and joining them. Either every request succeeds or the batch fails.
"""

import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import List, Optional

from src.config.game_settings import GameSettings, get_game_settings
from src.core.errors import TriviaSourceError
from src.game_session import Question

logger = logging.getLogger(__name__)


class QuestionBatchService:
    """Fan-out/join loader for a category's questions."""

    def __init__(self, trivia_client, game_settings: Optional[GameSettings] = None):
        self.trivia_client = trivia_client
        self.game_settings = game_settings or get_game_settings()

    def fetch_batch(self, category_id: str) -> List[Question]:
        """
        Fetch every difficulty for a category.

        Args:
            category_id: Category to load

        Returns:
            Questions ordered difficulty-major (easy, medium, hard)

        Raises:
            TriviaSourceError: If any single request fails; partial results are discarded
        """
        difficulties = self.game_settings.difficulties
        limit = self.game_settings.questions_per_difficulty

        executor = ThreadPoolExecutor(max_workers=len(difficulties), thread_name_prefix='trivia-batch')
        try:
            futures = [
                executor.submit(self.trivia_client.fetch_questions, category_id, difficulty, limit)
                for difficulty in difficulties
            ]
            done, not_done = wait(futures, return_when=FIRST_EXCEPTION)

            for future in futures:
                if future in done and future.exception() is not None:
                    for pending in not_done:
                        pending.cancel()
                    error = future.exception()
                    logger.warning(f"Question batch for {category_id} aborted: {error}")
                    if isinstance(error, TriviaSourceError):
                        raise error
                    raise TriviaSourceError(f"Question request failed: {error}") from error

            questions: List[Question] = []
            for future in futures:
                questions.extend(future.result())
        finally:
            executor.shutdown(wait=False)

        logger.info(f"Loaded {len(questions)} questions for category {category_id}")
        return questions
