# backend/quizdeck/core/store_client.py

import os
import logging
from typing import Any, Dict, List, Optional

import httpx
from dotenv import load_dotenv
from pydantic import ValidationError

from .errors import NetworkFailure, NotFound
from .schemas import AttemptAnswer, AttemptResult, Question, Quiz
from .wire import (
    attempt_to_wire,
    question_from_wire,
    quiz_from_wire,
    quizzes_from_wire,
    result_from_wire,
)

# ------------------------------------------------------------
# Ensure environment is loaded early
# ------------------------------------------------------------
load_dotenv()
logger = logging.getLogger("quizdeck.store")

DEFAULT_STORE_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 10.0


class QuizStoreClient:
    """Async client for the quiz store's CRUD and scoring endpoints."""

    def __init__(self, http: httpx.AsyncClient):
        self._http = http

    async def aclose(self) -> None:
        await self._http.aclose()

    # ---- transport
    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        try:
            resp = await self._http.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise NetworkFailure(f"Could not reach quiz store: {e}") from e

        if resp.status_code == 404:
            raise NotFound(_message(resp) or f"Not found: {path}")
        if resp.is_error:
            msg = _message(resp) or f"Quiz store returned {resp.status_code}"
            logger.error(f"{method} {path} -> {resp.status_code}: {msg}")
            raise NetworkFailure(msg, status_code=resp.status_code)

        logger.debug(f"{method} {path} -> {resp.status_code}")
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise NetworkFailure("Unexpected response from quiz store") from e

    def _parse(self, fn, data):
        try:
            return fn(data)
        except (ValidationError, TypeError, AttributeError) as e:
            logger.error(f"Unexpected response shape from quiz store: {e}")
            raise NetworkFailure("Unexpected response from quiz store") from e

    # ---- public
    async def list_quizzes(self, admin: bool = False) -> List[Quiz]:
        data = await self._request("GET", "/admin/quizzes" if admin else "/quizzes")
        return self._parse(quizzes_from_wire, data or [])

    async def get_quiz(self, quiz_id: str, admin: bool = False) -> Quiz:
        path = f"/admin/quizzes/{quiz_id}" if admin else f"/quizzes/{quiz_id}"
        return self._parse(quiz_from_wire, await self._request("GET", path))

    async def submit_attempt(self, quiz_id: str, answers: List[AttemptAnswer]) -> AttemptResult:
        data = await self._request("POST", f"/quizzes/{quiz_id}/attempt", json=attempt_to_wire(answers))
        result = self._parse(result_from_wire, data)
        logger.info(f"Attempt {result.attempt_id} scored {result.score}/{result.total_points} for quiz={quiz_id}")
        return result

    # ---- admin
    async def create_quiz(self, payload: Dict[str, Any]) -> Quiz:
        return self._parse(quiz_from_wire, await self._request("POST", "/admin/quizzes", json=payload))

    async def update_quiz(self, quiz_id: str, payload: Dict[str, Any]) -> Quiz:
        data = await self._request("PUT", f"/admin/quizzes/{quiz_id}", json=payload)
        return self._parse(quiz_from_wire, data)

    async def delete_quiz(self, quiz_id: str) -> None:
        await self._request("DELETE", f"/admin/quizzes/{quiz_id}")

    async def create_question(self, quiz_id: str, payload: Dict[str, Any]) -> Question:
        data = await self._request("POST", f"/admin/quizzes/{quiz_id}/questions", json=payload)
        return self._parse(question_from_wire, data)

    async def update_question(self, question_id: str, payload: Dict[str, Any]) -> Question:
        data = await self._request("PUT", f"/admin/questions/{question_id}", json=payload)
        return self._parse(question_from_wire, data)

    async def delete_question(self, question_id: str) -> None:
        await self._request("DELETE", f"/admin/questions/{question_id}")

    async def find_question(self, question_id: str) -> Question:
        """Locate a question by scanning admin quizzes; the store has no direct lookup."""
        for quiz in await self.list_quizzes(admin=True):
            for q in quiz.questions or []:
                if q.id == question_id:
                    return q.model_copy(update={"quiz_id": quiz.id})
        raise NotFound("Question not found")


def _message(resp: httpx.Response) -> Optional[str]:
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        msg = body.get("message") or body.get("detail")
        return str(msg) if msg else None
    return None


# ------------------------------------------------------------
# Global store client
# ------------------------------------------------------------
_client: QuizStoreClient | None = None


def configure_store(
    base_url: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> QuizStoreClient:
    """Create or reuse the store client."""
    global _client
    if _client is None:
        url = base_url or os.getenv("QUIZ_STORE_URL", DEFAULT_STORE_URL)
        timeout = float(os.getenv("QUIZ_STORE_TIMEOUT", DEFAULT_TIMEOUT))
        http = httpx.AsyncClient(
            base_url=url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )
        _client = QuizStoreClient(http)
        logger.info(f"Quiz store client configured for {url}")
    return _client


async def reset_store() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
    _client = None
