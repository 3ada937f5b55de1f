"""Shared fixtures: a sample quiz and an in-memory fake of the quiz store."""

import copy
import json
import re
import uuid

import httpx
import pytest
import pytest_asyncio

from quizdeck.core import store_client
from quizdeck.core.schemas import Quiz
from quizdeck.core.wire import attempt_from_wire, quiz_from_wire

SAMPLE_QUIZ = {
    "_id": "quiz-1",
    "title": "Python Basics",
    "description": "Warm-up questions",
    "slug": "python-basics",
    "published": True,
    "questions": [
        {
            "_id": "q-single",
            "quizId": "quiz-1",
            "type": "MCQ_SINGLE",
            "text": "Which keyword defines a function?",
            "points": 2,
            "choices": [
                {"id": "c-def", "text": "def"},
                {"id": "c-fun", "text": "fun"},
                {"id": "c-lambda", "text": "lambda"},
            ],
            "correctAnswer": "0",
        },
        {
            "_id": "q-multi",
            "quizId": "quiz-1",
            "type": "MCQ_MULTI",
            "text": "Pick the vowels",
            "points": 3,
            "choices": [
                {"id": "id-a", "text": "A"},
                {"id": "id-b", "text": "B"},
                {"id": "id-c", "text": "C"},
            ],
            "correctAnswer": ["0", "2"],
        },
        {
            "_id": "q-bool",
            "quizId": "quiz-1",
            "type": "TRUE_FALSE",
            "text": "Python is dynamically typed.",
            "points": 1,
            "choices": [
                {"id": "c-true", "text": "True", "is_correct": True},
                {"id": "c-false", "text": "False", "is_correct": False},
            ],
        },
        {
            "_id": "q-text",
            "quizId": "quiz-1",
            "type": "TEXT",
            "text": "Name the built-in that returns a length.",
            "points": 4,
        },
    ],
}


@pytest.fixture
def quiz_data() -> dict:
    return copy.deepcopy(SAMPLE_QUIZ)


@pytest.fixture
def quiz(quiz_data) -> Quiz:
    return quiz_from_wire(quiz_data)


# ------------------------------------------------------------
# Fake quiz store
# ------------------------------------------------------------
class FakeStore:
    """Just enough of the store contract to drive the client and the app."""

    def __init__(self, quizzes):
        self.quizzes = {q["_id"]: q for q in quizzes}
        self.attempts = []
        self.requests = []
        self.fail_quiz_fetch = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        method, path = request.method, request.url.path
        body = json.loads(request.content) if request.content else None

        if method == "GET" and path in ("/quizzes", "/admin/quizzes"):
            quizzes = list(self.quizzes.values())
            if path == "/quizzes":
                quizzes = [q for q in quizzes if q.get("published")]
            return httpx.Response(200, json=quizzes)

        m = re.fullmatch(r"(/admin)?/quizzes/([^/]+)", path)
        if m:
            quiz = self.quizzes.get(m.group(2))
            if method == "GET" and self.fail_quiz_fetch:
                return httpx.Response(500, json={"message": "store exploded"})
            if quiz is None:
                return httpx.Response(404, json={"message": "Quiz not found"})
            if method == "GET":
                return httpx.Response(200, json=quiz)
            if method == "PUT":
                quiz.update(body)
                return httpx.Response(200, json=quiz)
            if method == "DELETE":
                del self.quizzes[quiz["_id"]]
                return httpx.Response(204)

        if method == "POST" and path == "/admin/quizzes":
            quiz = {"_id": f"quiz-{uuid.uuid4().hex[:6]}", "questions": [], **body}
            self.quizzes[quiz["_id"]] = quiz
            return httpx.Response(201, json=quiz)

        m = re.fullmatch(r"/admin/quizzes/([^/]+)/questions", path)
        if m and method == "POST":
            quiz = self.quizzes.get(m.group(1))
            if quiz is None:
                return httpx.Response(404, json={"message": "Quiz not found"})
            question = {"_id": f"q-{uuid.uuid4().hex[:6]}", "quizId": quiz["_id"], **body}
            quiz["questions"].append(question)
            return httpx.Response(201, json=question)

        m = re.fullmatch(r"/admin/questions/([^/]+)", path)
        if m:
            for quiz in self.quizzes.values():
                for idx, q in enumerate(quiz["questions"]):
                    if q["_id"] != m.group(1):
                        continue
                    if method == "PUT":
                        q.update(body)
                        return httpx.Response(200, json=q)
                    if method == "DELETE":
                        del quiz["questions"][idx]
                        return httpx.Response(204)
            return httpx.Response(404, json={"message": "Question not found"})

        m = re.fullmatch(r"/quizzes/([^/]+)/attempt", path)
        if m and method == "POST":
            quiz = self.quizzes.get(m.group(1))
            if quiz is None:
                return httpx.Response(404, json={"message": "Quiz not found"})
            answers = attempt_from_wire(body)
            self.attempts.append(answers)
            return httpx.Response(200, json=self.score(quiz, answers))

        return httpx.Response(404, json={"message": f"no route {method} {path}"})

    def score(self, quiz, answers):
        by_id = {q["_id"]: q for q in quiz["questions"]}
        outcomes = []
        score = 0
        for a in answers:
            q = by_id[a.question_id]
            choices = q.get("choices") or []
            if q["type"] == "TEXT":
                correct_ids = []
                is_correct = (a.text_answer or "").strip().lower() == "len"
            else:
                if q["type"] == "TRUE_FALSE":
                    correct_ids = [c["id"] for c in choices if c.get("is_correct")]
                else:
                    keys = q["correctAnswer"] if isinstance(q["correctAnswer"], list) else [q["correctAnswer"]]
                    correct_ids = [choices[int(k)]["id"] for k in keys]
                is_correct = sorted(a.selected_choice_ids) == sorted(correct_ids)
            awarded = q["points"] if is_correct else 0
            score += awarded
            outcome = {
                "question_id": a.question_id,
                "type": q["type"],
                "is_correct": is_correct,
                "max_points": q["points"],
                "points_awarded": awarded,
                "correct_choice_ids": correct_ids,
                "correct_choice_texts": [],
            }
            if a.selected_choice_ids is not None:
                outcome["selected_choice_ids"] = a.selected_choice_ids
            else:
                outcome["text_answer"] = a.text_answer
            outcomes.append(outcome)
        # the store does not promise quiz order
        outcomes.reverse()
        return {
            "attempt_id": f"attempt-{len(self.attempts)}",
            "quiz_id": quiz["_id"],
            "score": score,
            "max_score": sum(q["points"] for q in quiz["questions"]),
            "answers": outcomes,
        }


@pytest.fixture
def fake_store(quiz_data) -> FakeStore:
    draft = copy.deepcopy(quiz_data)
    draft.update({"_id": "quiz-draft", "title": "Unpublished", "published": False, "questions": []})
    return FakeStore([quiz_data, draft])


@pytest_asyncio.fixture
async def store(fake_store):
    await store_client.reset_store()
    client = store_client.configure_store(
        base_url="http://store.test",
        transport=httpx.MockTransport(fake_store.handler),
    )
    yield client
    await store_client.reset_store()
