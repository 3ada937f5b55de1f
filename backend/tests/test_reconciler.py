"""Tests for merging scoring responses with quiz definitions."""

import pytest

from quizdeck.core.reconciler import NO_ANSWER, percentage, reconcile
from quizdeck.core.wire import result_from_wire


def _outcome(qid, type_, **kw):
    base = {
        "question_id": qid,
        "type": type_,
        "is_correct": False,
        "max_points": 1,
        "points_awarded": 0,
        "correct_choice_ids": [],
        "correct_choice_texts": [],
    }
    base.update(kw)
    return base


def _response(*answers, score=0, max_score=10):
    return {
        "attempt_id": "attempt-9",
        "quiz_id": "quiz-1",
        "score": score,
        "max_score": max_score,
        "answers": list(answers),
    }


@pytest.mark.parametrize("score,total,expected", [
    (7, 10, 70),
    (0, 0, 0),
    (5, 0, 0),
    (1, 3, 33),
    (2, 3, 67),
    (1, 8, 13),   # 12.5 rounds half up
    (10, 10, 100),
])
def test_percentage(score, total, expected):
    assert percentage(score, total) == expected


def test_from_wire_builds_placeholders():
    result = result_from_wire(_response(
        _outcome("q-multi", "MCQ_MULTI", max_points=3, selected_choice_ids=["id-a"]),
        _outcome("q-text", "TEXT", max_points=4, text_answer="size"),
    ))
    first, second = result.answers
    assert result.total_points == 10
    assert first.question.id == "q-multi"
    assert first.question.text == ""
    assert first.question.points == 3
    assert first.user_answer == ["id-a"]
    assert second.user_answer == "size"


def test_multi_choice_end_to_end_display(quiz):
    result = result_from_wire(_response(_outcome(
        "q-multi", "MCQ_MULTI",
        max_points=3,
        selected_choice_ids=["id-a", "id-b"],
        correct_choice_ids=["id-a", "id-c"],
    )))
    rec = reconcile(result, quiz)
    entry = rec.answers[0]
    assert entry.matched
    assert entry.question.text == "Pick the vowels"
    assert entry.question.points == 3
    assert entry.user_answer == ["id-a", "id-b"]
    assert entry.user_answer_display == "A, B"
    assert entry.correct_answer_display == "A, C"
    assert entry.points_earned == 0
    assert entry.is_correct is False


def test_correct_texts_win_over_ids(quiz):
    result = result_from_wire(_response(_outcome(
        "q-single", "MCQ_SINGLE",
        selected_choice_ids=["c-fun"],
        correct_choice_ids=["c-def"],
        correct_choice_texts=["def"],
    )))
    entry = reconcile(result, quiz).answers[0]
    assert entry.correct_answer == ["def"]
    assert entry.correct_answer_display == "def"
    assert entry.user_answer_display == "fun"


def test_unmatched_question_keeps_placeholder(quiz):
    result = result_from_wire(_response(_outcome(
        "q-deleted", "MCQ_SINGLE", max_points=5, selected_choice_ids=["c-x"], correct_choice_ids=["c-y"],
    )))
    entry = reconcile(result, quiz).answers[0]
    assert not entry.matched
    assert entry.question.id == "q-deleted"
    assert entry.question.text == ""
    assert entry.question.points == 5
    assert entry.user_answer_display == "c-x"
    assert entry.correct_answer_display == "c-y"


def test_reconcile_without_quiz_renders_degraded():
    result = result_from_wire(_response(
        _outcome("q-text", "TEXT", text_answer=""),
        score=3, max_score=4,
    ))
    rec = reconcile(result, None)
    assert rec.percentage == 75
    assert rec.answers[0].user_answer_display == NO_ANSWER
    assert rec.answers[0].correct_answer_display == ""


def test_answers_follow_quiz_order(quiz):
    result = result_from_wire(_response(
        _outcome("q-text", "TEXT", text_answer="len"),
        _outcome("q-ghost", "TEXT", text_answer="?"),
        _outcome("q-bool", "TRUE_FALSE", selected_choice_ids=["c-true"]),
        _outcome("q-single", "MCQ_SINGLE", selected_choice_ids=["c-def"]),
        _outcome("q-multi", "MCQ_MULTI", selected_choice_ids=["id-a"]),
    ))
    rec = reconcile(result, quiz)
    assert [a.question_id for a in rec.answers] == ["q-single", "q-multi", "q-bool", "q-text", "q-ghost"]


def test_reconcile_is_repeatable(quiz):
    result = result_from_wire(_response(_outcome("q-bool", "TRUE_FALSE", selected_choice_ids=["c-true"])))
    assert reconcile(result, quiz) == reconcile(result, quiz)


def test_fractional_max_points_survive_in_placeholder():
    result = result_from_wire(_response(_outcome("q-ghost", "TEXT", max_points=2.5, text_answer="x")))
    entry = reconcile(result, None).answers[0]
    assert entry.question.points == 2.5
