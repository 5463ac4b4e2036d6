import pytest

from ensayos.errors import NotFound
from ensayos.models import QuestionId
from ensayos.review import OUTCOME_CORRECT, OUTCOME_INCORRECT, OUTCOME_OMITTED, load_review


def test_review_after_finish(started, store, catalog):
    started.select_answer(QuestionId("q2"), "right")
    started.select_answer(QuestionId("q3"), "wrong-a")
    started.finish()

    review = load_review(store, catalog, started.attempt_id)
    assert review.attempt.is_completed
    assert review.total == 4
    assert review.percentage == 25
    assert [(i.question_id, i.outcome) for i in review.items] == [
        ("q1", OUTCOME_OMITTED),
        ("q2", OUTCOME_CORRECT),
        ("q3", OUTCOME_INCORRECT),
        ("q4", OUTCOME_OMITTED),
    ]
    q3 = review.items[2]
    assert q3.selected_option == "wrong-a"
    assert q3.correct_answer == "right"
    assert q3.explanation == "Because of rule 3."


def test_review_skips_questions_gone_from_catalog(started, store, catalog):
    started.finish()
    del catalog.questions[QuestionId("q4")]
    review = load_review(store, catalog, started.attempt_id)
    assert [i.question_id for i in review.items] == ["q1", "q2", "q3"]


def test_review_of_unfinished_attempt(started, store, catalog):
    review = load_review(store, catalog, started.attempt_id)
    assert not review.attempt.is_completed
    assert review.items == []
    assert review.total == 0
    assert review.percentage == 0


def test_review_unknown_attempt(store, catalog):
    with pytest.raises(NotFound):
        load_review(store, catalog, "missing")
