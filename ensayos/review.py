"""Results screen data: a completed attempt with its per-question answer trail."""
import logging
from dataclasses import dataclass
from typing import List, Optional

from ensayos import scoring
from ensayos.models import Attempt
from ensayos.store import AttemptStore, ExamCatalog

logger = logging.getLogger(__name__)

OUTCOME_CORRECT = "correct"
OUTCOME_INCORRECT = "incorrect"
OUTCOME_OMITTED = "omitted"


@dataclass(frozen=True)
class ReviewItem:
    question_id: str
    content: str
    selected_option: Optional[str]
    correct_answer: str
    explanation: str
    outcome: str


@dataclass(frozen=True)
class AttemptReview:
    attempt: Attempt
    items: List[ReviewItem]

    @property
    def total(self) -> int:
        a = self.attempt
        return (a.correct_count or 0) + (a.incorrect_count or 0) + (a.omitted_count or 0)

    @property
    def percentage(self) -> int:
        if not self.total:
            return 0
        return scoring.percentage(self.attempt.correct_count or 0, self.total)


def _outcome(selected: Optional[str], is_correct: bool) -> str:
    if selected is None:
        return OUTCOME_OMITTED
    return OUTCOME_CORRECT if is_correct else OUTCOME_INCORRECT


def load_review(store: AttemptStore, catalog: ExamCatalog, attempt_id: str) -> AttemptReview:
    """
    Raises:
        NotFound: no attempt with this id
    """
    attempt = store.get_attempt(attempt_id)
    answers = store.get_answers(attempt_id)

    questions = {}
    if answers:
        questions = {q.id: q for q in catalog.get_questions([a.question_id for a in answers])}
        exam_order = {qid: i for i, qid in enumerate(catalog.get_question_ids(attempt.exam_id))}
        answers = sorted(answers, key=lambda a: exam_order.get(a.question_id, len(exam_order)))

    items = []
    for answer in answers:
        question = questions.get(answer.question_id)
        if question is None:
            logger.warning(f"Attempt {attempt_id}: question {answer.question_id} no longer in catalog")
            continue
        items.append(ReviewItem(
            question_id=answer.question_id,
            content=question.content,
            selected_option=answer.selected_option,
            correct_answer=question.correct_answer,
            explanation=question.explanation,
            outcome=_outcome(answer.selected_option, answer.is_correct),
        ))

    return AttemptReview(attempt=attempt, items=items)
