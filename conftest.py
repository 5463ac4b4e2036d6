"""
Pytest fixtures: in-memory catalog and attempt store standing in for Supabase.
"""
from datetime import datetime, timezone
from typing import Dict, List, Optional

import pytest

from ensayos.errors import NotFound, PersistenceError
from ensayos.models import (
    STATUS_IN_PROGRESS,
    AnswerRecord,
    Attempt,
    Exam,
    Question,
    QuestionId,
)
from ensayos.session import ExamSession

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeCatalog:
    def __init__(self, exams: Dict[str, Exam], questions: List[Question], links: Dict[str, List[str]]):
        self.exams = exams
        self.questions = {q.id: q for q in questions}
        self.links = links
        self.calls = []

    def get_exam(self, exam_id):
        self.calls.append(("get_exam", exam_id))
        if exam_id not in self.exams:
            raise NotFound(f"exam {exam_id}")
        return self.exams[exam_id]

    def get_question_ids(self, exam_id):
        self.calls.append(("get_question_ids", exam_id))
        return [QuestionId(q) for q in self.links.get(exam_id, [])]

    def get_questions(self, question_ids):
        self.calls.append(("get_questions", list(question_ids)))
        return [self.questions[q] for q in question_ids if q in self.questions]


class FakeAttemptStore:
    def __init__(self):
        self.attempts: Dict[str, Attempt] = {}
        self.answers: List[AnswerRecord] = []
        self.updates: List[dict] = []
        self.fail_create = False
        self.fail_update = False
        self.fail_answers_for: set = set()
        self._next_id = 1

    @property
    def write_count(self) -> int:
        return len(self.attempts) + len(self.answers) + len(self.updates)

    def create_attempt(self, user_id, exam_id):
        if self.fail_create:
            raise PersistenceError("insert failed")
        attempt = Attempt(
            id=f"attempt-{self._next_id}",
            user_id=user_id,
            exam_id=exam_id,
            status=STATUS_IN_PROGRESS,
            created_at=FIXED_NOW,
        )
        self._next_id += 1
        self.attempts[attempt.id] = attempt
        return attempt

    def insert_answer(self, attempt_id, question_id, selected_option: Optional[str], is_correct):
        if question_id in self.fail_answers_for:
            raise PersistenceError(f"answer {question_id} rejected")
        self.answers.append(AnswerRecord(attempt_id, question_id, selected_option, is_correct))

    def update_attempt(self, attempt_id, **fields):
        if self.fail_update:
            raise PersistenceError("update failed")
        self.updates.append({"attempt_id": attempt_id, **fields})
        current = self.attempts[attempt_id]
        self.attempts[attempt_id] = Attempt(
            id=current.id,
            user_id=current.user_id,
            exam_id=current.exam_id,
            status=fields["status"],
            created_at=current.created_at,
            finished_at=fields["finished_at"],
            score_total=fields["score_total"],
            correct_count=fields["correct_count"],
            incorrect_count=fields["incorrect_count"],
            omitted_count=fields["omitted_count"],
        )

    def get_attempt(self, attempt_id):
        if attempt_id not in self.attempts:
            raise NotFound(f"attempt {attempt_id}")
        return self.attempts[attempt_id]

    def get_answers(self, attempt_id):
        return [a for a in self.answers if a.attempt_id == attempt_id]


def make_question(n: int, correct: str = "right") -> Question:
    return Question(
        id=QuestionId(f"q{n}"),
        content=f"Question {n}?",
        correct_answer=correct,
        distractors=("wrong-a", "wrong-b", "wrong-c"),
        explanation=f"Because of rule {n}.",
        difficulty="media",
    )


@pytest.fixture
def questions():
    return [make_question(n) for n in range(1, 5)]


@pytest.fixture
def catalog(questions):
    exams = {
        "exam-1": Exam(id="exam-1", title="Ensayo Matemática", duration_minutes=10, created_at=FIXED_NOW),
        "empty": Exam(id="empty", title="Sin preguntas", duration_minutes=5),
        "broken": Exam(id="broken", title="Incompleto", duration_minutes=5),
    }
    links = {
        "exam-1": [q.id for q in questions],
        "empty": [],
        "broken": ["q1", "q2", "q-missing"],
    }
    return FakeCatalog(exams, questions, links)


@pytest.fixture
def store():
    return FakeAttemptStore()


@pytest.fixture
def finished_results():
    return []


@pytest.fixture
def session(catalog, store, finished_results):
    return ExamSession(catalog, store, on_finish=finished_results.append, now=lambda: FIXED_NOW)


@pytest.fixture
def started(session):
    return session.start("exam-1", "user-1")
