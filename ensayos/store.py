"""
Collaborator contracts the session engine depends on.

The engine never reaches for a global client: a catalog and an attempt store are
handed to `ExamSession` when it is built. `ensayos.database` has the Supabase
implementations; the tests use in-memory fakes.
"""
from datetime import datetime
from typing import List, Optional, Protocol, Sequence

from ensayos.models import AnswerRecord, Attempt, Exam, Question, QuestionId


class ExamCatalog(Protocol):
    def get_exam(self, exam_id: str) -> Exam:
        """Raises NotFound when the exam does not exist."""

    def get_question_ids(self, exam_id: str) -> List[QuestionId]:
        """Question ids in exam order."""

    def get_questions(self, question_ids: Sequence[QuestionId]) -> List[Question]:
        """May return fewer questions than asked for; the caller checks."""


class AttemptStore(Protocol):
    def create_attempt(self, user_id: str, exam_id: str) -> Attempt:
        ...

    def insert_answer(
        self,
        attempt_id: str,
        question_id: QuestionId,
        selected_option: Optional[str],
        is_correct: bool,
    ) -> None:
        ...

    def update_attempt(
        self,
        attempt_id: str,
        *,
        status: str,
        correct_count: int,
        incorrect_count: int,
        omitted_count: int,
        score_total: int,
        finished_at: datetime,
    ) -> None:
        ...

    def get_attempt(self, attempt_id: str) -> Attempt:
        """Raises NotFound when the attempt does not exist."""

    def get_answers(self, attempt_id: str) -> List[AnswerRecord]:
        ...
