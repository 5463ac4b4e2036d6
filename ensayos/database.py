"""
Supabase-backed catalog and attempt store.
Handles reads of exams/questions and writes of attempts/answers.
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from supabase import Client

from ensayos import config
from ensayos.errors import CatalogError, DataIntegrityError, NotFound, PersistenceError
from ensayos.models import AnswerRecord, Attempt, Exam, Question, QuestionId, STATUS_IN_PROGRESS

logger = logging.getLogger(__name__)

# Postgres invalid_text_representation, e.g. a malformed uuid in a filter
INVALID_INPUT_CODE = "22P02"


def _is_invalid_input(error: Exception) -> bool:
    return getattr(error, "code", None) == INVALID_INPUT_CODE


class SupabaseCatalog:
    """Read-only access to exams and their questions."""

    def __init__(self, client: Client):
        self.client = client

    def get_exam(self, exam_id: str) -> Exam:
        try:
            response = (
                self.client.table(config.EXAMS_TABLE)
                .select("id, title, duration_minutes, created_at")
                .eq("id", str(exam_id))
                .limit(1)
                .execute()
            )
        except Exception as e:
            if _is_invalid_input(e):
                raise NotFound(f"exam {exam_id}") from e
            logger.error(f"Error fetching exam {exam_id}: {e}")
            raise CatalogError(str(e)) from e

        if not response.data:
            raise NotFound(f"exam {exam_id}")
        try:
            exam = Exam.from_row(response.data[0])
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Malformed exam row {exam_id}: {e}")
            raise DataIntegrityError(f"exam {exam_id}: {e}") from e
        if exam.duration_minutes <= 0:
            raise DataIntegrityError(f"exam {exam_id} has duration {exam.duration_minutes}")
        return exam

    def get_question_ids(self, exam_id: str) -> List[QuestionId]:
        try:
            response = (
                self.client.table(config.EXAM_QUESTIONS_TABLE)
                .select("question_id")
                .eq("exam_id", str(exam_id))
                .order("position")
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching question ids for exam {exam_id}: {e}")
            raise CatalogError(str(e)) from e
        return [QuestionId(str(row["question_id"])) for row in response.data or []]

    def get_questions(self, question_ids: Sequence[QuestionId]) -> List[Question]:
        """Fetch full question rows. Returned in the order of `question_ids`; unknown ids are dropped."""
        if not question_ids:
            return []
        try:
            response = (
                self.client.table(config.QUESTIONS_TABLE)
                .select("id, content, image_url, difficulty, correct_answer, distractors, explanation")
                .in_("id", [str(q) for q in question_ids])
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching {len(question_ids)} questions: {e}")
            raise CatalogError(str(e)) from e

        by_id: Dict[str, Question] = {}
        for row in response.data or []:
            try:
                question = Question.from_row(row)
            except (KeyError, TypeError, ValueError) as e:
                logger.error(f"Malformed question row {row.get('id')}: {e}")
                raise DataIntegrityError(f"question {row.get('id')}: {e}") from e
            by_id[question.id] = question
        return [by_id[q] for q in question_ids if q in by_id]


class SupabaseAttemptStore:
    """Attempt lifecycle rows and the per-question answer trail."""

    def __init__(self, client: Client):
        self.client = client

    # ============= Attempts =============

    def create_attempt(self, user_id: str, exam_id: str) -> Attempt:
        row = {
            "user_id": str(user_id),
            "exam_id": str(exam_id),
            "status": STATUS_IN_PROGRESS,
        }
        try:
            response = self.client.table(config.ATTEMPTS_TABLE).insert(row).execute()
        except Exception as e:
            logger.error(f"Error creating attempt: {e}")
            raise PersistenceError(str(e)) from e
        if not response.data:
            raise PersistenceError("attempt insert returned no row")
        try:
            return Attempt.from_row(response.data[0])
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Malformed attempt row: {e}")
            raise PersistenceError(f"attempt row: {e}") from e

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
        update_data = {
            "status": status,
            "finished_at": finished_at.isoformat(),
            "score_total": score_total,
            "correct_count": correct_count,
            "incorrect_count": incorrect_count,
            "omitted_count": omitted_count,
        }
        try:
            response = (
                self.client.table(config.ATTEMPTS_TABLE)
                .update(update_data)
                .eq("id", str(attempt_id))
                .execute()
            )
        except Exception as e:
            logger.error(f"Error updating attempt {attempt_id}: {e}")
            raise PersistenceError(str(e)) from e
        if not response.data:
            raise PersistenceError(f"attempt {attempt_id} was not updated")

    def get_attempt(self, attempt_id: str) -> Attempt:
        try:
            response = (
                self.client.table(config.ATTEMPTS_TABLE)
                .select("*")
                .eq("id", str(attempt_id))
                .limit(1)
                .execute()
            )
        except Exception as e:
            if _is_invalid_input(e):
                raise NotFound(f"attempt {attempt_id}") from e
            logger.error(f"Error fetching attempt {attempt_id}: {e}")
            raise PersistenceError(str(e)) from e
        if not response.data:
            raise NotFound(f"attempt {attempt_id}")
        return Attempt.from_row(response.data[0])

    # ============= Answers =============

    def insert_answer(
        self,
        attempt_id: str,
        question_id: QuestionId,
        selected_option: Optional[str],
        is_correct: bool,
    ) -> None:
        answer_data = {
            "attempt_id": str(attempt_id),
            "question_id": str(question_id),
            "selected_option": selected_option,
            "is_correct": is_correct,
        }
        try:
            self.client.table(config.ANSWERS_TABLE).insert(answer_data).execute()
        except Exception as e:
            raise PersistenceError(str(e)) from e

    def get_answers(self, attempt_id: str) -> List[AnswerRecord]:
        try:
            response = (
                self.client.table(config.ANSWERS_TABLE)
                .select("attempt_id, question_id, selected_option, is_correct")
                .eq("attempt_id", str(attempt_id))
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching answers for attempt {attempt_id}: {e}")
            raise PersistenceError(str(e)) from e
        return [AnswerRecord.from_row(row) for row in response.data or []]
