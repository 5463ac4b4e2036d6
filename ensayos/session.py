"""
Exam session engine: one attempt from start to graded finish.

Lifecycle is uninitialized -> starting -> in_progress -> completed. Answers are
buffered in an AnswerLedger and only written to the store when the attempt is
finished, either explicitly or by the countdown reaching zero.
"""
import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from ensayos import scoring
from ensayos.errors import (
    DataIntegrityError,
    EmptyExam,
    InvalidQuestion,
    NotAuthenticated,
    PersistenceError,
    SessionNotStarted,
    SessionStateError,
)
from ensayos.ledger import AnswerLedger
from ensayos.models import STATUS_COMPLETED, Exam, ExamResult, Question, QuestionId
from ensayos.store import AttemptStore, ExamCatalog

logger = logging.getLogger(__name__)

UNINITIALIZED = "uninitialized"
STARTING = "starting"
IN_PROGRESS = "in_progress"
COMPLETED = "completed"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExamSession:
    """Manages a single timed exam attempt: navigation, answers, countdown and grading."""

    def __init__(
        self,
        catalog: ExamCatalog,
        store: AttemptStore,
        on_finish: Optional[Callable[[ExamResult], None]] = None,
        now: Callable[[], datetime] = _utcnow,
    ):
        """
        Args:
            catalog: source of exam metadata and questions
            store: where the attempt, its answers and its result are written
            on_finish: called once with the result when the attempt is graded
                (also when the countdown triggers the finish)
            now: clock for the finished_at timestamp
        """
        self.catalog = catalog
        self.store = store
        self.on_finish = on_finish
        self._now = now

        self.status = UNINITIALIZED
        self.exam: Optional[Exam] = None
        self.attempt_id: Optional[str] = None
        self.questions: List[Question] = []
        self.ledger = AnswerLedger()
        self.position = 0
        self.remaining_seconds = 0
        self.result: Optional[ExamResult] = None

        self._by_id: Dict[QuestionId, Question] = {}

    # ============= Start =============

    def start(self, exam_id: str, user_id: str) -> "ExamSession":
        """
        Create the attempt and load the question set.

        Raises:
            NotAuthenticated: empty user id
            NotFound: exam does not exist
            PersistenceError: the attempt row could not be created
            EmptyExam: exam has no questions
            DataIntegrityError: some linked questions could not be loaded
        """
        if self.status != UNINITIALIZED:
            raise SessionStateError(f"start() called while {self.status}")
        if not user_id:
            raise NotAuthenticated()

        self.status = STARTING
        try:
            self._load(str(exam_id), str(user_id))
        except Exception:
            if self.attempt_id:
                logger.warning(f"Attempt {self.attempt_id} left in progress after failed start")
            self._reset()
            raise

        self.status = IN_PROGRESS
        logger.info(
            f"Attempt {self.attempt_id} started: exam={exam_id}, "
            f"{len(self.questions)} questions, {self.remaining_seconds}s"
        )
        return self

    def _load(self, exam_id: str, user_id: str) -> None:
        exam = self.catalog.get_exam(exam_id)

        attempt = self.store.create_attempt(user_id, exam_id)
        self.attempt_id = attempt.id

        question_ids = list(dict.fromkeys(self.catalog.get_question_ids(exam_id)))
        if not question_ids:
            raise EmptyExam(f"exam {exam_id}")

        questions = self.catalog.get_questions(question_ids)
        by_id = {q.id: q for q in questions}
        missing = [q for q in question_ids if q not in by_id]
        if missing:
            raise DataIntegrityError(f"exam {exam_id}: {len(missing)} of {len(question_ids)} questions missing")

        self.exam = exam
        self.questions = [by_id[q] for q in question_ids]
        self._by_id = by_id
        self.position = 0
        self.remaining_seconds = exam.duration_seconds

    def _reset(self) -> None:
        self.status = UNINITIALIZED
        self.exam = None
        self.attempt_id = None
        self.questions = []
        self._by_id = {}
        self.position = 0
        self.remaining_seconds = 0

    # ============= Learner intents =============

    def _accepts_intents(self) -> bool:
        """False once completed (intents become no-ops); raises before the session is running."""
        if self.status == COMPLETED:
            return False
        if self.status != IN_PROGRESS:
            raise SessionNotStarted(f"session is {self.status}")
        return True

    def select_answer(self, question_id: QuestionId, option: str) -> None:
        if not self._accepts_intents():
            return
        if question_id not in self._by_id:
            raise InvalidQuestion(str(question_id))
        self.ledger.select(question_id, option)

    def clear_answer(self, question_id: QuestionId) -> None:
        if not self._accepts_intents():
            return
        if question_id not in self._by_id:
            raise InvalidQuestion(str(question_id))
        self.ledger.clear(question_id)

    def go_to(self, index: int) -> None:
        """Jump to a question; out-of-range indexes are clamped."""
        if not self._accepts_intents():
            return
        self.position = max(0, min(len(self.questions) - 1, index))

    def navigate(self, step: int) -> None:
        if not self._accepts_intents():
            return
        self.go_to(self.position + step)

    def next(self) -> None:
        self.navigate(1)

    def previous(self) -> None:
        self.navigate(-1)

    # ============= Countdown =============

    def tick(self) -> None:
        """One elapsed second. Reaching zero finishes the attempt."""
        if not self._accepts_intents():
            return
        if self.remaining_seconds <= 0:
            return
        self.remaining_seconds -= 1
        if self.remaining_seconds == 0:
            logger.info(f"Attempt {self.attempt_id}: time is up")
            self.finish()

    # ============= Finish =============

    def finish(self) -> ExamResult:
        """
        Grade and persist the attempt. Safe to call more than once.

        Answer rows are written best-effort; a failed write is logged and
        skipped. Grading happens in memory, so a result is always returned.
        If the final attempt update fails the result has saved=False.
        """
        if self.status == COMPLETED:
            return self.result
        if self.status != IN_PROGRESS:
            raise SessionNotStarted(f"session is {self.status}")

        answers = self.ledger.snapshot()

        failed_writes = 0
        for question in self.questions:
            selection = answers.get(question.id)
            try:
                self.store.insert_answer(
                    self.attempt_id, question.id, selection, question.is_correct(selection)
                )
            except PersistenceError as e:
                failed_writes += 1
                logger.error(f"Error saving answer {question.id} for attempt {self.attempt_id}: {e}")

        counts = scoring.tally(self.questions, answers)
        total = counts.total
        final_score = scoring.score(counts.correct, total)
        finished_at = self._now()

        saved = True
        try:
            self.store.update_attempt(
                self.attempt_id,
                status=STATUS_COMPLETED,
                correct_count=counts.correct,
                incorrect_count=counts.incorrect,
                omitted_count=counts.omitted,
                score_total=final_score,
                finished_at=finished_at,
            )
        except PersistenceError as e:
            saved = False
            logger.error(f"Error updating attempt {self.attempt_id}: {e}")

        self.result = ExamResult(
            attempt_id=self.attempt_id,
            correct=counts.correct,
            incorrect=counts.incorrect,
            omitted=counts.omitted,
            score=final_score,
            percentage=scoring.percentage(counts.correct, total),
            finished_at=finished_at,
            saved=saved,
            answers={q.id: answers.get(q.id) for q in self.questions},
        )
        self.status = COMPLETED

        logger.info(
            f"Attempt {self.attempt_id} completed: score={final_score}, "
            f"correct={counts.correct}, incorrect={counts.incorrect}, omitted={counts.omitted}"
            + (f", {failed_writes} answer writes failed" if failed_writes else "")
        )

        if self.on_finish:
            self.on_finish(self.result)
        return self.result

    # ============= Display =============

    @property
    def is_finished(self) -> bool:
        return self.status == COMPLETED

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def current_question(self) -> Optional[Question]:
        if not self.questions:
            return None
        return self.questions[self.position]

    @property
    def answered_count(self) -> int:
        return len(self.ledger)

    def selection_for(self, question_id: QuestionId) -> Optional[str]:
        return self.ledger.get(question_id)

    def answered_flags(self) -> List[bool]:
        """Per question, in exam order: has the learner picked an option."""
        return [self.ledger.answered(q.id) for q in self.questions]
