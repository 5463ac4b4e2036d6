"""Ensayos: timed multiple-choice practice exams with scaled scoring."""
from ensayos.errors import (
    CatalogError,
    DataIntegrityError,
    EmptyExam,
    ExamError,
    InvalidQuestion,
    NotAuthenticated,
    NotFound,
    PersistenceError,
    SessionNotStarted,
    SessionStateError,
)
from ensayos.ledger import AnswerLedger
from ensayos.models import AnswerRecord, Attempt, Exam, ExamResult, Question, QuestionId
from ensayos.scoring import score
from ensayos.session import ExamSession

__version__ = "0.1.0"
