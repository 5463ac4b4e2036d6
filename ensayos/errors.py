"""Exam engine errors. Each carries a short message the UI can show as-is."""


class ExamError(Exception):
    """Base class for everything the exam engine raises on purpose."""

    message = "Unexpected error"

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(detail or self.message)


class NotFound(ExamError):
    message = "Exam unavailable"


class EmptyExam(ExamError):
    message = "This exam has no questions"


class DataIntegrityError(ExamError):
    message = "Exam data is incomplete"


class CatalogError(ExamError):
    message = "Could not load the exam"


class PersistenceError(ExamError):
    message = "Results may not have been saved"


class InvalidQuestion(ExamError):
    message = "Question is not part of this exam"


class NotAuthenticated(ExamError):
    message = "Not authenticated"


class SessionNotStarted(ExamError):
    message = "The exam has not started yet"


class SessionStateError(ExamError):
    message = "This exam session was already used"
