"""
Exam data types shared by the catalog, the attempt store and the session engine.
Rows come back from Supabase as dicts; `from_row` maps them onto these types.
"""
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, NewType, Optional, Tuple

QuestionId = NewType("QuestionId", str)

STATUS_IN_PROGRESS = "in_progress"
STATUS_COMPLETED = "completed"

_FRACTION = re.compile(r"\.(\d+)")


def parse_timestamp(value) -> Optional[datetime]:
    """Supabase returns ISO strings, sometimes with a trailing Z.

    Postgres drops trailing zeros from fractional seconds, so the fraction
    is padded (or cut) to the six digits `fromisoformat` accepts.
    """
    if value is None or isinstance(value, datetime):
        return value
    text = str(value).replace("Z", "+00:00")
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    return datetime.fromisoformat(text)


@dataclass(frozen=True)
class Exam:
    id: str
    title: str
    duration_minutes: int
    created_at: Optional[datetime] = None

    @property
    def duration_seconds(self) -> int:
        return self.duration_minutes * 60

    @classmethod
    def from_row(cls, row: Dict) -> "Exam":
        return cls(
            id=str(row["id"]),
            title=row.get("title") or "",
            duration_minutes=int(row["duration_minutes"]),
            created_at=parse_timestamp(row.get("created_at")),
        )


@dataclass(frozen=True)
class Question:
    id: QuestionId
    content: str
    correct_answer: str
    distractors: Tuple[str, ...] = ()
    explanation: str = ""
    difficulty: str = ""
    image_url: Optional[str] = None

    @property
    def options(self) -> List[str]:
        """Correct answer plus distractors, in a stable order."""
        return sorted({self.correct_answer, *self.distractors})

    def is_correct(self, selection: Optional[str]) -> bool:
        return selection is not None and selection == self.correct_answer

    @classmethod
    def from_row(cls, row: Dict) -> "Question":
        return cls(
            id=QuestionId(str(row["id"])),
            content=row.get("content") or "",
            correct_answer=str(row["correct_answer"]),
            distractors=tuple(str(d) for d in row.get("distractors") or ()),
            explanation=row.get("explanation") or "",
            difficulty=row.get("difficulty") or "",
            image_url=row.get("image_url"),
        )


@dataclass(frozen=True)
class Attempt:
    id: str
    user_id: str
    exam_id: str
    status: str = STATUS_IN_PROGRESS
    created_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    score_total: Optional[int] = None
    correct_count: Optional[int] = None
    incorrect_count: Optional[int] = None
    omitted_count: Optional[int] = None

    @property
    def is_completed(self) -> bool:
        return self.status == STATUS_COMPLETED

    @classmethod
    def from_row(cls, row: Dict) -> "Attempt":
        return cls(
            id=str(row["id"]),
            user_id=str(row.get("user_id") or ""),
            exam_id=str(row.get("exam_id") or ""),
            status=row.get("status") or STATUS_IN_PROGRESS,
            created_at=parse_timestamp(row.get("created_at")),
            finished_at=parse_timestamp(row.get("finished_at")),
            score_total=row.get("score_total"),
            correct_count=row.get("correct_count"),
            incorrect_count=row.get("incorrect_count"),
            omitted_count=row.get("omitted_count"),
        )


@dataclass(frozen=True)
class AnswerRecord:
    """One persisted answer. `selected_option` is None for an omitted question."""

    attempt_id: str
    question_id: QuestionId
    selected_option: Optional[str]
    is_correct: bool

    @classmethod
    def from_row(cls, row: Dict) -> "AnswerRecord":
        return cls(
            attempt_id=str(row.get("attempt_id") or ""),
            question_id=QuestionId(str(row["question_id"])),
            selected_option=row.get("selected_option"),
            is_correct=bool(row.get("is_correct")),
        )


@dataclass(frozen=True)
class ExamResult:
    attempt_id: str
    correct: int
    incorrect: int
    omitted: int
    score: int
    percentage: int
    finished_at: datetime
    saved: bool = True
    answers: Dict[QuestionId, Optional[str]] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return self.correct + self.incorrect + self.omitted
