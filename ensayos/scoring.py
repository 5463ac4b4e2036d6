"""
Scoring engine: pure functions, no I/O.

Scale: 50% correct maps to 500 and every percentage point is worth 10 points,
so 0% -> 0 and 100% -> 1000. The result is not clamped.
Ties at .5 round half-up (Decimal ROUND_HALF_UP); scores are never negative so
this is the same as rounding away from zero.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Mapping, NamedTuple, Optional

from ensayos.models import Question, QuestionId

SCORE_CENTER = Decimal("500")
CENTER_PERCENTAGE = Decimal("50")
POINTS_PER_PERCENT = Decimal("10")


class Tally(NamedTuple):
    correct: int
    incorrect: int
    omitted: int

    @property
    def total(self) -> int:
        return self.correct + self.incorrect + self.omitted


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _raw_percentage(correct_count: int, total_count: int) -> Decimal:
    if total_count <= 0:
        raise ValueError(f"total_count must be positive, got {total_count}")
    return Decimal(correct_count) / Decimal(total_count) * 100


def score(correct_count: int, total_count: int) -> int:
    """round(500 + (percentage - 50) * 10)"""
    percentage_ = _raw_percentage(correct_count, total_count)
    return _round_half_up(SCORE_CENTER + (percentage_ - CENTER_PERCENTAGE) * POINTS_PER_PERCENT)


def percentage(correct_count: int, total_count: int) -> int:
    """Whole-number percentage for display."""
    return _round_half_up(_raw_percentage(correct_count, total_count))


def tally(questions: Iterable[Question], answers: Mapping[QuestionId, Optional[str]]) -> Tally:
    """
    Partition questions into correct / incorrect / omitted.

    A question with no entry in `answers` (or an entry of None) is omitted;
    the three counts always add up to the number of questions.
    """
    correct = incorrect = omitted = 0
    for question in questions:
        selection = answers.get(question.id)
        if selection is None:
            omitted += 1
        elif question.is_correct(selection):
            correct += 1
        else:
            incorrect += 1
    return Tally(correct, incorrect, omitted)
