"""In-memory answer sheet for the active attempt. Nothing here touches the database."""
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional

from ensayos.models import QuestionId


class AnswerLedger:
    """Question id -> selected option. Selecting again overwrites the previous choice."""

    def __init__(self):
        self._entries: Dict[QuestionId, str] = {}

    def select(self, question_id: QuestionId, option: str) -> None:
        self._entries[question_id] = option

    def clear(self, question_id: QuestionId) -> None:
        self._entries.pop(question_id, None)

    def get(self, question_id: QuestionId) -> Optional[str]:
        return self._entries.get(question_id)

    def answered(self, question_id: QuestionId) -> bool:
        return question_id in self._entries

    def snapshot(self) -> Mapping[QuestionId, str]:
        """Read-only copy, used when grading so later edits can't leak in."""
        return MappingProxyType(dict(self._entries))

    def __contains__(self, question_id) -> bool:
        return question_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[QuestionId]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"AnswerLedger({len(self._entries)} answered)"
