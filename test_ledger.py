import pytest

from ensayos.ledger import AnswerLedger
from ensayos.models import QuestionId

Q1 = QuestionId("q1")
Q2 = QuestionId("q2")


def test_reselect_overwrites():
    ledger = AnswerLedger()
    ledger.select(Q1, "A")
    ledger.select(Q1, "B")
    assert len(ledger) == 1
    assert ledger.get(Q1) == "B"


def test_clear_and_membership():
    ledger = AnswerLedger()
    ledger.select(Q1, "A")
    ledger.select(Q2, "C")
    ledger.clear(Q1)
    ledger.clear(QuestionId("never-answered"))
    assert Q1 not in ledger
    assert ledger.answered(Q2)
    assert not ledger.answered(Q1)
    assert list(ledger) == [Q2]


def test_snapshot_is_a_frozen_copy():
    ledger = AnswerLedger()
    ledger.select(Q1, "A")
    snap = ledger.snapshot()
    ledger.select(Q1, "B")
    assert snap[Q1] == "A"
    with pytest.raises(TypeError):
        snap[Q2] = "C"
