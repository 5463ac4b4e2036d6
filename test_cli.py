import io

from ensayos.cli import handle_command, print_question, print_result
from ensayos.models import QuestionId


def test_letter_selects_option(started):
    # options sort as: right, wrong-a, wrong-b, wrong-c
    handle_command(started, "a")
    assert started.selection_for(QuestionId("q1")) == "right"
    handle_command(started, "C")
    assert started.selection_for(QuestionId("q1")) == "wrong-b"


def test_navigation_commands(started):
    handle_command(started, "next")
    handle_command(started, "next")
    assert started.position == 2
    handle_command(started, "prev")
    assert started.position == 1
    handle_command(started, "go 4")
    assert started.position == 3


def test_clear_and_finish(started):
    handle_command(started, "b")
    handle_command(started, "clear")
    assert started.answered_count == 0
    handle_command(started, "finish")
    assert started.is_finished


def test_unknown_command_prints_help(started):
    out = io.StringIO()
    handle_command(started, "z", out=out)
    handle_command(started, "go x", out=out)
    assert out.getvalue().count("next") == 2
    assert started.answered_count == 0


def test_print_question_marks_selection(started):
    handle_command(started, "b")
    out = io.StringIO()
    print_question(started, out=out)
    text = out.getvalue()
    assert "[10:00] Question 1/4 (1 answered)" in text
    assert " *B. wrong-a" in text


def test_print_result_warns_when_unsaved(started, store):
    store.fail_update = True
    result = started.finish()
    out = io.StringIO()
    print_result(result, out=out)
    assert "Score: 0" in out.getvalue()
    assert "may not have been saved" in out.getvalue()
