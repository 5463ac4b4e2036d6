"""
Terminal front end.

  python -m ensayos take EXAM_ID --user USER_ID
  python -m ensayos review ATTEMPT_ID
"""
import argparse
import sys

from ensayos.clock import SessionClock, format_remaining
from ensayos.config import configure_logging
from ensayos.database import SupabaseAttemptStore, SupabaseCatalog
from ensayos.db import get_supabase_uncached
from ensayos.errors import ExamError
from ensayos.models import ExamResult
from ensayos.review import OUTCOME_CORRECT, OUTCOME_OMITTED, load_review
from ensayos.session import ExamSession

OPTION_LABELS = "ABCDEFGHIJ"

HELP = "A-J answer · next · prev · go N · clear · finish · ? help"


def print_question(session: ExamSession, out=sys.stdout) -> None:
    q = session.current_question
    print(file=out)
    print(
        f"[{format_remaining(session.remaining_seconds)}] "
        f"Question {session.position + 1}/{session.total_questions} "
        f"({session.answered_count} answered)",
        file=out,
    )
    print(q.content, file=out)
    if q.image_url:
        print(f"  (image: {q.image_url})", file=out)
    selected = session.selection_for(q.id)
    for label, option in zip(OPTION_LABELS, q.options):
        mark = "*" if option == selected else " "
        print(f" {mark}{label}. {option}", file=out)


def print_result(result: ExamResult, out=sys.stdout) -> None:
    print(file=out)
    print("=" * 40, file=out)
    print(f"Score: {result.score}   ({result.percentage}%)", file=out)
    print(f"Correct: {result.correct}  Incorrect: {result.incorrect}  Omitted: {result.omitted}", file=out)
    if not result.saved:
        print("WARNING: results may not have been saved.", file=out)
    print(f"Attempt: {result.attempt_id}", file=out)
    print("=" * 40, file=out)


def handle_command(session: ExamSession, command: str, out=sys.stdout) -> None:
    """Apply one line of learner input to the session."""
    words = command.strip().lower().split()
    if not words:
        return
    q = session.current_question
    labels = OPTION_LABELS[: len(q.options)].lower()
    if words[0] == "next":
        session.next()
    elif words[0] == "prev":
        session.previous()
    elif words[0] == "go" and len(words) == 2 and words[1].isdigit():
        session.go_to(int(words[1]) - 1)
    elif words[0] == "clear":
        session.clear_answer(q.id)
    elif words[0] == "finish":
        session.finish()
    elif len(words[0]) == 1 and words[0] in labels:
        session.select_answer(q.id, q.options[labels.index(words[0])])
    else:
        print(HELP, file=out)


def take(exam_id: str, user_id: str) -> int:
    client = get_supabase_uncached()
    session = ExamSession(SupabaseCatalog(client), SupabaseAttemptStore(client))
    try:
        session.start(exam_id, user_id)
    except ExamError as e:
        print(f"{e.message}: {e}", file=sys.stderr)
        return 1

    clock = SessionClock(session)
    print(f"{session.exam.title} · {session.total_questions} questions · {session.exam.duration_minutes} min")
    print(HELP)
    while not session.is_finished:
        print_question(session)
        try:
            command = input("> ")
        except EOFError:
            command = "finish"
        clock.sync()
        if session.is_finished:
            print("Time is up.")
            break
        handle_command(session, command)

    print_result(session.result)
    return 0 if session.result.saved else 2


def review(attempt_id: str) -> int:
    client = get_supabase_uncached()
    try:
        result = load_review(SupabaseAttemptStore(client), SupabaseCatalog(client), attempt_id)
    except ExamError as e:
        print(f"{e.message}: {e}", file=sys.stderr)
        return 1

    a = result.attempt
    print(f"Attempt {a.id} · status={a.status} · finished={a.finished_at}")
    print(f"Score: {a.score_total}   ({result.percentage}%)")
    print(f"Correct: {a.correct_count}  Incorrect: {a.incorrect_count}  Omitted: {a.omitted_count}")
    print("-" * 60)
    for i, item in enumerate(result.items, 1):
        mark = {OUTCOME_CORRECT: "OK", OUTCOME_OMITTED: "-"}.get(item.outcome, "X")
        print(f"{i:3d}. [{mark}] {item.content}")
        if item.selected_option is not None:
            print(f"      your answer: {item.selected_option}")
        print(f"      correct:     {item.correct_answer}")
        if item.explanation:
            print(f"      {item.explanation}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="ensayos", description="Take and review timed practice exams.")
    parser.add_argument("--log-level", default=None, help="Logging level (default from LOG_LEVEL or INFO)")
    sub = parser.add_subparsers(dest="command", required=True)

    take_parser = sub.add_parser("take", help="Take an exam in the terminal")
    take_parser.add_argument("exam_id")
    take_parser.add_argument("--user", required=True, help="User id the attempt belongs to")

    review_parser = sub.add_parser("review", help="Show a graded attempt")
    review_parser.add_argument("attempt_id")

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "take":
        return take(args.exam_id, args.user)
    return review(args.attempt_id)
