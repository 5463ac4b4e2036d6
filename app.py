"""Ensayos: timed practice exam and results review."""
import sys
from pathlib import Path
from uuid import uuid4

# Ensure project root is in path
project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import streamlit as st
from supabase import Client

from ensayos.clock import SessionClock, format_remaining
from ensayos.database import SupabaseAttemptStore, SupabaseCatalog
from ensayos.db import get_supabase_uncached
from ensayos.errors import ExamError
from ensayos.review import OUTCOME_CORRECT, OUTCOME_OMITTED, load_review
from ensayos.session import ExamSession

OPTION_LABELS = "ABCDEFGHIJ"


@st.cache_resource
def get_supabase() -> Client:
    return get_supabase_uncached()


st.set_page_config(page_title="Ensayos", layout="wide")
st.sidebar.title("Ensayos")
default_page = st.query_params.get("page", "Exam")
if default_page not in ("Exam", "Results"):
    default_page = "Exam"
page = st.sidebar.radio("Navigate", ["Exam", "Results"], index=["Exam", "Results"].index(default_page), key="nav_page", label_visibility="collapsed")

# No login screen here: one anonymous learner id per browser session
if "user_id" not in st.session_state:
    st.session_state["user_id"] = str(uuid4())


def reset_exam():
    st.session_state.pop("exam_session", None)
    st.session_state.pop("exam_clock", None)


def open_review(attempt_id: str):
    st.session_state["nav_page"] = "Results"
    st.query_params["attempt_id"] = attempt_id


def back_to_exams():
    reset_exam()
    st.session_state["nav_page"] = "Exam"
    st.query_params.pop("attempt_id", None)


# ----- Exam -----
if page == "Exam":
    session: ExamSession | None = st.session_state.get("exam_session")

    if session is None:
        st.header("Start an exam")
        exam_id = st.text_input("Exam id", value=st.query_params.get("exam_id", ""))
        if st.button("Start exam", type="primary", disabled=not exam_id):
            client = get_supabase()
            new_session = ExamSession(SupabaseCatalog(client), SupabaseAttemptStore(client))
            try:
                new_session.start(exam_id.strip(), st.session_state["user_id"])
            except ExamError as e:
                st.error(f"{e.message}. {e}")
            else:
                st.session_state["exam_session"] = new_session
                st.session_state["exam_clock"] = SessionClock(new_session)
                st.rerun()
        st.stop()

    clock: SessionClock = st.session_state["exam_clock"]
    clock.sync()

    if session.is_finished:
        result = session.result
        st.header(session.exam.title)
        st.success("Exam submitted.")
        if not result.saved:
            st.warning("Your result could not be saved. The score below is still correct.")
        col1, col2, col3, col4 = st.columns(4)
        col1.metric("Score", result.score)
        col2.metric("Correct", result.correct)
        col3.metric("Incorrect", result.incorrect)
        col4.metric("Omitted", result.omitted)
        st.progress(result.percentage / 100, text=f"{result.percentage}% correct")
        c1, c2 = st.columns(2)
        with c1:
            st.button("Review answers", type="primary", on_click=open_review, args=(result.attempt_id,))
        with c2:
            if st.button("Start a new exam"):
                reset_exam()
                st.rerun()
        st.stop()

    @st.fragment(run_every=1)
    def countdown():
        clock.sync()
        if session.is_finished:
            st.rerun()
        st.metric("Time left", format_remaining(session.remaining_seconds))

    with st.sidebar:
        countdown()
        n = session.total_questions
        st.progress(session.answered_count / n)
        st.caption(f"{session.answered_count}/{n} answered")
        flags = session.answered_flags()
        cols = st.columns(5)
        for i, answered in enumerate(flags):
            label = f"{i + 1}" + (" ✓" if answered else "")
            if cols[i % 5].button(label, key=f"jump_{i}", type="primary" if i == session.position else "secondary"):
                session.go_to(i)
                st.rerun()

    st.header(session.exam.title)
    q = session.current_question
    idx = session.position
    n = session.total_questions
    options = q.options

    st.subheader(f"Question {idx + 1} of {n}")
    if q.difficulty:
        st.caption(q.difficulty)
    st.write(q.content)
    if q.image_url:
        st.image(q.image_url)

    selected = session.selection_for(q.id)
    opt_labels = [f"{OPTION_LABELS[i]}. {opt}" for i, opt in enumerate(options[: len(OPTION_LABELS)])]
    choice = st.radio(
        "Choose one:",
        range(len(opt_labels)),
        format_func=lambda i: opt_labels[i],
        key=f"q_{session.attempt_id}_{q.id}",
        index=options.index(selected) if selected in options else None,
    )
    if choice is not None and options[choice] != selected:
        session.select_answer(q.id, options[choice])

    col1, col2, col3, col4 = st.columns([1, 1, 1, 2])
    with col1:
        if st.button("Previous", disabled=idx == 0):
            session.previous()
            st.rerun()
    with col2:
        if st.button("Next", disabled=idx >= n - 1):
            session.next()
            st.rerun()
    with col3:
        if st.button("Clear", disabled=session.selection_for(q.id) is None):
            session.clear_answer(q.id)
            st.session_state.pop(f"q_{session.attempt_id}_{q.id}", None)
            st.rerun()
    with col4:
        if idx == n - 1 and st.button("Finish exam", type="primary"):
            session.finish()
            st.rerun()

# ----- Results -----
elif page == "Results":
    st.header("Results")
    attempt_id = st.text_input("Attempt id", value=st.query_params.get("attempt_id", ""))
    if not attempt_id:
        st.info("Enter an attempt id to see its results.")
        st.stop()

    client = get_supabase()
    try:
        review = load_review(SupabaseAttemptStore(client), SupabaseCatalog(client), attempt_id.strip())
    except ExamError as e:
        st.error(f"{e.message}. {e}")
        st.stop()

    attempt = review.attempt
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Score", attempt.score_total if attempt.score_total is not None else "—")
    col2.metric("Correct", attempt.correct_count or 0)
    col3.metric("Incorrect", attempt.incorrect_count or 0)
    col4.metric("Omitted", attempt.omitted_count or 0)
    st.progress(review.percentage / 100, text=f"{review.percentage}% correct")
    if attempt.finished_at:
        st.caption(f"Finished {attempt.finished_at:%Y-%m-%d %H:%M}")

    st.subheader("Answer review")
    for item in review.items:
        if item.outcome == OUTCOME_CORRECT:
            st.success(f"✓ {item.content}")
        elif item.outcome == OUTCOME_OMITTED:
            st.info(f"— {item.content} (omitted)")
        else:
            st.error(f"✗ {item.content}")
        if item.selected_option is not None:
            st.write(f"Your answer: *{item.selected_option}*")
        st.write(f"Correct answer: **{item.correct_answer}**")
        if item.explanation:
            with st.expander("Explanation"):
                st.write(item.explanation)

    st.button("Back to exams", on_click=back_to_exams)
