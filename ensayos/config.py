"""Environment settings. Values come from the process env or a local .env file."""
import logging
import os

from dotenv import load_dotenv

load_dotenv()

SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Table names
EXAMS_TABLE = "exams"
EXAM_QUESTIONS_TABLE = "exam_questions"
QUESTIONS_TABLE = "questions"
ATTEMPTS_TABLE = "exam_attempts"
ANSWERS_TABLE = "user_answers"


def configure_logging(level: str | None = None) -> None:
    """For scripts and the CLI; Streamlit and pytest set up their own handlers."""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format="%(levelname)s: %(message)s",
    )
