"""
Live check of the Supabase connection and table structure.
Run after executing the SQL printed by init_db.py; skipped without credentials.
"""
import pytest

from ensayos import config

pytestmark = pytest.mark.skipif(
    not (config.SUPABASE_URL and config.SUPABASE_KEY),
    reason="SUPABASE_URL and SUPABASE_KEY not set",
)

TABLES = ["exams", "exam_questions", "questions", "exam_attempts", "user_answers"]


@pytest.fixture(scope="module")
def client():
    from ensayos.db import get_supabase_uncached
    return get_supabase_uncached()


@pytest.mark.parametrize("table", TABLES)
def test_table_exists(client, table):
    column = "exam_id" if table == "exam_questions" else "id"
    response = client.table(table).select(column).limit(1).execute()
    assert isinstance(response.data, list)
