"""Print the Supabase schema for Ensayos (run the SQL in the Supabase SQL Editor)."""
from ensayos.config import SUPABASE_URL

# SQL schema
SCHEMA_SQL = """
-- Exam catalog
CREATE TABLE IF NOT EXISTS exams (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    title TEXT NOT NULL,
    duration_minutes INT NOT NULL CHECK (duration_minutes > 0),
    created_at TIMESTAMPTZ DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS questions (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    content TEXT NOT NULL,
    image_url TEXT,
    difficulty VARCHAR(20),
    correct_answer TEXT NOT NULL,
    distractors JSONB NOT NULL DEFAULT '[]',
    explanation TEXT,
    created_at TIMESTAMPTZ DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS exam_questions (
    exam_id UUID NOT NULL REFERENCES exams(id) ON DELETE CASCADE,
    question_id UUID NOT NULL REFERENCES questions(id),
    position INT NOT NULL DEFAULT 0,
    PRIMARY KEY (exam_id, question_id)
);

-- Attempts
CREATE TABLE IF NOT EXISTS exam_attempts (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    user_id UUID NOT NULL,
    exam_id UUID NOT NULL REFERENCES exams(id),
    status VARCHAR(20) NOT NULL DEFAULT 'in_progress' CHECK (status IN ('in_progress', 'completed')),
    created_at TIMESTAMPTZ DEFAULT NOW(),
    finished_at TIMESTAMPTZ,
    score_total INT,
    correct_count INT,
    incorrect_count INT,
    omitted_count INT
);

-- Answer trail, written once when the attempt is finished
CREATE TABLE IF NOT EXISTS user_answers (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    attempt_id UUID NOT NULL REFERENCES exam_attempts(id) ON DELETE CASCADE,
    question_id UUID NOT NULL REFERENCES questions(id),
    selected_option TEXT,
    is_correct BOOLEAN NOT NULL,
    created_at TIMESTAMPTZ DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_exam_questions_exam_id ON exam_questions(exam_id, position);
CREATE INDEX IF NOT EXISTS idx_exam_attempts_user_id ON exam_attempts(user_id);
CREATE INDEX IF NOT EXISTS idx_user_answers_attempt_id ON user_answers(attempt_id);
"""


def main():
    print("Ensayos schema")
    print(f"URL: {SUPABASE_URL}")
    statements = [s.strip() for s in SCHEMA_SQL.split(";") if s.strip()]
    print(f"{len(statements)} statements. Run this SQL in the Supabase SQL Editor:")
    print(SCHEMA_SQL)


if __name__ == "__main__":
    main()
