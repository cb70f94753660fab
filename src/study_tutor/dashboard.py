"""Quiz score statistics for the dashboard."""
from study_tutor.db import get_connection
from study_tutor.models import SubjectScore, round_half_up


def get_score_color(score: float) -> str:
    if score >= 80:
        return "green"
    elif score >= 60:
        return "yellow"
    return "red"


def get_subject_scores(db_path: str) -> list[SubjectScore]:
    """Per-subject quiz count, average quiz score and note count."""
    conn = get_connection(db_path)
    subjects = conn.execute("SELECT * FROM subjects ORDER BY name").fetchall()
    results = []
    for s in subjects:
        row = conn.execute(
            "SELECT COUNT(*) as t, AVG(score) as avg FROM quiz_results WHERE subject_id = ?",
            (s["id"],),
        ).fetchone()
        notes = conn.execute("SELECT COUNT(*) FROM notes WHERE subject_id = ?", (s["id"],)).fetchone()[0]
        results.append(SubjectScore(
            subject_id=s["id"],
            name=s["name"],
            quiz_count=row["t"],
            average_score=round_half_up(row["avg"]) if row["t"] else 0,
            notes_count=notes,
        ))
    conn.close()
    return results


def get_recent_scores(db_path: str, limit: int = 5) -> list[dict]:
    """Most recent quiz results first."""
    conn = get_connection(db_path)
    rows = conn.execute(
        """SELECT subject_name, score, total_questions, completed_at
        FROM quiz_results ORDER BY completed_at DESC, id DESC LIMIT ?""",
        (limit,),
    ).fetchall()
    conn.close()
    return [dict(row) for row in rows]


def get_overall_average(db_path: str) -> int:
    """Quiz-count weighted mean of subject averages, 0 before any quiz."""
    subjects = get_subject_scores(db_path)
    total_quizzes = sum(s.quiz_count for s in subjects)
    if total_quizzes:
        weighted = sum(s.average_score * s.quiz_count for s in subjects)
        return round_half_up(weighted / total_quizzes)
    return 0
