# tests/test_dashboard.py
from study_tutor.db import init_db
from study_tutor.models import NoteRecord
from study_tutor.notes import add_subject, add_note
from study_tutor.quiz import generate_quiz_from_notes, save_quiz_attempt
from study_tutor.dashboard import (
    get_overall_average, get_recent_scores, get_score_color, get_subject_scores,
)

NOTES = [
    NoteRecord(title="Osmosis", content="Osmosis is the movement of water across a membrane."),
    NoteRecord(title="Diffusion", content="Diffusion is the spread of particles from high to low concentration."),
]


def take_quiz(db_path, subject_id, correct):
    """Save a two-question quiz with the first ``correct`` answers right."""
    questions = generate_quiz_from_notes(NOTES)
    answers = {}
    for i, q in enumerate(questions):
        answers[q.id] = q.correct_answer if i < correct else (q.correct_answer + 1) % 4
    save_quiz_attempt(db_path, subject_id, questions, answers)


def test_score_color():
    assert get_score_color(85) == "green"
    assert get_score_color(80) == "green"
    assert get_score_color(60) == "yellow"
    assert get_score_color(59) == "red"


def test_no_quizzes(tmp_db):
    init_db(tmp_db)
    add_subject(tmp_db, "Biology")
    scores = get_subject_scores(tmp_db)
    assert scores[0].quiz_count == 0
    assert scores[0].average_score == 0
    assert get_overall_average(tmp_db) == 0
    assert get_recent_scores(tmp_db) == []


def test_subject_scores(tmp_db):
    init_db(tmp_db)
    bio = add_subject(tmp_db, "Biology")
    add_note(tmp_db, bio, NOTES[0].title, NOTES[0].content)
    take_quiz(tmp_db, bio, correct=2)
    take_quiz(tmp_db, bio, correct=1)
    scores = get_subject_scores(tmp_db)
    assert len(scores) == 1
    assert scores[0].name == "Biology"
    assert scores[0].quiz_count == 2
    assert scores[0].average_score == 75
    assert scores[0].notes_count == 1


def test_overall_average_weighted_by_quiz_count(tmp_db):
    init_db(tmp_db)
    bio = add_subject(tmp_db, "Biology")
    chem = add_subject(tmp_db, "Chemistry")
    take_quiz(tmp_db, bio, correct=2)
    take_quiz(tmp_db, bio, correct=2)
    take_quiz(tmp_db, chem, correct=0)
    # (100 * 2 + 0 * 1) / 3
    assert get_overall_average(tmp_db) == 67


def test_recent_scores_newest_first(tmp_db):
    init_db(tmp_db)
    bio = add_subject(tmp_db, "Biology")
    take_quiz(tmp_db, bio, correct=0)
    take_quiz(tmp_db, bio, correct=2)
    recent = get_recent_scores(tmp_db, limit=5)
    assert [r["score"] for r in recent] == [100, 0]
    assert recent[0]["subject_name"] == "Biology"
