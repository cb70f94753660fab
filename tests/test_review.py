# tests/test_review.py
from study_tutor.db import init_db
from study_tutor.models import NoteRecord, QuestionOutcome
from study_tutor.notes import add_subject
from study_tutor.quiz import generate_quiz_from_notes, save_quiz_attempt
from study_tutor.review import (
    aggregate_topic_stats, compute_weak_topics, get_weak_topics, load_question_outcomes,
)


def outcomes(text, results, subject_id="s1", subject_name="Anatomy"):
    return [QuestionOutcome(text, subject_id, subject_name, ok) for ok in results]


def test_no_outcomes_no_weak_topics():
    assert compute_weak_topics([]) == []


def test_weak_topic_accuracy():
    weak = compute_weak_topics(outcomes("What is Heart?", [True, False, False]))
    assert len(weak) == 1
    assert weak[0].subject == "Anatomy"
    assert weak[0].topic == "Heart"
    assert weak[0].attempts == 3
    assert weak[0].accuracy == 33


def test_single_attempt_excluded():
    assert compute_weak_topics(outcomes("What is Heart?", [False])) == []
    assert compute_weak_topics(outcomes("What is Heart?", [True])) == []


def test_seventy_percent_is_not_weak():
    data = outcomes("What is Lung?", [True] * 7 + [False] * 3)
    assert compute_weak_topics(data) == []
    assert aggregate_topic_stats(data)[0].accuracy == 70


def test_accuracy_rounds_half_up():
    data = outcomes("What is Liver?", [True] + [False] * 7)
    assert compute_weak_topics(data)[0].accuracy == 13


def test_same_topic_in_different_subjects_kept_apart():
    data = (
        outcomes("What is Cell?", [False, False], "s1", "Biology")
        + outcomes("What is Cell?", [False, True], "s2", "Chemistry")
    )
    weak = compute_weak_topics(data)
    assert [(w.subject, w.accuracy) for w in weak] == [("Biology", 0), ("Chemistry", 50)]


def test_sorted_by_accuracy_then_attempts():
    data = (
        outcomes("What is Kidney?", [False, True])
        + outcomes("What is Spleen?", [False, False, True, True])
        + outcomes("What is Bone?", [False, False])
        + outcomes("What is Skin?", [False, False, False])
    )
    weak = compute_weak_topics(data)
    assert [w.topic for w in weak] == ["Skin", "Bone", "Spleen", "Kidney"]


def test_at_most_five():
    data = []
    for name in ["Aorta", "Bone", "Colon", "Duct", "Ear", "Femur", "Gland"]:
        data += outcomes(f"What is {name}?", [False, False])
    weak = compute_weak_topics(data)
    assert len(weak) == 5
    assert all(w.attempts >= 2 and w.accuracy < 70 for w in weak)


def test_every_qualifying_topic_reported():
    data = (
        outcomes("What is Heart?", [False, True, True])
        + outcomes("What is Lung?", [True, True])
        + outcomes("What is Liver?", [False])
    )
    stats = aggregate_topic_stats(data)
    qualifying = {s.topic for s in stats if s.attempts >= 2 and s.accuracy < 70}
    assert {w.topic for w in compute_weak_topics(data)} == qualifying == {"Heart"}


def test_fill_in_the_blank_groups_by_term():
    data = outcomes("Fill in the blank: ______ discovered Polonium in Paris.", [False, False])
    assert compute_weak_topics(data)[0].topic == "Polonium"


def test_weak_topics_from_saved_quizzes(tmp_db):
    init_db(tmp_db)
    subject_id = add_subject(tmp_db, "Anatomy")
    notes = [NoteRecord(title="Heart", content="The Heart is a muscular organ that pumps blood throughout the body.")]
    for _ in range(3):
        questions = generate_quiz_from_notes(notes)
        wrong = (questions[0].correct_answer + 1) % 4
        save_quiz_attempt(tmp_db, subject_id, questions, {questions[0].id: wrong})

    loaded = load_question_outcomes(tmp_db)
    assert len(loaded) == 3
    assert loaded[0].subject_id == str(subject_id)
    assert loaded[0].is_correct is False

    weak = get_weak_topics(tmp_db)
    assert len(weak) == 1
    assert (weak[0].topic, weak[0].attempts, weak[0].accuracy) == ("Heart", 3, 0)


def test_get_weak_topics_empty_db(tmp_db):
    init_db(tmp_db)
    assert get_weak_topics(tmp_db) == []
