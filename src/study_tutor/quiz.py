"""Quiz generation from notes, grading, and attempt storage."""
import json
import logging
import random
from datetime import datetime

from study_tutor.concepts import (
    LEADING_ARTICLE, capitalized_terms, extract_concepts, is_eligible, split_sentences,
)
from study_tutor.db import get_connection
from study_tutor.models import ConceptFact, NoteRecord, QuizQuestion, percent

logger = logging.getLogger(__name__)

DEFAULT_QUESTION_COUNT = 10
OPTION_COUNT = 4
MAX_DISTRACTORS = OPTION_COUNT - 1
GENERIC_DISTRACTORS = ["A medical condition", "A treatment method", "A diagnostic tool", "A clinical procedure"]
GENERIC_BLANK_OPTIONS = ["Unknown", "N/A", "Various", "Other"]
BLANK_SENTENCE_LENGTH = (30, 150)
BLANKED_QUESTION_LENGTH = (20, 200)
BLANK = "______"


def shuffle_options(options, rng=None) -> list:
    """Fisher-Yates shuffle of a copy of ``options``.

    Args:
        options: Sequence to permute; left untouched.
        rng: ``random.Random``-like object, or a zero-argument callable
            returning a float in [0, 1). Defaults to a fresh ``random.Random``.
    """
    if rng is None:
        rng = random.Random()
    draw = rng if callable(rng) else rng.random
    shuffled = list(options)
    for i in range(len(shuffled) - 1, 0, -1):
        j = int(draw() * (i + 1))
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def pad_options(options: list[str], pool: list[str]) -> list[str]:
    """Fill up to four options from ``pool``, numbering any slot whose pool entry is taken."""
    padded = list(options)
    while len(padded) < OPTION_COUNT:
        candidate = pool[len(padded) % len(pool)]
        if candidate in padded:
            candidate = f"Option {len(padded) + 1}"
        padded.append(candidate)
    return padded[:OPTION_COUNT]


def unique_distractors(answer: str, distractors: list[str]) -> list[str]:
    """Drop distractors equal to the answer or to an earlier distractor, keeping order."""
    seen = {answer}
    unique = []
    for distractor in distractors:
        if distractor not in seen:
            seen.add(distractor)
            unique.append(distractor)
    return unique


def build_question(
    question_id: str,
    text: str,
    answer: str,
    distractors: list[str],
    pool: list[str],
    explanation: str,
    source_note: str | None = None,
    rng=None,
) -> QuizQuestion | None:
    """Assemble one shuffled four-option question, or None when the answer got lost."""
    options = pad_options([answer] + unique_distractors(answer, distractors)[:MAX_DISTRACTORS], pool)
    shuffled = shuffle_options(options, rng)
    if answer not in shuffled:
        logger.debug("Skipping %r: answer missing after shuffle", text)
        return None
    return QuizQuestion(
        id=question_id,
        question=text,
        options=tuple(shuffled),
        correct_answer=shuffled.index(answer),
        explanation=explanation,
        source_note=source_note,
    )


def _concept_questions(concepts, target_count, used, rng) -> list[QuizQuestion]:
    questions = []
    for fact in concepts:
        if len(questions) >= target_count:
            break
        if fact.concept in used:
            continue
        distractors = [
            c.definition for c in concepts
            if c.concept != fact.concept and c.concept not in used
        ]
        question = build_question(
            f"q{len(questions) + 1}",
            f"What is {fact.concept}?",
            fact.definition,
            distractors,
            GENERIC_DISTRACTORS,
            f"According to your notes: {fact.definition}",
            fact.source_title,
            rng,
        )
        if question is None:
            continue
        questions.append(question)
        used.add(fact.concept)
    return questions


def _blank_questions(notes, target_count, used, first_id, rng) -> list[QuizQuestion]:
    questions = []
    low, high = BLANK_SENTENCE_LENGTH
    for note in notes:
        if len(questions) >= target_count:
            break
        if not is_eligible(note):
            continue
        for sentence in split_sentences(note.content, low, high):
            if len(questions) >= target_count:
                break
            terms = capitalized_terms(sentence)
            if not terms:
                continue
            term = terms[0]
            # "The Heart" and "Heart" back the same question
            key = LEADING_ARTICLE.sub("", term)
            if key in used:
                continue
            blanked = sentence.replace(term, BLANK, 1)
            if not BLANKED_QUESTION_LENGTH[0] < len(blanked) < BLANKED_QUESTION_LENGTH[1]:
                continue
            question = build_question(
                f"q{first_id + len(questions)}",
                f"Fill in the blank: {blanked}",
                term,
                terms[1:],
                GENERIC_BLANK_OPTIONS,
                f"The correct term is: {term}",
                note.title,
                rng,
            )
            if question is None:
                continue
            questions.append(question)
            used.add(key)
    return questions


def synthesize_questions(
    concepts: list[ConceptFact],
    notes: list[NoteRecord],
    target_count: int = DEFAULT_QUESTION_COUNT,
    rng=None,
) -> list[QuizQuestion]:
    """Turn extracted concepts into multiple-choice questions.

    "What is X?" questions come first, one per distinct concept. When they
    fall short of ``target_count`` the notes are mined again for
    fill-in-the-blank questions built around capitalized terms. Each concept
    or blanked term backs at most one question per call.
    """
    if rng is None:
        rng = random.Random()
    used: set[str] = set()
    questions = _concept_questions(concepts, target_count, used, rng)
    if len(questions) < target_count:
        questions += _blank_questions(
            notes, target_count - len(questions), used, len(questions) + 1, rng
        )
    logger.debug("Synthesized %d of %d requested questions", len(questions), target_count)
    return questions[:target_count]


def generate_quiz_from_notes(
    notes: list[NoteRecord],
    target_count: int = DEFAULT_QUESTION_COUNT,
    rng=None,
) -> list[QuizQuestion]:
    concepts = extract_concepts(notes)
    return synthesize_questions(concepts, notes, target_count, rng)


def score_answers(questions: list[QuizQuestion], answers: dict[str, int]) -> tuple[int, int, int]:
    """Grade a taken quiz. Returns (correct, total, score percent); unanswered counts as wrong."""
    correct = sum(1 for q in questions if answers.get(q.id) == q.correct_answer)
    return correct, len(questions), percent(correct, len(questions))


def save_quiz_attempt(
    db_path: str,
    subject_id: int,
    questions: list[QuizQuestion],
    answers: dict[str, int],
    time_spent: int = 0,
) -> int:
    """Store a submitted quiz with its questions and per-question results. Returns the result id."""
    correct, total, score = score_answers(questions, answers)
    now = datetime.now().isoformat()
    conn = get_connection(db_path)
    subject = conn.execute("SELECT name FROM subjects WHERE id = ?", (subject_id,)).fetchone()
    subject_name = subject["name"] if subject else "Unknown"
    quiz_id = conn.execute(
        "INSERT INTO quizzes (subject_id, title, created_at) VALUES (?, ?, ?)",
        (subject_id, f"Quick Quiz - {subject_name}", now),
    ).lastrowid
    question_ids = []
    for q in questions:
        cursor = conn.execute(
            """INSERT INTO questions (quiz_id, question_text, options, correct_answer, explanation, source_note)
            VALUES (?, ?, ?, ?, ?, ?)""",
            (quiz_id, q.question, json.dumps(list(q.options)), q.correct_answer, q.explanation, q.source_note),
        )
        question_ids.append(cursor.lastrowid)
    result_id = conn.execute(
        """INSERT INTO quiz_results
        (quiz_id, subject_id, subject_name, score, total_questions, correct_answers, time_spent, completed_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
        (quiz_id, subject_id, subject_name, score, total, correct, time_spent, now),
    ).lastrowid
    for q, question_id in zip(questions, question_ids):
        selected = answers.get(q.id, -1)
        conn.execute(
            "INSERT INTO question_results (quiz_result_id, question_id, selected_answer, is_correct) VALUES (?, ?, ?, ?)",
            (result_id, question_id, selected, int(selected == q.correct_answer)),
        )
    conn.commit()
    conn.close()
    logger.info("Saved quiz result %d for %s: %d/%d", result_id, subject_name, correct, total)
    return result_id


def get_quiz_questions(db_path: str, quiz_id: int) -> list[QuizQuestion]:
    """Reload the stored questions of a quiz, numbered in insertion order."""
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT * FROM questions WHERE quiz_id = ? ORDER BY id", (quiz_id,)
    ).fetchall()
    conn.close()
    return [
        QuizQuestion(
            id=f"q{i}",
            question=row["question_text"],
            options=tuple(json.loads(row["options"])),
            correct_answer=row["correct_answer"],
            explanation=row["explanation"] or "",
            source_note=row["source_note"],
        )
        for i, row in enumerate(rows, 1)
    ]
