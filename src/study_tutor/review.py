"""Weak area identification from quiz attempt history."""
import logging

from study_tutor.db import get_connection
from study_tutor.models import QuestionOutcome, TopicStat, WeakTopic
from study_tutor.topics import extract_topic

logger = logging.getLogger(__name__)

MIN_ATTEMPTS = 2
WEAK_THRESHOLD = 70
MAX_WEAK_TOPICS = 5


def aggregate_topic_stats(outcomes: list[QuestionOutcome]) -> list[TopicStat]:
    """Group outcomes by (subject id, topic label), in first-seen order."""
    stats: dict[tuple[str, str], TopicStat] = {}
    for outcome in outcomes:
        topic = extract_topic(outcome.question_text, outcome.subject_name)
        key = (outcome.subject_id, topic)
        if key not in stats:
            stats[key] = TopicStat(outcome.subject_id, outcome.subject_name, topic)
        stat = stats[key]
        stat.attempts += 1
        if not outcome.is_correct:
            stat.incorrect += 1
    return list(stats.values())


def compute_weak_topics(
    outcomes: list[QuestionOutcome],
    min_attempts: int = MIN_ATTEMPTS,
    threshold: int = WEAK_THRESHOLD,
    limit: int = MAX_WEAK_TOPICS,
) -> list[WeakTopic]:
    """Topics answered at least ``min_attempts`` times with accuracy below ``threshold``.

    Weakest first; among equal accuracy the more-attempted topic ranks
    higher. An empty list means there are no weak areas yet.
    """
    weak = [
        WeakTopic(subject=s.subject_name, topic=s.topic, attempts=s.attempts, accuracy=s.accuracy)
        for s in aggregate_topic_stats(outcomes)
        if s.attempts >= min_attempts and s.accuracy < threshold
    ]
    weak.sort(key=lambda w: (w.accuracy, -w.attempts))
    return weak[:limit]


def load_question_outcomes(db_path: str) -> list[QuestionOutcome]:
    """Join stored per-question results back to their question text and subject."""
    conn = get_connection(db_path)
    rows = conn.execute(
        """SELECT q.question_text, r.subject_id, r.subject_name, qr.is_correct
        FROM question_results qr
        JOIN quiz_results r ON qr.quiz_result_id = r.id
        JOIN questions q ON qr.question_id = q.id
        ORDER BY qr.id"""
    ).fetchall()
    conn.close()
    return [
        QuestionOutcome(
            question_text=row["question_text"],
            subject_id=str(row["subject_id"]),
            subject_name=row["subject_name"],
            is_correct=bool(row["is_correct"]),
        )
        for row in rows
    ]


def get_weak_topics(db_path: str, limit: int = MAX_WEAK_TOPICS) -> list[WeakTopic]:
    outcomes = load_question_outcomes(db_path)
    weak = compute_weak_topics(outcomes, limit=limit)
    logger.debug("Found %d weak topics across %d outcomes", len(weak), len(outcomes))
    return weak
