"""Derive a short topic label from a stored question's text."""
import re
from typing import Callable, Optional

from study_tutor.concepts import capitalized_terms

DEFAULT_TOPIC = "General"
WHAT_IS_MAX = 40
WORDS_MAX = 30
LEADING_WORDS = 4

WHAT_IS = re.compile(r"What is (.+?)\?", re.IGNORECASE)
FILL_IN_THE_BLANK = re.compile(r"Fill in the blank: (.+?)(?:\.|$)", re.IGNORECASE)

TopicRule = Callable[[str], Optional[str]]


def _truncate(text: str, limit: int) -> str:
    return text[:limit] + "..." if len(text) > limit else text


def topic_from_what_is(text: str) -> Optional[str]:
    match = WHAT_IS.search(text)
    if not match or not match.group(1).strip():
        return None
    return _truncate(match.group(1).strip(), WHAT_IS_MAX)


def topic_from_blank(text: str) -> Optional[str]:
    match = FILL_IN_THE_BLANK.search(text)
    if not match:
        return None
    terms = capitalized_terms(match.group(1))
    return terms[0] if terms else None


def topic_from_terms(text: str) -> Optional[str]:
    terms = capitalized_terms(text)
    return terms[0] if terms else None


def topic_from_leading_words(text: str) -> Optional[str]:
    words = " ".join(text.split(" ")[:LEADING_WORDS])
    return _truncate(words, WORDS_MAX) or None


TOPIC_RULES: tuple[TopicRule, ...] = (
    topic_from_what_is,
    topic_from_blank,
    topic_from_terms,
    topic_from_leading_words,
)


def extract_topic(question_text: str, fallback_subject: str = "") -> str:
    """Label a question with its topic; the first rule that yields a label wins.

    ``fallback_subject`` is accepted so callers can pass the owning subject,
    but labels never fall back to it: unlabelled text groups under "General".
    """
    if not question_text or not question_text.strip():
        return DEFAULT_TOPIC
    for rule in TOPIC_RULES:
        topic = rule(question_text)
        if topic:
            return topic
    return DEFAULT_TOPIC
