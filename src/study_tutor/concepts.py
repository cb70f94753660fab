"""Concept extraction: mine (term, definition) pairs from free-form note text."""
import logging
import re
from typing import Callable, Optional

from study_tutor.models import ConceptFact, NoteRecord

logger = logging.getLogger(__name__)

MIN_NOTE_LENGTH = 20
DEFINITION_SENTENCE_LENGTH = (20, 200)
CONNECTIVES = ("is", "refers to", "means", "are")

SENTENCE_SPLIT = re.compile(r"[.!?]\s+")
CAPITALIZED_TERM = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\b")
LEADING_ARTICLE = re.compile(r"^(?:The|A|An)\s+")
WHAT_IS_QUESTION = re.compile(r"(?i:what\s+is)\s+([a-z]+(?:\s+[a-z]+)*)\?")
TRAILING_ANSWER = re.compile(r"(?i:\bis)\s+(.+?)(?:\.|$)")

# Capitalized sentence openers that never name a concept.
NON_CONCEPTS = frozenset({
    "It", "This", "That", "These", "Those", "There", "They", "He", "She",
    "What", "Which", "Who", "Where", "When", "Why", "How",
})

Matcher = Callable[[str], Optional[tuple[str, str]]]


def is_eligible(note: NoteRecord) -> bool:
    return bool(note.content) and len(note.content.strip()) > MIN_NOTE_LENGTH


def split_sentences(content: str, min_length: int, max_length: int) -> list[str]:
    """Split on sentence punctuation and keep fragments strictly inside the length window."""
    sentences = []
    for fragment in SENTENCE_SPLIT.split(content):
        fragment = fragment.strip()
        if min_length < len(fragment) < max_length:
            sentences.append(fragment)
    return sentences


def capitalized_terms(text: str) -> list[str]:
    return CAPITALIZED_TERM.findall(text)


def _clean_concept(phrase: str) -> str | None:
    concept = LEADING_ARTICLE.sub("", phrase.strip())
    if not concept or concept.split()[0] in NON_CONCEPTS:
        return None
    return concept


def _definition_matcher(connective: str) -> Matcher:
    keyword = r"\s+".join(connective.split())
    pattern = re.compile(
        r"\b([A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+)*)\s+(?i:" + keyword + r")\s+(.+?)(?:\.|$)"
    )

    def match(sentence: str) -> Optional[tuple[str, str]]:
        for m in pattern.finditer(sentence):
            concept = _clean_concept(m.group(1))
            definition = m.group(2).strip()
            if concept and definition:
                return concept, definition
        return None

    match.__name__ = f"match_{connective.replace(' ', '_')}"
    return match


DEFINITION_MATCHERS: tuple[Matcher, ...] = tuple(_definition_matcher(c) for c in CONNECTIVES)


def match_definition(sentence: str) -> Optional[tuple[str, str]]:
    """Try each definition pattern in order; the first hit wins."""
    for matcher in DEFINITION_MATCHERS:
        found = matcher(sentence)
        if found:
            return found
    return None


def match_what_is(sentence: str) -> Optional[tuple[str, str]]:
    """'What is osmosis? ... is <answer>' within one sentence."""
    question = WHAT_IS_QUESTION.search(sentence)
    if not question:
        return None
    answer = TRAILING_ANSWER.search(sentence, question.end())
    if not answer or not answer.group(1).strip():
        return None
    return question.group(1).strip(), answer.group(1).strip()


def extract_concepts(notes: list[NoteRecord]) -> list[ConceptFact]:
    """Scan eligible notes for definitional sentences.

    Every hit is kept, including repeats of the same concept; callers
    deduplicate. An empty result just means the notes hold no definitions.
    """
    concepts = []
    low, high = DEFINITION_SENTENCE_LENGTH
    for note in notes:
        if not is_eligible(note):
            continue
        for sentence in split_sentences(note.content, low, high):
            for matcher in (match_definition, match_what_is):
                found = matcher(sentence)
                if found:
                    concept, definition = found
                    concepts.append(ConceptFact(concept, definition, note.title))
    logger.debug("Extracted %d concepts from %d notes", len(concepts), len(notes))
    return concepts
