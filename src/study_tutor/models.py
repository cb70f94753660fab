"""Data classes for notes, generated questions and quiz analytics."""
import math
from dataclasses import dataclass
from typing import Optional


@dataclass
class NoteRecord:
    title: str
    content: str


@dataclass
class ConceptFact:
    concept: str
    definition: str
    source_title: str = ""


@dataclass(frozen=True)
class QuizQuestion:
    id: str
    question: str
    options: tuple[str, str, str, str]
    correct_answer: int
    explanation: str
    source_note: Optional[str] = None

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_answer]


@dataclass
class QuestionOutcome:
    question_text: str
    subject_id: str
    subject_name: str
    is_correct: bool


@dataclass
class TopicStat:
    subject_id: str
    subject_name: str
    topic: str
    attempts: int = 0
    incorrect: int = 0

    @property
    def accuracy(self) -> int:
        if self.attempts == 0:
            return 100
        return percent(self.attempts - self.incorrect, self.attempts)


@dataclass
class WeakTopic:
    subject: str
    topic: str
    attempts: int
    accuracy: int


@dataclass
class SubjectScore:
    subject_id: int
    name: str
    quiz_count: int = 0
    average_score: int = 0
    notes_count: int = 0


@dataclass
class Recommendation:
    id: str
    text: str
    priority: str
    category: str
    action: Optional[str] = None


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def percent(part: int, total: int) -> int:
    """Whole-number percentage, halves rounded up (12.5 -> 13)."""
    if total == 0:
        return 0
    return round_half_up(part / total * 100)
