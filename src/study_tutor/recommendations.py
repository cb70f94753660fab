"""Study recommendations from quiz history and weak areas."""
from study_tutor.models import Recommendation, SubjectScore, WeakTopic

PRIORITY_ORDER = {"high": 3, "medium": 2, "low": 1}
MAX_RECOMMENDATIONS = 5
LOW_SCORE = 60
LOW_AVERAGE = 70
DECLINE_MARGIN = 10

DEFAULT_RECOMMENDATIONS = [
    Recommendation("default-1", "Start by adding your first note to begin tracking your studies",
                   priority="high", category="study", action="Add Note"),
    Recommendation("default-2", "Take a quiz to test your knowledge and identify areas to improve",
                   priority="medium", category="quiz", action="Start Quiz"),
]


def _mean(values: list[float]) -> float:
    return sum(values) / len(values)


def quiz_recommendations(quiz_scores: list[dict], subjects: list[SubjectScore]) -> list[Recommendation]:
    """Rules over quiz history. ``quiz_scores`` is most recent first, each with subject_name and score."""
    if not quiz_scores:
        return [Recommendation("quiz-1", "Take your first quiz to track your progress",
                               priority="high", category="quiz", action="Start Quiz")]

    recs = []
    low = [q for q in quiz_scores[:3] if q["score"] < LOW_SCORE]
    if low:
        recs.append(Recommendation(
            "quiz-2",
            f"Your recent {low[0]['subject_name']} quiz scored below {LOW_SCORE}%. Review your notes and try again",
            priority="high", category="performance", action="Review Notes",
        ))

    recent = [q["score"] for q in quiz_scores[:3]]
    older = [q["score"] for q in quiz_scores[3:6]]
    if len(quiz_scores) >= 3 and older and _mean(recent) < _mean(older) - DECLINE_MARGIN:
        recs.append(Recommendation(
            "quiz-3", "Your quiz scores have declined recently. Consider reviewing previous topics",
            priority="medium", category="performance", action="Study More",
        ))

    quizzed = {q["subject_name"] for q in quiz_scores}
    unquizzed = [s for s in subjects if s.name not in quizzed and s.notes_count > 0]
    if unquizzed:
        recs.append(Recommendation(
            "quiz-4", f"You haven't quizzed on {unquizzed[0].name} yet. Test your knowledge!",
            priority="medium", category="quiz", action="Start Quiz",
        ))
    return recs


def weak_area_recommendations(weak_topics: list[WeakTopic], subjects: list[SubjectScore]) -> list[Recommendation]:
    recs = []
    if weak_topics:
        weakest = weak_topics[0]
        recs.append(Recommendation(
            "weak-1", f"Focus on {weakest.topic} in {weakest.subject} ({weakest.accuracy}% accuracy)",
            priority="high", category="performance", action="Practice",
        ))
    # A subject without quizzes has no average to judge.
    struggling = [s for s in subjects if s.quiz_count and s.average_score < LOW_AVERAGE]
    if struggling:
        subject = struggling[0]
        recs.append(Recommendation(
            "weak-2", f"{subject.name} needs more attention (avg: {subject.average_score}%)",
            priority="medium", category="performance", action="Study More",
        ))
    return recs


def build_recommendations(
    quiz_scores: list[dict],
    subjects: list[SubjectScore],
    weak_topics: list[WeakTopic],
    limit: int = MAX_RECOMMENDATIONS,
) -> list[Recommendation]:
    recs = quiz_recommendations(quiz_scores, subjects) + weak_area_recommendations(weak_topics, subjects)
    # sorted() is stable, so rule order breaks priority ties
    recs = sorted(recs, key=lambda r: PRIORITY_ORDER[r.priority], reverse=True)[:limit]
    return recs or list(DEFAULT_RECOMMENDATIONS)
