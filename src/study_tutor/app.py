"""Interactive CLI application."""
import logging
import os
import time
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

from study_tutor.dashboard import get_overall_average, get_recent_scores, get_score_color, get_subject_scores
from study_tutor.db import DEFAULT_DB_PATH, init_db
from study_tutor.importer import import_file
from study_tutor.models import QuizQuestion
from study_tutor.notes import add_note, add_subject, get_notes_for_subject, get_subject_by_name, get_subjects
from study_tutor.quiz import generate_quiz_from_notes, save_quiz_attempt, score_answers
from study_tutor.recommendations import build_recommendations
from study_tutor.review import get_weak_topics

console = Console()
logger = logging.getLogger(__name__)

OPTION_LETTERS = ["a", "b", "c", "d"]
EXIT_WORDS = ("q", "menu")


class SessionExitRequested(Exception):
    """Raised when the user leaves a quiz before finishing it."""


def configure_logging(level: str | None = None) -> None:
    level = level or os.environ.get("STUDY_TUTOR_LOG_LEVEL", "WARNING")
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def session_prompt(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def session_int_prompt(prompt: str, choices: list[str] | None = None, **kwargs) -> int:
    answer = session_prompt(prompt, choices=choices, **kwargs)
    return int(answer)


def show_welcome():
    console.print(Panel(
        "[bold]Study Tutor[/bold]\n[dim]Quizzes from your own notes[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("notes", "List subjects and notes"),
        ("add", "Write a note"),
        ("import", "Import a note from a file"),
        ("quiz", "Quiz yourself on a subject"),
        ("weak", "Show weak topics"),
        ("dashboard", "Scores + recommendations"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def choose_subject(db_path: str, create: bool = False) -> dict | None:
    subjects = get_subjects(db_path)
    if subjects:
        console.print("Subjects: " + ", ".join(f"[cyan]{s['name']}[/cyan]" for s in subjects))
    name = Prompt.ask("Subject").strip()
    if not name:
        return None
    subject = get_subject_by_name(db_path, name)
    if subject is None and create:
        subject = {"id": add_subject(db_path, name), "name": name}
    if subject is None:
        console.print(f"[red]No subject named {name}[/red]")
    return subject


def run_quiz_session(questions: list[QuizQuestion]) -> dict[str, int]:
    """Ask each question in turn. Returns answer index keyed by question id."""
    answers = {}
    console.print(f"\n[bold]Quiz[/bold]: {len(questions)} questions [dim](q to stop)[/dim]\n")
    for i, q in enumerate(questions, 1):
        console.print(f"[bold]Q{i}.[/bold] {q.question}\n")
        for letter, option in zip(OPTION_LETTERS, q.options):
            console.print(f"  [cyan]{letter})[/cyan] {option}")
        answer = session_prompt("\nYour answer", choices=OPTION_LETTERS + list(EXIT_WORDS))
        answers[q.id] = OPTION_LETTERS.index(answer)
        if answers[q.id] == q.correct_answer:
            console.print("[green]Correct![/green]")
        else:
            letter = OPTION_LETTERS[q.correct_answer]
            console.print(f"[red]Incorrect.[/red] Answer: [green]{letter}) {q.correct_option}[/green]")
        console.print(f"[dim]{q.explanation}[/dim]\n")
    correct, total, score = score_answers(questions, answers)
    color = get_score_color(score)
    console.print(f"[bold]Score: [{color}]{correct}/{total} ({score}%)[/{color}][/bold]\n")
    return answers


def cmd_notes(db_path: str):
    subjects = get_subjects(db_path)
    if not subjects:
        console.print("[yellow]No subjects yet. Use 'add' or 'import' to write your first note.[/yellow]")
        return
    table = Table(title="Subjects")
    table.add_column("Subject", style="cyan")
    table.add_column("Notes", justify="right")
    for s in subjects:
        table.add_row(s["name"], str(s["notes_count"]))
    console.print(table)


def cmd_add(db_path: str):
    subject = choose_subject(db_path, create=True)
    if subject is None:
        return
    title = Prompt.ask("Title")
    content = Prompt.ask("Content")
    add_note(db_path, subject["id"], title, content)
    console.print(f"[green]Saved note '{title}' in {subject['name']}[/green]")


def cmd_import(db_path: str):
    file_path = Prompt.ask("File path")
    if not Path(file_path).exists():
        console.print(f"[red]File not found: {file_path}[/red]")
        return
    subject = choose_subject(db_path, create=True)
    if subject is None:
        return
    result = import_file(db_path, file_path, subject["id"])
    console.print(
        f"[green]Imported {result['filename']} ({result['length']} chars) → '{result['title']}' in {subject['name']}[/green]"
    )


def cmd_quiz(db_path: str):
    console.print("\n[bold]Quiz From Notes[/bold]")
    subject = choose_subject(db_path)
    if subject is None:
        return
    count = IntPrompt.ask("Number of questions", default=10)
    questions = generate_quiz_from_notes(get_notes_for_subject(db_path, subject["id"]), count)
    if not questions:
        console.print("[yellow]Not enough notes to build a quiz. Add longer notes with definitions.[/yellow]")
        return
    if len(questions) < count:
        console.print(f"[dim]Only {len(questions)} questions could be made from your notes.[/dim]")
    started = time.monotonic()
    try:
        answers = run_quiz_session(questions)
    except SessionExitRequested:
        console.print("[dim]Quiz abandoned, nothing saved.[/dim]")
        return
    minutes = round((time.monotonic() - started) / 60)
    save_quiz_attempt(db_path, subject["id"], questions, answers, time_spent=minutes)


def show_weak_topics(weak_topics: list) -> None:
    if not weak_topics:
        console.print("[green]No weak areas yet. Keep quizzing![/green]")
        return
    table = Table(title="Weak Topics")
    table.add_column("Subject", style="cyan")
    table.add_column("Topic")
    table.add_column("Accuracy", justify="right")
    table.add_column("Attempts", justify="right")
    for w in weak_topics:
        color = get_score_color(w.accuracy)
        table.add_row(w.subject, w.topic, f"[{color}]{w.accuracy}%[/{color}]", str(w.attempts))
    console.print(table)


def cmd_weak(db_path: str):
    console.print("\n[bold]Weak Area Review[/bold]\n")
    show_weak_topics(get_weak_topics(db_path))


def cmd_dashboard(db_path: str):
    subjects = get_subject_scores(db_path)
    recent = get_recent_scores(db_path)
    average = get_overall_average(db_path)
    total_quizzes = sum(s.quiz_count for s in subjects)
    color = get_score_color(average)
    console.print(Panel(
        f"[bold]{total_quizzes}[/bold] quizzes • [{color}]{average}%[/{color}] average",
        title="Dashboard", border_style="blue",
    ))

    table = Table(title="Subjects")
    table.add_column("Subject", style="cyan")
    table.add_column("Notes", justify="right")
    table.add_column("Quizzes", justify="right")
    table.add_column("Average", justify="right")
    for s in subjects:
        sc_color = get_score_color(s.average_score)
        avg = f"[{sc_color}]{s.average_score}%[/{sc_color}]" if s.quiz_count else "-"
        table.add_row(s.name, str(s.notes_count), str(s.quiz_count), avg)
    console.print(table)

    if recent:
        scores = "  ".join(
            f"[{get_score_color(r['score'])}]{r['score']}%[/{get_score_color(r['score'])}]" for r in recent
        )
        console.print(f"\n  Recent scores: {scores}")

    weak = get_weak_topics(db_path)
    show_weak_topics(weak)

    console.print("\n[bold]Recommendations:[/bold]")
    for rec in build_recommendations(recent, subjects, weak):
        marker = "[red]![/red]" if rec.priority == "high" else "[dim]-[/dim]"
        console.print(f"  {marker} {rec.text}")


def main():
    configure_logging()
    db_path = DEFAULT_DB_PATH
    init_db(db_path)
    show_welcome()

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="quiz").strip().lower()
        try:
            if choice == "notes":
                cmd_notes(db_path)
            elif choice == "add":
                cmd_add(db_path)
            elif choice == "import":
                cmd_import(db_path)
            elif choice == "quiz":
                cmd_quiz(db_path)
            elif choice == "weak":
                cmd_weak(db_path)
            elif choice == "dashboard":
                cmd_dashboard(db_path)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Happy studying![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            logger.debug("Command %s failed", choice, exc_info=True)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
