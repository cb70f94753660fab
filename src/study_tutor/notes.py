"""Subjects and the notes filed under them."""
import logging
from datetime import datetime

from study_tutor.db import get_connection
from study_tutor.models import NoteRecord

logger = logging.getLogger(__name__)


def add_subject(db_path: str, name: str) -> int:
    """Create a subject, or return the id of the existing one with that name."""
    name = name.strip()
    conn = get_connection(db_path)
    conn.execute(
        "INSERT OR IGNORE INTO subjects (name, created_at) VALUES (?, ?)",
        (name, datetime.now().isoformat()),
    )
    conn.commit()
    subject_id = conn.execute("SELECT id FROM subjects WHERE name = ?", (name,)).fetchone()["id"]
    conn.close()
    return subject_id


def get_subjects(db_path: str) -> list:
    conn = get_connection(db_path)
    subjects = conn.execute(
        """SELECT s.id, s.name, COUNT(n.id) as notes_count
        FROM subjects s LEFT JOIN notes n ON n.subject_id = s.id
        GROUP BY s.id ORDER BY s.name"""
    ).fetchall()
    conn.close()
    return subjects


def get_subject_by_name(db_path: str, name: str) -> dict | None:
    conn = get_connection(db_path)
    row = conn.execute(
        "SELECT * FROM subjects WHERE name = ? COLLATE NOCASE", (name.strip(),)
    ).fetchone()
    conn.close()
    return dict(row) if row else None


def add_note(db_path: str, subject_id: int, title: str, content: str, source: str = "manual") -> int:
    conn = get_connection(db_path)
    note_id = conn.execute(
        "INSERT INTO notes (subject_id, title, content, source, created_at) VALUES (?, ?, ?, ?, ?)",
        (subject_id, title, content, source, datetime.now().isoformat()),
    ).lastrowid
    conn.commit()
    conn.close()
    logger.debug("Added note %d (%s) to subject %d", note_id, title, subject_id)
    return note_id


def get_notes_for_subject(db_path: str, subject_id: int) -> list[NoteRecord]:
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT title, content FROM notes WHERE subject_id = ? ORDER BY id", (subject_id,)
    ).fetchall()
    conn.close()
    return [NoteRecord(title=row["title"], content=row["content"]) for row in rows]


def count_notes(db_path: str, subject_id: int | None = None) -> int:
    conn = get_connection(db_path)
    if subject_id is None:
        count = conn.execute("SELECT COUNT(*) FROM notes").fetchone()[0]
    else:
        count = conn.execute("SELECT COUNT(*) FROM notes WHERE subject_id = ?", (subject_id,)).fetchone()[0]
    conn.close()
    return count
