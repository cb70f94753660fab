"""Import study notes from various file formats."""
import json
import logging
import re
from pathlib import Path

from study_tutor.notes import add_note

logger = logging.getLogger(__name__)

TITLE_MAX = 60
MARKDOWN_PREFIX = re.compile(r"^[#>*\-\s]+")


def read_file_content(file_path: str) -> str:
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix in (".txt", ".md"):
        return path.read_text()
    elif suffix == ".json":
        data = json.loads(path.read_text())
        if isinstance(data, dict) and isinstance(data.get("content"), str):
            return data["content"]
        return json.dumps(data, indent=2) if isinstance(data, dict) else str(data)
    elif suffix in (".yaml", ".yml"):
        import yaml
        data = yaml.safe_load(path.read_text())
        if isinstance(data, dict) and isinstance(data.get("content"), str):
            return data["content"]
        return str(data)
    elif suffix == ".pdf":
        from PyPDF2 import PdfReader
        reader = PdfReader(file_path)
        return "\n".join(page.extract_text() or "" for page in reader.pages)
    elif suffix == ".docx":
        from docx import Document
        doc = Document(file_path)
        return "\n".join(p.text for p in doc.paragraphs)
    elif suffix in (".html", ".htm"):
        from bs4 import BeautifulSoup
        html = path.read_text()
        return BeautifulSoup(html, "html.parser").get_text()
    else:
        # Try reading as plain text
        return path.read_text()


def derive_title(content: str, fallback: str) -> str:
    """First non-empty line with markdown markers stripped, else ``fallback``."""
    for line in content.splitlines():
        line = MARKDOWN_PREFIX.sub("", line).strip()
        if line:
            return line[:TITLE_MAX]
    return fallback


def import_file(db_path: str, file_path: str, subject_id: int, title: str | None = None) -> dict:
    """Read a file and store it as a note under ``subject_id``."""
    content = read_file_content(file_path)
    name = Path(file_path).name
    if title is None:
        title = derive_title(content, Path(file_path).stem)
    note_id = add_note(db_path, subject_id, title, content, source=name)
    logger.info("Imported %s as note %d (%d chars)", name, note_id, len(content))
    return {"filename": name, "note_id": note_id, "title": title, "length": len(content)}
