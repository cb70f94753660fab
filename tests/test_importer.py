# tests/test_importer.py
from study_tutor.db import init_db
from study_tutor.importer import derive_title, import_file, read_file_content
from study_tutor.notes import add_subject, get_notes_for_subject


def test_read_txt_file(tmp_path):
    f = tmp_path / "notes.txt"
    f.write_text("The Heart is a muscular organ that pumps blood.")
    content = read_file_content(str(f))
    assert "muscular organ" in content


def test_read_md_file(tmp_path):
    f = tmp_path / "notes.md"
    f.write_text("# Cells\n\nMitosis is cell division.")
    content = read_file_content(str(f))
    assert "Mitosis" in content


def test_read_json_content_field(tmp_path):
    f = tmp_path / "note.json"
    f.write_text('{"title": "Kidney", "content": "The Kidney filters blood."}')
    assert read_file_content(str(f)) == "The Kidney filters blood."


def test_read_json_without_content(tmp_path):
    f = tmp_path / "notes.json"
    f.write_text('{"notes": "Osmosis moves water"}')
    assert "Osmosis" in read_file_content(str(f))


def test_read_yaml_content_field(tmp_path):
    f = tmp_path / "note.yaml"
    f.write_text("title: Liver\ncontent: The Liver is the largest internal organ.\n")
    assert read_file_content(str(f)) == "The Liver is the largest internal organ."


def test_read_html_file(tmp_path):
    f = tmp_path / "note.html"
    f.write_text("<html><body><h1>Lungs</h1><p>Lungs are organs of respiration.</p></body></html>")
    content = read_file_content(str(f))
    assert "Lungs are organs of respiration." in content
    assert "<p>" not in content


def test_derive_title():
    assert derive_title("# Cardiology Basics\n\nThe Heart is a pump.", "fallback") == "Cardiology Basics"
    assert derive_title("\n\n- first bullet\nmore", "fallback") == "first bullet"
    assert derive_title("   \n", "fallback") == "fallback"
    assert len(derive_title("x" * 100, "fallback")) == 60


def test_import_file(tmp_path, tmp_db):
    init_db(tmp_db)
    subject_id = add_subject(tmp_db, "Anatomy")
    f = tmp_path / "heart.md"
    f.write_text("# Heart\n\nThe Heart is a muscular organ that pumps blood throughout the body.")
    result = import_file(tmp_db, str(f), subject_id)
    assert result["filename"] == "heart.md"
    assert result["title"] == "Heart"
    notes = get_notes_for_subject(tmp_db, subject_id)
    assert len(notes) == 1
    assert "muscular organ" in notes[0].content


def test_import_file_with_title(tmp_path, tmp_db):
    init_db(tmp_db)
    subject_id = add_subject(tmp_db, "Anatomy")
    f = tmp_path / "lecture3.txt"
    f.write_text("The Kidney filters blood and produces urine.")
    result = import_file(tmp_db, str(f), subject_id, title="Renal")
    assert get_notes_for_subject(tmp_db, subject_id)[0].title == "Renal"
    assert result["length"] == len("The Kidney filters blood and produces urine.")
