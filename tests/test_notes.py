"""Tests for note insertion."""

from todoist_completed.notes import insert_fragment

FRAGMENT = "## Tasks Completed Today\n\n### Work\n- [A](url)\n\n"


def test_appends_by_default(tmp_path):
    """Without a marker the fragment goes at the end."""
    note = tmp_path / "2024-05-01.md"
    note.write_text("# Daily\nno trailing newline")

    assert insert_fragment(note, FRAGMENT) is True

    assert note.read_text() == "# Daily\nno trailing newline\n" + FRAGMENT


def test_inserts_after_marker(tmp_path):
    """The fragment goes right after the marker line."""
    note = tmp_path / "2024-05-01.md"
    note.write_text("# Daily\n## Log\n## Ideas\n")

    insert_fragment(note, FRAGMENT, after="## Log")

    assert note.read_text() == "# Daily\n## Log\n" + FRAGMENT + "## Ideas\n"


def test_missing_marker_appends(tmp_path):
    """An unknown marker falls back to appending."""
    note = tmp_path / "note.md"
    note.write_text("# Daily\n")

    insert_fragment(note, FRAGMENT, after="## Nowhere")

    assert note.read_text() == "# Daily\n" + FRAGMENT


def test_empty_fragment_leaves_note_alone(tmp_path):
    """An empty fragment does not touch the note."""
    note = tmp_path / "note.md"
    note.write_text("# Daily\n")

    assert insert_fragment(note, "") is False
    assert note.read_text() == "# Daily\n"


def test_creates_missing_note(tmp_path):
    """A missing note is created."""
    note = tmp_path / "new.md"

    insert_fragment(note, FRAGMENT)

    assert note.read_text() == FRAGMENT
