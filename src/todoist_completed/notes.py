# SPDX-FileCopyrightText: 2025 Todoist Completed Contributors
# SPDX-License-Identifier: MPL-2.0

"""Insert Markdown fragments into note files."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def insert_fragment(note_path: Path, fragment: str, after: str | None = None) -> bool:
    """Insert a fragment into a note.

    Args:
        note_path: Markdown note to modify (created if missing)
        fragment: Text to insert; nothing happens when empty
        after: Insert right after the first line equal to this (stripped);
            append at the end when not given or not found

    Returns:
        True if the note was modified
    """
    if not fragment:
        return False

    text = note_path.read_text(encoding="utf-8") if note_path.exists() else ""
    lines = text.splitlines(keepends=True)

    index = len(lines)
    if after is not None:
        marker = after.strip()
        for i, line in enumerate(lines):
            if line.strip() == marker:
                index = i + 1
                break
        else:
            logger.warning(f"Marker {marker!r} not found in {note_path}, appending")

    head = "".join(lines[:index])
    if head and not head.endswith("\n"):
        head += "\n"
    note_path.write_text(head + fragment + "".join(lines[index:]), encoding="utf-8")
    return True
