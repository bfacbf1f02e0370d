"""Search and mutation helpers over a user's file tree.

A file tree is an ordered list of top-level folders. Every helper walks it
pre-order, depth first, and stops at the first match. Ids are assumed to be
unique within a tree; when they are not, only the first match is affected.
"""

from html import escape
from typing import Iterator

from scribe.domain.note import Folder, Note

WELCOME_CONTENT = (
    "<h2>Welcome to Synapse Scribe!</h2>"
    "<p>This is your first note. You can edit it, create new notes, "
    "and organize them into folders.</p>"
    "<p>Use the toolbar to format your text. Happy writing!</p>"
)


def default_file_tree() -> list[Folder]:
    """Build the starter tree given to every new user."""
    return [
        Folder(
            name="Getting Started",
            notes=[Note(title="Welcome to Synapse Scribe", content=WELCOME_CONTENT)],
        )
    ]


def default_note_content(title: str) -> str:
    return f"<h2>{escape(title)}</h2><p>Start writing here...</p>"


def find_folder(folders: list[Folder], folder_id: str) -> Folder | None:
    for folder in folders:
        if folder.id == folder_id:
            return folder
        found = find_folder(folder.folders, folder_id)
        if found is not None:
            return found
    return None


def find_note(folders: list[Folder], note_id: str) -> tuple[Note, Folder] | None:
    """Find a note and the folder that owns it.

    A folder's own notes are checked before any of its sub-folders.
    """
    for folder in folders:
        for note in folder.notes:
            if note.id == note_id:
                return note, folder
        found = find_note(folder.folders, note_id)
        if found is not None:
            return found
    return None


def remove_note(folders: list[Folder], note_id: str) -> bool:
    for folder in folders:
        for index, note in enumerate(folder.notes):
            if note.id == note_id:
                del folder.notes[index]
                return True
        if remove_note(folder.folders, note_id):
            return True
    return False


def remove_folder(folders: list[Folder], folder_id: str) -> bool:
    """Remove a folder together with everything beneath it.

    The current level is searched before descending.
    """
    for index, folder in enumerate(folders):
        if folder.id == folder_id:
            del folders[index]
            return True
    for folder in folders:
        if remove_folder(folder.folders, folder_id):
            return True
    return False


def iter_ids(folders: list[Folder]) -> Iterator[str]:
    """Yield every folder and note id in the tree, pre-order."""
    for folder in folders:
        yield folder.id
        for note in folder.notes:
            yield note.id
        yield from iter_ids(folder.folders)


def find_duplicate_ids(folders: list[Folder]) -> list[str]:
    seen: set[str] = set()
    duplicates: list[str] = []
    for item_id in iter_ids(folders):
        if item_id in seen and item_id not in duplicates:
            duplicates.append(item_id)
        seen.add(item_id)
    return duplicates
