"""Per-user file tree storage.

Every user's folders and notes are persisted as a single record. All
mutations read the whole tree, change it in memory and write the whole tree
back, holding a per-user lock for the duration of that round trip.
"""

import threading
from collections import defaultdict
from contextlib import contextmanager
from datetime import timedelta
from typing import Iterator

from loguru import logger
from pydantic import TypeAdapter

from scribe.domain.note import Folder, Note, utc_now
from scribe.file_tree import (
    default_file_tree,
    default_note_content,
    find_duplicate_ids,
    find_folder,
    find_note,
    remove_folder,
    remove_note,
)
from scribe.storage.base import KeyValueStore

FileTree = TypeAdapter(list[Folder])


class DuplicateIdError(Exception):
    """Raised when a file tree reuses a folder or note id."""

    def __init__(self, ids: list[str]) -> None:
        super().__init__(f"Duplicate ids in file tree: {', '.join(ids)}")
        self.ids = ids


def file_tree_key(user_id: str) -> str:
    return f"file_tree:{user_id}"


class DocumentStore:
    """CRUD over each user's folder/note tree.

    The user id is trusted as given; authentication happens before a request
    reaches the store. Not-found cases return None or False instead of raising.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store
        self._locks: defaultdict[str, threading.Lock] = defaultdict(threading.Lock)
        self._locks_guard = threading.Lock()

    @contextmanager
    def _user_lock(self, user_id: str) -> Iterator[None]:
        with self._locks_guard:
            lock = self._locks[user_id]
        with lock:
            yield

    def _load(self, user_id: str) -> list[Folder] | None:
        data = self._store.get(file_tree_key(user_id))
        if data is None:
            return None
        return FileTree.validate_python(data)

    def _save(self, user_id: str, tree: list[Folder]) -> None:
        data = FileTree.dump_python(tree, mode="json", by_alias=True)
        self._store.put(file_tree_key(user_id), data)

    def _load_or_seed(self, user_id: str) -> list[Folder]:
        tree = self._load(user_id)
        if tree is None:
            logger.info(f"Seeding default file tree for {user_id}")
            tree = default_file_tree()
            self._save(user_id, tree)
        return tree

    def seed(self, user_id: str) -> list[Folder]:
        """Overwrite the user's tree with the starter tree."""
        with self._user_lock(user_id):
            tree = default_file_tree()
            self._save(user_id, tree)
            return tree

    def get_file_tree(self, user_id: str) -> list[Folder]:
        with self._user_lock(user_id):
            return self._load_or_seed(user_id)

    def get_note(self, user_id: str, note_id: str) -> Note | None:
        with self._user_lock(user_id):
            found = find_note(self._load_or_seed(user_id), note_id)
            return found[0] if found else None

    def add_note(self, user_id: str, folder_id: str, title: str) -> Note | None:
        """Create a note at the top of a folder's note list."""
        with self._user_lock(user_id):
            tree = self._load_or_seed(user_id)
            folder = find_folder(tree, folder_id)
            if folder is None:
                logger.warning(f"Folder {folder_id} not found for {user_id}")
                return None

            now = utc_now()
            note = Note(
                title=title,
                content=default_note_content(title),
                created_at=now,
                updated_at=now,
            )
            folder.notes.insert(0, note)
            self._save(user_id, tree)
            logger.info(f"Created note {note.id} in folder {folder_id} for {user_id}")
            return note

    def add_folder(self, user_id: str, parent_folder_id: str | None, name: str) -> Folder | None:
        """Create a folder as the last child of its parent, or at the root.

        Returns None without writing anything when the parent does not exist.
        """
        with self._user_lock(user_id):
            tree = self._load_or_seed(user_id)
            folder = Folder(name=name)
            if parent_folder_id:
                parent = find_folder(tree, parent_folder_id)
                if parent is None:
                    logger.warning(f"Parent folder {parent_folder_id} not found for {user_id}")
                    return None
                parent.folders.append(folder)
            else:
                tree.append(folder)
            self._save(user_id, tree)
            logger.info(f"Created folder {folder.id} for {user_id}")
            return folder

    def update_note_content(self, user_id: str, note_id: str, content: str) -> Note | None:
        with self._user_lock(user_id):
            tree = self._load_or_seed(user_id)
            found = find_note(tree, note_id)
            if found is None:
                logger.warning(f"Note {note_id} not found for {user_id}")
                return None

            note, _ = found
            note.content = content
            # Keep updatedAt strictly increasing even on a coarse clock
            note.updated_at = max(utc_now(), note.updated_at + timedelta(microseconds=1))
            self._save(user_id, tree)
            return note

    def delete_note(self, user_id: str, note_id: str) -> bool:
        with self._user_lock(user_id):
            tree = self._load_or_seed(user_id)
            removed = remove_note(tree, note_id)
            if removed:
                self._save(user_id, tree)
                logger.info(f"Deleted note {note_id} for {user_id}")
            return removed

    def delete_folder(self, user_id: str, folder_id: str) -> bool:
        """Delete a folder and everything beneath it."""
        with self._user_lock(user_id):
            tree = self._load_or_seed(user_id)
            removed = remove_folder(tree, folder_id)
            if removed:
                self._save(user_id, tree)
                logger.info(f"Deleted folder {folder_id} for {user_id}")
            return removed

    def replace_file_tree(self, user_id: str, tree: list[Folder]) -> list[Folder]:
        """Overwrite a user's whole tree, e.g. when restoring a backup.

        Raises:
            DuplicateIdError: If any folder or note id appears more than once.
        """
        duplicates = find_duplicate_ids(tree)
        if duplicates:
            raise DuplicateIdError(duplicates)

        with self._user_lock(user_id):
            self._save(user_id, tree)
            logger.info(f"Replaced file tree for {user_id}")
            return tree
