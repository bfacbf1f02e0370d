import base64
import functools
import hashlib
import threading

import bcrypt
from loguru import logger

from scribe.documents import DocumentStore
from scribe.domain.user import User
from scribe.storage.base import KeyValueStore


def _prehash(password: str) -> bytes:
    # bcrypt only accepts 72 bytes
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def hash_password(password: str) -> str:
    """Hash a password with a fresh random salt."""
    return bcrypt.hashpw(_prehash(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_prehash(password), password_hash.encode("utf-8"))
    except ValueError:
        return False


@functools.cache
def _dummy_hash() -> str:
    return hash_password("no-such-user")


def user_key(username: str) -> str:
    return f"user:{username}"


class UserRegistry:
    """Username/password registration and verification."""

    def __init__(self, store: KeyValueStore, documents: DocumentStore) -> None:
        self._store = store
        self._documents = documents
        self._lock = threading.Lock()

    def get_user(self, username: str) -> User | None:
        data = self._store.get(user_key(username))
        if data is None:
            return None
        return User.model_validate(data)

    def register_user(self, username: str, password: str) -> bool:
        """Create a user with a starter file tree.

        Returns False if the username is already taken.
        """
        with self._lock:
            if self.get_user(username) is not None:
                logger.warning(f"Registration rejected, username {username} exists")
                return False

            user = User(username=username, password_hash=hash_password(password))
            self._store.put(user_key(username), user.model_dump(by_alias=True))
        self._documents.seed(username)
        logger.info(f"Registered user {username}")
        return True

    def login_user(self, username: str, password: str) -> bool:
        """Check credentials without revealing which part was wrong."""
        user = self.get_user(username)
        # Unknown users pay the same bcrypt cost as a wrong password
        password_hash = user.password_hash if user is not None else _dummy_hash()
        if not verify_password(password, password_hash) or user is None:
            logger.warning(f"Failed login for {username}")
            return False
        return True
