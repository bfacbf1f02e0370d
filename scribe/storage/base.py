from typing import Any, List, Protocol


class KeyValueStore(Protocol):
    """Protocol for the persistence layer behind users and file trees."""

    def get(self, key: str) -> Any | None:
        """Get the JSON-compatible value stored under a key, or None."""
        ...

    def put(self, key: str, value: Any) -> None:
        """Store a JSON-compatible value, replacing any previous one."""
        ...

    def delete(self, key: str) -> bool:
        """Delete a key, returning whether it existed."""
        ...

    def keys(self) -> List[str]:
        """Get all stored keys."""
        ...
