"""WebDAV backup and restore of a whole file tree."""

import io
import json
from contextlib import contextmanager
from typing import Iterator

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError
from webdav4.client import Client, ClientError

from scribe.documents import FileTree
from scribe.domain.note import Folder

SYNC_FILENAME = "synapse-scribe-backup.json"


class WebDAVError(Exception):
    """Raised when the WebDAV server cannot be reached or returns bad data."""


class WebDAVConfig(BaseModel):
    url: str
    username: str | None = None
    password: str | None = None


class WebDAVClient:
    """Uploads and downloads one fixed backup file on a WebDAV server."""

    def __init__(
        self,
        config: WebDAVConfig,
        *,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not config.url:
            raise WebDAVError("WebDAV URL is not configured.")

        self.base_url = config.url if config.url.endswith("/") else f"{config.url}/"
        self.auth = (
            httpx.DigestAuth(config.username, config.password or "") if config.username else None
        )
        self.timeout = timeout
        self.transport = transport

    @contextmanager
    def _client(self) -> Iterator[Client]:
        with httpx.Client(auth=self.auth, timeout=self.timeout, transport=self.transport) as http:
            # Failures end the request; nothing is retried
            yield Client(self.base_url, http_client=http, retry=False)

    def check_connection(self) -> bool:
        try:
            with self._client() as client:
                client.ls("", detail=False)
        except (ClientError, httpx.HTTPError) as e:
            logger.error(f"WebDAV connection check failed: {e}")
            raise WebDAVError(
                "Failed to connect to WebDAV server. Check credentials and URL."
            ) from e
        return True

    def upload_file_tree(self, tree: list[Folder]) -> None:
        content = json.dumps(FileTree.dump_python(tree, mode="json", by_alias=True), indent=2)
        try:
            with self._client() as client:
                client.upload_fileobj(
                    io.BytesIO(content.encode("utf-8")), SYNC_FILENAME, overwrite=True
                )
        except (ClientError, httpx.HTTPError) as e:
            logger.error(f"WebDAV upload failed: {e}")
            raise WebDAVError(f"Failed to upload backup to WebDAV server: {e}") from e

    def download_file_tree(self) -> list[Folder]:
        buffer = io.BytesIO()
        try:
            with self._client() as client:
                if not client.exists(SYNC_FILENAME):
                    raise WebDAVError(f"Backup file '{SYNC_FILENAME}' not found on WebDAV server.")
                client.download_fileobj(SYNC_FILENAME, buffer)
        except (ClientError, httpx.HTTPError) as e:
            logger.error(f"WebDAV download failed: {e}")
            raise WebDAVError(f"Failed to download backup from WebDAV server: {e}") from e

        try:
            return FileTree.validate_json(buffer.getvalue())
        except ValidationError as e:
            raise WebDAVError(f"Backup file '{SYNC_FILENAME}' is not a valid file tree.") from e
