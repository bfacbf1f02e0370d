from typing import Callable

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from scribe.api.auth import get_current_user
from scribe.api.schemas import ok
from scribe.documents import DocumentStore, DuplicateIdError
from scribe.webdav import WebDAVClient, WebDAVConfig, WebDAVError

WebDAVClientFactory = Callable[[WebDAVConfig], WebDAVClient]


def get_backup_router(
    *,
    document_store: DocumentStore,
    webdav_client_factory: WebDAVClientFactory,
) -> APIRouter:
    """Routes that copy the caller's file tree to and from a WebDAV server."""
    router = APIRouter(prefix="/api/webdav")

    def _client(config: WebDAVConfig) -> WebDAVClient:
        try:
            return webdav_client_factory(config)
        except WebDAVError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

    @router.post("/check")
    def check_connection(
        config: WebDAVConfig,
        _: str = Depends(get_current_user),  # noqa: B008
    ):
        try:
            _client(config).check_connection()
        except WebDAVError as e:
            raise HTTPException(status_code=502, detail=str(e)) from e
        return ok({"connected": True})

    @router.post("/backup")
    def backup(
        config: WebDAVConfig,
        username: str = Depends(get_current_user),  # noqa: B008
    ):
        client = _client(config)
        try:
            client.upload_file_tree(document_store.get_file_tree(username))
        except WebDAVError as e:
            raise HTTPException(status_code=502, detail=str(e)) from e
        logger.info(f"Backed up file tree for {username} to WebDAV")
        return ok({"uploaded": True})

    @router.post("/restore")
    def restore(
        config: WebDAVConfig,
        username: str = Depends(get_current_user),  # noqa: B008
    ):
        client = _client(config)
        try:
            tree = client.download_file_tree()
        except WebDAVError as e:
            raise HTTPException(status_code=502, detail=str(e)) from e

        try:
            restored = document_store.replace_file_tree(username, tree)
        except DuplicateIdError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        logger.info(f"Restored file tree for {username} from WebDAV")
        return ok(restored)

    return router
