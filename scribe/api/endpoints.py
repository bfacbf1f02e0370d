import re
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response, StreamingResponse
from fastapi.templating import Jinja2Templates
from loguru import logger
from markdownify import markdownify

from scribe.api.auth import get_current_user
from scribe.api.schemas import FolderCreate, NoteContentUpdate, NoteCreate, ok
from scribe.documents import DocumentStore, DuplicateIdError
from scribe.domain.note import Folder
from scribe.llms.schemas import GenerationRequest
from scribe.pipeline import GenerationPipeline


def export_filename(title: str, extension: str = "html") -> str:
    return re.sub(r"[^a-z0-9_.-]", "_", title, flags=re.IGNORECASE).lower() + f".{extension}"


def _create_generate_endpoint(pipeline: GenerationPipeline):
    """Create the AI generation endpoint handler."""

    async def generate(
        body: GenerationRequest,
        username: str = Depends(get_current_user),  # noqa: B008
    ) -> StreamingResponse:
        enabled = sum(1 for config in body.configs if config.enabled)
        logger.info(f"AI generation for {username} with {enabled} enabled agents")
        return StreamingResponse(
            pipeline.run(body.configs),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
            },
        )

    return generate


def _create_export_endpoint(document_store: DocumentStore, templates: Jinja2Templates):
    """Create the note export endpoint handler, as standalone HTML or Markdown."""

    def export_note(
        note_id: str,
        request: Request,
        format: Literal["html", "md"] = "html",
        username: str = Depends(get_current_user),  # noqa: B008
    ):
        note = document_store.get_note(username, note_id)
        if note is None:
            raise HTTPException(status_code=404, detail="Note not found")

        disposition = f'attachment; filename="{export_filename(note.title, format)}"'
        if format == "md":
            return Response(
                markdownify(note.content),
                media_type="text/markdown",
                headers={"Content-Disposition": disposition},
            )
        return templates.TemplateResponse(
            request,
            "export.html",
            {"title": note.title, "content": note.content},
            headers={"Content-Disposition": disposition},
        )

    return export_note


def get_endpoints_router(
    *,
    document_store: DocumentStore,
    pipeline: GenerationPipeline,
    templates: Jinja2Templates,
) -> APIRouter:
    router = APIRouter()

    @router.get("/health")
    async def health_check():
        return {"status": "healthy"}

    @router.get("/api/file-tree")
    def get_file_tree(username: str = Depends(get_current_user)):  # noqa: B008
        return ok(document_store.get_file_tree(username))

    @router.put("/api/file-tree")
    def replace_file_tree(
        tree: list[Folder],
        username: str = Depends(get_current_user),  # noqa: B008
    ):
        try:
            return ok(document_store.replace_file_tree(username, tree))
        except DuplicateIdError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

    @router.post("/api/notes")
    def add_note(
        body: NoteCreate,
        username: str = Depends(get_current_user),  # noqa: B008
    ):
        note = document_store.add_note(username, body.folder_id, body.title)
        if note is None:
            raise HTTPException(status_code=404, detail="Folder not found")
        return ok(note)

    @router.post("/api/folders")
    def add_folder(
        body: FolderCreate,
        username: str = Depends(get_current_user),  # noqa: B008
    ):
        folder = document_store.add_folder(username, body.parent_folder_id, body.name)
        if folder is None:
            raise HTTPException(status_code=404, detail="Parent folder not found")
        return ok(folder)

    @router.put("/api/notes/{note_id}")
    def update_note_content(
        note_id: str,
        body: NoteContentUpdate,
        username: str = Depends(get_current_user),  # noqa: B008
    ):
        note = document_store.update_note_content(username, note_id, body.content)
        if note is None:
            raise HTTPException(status_code=404, detail="Note not found")
        return ok(note)

    @router.delete("/api/notes/{note_id}")
    def delete_note(
        note_id: str,
        username: str = Depends(get_current_user),  # noqa: B008
    ):
        if not document_store.delete_note(username, note_id):
            raise HTTPException(status_code=404, detail="Note not found")
        return ok({"deleted": True})

    @router.delete("/api/folders/{folder_id}")
    def delete_folder(
        folder_id: str,
        username: str = Depends(get_current_user),  # noqa: B008
    ):
        if not document_store.delete_folder(username, folder_id):
            raise HTTPException(status_code=404, detail="Folder not found")
        return ok({"deleted": True})

    router.get("/api/notes/{note_id}/export")(_create_export_endpoint(document_store, templates))
    router.post("/api/ai/generate")(_create_generate_endpoint(pipeline))

    return router
