from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from scribe.api.auth import get_auth_router
from scribe.api.backup import WebDAVClientFactory, get_backup_router
from scribe.api.endpoints import get_endpoints_router
from scribe.api.schemas import failure
from scribe.config import settings
from scribe.documents import DocumentStore
from scribe.pipeline import GenerationPipeline
from scribe.users import UserRegistry
from scribe.webdav import WebDAVClient


def _validation_message(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"] if part != "body")
        messages.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "; ".join(messages) or "Invalid request"


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(failure(str(exc.detail)), status_code=exc.status_code, headers=exc.headers)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(failure(_validation_message(exc)), status_code=400)


def create_app(
    *,
    document_store: DocumentStore,
    user_registry: UserRegistry,
    pipeline: GenerationPipeline,
    webdav_client_factory: WebDAVClientFactory = WebDAVClient,
) -> FastAPI:
    """Create FastAPI app."""
    app = FastAPI(title="Scribe")

    # Signed, expiring session cookie identifies the user on protected routes
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        max_age=settings.session_max_age,
        same_site="lax",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    templates = Jinja2Templates(directory=settings.templates_dir)

    app.include_router(router=get_auth_router(user_registry))
    app.include_router(
        router=get_endpoints_router(
            document_store=document_store, pipeline=pipeline, templates=templates
        )
    )
    app.include_router(
        router=get_backup_router(
            document_store=document_store, webdav_client_factory=webdav_client_factory
        )
    )

    return app
