from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from scribe.api import create_app
from scribe.documents import DocumentStore
from scribe.llms.router import ModelRouter
from scribe.pipeline import GenerationPipeline
from scribe.storage.local import LocalKeyValueStore
from scribe.users import UserRegistry
from scribe.webdav import WebDAVClient, WebDAVConfig
from tests.fakes import FakeLLMBackend, InMemoryWebDAVServer


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "scribe.json"


@pytest.fixture
def kv_store(store_path: Path) -> LocalKeyValueStore:
    return LocalKeyValueStore(store_path)


@pytest.fixture
def document_store(kv_store: LocalKeyValueStore) -> DocumentStore:
    return DocumentStore(kv_store)


@pytest.fixture
def user_registry(kv_store: LocalKeyValueStore, document_store: DocumentStore) -> UserRegistry:
    return UserRegistry(kv_store, document_store)


@pytest.fixture
def gemini_backend() -> FakeLLMBackend:
    return FakeLLMBackend(completion_prefix="GEMINI:")


@pytest.fixture
def default_backend() -> FakeLLMBackend:
    return FakeLLMBackend()


@pytest.fixture
def pipeline(gemini_backend: FakeLLMBackend, default_backend: FakeLLMBackend) -> GenerationPipeline:
    router = ModelRouter(gemini=gemini_backend, default=default_backend)
    return GenerationPipeline(router, step_timeout=5.0)


@pytest.fixture
def webdav_server() -> InMemoryWebDAVServer:
    return InMemoryWebDAVServer()


@pytest.fixture
def test_client(
    document_store: DocumentStore,
    user_registry: UserRegistry,
    pipeline: GenerationPipeline,
    webdav_server: InMemoryWebDAVServer,
) -> TestClient:
    """Create test client backed by a temporary store and fake backends."""

    def webdav_client_factory(config: WebDAVConfig) -> WebDAVClient:
        return WebDAVClient(config, transport=webdav_server.transport)

    app = create_app(
        document_store=document_store,
        user_registry=user_registry,
        pipeline=pipeline,
        webdav_client_factory=webdav_client_factory,
    )
    return TestClient(app)


@pytest.fixture
def logged_in_client(test_client: TestClient) -> TestClient:
    response = test_client.post(
        "/api/auth/register", json={"username": "alice", "password": "secret"}
    )
    assert response.status_code == 200, response.text
    return test_client
