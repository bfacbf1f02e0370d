from tests.fakes.fake_llm import FakeLLMBackend
from tests.fakes.fake_webdav import InMemoryWebDAVServer

__all__ = ["FakeLLMBackend", "InMemoryWebDAVServer"]
