import sys

from loguru import logger

from scribe.api import create_app
from scribe.config import settings
from scribe.documents import DocumentStore
from scribe.llms.openai_backend import OpenAICompatibleBackend
from scribe.llms.router import ModelRouter
from scribe.pipeline import GenerationPipeline
from scribe.storage.local import LocalKeyValueStore
from scribe.users import UserRegistry

logger.configure(handlers=[{"sink": sys.stderr, "level": settings.log_level}])

logger.info(f"Initializing Scribe with storage at {settings.data_path}")
store = LocalKeyValueStore(settings.data_path)
document_store = DocumentStore(store)
user_registry = UserRegistry(store, document_store)

router = ModelRouter(
    gemini=OpenAICompatibleBackend.from_credentials(
        base_url=settings.gemini_base_url,
        api_key=settings.gemini_api_key,
        timeout=settings.ai_step_timeout,
    ),
    default=OpenAICompatibleBackend.from_credentials(
        base_url=settings.openrouter_base_url,
        api_key=settings.openrouter_api_key,
        timeout=settings.ai_step_timeout,
    ),
)
pipeline = GenerationPipeline(router, step_timeout=settings.ai_step_timeout)

app = create_app(
    document_store=document_store,
    user_registry=user_registry,
    pipeline=pipeline,
)
