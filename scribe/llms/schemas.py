from pydantic import BaseModel, Field

from scribe.config import settings

DEFAULT_MODEL = "gemini-1.5-flash-latest"


class AgentConfig(BaseModel):
    """One step of the generation chain."""

    enabled: bool = False
    prompt: str = ""
    model: str = Field(DEFAULT_MODEL, description="Model identifier, routed by prefix")


class GenerationRequest(BaseModel):
    configs: list[AgentConfig] = Field(..., max_length=settings.max_agents)
