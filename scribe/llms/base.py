from typing import AsyncGenerator, Protocol


class LLMBackend(Protocol):
    async def complete(self, model: str, prompt: str) -> str:
        """Run a single-shot completion and return its full text."""
        ...

    def stream(self, model: str, prompt: str) -> AsyncGenerator[str, None]:
        """Stream a completion, yielding only new content chunks."""
        ...
