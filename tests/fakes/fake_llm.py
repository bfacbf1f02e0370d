import asyncio
from typing import AsyncGenerator, List

from scribe.llms.base import LLMBackend


def chunk_text(text: str, size: int = 4) -> List[str]:
    return [text[i : i + size] for i in range(0, len(text), size)]


class FakeLLMBackend(LLMBackend):
    """Fake backend that echoes completions and streams its prompt back.

    Args:
        completion_prefix: Prepended to the prompt to form a completion.
        stream_chunks: Chunks to stream instead of the prompt.
        complete_error: Raised by complete() when set.
        fail_after: Number of chunks streamed before raising.
        hang: Block forever after the last chunk instead of finishing.
    """

    def __init__(
        self,
        *,
        completion_prefix: str = "ECHO:",
        stream_chunks: List[str] | None = None,
        complete_error: Exception | None = None,
        fail_after: int | None = None,
        hang: bool = False,
    ) -> None:
        self.completion_prefix = completion_prefix
        self.stream_chunks = stream_chunks
        self.complete_error = complete_error
        self.fail_after = fail_after
        self.hang = hang
        self.calls: List[tuple[str, str, str]] = []
        self.closed = False

    async def complete(self, model: str, prompt: str) -> str:
        self.calls.append(("complete", model, prompt))
        if self.complete_error is not None:
            raise self.complete_error
        return self.completion_prefix + prompt

    async def stream(self, model: str, prompt: str) -> AsyncGenerator[str, None]:
        self.calls.append(("stream", model, prompt))
        chunks = self.stream_chunks if self.stream_chunks is not None else chunk_text(prompt)
        try:
            for index, chunk in enumerate(chunks):
                if index == self.fail_after:
                    raise RuntimeError("backend exploded")
                await asyncio.sleep(0)
                yield chunk
            if self.hang:
                await asyncio.Event().wait()
        finally:
            self.closed = True
