from typing import AsyncGenerator

from openai import AsyncOpenAI


class OpenAICompatibleBackend:
    """Backend for any server speaking the OpenAI chat completions API."""

    def __init__(self, client: AsyncOpenAI) -> None:
        self.client = client

    @classmethod
    def from_credentials(
        cls, *, base_url: str | None, api_key: str, timeout: float
    ) -> "OpenAICompatibleBackend":
        # Failures end the generation request; nothing is retried
        return cls(
            AsyncOpenAI(base_url=base_url, api_key=api_key, timeout=timeout, max_retries=0)
        )

    async def complete(self, model: str, prompt: str) -> str:
        response = await self.client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
        )
        return response.choices[0].message.content or ""

    async def stream(self, model: str, prompt: str) -> AsyncGenerator[str, None]:
        """Stream chat completions, yielding only new content chunks."""
        stream = await self.client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            stream=True,
        )
        # Closing the stream aborts the HTTP request if the consumer goes away
        async with stream:
            async for chunk in stream:
                if not chunk.choices:
                    continue
                content = chunk.choices[0].delta.content
                if content:
                    yield content
