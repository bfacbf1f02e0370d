"""Chained multi-agent text generation.

Enabled agents run strictly in order. Every agent except the last gets a
single-shot completion whose text becomes the next agent's prompt; the last
agent is streamed and its chunks are forwarded as they arrive.
"""

import asyncio
from contextlib import aclosing
from typing import AsyncGenerator, Sequence

from loguru import logger

from scribe.llms.router import ModelRouter
from scribe.llms.schemas import AgentConfig

NO_AGENTS_MESSAGE = "Error: No AI agents enabled."
ERROR_PREFIX = "An error occurred during AI generation: "


def error_message(error: Exception) -> str:
    return ERROR_PREFIX + (str(error) or error.__class__.__name__)


class GenerationPipeline:
    def __init__(self, router: ModelRouter, step_timeout: float) -> None:
        self.router = router
        self.step_timeout = step_timeout

    async def run(self, configs: Sequence[AgentConfig]) -> AsyncGenerator[str, None]:
        """Run the enabled agents and yield the final agent's output.

        Failures never propagate: they end the output with a single error
        message chunk. Cancellation is not a failure and propagates unchanged.
        """
        agents = [config for config in configs if config.enabled]
        if not agents:
            yield NO_AGENTS_MESSAGE
            return

        try:
            prompt = agents[0].prompt
            for index, agent in enumerate(agents[:-1]):
                logger.debug(f"Agent {index + 1}/{len(agents)} completing with {agent.model}")
                prompt = await self._complete(agent, prompt)

            logger.debug(f"Agent {len(agents)}/{len(agents)} streaming with {agents[-1].model}")
            async with aclosing(self._stream(agents[-1], prompt)) as chunks:
                async for chunk in chunks:
                    yield chunk
        except Exception as e:
            logger.error(f"AI generation error: {str(e)}")
            yield error_message(e)

    async def _complete(self, agent: AgentConfig, prompt: str) -> str:
        backend = self.router.backend_for(agent.model)
        return await asyncio.wait_for(backend.complete(agent.model, prompt), self.step_timeout)

    async def _stream(self, agent: AgentConfig, prompt: str) -> AsyncGenerator[str, None]:
        """Forward backend chunks, bounding the whole step by the step timeout."""
        backend = self.router.backend_for(agent.model)
        deadline = asyncio.get_running_loop().time() + self.step_timeout
        async with aclosing(backend.stream(agent.model, prompt)) as chunks:
            while True:
                # The deadline only covers waiting on the backend, never our consumer
                async with asyncio.timeout_at(deadline):
                    try:
                        chunk = await anext(chunks)
                    except StopAsyncIteration:
                        return
                yield chunk
