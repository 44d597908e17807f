from __future__ import annotations

import logging
from typing import Optional, Protocol

from openai import AsyncOpenAI, OpenAIError

from admissions_chat.core.config import Settings
from admissions_chat.core.errors import ProviderError

logger = logging.getLogger(__name__)


class CompletionProvider(Protocol):
    async def complete(self, *, system_prompt: str, content: str) -> Optional[str]:
        """Returns the generated text, or None when the model produced none."""
        ...


class OpenAICompletionProvider:
    """Chat completions through the OpenAI API.

    Without an API key there is no client and every completion fails with
    ``ProviderError``; the rest of the service keeps working.
    """

    def __init__(self, client: Optional[AsyncOpenAI], *, model: str, max_tokens: int) -> None:
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenAICompletionProvider":
        client = None
        if settings.OPENAI_API_KEY:
            client = AsyncOpenAI(api_key=settings.OPENAI_API_KEY)
        else:
            logger.error("OPENAI_API_KEY not set; bot replies will fail")
        return cls(client, model=settings.OPENAI_MODEL, max_tokens=settings.OPENAI_MAX_TOKENS)

    async def complete(self, *, system_prompt: str, content: str) -> Optional[str]:
        if self.client is None:
            raise ProviderError("Bot reply failed")
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": content},
                ],
                max_tokens=self.max_tokens,
            )
        except OpenAIError as exc:
            raise ProviderError("Bot reply failed") from exc
        if not completion.choices:
            return None
        return completion.choices[0].message.content

    async def close(self) -> None:
        if self.client is not None:
            await self.client.close()
