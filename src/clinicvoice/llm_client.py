import logging
from typing import Optional

import httpx

from clinicvoice.errors import GenerationError
from clinicvoice.prompts import GENERATION_FALLBACK

logger = logging.getLogger(__name__)

OPENAI_BASE_URL = "https://api.openai.com/v1"


def build_messages(history: list[tuple[str, str]], user_text: str) -> list[dict]:
    """Chat messages for one completion: full history, newest user text last.

    The history normally already ends with ``user_text`` (the processor
    appends it before generating); it is only added when missing.
    """
    messages = [{"role": role, "content": text} for role, text in history]
    if not history or history[-1] != ("user", user_text):
        messages.append({"role": "user", "content": user_text})
    return messages


class ChatClient:
    """OpenAI chat-completions client. Stateless: every call carries the full history."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        max_tokens: int = 200,
        base_url: str = OPENAI_BASE_URL,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.model = model
        self.max_tokens = max_tokens
        self._client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=timeout,
        )

    async def close(self):
        await self._client.aclose()

    async def complete(self, history: list[tuple[str, str]], user_text: str) -> str:
        messages = build_messages(history, user_text)
        try:
            resp = await self._client.post(
                "/chat/completions",
                json={
                    "model": self.model,
                    "max_tokens": self.max_tokens,
                    "messages": messages,
                },
            )
            resp.raise_for_status()
            content = resp.json()["choices"][0]["message"].get("content") or ""
        except (httpx.HTTPError, KeyError, IndexError, ValueError) as e:
            logger.error("Chat completion failed: %s", e)
            raise GenerationError(str(e)) from e

        content = content.strip()
        if not content:
            logger.warning("Chat completion returned empty content")
            return GENERATION_FALLBACK
        return content
