"""OpenAI Chat Completions client for coaching."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from food_tracker.errors import AnalysisError
from food_tracker.services.coach import CoachClient


@dataclass
class OpenAICoachClient(CoachClient):
    """Coach client backed by OpenAI Chat Completions."""

    client: AsyncOpenAI

    async def complete(
        self,
        *,
        model: str,
        messages: list[dict[str, str]],
        temperature: float | None = None,
        max_tokens: int | None = None,
        response_format: dict[str, object] | None = None,
    ) -> str:
        """Call OpenAI and return the assistant message text."""
        request_payload: dict[str, object] = {"model": model, "messages": messages}
        # Reasoning models accept no temperature or max_tokens.
        if temperature is not None:
            request_payload["temperature"] = temperature
        if max_tokens is not None:
            request_payload["max_tokens"] = max_tokens
        if response_format is not None:
            request_payload["response_format"] = response_format

        response = await self.client.chat.completions.create(**request_payload)
        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise AnalysisError("OpenAI returned an empty response")
        return content
