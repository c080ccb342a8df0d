"""OpenAI Chat Completions client for food analysis."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from food_tracker.errors import AnalysisError
from food_tracker.services.analysis import AnalysisClient


@dataclass
class OpenAIAnalysisClient(AnalysisClient):
    """Analysis client backed by OpenAI Chat Completions with JSON output."""

    client: AsyncOpenAI

    async def analyze(  # noqa: PLR0913
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        description: str | None,
        image_data_url: str | None,
    ) -> dict[str, object]:
        """Call OpenAI and parse the JSON answer."""
        user_content: list[dict[str, object]] = []
        if description:
            user_content.append({"type": "text", "text": description})
        if image_data_url:
            user_content.append(
                {"type": "image_url", "image_url": {"url": image_data_url}}
            )

        response = await self.client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
            response_format={"type": "json_object"},
            temperature=temperature,
        )
        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise AnalysisError("OpenAI returned an empty response")
        try:
            return json.loads(content)
        except json.JSONDecodeError as exc:
            raise AnalysisError("OpenAI returned malformed JSON") from exc
