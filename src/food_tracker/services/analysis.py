"""Food analysis from text descriptions and photos using LLMs."""

import base64
import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError as PydanticValidationError

from food_tracker.domain.analysis import FoodAnalysis
from food_tracker.errors import AnalysisError, ValidationError

_logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an expert nutrition analyst specializing in Indian \
and South Asian cuisine. Analyze food from descriptions and/or images and \
return accurate calorie and protein estimates.

When several items are present, identify each one, estimate its portion, and
sum calories and protein across all of them. List every item in the name
field (e.g. "2 rotis, dal makhani, rice, raita").

Estimate portions from visual references such as hands, plates and spoons. If
uncertain between sizes, choose the larger estimate. Include hidden oil or ghee
used in cooking, and add roughly 20% for restaurant food.

Round to realistic numbers. Return ONLY valid JSON with this structure:
{
  "name": "descriptive name listing all items identified",
  "calories": number (total for everything),
  "protein": number (total in grams)
}"""


class AnalysisClient(Protocol):
    """Interface for LLM food analysis."""

    async def analyze(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        description: str | None,
        image_data_url: str | None,
    ) -> dict[str, object]:
        """Return the model's JSON answer as a dict."""


@dataclass
class FoodAnalysisService:
    """Service that prepares analysis requests and validates results."""

    client: AnalysisClient
    model: str
    temperature: float = 0.3

    async def analyze(
        self, description: str | None = None, image_bytes: bytes | None = None
    ) -> FoodAnalysis:
        """Estimate name, calories and protein for a meal."""
        text = description.strip() if description else None
        if not text and not image_bytes:
            raise ValidationError("Either description or image is required")

        raw = await self.client.analyze(
            model=self.model,
            temperature=self.temperature,
            system_prompt=SYSTEM_PROMPT,
            description=text,
            image_data_url=_to_data_url(image_bytes) if image_bytes else None,
        )
        try:
            result = FoodAnalysis.model_validate(raw)
        except PydanticValidationError as exc:
            _logger.warning("Invalid analysis response: %s", raw)
            raise AnalysisError("Invalid response from analysis model") from exc
        _logger.info(
            "Food analyzed: name=%s calories=%s protein=%s",
            result.name,
            result.calories,
            result.protein,
        )
        return result


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
