"""Models for LLM food analysis results."""

from pydantic import BaseModel, Field


class FoodAnalysis(BaseModel):
    """Structured nutrition estimate for a described or photographed meal."""

    name: str = Field(min_length=1)
    calories: float = Field(ge=0.0)
    protein: float = Field(default=0.0, ge=0.0)
