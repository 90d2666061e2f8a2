# src/pipeline/agents/market_research.py — v1
"""Market research agent — recommends profitable marketing genres.

First stage of the pipeline. Reads the optional `targetGenre` and
`keywords` from the run's initial payload; depends on no other stage.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from contentflow.core.models import StageType
from contentflow.pipeline.plugin_kit.base_agent import BaseAgent
from contentflow.pipeline.plugin_kit.schema import Number, StageSchema, Text
from contentflow.pipeline.state import StageOutputs


class Genre(StageSchema):
    genre: Text
    trend_score: Number
    profitability_score: Number
    competition_level: Text
    market_size: Text
    target_audience: Text
    reason: Text
    keywords: list[Any]


class MarketResearchOutput(StageSchema):
    """Output schema for market research."""

    recommended_genres: list[Genre] = Field(min_length=1)
    analysis_summary: Text

    @property
    def top_genre(self) -> Genre:
        return self.recommended_genres[0]


class MarketResearchAgent(BaseAgent):
    """Identify trending, profitable, low-barrier genres."""

    @property
    def stage(self) -> StageType:
        return StageType.MARKET_RESEARCH

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def description(self) -> str:
        return "Identify profitable marketing genres from trends and competition"

    @property
    def system_prompt(self) -> str:
        return (
            "You are a market research analyst for digital marketing. "
            "You evaluate genres by trend momentum, profitability and ease of entry, "
            "and you always answer with valid JSON only."
        )

    @property
    def output_schema(self) -> type[MarketResearchOutput]:
        return MarketResearchOutput

    def format_input(self, outputs: StageOutputs, initial_payload: dict[str, Any]) -> str:
        target_genre = initial_payload.get("targetGenre")
        keywords = initial_payload.get("keywords") or []

        focus = []
        if target_genre:
            focus.append(f"Target field: {target_genre}")
        if keywords:
            focus.append(f"Related keywords: {', '.join(str(k) for k in keywords)}")

        return self._render(focus="\n".join(focus) + "\n" if focus else "")
