# src/pipeline/agents/content_scraping.py — v1
"""Content scraping agent — extracts high-engagement phrases for the top genre."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from contentflow.core.models import StageType
from contentflow.pipeline.agents.market_research import MarketResearchOutput
from contentflow.pipeline.plugin_kit.base_agent import BaseAgent
from contentflow.pipeline.plugin_kit.schema import Number, StageSchema, Text
from contentflow.pipeline.state import StageOutputs

MIN_TRENDING_PHRASES = 50


class TrendingPhrase(StageSchema):
    phrase: Text
    platform: Text
    engagement_rate: Number
    emotion_type: Text
    structure_type: Text
    context: Text


class ContentPattern(StageSchema):
    pattern_name: Text
    structure: Text
    success_rate: Number
    best_practices: list[Any]


class ContentScrapingOutput(StageSchema):
    """Output schema for content scraping."""

    trending_phrases: list[TrendingPhrase] = Field(min_length=MIN_TRENDING_PHRASES)
    content_patterns: list[ContentPattern]
    total_analyzed: Number
    extraction_summary: Text


class ContentScrapingAgent(BaseAgent):
    """Collect trending phrases and structural patterns across platforms."""

    @property
    def stage(self) -> StageType:
        return StageType.CONTENT_SCRAPING

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def description(self) -> str:
        return "Extract high-engagement phrases and content patterns"

    @property
    def system_prompt(self) -> str:
        return (
            "You are a social media content analyst. You study what people post on "
            "Twitter/X, note, YouTube and Instagram and extract the phrases and "
            "structures that drive engagement. Answer with valid JSON only."
        )

    @property
    def output_schema(self) -> type[ContentScrapingOutput]:
        return ContentScrapingOutput

    @property
    def dependencies(self) -> list[StageType]:
        return [StageType.MARKET_RESEARCH]

    def format_input(self, outputs: StageOutputs, initial_payload: dict[str, Any]) -> str:
        research = outputs.require(StageType.MARKET_RESEARCH, MarketResearchOutput, consumer=self.stage)
        top = research.top_genre
        return self._render(
            genre=top.genre,
            target_audience=top.target_audience,
            keywords=", ".join(str(k) for k in top.keywords),
        )
