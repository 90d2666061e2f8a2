# src/pipeline/agents/copy_generation.py — v1
"""Copy generation agent — titles and hooks in three persuasion styles."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from contentflow.core.models import StageType
from contentflow.pipeline.agents.business_strategy import BusinessStrategyOutput
from contentflow.pipeline.agents.market_research import MarketResearchOutput
from contentflow.pipeline.plugin_kit.base_agent import BaseAgent
from contentflow.pipeline.plugin_kit.schema import Number, StageSchema, Text, fmt_number
from contentflow.pipeline.state import StageOutputs

MIN_HOOKS_PER_CATEGORY = 20
HOOK_CATEGORIES = ("aggressive_hooks", "empathy_hooks", "contrarian_hooks")


class Hook(StageSchema):
    title: Text
    hook_text: Text
    emotion_trigger: Text
    target_audience: Text
    expected_ctr: Number


class PerformancePrediction(StageSchema):
    best_performing_category: Text
    overall_avg_ctr: Number
    a_b_test_recommendations: list[Any]


class UsageGuidelines(StageSchema):
    aggressive: Text
    empathy: Text
    contrarian: Text


class CopyGenerationOutput(StageSchema):
    """Output schema for copy generation."""

    aggressive_hooks: list[Hook] = Field(min_length=MIN_HOOKS_PER_CATEGORY)
    empathy_hooks: list[Hook] = Field(min_length=MIN_HOOKS_PER_CATEGORY)
    contrarian_hooks: list[Hook] = Field(min_length=MIN_HOOKS_PER_CATEGORY)
    performance_prediction: PerformancePrediction
    usage_guidelines: UsageGuidelines


class CopyGenerationAgent(BaseAgent):
    """Generate aggressive, empathy and contrarian hooks for the genre."""

    @property
    def stage(self) -> StageType:
        return StageType.COPY_GENERATION

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def description(self) -> str:
        return "Generate title and hook variations by persuasion style"

    @property
    def system_prompt(self) -> str:
        return (
            "You are a headline specialist. You write scroll-stopping titles and "
            "hooks and estimate their click-through rates. Answer with valid JSON only."
        )

    @property
    def output_schema(self) -> type[CopyGenerationOutput]:
        return CopyGenerationOutput

    @property
    def dependencies(self) -> list[StageType]:
        return [StageType.MARKET_RESEARCH, StageType.BUSINESS_STRATEGY]

    def format_input(self, outputs: StageOutputs, initial_payload: dict[str, Any]) -> str:
        research = outputs.require(StageType.MARKET_RESEARCH, MarketResearchOutput, consumer=self.stage)
        strategy = outputs.require(StageType.BUSINESS_STRATEGY, BusinessStrategyOutput, consumer=self.stage)
        genre = research.top_genre
        lineup = strategy.product_lineup
        return self._render(
            genre=genre.genre,
            target_audience=genre.target_audience,
            frontend_name=lineup.frontend.name,
            frontend_price=fmt_number(lineup.frontend.price),
            middle_name=lineup.middle.name,
            middle_price=fmt_number(lineup.middle.price),
            backend_name=lineup.backend.name,
            backend_price=fmt_number(lineup.backend.price),
        )
