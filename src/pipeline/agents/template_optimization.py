# src/pipeline/agents/template_optimization.py — v1
"""Template optimization agent — distils classified phrases into five reusable templates."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from contentflow.core.models import StageType
from contentflow.pipeline.agents.nlp_classification import NLPClassificationOutput
from contentflow.pipeline.plugin_kit.base_agent import BaseAgent
from contentflow.pipeline.plugin_kit.schema import Number, StageSchema, Text, fmt_number
from contentflow.pipeline.state import StageOutputs

TEMPLATE_COUNT = 5


class OptimizedTemplate(StageSchema):
    template_id: Text
    template_name: Text
    success_rate: Number
    best_for: list[Any]
    structure: dict[str, Any]
    variables: list[Any]
    example_usage: Text
    metrics: dict[str, Any]


class SelectionCriteria(StageSchema):
    performance_threshold: Number
    versatility_score: Number
    ease_of_use: Number


class TemplateOptimizationOutput(StageSchema):
    """Output schema for template optimization."""

    optimized_templates: list[OptimizedTemplate] = Field(
        min_length=TEMPLATE_COUNT, max_length=TEMPLATE_COUNT,
    )
    selection_criteria: SelectionCriteria
    testing_recommendations: list[Any]


class TemplateOptimizationAgent(BaseAgent):
    """Pick the five strongest structures and templatise them."""

    @property
    def stage(self) -> StageType:
        return StageType.TEMPLATE_OPTIMIZATION

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def description(self) -> str:
        return "Select and templatise the five best-performing content structures"

    @property
    def system_prompt(self) -> str:
        return (
            "You are a conversion copywriting strategist. You turn proven content "
            "structures into reusable templates with clear variable slots. "
            "Answer with valid JSON only."
        )

    @property
    def output_schema(self) -> type[TemplateOptimizationOutput]:
        return TemplateOptimizationOutput

    @property
    def dependencies(self) -> list[StageType]:
        return [StageType.NLP_CLASSIFICATION]

    def format_input(self, outputs: StageOutputs, initial_payload: dict[str, Any]) -> str:
        nlp = outputs.require(StageType.NLP_CLASSIFICATION, NLPClassificationOutput, consumer=self.stage)
        stats = nlp.classification_stats
        return self._render(
            total_classified=fmt_number(stats.total_classified),
            accuracy_rate=stats.accuracy_rate,
            top_patterns=", ".join(str(p) for p in stats.top_patterns),
        )
