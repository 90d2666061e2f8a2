# src/pipeline/agents/optimization_archive.py — v1
"""Optimization archive agent — performance review and reusable template archive.

Runs LAST. Summarises counts from content creation and copy generation and
the ROI projection from business strategy.
"""

from __future__ import annotations

from typing import Any

from contentflow.core.models import StageType
from contentflow.pipeline.agents.business_strategy import BusinessStrategyOutput
from contentflow.pipeline.agents.content_creation import ContentCreationOutput
from contentflow.pipeline.agents.copy_generation import CopyGenerationOutput
from contentflow.pipeline.plugin_kit.base_agent import BaseAgent
from contentflow.pipeline.plugin_kit.schema import StageSchema, Text, fmt_number
from contentflow.pipeline.state import StageOutputs


class PerformanceMetrics(StageSchema):
    content_performance: dict[str, Any]
    overall_roi: dict[str, Any]


class OptimizationResults(StageSchema):
    performance_metrics: PerformanceMetrics
    success_patterns: list[Any]
    improvement_recommendations: list[Any]


class TemplateArchive(StageSchema):
    master_templates: list[Any]
    version_history: list[Any]


class AutomationStatus(StageSchema):
    automated_processes: list[Any]
    manual_review_points: list[Any]
    next_optimization_cycle: Text


class OptimizationArchiveOutput(StageSchema):
    """Output schema for optimization archive."""

    optimization_results: OptimizationResults
    template_archive: TemplateArchive
    automation_status: AutomationStatus


class OptimizationArchiveAgent(BaseAgent):
    """Review the whole run and archive what worked."""

    @property
    def stage(self) -> StageType:
        return StageType.OPTIMIZATION_ARCHIVE

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def description(self) -> str:
        return "Predict performance, systematise success patterns and archive templates"

    @property
    def system_prompt(self) -> str:
        return (
            "You are a marketing operations lead. You review campaign assets, "
            "predict their performance and package what works into a reusable "
            "archive. Answer with valid JSON only."
        )

    @property
    def output_schema(self) -> type[OptimizationArchiveOutput]:
        return OptimizationArchiveOutput

    @property
    def dependencies(self) -> list[StageType]:
        return [StageType.CONTENT_CREATION, StageType.COPY_GENERATION, StageType.BUSINESS_STRATEGY]

    def format_input(self, outputs: StageOutputs, initial_payload: dict[str, Any]) -> str:
        content = outputs.require(StageType.CONTENT_CREATION, ContentCreationOutput, consumer=self.stage)
        copy = outputs.require(StageType.COPY_GENERATION, CopyGenerationOutput, consumer=self.stage)
        strategy = outputs.require(StageType.BUSINESS_STRATEGY, BusinessStrategyOutput, consumer=self.stage)
        roi = strategy.roi_projection
        return self._render(
            lp_sections=len(content.landing_page.sections),
            twitter_posts=len(content.sns_content.twitter),
            instagram_posts=len(content.sns_content.instagram),
            email_count=len(content.email_sequence),
            aggressive_count=len(copy.aggressive_hooks),
            empathy_count=len(copy.empathy_hooks),
            contrarian_count=len(copy.contrarian_hooks),
            avg_ctr=fmt_number(copy.performance_prediction.overall_avg_ctr),
            monthly_revenue=fmt_number(roi.monthly_revenue),
            roi_percentage=fmt_number(roi.roi_percentage),
        )
