# src/pipeline/agents/content_creation.py — v1
"""Content creation agent — landing page, social posts and step emails.

Writes for the frontend product using the first optimized template.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from contentflow.core.models import StageType
from contentflow.pipeline.agents.business_strategy import BusinessStrategyOutput
from contentflow.pipeline.agents.template_optimization import TemplateOptimizationOutput
from contentflow.pipeline.plugin_kit.base_agent import BaseAgent
from contentflow.pipeline.plugin_kit.schema import Number, StageSchema, Text, fmt_number
from contentflow.pipeline.state import StageOutputs

MIN_EMAILS = 7


class LandingPage(StageSchema):
    headline: Text
    subheadline: Text
    sections: list[Any]
    design_notes: Text


class SNSContent(StageSchema):
    twitter: list[Any]
    instagram: list[Any]


class Email(StageSchema):
    email_number: Number
    send_timing: Text
    subject: Text
    preheader: Text
    content: Text
    cta: Text
    purpose: Text


class ContentCreationOutput(StageSchema):
    """Output schema for content creation."""

    landing_page: LandingPage
    sns_content: SNSContent
    email_sequence: list[Email] = Field(min_length=MIN_EMAILS)
    content_calendar: dict[str, Any]


class ContentCreationAgent(BaseAgent):
    """Produce the launch content set for the frontend offer."""

    @property
    def stage(self) -> StageType:
        return StageType.CONTENT_CREATION

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def description(self) -> str:
        return "Write landing page, social posts and a step email sequence"

    @property
    def system_prompt(self) -> str:
        return (
            "You are a direct-response copywriter. You write landing pages, social "
            "posts and email sequences that follow a given template faithfully. "
            "Answer with valid JSON only."
        )

    @property
    def output_schema(self) -> type[ContentCreationOutput]:
        return ContentCreationOutput

    @property
    def dependencies(self) -> list[StageType]:
        return [StageType.BUSINESS_STRATEGY, StageType.TEMPLATE_OPTIMIZATION]

    def format_input(self, outputs: StageOutputs, initial_payload: dict[str, Any]) -> str:
        strategy = outputs.require(StageType.BUSINESS_STRATEGY, BusinessStrategyOutput, consumer=self.stage)
        templates = outputs.require(
            StageType.TEMPLATE_OPTIMIZATION, TemplateOptimizationOutput, consumer=self.stage,
        )
        product = strategy.product_lineup.frontend
        template = templates.optimized_templates[0]
        return self._render(
            product_name=product.name,
            product_price=fmt_number(product.price),
            product_purpose=product.purpose,
            product_content=product.content,
            template_name=template.template_name,
            template_success_rate=fmt_number(template.success_rate),
            template_best_for=", ".join(str(b) for b in template.best_for),
        )
