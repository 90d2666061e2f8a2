# src/pipeline/agents/business_strategy.py — v1
"""Business strategy agent — product lineup, sales funnel and ROI projection.

Combines the top recommended genre from market research with the number
of templates produced by template optimization.
"""

from __future__ import annotations

from typing import Any

from contentflow.core.models import StageType
from contentflow.pipeline.agents.market_research import MarketResearchOutput
from contentflow.pipeline.agents.template_optimization import TemplateOptimizationOutput
from contentflow.pipeline.plugin_kit.base_agent import BaseAgent
from contentflow.pipeline.plugin_kit.schema import Number, StageSchema, Text, fmt_number
from contentflow.pipeline.state import StageOutputs


class Product(StageSchema):
    name: Text
    price: Number
    purpose: Text
    content: Text
    profit_margin: Number


class ProductLineup(StageSchema):
    frontend: Product
    middle: Product
    backend: Product


class FunnelStage(StageSchema):
    channels: list[Any]
    content_types: list[Any]
    kpi: Text


class SalesFunnel(StageSchema):
    awareness: FunnelStage
    interest: FunnelStage
    consideration: FunnelStage
    purchase: FunnelStage
    retention: FunnelStage


class ROIProjection(StageSchema):
    monthly_target_leads: Number
    conversion_rates: dict[str, Any]
    monthly_revenue: Number
    cost_structure: dict[str, Any]
    net_profit: Number
    roi_percentage: Number


class BusinessStrategyOutput(StageSchema):
    """Output schema for business strategy."""

    product_lineup: ProductLineup
    sales_funnel: SalesFunnel
    roi_projection: ROIProjection


class BusinessStrategyAgent(BaseAgent):
    """Design a three-tier product lineup and a five-stage funnel."""

    @property
    def stage(self) -> StageType:
        return StageType.BUSINESS_STRATEGY

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def description(self) -> str:
        return "Design product lineup, sales funnel and ROI projection"

    @property
    def system_prompt(self) -> str:
        return (
            "You are a business strategist for information products. You design "
            "frontend, middle and backend offers, the funnel that connects them, "
            "and realistic revenue projections. Answer with valid JSON only."
        )

    @property
    def output_schema(self) -> type[BusinessStrategyOutput]:
        return BusinessStrategyOutput

    @property
    def dependencies(self) -> list[StageType]:
        return [StageType.MARKET_RESEARCH, StageType.TEMPLATE_OPTIMIZATION]

    def format_input(self, outputs: StageOutputs, initial_payload: dict[str, Any]) -> str:
        research = outputs.require(StageType.MARKET_RESEARCH, MarketResearchOutput, consumer=self.stage)
        templates = outputs.require(
            StageType.TEMPLATE_OPTIMIZATION, TemplateOptimizationOutput, consumer=self.stage,
        )
        top = research.top_genre
        return self._render(
            genre=top.genre,
            market_size=top.market_size,
            target_audience=top.target_audience,
            profitability_score=fmt_number(top.profitability_score),
            template_count=len(templates.optimized_templates),
        )
