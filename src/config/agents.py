# src/config/agents.py — v1
"""Declarative agent registry configuration.

Maps every pipeline stage to the agent class implementing it. The
execution order is STAGE_SEQUENCE, not the order of this mapping.
"""

from __future__ import annotations

from contentflow.core.models import StageType

# Fully qualified class paths for dynamic import by pipeline/registry.py.
AGENT_REGISTRY: dict[StageType, str] = {
    StageType.MARKET_RESEARCH: "contentflow.pipeline.agents.market_research.MarketResearchAgent",
    StageType.CONTENT_SCRAPING: "contentflow.pipeline.agents.content_scraping.ContentScrapingAgent",
    StageType.NLP_CLASSIFICATION: "contentflow.pipeline.agents.nlp_classification.NLPClassificationAgent",
    StageType.TEMPLATE_OPTIMIZATION: "contentflow.pipeline.agents.template_optimization.TemplateOptimizationAgent",
    StageType.BUSINESS_STRATEGY: "contentflow.pipeline.agents.business_strategy.BusinessStrategyAgent",
    StageType.CONTENT_CREATION: "contentflow.pipeline.agents.content_creation.ContentCreationAgent",
    StageType.COPY_GENERATION: "contentflow.pipeline.agents.copy_generation.CopyGenerationAgent",
    StageType.OPTIMIZATION_ARCHIVE: "contentflow.pipeline.agents.optimization_archive.OptimizationArchiveAgent",
}
