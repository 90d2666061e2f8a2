# src/pipeline/agents/nlp_classification.py — v1
"""NLP classification agent — buckets scraped phrases by appeal, emotion and structure."""

from __future__ import annotations

from typing import Any

from contentflow.core.models import StageType
from contentflow.pipeline.agents.content_scraping import ContentScrapingOutput
from contentflow.pipeline.plugin_kit.base_agent import BaseAgent
from contentflow.pipeline.plugin_kit.schema import Number, StageSchema
from contentflow.pipeline.state import StageOutputs


class ByAppealType(StageSchema):
    benefit: list[Any]
    emotional: list[Any]
    authority: list[Any]
    scarcity: list[Any]
    social_proof: list[Any]


class ByEmotion(StageSchema):
    positive: list[Any]
    negative: list[Any]
    neutral: list[Any]


class ByStructure(StageSchema):
    problem_focused: list[Any]
    solution_focused: list[Any]
    story_based: list[Any]
    list_based: list[Any]
    comparison_based: list[Any]


class ClassifiedData(StageSchema):
    by_appeal_type: ByAppealType
    by_emotion: ByEmotion
    by_structure: ByStructure


class ClassificationStats(StageSchema):
    total_classified: Number
    accuracy_rate: Number
    top_patterns: list[Any]


class NLPClassificationOutput(StageSchema):
    """Output schema for NLP classification."""

    classified_data: ClassifiedData
    classification_stats: ClassificationStats


class NLPClassificationAgent(BaseAgent):
    """Classify phrases along three independent dimensions."""

    @property
    def stage(self) -> StageType:
        return StageType.NLP_CLASSIFICATION

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def description(self) -> str:
        return "Classify phrases by appeal type, emotion and structure"

    @property
    def system_prompt(self) -> str:
        return (
            "You are a computational linguist specialised in persuasive copy. "
            "You classify marketing phrases precisely and answer with valid JSON only."
        )

    @property
    def output_schema(self) -> type[NLPClassificationOutput]:
        return NLPClassificationOutput

    @property
    def dependencies(self) -> list[StageType]:
        return [StageType.CONTENT_SCRAPING]

    def format_input(self, outputs: StageOutputs, initial_payload: dict[str, Any]) -> str:
        scraping = outputs.require(StageType.CONTENT_SCRAPING, ContentScrapingOutput, consumer=self.stage)
        phrases = [p.phrase for p in scraping.trending_phrases]
        return self._render(phrase_count=len(phrases), phrases="\n".join(phrases))
