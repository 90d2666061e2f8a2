# tests/conftest.py — v1
"""Shared test fixtures for all unit and integration tests.

Provides well-formed outputs for every stage, a scripted fake LLM client,
in-memory stores and test settings. No network access — every completion
call is served from a script.
"""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock

import pytest

from contentflow.config.settings import Settings
from contentflow.core.models import STAGE_SEQUENCE, StageType
from contentflow.llm.base_client import BaseLLMClient
from contentflow.llm.models import LLMResponse, Message
from contentflow.storage.memory_store import MemoryRunStore


# === Well-formed stage outputs ===


def _market_research() -> dict[str, Any]:
    return {
        "recommended_genres": [
            {
                "genre": "health and fitness",
                "trend_score": 85,
                "profitability_score": 92,
                "competition_level": "medium",
                "market_size": "$4B",
                "target_audience": "women in their 30s and 40s",
                "reason": "Home workouts keep growing after the pandemic",
                "keywords": ["home workout", "meal prep"],
            }
        ],
        "analysis_summary": "Fitness content for busy professionals is underserved.",
    }


def _content_scraping() -> dict[str, Any]:
    return {
        "trending_phrases": [
            {
                "phrase": f"phrase {i}",
                "platform": "Twitter",
                "engagement_rate": 8.5,
                "emotion_type": "surprise",
                "structure_type": "problem statement",
                "context": "fitness tips thread",
            }
            for i in range(50)
        ],
        "content_patterns": [
            {
                "pattern_name": "before and after",
                "structure": "problem, turning point, result",
                "success_rate": 78,
                "best_practices": ["show numbers", "keep it short"],
            }
        ],
        "total_analyzed": 150,
        "extraction_summary": "Short transformation stories dominate.",
    }


def _nlp_classification() -> dict[str, Any]:
    item = {"phrase": "phrase 1", "confidence": 0.9}
    return {
        "classified_data": {
            "by_appeal_type": {
                k: [item] for k in ("benefit", "emotional", "authority", "scarcity", "social_proof")
            },
            "by_emotion": {k: [item] for k in ("positive", "negative", "neutral")},
            "by_structure": {
                k: [item]
                for k in (
                    "problem_focused",
                    "solution_focused",
                    "story_based",
                    "list_based",
                    "comparison_based",
                )
            },
        },
        "classification_stats": {
            "total_classified": 50,
            "accuracy_rate": 0.87,
            "top_patterns": ["before and after", "listicle", "myth busting"],
        },
    }


def _template_optimization() -> dict[str, Any]:
    return {
        "optimized_templates": [
            {
                "template_id": f"T00{i}",
                "template_name": f"template {i}",
                "success_rate": 85,
                "best_for": ["how-to"],
                "structure": {"hook": "Is [problem] true?", "cta": "[action] now"},
                "variables": ["problem", "action"],
                "example_usage": "dieting",
                "metrics": {"engagement_rate": 12.5},
            }
            for i in range(1, 6)
        ],
        "selection_criteria": {
            "performance_threshold": 80,
            "versatility_score": 85,
            "ease_of_use": 90,
        },
        "testing_recommendations": ["headline A/B test"],
    }


def _business_strategy() -> dict[str, Any]:
    def product(name: str, price: int) -> dict[str, Any]:
        return {
            "name": name,
            "price": price,
            "purpose": "revenue",
            "content": "video course",
            "profit_margin": 70,
        }

    def funnel() -> dict[str, Any]:
        return {"channels": ["social"], "content_types": ["tips"], "kpi": "reach"}

    return {
        "product_lineup": {
            "frontend": product("7-day kickstart", 1980),
            "middle": product("12-week program", 19800),
            "backend": product("1:1 coaching", 198000),
        },
        "sales_funnel": {
            k: funnel() for k in ("awareness", "interest", "consideration", "purchase", "retention")
        },
        "roi_projection": {
            "monthly_target_leads": 100,
            "conversion_rates": {"frontend": 15, "middle": 8, "backend": 3},
            "monthly_revenue": 456000,
            "cost_structure": {"advertising": 150000},
            "net_profit": 196000,
            "roi_percentage": 75.4,
        },
    }


def _content_creation() -> dict[str, Any]:
    return {
        "landing_page": {
            "headline": "Get fit in 7 days",
            "subheadline": "No gym required",
            "sections": [{"type": "hero", "content": "..."}],
            "design_notes": "bright colours",
        },
        "sns_content": {
            "twitter": [{"post_text": "Day 1", "hashtags": ["#fit"]}],
            "instagram": [{"caption": "Day 1", "hashtags": ["#fit"]}],
        },
        "email_sequence": [
            {
                "email_number": n,
                "send_timing": f"day {n}",
                "subject": f"subject {n}",
                "preheader": "preheader",
                "content": "body",
                "cta": "click",
                "purpose": "nurture",
            }
            for n in range(1, 8)
        ],
        "content_calendar": {"week1": ["post 1", "post 2"]},
    }


def _copy_generation() -> dict[str, Any]:
    def hooks(kind: str) -> list[dict[str, Any]]:
        return [
            {
                "title": f"{kind} title {i}",
                "hook_text": "hook",
                "emotion_trigger": "curiosity",
                "target_audience": "busy parents",
                "expected_ctr": 7.5,
            }
            for i in range(20)
        ]

    return {
        "aggressive_hooks": hooks("aggressive"),
        "empathy_hooks": hooks("empathy"),
        "contrarian_hooks": hooks("contrarian"),
        "performance_prediction": {
            "best_performing_category": "contrarian",
            "overall_avg_ctr": 8.1,
            "a_b_test_recommendations": ["aggressive vs empathy"],
        },
        "usage_guidelines": {
            "aggressive": "cold traffic",
            "empathy": "warm traffic",
            "contrarian": "curious readers",
        },
    }


def _optimization_archive() -> dict[str, Any]:
    return {
        "optimization_results": {
            "performance_metrics": {
                "content_performance": {"landing_page": {"conversion_rate": 12.5}},
                "overall_roi": {"revenue_increase": 156},
            },
            "success_patterns": [{"pattern_name": "high-conversion LP"}],
            "improvement_recommendations": [{"area": "email"}],
        },
        "template_archive": {
            "master_templates": [{"template_id": "MT_001"}],
            "version_history": [{"version": "v1.0"}],
        },
        "automation_status": {
            "automated_processes": ["reporting"],
            "manual_review_points": ["legal review"],
            "next_optimization_cycle": "2026-11-01",
        },
    }


_BUILDERS = {
    StageType.MARKET_RESEARCH: _market_research,
    StageType.CONTENT_SCRAPING: _content_scraping,
    StageType.NLP_CLASSIFICATION: _nlp_classification,
    StageType.TEMPLATE_OPTIMIZATION: _template_optimization,
    StageType.BUSINESS_STRATEGY: _business_strategy,
    StageType.CONTENT_CREATION: _content_creation,
    StageType.COPY_GENERATION: _copy_generation,
    StageType.OPTIMIZATION_ARCHIVE: _optimization_archive,
}


@pytest.fixture
def valid_outputs() -> dict[StageType, dict[str, Any]]:
    """A fresh, well-formed output for every stage."""
    return {stage: build() for stage, build in _BUILDERS.items()}


# === Scripted LLM ===


class ScriptedLLM(BaseLLMClient):
    """Fake client replaying a fixed script of replies.

    Each script item is either reply text or an exception instance to raise.
    """

    def __init__(self, script: list[str | Exception]) -> None:
        self._script = list(script)
        self.calls: list[dict[str, Any]] = []

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 8192,
        temperature: float = 0.7,
    ) -> LLMResponse:
        self.calls.append({"prompt": messages[-1].content, "system": system})
        if not self._script:
            raise AssertionError("ScriptedLLM script exhausted")
        item = self._script.pop(0)
        if isinstance(item, Exception):
            raise item
        return LLMResponse(
            content=item, input_tokens=10, output_tokens=20, model="fake", provider="fake",
        )

    @property
    def provider_name(self) -> str:
        return "fake"

    @property
    def prompts(self) -> list[str]:
        return [c["prompt"] for c in self.calls]


@pytest.fixture
def make_llm():
    """Factory building a ScriptedLLM from a script."""
    return ScriptedLLM


@pytest.fixture
def success_script(valid_outputs) -> list[str]:
    """One well-formed reply per stage, in execution order.

    Replies alternate between bare JSON and fenced blocks surrounded by prose.
    """
    script: list[str] = []
    for index, stage in enumerate(STAGE_SEQUENCE):
        body = json.dumps(valid_outputs[stage], ensure_ascii=False)
        if index % 2:
            body = f"Here is the analysis you asked for:\n```json\n{body}\n```\nLet me know!"
        script.append(body)
    return script


@pytest.fixture
def no_sleep() -> AsyncMock:
    """Stand-in for asyncio.sleep between retry attempts."""
    return AsyncMock(return_value=None)


# === Stores and settings ===


@pytest.fixture
def memory_store() -> MemoryRunStore:
    return MemoryRunStore()


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(
        _env_file=None,
        store_backend="memory",
        database_path=tmp_path / "contentflow.db",
        pipeline_retry_delay_s=0.0,
    )


@pytest.fixture
def filled_outputs(valid_outputs):
    """StageOutputs holding a well-formed output for every stage."""
    from contentflow.pipeline.state import StageOutputs

    outputs = StageOutputs()
    for stage, output in valid_outputs.items():
        outputs.record(stage, output)
    return outputs
