# src/pipeline/plugin_kit/models.py — v1
"""Agent plugin models: AgentMetadata, ParseFailure."""

from __future__ import annotations

from pydantic import BaseModel


class AgentMetadata(BaseModel):
    """Metadata about a stage execution, logged by the executor."""

    agent_name: str
    agent_version: str
    execution_time_ms: int
    llm_calls: int
    tokens_used: int
    prompt_hash: str | None = None


class ParseFailure(BaseModel):
    """Sentinel returned by parse_output when no JSON could be recovered."""

    preview: str
    reason: str = "no JSON found in model output"
