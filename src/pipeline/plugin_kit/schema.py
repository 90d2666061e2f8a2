# src/pipeline/plugin_kit/schema.py — v1
"""Field types shared by the stage output schemas.

Numbers must be real JSON numbers: numeric strings and booleans are
rejected. Required strings must be non-empty.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _reject_bool(value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError("boolean is not a number")
    return value


Number = Annotated[float, BeforeValidator(_reject_bool), Field(strict=True)]
Text = Annotated[str, Field(strict=True, min_length=1)]


class StageSchema(BaseModel):
    """Base for stage output models; unknown keys are tolerated."""

    model_config = ConfigDict(extra="allow")


def fmt_number(value: float) -> str:
    """Render whole floats without a trailing '.0' (1980.0 -> '1980')."""
    return str(int(value)) if float(value).is_integer() else str(value)
