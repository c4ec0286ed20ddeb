"""
Data Models
===========
Pydantic models for the parsed fruit inventory.
All models are serializable to JSON via model_dump().
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field


# ─── Enums ────────────────────────────────────────────────────────────────────


class AnomalyType(str, Enum):
    """Non-fatal anomalies detected while parsing."""
    DUPLICATE_FIELD = "duplicate_field"
    LENIENT_COUNT = "lenient_count"


# ─── Domain Models ────────────────────────────────────────────────────────────


class Variety(BaseModel):
    """A single variety of a fruit. Leaf record."""
    name: str = ""
    color: str = ""
    seedless: bool = False


class Fruit(BaseModel):
    """
    A fruit record and the varieties committed for it,
    in document order.
    """
    name: str = ""
    color: str = ""
    count: int = 0
    varieties: list[Variety] = Field(default_factory=list)

    @computed_field
    @property
    def variety_count(self) -> int:
        return len(self.varieties)


# ─── Anomaly Model ────────────────────────────────────────────────────────────


class Anomaly(BaseModel):
    """A non-fatal anomaly recorded during a parse."""
    type: AnomalyType
    severity: int = Field(
        ge=0, le=100,
        description="Severity score 0-100"
    )
    message: str
    context: Optional[dict] = None


# ─── Parse Result Models ──────────────────────────────────────────────────────


class ParseVersion(BaseModel):
    """Version tracking for a parse run."""
    parser_version: str = "1.0.0"
    parse_timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    event_count: int = 0
    fruit_count: int = 0


class ValidationReport(BaseModel):
    """Post-parse summary of the inventory."""
    total_fruits: int = 0
    total_varieties: int = 0
    fruits_without_varieties: list[str] = Field(default_factory=list)
    fruits_with_zero_count: list[str] = Field(default_factory=list)
    duplicate_names: list[str] = Field(default_factory=list)
    anomaly_breakdown: dict[str, int] = Field(default_factory=dict)

    @computed_field
    @property
    def anomaly_count(self) -> int:
        return sum(self.anomaly_breakdown.values())


class ParseResult(BaseModel):
    """
    Complete output of a parse run.
    This is the top-level JSON structure written by the engine.
    """
    source: str = ""
    parse_version: ParseVersion = Field(default_factory=ParseVersion)
    fruits: list[Fruit] = Field(default_factory=list)
    anomalies: list[Anomaly] = Field(default_factory=list)
    validation: ValidationReport = Field(
        default_factory=ValidationReport
    )
