"""
Metric sources for SLO checks.

The built-in definitions and readings mirror the release gate's historical
defaults. A JSON snapshot file can replace the readings (and optionally the
definitions) without touching the evaluation logic:

    {
      "source": "prometheus export 2024-12-22",
      "values": {"availability": 99.95, "latency": 98.5, "errorRate": 0.05},
      "errorBudgetConsumption": {"availability": 25, "latency": 30, "errorRate": 20},
      "slos": [{"name": "availability", "target": 99.9, "operator": ">="}]
    }
"""

import json
import logging
from pathlib import Path
from typing import Annotated, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .models import Comparison, MetricSnapshot, SLODefinition

logger = logging.getLogger(__name__)

Reading = Annotated[float, Field(allow_inf_nan=False)]
Consumption = Annotated[float, Field(allow_inf_nan=False, ge=0)]


class SnapshotError(ValueError):
    """Raised when a metric snapshot file cannot be used."""


def default_definitions() -> Tuple[SLODefinition, ...]:
    """Availability, latency and error rate objectives over a 30-day window."""
    return (
        SLODefinition(
            name="availability",
            target=99.9,
            comparison=Comparison.GE,
            window_days=30,
            error_budget=0.1,
            description="Percentage of successful requests",
        ),
        SLODefinition(
            name="latency",
            target=95,
            comparison=Comparison.GE,
            window_days=30,
            error_budget=5,
            description="Percentage of requests served under 500ms",
            latency_threshold_ms=500,
        ),
        SLODefinition(
            name="errorRate",
            target=0.1,
            comparison=Comparison.LE,
            window_days=30,
            error_budget=0.1,
            description="Percentage of requests that errored",
        ),
    )


def default_snapshot() -> MetricSnapshot:
    # Stand-in readings until a monitoring export is supplied via --metrics
    return MetricSnapshot(
        values={"availability": 99.95, "latency": 98.5, "errorRate": 0.05},
        budget_consumption={"availability": 25, "latency": 30, "errorRate": 20},
        source="built-in",
    )


class SLODefinitionModel(BaseModel):
    """SLO definition entry in a snapshot file."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    target: Reading
    operator: str = ">="
    window: int = Field(30, gt=0)
    error_budget: float = Field(0.1, alias="errorBudget", ge=0)
    description: str = ""
    threshold_ms: Optional[int] = Field(None, alias="thresholdMs", gt=0)

    @field_validator("operator")
    @classmethod
    def _known_operator(cls, v: str) -> str:
        return Comparison.parse(v).symbol

    def to_definition(self) -> SLODefinition:
        return SLODefinition(
            name=self.name,
            target=self.target,
            comparison=Comparison.parse(self.operator),
            window_days=self.window,
            error_budget=self.error_budget,
            description=self.description,
            latency_threshold_ms=self.threshold_ms,
        )


class SnapshotFileModel(BaseModel):
    """Top-level schema of a metric snapshot file."""

    model_config = ConfigDict(populate_by_name=True)

    source: Optional[str] = None
    values: Dict[str, Reading]
    error_budget_consumption: Dict[str, Consumption] = Field(..., alias="errorBudgetConsumption")
    slos: Optional[List[SLODefinitionModel]] = None


def _read(path: Path) -> SnapshotFileModel:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise SnapshotError(f"Metric snapshot not found: {path}") from None
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Metric snapshot {path} is not valid JSON: {e}") from e

    try:
        return SnapshotFileModel.model_validate(raw)
    except ValidationError as e:
        raise SnapshotError(f"Metric snapshot {path} is invalid:\n{e}") from e


def _check_coverage(definitions: Sequence[SLODefinition], snapshot: MetricSnapshot) -> None:
    names = [d.name for d in definitions]
    if len(set(names)) != len(names):
        raise SnapshotError(f"Duplicate SLO names in definitions: {names}")

    missing_values = [n for n in names if n not in snapshot.values]
    missing_budgets = [n for n in names if n not in snapshot.budget_consumption]
    if missing_values or missing_budgets:
        raise SnapshotError(
            "Metric snapshot is missing readings: "
            f"values={missing_values or '[]'}, errorBudgetConsumption={missing_budgets or '[]'}"
        )


def load_snapshot(
    path: "str | Path",
    definitions: Optional[Sequence[SLODefinition]] = None,
) -> Tuple[Tuple[SLODefinition, ...], MetricSnapshot]:
    """
    Load a metric snapshot file.

    Args:
        path: JSON snapshot file
        definitions: Definitions to check the readings against; the file's own
            `slos` list wins when present, then the built-in definitions.

    Returns:
        (definitions, snapshot)

    Raises:
        SnapshotError: file missing, malformed, or lacking a reading for an SLO
    """
    path = Path(path)
    model = _read(path)

    if model.slos:
        defs = tuple(s.to_definition() for s in model.slos)
    elif definitions is not None:
        defs = tuple(definitions)
    else:
        defs = default_definitions()

    snapshot = MetricSnapshot(
        values=dict(model.values),
        budget_consumption=dict(model.error_budget_consumption),
        source=model.source or str(path),
    )
    _check_coverage(defs, snapshot)

    logger.info(f"Loaded metric snapshot from {path} ({len(defs)} SLOs)")
    return defs, snapshot
