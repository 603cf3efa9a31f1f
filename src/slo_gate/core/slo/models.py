"""
SLO Data Models

Defines data structures for Service Level Objectives (SLOs), the metric
snapshot they are evaluated against, and the results of a check run.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, Mapping, Optional, Tuple


class Comparison(Enum):
    """Comparison operators an SLO target can be checked with"""

    GE = ">="
    LE = "<="
    GT = ">"
    LT = "<"

    @classmethod
    def parse(cls, symbol: "Comparison | str") -> "Comparison":
        """Resolve an operator symbol, rejecting anything outside the four supported."""
        if isinstance(symbol, Comparison):
            return symbol
        normalized = _ALIASES.get(str(symbol).strip(), str(symbol).strip())
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(
                f"Unsupported comparison operator {symbol!r} "
                f"(expected one of: {', '.join(c.value for c in cls)})"
            ) from None

    @property
    def symbol(self) -> str:
        return self.value

    def evaluate(self, current: float, target: float) -> bool:
        """Return whether `current <op> target` holds."""
        return _OPERATORS[self](current, target)


_ALIASES = {"≥": ">=", "≤": "<=", "=>": ">=", "=<": "<="}

_OPERATORS: Dict[Comparison, Callable[[float, float], bool]] = {
    Comparison.GE: operator.ge,
    Comparison.LE: operator.le,
    Comparison.GT: operator.gt,
    Comparison.LT: operator.lt,
}


class BudgetStatus(str, Enum):
    """Error budget health classification."""

    OK = "OK"  # < warning level
    WARNING = "WARNING"  # warning level up to critical threshold
    CRITICAL = "CRITICAL"  # >= critical threshold, blocks release


@dataclass(frozen=True)
class SLODefinition:
    """A named objective: the target a metric has to meet."""

    name: str
    target: float
    comparison: Comparison = Comparison.GE
    window_days: int = 30
    error_budget: float = 0.1  # allowance, percent
    description: str = ""
    latency_threshold_ms: Optional[int] = None

    def __post_init__(self):
        # Accept operator symbols so definitions can be built from config files
        object.__setattr__(self, "comparison", Comparison.parse(self.comparison))


@dataclass(frozen=True)
class MetricSnapshot:
    """Observed metric values and error budget consumption, keyed by SLO name."""

    values: Mapping[str, float]
    budget_consumption: Mapping[str, float]
    source: str = "built-in"

    def value(self, name: str) -> float:
        try:
            return self.values[name]
        except KeyError:
            raise KeyError(f"No metric reading for SLO '{name}'") from None

    def consumption(self, name: str) -> float:
        try:
            return self.budget_consumption[name]
        except KeyError:
            raise KeyError(f"No error budget consumption for SLO '{name}'") from None


@dataclass(frozen=True)
class SLOResult:
    """Outcome of comparing one SLO reading against its target."""

    name: str
    current: float
    target: float
    comparison: Comparison
    passed: bool

    @property
    def status(self) -> str:
        return "PASS" if self.passed else "FAIL"


@dataclass(frozen=True)
class ErrorBudgetResult:
    """Outcome of classifying one error budget's consumption."""

    name: str
    consumption: float
    threshold: float
    status: BudgetStatus

    @property
    def remaining(self) -> float:
        return max(0.0, 100.0 - self.consumption)


@dataclass(frozen=True)
class Accumulator:
    """
    Results gathered so far in a check run.

    Each check returns a new accumulator; `passed` only ever goes from True
    to False.
    """

    slos: Tuple[SLOResult, ...] = ()
    error_budgets: Tuple[ErrorBudgetResult, ...] = ()
    recommendations: Tuple[str, ...] = ()
    passed: bool = True

    def with_slo(self, result: SLOResult, recommendation: Optional[str] = None) -> "Accumulator":
        return replace(
            self,
            slos=self.slos + (result,),
            recommendations=self._recommend(recommendation),
            passed=self.passed and result.passed,
        )

    def with_budget(
        self, result: ErrorBudgetResult, recommendation: Optional[str] = None
    ) -> "Accumulator":
        return replace(
            self,
            error_budgets=self.error_budgets + (result,),
            recommendations=self._recommend(recommendation),
            passed=self.passed and result.status is not BudgetStatus.CRITICAL,
        )

    def _recommend(self, recommendation: Optional[str]) -> Tuple[str, ...]:
        if recommendation is None:
            return self.recommendations
        return self.recommendations + (recommendation,)

    def to_report(self, source: str = "built-in", generated_at: Optional[datetime] = None) -> "CheckReport":
        return CheckReport(
            passed=self.passed,
            slos=self.slos,
            error_budgets=self.error_budgets,
            recommendations=self.recommendations,
            source=source,
            generated_at=generated_at or datetime.now(timezone.utc),
        )


@dataclass(frozen=True)
class CheckReport:
    """Complete, immutable result of one check run."""

    passed: bool
    slos: Tuple[SLOResult, ...]
    error_budgets: Tuple[ErrorBudgetResult, ...]
    recommendations: Tuple[str, ...]
    source: str = "built-in"
    generated_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc), compare=False
    )

    @property
    def failed_slos(self) -> Tuple[SLOResult, ...]:
        return tuple(s for s in self.slos if not s.passed)

    @property
    def critical_budgets(self) -> Tuple[ErrorBudgetResult, ...]:
        return tuple(b for b in self.error_budgets if b.status is BudgetStatus.CRITICAL)


def format_number(value: float) -> str:
    """Render a reading the way operators write it: 95, 99.95, 0.05."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)
