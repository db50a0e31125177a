"""Data classes for over-representation analysis."""

from dataclasses import dataclass
from enum import Enum

DEFAULT_SIGNIFICANCE_LEVEL: float = 0.05


class PValueStatus(str, Enum):
    """Outcome of a hypergeometric evaluation.

    OK: The p-value was computed from the distribution.
    DEGENERATE: The test is undefined for the given counts (e.g. empty sample)
        or the evaluation failed; the p-value is fixed to 1.0.
    """

    OK = "ok"
    DEGENERATE = "degenerate"


@dataclass(frozen=True)
class HypergeometricResult:
    """One-tailed hypergeometric test result.

    Attributes:
        p_value: P(X >= observed), 1.0 for degenerate results.
        status: Whether the value was computed or substituted.
        reason: Why the result is degenerate, empty otherwise.
    """

    p_value: float
    status: PValueStatus = PValueStatus.OK
    reason: str = ""

    @classmethod
    def degenerate(cls, reason: str) -> "HypergeometricResult":
        return cls(p_value=1.0, status=PValueStatus.DEGENERATE, reason=reason)

    @property
    def is_degenerate(self) -> bool:
        return self.status is PValueStatus.DEGENERATE


@dataclass(frozen=True)
class SubsystemCounts:
    """Reference and differential species counts of one subsystem."""

    n_reference: int
    n_differential: int
