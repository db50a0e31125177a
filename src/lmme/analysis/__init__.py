"""Statistical analyses on decompositions."""

from .io import read_identifier_list
from .models import HypergeometricResult, PValueStatus, SubsystemCounts
from .ora import (
    OverRepresentationAnalysis,
    analyze,
    benjamini_hochberg,
    hypergeometric_p_value,
)

__all__ = [
    "HypergeometricResult",
    "OverRepresentationAnalysis",
    "PValueStatus",
    "SubsystemCounts",
    "analyze",
    "benjamini_hochberg",
    "hypergeometric_p_value",
    "read_identifier_list",
]
