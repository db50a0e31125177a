"""Decomposition of metabolic networks into subsystems."""

from .algorithm import DecompositionAlgorithm
from .methods import (
    DECOMPOSITION_METHODS,
    AttributeDecomposition,
    CommunityDecomposition,
    CompartmentDecomposition,
    ConnectedComponentDecomposition,
    PathwayDecomposition,
    PredefinedDecomposition,
    get_decomposition_method,
)
from .models import DEFAULT_SUBSYSTEM, TRANSPORTER_SUBSYSTEM, Decomposition, Subsystem

__all__ = [
    "DECOMPOSITION_METHODS",
    "DEFAULT_SUBSYSTEM",
    "TRANSPORTER_SUBSYSTEM",
    "AttributeDecomposition",
    "CommunityDecomposition",
    "CompartmentDecomposition",
    "ConnectedComponentDecomposition",
    "Decomposition",
    "DecompositionAlgorithm",
    "PathwayDecomposition",
    "PredefinedDecomposition",
    "Subsystem",
    "get_decomposition_method",
]
