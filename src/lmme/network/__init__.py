from .cloning import CloningOptions, clone_species
from .components import UnionFind, connected_components
from .models import (
    COMPARTMENT,
    LMME_NAMESPACE,
    PATHWAY,
    SBML_NAMESPACE,
    SUBSYSTEM,
    Edge,
    MetabolicNetwork,
    NodeId,
    NodeRole,
)

__all__ = [
    "COMPARTMENT",
    "LMME_NAMESPACE",
    "PATHWAY",
    "SBML_NAMESPACE",
    "SUBSYSTEM",
    "CloningOptions",
    "Edge",
    "MetabolicNetwork",
    "NodeId",
    "NodeRole",
    "UnionFind",
    "clone_species",
    "connected_components",
]
