"""Concrete decomposition methods and their registry."""

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

import networkx as nx

from ..exceptions import UnknownDecompositionMethodError
from ..network.components import connected_components
from ..network.models import (
    COMPARTMENT,
    LMME_NAMESPACE,
    PATHWAY,
    SBML_NAMESPACE,
    SUBSYSTEM,
    MetabolicNetwork,
)
from .algorithm import DecompositionAlgorithm, add_reaction_neighbourhood
from .models import Subsystem

if TYPE_CHECKING:
    from ..config import Settings

logger = logging.getLogger(__name__)


class AttributeDecomposition(DecompositionAlgorithm):
    """Subsystems taken from a reaction attribute, possibly multi-valued."""

    name = "Attribute Decomposition"

    def __init__(
        self,
        attribute_name: str,
        separator: str | None = None,
        namespace: str = LMME_NAMESPACE,
    ) -> None:
        self.attribute_name = attribute_name
        self.separator = separator
        self.namespace = namespace

    def run_specific(self, network: MetabolicNetwork) -> list[Subsystem]:
        return self.determine_subsystems_from_reaction_attributes(
            network, self.attribute_name, self.separator, self.namespace
        )

    def requires_cloning(self) -> bool:
        return False


class PredefinedDecomposition(AttributeDecomposition):
    """Subsystems as annotated in the model itself."""

    name = "Predefined Subsystems"

    def __init__(self, separator: str | None = None) -> None:
        super().__init__(SUBSYSTEM, separator=separator, namespace=SBML_NAMESPACE)


class PathwayDecomposition(AttributeDecomposition):
    """Subsystems from the pathway each reaction was merged from."""

    name = "Pathway Decomposition"

    def __init__(self) -> None:
        super().__init__(PATHWAY, separator=None, namespace=LMME_NAMESPACE)

    def requires_cloning(self) -> bool:
        return True


class CompartmentDecomposition(DecompositionAlgorithm):
    """One subsystem per compartment.

    A reaction belongs to a compartment if all of its species carry that
    compartment. Reactions spanning several compartments, or touching species
    without a compartment, stay unclassified.
    """

    name = "Compartment Decomposition"

    def run_specific(self, network: MetabolicNetwork) -> list[Subsystem]:
        subsystem_map: dict[str, Subsystem] = {}
        for reaction in network.get_reaction_nodes():
            neighbours = network.in_neighbors(reaction) + network.out_neighbors(reaction)
            if not neighbours:
                continue
            compartments = {
                network.get_attribute(species, COMPARTMENT, SBML_NAMESPACE)
                for species in neighbours
            }
            if len(compartments) != 1 or None in compartments:
                continue
            compartment = str(compartments.pop())
            if compartment not in subsystem_map:
                subsystem_map[compartment] = Subsystem(compartment)
            add_reaction_neighbourhood(subsystem_map[compartment], network, reaction)

        return [subsystem_map[name] for name in sorted(subsystem_map)]

    def requires_cloning(self) -> bool:
        return False


class ConnectedComponentDecomposition(DecompositionAlgorithm):
    """Subsystems as connected components after cloning highly connected species."""

    name = "Connected Component Decomposition"

    def run_specific(self, network: MetabolicNetwork) -> list[Subsystem]:
        subsystems = []
        for component in connected_components(network.graph.nodes, network.graph.edges):
            reactions = sorted(n for n in component if network.is_reaction(n))
            if not reactions:
                continue
            subsystem = Subsystem(f"Component {len(subsystems) + 1}")
            for reaction in reactions:
                add_reaction_neighbourhood(subsystem, network, reaction)
            subsystems.append(subsystem)
        return subsystems

    def requires_cloning(self) -> bool:
        return True


class CommunityDecomposition(DecompositionAlgorithm):
    """Subsystems from Louvain community detection on the undirected network."""

    name = "Community Decomposition"

    def __init__(self, resolution: float = 1.0, seed: int | None = 42) -> None:
        self.resolution = resolution
        self.seed = seed

    def run_specific(self, network: MetabolicNetwork) -> list[Subsystem]:
        G = network.graph.to_undirected(as_view=True)
        if G.number_of_edges() == 0:
            logger.warning("Network has no edges, community detection skipped.")
            return []

        logger.info("Running Louvain community detection algorithm...")
        communities = nx.community.louvain_communities(
            G, resolution=self.resolution, seed=self.seed
        )

        subsystems = []
        for community in sorted(communities, key=min):
            reactions = sorted(n for n in community if network.is_reaction(n))
            if not reactions:
                continue
            subsystem = Subsystem(f"Community {len(subsystems) + 1}")
            for reaction in reactions:
                add_reaction_neighbourhood(subsystem, network, reaction)
            subsystems.append(subsystem)

        logger.info(f"Community detection complete. Found {len(subsystems)} communities.")
        return subsystems

    def requires_cloning(self) -> bool:
        return True


MethodFactory = Callable[["Settings"], DecompositionAlgorithm]

DECOMPOSITION_METHODS: dict[str, MethodFactory] = {
    PredefinedDecomposition.name: lambda s: PredefinedDecomposition(s.attribute_separator),
    AttributeDecomposition.name: lambda s: AttributeDecomposition(
        s.attribute_name, s.attribute_separator
    ),
    PathwayDecomposition.name: lambda s: PathwayDecomposition(),
    CompartmentDecomposition.name: lambda s: CompartmentDecomposition(),
    ConnectedComponentDecomposition.name: lambda s: ConnectedComponentDecomposition(),
    CommunityDecomposition.name: lambda s: CommunityDecomposition(
        resolution=s.community_resolution, seed=s.community_seed
    ),
}


def get_decomposition_method(name: str, settings: "Settings") -> DecompositionAlgorithm:
    """Instantiate the registered decomposition method called ``name``."""
    try:
        factory = DECOMPOSITION_METHODS[name]
    except KeyError:
        raise UnknownDecompositionMethodError(
            f"Unknown decomposition method '{name}'. "
            f"Available: {', '.join(sorted(DECOMPOSITION_METHODS))}"
        ) from None
    return factory(settings)
