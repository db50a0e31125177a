"""Overview graph describing how subsystems are connected.

A species is an interface from subsystem S1 to subsystem S2 if it is
produced by a reaction of S1 and consumed by a reaction of S2. The overview
graph has one node per subsystem and an undirected edge between two
subsystems whenever there is at least one interface in either direction.
"""

import logging
from collections.abc import Iterable

import networkx as nx
from tqdm import tqdm

from ..decomposition.models import Decomposition, Subsystem
from ..exceptions import InputMissingError
from ..network.models import MetabolicNetwork, NodeId

logger = logging.getLogger(__name__)

MAX_EDGE_THICKNESS = 20


class OverviewGraph:
    """Subsystem level graph built from a decomposition."""

    def __init__(self, decomposition: Decomposition, network: MetabolicNetwork) -> None:
        self.decomposition = decomposition
        self.network = network
        self.graph = nx.Graph()
        self._node_to_subsystem: dict[int, Subsystem] = {}
        self._subsystem_to_node: dict[Subsystem, int] = {}
        self._interfaces = self._determine_interfaces()
        self._build()

    def _determine_interfaces(self) -> dict[Subsystem, dict[Subsystem, list[NodeId]]]:
        subsystems = self.decomposition.get_subsystems()
        interfaces: dict[Subsystem, dict[Subsystem, list[NodeId]]] = {
            s1: {s2: [] for s2 in subsystems if s2 is not s1} for s1 in subsystems
        }

        show_progress = logger.isEnabledFor(logging.INFO)
        for species in tqdm(
            self.network.get_species_nodes(),
            desc="Determining interfaces",
            unit="species",
            disable=not show_progress,
        ):
            in_systems: dict[Subsystem, None] = {}
            out_systems: dict[Subsystem, None] = {}
            for reaction in self.network.in_neighbors(species):
                in_systems.update(
                    dict.fromkeys(self.decomposition.get_subsystems_for_reaction(reaction))
                )
            for reaction in self.network.out_neighbors(species):
                out_systems.update(
                    dict.fromkeys(self.decomposition.get_subsystems_for_reaction(reaction))
                )
            for in_system in in_systems:
                for out_system in out_systems:
                    if in_system is not out_system:
                        interfaces[in_system][out_system].append(species)

        return interfaces

    def _build(self) -> None:
        subsystems = self.decomposition.get_subsystems()
        for index, subsystem in enumerate(subsystems):
            self.graph.add_node(index, subsystem=subsystem, label=subsystem.name)
            self._node_to_subsystem[index] = subsystem
            self._subsystem_to_node[subsystem] = index

        for i, subsystem1 in enumerate(subsystems):
            for subsystem2 in subsystems[i + 1 :]:
                interfaces = self.get_interface_nodes(
                    subsystem1, subsystem2
                ) + self.get_interface_nodes(subsystem2, subsystem1)
                if interfaces:
                    self.graph.add_edge(
                        self._subsystem_to_node[subsystem1],
                        self._subsystem_to_node[subsystem2],
                        interfaces=interfaces,
                        weight=len(interfaces),
                    )

        logger.info(
            f"Overview graph built with {self.graph.number_of_nodes()} subsystems and "
            f"{self.graph.number_of_edges()} connections."
        )

    def subsystem_of(self, node: int) -> Subsystem:
        return self._node_to_subsystem[node]

    def node_of(self, subsystem: Subsystem) -> int:
        return self._subsystem_to_node[subsystem]

    def get_interface_nodes(self, subsystem1: Subsystem, subsystem2: Subsystem) -> list[NodeId]:
        """Species produced in ``subsystem1`` and consumed in ``subsystem2``."""
        if subsystem1 is subsystem2:
            return []
        return list(self._interfaces[subsystem1][subsystem2])

    def get_edge_interfaces(self, subsystem1: Subsystem, subsystem2: Subsystem) -> list[NodeId]:
        """Interfaces carried by the edge between two subsystems, empty if there is none."""
        u, v = self.node_of(subsystem1), self.node_of(subsystem2)
        if not self.graph.has_edge(u, v):
            return []
        return list(self.graph.edges[u, v]["interfaces"])

    def get_selected_subsystems(self, selection: Iterable[int]) -> list[Subsystem]:
        """Translate selected overview nodes into their subsystems.

        Raises:
            InputMissingError: If a selected id is not a node of the overview graph.
        """
        selection = list(selection)
        unknown = [node for node in selection if node not in self._node_to_subsystem]
        if unknown:
            raise InputMissingError(f"Selection contains unknown overview nodes: {unknown}")
        return [self._node_to_subsystem[node] for node in selection]

    def edge_thickness(
        self,
        subsystem1: Subsystem,
        subsystem2: Subsystem,
        draw_edges: bool = True,
        map_to_edge_thickness: bool = True,
        max_thickness: int = MAX_EDGE_THICKNESS,
    ) -> float:
        """Display thickness of an edge; -1 means the edge is hidden."""
        if not draw_edges:
            return -1.0
        if not map_to_edge_thickness:
            return 1.0
        return float(min(len(self.get_edge_interfaces(subsystem1, subsystem2)), max_thickness))

    def interface_labels(self, subsystem1: Subsystem, subsystem2: Subsystem) -> list[str]:
        return [self.network.label_of(n) for n in self.get_edge_interfaces(subsystem1, subsystem2)]

    @property
    def num_subsystems(self) -> int:
        return self.graph.number_of_nodes()


def build_overview_graph(decomposition: Decomposition, network: MetabolicNetwork) -> OverviewGraph:
    return OverviewGraph(decomposition, network)
