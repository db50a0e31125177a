"""Domain model for metabolic networks.

A metabolic network is a directed bipartite graph of species and reaction
nodes. Nodes are stored in an arena and addressed by the integer id assigned
when they are added; the topology itself lives in a ``networkx.DiGraph`` keyed
by those ids. Clones live in the arena until they are restored and map back to
their original node through :meth:`MetabolicNetwork.original_of`.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import networkx as nx

logger = logging.getLogger(__name__)

# Type aliases for domain clarity
NodeId = int
Edge = tuple[NodeId, NodeId]
AttributeKey = tuple[str, str]

# Attribute namespaces and keys
SBML_NAMESPACE = "sbml"
LMME_NAMESPACE = "lmme"
COMPARTMENT = "compartment"
SUBSYSTEM = "subsystem"
PATHWAY = "pathway"


class NodeRole(str, Enum):
    """Role of a node in the bipartite network."""

    SPECIES = "species"
    REACTION = "reaction"


@dataclass
class NodeRecord:
    """Everything known about a node, independent of the working graph."""

    node_id: NodeId
    identifier: str
    role: NodeRole
    label: str = ""
    attributes: dict[AttributeKey, Any] = field(default_factory=dict)
    original: NodeId | None = None  # set for clones only


class MetabolicNetwork:
    """Species/reaction network with stable integer node ids."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.graph = nx.DiGraph()
        self._records: dict[NodeId, NodeRecord] = {}
        self._next_id = 0
        # original species -> its edges before cloning, used to restore
        self._cloned_edges: dict[NodeId, list[Edge]] = {}

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def _add_node(
        self,
        identifier: str,
        role: NodeRole,
        label: str | None,
        attributes: dict[AttributeKey, Any] | None,
    ) -> NodeId:
        node_id = self._next_id
        self._next_id += 1
        record = NodeRecord(
            node_id=node_id,
            identifier=identifier,
            role=role,
            label=label if label is not None else identifier,
            attributes=dict(attributes or {}),
        )
        self._records[node_id] = record
        self.graph.add_node(node_id, role=role)
        return node_id

    def add_species(
        self,
        identifier: str,
        compartment: str | None = None,
        label: str | None = None,
        attributes: dict[AttributeKey, Any] | None = None,
    ) -> NodeId:
        """Add a species node and return its id."""
        node_id = self._add_node(identifier, NodeRole.SPECIES, label, attributes)
        if compartment is not None:
            self.set_attribute(node_id, COMPARTMENT, compartment, SBML_NAMESPACE)
        return node_id

    def add_reaction(
        self,
        identifier: str,
        label: str | None = None,
        attributes: dict[AttributeKey, Any] | None = None,
    ) -> NodeId:
        """Add a reaction node and return its id."""
        return self._add_node(identifier, NodeRole.REACTION, label, attributes)

    def add_edge(self, source: NodeId, target: NodeId) -> Edge:
        """Add a directed edge between a species and a reaction node."""
        if self.role_of(source) == self.role_of(target):
            raise ValueError(
                f"Edges must connect a species and a reaction, got {source} -> {target}"
            )
        self.graph.add_edge(source, target)
        return (source, target)

    def add_reaction_with_species(
        self,
        identifier: str,
        substrates: Iterable[NodeId],
        products: Iterable[NodeId],
        label: str | None = None,
        attributes: dict[AttributeKey, Any] | None = None,
    ) -> NodeId:
        """Add a reaction consuming ``substrates`` and producing ``products``."""
        reaction = self.add_reaction(identifier, label=label, attributes=attributes)
        for species in substrates:
            self.add_edge(species, reaction)
        for species in products:
            self.add_edge(reaction, species)
        return reaction

    # ------------------------------------------------------------------
    # Node queries
    # ------------------------------------------------------------------

    def role_of(self, node: NodeId) -> NodeRole:
        return self._records[node].role

    def identifier_of(self, node: NodeId) -> str:
        return self._records[node].identifier

    def label_of(self, node: NodeId) -> str:
        return self._records[node].label

    def is_species(self, node: NodeId) -> bool:
        return self._records[node].role is NodeRole.SPECIES

    def is_reaction(self, node: NodeId) -> bool:
        return self._records[node].role is NodeRole.REACTION

    def get_species_nodes(self) -> list[NodeId]:
        """Species nodes of the working graph (clones included)."""
        return [n for n in self.graph.nodes if self.is_species(n)]

    def get_reaction_nodes(self) -> list[NodeId]:
        return [n for n in self.graph.nodes if self.is_reaction(n)]

    def get_original_species_nodes(self) -> list[NodeId]:
        """Species nodes as ingested, ignoring any clones."""
        return [
            r.node_id
            for r in self._records.values()
            if r.role is NodeRole.SPECIES and r.original is None
        ]

    def find_species_by_identifier(self, identifiers: Iterable[str]) -> set[NodeId]:
        """Map species identifiers to original species nodes; unknown ids are ignored."""
        wanted = set(identifiers)
        return {n for n in self.get_original_species_nodes() if self.identifier_of(n) in wanted}

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def has_attribute(self, node: NodeId, key: str, namespace: str = SBML_NAMESPACE) -> bool:
        return (namespace, key) in self._records[node].attributes

    def get_attribute(
        self,
        node: NodeId,
        key: str,
        namespace: str = SBML_NAMESPACE,
        default: Any = None,
    ) -> Any:
        return self._records[node].attributes.get((namespace, key), default)

    def set_attribute(
        self, node: NodeId, key: str, value: Any, namespace: str = SBML_NAMESPACE
    ) -> None:
        self._records[node].attributes[(namespace, key)] = value

    # ------------------------------------------------------------------
    # Topology
    # ------------------------------------------------------------------

    def in_edges(self, node: NodeId) -> list[Edge]:
        return list(self.graph.in_edges(node))

    def out_edges(self, node: NodeId) -> list[Edge]:
        return list(self.graph.out_edges(node))

    def incident_edges(self, node: NodeId) -> list[Edge]:
        return self.in_edges(node) + self.out_edges(node)

    def in_neighbors(self, node: NodeId) -> list[NodeId]:
        return list(self.graph.predecessors(node))

    def out_neighbors(self, node: NodeId) -> list[NodeId]:
        return list(self.graph.successors(node))

    def degree(self, node: NodeId) -> int:
        return self.graph.degree(node)

    @property
    def num_species(self) -> int:
        return len(self.get_species_nodes())

    @property
    def num_reactions(self) -> int:
        return len(self.get_reaction_nodes())

    @property
    def num_nodes(self) -> int:
        """Nodes held in the arena, live clones included."""
        return len(self._records)

    # ------------------------------------------------------------------
    # Clone bookkeeping
    # ------------------------------------------------------------------

    def original_of(self, node: NodeId) -> NodeId:
        """Return the original node of a clone, or the node itself."""
        original = self._records[node].original
        return node if original is None else original

    def working_nodes_of(self, node: NodeId) -> list[NodeId]:
        """Return the nodes of the working graph that represent ``node``."""
        if node in self.graph:
            return [node]
        return [n for n in self.graph.nodes if self._records[n].original == node]

    def replace_with_clones(self, species: NodeId) -> list[NodeId]:
        """Replace ``species`` in the working graph by one clone per incident edge."""
        edges = self.incident_edges(species)
        original = self._records[species]
        clones: list[NodeId] = []
        for source, target in edges:
            clone = self._add_node(
                original.identifier, NodeRole.SPECIES, original.label, original.attributes
            )
            self._records[clone].original = species
            if source == species:
                self.graph.add_edge(clone, target)
            else:
                self.graph.add_edge(source, clone)
            clones.append(clone)
        self.graph.remove_node(species)
        self._cloned_edges[species] = edges
        return clones

    def restore_clones(self) -> int:
        """Undo all cloning, returning the number of restored species."""
        if not self._cloned_edges:
            return 0
        clones = [n for n, r in self._records.items() if r.original is not None]
        self.graph.remove_nodes_from(clones)
        for clone in clones:
            del self._records[clone]
        # ids of the dropped clones are handed out again
        self._next_id = max(self._records, default=-1) + 1
        for species, edges in self._cloned_edges.items():
            self.graph.add_node(species, role=NodeRole.SPECIES)
            self.graph.add_edges_from(edges)
        restored = len(self._cloned_edges)
        self._cloned_edges.clear()
        logger.info(f"Restored {restored} cloned species in network '{self.name}'.")
        return restored

    def __repr__(self) -> str:
        return (
            f"MetabolicNetwork(name={self.name!r}, species={self.num_species}, "
            f"reactions={self.num_reactions})"
        )
