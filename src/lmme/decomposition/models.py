"""Subsystems and decompositions of a metabolic network."""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field

from ..exceptions import SubsystemFrozenError
from ..network.models import Edge, NodeId

DEFAULT_SUBSYSTEM = "DEFAULT"
TRANSPORTER_SUBSYSTEM = "TRANSPORTER"


@dataclass(eq=False)
class Subsystem:
    """A named group of species, reactions and edges of a network.

    Subsystems are filled while a decomposition is computed and frozen once
    they are added to a :class:`Decomposition`. Two subsystems are only equal
    if they are the same object.
    """

    name: str
    species_nodes: set[NodeId] = field(default_factory=set)
    reaction_nodes: set[NodeId] = field(default_factory=set)
    edges: set[Edge] = field(default_factory=set)
    frozen: bool = field(default=False, repr=False)

    def _check_mutable(self) -> None:
        if self.frozen:
            raise SubsystemFrozenError(f"Subsystem '{self.name}' can no longer be modified")

    def add_species(self, node: NodeId) -> None:
        self._check_mutable()
        self.species_nodes.add(node)

    def add_reaction(self, node: NodeId) -> None:
        self._check_mutable()
        self.reaction_nodes.add(node)

    def add_edge(self, edge: Edge) -> None:
        self._check_mutable()
        self.edges.add(edge)

    def nodes(self) -> set[NodeId]:
        return self.species_nodes | self.reaction_nodes

    def freeze(self) -> None:
        self.frozen = True

    @property
    def number_of_species(self) -> int:
        return len(self.species_nodes)

    @property
    def number_of_reactions(self) -> int:
        return len(self.reaction_nodes)

    def __repr__(self) -> str:
        return (
            f"Subsystem(name={self.name!r}, species={self.number_of_species}, "
            f"reactions={self.number_of_reactions})"
        )


class Decomposition:
    """Ordered collection of subsystems with a reaction -> subsystems index."""

    def __init__(self, subsystems: Iterable[Subsystem] = ()) -> None:
        self._subsystems: list[Subsystem] = []
        self._reaction_index: dict[NodeId, list[Subsystem]] = defaultdict(list)
        for subsystem in subsystems:
            self.add_subsystem(subsystem)

    def add_subsystem(self, subsystem: Subsystem) -> None:
        subsystem.freeze()
        self._subsystems.append(subsystem)
        for reaction in subsystem.reaction_nodes:
            self._reaction_index[reaction].append(subsystem)

    def get_subsystems(self) -> list[Subsystem]:
        return list(self._subsystems)

    def has_reaction_been_classified(self, reaction: NodeId) -> bool:
        return bool(self._reaction_index.get(reaction))

    def get_subsystems_for_reaction(self, reaction: NodeId) -> list[Subsystem]:
        return list(self._reaction_index.get(reaction, ()))

    def get_subsystem(self, name: str) -> Subsystem | None:
        """Return the first subsystem called ``name``, if any."""
        for subsystem in self._subsystems:
            if subsystem.name == name:
                return subsystem
        return None

    def __len__(self) -> int:
        return len(self._subsystems)

    def __iter__(self):
        return iter(self._subsystems)
