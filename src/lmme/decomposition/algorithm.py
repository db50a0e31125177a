"""Decomposition engine shared by all decomposition methods.

A decomposition method only has to say how it groups reactions into
subsystems (:meth:`DecompositionAlgorithm.run_specific`). Everything that
happens afterwards is common to all methods:

1. Unclassified reactions that move a species between two compartments are
   collected in a transporter subsystem.
2. All remaining unclassified reactions are collected in a default subsystem,
   which can be split into its connected components.
"""

import logging
import time
from abc import ABC, abstractmethod

from ..network.cloning import CloningOptions, clone_species
from ..network.components import connected_components
from ..network.models import COMPARTMENT, SBML_NAMESPACE, MetabolicNetwork, NodeId
from .models import DEFAULT_SUBSYSTEM, TRANSPORTER_SUBSYSTEM, Decomposition, Subsystem

logger = logging.getLogger(__name__)


def add_reaction_neighbourhood(
    subsystem: Subsystem, network: MetabolicNetwork, reaction: NodeId
) -> None:
    """Add a reaction with all of its incident edges and species to ``subsystem``."""
    subsystem.add_reaction(reaction)
    for edge in network.in_edges(reaction):
        subsystem.add_edge(edge)
        subsystem.add_species(edge[0])
    for edge in network.out_edges(reaction):
        subsystem.add_edge(edge)
        subsystem.add_species(edge[1])


class DecompositionAlgorithm(ABC):
    """Base class for decomposition methods."""

    name: str = ""

    @abstractmethod
    def run_specific(self, network: MetabolicNetwork) -> list[Subsystem]:
        """Group the reactions of ``network`` into method specific subsystems."""

    @abstractmethod
    def requires_cloning(self) -> bool:
        """Whether species have to be cloned before :meth:`run_specific`."""

    def run(
        self,
        network: MetabolicNetwork,
        add_transporter_subsystem: bool = False,
        add_default_subsystem: bool = True,
        split_default_subsystem: bool = False,
        minimum_subsystem_size: int = 1,
        cloning: CloningOptions | None = None,
    ) -> Decomposition:
        """Decompose ``network`` into subsystems.

        Args:
            network: The network to decompose.
            add_transporter_subsystem: Collect unclassified transport reactions
                in a subsystem named ``TRANSPORTER``.
            add_default_subsystem: Collect all remaining unclassified reactions
                in a subsystem named ``DEFAULT``.
            split_default_subsystem: Split the default subsystem into its
                connected components.
            minimum_subsystem_size: Components with fewer nodes than this stay
                in the residual default subsystem ``DEFAULT 0``.
            cloning: Species to clone, used only if the method requires cloning.

        Returns:
            The completed decomposition.

        Raises:
            CloningError: If cloning was requested and failed.
        """
        logger.info(f"Running decomposition '{self.name}' on {network!r}")
        start_time = time.perf_counter()

        if self.requires_cloning() and cloning is not None:
            clone_species(network, cloning)

        decomposition = Decomposition(self.run_specific(network))
        logger.info(f"'{self.name}' produced {len(decomposition)} subsystems.")

        if add_transporter_subsystem:
            decomposition.add_subsystem(
                self.determine_transporter_subsystem(network, decomposition)
            )

        if add_default_subsystem:
            default_subsystem = self.determine_default_subsystem(network, decomposition)
            if split_default_subsystem:
                for subsystem in self.split_default_subsystem(
                    network, default_subsystem, minimum_subsystem_size
                ):
                    decomposition.add_subsystem(subsystem)
                remaining = self.determine_default_subsystem(network, decomposition)
                remaining.name = f"{DEFAULT_SUBSYSTEM} 0"
                decomposition.add_subsystem(remaining)
            else:
                decomposition.add_subsystem(default_subsystem)

        elapsed = time.perf_counter() - start_time
        logger.info(
            f"Decomposition finished with {len(decomposition)} subsystems in {elapsed:.3f} s."
        )
        return decomposition

    def determine_transporter_subsystem(
        self, network: MetabolicNetwork, decomposition: Decomposition
    ) -> Subsystem:
        """Collect unclassified reactions that connect two compartments.

        A reaction qualifies if it has exactly one substrate and one product,
        both carry a compartment attribute and the compartments differ.
        """
        transporter = Subsystem(TRANSPORTER_SUBSYSTEM)
        for reaction in network.get_reaction_nodes():
            if decomposition.has_reaction_been_classified(reaction):
                continue
            in_edges = network.in_edges(reaction)
            out_edges = network.out_edges(reaction)
            if len(in_edges) != 1 or len(out_edges) != 1:
                continue
            in_edge, out_edge = in_edges[0], out_edges[0]
            substrate, product = in_edge[0], out_edge[1]
            if not (
                network.has_attribute(substrate, COMPARTMENT, SBML_NAMESPACE)
                and network.has_attribute(product, COMPARTMENT, SBML_NAMESPACE)
            ):
                continue
            if network.get_attribute(substrate, COMPARTMENT) != network.get_attribute(
                product, COMPARTMENT
            ):
                transporter.add_reaction(reaction)
                transporter.add_species(substrate)
                transporter.add_species(product)
                transporter.add_edge(in_edge)
                transporter.add_edge(out_edge)

        logger.info(f"Transporter subsystem holds {transporter.number_of_reactions} reactions.")
        return transporter

    def determine_default_subsystem(
        self, network: MetabolicNetwork, decomposition: Decomposition
    ) -> Subsystem:
        """Collect every reaction that no subsystem contains so far."""
        default = Subsystem(DEFAULT_SUBSYSTEM)
        for reaction in network.get_reaction_nodes():
            if not decomposition.has_reaction_been_classified(reaction):
                add_reaction_neighbourhood(default, network, reaction)
        return default

    def split_default_subsystem(
        self,
        network: MetabolicNetwork,
        default_subsystem: Subsystem,
        threshold: int,
    ) -> list[Subsystem]:
        """Split the default subsystem into connected components.

        Components are computed on a working copy of the subsystem's own nodes
        and edges, so species shared with other subsystems do not connect
        otherwise separate parts. Only components with at least ``threshold``
        nodes are returned, numbered from 1 in order of their smallest node id.
        """
        components = connected_components(default_subsystem.nodes(), default_subsystem.edges)

        subsystems = []
        for component in components:
            if len(component) < threshold:
                continue
            subsystem = Subsystem(f"{DEFAULT_SUBSYSTEM} {len(subsystems) + 1}")
            for node in component:
                if network.is_species(node):
                    subsystem.add_species(node)
                else:
                    subsystem.add_reaction(node)
            for edge in default_subsystem.edges:
                if edge[0] in component:
                    subsystem.add_edge(edge)
            subsystems.append(subsystem)

        logger.info(
            f"Split default subsystem into {len(components)} components, "
            f"{len(subsystems)} of them with at least {threshold} nodes."
        )
        return subsystems

    def determine_subsystems_from_reaction_attributes(
        self,
        network: MetabolicNetwork,
        attribute_name: str,
        separator: str | None,
        namespace: str,
    ) -> list[Subsystem]:
        """Build one subsystem per distinct value of a reaction attribute.

        Args:
            network: The network to decompose.
            attribute_name: Attribute holding the subsystem name(s).
            separator: Splits a value into several subsystem names; ``None``
                or an empty string treats every value as a single name.
            namespace: Attribute namespace.

        Returns:
            Subsystems ordered by name. Reactions without a value, or with an
            empty value, are left unclassified.
        """
        subsystem_map: dict[str, Subsystem] = {}
        for reaction in network.get_reaction_nodes():
            value = network.get_attribute(reaction, attribute_name, namespace, default="")
            for name in split_attribute_value(value, separator):
                if name not in subsystem_map:
                    subsystem_map[name] = Subsystem(name)
                add_reaction_neighbourhood(subsystem_map[name], network, reaction)

        return [subsystem_map[name] for name in sorted(subsystem_map)]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


def split_attribute_value(value: object, separator: str | None) -> list[str]:
    """Split an attribute value into distinct, non-empty subsystem names."""
    if value is None:
        return []
    text = str(value)
    parts = text.split(separator) if separator else [text]
    names: list[str] = []
    for part in parts:
        part = part.strip()
        if part and part not in names:
            names.append(part)
    return names
