"""Species cloning to avoid artificial links between subsystems.

Currency metabolites such as water or ATP take part in a large share of all
reactions. Left untouched they glue the whole network into one component.
Cloning replaces each such species by one copy per incident reaction; the
copies keep a reference to their original node so analyses can still count
the metabolite once.
"""

import logging
from dataclasses import dataclass, field

from ..exceptions import CloningError
from .models import MetabolicNetwork, NodeId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CloningOptions:
    """Which species to clone.

    Attributes:
        species: Species identifiers that are always cloned.
        degree_threshold: Species with more incident edges than this are
            cloned as well. ``None`` disables degree based cloning.
    """

    species: frozenset[str] = field(default_factory=frozenset)
    degree_threshold: int | None = None


def select_clonable_species(network: MetabolicNetwork, options: CloningOptions) -> list[NodeId]:
    """Return the working species nodes that ``options`` asks to clone."""
    if options.degree_threshold is not None and options.degree_threshold < 1:
        raise CloningError(
            f"Degree threshold must be a positive integer, got {options.degree_threshold}"
        )

    selected = []
    for species in network.get_species_nodes():
        if network.original_of(species) != species:
            continue
        if network.identifier_of(species) in options.species:
            selected.append(species)
        elif (
            options.degree_threshold is not None
            and network.degree(species) > options.degree_threshold
        ):
            selected.append(species)
    return selected


def clone_species(network: MetabolicNetwork, options: CloningOptions) -> dict[NodeId, list[NodeId]]:
    """Clone the species selected by ``options`` in place.

    Args:
        network: Network whose working graph is modified.
        options: Cloning selection.

    Returns:
        Mapping of original species node to the clones that replaced it.

    Raises:
        CloningError: If the options are invalid.
    """
    clones: dict[NodeId, list[NodeId]] = {}
    for species in select_clonable_species(network, options):
        # a species with a single edge gains nothing from cloning
        if network.degree(species) < 2:  # noqa: PLR2004
            continue
        clones[species] = network.replace_with_clones(species)

    num_clones = sum(len(c) for c in clones.values())
    logger.info(f"Cloned {len(clones)} species into {num_clones} copies.")
    return clones
