import pytest

from lmme.network import LMME_NAMESPACE, MetabolicNetwork


def _toy_network() -> tuple[MetabolicNetwork, dict[str, int]]:
    """Small network with two annotated subsystems and some loose reactions.

    Glycolysis:   A -R1-> B -R2-> C
    TCA:          C -R3-> E -R4-> F
    unannotated:  C -T1-> D          (compartment c -> e)
                  F -U1-> G -U2-> H
                  X -U3-> Y
    """
    network = MetabolicNetwork("toy")
    nodes: dict[str, int] = {}
    for species in ["A", "B", "C", "E", "F", "G", "H", "X", "Y"]:
        nodes[species] = network.add_species(species, compartment="c")
    nodes["D"] = network.add_species("D", compartment="e")

    reactions = {
        "R1": (["A"], ["B"], "Glycolysis"),
        "R2": (["B"], ["C"], "Glycolysis"),
        "R3": (["C"], ["E"], "TCA"),
        "R4": (["E"], ["F"], "TCA"),
        "T1": (["C"], ["D"], None),
        "U1": (["F"], ["G"], None),
        "U2": (["G"], ["H"], None),
        "U3": (["X"], ["Y"], None),
    }
    for name, (substrates, products, subsystem) in reactions.items():
        reaction = network.add_reaction_with_species(
            name, [nodes[s] for s in substrates], [nodes[p] for p in products]
        )
        if subsystem is not None:
            network.set_attribute(reaction, "subsystem", subsystem)
        nodes[name] = reaction
    return network, nodes


@pytest.fixture
def toy():
    """Provide the toy network together with its identifier -> node id map."""
    return _toy_network()


@pytest.fixture
def toy_network(toy) -> MetabolicNetwork:
    return toy[0]


@pytest.fixture
def multi_network() -> tuple[MetabolicNetwork, dict[str, int]]:
    """Reactions annotated with several pathways separated by ';'."""
    network = MetabolicNetwork("multi")
    nodes = {s: network.add_species(s, compartment="c") for s in ["M1", "M2", "M3", "M4"]}
    annotations = {
        "P1": (["M1"], ["M2"], "Alpha"),
        "P2": (["M2"], ["M3"], "Alpha;Beta"),
        "P3": (["M3"], ["M4"], "Beta"),
        "P4": (["M4"], ["M1"], ""),
    }
    for name, (substrates, products, value) in annotations.items():
        reaction = network.add_reaction_with_species(
            name, [nodes[s] for s in substrates], [nodes[p] for p in products]
        )
        network.set_attribute(reaction, "pathways", value, LMME_NAMESPACE)
        nodes[name] = reaction
    return network, nodes


@pytest.fixture
def hub_network() -> tuple[MetabolicNetwork, dict[str, int]]:
    """Two linear pathways joined only through the currency metabolite ATP."""
    network = MetabolicNetwork("hub")
    nodes = {s: network.add_species(s, compartment="c") for s in ["S1", "S2", "S3", "T1", "T2", "T3", "ATP"]}
    chains = {
        "Q1": ("S1", "S2"),
        "Q2": ("S2", "S3"),
        "W1": ("T1", "T2"),
        "W2": ("T2", "T3"),
    }
    for name, (substrate, product) in chains.items():
        nodes[name] = network.add_reaction_with_species(
            name, [nodes[substrate], nodes["ATP"]], [nodes[product]]
        )
    return network, nodes
