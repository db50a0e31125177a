"""Tests for the exploration session."""

import pytest

from lmme.config import Settings
from lmme.exceptions import InputMissingError
from lmme.network import MetabolicNetwork
from lmme.session import TRANSLATOR_MISSING_MESSAGE, FormatTranslator, LMMESession


class RecordingTranslator:
    def __init__(self):
        self.calls = []

    def translate(self, network, subsystems):
        self.calls.append((network, list(subsystems)))


@pytest.fixture
def differential_file(tmp_path):
    path = tmp_path / "differential.txt"
    path.write_text("A\nB\nC\n")
    return path


def test_preconditions():
    session = LMMESession()
    with pytest.raises(InputMissingError):
        session.construct_overview_graph()
    with pytest.raises(InputMissingError):
        session.run_ora("differential.txt")
    with pytest.raises(InputMissingError):
        session.get_selected_subsystems([0])


def test_set_model_without_species_keeps_state(toy_network):
    session = LMMESession()
    session.set_model(toy_network)
    session.construct_overview_graph()

    with pytest.raises(InputMissingError):
        session.set_model(MetabolicNetwork("empty"))

    assert session.network is toy_network
    assert session.is_overview_graph_constructed


def test_full_session(toy_network, differential_file):
    session = LMMESession(Settings(add_transporter_subsystem=True))
    session.set_model(toy_network)
    overview = session.construct_overview_graph()

    assert overview.num_subsystems == 4
    significant = session.run_ora(differential_file)
    assert {s.name for s in significant} == {"Glycolysis"}
    assert session.significant_subsystems == significant
    assert session.ora is not None

    selected = session.get_selected_subsystems([0])
    assert [s.name for s in selected] == ["Glycolysis"]


def test_new_model_resets_results(toy_network, hub_network):
    session = LMMESession()
    session.set_model(toy_network)
    session.construct_overview_graph()

    session.set_model(hub_network[0])
    assert session.overview_graph is None
    assert session.decomposition is None


def test_run_ora_missing_file(toy_network, tmp_path):
    session = LMMESession()
    session.set_model(toy_network)
    session.construct_overview_graph()
    with pytest.raises(FileNotFoundError):
        session.run_ora(tmp_path / "missing.txt")


def test_empty_selection(toy_network):
    session = LMMESession()
    session.set_model(toy_network)
    session.construct_overview_graph()
    with pytest.raises(InputMissingError):
        session.get_selected_subsystems([])


def test_reconstruction_restores_clones(hub_network):
    network, nodes = hub_network
    settings = Settings(
        decomposition_method="Connected Component Decomposition",
        add_default_subsystem=False,
        clonable_species=["ATP"],
    )
    session = LMMESession(settings)
    session.set_model(network)

    first = session.construct_overview_graph()
    assert first.num_subsystems == 2
    assert nodes["ATP"] not in network.graph
    num_nodes = network.graph.number_of_nodes()

    second = session.construct_overview_graph()
    assert second.num_subsystems == 2
    assert network.graph.number_of_nodes() == num_nodes

    session.construct_overview_graph("Predefined Subsystems")
    assert nodes["ATP"] in network.graph
    assert network.get_species_nodes() == network.get_original_species_nodes()


def test_set_model_restores_clones_of_previous_model(hub_network, toy_network):
    network, nodes = hub_network
    session = LMMESession(
        Settings(decomposition_method="Connected Component Decomposition", clonable_species=["ATP"])
    )
    session.set_model(network)
    session.construct_overview_graph()

    session.set_model(toy_network)
    assert nodes["ATP"] in network.graph


def test_translate_without_translator(toy_network):
    session = LMMESession()
    session.set_model(toy_network)
    subsystems = list(session.construct_overview_graph().decomposition)

    assert session.translate_subsystems(subsystems) == TRANSLATOR_MISSING_MESSAGE


def test_translate_with_translator(toy_network):
    translator = RecordingTranslator()
    assert isinstance(translator, FormatTranslator)

    session = LMMESession(translator=translator)
    session.set_model(toy_network)
    subsystems = list(session.construct_overview_graph().decomposition)

    assert session.translate_subsystems(subsystems) is None
    assert translator.calls == [(toy_network, subsystems)]
    assert session.translate_subsystems([]) is not None


def test_repeated_construction_keeps_node_arena_size(hub_network):
    network, _ = hub_network
    session = LMMESession(
        Settings(decomposition_method="Connected Component Decomposition", clonable_species=["ATP"])
    )
    session.set_model(network)

    sizes = []
    for _ in range(4):
        session.construct_overview_graph()
        sizes.append(network.num_nodes)
    assert sizes == [sizes[0]] * 4


def test_edge_thickness_follows_settings(toy_network):
    session = LMMESession()
    with pytest.raises(InputMissingError):
        session.edge_thickness(None, None)

    session.set_model(toy_network)
    decomposition = session.construct_overview_graph().decomposition
    tca = decomposition.get_subsystem("TCA")
    default = decomposition.get_subsystem("DEFAULT")
    assert session.edge_thickness(tca, default) == 1

    session.settings = Settings(draw_edges=False)
    assert session.edge_thickness(tca, default) == -1


def test_selection_of_unknown_node(toy_network):
    session = LMMESession()
    session.set_model(toy_network)
    session.construct_overview_graph()
    with pytest.raises(InputMissingError):
        session.get_selected_subsystems([42])
