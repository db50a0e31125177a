"""Tests for the over-representation analysis."""

import pytest

import lmme.analysis.ora as ora_module
from lmme.analysis import (
    OverRepresentationAnalysis,
    PValueStatus,
    analyze,
    benjamini_hochberg,
    hypergeometric_p_value,
    read_identifier_list,
)
from lmme.decomposition import Decomposition, PredefinedDecomposition, Subsystem


def test_benjamini_hochberg_accepts_prefix():
    p_values = {"a": 0.001, "b": 0.01, "c": 0.02, "d": 0.5, "e": 0.9}
    assert benjamini_hochberg(p_values, 0.05) == {"a", "b", "c"}


def test_benjamini_hochberg_stops_at_first_failure():
    # 0.04 would pass its own threshold, but 0.03 fails first
    assert benjamini_hochberg({"a": 0.03, "b": 0.04}, 0.05) == set()


def test_benjamini_hochberg_all_and_none():
    assert benjamini_hochberg({"a": 0.0, "b": 0.01}, 0.05) == {"a", "b"}
    assert benjamini_hochberg({}, 0.05) == set()


def test_hypergeometric_exact_values():
    upper = hypergeometric_p_value(population=10, successes=4, sample=3, observed=2)
    assert upper.status is PValueStatus.OK
    assert upper.p_value == pytest.approx(1 / 3)

    lower = hypergeometric_p_value(population=10, successes=4, sample=3, observed=1)
    assert lower.p_value == pytest.approx(5 / 6)


def test_hypergeometric_nothing_observed():
    result = hypergeometric_p_value(population=10, successes=4, sample=3, observed=0)
    assert result.p_value == 1.0
    assert not result.is_degenerate


def test_hypergeometric_degenerate_inputs():
    empty = hypergeometric_p_value(population=10, successes=4, sample=0, observed=0)
    assert empty.is_degenerate
    assert empty.p_value == 1.0

    invalid = hypergeometric_p_value(population=5, successes=8, sample=3, observed=1)
    assert invalid.status is PValueStatus.DEGENERATE
    assert invalid.p_value == 1.0


def test_hypergeometric_decreases_with_observed():
    p_values = [
        hypergeometric_p_value(population=50, successes=10, sample=10, observed=k).p_value
        for k in range(11)
    ]
    assert all(0.0 <= p <= 1.0 for p in p_values)
    assert all(a >= b for a, b in zip(p_values, p_values[1:]))


def test_clones_are_counted_once():
    subsystem = Subsystem("S", species_nodes={100, 101, 2})
    ora = OverRepresentationAnalysis(
        Decomposition([subsystem]),
        differential_nodes={0},
        reference_nodes={0, 1, 2},
        original_of={100: 0, 101: 0},
    )
    counts = ora.count_subsystem(subsystem)
    assert counts.n_reference == 2
    assert counts.n_differential == 1


def test_empty_differential_set():
    decomposition = Decomposition([Subsystem("S", species_nodes={0, 1})])
    assert analyze([], [0, 1], decomposition) == set()


def test_all_differential_in_one_subsystem():
    a = Subsystem("A", species_nodes=set(range(5)))
    b = Subsystem("B", species_nodes=set(range(5, 20)))
    decomposition = Decomposition([a, b])

    ora = OverRepresentationAnalysis(
        decomposition, differential_nodes=range(5), species_population=range(20)
    )
    significant = ora.get_significant_subsystems()

    assert significant == {a}
    assert ora.p_values[a] == pytest.approx(1 / 15504)
    assert ora.p_values[b] == 1.0

    df = ora.to_frame()
    assert list(df.columns) == [
        "subsystem",
        "n_reference",
        "n_differential",
        "p_value",
        "status",
        "significant",
    ]
    assert df.loc[0, "subsystem"] == "A"
    assert bool(df.loc[0, "significant"])
    assert df.loc[1, "n_reference"] == 15


def test_differential_outside_reference_is_added():
    subsystem = Subsystem("S", species_nodes={0, 1})
    ora = OverRepresentationAnalysis(
        Decomposition([subsystem]), differential_nodes={0}, reference_nodes={1, 2}
    )
    assert ora.reference_nodes == {0, 1, 2}


def test_from_files(toy, tmp_path):
    network, _ = toy
    decomposition = PredefinedDecomposition().run(network)
    differential = tmp_path / "differential.txt"
    differential.write_text("A\nB\nC\nunknown\n")

    ora = OverRepresentationAnalysis.from_files(network, decomposition, differential)
    significant = ora.get_significant_subsystems()

    assert {s.name for s in significant} == {"Glycolysis"}
    assert ora.p_values[decomposition.get_subsystem("Glycolysis")] == pytest.approx(1 / 120)
    assert len(ora.reference_nodes) == network.num_species


def test_from_files_with_reference(toy, tmp_path):
    network, nodes = toy
    decomposition = PredefinedDecomposition().run(network)
    differential = tmp_path / "differential.txt"
    differential.write_text("A\n")
    reference = tmp_path / "reference.txt"
    reference.write_text("B\nC\n")

    ora = OverRepresentationAnalysis.from_files(network, decomposition, differential, reference)
    assert ora.reference_nodes == {nodes["A"], nodes["B"], nodes["C"]}


def test_missing_file(toy, tmp_path):
    network, _ = toy
    decomposition = PredefinedDecomposition().run(network)
    with pytest.raises(FileNotFoundError):
        OverRepresentationAnalysis.from_files(network, decomposition, tmp_path / "missing.txt")


def test_read_identifier_list_keeps_lines_literally(tmp_path):
    path = tmp_path / "ids.txt"
    path.write_text("glc\r\n g6p\n\nglc\n")
    assert read_identifier_list(path) == {"glc", " g6p", ""}


@pytest.mark.parametrize("failure", ["raise", "nan"])
def test_numerical_failure_is_degenerate(monkeypatch, failure):
    real_cdf = ora_module.hypergeom.cdf

    def failing_cdf(k, population, successes, sample):
        if sample == 5:
            if failure == "raise":
                raise FloatingPointError("overflow")
            return float("nan")
        return real_cdf(k, population, successes, sample)

    monkeypatch.setattr(ora_module.hypergeom, "cdf", failing_cdf)

    failing = Subsystem("failing", species_nodes=set(range(5)))
    healthy = Subsystem("healthy", species_nodes={0, 1, 2, 5, 6, 7})
    ora = OverRepresentationAnalysis(
        Decomposition([failing, healthy]),
        differential_nodes=range(4),
        species_population=range(20),
    )
    ora.calculate_p_values()

    assert ora.results[failing].is_degenerate
    assert ora.p_values[failing] == 1.0
    assert ora.results[healthy].status is PValueStatus.OK
    assert ora.p_values[healthy] < 1.0
