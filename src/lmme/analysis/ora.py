"""Over-representation analysis (ORA) of subsystems.

A list of differentially expressed metabolites is checked against a reference
set of metabolites, by default every metabolite of the model. For each
subsystem a one-tailed hypergeometric test (Fisher's exact test) asks whether
it contains more differential metabolites than expected. The false discovery
rate across subsystems is controlled with the Benjamini-Hochberg procedure.

Benjamini, Y., & Hochberg, Y. (1995). Controlling the false discovery rate:
a practical and powerful approach to multiple testing. Journal of the Royal
Statistical Society: Series B (Methodological), 57(1), 289-300.
"""

import logging
import math
from collections.abc import Callable, Hashable, Iterable, Mapping
from pathlib import Path
from typing import TypeVar

import numpy as np
import pandas as pd
from scipy.stats import hypergeom

from ..decomposition.models import Decomposition, Subsystem
from ..network.models import MetabolicNetwork, NodeId
from .io import read_identifier_list
from .models import DEFAULT_SIGNIFICANCE_LEVEL, HypergeometricResult, SubsystemCounts

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)

OriginalOf = Callable[[NodeId], NodeId] | Mapping[NodeId, NodeId]


def hypergeometric_p_value(
    population: int, successes: int, sample: int, observed: int
) -> HypergeometricResult:
    """One-tailed p-value P(X >= observed) of a hypergeometric distribution.

    Args:
        population: Population size N (reference metabolites).
        successes: Successes in the population K (differential metabolites).
        sample: Sample size n (reference metabolites in the subsystem).
        observed: Observed successes k (differential metabolites in the subsystem).

    Returns:
        The p-value, or a degenerate result with p-value 1.0 if the test is
        undefined for the given counts.
    """
    if sample <= 0:
        return HypergeometricResult.degenerate("empty sample")
    if not (0 <= successes <= population and sample <= population and observed >= 0):
        reason = f"invalid parameters N={population}, K={successes}, n={sample}, k={observed}"
        logger.warning(f"Hypergeometric test skipped: {reason}")
        return HypergeometricResult.degenerate(reason)
    if observed == 0:
        return HypergeometricResult(p_value=1.0)

    try:
        lower_tail = float(hypergeom.cdf(observed - 1, population, successes, sample))
        # a large lower tail leaves too few digits in 1 - cdf
        if lower_tail > 0.5:  # noqa: PLR2004
            p_value = float(hypergeom.sf(observed - 1, population, successes, sample))
        else:
            p_value = 1.0 - lower_tail
    except (ValueError, FloatingPointError) as e:
        logger.warning(f"Hypergeometric evaluation failed: {e}")
        return HypergeometricResult.degenerate(str(e))

    if not math.isfinite(p_value):
        logger.warning(
            f"Hypergeometric evaluation returned {p_value} for "
            f"N={population}, K={successes}, n={sample}, k={observed}"
        )
        return HypergeometricResult.degenerate("non-finite p-value")

    return HypergeometricResult(p_value=min(max(p_value, 0.0), 1.0))


def benjamini_hochberg(
    p_values: Mapping[K, float], significance_level: float = DEFAULT_SIGNIFICANCE_LEVEL
) -> set[K]:
    """Keys accepted by the Benjamini-Hochberg procedure.

    P-values are visited in ascending order; the i-th smallest is accepted
    while ``p <= i / m * significance_level`` and the procedure stops at the
    first p-value that fails.
    """
    if not p_values:
        return set()

    keys = list(p_values)
    values = np.array([p_values[k] for k in keys], dtype=float)
    order = np.argsort(values, kind="stable")
    m = len(keys)
    critical_values = np.arange(1, m + 1) / m * significance_level
    passed = values[order] <= critical_values
    n_significant = m if passed.all() else int(np.argmin(passed))
    return {keys[i] for i in order[:n_significant]}


class OverRepresentationAnalysis:
    """Over-representation analysis of the subsystems of a decomposition."""

    def __init__(
        self,
        decomposition: Decomposition,
        differential_nodes: Iterable[NodeId],
        reference_nodes: Iterable[NodeId] = (),
        original_of: OriginalOf | None = None,
        species_population: Iterable[NodeId] = (),
        significance_level: float = DEFAULT_SIGNIFICANCE_LEVEL,
    ) -> None:
        """
        Args:
            decomposition: Decomposition whose subsystems are tested.
            differential_nodes: Original species nodes of interest.
            reference_nodes: Original species nodes forming the background;
                empty means ``species_population``.
            original_of: Maps (possibly cloned) subsystem species to their
                original node; identity if omitted.
            species_population: All original species of the model.
            significance_level: FDR level of the Benjamini-Hochberg procedure.
        """
        self.decomposition = decomposition
        self.significance_level = significance_level
        self.differential_nodes: set[NodeId] = set(differential_nodes)
        background = set(reference_nodes) or set(species_population)
        self._empty_input = not self.differential_nodes or not background
        self.reference_nodes: set[NodeId] = background | self.differential_nodes

        if original_of is None:
            self._original_of: Callable[[NodeId], NodeId] = lambda node: node
        elif isinstance(original_of, Mapping):
            self._original_of = lambda node: original_of.get(node, node)
        else:
            self._original_of = original_of

        self.counts: dict[Subsystem, SubsystemCounts] = {}
        self.results: dict[Subsystem, HypergeometricResult] = {}
        self.p_values: dict[Subsystem, float] = {}
        self.significant_subsystems: set[Subsystem] = set()

    @classmethod
    def from_network(
        cls,
        network: MetabolicNetwork,
        decomposition: Decomposition,
        differential_ids: Iterable[str],
        reference_ids: Iterable[str] | None = None,
        significance_level: float = DEFAULT_SIGNIFICANCE_LEVEL,
    ) -> "OverRepresentationAnalysis":
        """Resolve species identifiers against the original species of ``network``."""
        differential = network.find_species_by_identifier(differential_ids)
        reference = network.find_species_by_identifier(reference_ids or ())
        if reference_ids:
            if not reference:
                logger.warning("None of the reference identifiers matched a species of the model.")
            reference |= differential
        logger.info(f"Matched {len(differential)} differential species in the model.")
        return cls(
            decomposition,
            differential,
            reference,
            original_of=network.original_of,
            species_population=network.get_original_species_nodes(),
            significance_level=significance_level,
        )

    @classmethod
    def from_files(
        cls,
        network: MetabolicNetwork,
        decomposition: Decomposition,
        differential_path: Path | str,
        reference_path: Path | str | None = None,
        significance_level: float = DEFAULT_SIGNIFICANCE_LEVEL,
    ) -> "OverRepresentationAnalysis":
        """Read identifier lists and resolve them against ``network``.

        Raises:
            FileNotFoundError: If one of the files does not exist.
        """
        differential_ids = read_identifier_list(differential_path)
        reference_ids = read_identifier_list(reference_path) if reference_path else None
        return cls.from_network(
            network, decomposition, differential_ids, reference_ids, significance_level
        )

    def count_subsystem(self, subsystem: Subsystem) -> SubsystemCounts:
        """Count reference and differential metabolites, each original counted once."""
        reference_in_subsystem: set[NodeId] = set()
        differential_in_subsystem: set[NodeId] = set()
        for species in subsystem.species_nodes:
            original = self._original_of(species)
            if original in self.differential_nodes:
                differential_in_subsystem.add(original)
            if original in self.reference_nodes:
                reference_in_subsystem.add(original)
        return SubsystemCounts(
            n_reference=len(reference_in_subsystem),
            n_differential=len(differential_in_subsystem),
        )

    def calculate_p_values(self) -> dict[Subsystem, float]:
        """Compute one p-value per subsystem of the decomposition."""
        self.counts.clear()
        self.results.clear()
        population = len(self.reference_nodes)
        successes = len(self.differential_nodes)

        for subsystem in self.decomposition.get_subsystems():
            counts = self.count_subsystem(subsystem)
            result = hypergeometric_p_value(
                population, successes, counts.n_reference, counts.n_differential
            )
            self.counts[subsystem] = counts
            self.results[subsystem] = result

        self.p_values = {s: r.p_value for s, r in self.results.items()}
        return dict(self.p_values)

    def get_significant_subsystems(self) -> set[Subsystem]:
        """Run the whole analysis and return the significant subsystems."""
        if self._empty_input:
            logger.info("Differential or reference set is empty, no subsystem is significant.")
            self.p_values = {}
            self.significant_subsystems = set()
            return set()

        self.calculate_p_values()
        self.significant_subsystems = benjamini_hochberg(self.p_values, self.significance_level)
        logger.info(
            f"{len(self.significant_subsystems)} of {len(self.p_values)} subsystems are "
            f"significant at FDR {self.significance_level}."
        )
        return set(self.significant_subsystems)

    def to_frame(self) -> pd.DataFrame:
        """Tabulate the latest results, sorted by p-value."""
        rows = [
            {
                "subsystem": subsystem.name,
                "n_reference": self.counts[subsystem].n_reference,
                "n_differential": self.counts[subsystem].n_differential,
                "p_value": result.p_value,
                "status": result.status.value,
                "significant": subsystem in self.significant_subsystems,
            }
            for subsystem, result in self.results.items()
        ]
        columns = ["subsystem", "n_reference", "n_differential", "p_value", "status", "significant"]
        df = pd.DataFrame(rows, columns=columns)
        return df.sort_values("p_value", kind="stable").reset_index(drop=True)


def analyze(
    differential: Iterable[NodeId],
    reference: Iterable[NodeId],
    decomposition: Decomposition,
    original_of: OriginalOf | None = None,
    species_population: Iterable[NodeId] = (),
    significance_level: float = DEFAULT_SIGNIFICANCE_LEVEL,
) -> set[Subsystem]:
    """Subsystems of ``decomposition`` over-represented in ``differential``."""
    ora = OverRepresentationAnalysis(
        decomposition,
        differential,
        reference,
        original_of=original_of,
        species_population=species_population,
        significance_level=significance_level,
    )
    return ora.get_significant_subsystems()
