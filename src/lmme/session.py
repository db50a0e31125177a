"""Session object coordinating decomposition, overview graph and ORA.

A session holds the model the user works on together with everything derived
from it. Host applications create one session per open model and pass it to
wherever it is needed.
"""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol, runtime_checkable

from .analysis.ora import OverRepresentationAnalysis
from .config import Settings
from .decomposition.methods import get_decomposition_method
from .decomposition.models import Decomposition, Subsystem
from .exceptions import InputMissingError
from .network.models import MetabolicNetwork
from .overview.overview_graph import OverviewGraph

logger = logging.getLogger(__name__)

TRANSLATOR_MISSING_MESSAGE = (
    "Could not find a format translation add-on. "
    "Please make sure that it is installed before using this function."
)


@runtime_checkable
class FormatTranslator(Protocol):
    """Optional capability translating subsystems into another notation."""

    def translate(self, network: MetabolicNetwork, subsystems: list[Subsystem]) -> None: ...


class LMMESession:
    """State of one exploration session."""

    def __init__(
        self,
        settings: Settings | None = None,
        translator: FormatTranslator | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.translator = translator
        self.network: MetabolicNetwork | None = None
        self.decomposition: Decomposition | None = None
        self.overview_graph: OverviewGraph | None = None
        self.ora: OverRepresentationAnalysis | None = None
        self.significant_subsystems: set[Subsystem] = set()

    @property
    def is_model_set(self) -> bool:
        return self.network is not None

    @property
    def is_overview_graph_constructed(self) -> bool:
        return self.overview_graph is not None

    def set_model(self, network: MetabolicNetwork) -> None:
        """Start working on ``network``, discarding all previous results.

        Raises:
            InputMissingError: If the network has no species.
        """
        if not network.get_original_species_nodes():
            raise InputMissingError("The given network is no metabolic model: it has no species.")
        if self.network is not None:
            self.network.restore_clones()
        self.reset()
        self.network = network
        logger.info(f"Model set: {network!r}")

    def reset(self) -> None:
        """Discard the model and everything derived from it."""
        self.network = None
        self._reset_derived()

    def _reset_derived(self) -> None:
        self.decomposition = None
        self.overview_graph = None
        self.ora = None
        self.significant_subsystems = set()

    def _require_model(self) -> MetabolicNetwork:
        if self.network is None:
            raise InputMissingError("No model was set.")
        return self.network

    def _require_overview_graph(self) -> OverviewGraph:
        if self.overview_graph is None:
            raise InputMissingError("There was no overview graph constructed so far.")
        return self.overview_graph

    def construct_overview_graph(self, method_name: str | None = None) -> OverviewGraph:
        """Decompose the model and build its overview graph.

        Results of an earlier construction are discarded and cloned species
        are restored before the new decomposition runs.

        Raises:
            InputMissingError: If no model was set.
            UnknownDecompositionMethodError: If the method is not registered.
            CloningError: If species cloning fails.
        """
        network = self._require_model()
        method = get_decomposition_method(
            method_name or self.settings.decomposition_method, self.settings
        )

        if self.is_overview_graph_constructed:
            logger.info("Overview graph already constructed, starting over.")
        network.restore_clones()
        self._reset_derived()

        decomposition = method.run(
            network,
            add_transporter_subsystem=self.settings.add_transporter_subsystem,
            add_default_subsystem=self.settings.add_default_subsystem,
            split_default_subsystem=self.settings.split_default_subsystem,
            minimum_subsystem_size=self.settings.minimum_subsystem_size,
            cloning=self.settings.cloning_options,
        )
        self.decomposition = decomposition
        self.overview_graph = OverviewGraph(decomposition, network)
        return self.overview_graph

    def get_selected_subsystems(self, selection: Iterable[int]) -> list[Subsystem]:
        """Subsystems behind the selected overview graph nodes.

        Raises:
            InputMissingError: If there is no overview graph or nothing is selected.
        """
        overview_graph = self._require_overview_graph()
        subsystems = overview_graph.get_selected_subsystems(selection)
        if not subsystems:
            raise InputMissingError("There are no subsystems selected in the overview graph.")
        return subsystems

    def edge_thickness(self, subsystem1: Subsystem, subsystem2: Subsystem) -> float:
        """Display thickness of an overview edge under the current settings.

        Raises:
            InputMissingError: If there is no overview graph.
        """
        return self._require_overview_graph().edge_thickness(
            subsystem1,
            subsystem2,
            draw_edges=self.settings.draw_edges,
            map_to_edge_thickness=self.settings.map_to_edge_thickness,
            max_thickness=self.settings.max_edge_thickness,
        )

    def run_ora(
        self,
        differential_path: Path | str,
        reference_path: Path | str | None = None,
    ) -> set[Subsystem]:
        """Run an over-representation analysis on the current decomposition.

        Raises:
            InputMissingError: If there is no overview graph.
            FileNotFoundError: If an identifier list does not exist.
        """
        overview_graph = self._require_overview_graph()

        ora = OverRepresentationAnalysis.from_files(
            overview_graph.network,
            overview_graph.decomposition,
            differential_path,
            reference_path,
            significance_level=self.settings.significance_level,
        )
        self.significant_subsystems = ora.get_significant_subsystems()
        self.ora = ora
        return set(self.significant_subsystems)

    def translate_subsystems(self, subsystems: list[Subsystem]) -> str | None:
        """Hand subsystems to the format translator.

        Returns:
            A message for the user if the translation could not be performed,
            otherwise ``None``.
        """
        if not subsystems:
            return "There are currently no subsystems to translate."
        if self.translator is None:
            logger.warning("Format translation requested but no translator is installed.")
            return TRANSLATOR_MISSING_MESSAGE
        self.translator.translate(self._require_model(), subsystems)
        return None
