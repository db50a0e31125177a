"""Settings for decomposition, overview graph and analysis runs."""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import dotenv

from .analysis.models import DEFAULT_SIGNIFICANCE_LEVEL
from .network.cloning import CloningOptions
from .overview.overview_graph import MAX_EDGE_THICKNESS

logger = logging.getLogger(__name__)

ENV_PREFIX = "LMME_"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class Settings:
    """User settings of an LMME session."""

    # Decomposition
    decomposition_method: str = "Predefined Subsystems"
    add_transporter_subsystem: bool = False
    add_default_subsystem: bool = True
    split_default_subsystem: bool = False
    minimum_subsystem_size: int = 1
    attribute_name: str = "subsystem"
    attribute_separator: str | None = None
    community_resolution: float = 1.0
    community_seed: int | None = 42

    # Cloning
    clonable_species: list[str] = field(default_factory=list)
    clone_degree_threshold: int | None = None

    # Overview graph display
    draw_edges: bool = True
    map_to_edge_thickness: bool = True
    max_edge_thickness: int = MAX_EDGE_THICKNESS

    # Over-representation analysis
    significance_level: float = DEFAULT_SIGNIFICANCE_LEVEL

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check value ranges.

        Raises:
            ValueError: If a setting is out of range.
        """
        if not 0.0 < self.significance_level < 1.0:
            raise ValueError(
                f"significance_level must lie in (0, 1), got {self.significance_level}"
            )
        if self.minimum_subsystem_size < 1:
            raise ValueError(
                f"minimum_subsystem_size must be at least 1, got {self.minimum_subsystem_size}"
            )
        if self.clone_degree_threshold is not None and self.clone_degree_threshold < 1:
            raise ValueError(
                f"clone_degree_threshold must be at least 1, got {self.clone_degree_threshold}"
            )
        if self.max_edge_thickness < 1:
            raise ValueError(f"max_edge_thickness must be at least 1, got {self.max_edge_thickness}")

    @property
    def cloning_options(self) -> CloningOptions:
        return CloningOptions(
            species=frozenset(self.clonable_species),
            degree_threshold=self.clone_degree_threshold,
        )

    @classmethod
    def from_env(cls, env_file: Path | None = None, **overrides: Any) -> "Settings":
        """Create settings from ``LMME_*`` environment variables.

        A ``.env`` file is loaded first if present. Keyword arguments take
        precedence over the environment.
        """
        dotenv.load_dotenv(env_file)
        values: dict[str, Any] = {}
        for f in fields(cls):
            raw = os.environ.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            values[f.name] = _parse_env_value(f.name, raw, f.default)
        values.update(overrides)
        logger.debug(f"Settings loaded from environment: {sorted(values)}")
        return cls(**values)


def _parse_env_value(name: str, raw: str, default: Any) -> Any:
    raw = raw.strip()
    if name == "clonable_species":
        return [s.strip() for s in raw.split(",") if s.strip()]
    if name in ("clone_degree_threshold", "community_seed"):
        return int(raw) if raw else None
    if name == "attribute_separator":
        return raw or None
    if isinstance(default, bool):
        return raw.lower() in ("1", "true", "yes", "on")
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    return raw


def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure root logging for applications embedding LMME."""
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
