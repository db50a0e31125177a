"""Reading identifier lists for over-representation analysis."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def read_identifier_list(path: Path | str) -> set[str]:
    """Read a newline separated list of species identifiers.

    Every line is taken literally (only the line break is removed), so blank
    lines become empty identifiers that simply match no species.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
    """
    path = Path(path)
    with path.open(encoding="utf-8") as f:
        identifiers = {line.rstrip("\r\n") for line in f}
    logger.info(f"Read {len(identifiers)} identifiers from {path}")
    return identifiers
