"""Search configuration read from ``.archsearch/config.yml``.

Example::

    search:
      implementation: sqlite   # or "none" to disable search
      data_dir: .archsearch    # relative to the project root
      max_results: 20
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".archsearch"
CONFIG_FILE_NAME = "config.yml"

IMPLEMENTATION_SQLITE = "sqlite"
IMPLEMENTATION_NONE = "none"
_IMPLEMENTATIONS = frozenset({IMPLEMENTATION_SQLITE, IMPLEMENTATION_NONE})

DEFAULT_MAX_RESULTS = 20


@dataclass
class SearchConfig:
    """Settings for the search component."""

    data_dir: Path = field(default_factory=lambda: Path(CONFIG_DIR_NAME))
    implementation: str = IMPLEMENTATION_SQLITE
    max_results: int = DEFAULT_MAX_RESULTS


def config_path(project_root: Path) -> Path:
    return project_root / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def load_config(project_root: Path) -> SearchConfig:
    """Load the ``search`` section of the project config.

    Falls back to defaults for missing keys, a missing file, or a file that
    cannot be parsed.  ``data_dir`` is resolved against *project_root*.
    """
    config = SearchConfig(data_dir=project_root / CONFIG_DIR_NAME)
    path = config_path(project_root)
    if not path.is_file():
        return config

    try:
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError):
        logger.warning("Failed to read %s, using default search settings", path)
        return config

    if not isinstance(data, dict):
        return config
    section = data.get("search")
    if not isinstance(section, dict):
        return config

    data_dir = section.get("data_dir")
    if isinstance(data_dir, str) and data_dir:
        config.data_dir = project_root / data_dir

    implementation = section.get("implementation")
    if isinstance(implementation, str):
        if implementation.lower() in _IMPLEMENTATIONS:
            config.implementation = implementation.lower()
        else:
            logger.warning(
                "Unknown search implementation '%s', using '%s'",
                implementation,
                IMPLEMENTATION_SQLITE,
            )

    max_results = section.get("max_results")
    if isinstance(max_results, int) and not isinstance(max_results, bool) and max_results > 0:
        config.max_results = max_results

    return config
