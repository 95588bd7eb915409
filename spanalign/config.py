"""Load the alignment policy from TOML (e.g. spanalign.toml).

Config file is looked up in order:
  1. Path in SPANALIGN_CONFIG env var (if set)
  2. spanalign.toml in the current working directory

If no file is found, or the file has no [alignment] table, the default
`AlignmentPolicy()` is used (no auxiliary relaxation, containment allowed).

Example file:

    [alignment]
    use_auxiliary_relaxation = true
    exact_head_only_for_auxiliary = false
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from spanalign.errors import AlignmentConfigurationError
from spanalign.matcher import AlignmentPolicy

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SPANALIGN_CONFIG"
CONFIG_FILE_NAME = "spanalign.toml"
POLICY_KEYS = ("use_auxiliary_relaxation", "exact_head_only_for_auxiliary")


def _default_config_paths() -> list[Path]:
    """Return paths to check for spanalign.toml (first existing wins)."""
    paths: list[Path] = []
    if os.environ.get(CONFIG_ENV_VAR):
        paths.append(Path(os.environ[CONFIG_ENV_VAR]))
    paths.append(Path.cwd() / CONFIG_FILE_NAME)
    return paths


def policy_from_mapping(section: dict[str, Any]) -> AlignmentPolicy:
    """Build a policy from an [alignment] table, rejecting non-boolean values."""
    values: dict[str, bool] = {}
    for key in POLICY_KEYS:
        if key not in section:
            continue
        value = section[key]
        if not isinstance(value, bool):
            raise AlignmentConfigurationError(f"[alignment] {key} must be true or false, got {value!r}")
        values[key] = value
    unknown = sorted(set(section) - set(POLICY_KEYS))
    if unknown:
        logger.warning("Ignoring unknown [alignment] keys: %s", ", ".join(unknown))
    return AlignmentPolicy(**values)


def load_alignment_policy(path: str | Path | None = None) -> AlignmentPolicy:
    """Load the alignment policy from a TOML file.

    Args:
        path: Explicit config file. When given it must exist and parse;
            otherwise the default locations are searched.

    Returns:
        The configured `AlignmentPolicy`, or the default policy when no
        config file is found.

    Raises:
        AlignmentConfigurationError: If an explicit file is missing or
            unreadable, or a policy value is not a boolean.
    """
    if path is not None:
        candidates = [Path(path)]
        if not candidates[0].is_file():
            raise AlignmentConfigurationError(f"Config file not found: {path}")
    else:
        candidates = _default_config_paths()

    for candidate in candidates:
        if not candidate.is_file():
            continue
        try:
            with open(candidate, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise AlignmentConfigurationError(f"Could not read config file {candidate}: {e}") from e
        logger.info("Loaded alignment config from %s", candidate)
        section = data.get("alignment")
        if section is None:
            return AlignmentPolicy()
        if not isinstance(section, dict):
            raise AlignmentConfigurationError(f"[alignment] in {candidate} must be a table")
        return policy_from_mapping(section)
    return AlignmentPolicy()
