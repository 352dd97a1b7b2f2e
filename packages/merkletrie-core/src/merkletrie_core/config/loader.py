"""YAML config discovery and loading."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .models import MerkletrieConfig

CONFIG_FILENAME = "merkletrie.yaml"


def find_project_config(start: Path | None = None) -> Path | None:
    """Return the nearest ``merkletrie.yaml`` in *start* or any parent of it."""
    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(
    cli_path: str | None = None,
    overrides: dict[str, Any] | None = None,
) -> MerkletrieConfig:
    """Load config with resolution order: CLI > nearest project > user-global > defaults.

    *overrides* (e.g. from command-line flags) are merged over whichever file
    wins before validation.
    """
    if cli_path and not Path(cli_path).is_file():
        raise ValueError(f"Config file not found: {cli_path}")

    config_paths = [
        Path(cli_path) if cli_path else None,
        find_project_config(),
        Path.home() / ".merkletrie" / "config.yaml",
    ]

    raw: dict[str, Any] = {}
    source = "defaults"
    for path in config_paths:
        if path and path.exists():
            loaded = _read_yaml(path)
            if loaded is None:
                continue
            raw, source = loaded, str(path)
            break

    if overrides:
        raw = _merge(raw, overrides)

    try:
        return MerkletrieConfig(**raw)
    except ValidationError as e:
        raise ValueError(f"Invalid config in {source}: {e}") from e


def _read_yaml(path: Path) -> dict[str, Any] | None:
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if raw is not None and not isinstance(raw, dict):
        raise ValueError(f"Invalid config in {path}: expected a mapping at the top level")
    return raw


def _merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge *overrides* into a copy of *base*; ``None`` values are skipped."""
    merged = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


# Default YAML template for `merkletrie config init`
DEFAULT_CONFIG_TEMPLATE = """\
# merkletrie.yaml
# Found in the current directory or any parent of it.

# Tree building from disk
builder:
  ignore_patterns: [".git", "node_modules", "__pycache__", ".venv", "build", "dist", ".tox"]
  extra_ignore_patterns: []    # added on top of ignore_patterns
  follow_symlinks: false

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
