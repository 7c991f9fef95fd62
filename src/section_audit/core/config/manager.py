"""
Configuration loading for section-audit (YAML only).

Sources (highest to lowest priority):
1. Explicit config file (``--config``)
2. Project config: <project-root>/.section_audit.yaml (or .yml)
3. Bundled defaults: section_audit.data/config/defaults.yaml

Layers are deep-merged, then the result is validated against
``data/schemas/config.schema.yaml``.
"""
from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from section_audit.core.exceptions import ConfigError
from section_audit.core.utils.io import read_yaml, write_yaml
from section_audit.core.utils.merge import deep_merge
from section_audit.data import get_data_path, read_yaml as read_data_yaml

from .validation import validate_config

logger = logging.getLogger(__name__)

PROJECT_CONFIG_NAMES = (".section_audit.yaml", ".section_audit.yml")


class ConfigManager:
    """Load, merge, and validate section-audit configuration."""

    def __init__(self, repo_root: Optional[Path] = None, config_path: Optional[Path] = None) -> None:
        self.repo_root = Path(repo_root) if repo_root else Path.cwd()
        self.config_path = Path(config_path) if config_path else None
        self.defaults_path = get_data_path("config", "defaults.yaml")

    def defaults(self) -> Dict[str, Any]:
        # The bundled file is cached; hand out a copy.
        return copy.deepcopy(read_data_yaml("config", "defaults.yaml") or {})

    def project_config_path(self) -> Optional[Path]:
        """Return the project config file in use, if any."""
        if self.config_path is not None:
            return self.config_path
        for name in PROJECT_CONFIG_NAMES:
            candidate = self.repo_root / name
            if candidate.exists():
                return candidate
        return None

    def load_config(self, *, validate: bool = True) -> Dict[str, Any]:
        """Return the merged configuration.

        Raises:
            ConfigError: If a config file is missing (explicit path), is not
                valid YAML, is not a mapping, or fails schema validation.
        """
        cfg = self.defaults()
        path = self.project_config_path()
        if path is not None:
            # Fail closed: configuration must never silently ignore invalid YAML.
            try:
                overlay = read_yaml(path, default={}, raise_on_error=True)
            except FileNotFoundError as exc:
                raise ConfigError(f"Config file not found: {path}", context={"path": str(path)}) from exc
            except (OSError, yaml.YAMLError) as exc:
                raise ConfigError(f"Could not load config {path}: {exc}", context={"path": str(path)}) from exc
            if not isinstance(overlay, dict):
                raise ConfigError(
                    f"Config file must contain a mapping, got {type(overlay).__name__}",
                    context={"path": str(path)},
                )
            logger.debug("Merging project config from %s", path)
            cfg = deep_merge(cfg, overlay)

        if validate:
            validate_config(cfg, source=str(path) if path else None)
        return cfg

    @staticmethod
    def get_rule(config: Mapping[str, Any], name: str) -> Dict[str, Any]:
        """Return the config block for rule ``name`` (empty dict if absent)."""
        return dict((config.get("rules") or {}).get(name) or {})


def write_default_config(path: Path, *, overwrite: bool = False) -> Path:
    """Write the bundled defaults to ``path`` as a starting project config.

    Raises:
        FileExistsError: If ``path`` exists and ``overwrite`` is False.
    """
    path = Path(path)
    if path.exists() and not overwrite:
        raise FileExistsError(f"Config file already exists: {path}")
    write_yaml(path, ConfigManager().defaults())
    return path


__all__ = ["ConfigManager", "PROJECT_CONFIG_NAMES", "write_default_config"]
