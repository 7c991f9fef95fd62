"""JSON-schema validation of the merged configuration."""
from __future__ import annotations

from typing import Any, Dict, Optional

import jsonschema

from section_audit.core.exceptions import ConfigError
from section_audit.data import read_yaml

CONFIG_SCHEMA = "config.schema.yaml"


def load_schema(name: str = CONFIG_SCHEMA) -> Dict[str, Any]:
    """Load a bundled schema (JSON Schema expressed in YAML)."""
    schema = read_yaml("schemas", name)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
    return schema


def validate_config(config: Dict[str, Any], *, source: Optional[str] = None) -> None:
    """Validate ``config`` against the bundled config schema.

    Raises:
        ConfigError: With the failing key path in ``context["path"]``.
    """
    try:
        jsonschema.validate(instance=config, schema=load_schema())
    except jsonschema.ValidationError as exc:
        key_path = ".".join(str(p) for p in exc.absolute_path) or "<root>"
        raise ConfigError(
            f"Invalid configuration at {key_path}: {exc.message}",
            context={"path": key_path, "source": source},
        ) from exc


__all__ = ["CONFIG_SCHEMA", "load_schema", "validate_config"]
