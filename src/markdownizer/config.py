"""Load rendering options from files and plain mappings."""

import json
import logging
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError

from .errors import ConfigError
from .models.options import Options

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _snake_case(key: str) -> str:
    return _CAMEL_BOUNDARY_RE.sub("_", key).replace("-", "_").lower()


def options_from_mapping(data: Mapping[str, Any]) -> Options:
    """
    Build Options from a mapping.

    Keys may be snake_case (``heading_style``) or camelCase
    (``headingStyle``), and may sit under a top-level ``options`` key.

    Args:
        data: Option values

    Returns:
        Validated Options

    Raises:
        ConfigError: If the mapping has unknown keys or invalid values
    """
    if not isinstance(data, Mapping):
        raise ConfigError(f"Options must be a mapping, got {type(data).__name__}")
    if set(data) == {"options"}:
        data = data["options"] or {}
        if not isinstance(data, Mapping):
            raise ConfigError("'options' must be a mapping")

    values = {_snake_case(str(key)): value for key, value in data.items()}
    try:
        return Options.model_validate(values)
    except ValidationError as e:
        raise ConfigError(f"Invalid options: {e}") from e


def load_options(path: Union[str, Path]) -> Options:
    """
    Load Options from a YAML or JSON file.

    YAML files (``.yaml``/``.yml``) need the ``yaml`` extra (PyYAML).

    Args:
        path: Config file path

    Returns:
        Validated Options

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    suffix = path.suffix.lower()
    try:
        text = path.read_text(encoding="utf-8")
        if suffix in (".yaml", ".yml"):
            import yaml

            data = yaml.safe_load(text)
        elif suffix == ".json":
            data = json.loads(text)
        else:
            raise ConfigError(f"Unsupported config format: {path.suffix or path.name}")
    except ConfigError:
        raise
    except ImportError as e:
        raise ConfigError("Reading YAML config requires PyYAML: pip install markdownizer[yaml]") from e
    except Exception as e:
        raise ConfigError(f"Failed to read config {path}: {e}") from e

    options = options_from_mapping(data if data is not None else {})
    logger.debug(f"Loaded options from {path}")
    return options
