"""Endpoint list YAML loader.

Parses the endpoint configuration file into typed, immutable Endpoint models.
Any problem with the file is fatal: the monitor must not start polling with a
partial or guessed configuration.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from availability_monitor.middleware.error_handler import ConfigurationError
from availability_monitor.models.endpoint import Endpoint

logger = logging.getLogger(__name__)


def load_endpoints(yaml_path: str | Path) -> list[Endpoint]:
    """Parse an endpoint list YAML file into Endpoint objects.

    Args:
        yaml_path: Path to the YAML configuration file. The document's top
            level must be a list of endpoint records.

    Returns:
        The endpoints in file order. An empty or null document yields ``[]``.

    Raises:
        ConfigurationError: If the file is missing or unreadable, is not valid
            YAML, is not a list, or contains an invalid endpoint record.
    """
    path = Path(yaml_path)

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigurationError(
            f"Configuration file not found: {path}", path=str(path)
        ) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(
            f"Error reading configuration file {path}: {exc}", path=str(path)
        ) from exc

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(
            f"Error parsing YAML in {path}: {exc}", path=str(path)
        ) from exc

    if raw is None:
        logger.warning("Configuration file %s is empty — no endpoints to monitor", path)
        return []

    if not isinstance(raw, list):
        raise ConfigurationError(
            f"Configuration in {path} must be a YAML list of endpoints, "
            f"got {type(raw).__name__}",
            path=str(path),
        )

    endpoints: list[Endpoint] = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ConfigurationError(
                f"Endpoint #{index} in {path} must be a mapping, got {type(item).__name__}",
                path=str(path),
                index=index,
            )
        try:
            endpoints.append(Endpoint.model_validate(item))
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid endpoint #{index} in {path}: {exc}",
                path=str(path),
                index=index,
            ) from exc

    logger.info("Loaded %d endpoints from %s", len(endpoints), path)
    return endpoints
