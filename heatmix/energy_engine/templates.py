"""Loading of per-technology device templates."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from heatmix.energy_engine.constants import DEFAULT_DEVICE_TEMPLATES
from heatmix.exceptions import ConfigurationError
from heatmix.models import DeviceTemplate, HeatingTechnology

logger = logging.getLogger(__name__)


def default_device_templates() -> dict[HeatingTechnology, DeviceTemplate]:
    return dict(DEFAULT_DEVICE_TEMPLATES)


def load_device_templates(path: str | Path | None) -> dict[HeatingTechnology, DeviceTemplate]:
    """Read templates from a JSON object keyed by technology name.

    Technologies missing from the file keep their built-in template, and
    fields missing from an entry keep the built-in value.

    Raises:
        ConfigurationError: If the file is unreadable, names an unknown
            technology or contains an invalid template.
    """
    templates = default_device_templates()
    if path is None:
        return templates

    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read device templates from {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Device template file {path} must contain a JSON object")

    for name, data in raw.items():
        try:
            technology = HeatingTechnology(name)
        except ValueError as e:
            raise ConfigurationError(f"Unknown heating technology {name!r} in {path}") from e
        try:
            template = DeviceTemplate.model_validate(
                {**templates[technology].model_dump(), **data, "technology": technology}
            )
        except (ValidationError, TypeError) as e:
            raise ConfigurationError(f"Invalid template for {name!r} in {path}: {e}") from e
        templates[technology] = template
        logger.debug("Loaded %s template from %s", technology.value, path)

    return templates
