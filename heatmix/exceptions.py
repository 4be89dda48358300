"""Exception types raised by the heatmix engine."""

from __future__ import annotations


class HeatmixError(Exception):
    """Base class for all engine errors."""


class IncompleteGridError(HeatmixError):
    """The footprint grid has missing cells and cannot be measured."""


class PreconditionError(HeatmixError):
    """A calculation step was requested before the steps it depends on."""


class ConfigurationError(HeatmixError):
    """Device templates or settings could not be loaded."""
