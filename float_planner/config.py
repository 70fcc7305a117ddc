"""Planner configuration: defaults plus an optional JSON override file.

Example ``config.json``::

    {
        "stale_reading_hours": 24,
        "snap_tolerance_miles": 0.3
    }
"""

import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlannerConfig:
    """Tunable planner settings.

    Args:
        stale_reading_hours: Readings older than this (relative to the
            request's ``as_of``) are treated as missing.
        snap_tolerance_miles: Snap offsets beyond this need review.
        default_accuracy_warning_miles: Accuracy-warning distance for
            associations that do not set their own.
        gauge_url_template: Link to the gauge's public page; formatted
            with ``site_id``.
    """

    stale_reading_hours: float = 48.0
    snap_tolerance_miles: float = 0.5
    default_accuracy_warning_miles: float = 10.0
    gauge_url_template: str = "https://waterdata.usgs.gov/monitoring-location/{site_id}/"

    def gauge_url(self, site_id: str | None) -> str | None:
        if not site_id:
            return None
        return self.gauge_url_template.format(site_id=site_id)

    @classmethod
    def from_dict(cls, data: dict) -> "PlannerConfig":
        """Overlay known keys onto the defaults; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        overrides = {}
        for key, value in data.items():
            if key not in known:
                logger.debug("Ignoring unknown config key %r", key)
                continue
            overrides[key] = value
        return replace(cls(), **overrides)


def load_config(path: str | Path | None = None) -> PlannerConfig:
    """Load configuration from a JSON file.

    Falls back to defaults (with a warning) when the file is missing or
    malformed. ``path=None`` returns the defaults.
    """
    if path is None:
        return PlannerConfig()
    try:
        with open(path) as f:
            data = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.warning("Could not load config %s: %s. Using defaults.", path, e)
        return PlannerConfig()
    if not isinstance(data, dict):
        logger.warning("Config %s is not a JSON object. Using defaults.", path)
        return PlannerConfig()
    return PlannerConfig.from_dict(data)
