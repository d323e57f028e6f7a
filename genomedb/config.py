# genomedb/config.py
"""
Track configuration files.

A track config is a YAML (or JSON) mapping:

    label: ExampleFeatures
    key: Example Features
    type: FeatureTrack
    compress: 0
    style:
      className: feature2
"""

from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import yaml

from .genome_db import TrackEntry


def parse_track_config(yaml_content: str) -> Dict[str, Any]:
    """Parse a track config from a YAML string."""
    data = yaml.safe_load(yaml_content)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Track config must be a mapping, got {type(data).__name__}")
    return data


def load_track_config(path: Path | str) -> Dict[str, Any]:
    """Load a track config from a YAML or JSON file."""
    with open(path, "r") as f:
        return parse_track_config(f.read())


def parse_settings(pairs: Iterable[str]) -> Dict[str, Any]:
    """
    Parse key=value overrides.

    Values are read as YAML scalars, so "compress=1" gives an int and
    "style={className: feature2}" gives a mapping.
    """
    settings = {}
    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"Invalid setting: {pair}. Expected key=value")
        key, value = pair.split("=", 1)
        settings[key.strip()] = yaml.safe_load(value) if value else ""
    return settings


def track_entry_from_config(
    config: Dict[str, Any],
    label: Optional[str] = None,
    key: Optional[str] = None,
    track_type: Optional[str] = None,
) -> TrackEntry:
    """Build a TrackEntry from a config mapping, with explicit values winning."""
    data = dict(config)
    if label is not None:
        data["label"] = label
    if key is not None:
        data["key"] = key
    if track_type is not None:
        data["type"] = track_type
    if not data.get("label"):
        raise ValueError("Track config has no label")
    return TrackEntry.from_dict(data)
