# genomedb/paths.py
"""
Mapping of track labels onto the data directory.

Every track lives under tracks/<label>/<refseq>/. The {refseq} segment is
left as a literal placeholder for track handlers to fill in per reference
sequence.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from .errors import InvalidTrackLabelError

LABEL_PLACEHOLDER = "{tracklabel}"
REFSEQ_PLACEHOLDER = "{refseq}"
TRACK_DIR_HIERARCHY = ("tracks", LABEL_PLACEHOLDER, REFSEQ_PLACEHOLDER)

_FORBIDDEN_LABEL_CHARS = {"/", "\\", os.sep, "\0", "{", "}"}


def validate_track_label(label: str) -> str:
    """
    Check that a label maps onto exactly one directory level.

    Returns the label unchanged; raises InvalidTrackLabelError otherwise.
    """
    if not isinstance(label, str) or not label:
        raise InvalidTrackLabelError("Track label must be a non-empty string")
    if label in (".", ".."):
        raise InvalidTrackLabelError(f"Invalid track label '{label}'")
    bad = sorted(c for c in _FORBIDDEN_LABEL_CHARS if c in label)
    if bad:
        raise InvalidTrackLabelError(
            f"Invalid track label '{label}'. Must not contain any of: {' '.join(map(repr, bad))}"
        )
    return label


@dataclass(frozen=True)
class TrackPathTemplate:
    """
    Hierarchical template shared by track directories and track URLs.

    Attributes:
        data_root: Root of the data directory
        segments: Path segments below the root
        placeholder: Segment text replaced by the track label
    """
    data_root: Path
    segments: Tuple[str, ...] = TRACK_DIR_HIERARCHY
    placeholder: str = LABEL_PLACEHOLDER

    def substitute(self, label: str) -> Tuple[str, ...]:
        """Return the segments with the label filled in."""
        validate_track_label(label)
        return tuple(label if s == self.placeholder else s for s in self.segments)

    def directory(self, label: str) -> Path:
        """Filesystem directory template for a track."""
        return Path(self.data_root).joinpath(*self.substitute(label))

    def url(self, label: str) -> str:
        """Public URL template for a track, relative to the data root."""
        return "/".join(self.substitute(label))
