# genomedb/genome_db.py
"""
Central handle on a directory tree of genome browser JSON data.

Example:
    gdb = GenomeDB("/path/to/data")

    track = gdb.get_track("ExampleFeatures")
    if track is None:
        track = gdb.create_feature_track("ExampleFeatures", {"compress": 0},
                                         "Example Features")
        gdb.write_track_entry(track)

The track list document is re-read on every call; nothing is cached
between calls, so several GenomeDB instances (or processes) can share a
data directory.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import DuplicateTrackError
from .handlers import TrackHandler, resolve_handler
from .paths import TrackPathTemplate, validate_track_label
from .storage import JsonFileStorage

logger = logging.getLogger(__name__)

TRACK_LIST_PATH = "trackList.json"
REFSEQS_PATH = "seq/refSeqs.json"
FORMAT_VERSION = 1

# Built-in track families and their canonical handler types
TRACK_KINDS: Dict[str, str] = {
    "feature": "FeatureTrack",
    "image": "ImageTrack",
}


def default_track_list() -> Dict[str, Any]:
    """Fresh track list document for a data directory that has none."""
    return {"formatVersion": FORMAT_VERSION, "tracks": []}


@dataclass
class TrackEntry:
    """
    A track list record that has not been bound to a handler.

    Attributes:
        label: Unique track label
        key: Human-readable name
        type: Dotted handler type, e.g. "FeatureTrack"
        config: Remaining track settings, stored verbatim
    """
    label: str
    key: Optional[str] = None
    type: str = "FeatureTrack"
    config: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.key is None:
            self.key = self.label

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrackEntry":
        config = {k: v for k, v in data.items() if k not in ("label", "key", "type")}
        return cls(
            label=data["label"],
            key=data.get("key"),
            type=data.get("type", "FeatureTrack"),
            config=config,
        )


def _track_record(track) -> Dict[str, Any]:
    return {
        **(track.config or {}),
        "label": track.label,
        "key": track.key,
        "type": track.type,
    }


class GenomeDB:
    """
    Track registry for one data directory.

    Structure:
        data_dir/
            trackList.json        # {"formatVersion": 1, "tracks": [...]}
            seq/
                refSeqs.json      # reference sequences (read only here)
            tracks/
                <label>/
                    <refseq>/     # per-refseq track data
    """

    def __init__(self, data_dir: Path | str, compress: bool = False, pretty: bool = True):
        """
        Initialize the handle.

        Args:
            data_dir: Root of the data directory
            compress: Store registry documents gzipped (.jsonz)
            pretty: Indent registry documents
        """
        self.data_dir = Path(data_dir)
        self.root_store = JsonFileStorage(self.data_dir, compress=compress, pretty=pretty)
        # seq/refSeqs.json is never compressed
        self.seq_store = JsonFileStorage(self.data_dir)
        self.templates = TrackPathTemplate(self.data_dir)

    def track_dir(self, label: str) -> Path:
        """Data directory template for a track ({refseq} left unresolved)."""
        return self.templates.directory(label)

    def track_url(self, label: str) -> str:
        """URL template for a track, relative to the data directory."""
        return self.templates.url(label)

    def write_track_entry(self, track) -> None:
        """
        Record a track in the track list.

        An existing entry with the same label is replaced in place, keeping
        its position; a new label is appended. The track's config is stored
        verbatim, with its label, key and type taking precedence.

        Args:
            track: A TrackHandler, TrackEntry, or anything with label, key,
                type and config attributes

        Raises:
            DuplicateTrackError: The track list already holds several
                entries with this label
        """
        label = validate_track_label(track.label)
        record = _track_record(track)

        def set_track_entry(track_data):
            if track_data is None:
                track_data = default_track_list()
            tracks = track_data.setdefault("tracks", [])
            matches = [i for i, t in enumerate(tracks) if t.get("label") == label]
            if len(matches) > 1:
                raise DuplicateTrackError(label, len(matches))
            if matches:
                tracks[matches[0]] = record
            else:
                tracks.append(record)
            return track_data

        self.root_store.modify(TRACK_LIST_PATH, set_track_entry)
        logger.info(f"Recorded track {label} ({record['type']})")

    def get_track(self, label: str) -> Optional[TrackHandler]:
        """
        Get a handler for a track in the track list.

        Returns None if no track has this label.

        Raises:
            DuplicateTrackError: Several entries share the label
            UnknownTrackTypeError: Neither the track's type nor any of its
                ancestors has a registered handler
        """
        track_list = self.root_store.get(TRACK_LIST_PATH, default_track_list())
        selected = [t for t in track_list.get("tracks", []) if t.get("label") == label]

        if not selected:
            return None
        if len(selected) > 1:
            raise DuplicateTrackError(label, len(selected))

        track_desc = selected[0]
        handler_cls = resolve_handler(track_desc.get("type", ""))
        return handler_cls(
            self.track_dir(label),
            self.track_url(label),
            track_desc["label"],
            track_desc,
            track_desc.get("key"),
        )

    def track_list(self) -> List[Dict[str, Any]]:
        """
        Track definitions in display order, e.g.

            [{"label": "ExampleFeatures", "key": "Example Features",
              "type": "FeatureTrack", "compress": 0,
              "urlTemplate": "tracks/ExampleFeatures/{refseq}/trackData.json"},
             ...]
        """
        return self.root_store.get(TRACK_LIST_PATH, default_track_list()).get("tracks", [])

    def ref_seqs(self) -> List[Dict[str, Any]]:
        """
        Reference sequence definitions, e.g.

            [{"name": "ctgB", "seqDir": "seq/ctgB", "start": 0, "end": 66,
              "length": 66, "seqChunkSize": 20000},
             ...]
        """
        return self.seq_store.get(REFSEQS_PATH, [])

    def create_track(
        self,
        kind: str,
        label: str,
        config: Optional[Dict[str, Any]] = None,
        key: Optional[str] = None,
        js_class: Optional[str] = None,
    ) -> TrackHandler:
        """
        Create a handler for a new track of a built-in kind.

        The track list is not touched; call write_track_entry() to record
        the track.

        Args:
            kind: "feature" or "image"
            label: Track label
            config: Track settings
            key: Human-readable name (defaults to the label)
            js_class: Client-side class, defaults to the kind's handler type
        """
        if kind not in TRACK_KINDS:
            raise ValueError(f"Unknown track kind: {kind}. Expected one of {sorted(TRACK_KINDS)}")
        type_name = TRACK_KINDS[kind]
        handler_cls = resolve_handler(type_name)
        track = handler_cls(
            self.track_dir(label),
            self.track_url(label),
            label,
            config,
            key,
            js_class or type_name,
        )
        logger.info(f"Created {type_name} {label} in {track.track_dir}")
        return track

    def create_feature_track(self, label: str, config=None, key=None, js_class: str = "FeatureTrack"):
        return self.create_track("feature", label, config, key, js_class)

    def create_image_track(self, label: str, config=None, key=None, js_class: str = "ImageTrack"):
        return self.create_track("image", label, config, key, js_class)
