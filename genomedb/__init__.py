# genomedb - Track registry for genome browser data directories
#
# A data directory holds a track list (trackList.json), reference sequences
# (seq/refSeqs.json) and per-track data under tracks/<label>/<refseq>/.
#
# Core concepts:
# - JsonFileStorage: Atomic read-modify-write access to JSON documents
# - GenomeDB: Upserts, lists and resolves tracks in the track list
# - TrackHandler: Runtime object for one track, registered by dotted type
# - Type fallback: ImageTrack.Wiggle.Frobnicated resolves to the nearest
#   registered ancestor, e.g. ImageTrack

from .errors import (
    GenomeDBError,
    DuplicateTrackError,
    UnknownTrackTypeError,
    InvalidTrackLabelError,
    StorageError,
)
from .storage import JsonFileStorage
from .paths import TrackPathTemplate, validate_track_label
from .handlers import (
    TrackHandler,
    FeatureTrack,
    ImageTrack,
    register_handler,
    get_handler_class,
    resolve_handler,
    fallback_chain,
)
from .genome_db import GenomeDB, TrackEntry, TRACK_KINDS, default_track_list
from .config import load_track_config
from .htaccess import precompression_htaccess

__all__ = [
    # Errors
    "GenomeDBError",
    "DuplicateTrackError",
    "UnknownTrackTypeError",
    "InvalidTrackLabelError",
    "StorageError",
    # Storage and paths
    "JsonFileStorage",
    "TrackPathTemplate",
    "validate_track_label",
    # Handlers
    "TrackHandler",
    "FeatureTrack",
    "ImageTrack",
    "register_handler",
    "get_handler_class",
    "resolve_handler",
    "fallback_chain",
    # Registry
    "GenomeDB",
    "TrackEntry",
    "TRACK_KINDS",
    "default_track_list",
    "load_track_config",
    "precompression_htaccess",
]

__version__ = "0.1.0"
