# genomedb/handlers/base.py
"""
Track handler base class and type registry.

Handlers implement a track's runtime behaviour. They are registered by
dotted type name ("FeatureTrack", "ImageTrack.Wiggle", ...) and looked up
when a track is loaded from the track list. A type with no registered
handler falls back to its nearest registered ancestor:

    ImageTrack.Wiggle.Frobnicated -> ImageTrack.Wiggle -> ImageTrack
"""

import logging
import re
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Type

from ..errors import UnknownTrackTypeError
from ..paths import REFSEQ_PLACEHOLDER

logger = logging.getLogger(__name__)

# Global handler registry
_HANDLERS: Dict[str, Type["TrackHandler"]] = {}

_INVALID_TYPE_CHARS = re.compile(r"[^A-Za-z0-9_]")


class TrackHandler:
    """
    Base class for track handlers.

    Args:
        track_dir: Storage directory template (still containing {refseq})
        base_url: URL template relative to the data root
        label: Track label
        config: Track configuration (for loaded tracks, the full record)
        key: Human-readable track name
        js_class: Client-side class name, stored as the record's type

    Construction creates the track's directory (the parent of the
    {refseq} level).
    """

    type_name: str = ""

    def __init__(
        self,
        track_dir: Path | str,
        base_url: str,
        label: str,
        config: Optional[Dict[str, Any]] = None,
        key: Optional[str] = None,
        js_class: Optional[str] = None,
    ):
        self.track_dir = Path(track_dir)
        self.base_url = base_url
        self.label = label
        self.config = dict(config or {})
        self.key = key if key is not None else label
        self.js_class = js_class or self.config.get("type") or self.type_name
        self._ensure_dir()

    def _ensure_dir(self):
        parts = self.track_dir.parts
        if REFSEQ_PLACEHOLDER in parts:
            label_dir = Path(*parts[:parts.index(REFSEQ_PLACEHOLDER)])
        else:
            label_dir = self.track_dir
        label_dir.mkdir(parents=True, exist_ok=True)

    @property
    def type(self) -> str:
        return self.js_class

    @property
    def url_template(self) -> str:
        """URL of the per-refseq track data, with {refseq} left in place."""
        return f"{self.base_url}/trackData.json"

    def refseq_dir(self, refseq: str) -> Path:
        """Storage directory for one reference sequence."""
        return Path(str(self.track_dir).replace(REFSEQ_PLACEHOLDER, refseq))

    def refseq_url(self, refseq: str) -> str:
        return self.base_url.replace(REFSEQ_PLACEHOLDER, refseq)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(label={self.label!r}, type={self.type!r})"


def register_handler(type_name: str) -> Callable:
    """
    Decorator to register a handler for a dotted track type.

    Usage:
        @register_handler("ImageTrack.Wiggle")
        class WiggleTrack(ImageTrack):
            ...
    """
    def decorator(cls: Type[TrackHandler]) -> Type[TrackHandler]:
        name = normalize_type(type_name)
        if name in _HANDLERS:
            logger.warning(f"Overwriting track handler for {name}")
        _HANDLERS[name] = cls
        if not cls.__dict__.get("type_name"):
            cls.type_name = name
        return cls
    return decorator


def get_handler_class(type_name: str) -> Optional[Type[TrackHandler]]:
    """
    Get the handler registered for exactly this type.

    Returns None if no handler is registered.
    """
    return _HANDLERS.get(normalize_type(type_name))


def list_handlers() -> Dict[str, Type[TrackHandler]]:
    """List all registered handlers."""
    return dict(_HANDLERS)


def clear_handlers():
    """Clear all registered handlers (for testing)."""
    _HANDLERS.clear()


def normalize_type(type_name: str) -> str:
    """
    Canonical dotted form of a track type.

    "::" is accepted as a separator, characters outside [A-Za-z0-9_] are
    dropped, and empty segments are removed.
    """
    segments = (type_name or "").replace("::", ".").split(".")
    cleaned = (_INVALID_TYPE_CHARS.sub("", s) for s in segments)
    return ".".join(s for s in cleaned if s)


def fallback_chain(type_name: str) -> List[str]:
    """
    Candidate types from most to least specific.

    "ImageTrack.Wiggle.Frobnicated" gives
    ["ImageTrack.Wiggle.Frobnicated", "ImageTrack.Wiggle", "ImageTrack"].
    """
    segments = normalize_type(type_name).split(".")
    return [".".join(segments[:n]) for n in range(len(segments), 0, -1) if segments[n - 1]]


def resolve_handler(type_name: str) -> Type[TrackHandler]:
    """
    Find the most specific registered handler for a type.

    Raises UnknownTrackTypeError if neither the type nor any of its
    ancestors is registered.
    """
    candidates = fallback_chain(type_name)
    for candidate in candidates:
        cls = _HANDLERS.get(candidate)
        if cls is not None:
            if candidate != candidates[0]:
                logger.debug(f"No handler for {candidates[0]}, falling back to {candidate}")
            return cls
    raise UnknownTrackTypeError(type_name, candidates)
