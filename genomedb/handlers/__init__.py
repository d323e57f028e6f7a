# genomedb/handlers/__init__.py
"""
Track handlers.

Importing this package registers the built-in handlers.
"""

from .base import (
    TrackHandler,
    register_handler,
    get_handler_class,
    list_handlers,
    clear_handlers,
    normalize_type,
    fallback_chain,
    resolve_handler,
)
from .feature import FeatureTrack
from .image import ImageTrack

__all__ = [
    "TrackHandler",
    "register_handler",
    "get_handler_class",
    "list_handlers",
    "clear_handlers",
    "normalize_type",
    "fallback_chain",
    "resolve_handler",
    "FeatureTrack",
    "ImageTrack",
]
