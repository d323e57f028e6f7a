# genomedb/handlers/image.py
"""
Image tracks: pre-rendered tiles per zoom level.

Layout:
    tracks/<label>/<refseq>/trackData.json    # zoom level index
    tracks/<label>/<refseq>/<zoom>/<tile>.png
"""

from pathlib import Path

from .base import TrackHandler, register_handler


@register_handler("ImageTrack")
class ImageTrack(TrackHandler):
    """Track drawn from image tiles, e.g. rendered wiggle data."""

    def zoom_dir(self, refseq: str, zoom: int | str) -> Path:
        """Tile directory for one zoom level of one reference sequence."""
        return self.refseq_dir(refseq) / str(zoom)

    def tile_url(self, refseq: str, zoom: int | str, tile: int) -> str:
        return f"{self.refseq_url(refseq)}/{zoom}/{tile}.png"
