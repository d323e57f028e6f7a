# genomedb/handlers/feature.py
"""
Feature tracks: per-refseq JSON feature data.

Layout:
    tracks/<label>/<refseq>/trackData.json    # trackData.jsonz when compressed
"""

from typing import Any, Dict

from .base import TrackHandler, register_handler


@register_handler("FeatureTrack")
class FeatureTrack(TrackHandler):
    """
    Track of genomic features (genes, alignments, remarks, ...).

    Config:
        compress: Feature data is stored gzipped as trackData.jsonz
    """

    @property
    def compress(self) -> bool:
        return bool(self.config.get("compress"))

    @property
    def url_template(self) -> str:
        ext = "jsonz" if self.compress else "json"
        return f"{self.base_url}/trackData.{ext}"

    def client_config(self) -> Dict[str, Any]:
        """Track list record for this track, as the browser sees it."""
        return {
            **self.config,
            "label": self.label,
            "key": self.key,
            "type": self.type,
            "urlTemplate": self.url_template,
        }
