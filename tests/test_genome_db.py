# tests/test_genome_db.py
"""Tests for the track registry."""

import json
import tempfile
import threading
from pathlib import Path

import pytest

from genomedb import (
    DuplicateTrackError,
    FeatureTrack,
    GenomeDB,
    ImageTrack,
    InvalidTrackLabelError,
    TrackEntry,
    TrackHandler,
    UnknownTrackTypeError,
    register_handler,
)
from genomedb.handlers import clear_handlers, list_handlers


@pytest.fixture
def data_dir():
    """Create a temporary data directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def gdb(data_dir):
    """Create a GenomeDB handle."""
    return GenomeDB(data_dir)


def entry(label, key=None, track_type="FeatureTrack", **config):
    return TrackEntry(label=label, key=key, type=track_type, config=config)


def labels(gdb):
    return [t["label"] for t in gdb.track_list()]


class TestDefaults:
    """Test behaviour on an empty data directory."""

    def test_empty_track_list(self, gdb):
        assert gdb.track_list() == []

    def test_empty_ref_seqs(self, gdb):
        assert gdb.ref_seqs() == []

    def test_missing_track(self, gdb):
        assert gdb.get_track("nonexistent") is None

    def test_first_write_creates_document(self, gdb, data_dir):
        gdb.write_track_entry(entry("A"))
        data = json.loads((data_dir / "trackList.json").read_text())
        assert data["formatVersion"] == 1
        assert data["tracks"] == [{"label": "A", "key": "A", "type": "FeatureTrack"}]

    def test_ref_seqs_passthrough(self, gdb, data_dir):
        refseqs = [{
            "name": "ctgB",
            "seqDir": "seq/ctgB",
            "start": 0,
            "end": 66,
            "length": 66,
            "seqChunkSize": 20000,
        }]
        (data_dir / "seq").mkdir()
        (data_dir / "seq" / "refSeqs.json").write_text(json.dumps(refseqs))
        assert gdb.ref_seqs() == refseqs

    def test_ref_seqs_uncompressed_with_compressed_registry(self, data_dir):
        refseqs = [{"name": "ctgA", "seqDir": "seq/ctgA", "start": 0, "end": 50001,
                    "length": 50001, "seqChunkSize": 20000}]
        (data_dir / "seq").mkdir()
        (data_dir / "seq" / "refSeqs.json").write_text(json.dumps(refseqs))

        gdb = GenomeDB(data_dir, compress=True)
        gdb.write_track_entry(entry("A"))

        assert gdb.ref_seqs() == refseqs
        assert (data_dir / "trackList.jsonz").exists()


class TestWriteTrackEntry:
    """Test upsert semantics."""

    def test_append_on_new(self, gdb):
        gdb.write_track_entry(entry("A"))
        gdb.write_track_entry(entry("B"))
        gdb.write_track_entry(entry("C"))
        assert labels(gdb) == ["A", "B", "C"]

    def test_replace_preserves_order(self, gdb):
        for label in ("A", "B", "C"):
            gdb.write_track_entry(entry(label))

        gdb.write_track_entry(entry("B", key="Revised B", track_type="ImageTrack", color="red"))

        tracks = gdb.track_list()
        assert labels(gdb) == ["A", "B", "C"]
        assert tracks[1] == {"label": "B", "key": "Revised B", "type": "ImageTrack", "color": "red"}

    def test_replace_drops_stale_config(self, gdb):
        gdb.write_track_entry(entry("A", color="red"))
        gdb.write_track_entry(entry("A"))
        assert "color" not in gdb.track_list()[0]

    def test_idempotent(self, gdb, data_dir):
        gdb.write_track_entry(entry("A", autocomplete="all"))
        once = (data_dir / "trackList.json").read_text()
        gdb.write_track_entry(entry("A", autocomplete="all"))
        assert (data_dir / "trackList.json").read_text() == once
        assert len(gdb.track_list()) == 1

    def test_named_fields_win_over_config(self, gdb):
        gdb.write_track_entry(TrackEntry(
            label="A",
            key="Real",
            type="FeatureTrack",
            config={"label": "fake", "key": "fake", "type": "Fake"},
        ))
        assert gdb.track_list() == [{"label": "A", "key": "Real", "type": "FeatureTrack"}]

    def test_keeps_other_document_fields(self, gdb, data_dir):
        doc = {"formatVersion": 1, "tracks": [], "names": {"type": "Hash"}}
        (data_dir / "trackList.json").write_text(json.dumps(doc))
        gdb.write_track_entry(entry("A"))
        data = json.loads((data_dir / "trackList.json").read_text())
        assert data["names"] == {"type": "Hash"}

    def test_existing_duplicates_rejected(self, gdb, data_dir):
        doc = {"formatVersion": 1, "tracks": [
            {"label": "A", "key": "first", "type": "FeatureTrack"},
            {"label": "A", "key": "second", "type": "FeatureTrack"},
        ]}
        (data_dir / "trackList.json").write_text(json.dumps(doc))

        with pytest.raises(DuplicateTrackError) as exc_info:
            gdb.write_track_entry(entry("A", key="third"))
        assert exc_info.value.label == "A"
        assert exc_info.value.count == 2
        assert [t["key"] for t in gdb.track_list()] == ["first", "second"]

    def test_invalid_label(self, gdb):
        with pytest.raises(InvalidTrackLabelError):
            gdb.write_track_entry(entry("a/b"))
        assert gdb.track_list() == []

    def test_accepts_handler(self, gdb):
        track = gdb.create_feature_track("genes", {"autocomplete": "all"}, "Genes")
        gdb.write_track_entry(track)
        assert gdb.track_list() == [
            {"autocomplete": "all", "label": "genes", "key": "Genes", "type": "FeatureTrack"},
        ]

    def test_concurrent_distinct_labels(self, data_dir):
        """Concurrent upserts to different labels all persist."""
        errors = []

        def worker(n):
            try:
                GenomeDB(data_dir).write_track_entry(entry(f"track{n}"))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert sorted(labels(GenomeDB(data_dir))) == sorted(f"track{n}" for n in range(20))

    def test_compressed_registry(self, data_dir):
        gdb = GenomeDB(data_dir, compress=True)
        gdb.write_track_entry(entry("A"))
        assert (data_dir / "trackList.jsonz").exists()
        assert not (data_dir / "trackList.json").exists()
        assert labels(gdb) == ["A"]


class TestGetTrack:
    """Test resolving tracks to handlers."""

    def test_round_trip(self, gdb, data_dir):
        gdb.write_track_entry(entry("genes", key="Genes", style={"className": "feature2"}))

        track = gdb.get_track("genes")

        assert isinstance(track, FeatureTrack)
        assert track.label == "genes"
        assert track.key == "Genes"
        assert track.type == "FeatureTrack"
        assert track.config == {
            "label": "genes",
            "key": "Genes",
            "type": "FeatureTrack",
            "style": {"className": "feature2"},
        }
        assert track.track_dir == data_dir / "tracks" / "genes" / "{refseq}"
        assert track.base_url == "tracks/genes/{refseq}"

    def test_rewrite_loaded_track(self, gdb):
        gdb.write_track_entry(entry("A"))
        gdb.write_track_entry(entry("cov", track_type="ImageTrack.Wiggle.Frobnicated", scale="log"))

        gdb.write_track_entry(gdb.get_track("cov"))

        assert labels(gdb) == ["A", "cov"]
        assert gdb.track_list()[1] == {
            "label": "cov",
            "key": "cov",
            "type": "ImageTrack.Wiggle.Frobnicated",
            "scale": "log",
        }

    def test_duplicate_labels_fatal(self, gdb, data_dir):
        doc = {"formatVersion": 1, "tracks": [
            {"label": "A", "key": "A", "type": "FeatureTrack"},
            {"label": "A", "key": "A", "type": "FeatureTrack"},
        ]}
        (data_dir / "trackList.json").write_text(json.dumps(doc))
        with pytest.raises(DuplicateTrackError):
            gdb.get_track("A")

    def test_unknown_label_with_tracks(self, gdb):
        gdb.write_track_entry(entry("A"))
        assert gdb.get_track("B") is None


class TestTypeFallback:
    """Test type resolution through the registry."""

    def setup_method(self):
        self._saved = list_handlers()
        clear_handlers()

        @register_handler("ImageTrack")
        class OnlyImage(TrackHandler):
            pass

        self.image_cls = OnlyImage

    def teardown_method(self):
        clear_handlers()
        for name, cls in self._saved.items():
            register_handler(name)(cls)

    def test_specific_type_falls_back(self, gdb):
        gdb.write_track_entry(entry("cov", track_type="ImageTrack.Wiggle.Frobnicated"))
        track = gdb.get_track("cov")
        assert type(track) is self.image_cls
        assert track.type == "ImageTrack.Wiggle.Frobnicated"

    def test_unknown_type(self, gdb):
        gdb.write_track_entry(entry("odd", track_type="TotallyUnknownType"))
        with pytest.raises(UnknownTrackTypeError) as exc_info:
            gdb.get_track("odd")
        assert exc_info.value.type_name == "TotallyUnknownType"


class TestCreateTrack:
    """Test creating tracks of built-in kinds."""

    def test_create_feature_track(self, gdb, data_dir):
        track = gdb.create_feature_track("genes", {"compress": 1}, "Genes")

        assert isinstance(track, FeatureTrack)
        assert track.type == "FeatureTrack"
        assert track.track_dir == data_dir / "tracks" / "genes" / "{refseq}"
        assert track.url_template == "tracks/genes/{refseq}/trackData.jsonz"
        assert (data_dir / "tracks" / "genes").is_dir()

    def test_create_image_track(self, gdb):
        track = gdb.create_image_track("cov", {}, "Coverage", "ImageTrack.Wiggle")
        assert isinstance(track, ImageTrack)
        assert track.type == "ImageTrack.Wiggle"

    def test_create_does_not_register(self, gdb):
        gdb.create_track("feature", "genes", {}, "Genes")
        assert gdb.track_list() == []
        assert gdb.get_track("genes") is None

    def test_create_unknown_kind(self, gdb):
        with pytest.raises(ValueError, match="Unknown track kind"):
            gdb.create_track("sequence", "seq", {}, "Sequence")

    def test_create_invalid_label(self, gdb, data_dir):
        with pytest.raises(InvalidTrackLabelError):
            gdb.create_track("feature", "../escape", {}, "x")
        assert not (data_dir / "escape").exists()

    def test_create_then_lookup(self, gdb):
        created = gdb.create_image_track("cov", {"scale": "log"}, "Coverage")
        gdb.write_track_entry(created)

        loaded = gdb.get_track("cov")

        assert isinstance(loaded, ImageTrack)
        assert loaded.key == "Coverage"
        assert loaded.config["scale"] == "log"
