#!/usr/bin/env python3
"""
genomedb CLI

Command-line interface to the track registry of a data directory:
  genomedb add-track - Record a track in trackList.json
  genomedb create-track - Create a track's directory and record it
  genomedb list-tracks - Show the track list
  genomedb show-track - Resolve one track to its handler
  genomedb list-refseqs - Show the reference sequences
  genomedb htaccess - Print .htaccess for precompressed files

Usage:
  genomedb add-track <data_dir> --label <label> [--type <type>] [--config <file>] [--set key=value]
  genomedb create-track <data_dir> --kind feature|image --label <label>
  genomedb list-tracks <data_dir> [--json]
  genomedb show-track <data_dir> <label>
  genomedb list-refseqs <data_dir>
  genomedb htaccess [<ext> ...]
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

import yaml

from .config import load_track_config, parse_settings, track_entry_from_config
from .errors import GenomeDBError
from .genome_db import GenomeDB, TRACK_KINDS
from .htaccess import DEFAULT_EXTENSIONS, precompression_htaccess


def _open_db(args) -> GenomeDB:
    return GenomeDB(args.data_dir, compress=args.compress, pretty=not args.compact)


def _gather_config(args) -> dict:
    config = load_track_config(args.config) if args.config else {}
    config.update(parse_settings(args.set or []))
    return config


def cmd_add_track(args):
    """Record a track entry without touching its data directory."""
    gdb = _open_db(args)
    entry = track_entry_from_config(
        _gather_config(args),
        label=args.label,
        key=args.key,
        track_type=args.type,
    )
    gdb.write_track_entry(entry)
    print(f"Recorded {entry.label} ({entry.type})")


def cmd_create_track(args):
    """Create a track of a built-in kind and record it."""
    gdb = _open_db(args)
    config = _gather_config(args)
    label = args.label or config.get("label")
    if not label:
        raise ValueError("No track label given")
    track = gdb.create_track(
        args.kind,
        label,
        config,
        args.key or config.get("key"),
        args.js_class,
    )
    gdb.write_track_entry(track)
    print(f"Created {track.label} ({track.type}) in {track.track_dir.parent}")


def cmd_list_tracks(args):
    """Print the track list in display order."""
    tracks = _open_db(args).track_list()
    if args.json:
        print(json.dumps(tracks, indent=2))
        return
    if not tracks:
        print("No tracks")
        return
    for track in tracks:
        print(f"{track.get('label')}\t{track.get('type')}\t{track.get('key')}")


def cmd_show_track(args) -> int:
    """Resolve a track and print its handler."""
    track = _open_db(args).get_track(args.label)
    if track is None:
        print(f"Track not found: {args.label}", file=sys.stderr)
        return 1
    print(f"Label:   {track.label}")
    print(f"Key:     {track.key}")
    print(f"Type:    {track.type}")
    print(f"Handler: {type(track).__name__}")
    print(f"Dir:     {track.track_dir}")
    print(f"URL:     {track.url_template}")
    return 0


def cmd_list_refseqs(args):
    """Print the reference sequences."""
    refseqs = _open_db(args).ref_seqs()
    if not refseqs:
        print("No reference sequences")
        return
    for refseq in refseqs:
        print(f"{refseq.get('name')}\t{refseq.get('start')}\t{refseq.get('end')}\t{refseq.get('length')}")


def cmd_htaccess(args):
    print(precompression_htaccess(*(args.extensions or DEFAULT_EXTENSIONS)), end="")


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        prog="genomedb",
        description="genomedb - Genome browser track registry",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    db_parent = argparse.ArgumentParser(add_help=False)
    db_parent.add_argument("data_dir", help="Data directory")
    db_parent.add_argument("--compress", action="store_true",
                           help="Registry documents are gzipped (.jsonz)")
    db_parent.add_argument("--compact", action="store_true",
                           help="Write registry documents without indentation")

    track_parent = argparse.ArgumentParser(add_help=False)
    track_parent.add_argument("--label", help="Track label")
    track_parent.add_argument("--key", help="Human-readable track name")
    track_parent.add_argument("--config", help="Track config file (YAML or JSON)")
    track_parent.add_argument("--set", action="append", metavar="KEY=VALUE",
                              help="Track setting (repeatable)")

    # add-track command
    add_parser = subparsers.add_parser("add-track", parents=[db_parent, track_parent],
                                       help="Record a track in the track list")
    add_parser.add_argument("--type", help="Track type, e.g. FeatureTrack or ImageTrack.Wiggle")

    # create-track command
    create_parser = subparsers.add_parser("create-track", parents=[db_parent, track_parent],
                                          help="Create a track of a built-in kind")
    create_parser.add_argument("--kind", choices=sorted(TRACK_KINDS), required=True,
                               help="Track family")
    create_parser.add_argument("--js-class", help="Client-side class (default: the kind's)")

    # list-tracks command
    list_parser = subparsers.add_parser("list-tracks", parents=[db_parent],
                                        help="Show the track list")
    list_parser.add_argument("--json", action="store_true", help="Print raw JSON")

    # show-track command
    show_parser = subparsers.add_parser("show-track", parents=[db_parent],
                                        help="Resolve a track to its handler")
    show_parser.add_argument("label", help="Track label")

    # list-refseqs command
    subparsers.add_parser("list-refseqs", parents=[db_parent],
                          help="Show the reference sequences")

    # htaccess command
    htaccess_parser = subparsers.add_parser("htaccess",
                                            help="Print .htaccess for precompressed files")
    htaccess_parser.add_argument("extensions", nargs="*",
                                 help="File extensions (default: .jsonz .txtz)")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    commands = {
        "add-track": cmd_add_track,
        "create-track": cmd_create_track,
        "list-tracks": cmd_list_tracks,
        "show-track": cmd_show_track,
        "list-refseqs": cmd_list_refseqs,
        "htaccess": cmd_htaccess,
    }
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        sys.exit(1)

    try:
        status = command(args)
    except (GenomeDBError, ValueError, OSError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    if status:
        sys.exit(status)


if __name__ == "__main__":
    main()
