#!/usr/bin/env python3
"""
Publication build script.

Turns an AsciiDoc publication (publication.yaml + index.adoc) into a
Kindle book, fetching kindlegen on first use.

Usage:
    python publish.py docs                  Build the .mobi
    python publish.py build docs -v         Same, with detail
    python publish.py fetch docs            Only download/unpack kindlegen

Requires: asciidoctor-epub3, PyYAML, requests
          unzip (macOS) or tar (Linux) to unpack kindlegen
"""

import os
import sys
import argparse
import traceback

# Ensure pubkit is importable from the scripts/ directory
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from pubkit.asciidoctor import Asciidoctor, AsciidoctorNotFound
from pubkit.config import PublicationConfig, ConfigError
from pubkit.resolve import find_publication_dir
from pubkit.builders import BUILDERS, DEFAULT_FORMATS
from pubkit.kindlegen import UnsupportedPlatformError, detect_platform, ensure_kindlegen


# ── Resolve publication ────────────────────────────────────────────────


def resolve_publication(identifier):
    """Find publication directory, load config. Exits on failure."""
    project_root = os.getcwd()
    pub_dir = find_publication_dir(identifier, project_root)

    if not pub_dir:
        print(f"Error: Could not find publication '{identifier}'")
        print(f"  Searched in: {os.path.join(project_root, 'publications')}")
        print("  Tip: Pass the directory holding publication.yaml.")
        sys.exit(1)

    try:
        config = PublicationConfig.load(pub_dir)
    except ConfigError as e:
        print(f"Error: {e}")
        sys.exit(1)

    return config


# ── Build command ──────────────────────────────────────────────────────


def cmd_build(args):
    """Build the e-book formats."""
    config = resolve_publication(args.publication)
    config.summary()

    engine = Asciidoctor(executable=args.asciidoctor, requires=args.require)

    results = {}
    for fmt in DEFAULT_FORMATS:
        try:
            builder = BUILDERS[fmt](config, verbose=args.verbose)
            results[fmt] = builder.build(engine)
        except (UnsupportedPlatformError, AsciidoctorNotFound) as e:
            print(f"  ✗ {e}")
            results[fmt] = False

    print(f"\n{'─' * 60}")
    failed = [fmt for fmt, ok in results.items() if not ok]
    if failed:
        print(f"  Done with errors: {', '.join(failed)} failed")
        sys.exit(1)
    else:
        print(f"  Done. {len(results)} format(s) built successfully.")


# ── Fetch command ──────────────────────────────────────────────────────


def cmd_fetch(args):
    """Download and unpack kindlegen without building."""
    config = resolve_publication(args.publication)

    mac, nix = detect_platform()
    try:
        binary = ensure_kindlegen(config.kindlegen, mac, nix, verbose=args.verbose)
    except UnsupportedPlatformError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if not os.path.exists(binary):
        print(f"  ✗ {binary} missing after unpacking")
        sys.exit(1)
    print(f"  ✓ {binary}")


# ── Argument Parser ────────────────────────────────────────────────────


def build_parser():
    parser = argparse.ArgumentParser(
        description="AsciiDoc to Kindle publication pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  %(prog)s docs                 Build index.mobi for docs/publication.yaml
  %(prog)s build reactive -v    Build a publication found under publications/
  %(prog)s fetch docs           Download kindlegen only
        """,
    )

    sub = parser.add_subparsers(dest="command")

    # ── build (default when no subcommand) ─────────────────
    build_p = sub.add_parser("build", help="Build the .mobi (default)")
    _add_publication_arg(build_p)
    build_p.add_argument(
        "--asciidoctor",
        default="asciidoctor-epub3",
        help="Converter executable (default: asciidoctor-epub3)",
    )
    build_p.add_argument(
        "--require",
        "-r",
        action="append",
        default=[],
        metavar="LIB",
        help="Ruby library for the converter to load (repeatable)",
    )
    build_p.add_argument("--verbose", "-v", action="store_true")

    # ── fetch ──────────────────────────────────────────────
    fetch_p = sub.add_parser("fetch", help="Download and unpack kindlegen")
    _add_publication_arg(fetch_p)
    fetch_p.add_argument("--verbose", "-v", action="store_true")

    return parser


def _add_publication_arg(parser):
    parser.add_argument("publication", help="Directory with publication.yaml, or keyword")


# ── Main ───────────────────────────────────────────────────────────────


def main(argv=None):
    parser = build_parser()
    argv = sys.argv[1:] if argv is None else argv

    # Bare "publish.py docs" means "publish.py build docs"
    known_commands = {"build", "fetch"}
    if argv and argv[0] not in known_commands and not argv[0].startswith("-"):
        args = parser.parse_args(["build"] + argv)
    else:
        args = parser.parse_args(argv)

    dispatch = {
        "build": cmd_build,
        "fetch": cmd_fetch,
    }

    handler = dispatch.get(args.command)
    if handler:
        handler(args)
    else:
        parser.print_help()


def run():
    try:
        main()
    except KeyboardInterrupt:
        print("\nCancelled.")
        sys.exit(1)
    except Exception as e:
        log_path = "build_error.log"
        with open(log_path, "w") as f:
            traceback.print_exc(file=f)
        print(f"\nUnexpected error: {e}")
        print(f"Full traceback written to {log_path}")
        sys.exit(1)


if __name__ == "__main__":
    run()
