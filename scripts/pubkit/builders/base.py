"""
Base builder class for all output formats.

Subclasses implement `produce()` and set `format_name`.
Shared logic (attributes, options, logging, artifact checks) lives here.
"""

import os
from abc import ABC, abstractmethod

from pubkit.resolve import index_document


class BaseBuilder(ABC):
    """
    Abstract base for format builders.

    Subclasses must define:
        format_name:  str    — human-readable name ("MOBI", ...)
        produce():    method — run the engine, return artifact paths
    """

    format_name = None  # Override in subclass

    def __init__(self, config, verbose=False):
        self.config = config
        self.verbose = verbose

    @property
    def root(self):
        return self.config.root

    @property
    def index_document(self):
        return index_document(self.root)

    def artifact(self, filename):
        return os.path.join(self.root, filename)

    # ── Logging ────────────────────────────────────────────

    def log(self, msg):
        if self.verbose:
            print(msg)

    def header(self):
        print(f"\n{'─' * 60}")
        print(f"  Building {self.format_name}: {self.config.book_name}")
        print(f"{'─' * 60}")

    # ── Engine configuration ───────────────────────────────

    def common_attributes(self, book_name, isbn, code):
        """Document attributes every format shares."""
        return {
            "book-name": book_name,
            "isbn": isbn,
            "code": code,
            "imagesdir": "images",
            "idprefix": "",
            "idseparator": "-",
            "toc": True,
            "sectnums": True,
        }

    def common_options(self, backend, attributes):
        return {
            "backend": backend,
            "safe": "unsafe",
            "attributes": attributes,
        }

    # ── Build ──────────────────────────────────────────────

    @abstractmethod
    def produce(self, engine):
        """
        Run the conversion. Returns the expected artifact paths; whether
        they were actually written is for the caller to check.
        """
        ...

    def build(self, engine):
        """
        Produce and verify the artifacts. Returns True when all exist.
        """
        self.header()
        self.log(f"  Input: {self.index_document}")

        ok = True
        for path in self.produce(engine):
            if os.path.exists(path):
                print(f"  ✓ {path}")
            else:
                print(f"  ✗ {path} was not produced")
                ok = False
        return ok
