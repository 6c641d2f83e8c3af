"""
MOBI builder.

Pipeline: kindlegen provisioning → asciidoctor-epub3 (ebook-format=kf8)
→ index-kf8.epub, which the engine hands to kindlegen → index.mobi.

The engine tends to report "No child processes" after kindlegen has
already written the .mobi, so its failures are warnings here.
"""

import os

from pubkit.asciidoctor import AsciidoctorError
from pubkit.builders.base import BaseBuilder
from pubkit.config import KINDLEGEN_ENV
from pubkit.kindlegen import detect_platform, ensure_kindlegen


class MobiBuilder(BaseBuilder):
    format_name = "MOBI"
    outputs = ("index-kf8.epub", "index.mobi")

    def __init__(self, config, verbose=False, platform_flags=None, fetch=ensure_kindlegen):
        super().__init__(config, verbose=verbose)
        mac, nix = platform_flags if platform_flags is not None else detect_platform()
        self.kindlegen = fetch(config.kindlegen, mac, nix, verbose=verbose)

    def produce(self, engine):
        attributes = self.common_attributes(
            self.config.book_name, self.config.isbn, self.config.code
        )
        attributes["ebook-format"] = "kf8"
        options = self.common_options("epub3", attributes)

        try:
            engine.convert_file(
                self.index_document,
                options,
                env={KINDLEGEN_ENV: self.kindlegen},
            )
        except AsciidoctorError as e:
            print(f"  Warning: producing the .mobi failed: {e}")
            print(
                "  If the error says 'No child processes' but there is an index.mobi in "
                f"{os.path.abspath(self.root)}, the book was built anyway."
            )

        return [self.artifact(name) for name in self.outputs]
