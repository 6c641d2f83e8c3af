"""
pubkit — AsciiDoc-to-Kindle publication toolchain.

Public API:
    from pubkit.config import PublicationConfig
    from pubkit.resolve import find_publication_dir, index_document
    from pubkit.kindlegen import detect_platform, ensure_kindlegen
    from pubkit.asciidoctor import Asciidoctor
    from pubkit.builders import BUILDERS, DEFAULT_FORMATS
"""
