"""
Publication resolution and source lookup.

Finds the directory holding publication.yaml and the index document
the conversion engine starts from.
"""

import os

import yaml

from pubkit.config import CONFIG_FILENAME


INDEX_DOCUMENT = "index.adoc"


def find_publication_dir(identifier, project_root):
    """
    Resolve a publication identifier to its configuration directory.

    Accepts:
        - Direct path:  docs/reactive-spring
        - Keyword:      reactive  (matches a directory under publications/
                                   or the book_name in its YAML)

    Returns: absolute path to the directory, or None.
    """
    for candidate in [identifier, os.path.join(project_root, identifier)]:
        if os.path.isdir(candidate) and os.path.exists(
            os.path.join(candidate, CONFIG_FILENAME)
        ):
            return os.path.abspath(candidate)

    publications_root = os.path.join(project_root, "publications")
    if not os.path.isdir(publications_root):
        return None

    identifier_lower = identifier.lower()

    for entry in sorted(os.listdir(publications_root)):
        pub_path = os.path.join(publications_root, entry)
        yaml_path = os.path.join(pub_path, CONFIG_FILENAME)
        if not os.path.exists(yaml_path):
            continue

        if identifier_lower in entry.lower():
            return pub_path

        with open(yaml_path) as f:
            try:
                cfg = yaml.safe_load(f)
            except yaml.YAMLError:
                continue
        if isinstance(cfg, dict) and identifier_lower in str(cfg.get("book_name", "")).lower():
            return pub_path

    return None


def index_document(root):
    """The root source file describing the book's structure."""
    return os.path.join(root, INDEX_DOCUMENT)
