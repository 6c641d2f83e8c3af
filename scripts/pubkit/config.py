"""
Publication configuration: load, validate, and provide defaults for publication.yaml.
"""

import os
from types import MappingProxyType

import yaml


CONFIG_FILENAME = "publication.yaml"

# Fields required in every publication.yaml
REQUIRED_FIELDS = ["book_name"]

# Defaults applied if missing
DEFAULTS = {
    "code": "",
    "mobi": {},
}

MOBI_DEFAULTS = {
    "isbn": "",
    "kindlegen": {},
}

KINDLEGEN_DEFAULTS = {
    "binary_location": "~/bin/kindlegen/kindlegen",
    "osx_download_uri": "https://kindlegen.s3.amazonaws.com/KindleGen_Mac_i386_v2_9.zip",
    "unix_download_uri": "https://kindlegen.s3.amazonaws.com/kindlegen_linux_2.6_i386_v2_9.tar.gz",
}

# Overrides mobi.kindlegen.binary_location when set
KINDLEGEN_ENV = "KINDLEGEN"


class ConfigError(Exception):
    """Raised when publication.yaml is missing or invalid."""
    pass


def _freeze(value):
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


class PublicationConfig:
    """
    Loaded, validated publication configuration. Read-only after load.

    Usage:
        config = PublicationConfig.load(pub_dir)
        config.book_name                           # "Reactive Spring"
        config.root                                # "/home/me/rsb/src/docs/asciidoc"
        config.mobi["isbn"]                        # "978-1-7329104-1-8"
        config.kindlegen["binary_location"]        # "/home/me/bin/kindlegen/kindlegen"
    """

    def __init__(self, data, config_dir):
        object.__setattr__(self, "_data", _freeze(data))
        object.__setattr__(self, "config_dir", config_dir)

    @classmethod
    def load(cls, config_dir, environ=None):
        """
        Load and validate publication.yaml from a directory.

        `environ` is consulted once, here, for the KINDLEGEN override;
        defaults to os.environ.
        """
        if environ is None:
            environ = os.environ

        yaml_path = os.path.join(config_dir, CONFIG_FILENAME)
        if not os.path.exists(yaml_path):
            raise ConfigError(f"No {CONFIG_FILENAME} found in {config_dir}")

        with open(yaml_path) as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise ConfigError(
                f"{CONFIG_FILENAME} must be a YAML mapping, got {type(data).__name__}"
            )

        missing = [key for key in REQUIRED_FIELDS if not data.get(key)]
        if missing:
            raise ConfigError(
                f"{CONFIG_FILENAME} missing required fields: {', '.join(missing)}"
            )

        _apply_defaults(data, DEFAULTS)

        if not isinstance(data["mobi"], dict):
            raise ConfigError("'mobi' must be a YAML mapping")
        _apply_defaults(data["mobi"], MOBI_DEFAULTS)

        if not data["mobi"]["isbn"]:
            raise ConfigError(f"{CONFIG_FILENAME} missing required field: mobi.isbn")
        data["mobi"]["isbn"] = str(data["mobi"]["isbn"])

        kindlegen = data["mobi"]["kindlegen"]
        if not isinstance(kindlegen, dict):
            raise ConfigError("'mobi.kindlegen' must be a YAML mapping")
        for key, default in KINDLEGEN_DEFAULTS.items():
            if not kindlegen.get(key):
                kindlegen[key] = default

        if environ.get(KINDLEGEN_ENV):
            kindlegen["binary_location"] = environ[KINDLEGEN_ENV]
        kindlegen["binary_location"] = _absolute(kindlegen["binary_location"], config_dir)

        data["root"] = _absolute(data.get("root") or ".", config_dir)

        return cls(data, os.path.abspath(config_dir))

    # ── Attribute access ───────────────────────────────────

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._data[name]
        except KeyError:
            raise AttributeError(f"PublicationConfig has no field '{name}'")

    def __setattr__(self, name, value):
        raise AttributeError("PublicationConfig is read-only")

    def get(self, key, default=None):
        return self._data.get(key, default)

    def __getitem__(self, key):
        return self._data[key]

    def __contains__(self, key):
        return key in self._data

    # ── Convenience ────────────────────────────────────────

    @property
    def isbn(self):
        return self.mobi["isbn"]

    @property
    def kindlegen(self):
        return self.mobi["kindlegen"]

    def summary(self):
        """Print a short config summary."""
        print(f"\n  Book:      {self.book_name}")
        print(f"  ISBN:      {self.isbn}")
        print(f"  Root:      {self.root}")
        if self.code:
            print(f"  Code:      {self.code}")
        print(f"  Kindlegen: {self.kindlegen['binary_location']}")


def _absolute(path, base_dir):
    path = os.path.expanduser(str(path))
    if not os.path.isabs(path):
        path = os.path.join(base_dir, path)
    return os.path.abspath(path)


def _apply_defaults(section, defaults):
    """Fill missing keys. An empty YAML key (None) counts as missing."""
    for key, default in defaults.items():
        if section.get(key) is None:
            section[key] = dict(default) if isinstance(default, dict) else default
