from pubkit.builders.mobi import MobiBuilder

BUILDERS = {
    "mobi": MobiBuilder,
}

DEFAULT_FORMATS = ["mobi"]
