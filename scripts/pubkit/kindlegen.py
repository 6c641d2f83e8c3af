"""
kindlegen provisioning.

The conversion engine shells out to Amazon's kindlegen to turn a KF8
epub into a .mobi. This module makes sure the binary sits at its
configured location: downloads the vendor archive for the host OS and
unpacks it with unzip (macOS) or tar (Linux and other Unix variants).
"""

import os
import platform
import subprocess

import requests


CHUNK_SIZE = 1024 * 1024


class UnsupportedPlatformError(Exception):
    """Raised on hosts that are neither macOS nor Unix-like."""
    pass


def detect_platform(system=None):
    """
    Classify the host OS.

    Returns: (mac, nix) booleans. `system` defaults to platform.system().
    """
    name = (system if system is not None else platform.system()).lower()
    mac = "darwin" in name or "mac" in name
    nix = any(token in name for token in ("nix", "nux", "aix"))
    return mac, nix


def archive_command(archive, dest):
    """Extraction command for an archive, chosen by file extension."""
    if archive.endswith(".zip"):
        return ["unzip", "-o", archive, "-d", dest]
    return ["tar", "xzf", archive, "-C", dest]


def download(uri, out):
    """Stream `uri` into `out`. Partial downloads never land at `out`."""
    partial = out + ".part"
    with requests.get(uri, stream=True) as response:
        response.raise_for_status()
        try:
            with open(partial, "wb") as f:
                for chunk in response.iter_content(CHUNK_SIZE):
                    f.write(chunk)
        except BaseException:
            os.remove(partial)
            raise
    os.replace(partial, out)


def unpack(archive, binary, verbose=False):
    """
    Extract `archive` into the directory of `binary`.

    Returns the extractor's exit code. A non-zero code is reported,
    not raised.
    """
    dest = os.path.dirname(binary)
    result = subprocess.run(
        archive_command(archive, dest),
        capture_output=not verbose,
    )
    print(f"  Extracted {archive} to {binary} (exit {result.returncode})")
    return result.returncode


def ensure_kindlegen(kindlegen, mac, nix, verbose=False):
    """
    Make sure the kindlegen binary exists, fetching it if needed.

    Args:
        kindlegen: mapping with binary_location, osx_download_uri,
                   unix_download_uri
        mac, nix:  host OS flags from detect_platform()

    Returns: the binary path.
    """
    if not (mac or nix):
        raise UnsupportedPlatformError("kindlegen is only supported on macOS and Linux.")

    binary = kindlegen["binary_location"]
    if os.path.exists(binary):
        if verbose:
            print(f"  kindlegen: {binary}")
        return binary

    if mac:
        uri, ext = kindlegen["osx_download_uri"], "zip"
    else:
        uri, ext = kindlegen["unix_download_uri"], "tgz"

    directory = os.path.dirname(binary)
    archive = os.path.join(directory, f"dl.{ext}")

    if not os.path.exists(archive):
        os.makedirs(directory, exist_ok=True)
        if verbose:
            print(f"  Downloading {uri}...")
        download(uri, archive)
        print(f"  Downloaded {archive}")

    unpack(archive, binary, verbose=verbose)
    return binary
