"""Version, digest and message helpers shared by the apply and bundle commands."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from typing import IO

from timoni.api import ARTIFACT_PREFIX, LATEST_VERSION, ModuleReference, RuntimeCluster


class DigestMismatchError(ValueError):
    """The fetched module digest differs from the one requested."""


@dataclass
class BundleFlags:
    """Runtime options common to all bundle commands."""

    runtime_from_env: bool = False
    runtime_files: list[str] = field(default_factory=list)
    runtime_cluster: str = "*"
    runtime_cluster_group: str = "*"


def resolve_version(version: str, digest: str) -> str:
    """The module version to fetch.

    An empty version means the latest one, or the given digest written
    as '@<digest>' when a digest is set.
    """
    if version:
        return version
    if digest:
        return f"@{digest}"
    return LATEST_VERSION


def module_image(module: str, version: str) -> str:
    """The artifact reference to pull for a module.

    Registry modules get the version appended as a tag, or as '@<digest>'
    when the version is a digest; local paths are returned unchanged.
    """
    if not module.startswith(ARTIFACT_PREFIX):
        return module
    if version.startswith("@"):
        return f"{module}{version}"
    return f"{module}:{version}"


def check_digest(expected: str, actual: str) -> None:
    """Raise DigestMismatchError if a digest was requested and differs."""
    if expected and actual != expected:
        raise DigestMismatchError(f"digest mismatch, expected {expected} got {actual}")


def bundle_module_version(module: ModuleReference) -> str:
    """The version to fetch for a bundle instance's module.

    A digest takes precedence over the 'latest' version.
    """
    if module.version == LATEST_VERSION and module.digest:
        return f"@{module.digest}"
    return module.version


def check_bundle_digest(module: ModuleReference, actual: str) -> None:
    """Raise DigestMismatchError if the bundle pins a digest the upstream lacks."""
    if module.digest and actual != module.digest:
        raise DigestMismatchError(
            f"the upstream digest {actual} of version {module.version} "
            f"doesn't match the specified digest {module.digest}"
        )


def start_message(count: int, cluster: RuntimeCluster | None = None) -> str:
    """The message logged before applying the instances of a bundle."""
    message = f"applying {count} instance(s)"
    if cluster is not None and not cluster.is_default():
        message = f"{message} on {cluster.group}"
    return message


def save_stream_to_file(stream: IO) -> str:
    """Copy a text or binary stream to a new temporary .cue file and return its path."""
    try:
        fd, path = tempfile.mkstemp(suffix=".cue")
    except OSError as err:
        raise OSError("unable to create temp dir for stdin") from err
    try:
        with os.fdopen(fd, "wb") as handle:
            while True:
                chunk = stream.read(64 * 1024)
                if not chunk:
                    break
                if isinstance(chunk, str):
                    chunk = chunk.encode("utf-8")
                handle.write(chunk)
    except OSError as err:
        os.remove(path)
        raise OSError(f"error writing stdin to file: {err}") from err
    return path