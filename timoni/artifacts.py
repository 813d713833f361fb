"""Argument checks and references for pushing, tagging and pulling artifacts."""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass, field


@dataclass
class PushRequest:
    """A checked request to push a file or directory as an artifact."""

    repository: str
    path: str
    tags: list[str] = field(default_factory=list)
    content_type: str = "generic"

    @property
    def is_dir(self) -> bool:
        """True if the pushed path is a directory."""
        return os.path.isdir(self.path)

    @property
    def reference(self) -> str:
        """The reference the artifact is first pushed to."""
        return push_reference(self.repository, self.tags)

    @property
    def extra_tags(self) -> list[str]:
        """The tags added to the pushed artifact after the first one."""
        return self.tags[1:]


def validate_push(
    url_args: Sequence[str], tags: Sequence[str], path: str, content_type: str
) -> PushRequest:
    """Check the push arguments and return the request they describe.

    Raises ValueError for a missing URL, tag or content type, and
    FileNotFoundError when the path does not exist.
    """
    if not url_args:
        raise ValueError("repository URL is required")
    if not tags:
        raise ValueError("at least one tag is required")
    if not os.path.exists(path):
        raise FileNotFoundError(f"file path not found {path}")
    if not content_type:
        raise ValueError("content type is required")
    return PushRequest(
        repository=url_args[0],
        path=path,
        tags=list(tags),
        content_type=content_type,
    )


def push_reference(repository: str, tags: Sequence[str]) -> str:
    """The repository URL with the first tag appended."""
    if not tags:
        raise ValueError("at least one tag is required")
    return f"{repository}:{tags[0]}"


def validate_tag(url_args: Sequence[str], tags: Sequence[str]) -> str:
    """Check the tag arguments and return the artifact URL to tag."""
    if len(url_args) != 1:
        raise ValueError("artifact URL is required")
    if not tags:
        raise ValueError("at least one tag is required")
    return url_args[0]


def tagged_references(base_url: str, tags: Sequence[str]) -> list[str]:
    """The references of an artifact under each of the given tags."""
    return [f"{base_url}:{tag}" for tag in tags]


def prepare_output_dir(path: str) -> str:
    """Create the directory artifacts are extracted to and return its path."""
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as err:
        raise OSError(f"invalid output path {path}: {err}") from err
    if not os.path.isdir(path):
        raise OSError(f"invalid output path {path}: not a directory")
    return path