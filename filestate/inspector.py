"""Filesystem attribute inspector — read the current state of one path.

The inspector only gathers facts (existence, permission bits, owner, group,
content digest comparison). Turning those facts into issues is the
evaluator's job.
"""

from __future__ import annotations

import hashlib
import io
import logging
import os
from dataclasses import dataclass
from typing import BinaryIO

from filestate import identity
from filestate.errors import PerFileCheckError
from filestate.models import ComplianceIssue, FileSpec

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024

# Permission bits including setuid, setgid and sticky
MODE_MASK = 0o7777


@dataclass
class ContentTarget:
    """Where the desired bytes for a file come from.

    Either ``source`` (a path read at use time) or ``literal`` is set.
    """

    source: str = ""
    literal: bytes = b""

    def open(self) -> BinaryIO:
        if self.source:
            return open(self.source, "rb")
        return io.BytesIO(self.literal)

    def describe(self) -> str:
        return self.source or "<literal content>"


def resolve_content_target(spec: FileSpec) -> ContentTarget | None:
    """Resolve the desired content for a spec.

    ``content_source`` wins when that path currently exists; otherwise a
    non-empty literal ``content`` is used. Returns None when no content is
    required.
    """
    if spec.content_source and os.path.exists(spec.content_source):
        return ContentTarget(source=spec.content_source)
    if spec.content:
        return ContentTarget(literal=spec.content.encode("utf-8"))
    return None


def digest_stream(stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> tuple[str, int]:
    """Return (sha256 hex digest, byte count) of a stream, read in chunks."""
    hasher = hashlib.sha256()
    size = 0
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        hasher.update(chunk)
        size += len(chunk)
    return hasher.hexdigest(), size


def digest_path(path: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> tuple[str, int]:
    try:
        with open(path, "rb") as fh:
            return digest_stream(fh, chunk_size)
    except OSError as e:
        raise PerFileCheckError(f"Cannot read {path}: {e}") from e


@dataclass
class FileAttributes:
    """Inspected state of one path."""

    path: str
    exists: bool = True
    stat_error: str = ""
    mode: int | None = None
    owner: str = ""
    group: str = ""
    content_matches: bool | None = None  # None when content was not compared
    content_error: ComplianceIssue | None = None


def inspect_file(spec: FileSpec, chunk_size: int = DEFAULT_CHUNK_SIZE) -> FileAttributes:
    """Inspect the path named by ``spec``.

    A missing path or a failed stat stops inspection early; mode, owner,
    group and content are meaningless without a readable inode.
    """
    attrs = FileAttributes(path=spec.path)

    try:
        st = os.stat(spec.path)
    except (FileNotFoundError, NotADirectoryError):
        attrs.exists = False
        return attrs
    except OSError as e:
        logger.warning("stat failed for %s: %s", spec.path, e)
        attrs.stat_error = str(e)
        return attrs

    attrs.mode = st.st_mode & MODE_MASK
    attrs.owner = identity.user_name(st.st_uid)
    attrs.group = identity.group_name(st.st_gid)

    target = resolve_content_target(spec)
    if target is not None:
        _compare_content(attrs, target, chunk_size)

    return attrs


def _compare_content(attrs: FileAttributes, target: ContentTarget, chunk_size: int) -> None:
    try:
        with target.open() as fh:
            target_digest, target_size = digest_stream(fh, chunk_size)
    except OSError as e:
        logger.warning("cannot read content source %s: %s", target.source, e)
        attrs.content_error = ComplianceIssue.content_source_read_error(target.source)
        return

    # An empty resolved target means there is no content requirement.
    if target_size == 0:
        return

    try:
        current_digest, _ = digest_path(attrs.path, chunk_size)
    except PerFileCheckError as e:
        logger.warning("%s", e)
        attrs.content_error = ComplianceIssue.content_read_error(attrs.path)
        return

    attrs.content_matches = current_digest == target_digest
    logger.debug(
        "content digest for %s: current=%s target=%s (%s)",
        attrs.path,
        current_digest,
        target_digest,
        target.describe(),
    )
