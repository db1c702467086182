"""
Pure helpers for naming, content types and build-directory enumeration.

Testable without Pulumi runtime. Used by the base stack (origin_id,
oac_name, tags) and by the upload module (iter_site_files, content_type_for,
object_resource_name). All functions accept and return plain Python types.
"""

import hashlib
import logging
import mimetypes
import os
import re
from dataclasses import dataclass
from typing import Iterator

logger = logging.getLogger(__name__)

# Types served with an explicit charset so browsers do not guess the encoding.
_CHARSET_TYPES: frozenset[str] = frozenset(
    {
        "application/javascript",
        "application/json",
        "application/xml",
        "image/svg+xml",
    }
)


@dataclass(frozen=True)
class SiteFile:
    """
    One file of a build directory.

    Attributes:
        path: Absolute path on disk (used as the upload source).
        key: Object key in the bucket, always "/" separated.
        content_type: MIME type for the object, or None when unknown.
    """

    path: str
    key: str
    content_type: str | None


def origin_id(bucket_name: str) -> str:
    """CloudFront origin id for a bucket, e.g. "S3-my-site"."""
    return f"S3-{bucket_name}"


def oac_name(bucket_name: str) -> str:
    return f"{bucket_name}-OAC"


def default_tags(environment: str) -> dict[str, str]:
    return {"Pulumi": "true", "Environment": environment}


def join_key(prefix: str, name: str) -> str:
    """
    Join an object key prefix and an entry name with "/".

    Keys are bucket paths, not filesystem paths, so the separator does not
    follow os.sep.
    """
    return f"{prefix.rstrip('/')}/{name}" if prefix else name


def content_type_for(filename: str) -> str | None:
    """
    Return the Content-Type for a file name, derived from its extension.

    Text types (and a few text-based application types) get a
    "; charset=utf-8" parameter. Returns None when the extension is unknown
    so the object falls back to the storage default.
    """
    mime, _ = mimetypes.guess_type(filename, strict=False)
    if mime is None:
        return None
    if mime.startswith("text/") or mime in _CHARSET_TYPES:
        return f"{mime}; charset=utf-8"
    return mime


def object_resource_name(stack_name: str, key: str) -> str:
    """
    Build a unique Pulumi resource name for an uploaded object.

    The readable slug alone can collide ("guide/index.html" and
    "guide-index.html"), so a short digest of the exact key is appended.
    Keys are unique within a bucket; with the stack name as prefix the names
    stay unique across stacks in one program and stable across updates.
    """
    slug = re.sub(r"[^A-Za-z0-9._-]+", "-", key).strip("-")
    digest = hashlib.sha1(key.encode("utf-8")).hexdigest()[:8]
    return f"{stack_name}-object-{slug}-{digest}"


def iter_site_files(source_path: str, prefix: str = "") -> Iterator[SiteFile]:
    """
    Recursively enumerate the files under source_path.

    Directories are descended with their name appended to the key prefix;
    every other entry yields one SiteFile. Entries are visited in sorted order.
    A missing or unreadable directory raises the underlying OSError.

    Args:
        source_path: Directory to walk (relative paths resolve against cwd).
        prefix: Key prefix for entries of source_path ("" for bucket root).
    """
    for entry in sorted(os.listdir(source_path)):
        file_path = os.path.join(source_path, entry)
        file_key = join_key(prefix, entry)

        if os.path.isdir(file_path):
            yield from iter_site_files(file_path, file_key)
            continue

        content_type = content_type_for(entry)
        logger.debug("Found %s (key=%s, type=%s)", file_path, file_key, content_type)
        yield SiteFile(
            path=os.path.abspath(file_path),
            key=file_key,
            content_type=content_type,
        )
