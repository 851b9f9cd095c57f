"""Streaming content digests used to check transfer integrity."""

from __future__ import annotations

import hashlib
from enum import Enum
from typing import BinaryIO, Union

from gdrivexfer.errors import LocalIOError
from gdrivexfer.models import DriveItem, Hashes

DEFAULT_BLOCK_SIZE: int = 1024 * 1024


class HashAlgorithm(str, Enum):
    """Accepts "sha256", "SHA256", "SHA-256", "sha_256" and the like."""

    SHA1 = "sha1"
    SHA256 = "sha256"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.strip().lower().replace("-", "").replace("_", "")
            for member in cls:
                if member.value == key:
                    return member
        return None


def digest(
    stream: BinaryIO,
    algorithm: Union[HashAlgorithm, str] = HashAlgorithm.SHA256,
    *,
    block_size: int = DEFAULT_BLOCK_SIZE,
) -> str:
    """
    Hash `stream` from its current position to EOF.

    Reads in `block_size` blocks, so memory use does not depend on the
    stream length. Returns lowercase hex.
    """
    h = hashlib.new(HashAlgorithm(algorithm).value)
    while True:
        block = stream.read(block_size)
        if not block:
            break
        h.update(block)
    return h.hexdigest()


def digest_file(
    path: str,
    algorithm: Union[HashAlgorithm, str] = HashAlgorithm.SHA256,
    *,
    block_size: int = DEFAULT_BLOCK_SIZE,
) -> str:
    """Hash a local file. Raises LocalIOError if it cannot be read."""
    try:
        with open(path, "rb") as f:
            return digest(f, algorithm, block_size=block_size)
    except OSError as exc:
        raise LocalIOError(
            "Failed to read local file",
            details={"local_path": path},
            cause=exc,
        ) from exc


def file_hashes(path: str, *, block_size: int = DEFAULT_BLOCK_SIZE) -> Hashes:
    """Compute SHA-1 and SHA-256 of a local file in one pass (uppercase hex)."""
    sha1 = hashlib.sha1()
    sha256 = hashlib.sha256()
    try:
        with open(path, "rb") as f:
            while True:
                block = f.read(block_size)
                if not block:
                    break
                sha1.update(block)
                sha256.update(block)
    except OSError as exc:
        raise LocalIOError(
            "Failed to read local file",
            details={"local_path": path},
            cause=exc,
        ) from exc
    return Hashes(sha1=sha1.hexdigest().upper(), sha256=sha256.hexdigest().upper())


def matches(item: DriveItem, path: str) -> bool:
    """
    Return True if the remote file's reported hashes match the local file.

    Only digests the remote actually reported are compared; an item with no
    reported digest never matches.
    """
    if item.file is None:
        return False
    remote = item.file.hashes
    if not remote.sha1 and not remote.sha256:
        return False

    local = file_hashes(path)
    if remote.sha1 and remote.sha1.upper() != local.sha1:
        return False
    if remote.sha256 and remote.sha256.upper() != local.sha256:
        return False
    return True
