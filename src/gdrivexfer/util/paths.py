"""Remote path helpers (pure, no I/O)."""

from __future__ import annotations

SEP: str = "/"


def split(path: str) -> list[str]:
    """Split a remote path into its non-empty segments."""
    return [part for part in path.split(SEP) if part]


def normalize(path: str) -> str:
    """Return `path` rooted at "/" with duplicate/trailing separators removed."""
    return SEP + SEP.join(split(path))


def join(directory: str, leaf: str) -> str:
    """
    Join a directory and a leaf name with exactly one separator.

    Raises:
        ValueError: if leaf is empty (or only separators).
    """
    leaf_parts = split(leaf)
    if not leaf_parts:
        raise ValueError("leaf must be a non-empty name")
    return SEP + SEP.join(split(directory) + leaf_parts)


def leaf_name(path: str) -> str:
    """Return the final segment of `path` ("" for the root)."""
    parts = split(path)
    return parts[-1] if parts else ""


def parent(path: str) -> str:
    """Return the parent directory of `path` ("/" for top-level entries)."""
    return SEP + SEP.join(split(path)[:-1])
