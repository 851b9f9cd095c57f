from .hashing import HashAlgorithm, digest, digest_file, file_hashes, matches
from .mime import DEFAULT_MIME, FOLDER_MIME, guess_mime_type, is_folder
from .paths import join, leaf_name, normalize, parent, split
from .time import parse_optional_rfc3339, parse_rfc3339

__all__ = [
    "HashAlgorithm",
    "digest",
    "digest_file",
    "file_hashes",
    "matches",
    "DEFAULT_MIME",
    "FOLDER_MIME",
    "guess_mime_type",
    "is_folder",
    "join",
    "leaf_name",
    "normalize",
    "parent",
    "split",
    "parse_rfc3339",
    "parse_optional_rfc3339",
]
