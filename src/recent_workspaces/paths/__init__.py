"""Path normalization and filesystem access."""

from .filesystem import LOCAL_FS, FileSystem, LocalFileSystem
from .normalizer import canonicalize, file_uri_to_path, normalize, to_file_uri

__all__ = [
    "FileSystem",
    "LocalFileSystem",
    "LOCAL_FS",
    "canonicalize",
    "file_uri_to_path",
    "normalize",
    "to_file_uri",
]
