"""Filesystem access: path resolution, listing and caching."""

from .cache import CacheEntry, DirectoryCache
from .reader import DirectoryReader, DirEntry, ScandirReader, reader_for_config
from .resolver import ListingTarget, PathResolver, Resolution, home_directory, join_clamped

__all__ = [
    "CacheEntry",
    "DirEntry",
    "DirectoryCache",
    "DirectoryReader",
    "ListingTarget",
    "PathResolver",
    "Resolution",
    "ScandirReader",
    "home_directory",
    "join_clamped",
    "reader_for_config",
]
