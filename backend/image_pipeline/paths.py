"""
Path Normalizer

Stored image paths may carry either separator style (records written
on Windows hosts use backslashes). Everything that leaves the service
is rewritten to forward slashes.
"""

from typing import Iterable, List


def normalize_path(path: str) -> str:
    """Replace every backslash with a forward slash."""
    return path.replace("\\", "/")


def normalize_paths(paths: Iterable[str]) -> List[str]:
    """Normalize each path, preserving order."""
    return [normalize_path(p) for p in paths]
