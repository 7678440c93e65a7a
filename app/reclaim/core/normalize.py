"""Platform-aware path comparison.

Deletion records and trash entries are matched by comparing normalized
path strings. On case-insensitive filesystems with mixed separators
(Windows) paths are lower-cased and every separator becomes ``/``; on
case-sensitive platforms normalization is the identity.
"""

import os
from dataclasses import dataclass, field

CANONICAL_SEPARATOR = "/"


def default_case_insensitive() -> bool:
    """Whether the current platform compares paths case-insensitively."""
    return os.name == "nt"


@dataclass(frozen=True, slots=True)
class PathNormalizer:
    """Normalizes paths for record/trash matching.

    Attributes:
        case_insensitive: Lower-case paths and unify separators. Defaults to
            the behaviour of the current platform.
    """

    case_insensitive: bool = field(default_factory=default_case_insensitive)

    @property
    def separator(self) -> str:
        """Separator used in normalized paths."""
        return CANONICAL_SEPARATOR if self.case_insensitive else os.sep

    def normalize(self, path: str) -> str:
        """Normalize a path for comparison.

        Args:
            path: Platform-native path string.

        Returns:
            The comparison key for the path.
        """
        if self.case_insensitive:
            return path.replace("\\", CANONICAL_SEPARATOR).lower()
        return path

    def as_prefix(self, normalized: str) -> str:
        """Turn a normalized directory path into a child-matching prefix.

        Appends exactly one trailing separator so that ``/data/foo`` only
        matches ``/data/foo/...`` and never ``/data/foobar``.

        Args:
            normalized: Output of normalize().

        Returns:
            The prefix every normalized descendant path starts with.
        """
        if normalized.endswith(self.separator):
            return normalized
        return normalized + self.separator

    def is_descendant(self, candidate: str, prefix: str) -> bool:
        """Check whether a normalized path lies under a prefix from as_prefix()."""
        return candidate.startswith(prefix) and candidate != prefix
