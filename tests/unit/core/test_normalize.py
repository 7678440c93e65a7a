"""Unit tests for path normalization."""

import os

import pytest
from reclaim.core.normalize import PathNormalizer, default_case_insensitive


class TestNormalize:
    """Tests for PathNormalizer.normalize."""

    def test_case_sensitive_is_identity(self, posix_normalizer: PathNormalizer) -> None:
        """Without case folding the path is returned unchanged."""
        assert posix_normalizer.normalize("/Data/Foo\\bar") == "/Data/Foo\\bar"

    def test_case_insensitive_folds_case_and_separators(
        self, windows_normalizer: PathNormalizer
    ) -> None:
        """Case-insensitive mode lower-cases and unifies separators."""
        assert windows_normalizer.normalize("C:\\Users\\Bob\\Cache") == "c:/users/bob/cache"

    def test_default_follows_platform(self) -> None:
        """The default mode matches the running platform."""
        assert PathNormalizer().case_insensitive is default_case_insensitive()
        assert default_case_insensitive() is (os.name == "nt")


class TestPrefix:
    """Tests for directory prefix matching."""

    def test_as_prefix_appends_one_separator(self, windows_normalizer: PathNormalizer) -> None:
        """A trailing separator is added exactly once."""
        assert windows_normalizer.as_prefix("c:/data/foo") == "c:/data/foo/"
        assert windows_normalizer.as_prefix("c:/data/foo/") == "c:/data/foo/"

    def test_posix_separator(self, posix_normalizer: PathNormalizer) -> None:
        """Case-sensitive mode uses the platform separator."""
        assert posix_normalizer.separator == os.sep

    @pytest.mark.parametrize(
        ("candidate", "expected"),
        [
            ("c:/data/foo/a.txt", True),
            ("c:/data/foo/sub/b.txt", True),
            ("c:/data/foobar/a.txt", False),
            ("c:/data/foo/", False),
            ("c:/data", False),
        ],
    )
    def test_is_descendant(
        self, windows_normalizer: PathNormalizer, candidate: str, expected: bool
    ) -> None:
        """Only strict descendants of the directory match."""
        prefix = windows_normalizer.as_prefix("c:/data/foo")
        assert windows_normalizer.is_descendant(candidate, prefix) is expected
