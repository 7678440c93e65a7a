"""Build artifact detector.

Reports build output directories (``target``, ``node_modules``,
``build``...) of projects that have been inactive for at least
``project_age_days``. A directory only counts as a build artifact when
its parent holds a manifest of a build system that produces it, so an
unrelated ``build/`` folder is never reported.
"""

import time
from collections.abc import Iterator, Sequence
from pathlib import Path

from reclaim.categories.base import CategoryDetector
from reclaim.models.scan_result import Category
from reclaim.utils.fs import age_days

# Artifact directory name -> project manifests that produce it
BUILD_ARTIFACTS: dict[str, tuple[str, ...]] = {
    "target": ("Cargo.toml", "pom.xml", "build.sbt"),
    "node_modules": ("package.json",),
    ".next": ("package.json",),
    ".nuxt": ("package.json",),
    "dist": ("package.json", "pyproject.toml", "setup.py"),
    "build": ("pyproject.toml", "setup.py", "build.gradle", "build.gradle.kts", "CMakeLists.txt"),
    ".venv": ("pyproject.toml", "requirements.txt", "setup.py"),
    "zig-cache": ("build.zig",),
    ".zig-cache": ("build.zig",),
}


class BuildDetector(CategoryDetector):
    """Finds build artifacts of inactive projects.

    Project activity is the most recent modification time among the
    project's manifests and its top-level entries, excluding the artifact
    directories themselves.

    Args:
        project_age_days: Minimum days since the project was last touched.
        exclusions: fnmatch patterns that are never reported.
        now: Reference UNIX time, for deterministic tests.
    """

    def __init__(
        self,
        project_age_days: int = 14,
        exclusions: Sequence[str] = (),
        *,
        now: float | None = None,
    ) -> None:
        super().__init__(exclusions)
        self._project_age_days = project_age_days
        self._now = now

    @property
    def category(self) -> Category:
        return Category.BUILD

    def find(self, root: Path) -> Iterator[Path]:
        now = self._now if self._now is not None else time.time()
        for current, dirnames, filenames in self.walk(root):
            present = set(filenames)
            artifacts = [
                name
                for name in dirnames
                if any(manifest in present for manifest in BUILD_ARTIFACTS.get(name, ()))
            ]
            if not artifacts:
                continue

            for name in artifacts:
                dirnames.remove(name)

            if self._is_inactive(current, now):
                for name in artifacts:
                    yield current / name

    def _is_inactive(self, project: Path, now: float) -> bool:
        """Check whether nothing in the project root changed recently."""
        youngest: float | None = None
        try:
            children = list(project.iterdir())
        except OSError:
            return False

        for child in children:
            if child.name in BUILD_ARTIFACTS:
                continue
            age = age_days(child, now)
            if age is not None and (youngest is None or age < youngest):
                youngest = age

        if youngest is None:
            return False
        return youngest >= self._project_age_days
