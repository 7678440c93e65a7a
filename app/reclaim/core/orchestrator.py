"""Category scan and clean orchestration.

Runs the enabled category detectors over a root path and aggregates
their output, then removes the reported items one by one, producing one
DeletionRecord per attempt for the deletion history.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path

from rich.markup import escape

from reclaim.categories import (
    BuildDetector,
    CacheDetector,
    CategoryDetector,
    Remover,
    TempDetector,
    TrashDetector,
)
from reclaim.core.activity import ActivityLog
from reclaim.core.config import ReclaimConfig
from reclaim.core.normalize import PathNormalizer
from reclaim.models.history import DeletionRecord
from reclaim.models.scan_result import Category, CategoryScan, CleanReport, ScanResults
from reclaim.trash.freedesktop import FreeDesktopTrash
from reclaim.utils.formatting import OutputMode, print_warning

logger = logging.getLogger(__name__)

# Scan order, also the order categories are displayed and cleaned in
CATEGORY_ORDER: tuple[Category, ...] = (
    Category.CACHE,
    Category.TEMP,
    Category.TRASH,
    Category.BUILD,
)


def get_detectors(
    categories: Iterable[Category],
    config: ReclaimConfig,
    *,
    trash_store: FreeDesktopTrash | None = None,
) -> dict[Category, CategoryDetector]:
    """Create detectors for the requested categories.

    Args:
        categories: Categories to enable (duplicates are ignored).
        config: Effective configuration (thresholds and exclusions).
        trash_store: Trash store for the trash category. Defaults to the
            home trash.

    Returns:
        Detectors keyed by category, in CATEGORY_ORDER.
    """
    wanted = set(categories)
    exclusions = config.exclusions.patterns
    thresholds = config.thresholds

    detectors: dict[Category, CategoryDetector] = {}
    for category in CATEGORY_ORDER:
        if category not in wanted:
            continue
        if category == Category.CACHE:
            detectors[category] = CacheDetector(exclusions)
        elif category == Category.TEMP:
            detectors[category] = TempDetector(thresholds.min_age_days, exclusions)
        elif category == Category.BUILD:
            detectors[category] = BuildDetector(thresholds.project_age_days, exclusions)
        elif category == Category.TRASH:
            detectors[category] = TrashDetector(trash_store)
    return detectors


def scan_all(
    root: Path,
    detectors: Mapping[Category, CategoryDetector],
    *,
    normalizer: PathNormalizer | None = None,
) -> ScanResults:
    """Run every detector over ``root``.

    A failing detector contributes an empty CategoryScan and a warning
    message; the remaining detectors still run. A path that lies inside
    a directory reported by any detector is dropped, so every byte is
    counted and removed once.

    Args:
        root: Directory to scan.
        detectors: Detectors to run, in order.
        normalizer: Path comparison rules. Defaults to the platform's.

    Returns:
        Aggregated ScanResults.
    """
    categories: dict[Category, CategoryScan] = {}
    warnings: list[str] = []

    for category, detector in detectors.items():
        try:
            categories[category] = detector.scan(root)
        except Exception as e:  # noqa: BLE001 - one category must not abort the scan
            message = f"{category.value.capitalize()} scan failed: {e}"
            logger.info(message)
            warnings.append(message)
            categories[category] = CategoryScan(category=category)

    categories = _drop_nested(categories, normalizer or PathNormalizer())
    return ScanResults(root=str(root), categories=categories, warnings=tuple(warnings))


def _drop_nested(
    categories: dict[Category, CategoryScan], normalizer: PathNormalizer
) -> dict[Category, CategoryScan]:
    """Remove paths reported twice or lying below another reported path.

    The first category in scan order keeps a path reported by several
    detectors.
    """
    prefixes = {
        normalizer.as_prefix(normalizer.normalize(path))
        for scan in categories.values()
        for path in scan.paths
    }
    separator = normalizer.separator
    seen: set[str] = set()

    def _keep(path: str) -> bool:
        key = normalizer.normalize(path)
        if key in seen:
            return False
        end = key.rfind(separator, 0, len(key) - 1)
        while end >= 0:
            if key[: end + 1] in prefixes:
                return False
            end = key.rfind(separator, 0, end)
        seen.add(key)
        return True

    trimmed: dict[Category, CategoryScan] = {}
    for category, scan in categories.items():
        kept = tuple(path for path in scan.paths if _keep(path))
        if len(kept) == len(scan.paths):
            trimmed[category] = scan
            continue

        logger.debug(
            "%s: dropped %d paths already covered by another item",
            category.value,
            len(scan.paths) - len(kept),
        )
        sizes = {path: scan.size_of(path) for path in kept}
        trimmed[category] = CategoryScan(
            category=category, paths=kept, size_bytes=sum(sizes.values()), sizes=sizes
        )
    return trimmed


def clean_all(
    results: ScanResults,
    detectors: Mapping[Category, CategoryDetector],
    *,
    authorized: bool,
    permanent: bool = False,
    dry_run: bool = False,
    activity: ActivityLog | None = None,
    output_mode: OutputMode = OutputMode.NORMAL,
) -> CleanReport:
    """Remove every item of a scan.

    Nothing is removed unless ``authorized`` is True. Each removal is
    attempted independently; a failure is counted and the run continues.

    Args:
        results: Output of scan_all().
        detectors: Detectors that produced the results.
        authorized: Whether the caller confirmed the batch.
        permanent: Erase instead of moving to the trash. The trash
            category always erases.
        dry_run: Report what would be removed without removing.
        activity: Optional activity log receiving one line per attempt.
        output_mode: QUIET suppresses per-item warnings.

    Returns:
        CleanReport with one record per attempted removal.
    """
    if not authorized:
        logger.info("Clean not authorized, nothing removed")
        return CleanReport(authorized=False)

    remover = Remover(permanent=permanent, dry_run=dry_run)
    records: list[DeletionRecord] = []
    cleaned = 0
    errors = 0

    for category, scan in results.categories.items():
        detector = detectors.get(category)
        if detector is None:
            logger.debug("No detector for %s, skipping %d items", category.value, scan.items)
            continue

        for path in scan.paths:
            outcome = detector.clean(path, remover)
            records.append(
                DeletionRecord(
                    path=path,
                    success=outcome.success,
                    permanent=outcome.permanent,
                    size_bytes=scan.size_of(path),
                    category=category.value,
                    error=outcome.error,
                )
            )

            if outcome.success:
                cleaned += 1
                if not dry_run and activity is not None:
                    mode = "permanently deleted" if outcome.permanent else "moved to trash"
                    activity.write(f"Cleaned {path} ({mode})")
                continue

            errors += 1
            if activity is not None and not dry_run:
                activity.write(f"Failed to clean {path}: {outcome.error}")
            if output_mode is not OutputMode.QUIET:
                print_warning(f"Failed to clean {escape(path)}: {escape(outcome.error or '')}")

    logger.info("Clean finished: %d cleaned, %d errors", cleaned, errors)
    return CleanReport(records=tuple(records), cleaned=cleaned, errors=errors)


def selected_categories(
    flags: Mapping[Category, bool], *, all_categories: bool = False
) -> Sequence[Category]:
    """Resolve category flags of a command line.

    Args:
        flags: Flag value per category.
        all_categories: Enable every category.

    Returns:
        Enabled categories in CATEGORY_ORDER.
    """
    if all_categories:
        return CATEGORY_ORDER
    return tuple(c for c in CATEGORY_ORDER if flags.get(c, False))
