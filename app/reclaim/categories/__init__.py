"""Category detectors.

Each detector finds reclaimable items of one Category below a root path.
"""

from reclaim.categories.base import CategoryDetector
from reclaim.categories.build import BuildDetector
from reclaim.categories.cache import CacheDetector
from reclaim.categories.remover import RemovalResult, Remover
from reclaim.categories.temp import TempDetector
from reclaim.categories.trash import TrashDetector

__all__ = [
    "BuildDetector",
    "CacheDetector",
    "CategoryDetector",
    "RemovalResult",
    "Remover",
    "TempDetector",
    "TrashDetector",
]
