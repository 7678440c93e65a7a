"""Data models for reclaim.

This module exports the core data structures used throughout the application.
"""

from reclaim.models.history import DeletionLog, DeletionRecord, create_deletion_log
from reclaim.models.restore import RestoreOutcome, RestoreProgress, RestoreResult
from reclaim.models.scan_result import Category, CategoryScan, CleanReport, ScanResults

__all__ = [
    "Category",
    "CategoryScan",
    "CleanReport",
    "DeletionLog",
    "DeletionRecord",
    "RestoreOutcome",
    "RestoreProgress",
    "RestoreResult",
    "ScanResults",
    "create_deletion_log",
]
