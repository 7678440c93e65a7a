"""reclaim - find reclaimable disk space and undo cleanups from the trash."""

__version__ = "0.3.0"
