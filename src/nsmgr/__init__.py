"""nsmgr — namespace manager for wiki configuration."""

__version__ = "0.4.0"
