"""Developer directory browsing: filter construction and fetch orchestration."""

__version__ = "0.1.0"
