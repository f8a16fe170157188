"""foldersummary - Rate-limited folder summaries and completion events."""

__version__ = "0.1.0"
