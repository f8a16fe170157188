"""Server module - REST API for folder summaries and events."""
