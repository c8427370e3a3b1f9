"""archsearch - full-text search over architecture workspaces."""

__version__ = "0.1.0"
