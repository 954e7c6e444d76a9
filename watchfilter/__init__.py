"""Event filterers based on globsets, ignore files and tagged filters."""

__version__ = "0.1.0"

__all__ = [
    "errors",
    "events",
    "files",
    "filter",
    "gitignore",
    "globset",
    "ignore_filterer",
    "parse",
    "tagged",
]