"""Directory browsing: subdirectory listing and the browse state machine."""

from .engine import BrowseSession, BrowseView, NavigationEngine, NavigationMode
from .lister import list_subdirectories, validate_directory

__all__ = [
    "BrowseSession",
    "BrowseView",
    "NavigationEngine",
    "NavigationMode",
    "list_subdirectories",
    "validate_directory",
]
