"""
Store selection by location kind.

Callers never branch on the format themselves: a directory is a folder
project, a file is a legacy SoapUI document. A location that does not exist
yet is a legacy document when it ends in ``.xml`` and a folder project
otherwise.
"""

from pathlib import Path

from ..models import Project
from .base import ProjectStore
from .folder_store import FolderFormatStore
from .legacy_store import LegacyDocumentStore
from .locks import PathLike

LEGACY_SUFFIX = ".xml"

FORMATS = {
    FolderFormatStore.format_name: FolderFormatStore,
    LegacyDocumentStore.format_name: LegacyDocumentStore,
}


def store_for_format(format_name: str) -> ProjectStore:
    try:
        return FORMATS[format_name]()
    except KeyError:
        raise ValueError(
            f"Unknown project format {format_name!r}; expected one of {sorted(FORMATS)}"
        ) from None


def select_store(location: PathLike) -> ProjectStore:
    """Return the store that handles ``location``."""
    path = Path(location)
    if path.is_dir():
        return FolderFormatStore()
    if path.exists():
        return LegacyDocumentStore()
    if path.suffix.lower() == LEGACY_SUFFIX:
        return LegacyDocumentStore()
    return FolderFormatStore()


def save_project(project: Project, location: PathLike) -> Path:
    """Save ``project`` at ``location`` with the matching store."""
    return select_store(location).save(project, location)


def load_project(location: PathLike) -> Project:
    """Load the project at ``location`` with the matching store."""
    return select_store(location).load(location)
