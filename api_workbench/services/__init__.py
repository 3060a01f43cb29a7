# Services package

from .naming import sanitize, allocate_segments
from .identity import IdentityKey, synthesize_id
from .base import ProjectStore, mark_clean
from .folder_store import FolderFormatStore
from .legacy_store import LegacyDocumentStore
from .stores import select_store, store_for_format, save_project, load_project
from .workspace import SkippedReference, WorkspaceLoadResult, load_workspace, save_workspace
from .locator import Location, RenameResult, locate, rename
from .schema_sync import apply_schema_diff
from .registry import ProjectRegistry, get_registry

__all__ = [
    "sanitize",
    "allocate_segments",
    "IdentityKey",
    "synthesize_id",
    "ProjectStore",
    "mark_clean",
    "FolderFormatStore",
    "LegacyDocumentStore",
    "select_store",
    "store_for_format",
    "save_project",
    "load_project",
    "SkippedReference",
    "WorkspaceLoadResult",
    "load_workspace",
    "save_workspace",
    "Location",
    "RenameResult",
    "locate",
    "rename",
    "apply_schema_diff",
    "ProjectRegistry",
    "get_registry",
]
