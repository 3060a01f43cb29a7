"""
Pydantic schemas package.

Exports all schemas for API request/response validation.
"""

from .project import (
    ProjectFormat,
    ProjectLocation,
    ProjectSave,
    ProjectSaved,
    ProjectSummary,
    RenameEntity,
    RenameOutcome,
    SchemaDiffApply,
)

from .workspace import (
    WorkspaceLocation,
    SkippedReferenceResponse,
    WorkspaceLoaded,
    WorkspaceSave,
    WorkspaceSaved,
)

__all__ = [
    # Project schemas
    "ProjectFormat",
    "ProjectLocation",
    "ProjectSave",
    "ProjectSaved",
    "ProjectSummary",
    "RenameEntity",
    "RenameOutcome",
    "SchemaDiffApply",
    # Workspace schemas
    "WorkspaceLocation",
    "SkippedReferenceResponse",
    "WorkspaceLoaded",
    "WorkspaceSave",
    "WorkspaceSaved",
]
