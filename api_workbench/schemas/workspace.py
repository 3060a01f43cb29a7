"""
Pydantic schemas for the workspace endpoints.
"""

from pydantic import BaseModel, ConfigDict

from ..models import Project
from .project import ProjectFormat


class WorkspaceLocation(BaseModel):
    """Schema identifying a workspace document."""
    path: str


class SkippedReferenceResponse(BaseModel):
    """Schema for a workspace reference that did not load."""
    reference: str | None
    path: str | None
    reason: str

    model_config = ConfigDict(from_attributes=True)


class WorkspaceLoaded(BaseModel):
    """Schema for the result of loading a workspace."""
    projects: list[Project]
    skipped: list[SkippedReferenceResponse] = []


class WorkspaceSave(BaseModel):
    """
    Schema for saving a workspace.

    ``locations`` name projects already held in the registry; ``projects``
    are full trees, saved next to the workspace when they have no location.
    """
    path: str
    locations: list[str] = []
    projects: list[Project] = []
    default_format: ProjectFormat | None = None


class WorkspaceSaved(BaseModel):
    """Schema for the result of saving a workspace."""
    path: str
    references: list[str]
