"""
Pydantic schemas for the project endpoints.

Defines the request bodies and responses of the collaborator-facing
save/load/rename/schema-diff contract.
"""

from typing import Literal

from pydantic import BaseModel

from ..models import EntityKind, Project, SchemaDiff

ProjectFormat = Literal["folder", "xml"]


class ProjectLocation(BaseModel):
    """Schema identifying a project by where it lives."""
    location: str


class ProjectSave(BaseModel):
    """
    Schema for saving a project tree.

    When ``location`` is omitted the project's own location is used.
    """
    project: Project
    location: str | None = None


class ProjectSaved(BaseModel):
    """Schema for the result of a save."""
    name: str
    location: str
    format: ProjectFormat


class ProjectSummary(BaseModel):
    """Schema for one entry of the loaded-projects listing."""
    id: str | None
    name: str
    location: str | None


class RenameEntity(BaseModel):
    """Schema for renaming an entity of a loaded project."""
    location: str
    target_id: str
    kind: EntityKind
    new_name: str
    save: bool = False


class RenameOutcome(BaseModel):
    """Schema for the result of a rename."""
    project: Project
    found: bool
    matched_by_id: bool


class SchemaDiffApply(BaseModel):
    """Schema for merging a schema diff into an interface of a loaded project."""
    location: str
    interface_id: str
    diff: SchemaDiff
    save: bool = False
