"""
Project API routes.

Exposes the collaborator contract of the persistence engine: load, save,
rename and schema-diff apply, all against projects held in the registry.
"""

from fastapi import APIRouter, Depends, Query, status

from ..exceptions import BadRequestError, ErrorResponse, ResourceNotFoundError
from ..models import Project
from ..schemas.project import (
    ProjectLocation,
    ProjectSave,
    ProjectSaved,
    ProjectSummary,
    RenameEntity,
    RenameOutcome,
    SchemaDiffApply,
)
from ..services.locator import rename
from ..services.registry import ProjectRegistry, get_registry
from ..services.schema_sync import apply_schema_diff
from ..services.stores import select_store


router = APIRouter(
    prefix="/api/projects",
    tags=["projects"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid project"},
        404: {"model": ErrorResponse, "description": "Not found"},
    },
)


@router.get("", response_model=list[ProjectSummary])
def list_projects(registry: ProjectRegistry = Depends(get_registry)):
    """List every project currently held in the registry."""
    return [
        ProjectSummary(id=project.id, name=project.name, location=project.location)
        for project in registry
    ]


@router.post("/load", response_model=Project)
def load_project(body: ProjectLocation, registry: ProjectRegistry = Depends(get_registry)):
    """
    Load a project from a directory or a legacy XML document.

    The loaded tree replaces any registry entry for the same location.
    """
    return registry.load(body.location)


@router.post("/save", response_model=ProjectSaved)
def save_project(body: ProjectSave, registry: ProjectRegistry = Depends(get_registry)):
    """
    Save a project tree.

    The format follows the location: a directory (or a new path without
    an .xml suffix) is saved as a folder project, a file as legacy XML.
    """
    location = body.location or body.project.location
    if not location:
        raise BadRequestError("A location is required for a project that was never saved")
    store = select_store(location)
    store.save(body.project, location)
    registry.put(body.project, location)
    return ProjectSaved(name=body.project.name, location=location, format=store.format_name)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def evict_project(
    location: str = Query(..., description="Location the project was loaded from"),
    registry: ProjectRegistry = Depends(get_registry),
):
    """Drop a project from the registry. Nothing on disk is touched."""
    if not registry.evict(location):
        raise ResourceNotFoundError("Project", location)
    return None


@router.post("/rename", response_model=RenameOutcome)
def rename_entity(body: RenameEntity, registry: ProjectRegistry = Depends(get_registry)):
    """
    Rename an entity of a loaded project by id (or by name where the
    entity has no id). ``matched_by_id`` is False for a name match.
    """
    project = registry.require(body.location)
    result = rename(project, body.target_id, body.kind, body.new_name)
    if not result.found:
        raise ResourceNotFoundError(body.kind.value, body.target_id)

    renamed = result.project
    renamed.dirty = True
    if body.save:
        registry.save(renamed, body.location)
    else:
        registry.put(renamed, body.location)
    return RenameOutcome(project=renamed, found=True, matched_by_id=result.matched_by_id)


@router.post("/schema-diff", response_model=Project)
def apply_diff(body: SchemaDiffApply, registry: ProjectRegistry = Depends(get_registry)):
    """Merge a schema diff into one interface of a loaded project."""
    project = registry.require(body.location)
    updated = apply_schema_diff(project, body.interface_id, body.diff)
    updated.dirty = True
    if body.save:
        registry.save(updated, body.location)
    else:
        registry.put(updated, body.location)
    return updated
