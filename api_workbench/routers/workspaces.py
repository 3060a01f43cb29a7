"""
Workspace API routes.

Loads and saves workspace documents; every project that loads is also
registered so the project routes can address it by location.
"""

from fastapi import APIRouter, Depends

from ..exceptions import ErrorResponse
from ..schemas.workspace import (
    SkippedReferenceResponse,
    WorkspaceLoaded,
    WorkspaceLocation,
    WorkspaceSave,
    WorkspaceSaved,
)
from ..services.registry import ProjectRegistry, get_registry
from ..services.workspace import load_workspace, save_workspace


router = APIRouter(
    prefix="/api/workspaces",
    tags=["workspaces"],
    responses={400: {"model": ErrorResponse, "description": "Invalid workspace"}},
)


@router.post("/load", response_model=WorkspaceLoaded)
def load(body: WorkspaceLocation, registry: ProjectRegistry = Depends(get_registry)):
    """
    Load every project referenced by a workspace document.

    References that fail are reported in ``skipped`` instead of failing
    the whole request.
    """
    result = load_workspace(body.path)
    for project in result.projects:
        registry.put(project)
    return WorkspaceLoaded(
        projects=result.projects,
        skipped=[SkippedReferenceResponse.model_validate(entry) for entry in result.skipped],
    )


@router.post("/save", response_model=WorkspaceSaved)
def save(body: WorkspaceSave, registry: ProjectRegistry = Depends(get_registry)):
    """
    Write a workspace document referencing registry projects (by
    location) and submitted project trees.
    """
    projects = [registry.require(location) for location in body.locations]
    projects.extend(body.projects)
    references = save_workspace(projects, body.path, default_format=body.default_format)
    for project in body.projects:
        registry.put(project)
    return WorkspaceSaved(path=body.path, references=references)
