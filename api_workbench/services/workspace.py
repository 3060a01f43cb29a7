"""
Workspace documents: one file listing many project references.

The document is a SoapUI workspace (``con:soapui-workspace``). Each
``con:project`` entry holds a path relative to the workspace file, either
as element text (SoapUI 5.8 style) or as a ``ref`` attribute.
"""

import logging
import os
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from .. import config
from ..exceptions import ProjectStoreError, WorkspaceError
from ..models import Project
from .legacy_store import XML_DECLARATION, children_named, con, local_name
from .locks import PathLike
from .naming import sanitize
from .reconciler import write_text
from .stores import LEGACY_SUFFIX, select_store, store_for_format

logger = logging.getLogger(__name__)


@dataclass
class SkippedReference:
    """A workspace entry that did not produce a project."""
    reference: Optional[str]
    path: Optional[str]
    reason: str


@dataclass
class WorkspaceLoadResult:
    """Projects that loaded, plus every reference that was skipped."""
    projects: list[Project] = field(default_factory=list)
    skipped: list[SkippedReference] = field(default_factory=list)


def _reference_of(entry: ET.Element) -> Optional[str]:
    text = (entry.text or "").strip()
    return text or entry.get("ref") or None


def load_workspace(location: PathLike) -> WorkspaceLoadResult:
    """
    Load every project referenced by the workspace at ``location``.

    A reference that is empty, points nowhere or fails to load is logged
    and recorded in ``skipped``; the remaining references still load.

    Raises:
        WorkspaceError: The workspace document itself is unreadable.
    """
    path = Path(location)
    try:
        root = ET.parse(path).getroot()
    except (OSError, ET.ParseError) as exc:
        raise WorkspaceError(path, str(exc)) from exc
    if local_name(root.tag) != "soapui-workspace":
        raise WorkspaceError(path, "root element soapui-workspace missing")

    workspace_dir = path.parent
    result = WorkspaceLoadResult()
    for entry in children_named(root, "project"):
        reference = _reference_of(entry)
        if reference is None:
            reason = "entry has no project path"
            logger.warning("Skipping workspace entry %r: %s", entry.attrib, reason)
            result.skipped.append(SkippedReference(None, None, reason))
            continue

        project_path = (workspace_dir / reference).resolve()
        if not project_path.exists():
            reason = "project location does not exist"
            logger.warning("Skipping project reference %s: %s", reference, reason)
            result.skipped.append(SkippedReference(reference, str(project_path), reason))
            continue

        try:
            project = select_store(project_path).load(project_path)
        except (ProjectStoreError, OSError, ValueError) as exc:
            logger.warning("Error loading project from %s: %s", project_path, exc)
            result.skipped.append(SkippedReference(reference, str(project_path), str(exc)))
            continue
        result.projects.append(project)

    logger.info("Workspace %s: %d project(s) loaded, %d skipped",
                path, len(result.projects), len(result.skipped))
    return result


def default_location(project: Project, workspace_dir: Path, format_name: str) -> Path:
    """Where a never-saved project goes when its workspace is saved."""
    base = workspace_dir / sanitize(project.name)
    if format_name == "xml":
        return base.with_name(base.name + LEGACY_SUFFIX)
    return base


def save_workspace(
    projects: Sequence[Project],
    location: PathLike,
    default_format: Optional[str] = None,
) -> list[str]:
    """
    Write the workspace document at ``location`` referencing ``projects``.

    Projects without a location are saved first, next to the workspace
    file, in ``default_format`` (``config.DEFAULT_PROJECT_FORMAT`` when
    omitted).

    Returns:
        The relative references written, in project order.
    """
    path = Path(location)
    workspace_dir = path.parent
    workspace_dir.mkdir(parents=True, exist_ok=True)
    format_name = default_format or config.DEFAULT_PROJECT_FORMAT

    references: list[str] = []
    root = ET.Element(con("soapui-workspace"))
    root.set("name", path.stem)
    root.set("soapui-version", config.SOAPUI_VERSION)
    for project in projects:
        if not project.location:
            target = default_location(project, workspace_dir, format_name)
            logger.info("Auto-saving project %r to %s", project.name, target)
            store_for_format(format_name).save(project, target)
        reference = Path(os.path.relpath(project.location, workspace_dir)).as_posix()
        entry = ET.SubElement(root, con("project"))
        entry.set("name", project.name)
        entry.text = reference
        references.append(reference)

    ET.indent(root, space="  ")
    write_text(path, XML_DECLARATION + ET.tostring(root, encoding="unicode") + "\n")
    return references
