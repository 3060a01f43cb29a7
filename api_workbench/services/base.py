"""
The ProjectStore capability shared by both persistence formats.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ..models import Folder, Project
from .locks import LOCATION_LOCKS, LocationLocks, PathLike

logger = logging.getLogger(__name__)


def _clear_folder(folder: Folder) -> None:
    for request in folder.requests:
        request.dirty = False
    for child in folder.folders:
        _clear_folder(child)


def mark_clean(project: Project) -> None:
    """Clear every dirty flag in the tree, step request copies included."""
    project.dirty = False
    for interface in project.interfaces:
        for operation in interface.operations:
            for request in operation.requests:
                request.dirty = False
    for folder in project.folders:
        _clear_folder(folder)
    for suite in project.test_suites:
        for case in suite.test_cases:
            for step in case.steps:
                if step.config.request is not None:
                    step.config.request.dirty = False


class ProjectStore(ABC):
    """
    Saves and loads project trees at a location.

    Subclasses implement ``_save`` and ``_load``; the public methods hold
    the location lock, then record the location on the tree and clear its
    dirty flags once a save has fully succeeded.
    """

    format_name = ""

    def __init__(self, locks: Optional[LocationLocks] = None):
        self.locks = locks if locks is not None else LOCATION_LOCKS

    def save(self, project: Project, location: PathLike) -> Path:
        path = Path(location)
        logger.debug("Saving project %r as %s to %s", project.name, self.format_name, path)
        with self.locks.hold(path):
            self._save(project, path)
        project.location = str(path)
        mark_clean(project)
        logger.info("Project %r saved to %s", project.name, path)
        return path

    def load(self, location: PathLike) -> Project:
        path = Path(location)
        logger.debug("Loading %s project from %s", self.format_name, path)
        with self.locks.hold(path):
            project = self._load(path)
        project.location = str(path)
        project.dirty = False
        return project

    @abstractmethod
    def _save(self, project: Project, path: Path) -> None:
        ...

    @abstractmethod
    def _load(self, path: Path) -> Project:
        ...
