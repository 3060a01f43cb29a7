"""
Registry of loaded projects, keyed by canonical location.

An explicit object handed to whoever needs project lookup, in place of a
process-wide map. Entries enter through ``load``/``save``/``put`` and leave
through ``evict``.
"""

import logging
import threading
from typing import Iterator, Optional

from ..exceptions import EntityNotFoundError, ProjectStoreError
from ..models import EntityKind, Project
from .locks import PathLike, canonical_path
from .stores import load_project, save_project

logger = logging.getLogger(__name__)


class ProjectRegistry:
    """In-memory map from project location to its loaded tree."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._projects: dict[str, Project] = {}

    @staticmethod
    def key(location: PathLike) -> str:
        return canonical_path(location)

    def __len__(self) -> int:
        with self._lock:
            return len(self._projects)

    def __iter__(self) -> Iterator[Project]:
        with self._lock:
            return iter(list(self._projects.values()))

    def __contains__(self, location: PathLike) -> bool:
        with self._lock:
            return self.key(location) in self._projects

    def put(self, project: Project, location: Optional[PathLike] = None) -> Project:
        """Register ``project`` under ``location`` (defaults to its own)."""
        location = location or project.location
        if not location:
            raise ProjectStoreError(f"Project {project.name!r} has no location to register under")
        with self._lock:
            self._projects[self.key(location)] = project
        return project

    def get(self, location: PathLike) -> Optional[Project]:
        with self._lock:
            return self._projects.get(self.key(location))

    def require(self, location: PathLike) -> Project:
        project = self.get(location)
        if project is None:
            raise EntityNotFoundError(EntityKind.PROJECT.value, str(location))
        return project

    def load(self, location: PathLike) -> Project:
        """Load the project at ``location`` and register it, replacing any entry."""
        project = load_project(location)
        return self.put(project, location)

    def save(self, project: Project, location: Optional[PathLike] = None) -> Project:
        """
        Save ``project`` at ``location`` (or its current location) and
        register it there. A project saved to a new location is removed
        from its old entry.
        """
        target = location or project.location
        if not target:
            raise ProjectStoreError(f"Project {project.name!r} has no location to save to")
        previous = project.location
        save_project(project, target)
        if previous and self.key(previous) != self.key(target):
            self.evict(previous)
        return self.put(project, target)

    def evict(self, location: PathLike) -> bool:
        with self._lock:
            removed = self._projects.pop(self.key(location), None)
        if removed is not None:
            logger.debug("Evicted project %r (%s)", removed.name, location)
        return removed is not None

    def clear(self) -> None:
        with self._lock:
            self._projects.clear()


# Process registry served to the HTTP layer
_registry = ProjectRegistry()


def get_registry() -> ProjectRegistry:
    """
    Dependency function for FastAPI to get the project registry.

    Usage:
        @app.get("/items")
        def get_items(registry: ProjectRegistry = Depends(get_registry)):
            ...
    """
    return _registry
