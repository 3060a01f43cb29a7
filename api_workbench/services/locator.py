"""
Locating and renaming entities anywhere in a project tree.

The search is depth-first in tree order (interfaces, then folders, then
test suites) and stops at the first entity of the requested kind whose
identity matches. Folders, requests, suites, cases and steps match by id
only; the project, interfaces and operations match by id when they have
one and by current name otherwise.

Rewrites are path-copying: only the objects from the root to the matched
entity are reallocated, every other subtree is shared with the input tree,
so ``old.folders[1] is new.folders[1]`` holds for untouched siblings.

Request copies embedded in test step configs are payload, not tree nodes,
and are never matched.
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional

from pydantic import BaseModel

from ..models import (
    STABLE_ID_KINDS,
    EntityKind,
    Folder,
    Interface,
    Operation,
    Project,
    Request,
    TestCase,
    TestStep,
    TestSuite,
)
from .identity import IdentityKey

# Child list attributes per node type, in search order
_CHILD_FIELDS: dict[type, tuple[str, ...]] = {
    Project: ("interfaces", "folders", "test_suites"),
    Interface: ("operations",),
    Operation: ("requests",),
    Folder: ("requests", "folders"),
    TestSuite: ("test_cases",),
    TestCase: ("steps",),
}

_KIND_OF: dict[type, EntityKind] = {
    Project: EntityKind.PROJECT,
    Interface: EntityKind.INTERFACE,
    Operation: EntityKind.OPERATION,
    Request: EntityKind.REQUEST,
    Folder: EntityKind.FOLDER,
    TestSuite: EntityKind.TEST_SUITE,
    TestCase: EntityKind.TEST_CASE,
    TestStep: EntityKind.TEST_STEP,
}

TreePath = tuple[tuple[str, int], ...]


@dataclass(frozen=True)
class Location:
    """Where an entity sits: the (attribute, index) steps from the root."""
    entity: Any
    path: TreePath
    matched_by_id: bool


@dataclass(frozen=True)
class RenameResult:
    """
    Outcome of a rename.

    ``project`` is the input tree itself when nothing matched.
    ``matched_by_id`` is False for a name-tier match, which callers should
    treat as potentially ambiguous.
    """
    project: Project
    found: bool
    matched_by_id: bool = False


def walk(node: BaseModel, path: TreePath = ()) -> Iterator[tuple[BaseModel, TreePath]]:
    """Yield every node of the tree depth-first with its path."""
    yield node, path
    for field in _CHILD_FIELDS.get(type(node), ()):
        for index, child in enumerate(getattr(node, field)):
            yield from walk(child, (*path, (field, index)))


def locate(tree: Project, target: str, kind: EntityKind) -> Optional[Location]:
    """Find the first entity of ``kind`` identified by ``target``."""
    kind = EntityKind(kind)
    id_only = kind in STABLE_ID_KINDS
    for node, path in walk(tree):
        if _KIND_OF.get(type(node)) is not kind:
            continue
        matched = IdentityKey.of(node).matches(target, id_only=id_only)
        if matched is not None:
            return Location(entity=node, path=path, matched_by_id=matched)
    return None


def replace_at(tree: BaseModel, path: TreePath, update: Callable[[Any], Any]) -> Any:
    """
    Return a copy of ``tree`` where the node at ``path`` is ``update(node)``.

    Only nodes along ``path`` are copied (shallow ``model_copy``); the
    lists along the path are new, their other items are the same objects.
    """
    if not path:
        return update(tree)
    field, index = path[0]
    children = list(getattr(tree, field))
    children[index] = replace_at(children[index], path[1:], update)
    return tree.model_copy(update={field: children})


def rename(tree: Project, target: str, kind: EntityKind, new_name: str) -> RenameResult:
    """
    Rename the first entity of ``kind`` identified by ``target``.

    Ids are never touched; only ``name`` changes.
    """
    location = locate(tree, target, kind)
    if location is None:
        return RenameResult(project=tree, found=False)
    renamed = replace_at(tree, location.path, lambda node: node.model_copy(update={"name": new_name}))
    return RenameResult(project=renamed, found=True, matched_by_id=location.matched_by_id)
