"""
Upsert-then-prune reconciliation of one container level on disk.

For each container (the operations of one interface, the requests of one
operation, the steps of one test case, ...) the in-memory children are
written first, then every on-disk entry of the kind the container manages
that was not written in this pass is deleted. Callers recurse into the
children only after the prune, so a container's prune never races with
writes into its own subtree.

Files are only rewritten when their bytes change, which keeps repeated
saves of an unchanged tree free of churn.

Precondition: the engine owns the managed directories. Files added by
hand with a managed name or extension are treated as orphans.
"""

import json
import logging
import re
import shutil
from pathlib import Path
from typing import Any, Callable, Iterable, Optional, Sequence, TypeVar

from .. import config
from .naming import allocate_segments, sanitize

logger = logging.getLogger(__name__)

T = TypeVar("T")

BODY_SUFFIX = ".xml"
META_SUFFIX = ".json"

_STEP_FILE = re.compile(r"^(\d+)_(.*)\.json$")


# ---------------------------------------------------------------------------
# File primitives
# ---------------------------------------------------------------------------

def write_text(path: Path, text: str) -> bool:
    """
    Write ``text`` to ``path`` unless it already holds exactly that text.

    Returns True when the file was written.
    """
    data = text.encode("utf-8")
    try:
        if path.read_bytes() == data:
            return False
    except FileNotFoundError:
        pass
    path.write_bytes(data)
    return True


def dump_json(doc: Any) -> str:
    return json.dumps(doc, indent=2, ensure_ascii=False) + "\n"


def write_json(path: Path, doc: Any) -> bool:
    return write_text(path, dump_json(doc))


def read_json(path: Path) -> Optional[Any]:
    """Read a JSON document; missing, undecodable or unparsable files give None."""
    try:
        data = path.read_bytes()
    except FileNotFoundError:
        return None
    try:
        return json.loads(data.decode("utf-8"))
    except ValueError as exc:
        logger.warning("Unparsable JSON at %s: %s", path, exc)
        return None


def read_json_object(path: Path) -> Optional[dict]:
    doc = read_json(path)
    if doc is not None and not isinstance(doc, dict):
        logger.warning("Expected a JSON object at %s, got %s", path, type(doc).__name__)
        return None
    return doc


def _is_hidden(name: str) -> bool:
    return name.startswith(".")


def _is_written(entry: Path, written: dict[str, Path]) -> bool:
    """
    True when ``entry`` is one of the entries written in this pass.

    Names are compared case-insensitively and confirmed with ``samefile``
    so a case-only rename on a case-insensitive filesystem is not mistaken
    for an orphan.
    """
    if entry.name in written:
        return True
    match = written.get(entry.name.casefold())
    if match is None:
        return False
    try:
        return entry.samefile(match)
    except OSError:
        return False


def _index(paths: Iterable[Path]) -> dict[str, Path]:
    index: dict[str, Path] = {}
    for path in paths:
        index[path.name] = path
        index.setdefault(path.name.casefold(), path)
    return index


# ---------------------------------------------------------------------------
# Directory-per-child containers
# ---------------------------------------------------------------------------

def reconcile_directories(
    container: Path,
    children: Sequence[T],
    metadata_file: str,
    encode: Callable[[T, int], dict],
) -> list[tuple[Path, T]]:
    """
    Bring the child directories of ``container`` in line with ``children``.

    Each child gets a directory named after its sanitized name holding
    ``metadata_file``. Directories not matching a current child are removed
    with their whole subtree.

    Returns:
        (child directory, child) pairs in order, for the caller to recurse.
    """
    container.mkdir(parents=True, exist_ok=True)
    segments = allocate_segments([child.name for child in children])

    placements: list[tuple[Path, T]] = []
    for index, (segment, child) in enumerate(zip(segments, children)):
        child_dir = container / segment
        child_dir.mkdir(exist_ok=True)
        write_json(child_dir / metadata_file, encode(child, index))
        placements.append((child_dir, child))

    written = _index(child_dir for child_dir, _ in placements)
    for entry in sorted(container.iterdir()):
        if _is_hidden(entry.name) or not entry.is_dir():
            continue
        if not _is_written(entry, written):
            logger.info("Removing orphaned directory: %s", entry)
            shutil.rmtree(entry)

    return placements


def list_child_directories(container: Path) -> list[Path]:
    """Child directories of ``container`` in name order; empty if absent."""
    if not container.is_dir():
        return []
    return sorted(
        entry for entry in container.iterdir()
        if entry.is_dir() and not _is_hidden(entry.name)
    )


# ---------------------------------------------------------------------------
# Request file pairs
# ---------------------------------------------------------------------------

def reconcile_request_files(
    container: Path,
    requests: Sequence[Any],
    encode: Callable[[Any, int], tuple[dict, str]],
    reserved: Iterable[str] = (),
) -> None:
    """
    Write each request as a ``<base>.json`` metadata file plus a
    ``<base>.xml`` body file, then delete every other pair in the
    container. ``reserved`` names the container's own metadata bases,
    which are never used for requests and never pruned.
    """
    container.mkdir(parents=True, exist_ok=True)
    reserved = tuple(reserved)
    bases = allocate_segments([request.name for request in requests], reserved=reserved)

    written_files: list[Path] = []
    for index, (base, request) in enumerate(zip(bases, requests)):
        meta, body = encode(request, index)
        meta_path = container / f"{base}{META_SUFFIX}"
        body_path = container / f"{base}{BODY_SUFFIX}"
        write_text(body_path, body)
        write_json(meta_path, meta)
        written_files.extend((meta_path, body_path))

    written = _index(written_files)
    keep = {f"{name}{META_SUFFIX}".casefold() for name in reserved}
    for entry in sorted(container.iterdir()):
        if _is_hidden(entry.name) or not entry.is_file():
            continue
        if entry.suffix.lower() not in (META_SUFFIX, BODY_SUFFIX):
            continue
        if entry.name.casefold() in keep:
            continue
        if not _is_written(entry, written):
            logger.info("Removing orphaned request file: %s", entry)
            entry.unlink()


def read_body(path: Path) -> str:
    """Request body text; bytes that are not UTF-8 are replaced, not fatal."""
    data = path.read_bytes()
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        logger.warning("Request body at %s is not UTF-8 (%s); undecodable bytes replaced", path, exc)
        return data.decode("utf-8", errors="replace")


def read_request_files(container: Path, reserved: Iterable[str] = ()) -> list[tuple[str, Optional[dict], Optional[str]]]:
    """
    Group request files by base name.

    Returns:
        (base, metadata or None, body or None) triples sorted by base.
    """
    if not container.is_dir():
        return []
    skip = {name.casefold() for name in reserved}
    grouped: dict[str, dict[str, Any]] = {}
    for entry in sorted(container.iterdir()):
        if _is_hidden(entry.name) or not entry.is_file():
            continue
        suffix = entry.suffix.lower()
        if suffix not in (META_SUFFIX, BODY_SUFFIX):
            continue
        base = entry.stem
        if base.casefold() in skip:
            continue
        slot = grouped.setdefault(base, {"meta": None, "body": None})
        if suffix == META_SUFFIX:
            slot["meta"] = read_json_object(entry)
        else:
            slot["body"] = read_body(entry)
    return [(base, slot["meta"], slot["body"]) for base, slot in sorted(grouped.items())]


# ---------------------------------------------------------------------------
# Ordered step files
# ---------------------------------------------------------------------------

def step_file_name(index: int, name: str, count: int) -> str:
    """``NN_<segment>.json`` with a prefix wide enough for ``count`` steps."""
    width = max(config.STEP_INDEX_WIDTH, len(str(count)))
    return f"{index + 1:0{width}d}_{sanitize(name)}{META_SUFFIX}"


def reconcile_ordered_files(
    container: Path,
    children: Sequence[T],
    encode: Callable[[T], dict],
) -> None:
    """
    Write ordered children as numbered files and drop every other
    numbered file in the container.

    A reorder changes every file name, so stale step files are removed
    wholesale rather than matched one by one.
    """
    container.mkdir(parents=True, exist_ok=True)
    names = [step_file_name(i, child.name, len(children)) for i, child in enumerate(children)]
    wanted = set(names)

    for entry in sorted(container.iterdir()):
        if entry.is_file() and _STEP_FILE.match(entry.name) and entry.name not in wanted:
            logger.debug("Removing step file: %s", entry)
            entry.unlink()

    for name, child in zip(names, children):
        write_json(container / name, encode(child))


def list_ordered_files(container: Path) -> list[Path]:
    """Numbered files in step order (numeric prefix, then name)."""
    if not container.is_dir():
        return []
    found = []
    for entry in container.iterdir():
        match = _STEP_FILE.match(entry.name)
        if match and entry.is_file():
            found.append((int(match.group(1)), entry.name, entry))
    return [entry for _, _, entry in sorted(found)]


def step_segment(path: Path) -> str:
    """Name part of a numbered file, without prefix and suffix."""
    match = _STEP_FILE.match(path.name)
    return match.group(2) if match else path.stem
