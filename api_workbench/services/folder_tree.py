"""
Folder tree service for writing and reading nested request folders.

Provides functions for:
- Writing a request container (operation or folder) as file pairs
- Reading a request container back
- Writing a recursive folder tree as nested directories
- Reading a recursive folder tree back
"""

from pathlib import Path
from typing import Sequence

from ..models import Folder, Request
from . import codec
from .reconciler import (
    list_child_directories,
    read_json_object,
    read_request_files,
    reconcile_directories,
    reconcile_request_files,
)

# Metadata document of a folder directory
FOLDER_FILE = "folder.json"


def write_requests(container: Path, requests: Sequence[Request], reserved: Sequence[str] = ()) -> None:
    """Reconcile the request file pairs of one container."""
    reconcile_request_files(container, requests, codec.encode_request, reserved=reserved)


def read_requests(
    container: Path,
    path_parts: tuple[str, ...],
    reserved: Sequence[str] = (),
) -> list[Request]:
    """
    Read the request file pairs of one container, in saved order.

    A pair missing its metadata still yields a request named after the
    file; a pair missing its body gets an empty payload.
    """
    entries = []
    for base, meta, body in read_request_files(container, reserved=reserved):
        request = codec.decode_request(meta, body, base, path_parts)
        entries.append((codec.sort_key(meta, base), request))
    entries.sort(key=lambda item: item[0])
    return [request for _, request in entries]


def write_folder_tree(container: Path, folders: Sequence[Folder]) -> None:
    """
    Reconcile ``folders`` into ``container`` and recurse.

    Each folder directory holds ``folder.json``, its requests as file pairs
    and one subdirectory per child folder.
    """
    placements = reconcile_directories(container, folders, FOLDER_FILE, codec.encode_folder)
    for folder_dir, folder in placements:
        write_requests(folder_dir, folder.requests, reserved=("folder",))
        write_folder_tree(folder_dir, folder.folders)


def read_folder_tree(container: Path, path_parts: tuple[str, ...]) -> list[Folder]:
    """Read every folder directory under ``container`` recursively."""
    entries = []
    for folder_dir in list_child_directories(container):
        segment = folder_dir.name
        meta = read_json_object(folder_dir / FOLDER_FILE)
        folder = codec.decode_folder(meta, segment, path_parts)
        child_parts = (*path_parts, segment)
        folder.requests = read_requests(folder_dir, child_parts, reserved=("folder",))
        folder.folders = read_folder_tree(folder_dir, child_parts)
        entries.append((codec.sort_key(meta, segment), folder))
    entries.sort(key=lambda item: item[0])
    return [folder for _, folder in entries]
