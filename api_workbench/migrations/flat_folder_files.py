"""
Migration: convert flat folder files to the directory layout.

Older releases stored each top-level folder as one JSON document,
``folders/NN_<name>.json``, holding the whole nested tree with request
bodies inline. The current layout gives every folder its own directory.
This migration rewrites the flat documents into that layout and removes
them. It is idempotent: a project without flat folder files is untouched.
"""

import logging
import sys
from pathlib import Path

from api_workbench.services import codec
from api_workbench.services.folder_tree import read_folder_tree, write_folder_tree
from api_workbench.services.reconciler import list_ordered_files, read_json, step_segment

logger = logging.getLogger(__name__)

FOLDERS_DIR = "folders"


def migrate(project_dir) -> int:
    """
    Convert flat folder files under ``project_dir`` if any exist.

    Returns:
        Number of flat folder documents migrated.
    """
    folders_dir = Path(project_dir) / FOLDERS_DIR
    flat_files = list_ordered_files(folders_dir)
    if not flat_files:
        return 0

    existing = read_folder_tree(folders_dir, (FOLDERS_DIR,))
    migrated = [
        codec.decode_folder_document(read_json(path), (FOLDERS_DIR, step_segment(path)))
        for path in flat_files
    ]
    write_folder_tree(folders_dir, existing + migrated)

    for path in flat_files:
        path.unlink()

    logger.info(
        "Migrated %d flat folder file(s) in %s to the directory layout",
        len(flat_files), folders_dir,
    )
    return len(flat_files)


if __name__ == "__main__":
    for arg in sys.argv[1:]:
        migrate(arg)
