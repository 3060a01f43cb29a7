"""
Directory-per-entity project persistence.

Layout under the project directory::

    properties.json
    interfaces/<iface>/interface.json
    interfaces/<iface>/<operation>/operation.json
    interfaces/<iface>/<operation>/<request>.json + <request>.xml
    folders/<folder>/folder.json
    folders/<folder>/<request>.json + <request>.xml
    folders/<folder>/<child folder>/...
    tests/<suite>/suite.json
    tests/<suite>/<case>/case.json
    tests/<suite>/<case>/01_<step>.json, 02_<step>.json, ...

Each container level is reconciled independently (see ``reconciler``).
Only ``properties.json`` is mandatory on load; everything below it falls
back to synthesized defaults.
"""

import logging
from pathlib import Path

from .. import config
from ..exceptions import InvalidProjectError
from ..migrations.flat_folder_files import migrate as migrate_flat_folders
from ..models import Interface, Project, TestSuite
from . import codec
from .base import ProjectStore
from .folder_tree import read_folder_tree, read_requests, write_folder_tree, write_requests
from .reconciler import (
    list_child_directories,
    list_ordered_files,
    read_json,
    read_json_object,
    reconcile_directories,
    reconcile_ordered_files,
    step_segment,
    write_json,
)

logger = logging.getLogger(__name__)

INTERFACES_DIR = "interfaces"
FOLDERS_DIR = "folders"
TESTS_DIR = "tests"

INTERFACE_FILE = "interface.json"
OPERATION_FILE = "operation.json"
SUITE_FILE = "suite.json"
CASE_FILE = "case.json"


def is_folder_project(path: Path) -> bool:
    return path.is_dir() and (path / config.PROPERTIES_FILE).is_file()


class FolderFormatStore(ProjectStore):
    """Git-friendly project store: one directory per container entity."""

    format_name = "folder"

    # -- save ---------------------------------------------------------------

    def _save(self, project: Project, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)
        write_json(path / config.PROPERTIES_FILE, codec.encode_project(project))
        self._save_interfaces(path / INTERFACES_DIR, project.interfaces)
        write_folder_tree(path / FOLDERS_DIR, project.folders)
        self._save_tests(path / TESTS_DIR, project.test_suites)

    def _save_interfaces(self, container: Path, interfaces: list[Interface]) -> None:
        for iface_dir, interface in reconcile_directories(
            container, interfaces, INTERFACE_FILE, codec.encode_interface
        ):
            for op_dir, operation in reconcile_directories(
                iface_dir, interface.operations, OPERATION_FILE, codec.encode_operation
            ):
                write_requests(op_dir, operation.requests, reserved=("operation",))

    def _save_tests(self, container: Path, suites: list[TestSuite]) -> None:
        for suite_dir, suite in reconcile_directories(
            container, suites, SUITE_FILE, codec.encode_suite
        ):
            for case_dir, case in reconcile_directories(
                suite_dir, suite.test_cases, CASE_FILE, codec.encode_case
            ):
                reconcile_ordered_files(case_dir, case.steps, codec.encode_step)

    # -- load ---------------------------------------------------------------

    def _load(self, path: Path) -> Project:
        props_path = path / config.PROPERTIES_FILE
        if not props_path.is_file():
            raise InvalidProjectError(path, config.PROPERTIES_FILE, "missing")
        props = read_json(props_path)
        if props is None:
            raise InvalidProjectError(path, config.PROPERTIES_FILE, "unparsable")
        project = codec.decode_project(props, path, path.name)

        if migrate_flat_folders(path):
            logger.info("Project %r had flat folder files; migrated on load", project.name)

        project.interfaces = self._load_interfaces(path / INTERFACES_DIR)
        project.folders = read_folder_tree(path / FOLDERS_DIR, (FOLDERS_DIR,))
        project.test_suites = self._load_tests(path / TESTS_DIR)
        return project

    def _load_interfaces(self, container: Path) -> list[Interface]:
        interfaces = []
        for iface_dir in list_child_directories(container):
            meta = read_json_object(iface_dir / INTERFACE_FILE)
            if meta is None:
                logger.warning("Interface metadata missing in %s; using defaults", iface_dir)
            interface = codec.decode_interface(meta, iface_dir.name)

            operations = []
            for op_dir in list_child_directories(iface_dir):
                op_meta = read_json_object(op_dir / OPERATION_FILE)
                operation = codec.decode_operation(op_meta, op_dir.name)
                operation.requests = read_requests(
                    op_dir, (INTERFACES_DIR, iface_dir.name, op_dir.name), reserved=("operation",)
                )
                operations.append((codec.sort_key(op_meta, op_dir.name), operation))
            operations.sort(key=lambda item: item[0])
            interface.operations = [op for _, op in operations]

            interfaces.append((codec.sort_key(meta, iface_dir.name), interface))
        interfaces.sort(key=lambda item: item[0])
        return [interface for _, interface in interfaces]

    def _load_tests(self, container: Path) -> list[TestSuite]:
        suites = []
        for suite_dir in list_child_directories(container):
            suite_meta = read_json_object(suite_dir / SUITE_FILE)
            if suite_meta is None:
                logger.warning("Suite metadata missing in %s; synthesizing identity", suite_dir)
            suite = codec.decode_suite(suite_meta, suite_dir.name, (TESTS_DIR,))

            cases = []
            for case_dir in list_child_directories(suite_dir):
                case_meta = read_json_object(case_dir / CASE_FILE)
                case_parts = (TESTS_DIR, suite_dir.name)
                case = codec.decode_case(case_meta, case_dir.name, case_parts)
                step_parts = (*case_parts, case_dir.name)
                case.steps = [
                    codec.decode_step(
                        read_json_object(step_path), step_segment(step_path), step_parts, step_path.stem
                    )
                    for step_path in list_ordered_files(case_dir)
                ]
                cases.append((codec.sort_key(case_meta, case_dir.name), case))
            cases.sort(key=lambda item: item[0])
            suite.test_cases = [case for _, case in cases]

            suites.append((codec.sort_key(suite_meta, suite_dir.name), suite))
        suites.sort(key=lambda item: item[0])
        return [suite for _, suite in suites]
