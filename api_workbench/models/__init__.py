"""
Models package for API Workbench.

Exports the pydantic models that make up an in-memory project tree.
"""

from .request import Assertion, Request
from .collection import Folder
from .testing import STEP_TYPES, StepConfig, TestStep, TestCase, TestSuite
from .project import Operation, Interface, Project
from .diff import ServiceOperation, SchemaDiff
from .kind import EntityKind, STABLE_ID_KINDS

__all__ = [
    "Assertion",
    "Request",
    "Folder",
    "STEP_TYPES",
    "StepConfig",
    "TestStep",
    "TestCase",
    "TestSuite",
    "Operation",
    "Interface",
    "Project",
    "ServiceOperation",
    "SchemaDiff",
    "EntityKind",
    "STABLE_ID_KINDS",
]
