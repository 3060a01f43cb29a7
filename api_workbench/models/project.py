"""
Project tree root and the schema-derived Interface/Operation models.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from .collection import Folder
from .request import Request
from .testing import TestSuite


class Operation(BaseModel):
    """
    One invocable action of an Interface.

    ``name`` is the identity key inside its Interface. ``action``,
    ``input``, ``target_namespace`` and ``original_endpoint`` are derived
    from the service schema; ``requests`` are user-authored.
    """
    id: Optional[str] = None
    name: str
    action: str = ""
    input: Any = None
    target_namespace: Optional[str] = None
    original_endpoint: Optional[str] = None
    requests: list[Request] = []


class Interface(BaseModel):
    """
    One service/port definition.

    Attributes:
        id: Optional stable identifier
        name: Display name
        type: Classification tag ("wsdl", "rest", ...)
        binding_name: Binding the interface was generated from
        protocol_version: SOAP version or equivalent protocol tag
        definition_source: URL or path the schema was fetched from
        operations: Operations in schema order
    """
    id: Optional[str] = None
    name: str
    type: str = "wsdl"
    binding_name: Optional[str] = None
    protocol_version: Optional[str] = None
    definition_source: Optional[str] = None
    operations: list[Operation] = []


class Project(BaseModel):
    """
    Root persistence unit.

    ``location`` is where the project was last saved or loaded from and
    ``dirty`` tracks unsaved changes; neither is written to disk.
    """
    id: Optional[str] = None
    name: str
    description: Optional[str] = None
    location: Optional[str] = None
    dirty: bool = Field(default=False, exclude=True)
    interfaces: list[Interface] = []
    folders: list[Folder] = []
    test_suites: list[TestSuite] = []
