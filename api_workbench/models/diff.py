"""
Schema diff models produced when a service definition is re-fetched.
"""

from typing import Any, Optional

from pydantic import BaseModel


class ServiceOperation(BaseModel):
    """Schema-side description of one operation."""
    name: str
    action: str = ""
    input: Any = None
    target_namespace: Optional[str] = None
    original_endpoint: Optional[str] = None
    description: Optional[str] = None


class SchemaDiff(BaseModel):
    """
    Changes between the stored Interface and a freshly parsed definition.

    Attributes:
        added_operations: Operations present only in the new definition
        removed_operation_names: Operations gone from the new definition
        changed_operations: Operations whose schema attributes changed
        new_definition_source: Replacement definition URL, if it moved
    """
    added_operations: list[ServiceOperation] = []
    removed_operation_names: list[str] = []
    changed_operations: list[ServiceOperation] = []
    new_definition_source: Optional[str] = None
