"""
Folder model for organizing requests.

Folders provide freeform hierarchical organization for requests,
independent of any service schema. Folders can be nested inside other
folders.
"""

from typing import Optional

from pydantic import BaseModel

from .request import Request


class Folder(BaseModel):
    """
    A freeform container.

    Attributes:
        id: Stable identifier for the folder
        name: Human-readable name for the folder
        expanded: UI tree state, persisted but not load-bearing
        folders: Child folders, in order
        requests: Requests in this folder, in order
    """
    id: Optional[str] = None
    name: str
    expanded: bool = False
    folders: list["Folder"] = []
    requests: list[Request] = []


Folder.model_rebuild()
