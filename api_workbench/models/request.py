"""
Request model for saved, executable invocations.

A Request lives either under an Operation (schema-derived) or under a
Folder (freeform), never both.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class Assertion(BaseModel):
    """
    A check run against a response.

    Attributes:
        type: Assertion kind, e.g. "Simple Contains", "XPath Match", "HTTP Status"
        name: Display name
        id: Stable identifier
        description: Free text
        configuration: Type-specific settings (token, ignoreCase, sla, xpath, ...)
    """
    type: str
    name: Optional[str] = None
    id: Optional[str] = None
    description: Optional[str] = None
    configuration: dict[str, Any] = {}


class Request(BaseModel):
    """
    A saved request.

    Attributes:
        id: Stable identifier, never changed by rename
        name: Display name
        body: Raw payload text (XML, JSON, GraphQL query, ...)
        endpoint: Target URL
        method: HTTP method
        content_type: Media type of the body
        headers: Key-value pairs for HTTP headers
        assertions: Checks run against the response
        dirty: Unsaved-changes flag, never persisted
        request_type: "soap", "rest" or "graphql"
        body_type: Body content type hint
        extractors: Response value extractors
        rest_config: REST-specific settings (query params, path params, auth)
        graphql_config: GraphQL variables and operation name
        ws_security: WS-Security settings
        attachments: SOAP attachments
    """
    id: Optional[str] = None
    name: str
    body: str = ""
    endpoint: Optional[str] = None
    method: Optional[str] = None
    content_type: Optional[str] = None
    headers: dict[str, str] = {}
    assertions: list[Assertion] = []
    dirty: bool = Field(default=False, exclude=True)

    request_type: Optional[str] = None
    body_type: Optional[str] = None
    extractors: list[dict[str, Any]] = []
    rest_config: Optional[dict[str, Any]] = None
    graphql_config: Optional[dict[str, Any]] = None
    ws_security: Optional[dict[str, Any]] = None
    attachments: list[dict[str, Any]] = []
