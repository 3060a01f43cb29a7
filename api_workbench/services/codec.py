"""
Entity codec: converts tree entities to and from their on-disk documents.

Every entity is stored as a JSON metadata document with camelCase keys.
Requests additionally have a separate plain-text body artifact so that
payloads stay diff-friendly.

Decoding never raises for child entities: a missing or malformed document
yields an entity with a synthesized id and a name taken from its path
segment. Only the project's own properties document is mandatory.
"""

import logging
from typing import Any, Optional

from pydantic import BaseModel, ValidationError

from .. import config
from ..exceptions import InvalidProjectError
from ..models import (
    Assertion,
    Folder,
    Interface,
    Operation,
    STEP_TYPES,
    Project,
    Request,
    StepConfig,
    TestCase,
    TestStep,
    TestSuite,
)
from .identity import (
    CASE_PREFIX,
    FOLDER_PREFIX,
    REQUEST_PREFIX,
    STEP_PREFIX,
    SUITE_PREFIX,
    synthesize_id,
)

logger = logging.getLogger(__name__)

SORT_ORDER_KEY = "sortOrder"

# (attribute, document key) pairs, in document order
_INTERFACE_FIELDS = (
    ("id", "id"),
    ("name", "name"),
    ("type", "type"),
    ("binding_name", "bindingName"),
    ("protocol_version", "soapVersion"),
    ("definition_source", "definition"),
)

_OPERATION_FIELDS = (
    ("id", "id"),
    ("name", "name"),
    ("action", "action"),
    ("input", "input"),
    ("target_namespace", "targetNamespace"),
    ("original_endpoint", "originalEndpoint"),
)

_REQUEST_FIELDS = (
    ("id", "id"),
    ("name", "name"),
    ("endpoint", "endpoint"),
    ("method", "method"),
    ("content_type", "contentType"),
    ("headers", "headers"),
    ("assertions", "assertions"),
    ("request_type", "requestType"),
    ("body_type", "bodyType"),
    ("rest_config", "restConfig"),
    ("graphql_config", "graphqlConfig"),
    ("extractors", "extractors"),
    ("ws_security", "wsSecurity"),
    ("attachments", "attachments"),
)

_FOLDER_FIELDS = (
    ("id", "id"),
    ("name", "name"),
    ("expanded", "expanded"),
)

_STEP_CONFIG_FIELDS = (
    ("request_id", "requestId"),
    ("delay_ms", "delayMs"),
    ("source_step_id", "sourceStepId"),
    ("source_property", "sourceProperty"),
    ("source_path", "sourcePath"),
    ("target_step_id", "targetStepId"),
    ("target_property", "targetProperty"),
    ("target_path", "targetPath"),
    ("script_name", "scriptName"),
    ("script_content", "scriptContent"),
)

# Key of the inline body inside an embedded request document
_INLINE_BODY_KEY = "request"


# ---------------------------------------------------------------------------
# Generic helpers
# ---------------------------------------------------------------------------

def _encode_fields(entity: BaseModel, fields: tuple, order: Optional[int] = None) -> dict:
    doc: dict[str, Any] = {}
    for attr, key in fields:
        value = getattr(entity, attr)
        if value is None:
            continue
        if attr == "assertions":
            value = [_encode_assertion(a) for a in value]
        doc[key] = value
    if order is not None:
        doc[SORT_ORDER_KEY] = order
    return doc


def _decode_fields(doc: dict, fields: tuple) -> dict:
    values: dict[str, Any] = {}
    for attr, key in fields:
        if key in doc and doc[key] is not None:
            values[attr] = doc[key]
    return values


def _validate(model: type[BaseModel], values: dict, fallback: dict, where: str):
    """Build ``model`` from ``values``; on bad types keep only ``fallback``."""
    try:
        return model.model_validate(values)
    except ValidationError as exc:
        logger.warning("Malformed %s metadata at %s, using defaults: %s",
                       model.__name__, where, exc.error_count())
        return model.model_validate(fallback)


def _name_of(doc: dict, segment: str) -> str:
    name = doc.get("name")
    return name if isinstance(name, str) and name else segment


def sort_key(doc: Optional[dict], segment: str) -> tuple:
    """
    Ordering key for a child read back from disk.

    Children with a recorded ``sortOrder`` come first, in that order; the
    rest follow sorted by segment.
    """
    if doc is not None:
        order = doc.get(SORT_ORDER_KEY)
        if isinstance(order, int) and not isinstance(order, bool):
            return (0, order, segment)
    return (1, 0, segment)


# ---------------------------------------------------------------------------
# Project
# ---------------------------------------------------------------------------

def encode_project(project: Project) -> dict:
    doc: dict[str, Any] = {"name": project.name}
    if project.description is not None:
        doc["description"] = project.description
    if project.id is not None:
        doc["id"] = project.id
    doc["format"] = config.PROJECT_FORMAT_TAG
    return doc


def decode_project(doc: Any, path: Any, default_name: str) -> Project:
    """Decode the root properties document; anything but a JSON object is fatal."""
    if not isinstance(doc, dict):
        raise InvalidProjectError(path, config.PROPERTIES_FILE, "is not a JSON object")
    description = doc.get("description")
    project_id = doc.get("id")
    return Project(
        name=_name_of(doc, default_name),
        description=description if isinstance(description, str) else None,
        id=project_id if isinstance(project_id, str) and project_id else None,
    )


# ---------------------------------------------------------------------------
# Interfaces and operations
# ---------------------------------------------------------------------------

def encode_interface(interface: Interface, order: int) -> dict:
    return _encode_fields(interface, _INTERFACE_FIELDS, order)


def decode_interface(doc: Optional[dict], segment: str) -> Interface:
    doc = doc or {}
    values = _decode_fields(doc, _INTERFACE_FIELDS)
    values["name"] = _name_of(doc, segment)
    return _validate(Interface, values, {"name": values["name"]}, segment)


def encode_operation(operation: Operation, order: int) -> dict:
    return _encode_fields(operation, _OPERATION_FIELDS, order)


def decode_operation(doc: Optional[dict], segment: str) -> Operation:
    doc = doc or {}
    values = _decode_fields(doc, _OPERATION_FIELDS)
    values["name"] = _name_of(doc, segment)
    return _validate(Operation, values, {"name": values["name"]}, segment)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

def _encode_assertion(assertion: Assertion) -> dict:
    doc: dict[str, Any] = {"type": assertion.type}
    for key in ("name", "id", "description"):
        value = getattr(assertion, key)
        if value is not None:
            doc[key] = value
    doc["configuration"] = dict(assertion.configuration)
    return doc


def encode_request(request: Request, order: Optional[int] = None) -> tuple[dict, str]:
    """Return the metadata document and the body payload of a request."""
    return _encode_fields(request, _REQUEST_FIELDS, order), request.body or ""


def decode_request(
    meta: Optional[dict],
    body: Optional[str],
    segment: str,
    path_parts: tuple[str, ...] = (),
) -> Request:
    """
    Rebuild a request from its metadata document and body payload.

    Either half may be missing: no metadata gives a synthesized id and the
    file base name; no body gives an empty payload.
    """
    meta = meta or {}
    values = _decode_fields(meta, _REQUEST_FIELDS)
    values["name"] = _name_of(meta, segment)
    if not isinstance(values.get("id"), str) or not values["id"]:
        values["id"] = synthesize_id(REQUEST_PREFIX, *path_parts, segment)
    values["body"] = body or ""
    fallback = {"id": values["id"], "name": values["name"], "body": values["body"]}
    return _validate(Request, values, fallback, "/".join((*path_parts, segment)))


def encode_request_document(request: Request) -> dict:
    """Single-document form of a request, body inline."""
    doc, body = encode_request(request)
    doc[_INLINE_BODY_KEY] = body
    return doc


def decode_request_document(doc: Any, path_parts: tuple[str, ...]) -> Request:
    if not isinstance(doc, dict):
        doc = {}
    body = doc.get(_INLINE_BODY_KEY)
    segment = path_parts[-1] if path_parts else "request"
    return decode_request(doc, body if isinstance(body, str) else "", segment, path_parts[:-1])


# ---------------------------------------------------------------------------
# Folders
# ---------------------------------------------------------------------------

def encode_folder(folder: Folder, order: int) -> dict:
    return _encode_fields(folder, _FOLDER_FIELDS, order)


def decode_folder(doc: Optional[dict], segment: str, path_parts: tuple[str, ...]) -> Folder:
    doc = doc or {}
    values = _decode_fields(doc, _FOLDER_FIELDS)
    values["name"] = _name_of(doc, segment)
    if not isinstance(values.get("id"), str) or not values["id"]:
        values["id"] = synthesize_id(FOLDER_PREFIX, *path_parts, segment)
    return _validate(Folder, values, {"id": values["id"], "name": values["name"]}, segment)


def decode_folder_document(doc: Any, path_parts: tuple[str, ...]) -> Folder:
    """Decode a whole nested folder tree stored as one JSON document."""
    if not isinstance(doc, dict):
        doc = {}
    segment = path_parts[-1] if path_parts else "folder"
    folder = decode_folder(doc, segment, path_parts[:-1])
    requests = doc.get("requests") if isinstance(doc.get("requests"), list) else []
    children = doc.get("folders") if isinstance(doc.get("folders"), list) else []
    folder.requests = [
        decode_request_document(item, (*path_parts, f"request{index}"))
        for index, item in enumerate(requests)
    ]
    folder.folders = [
        decode_folder_document(item, (*path_parts, f"folder{index}"))
        for index, item in enumerate(children)
    ]
    return folder


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

def encode_suite(suite: TestSuite, order: int) -> dict:
    return {"id": suite.id, "name": suite.name, SORT_ORDER_KEY: order}


def decode_suite(doc: Optional[dict], segment: str, path_parts: tuple[str, ...]) -> TestSuite:
    doc = doc or {}
    suite_id = doc.get("id")
    if not isinstance(suite_id, str) or not suite_id:
        suite_id = synthesize_id(SUITE_PREFIX, *path_parts, segment)
    return TestSuite(id=suite_id, name=_name_of(doc, segment))


def encode_case(case: TestCase, order: int) -> dict:
    return {"id": case.id, "name": case.name, SORT_ORDER_KEY: order}


def decode_case(doc: Optional[dict], segment: str, path_parts: tuple[str, ...]) -> TestCase:
    doc = doc or {}
    case_id = doc.get("id")
    if not isinstance(case_id, str) or not case_id:
        case_id = synthesize_id(CASE_PREFIX, *path_parts, segment)
    return TestCase(id=case_id, name=_name_of(doc, segment))


def encode_step(step: TestStep) -> dict:
    step_config = step.config
    config_doc: dict[str, Any] = dict(step_config.extra)
    if step_config.request is not None:
        config_doc["request"] = encode_request_document(step_config.request)
    for attr, key in _STEP_CONFIG_FIELDS:
        value = getattr(step_config, attr)
        if value is not None:
            config_doc[key] = value
    return {"id": step.id, "name": step.name, "type": step.type, "config": config_doc}


def decode_step(
    doc: Optional[dict],
    segment: str,
    path_parts: tuple[str, ...],
    file_stem: Optional[str] = None,
) -> TestStep:
    """
    Decode one step file. Unreadable files become an empty step of type
    "unknown" so the case keeps its length and order.

    ``file_stem`` is the numbered file name without suffix; synthesized ids
    hash it rather than ``segment`` so same-named steps stay distinct.
    """
    step_id = None
    step_type = "unknown"
    step_config = StepConfig()
    if doc:
        step_id = doc.get("id") if isinstance(doc.get("id"), str) else None
        step_type = doc.get("type") if isinstance(doc.get("type"), str) else "unknown"
        if step_type not in STEP_TYPES:
            logger.debug("Step %s has unrecognized type %r; kept as-is", segment, step_type)
        config_doc = doc.get("config") if isinstance(doc.get("config"), dict) else {}
        step_config = _decode_step_config(config_doc, (*path_parts, segment))
    return TestStep(
        id=step_id or synthesize_id(STEP_PREFIX, *path_parts, file_stem or segment),
        name=_name_of(doc or {}, segment),
        type=step_type,
        config=step_config,
    )


def _decode_step_config(doc: dict, path_parts: tuple[str, ...]) -> StepConfig:
    known = {key for _, key in _STEP_CONFIG_FIELDS} | {"request"}
    values = _decode_fields(doc, _STEP_CONFIG_FIELDS)
    values["extra"] = {k: v for k, v in doc.items() if k not in known}
    if "request" in doc and doc["request"] is not None:
        values["request"] = decode_request_document(doc["request"], (*path_parts, "request"))
    fallback = {"extra": values["extra"]}
    if "request" in values:
        fallback["request"] = values["request"]
    return _validate(StepConfig, values, fallback, "/".join(path_parts))
