"""
Single-document project persistence in the SoapUI 5.x project format.

Only the Interface/Operation/Request subtree has a representation in this
format. Folders, test suites and test steps are dropped on save; this is a
lossy export path kept for interchange with SoapUI, not a defect.
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

from .. import config
from ..exceptions import InvalidProjectError
from ..models import Assertion, Interface, Operation, Project, Request
from .base import ProjectStore
from .identity import REQUEST_PREFIX, synthesize_id
from .reconciler import write_text

logger = logging.getLogger(__name__)

CON_NS = "http://eviware.com/soapui/config"
DIRTY_NS = "http://github.com/Dev1/dirty-soap"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'

ET.register_namespace("con", CON_NS)
ET.register_namespace("dirty", DIRTY_NS)

# Assertion configuration keys and their SoapUI element names
_ASSERTION_CONFIG = (
    ("token", "token"),
    ("ignoreCase", "ignoreCase"),
    ("sla", "sla"),
    ("xpath", "path"),
    ("expectedContent", "content"),
)


def con(tag: str) -> str:
    return f"{{{CON_NS}}}{tag}"


def dirty(tag: str) -> str:
    return f"{{{DIRTY_NS}}}{tag}"


def local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def children_named(element: ET.Element, name: str) -> list[ET.Element]:
    """Child elements whose local name is ``name``, in any namespace."""
    return [child for child in element if local_name(child.tag) == name]


def child_named(element: ET.Element, name: str) -> Optional[ET.Element]:
    found = children_named(element, name)
    return found[0] if found else None


def _set(element: ET.Element, key: str, value: Optional[str]) -> None:
    if value is not None:
        element.set(key, value)


def _bool_text(value) -> str:
    return "true" if value in (True, "true", "True") else "false"


class LegacyDocumentStore(ProjectStore):
    """SoapUI-compatible XML project document."""

    format_name = "xml"

    # -- save ---------------------------------------------------------------

    def _save(self, project: Project, path: Path) -> None:
        if project.folders or project.test_suites:
            logger.info(
                "Project %r: %d folder(s) and %d test suite(s) have no representation "
                "in the SoapUI format and are not written to %s",
                project.name, len(project.folders), len(project.test_suites), path,
            )
        root = self.build_document(project)
        ET.indent(root, space="  ")
        path.parent.mkdir(parents=True, exist_ok=True)
        write_text(path, XML_DECLARATION + ET.tostring(root, encoding="unicode") + "\n")

    def build_document(self, project: Project) -> ET.Element:
        root = ET.Element(con("soapui-project"))
        _set(root, "id", project.id)
        root.set("name", project.name)
        root.set("soapui-version", config.SOAPUI_VERSION)
        if project.description:
            ET.SubElement(root, con("description")).text = project.description

        for interface in project.interfaces:
            iface_el = ET.SubElement(root, con("interface"))
            _set(iface_el, "id", interface.id)
            iface_el.set("name", interface.name)
            iface_el.set("type", interface.type or "wsdl")
            _set(iface_el, "bindingName", interface.binding_name)
            _set(iface_el, "soapVersion", interface.protocol_version)
            _set(iface_el, "definition", interface.definition_source)

            for operation in interface.operations:
                op_el = ET.SubElement(iface_el, con("operation"))
                _set(op_el, "id", operation.id)
                op_el.set("isOneWay", "false")
                op_el.set("action", operation.action or "")
                op_el.set("name", operation.name)
                op_el.set("bindingOperationName", operation.name)
                op_el.set("type", "Request-Response")
                for request in operation.requests:
                    self._build_call(op_el, request)
        return root

    def _build_call(self, op_el: ET.Element, request: Request) -> None:
        call_el = ET.SubElement(op_el, con("call"))
        _set(call_el, "id", request.id)
        call_el.set("name", request.name)
        if request.endpoint is not None:
            ET.SubElement(call_el, con("endpoint")).text = request.endpoint

        request_el = ET.SubElement(call_el, con("request"))
        request_el.set("mediaType", request.content_type or "text/xml")
        request_el.set("method", request.method or "POST")
        request_el.text = request.body

        for assertion in request.assertions:
            assertion_el = ET.SubElement(call_el, con("assertion"))
            assertion_el.set("type", assertion.type)
            assertion_el.set("name", assertion.name or assertion.type)
            _set(assertion_el, "id", assertion.id)
            config_el = ET.SubElement(assertion_el, con("configuration"))
            for key, element_name in _ASSERTION_CONFIG:
                value = assertion.configuration.get(key)
                if value is None:
                    continue
                text = _bool_text(value) if key == "ignoreCase" else str(value)
                ET.SubElement(config_el, element_name).text = text

        for key, value in request.headers.items():
            header_el = ET.SubElement(call_el, dirty("headers"))
            header_el.set("key", key)
            header_el.set("value", value)

        ET.SubElement(call_el, dirty("requestContent")).text = request.body

    # -- load ---------------------------------------------------------------

    def _load(self, path: Path) -> Project:
        try:
            tree = ET.parse(path)
        except ET.ParseError as exc:
            raise InvalidProjectError(path, "SoapUI project XML", f"unparsable ({exc})") from exc

        root = tree.getroot()
        if local_name(root.tag) != "soapui-project":
            logger.warning("Root element of %s is %r, not soapui-project", path, root.tag)
            raise InvalidProjectError(path, "soapui-project root element", "missing")

        name = root.get("name") or ""
        if not name or "/" in name or "\\" in name:
            fallback = path.stem
            logger.info("Project name %r looks like a path; using %r", name, fallback)
            name = fallback

        description_el = child_named(root, "description")
        project = Project(
            id=root.get("id") or None,
            name=name,
            description=description_el.text if description_el is not None else None,
        )
        project.interfaces = [
            self._parse_interface(iface_el) for iface_el in children_named(root, "interface")
        ]
        return project

    def _parse_interface(self, iface_el: ET.Element) -> Interface:
        interface = Interface(
            id=iface_el.get("id") or None,
            name=iface_el.get("name") or "",
            type=iface_el.get("type") or "wsdl",
            binding_name=iface_el.get("bindingName"),
            protocol_version=iface_el.get("soapVersion"),
            definition_source=iface_el.get("definition"),
        )
        for op_el in children_named(iface_el, "operation"):
            operation = Operation(
                id=op_el.get("id") or None,
                name=op_el.get("name") or "",
                action=op_el.get("action") or "",
            )
            operation.requests = [
                self._parse_call(call_el, (interface.name, operation.name, str(index)))
                for index, call_el in enumerate(children_named(op_el, "call"))
            ]
            interface.operations.append(operation)
        return interface

    def _parse_call(self, call_el: ET.Element, position: tuple[str, ...]) -> Request:
        request_el = child_named(call_el, "request")
        endpoint_el = child_named(call_el, "endpoint")

        content_el = child_named(call_el, "requestContent")
        if content_el is not None and content_el.text:
            body = content_el.text
        else:
            body = request_el.text if request_el is not None and request_el.text else ""
        body = body.replace("\\r", "").replace("\r", "")

        headers = {
            header_el.get("key"): header_el.get("value") or ""
            for header_el in children_named(call_el, "headers")
            if header_el.get("key")
        }

        return Request(
            id=call_el.get("id") or synthesize_id(REQUEST_PREFIX, *position),
            name=call_el.get("name") or "",
            body=body,
            endpoint=endpoint_el.text if endpoint_el is not None else None,
            method=request_el.get("method") if request_el is not None else None,
            content_type=(
                request_el.get("mediaType") if request_el is not None else None
            ) or "application/soap+xml",
            headers=headers,
            assertions=[self._parse_assertion(el) for el in children_named(call_el, "assertion")],
        )

    def _parse_assertion(self, assertion_el: ET.Element) -> Assertion:
        configuration = {}
        config_el = child_named(assertion_el, "configuration")
        if config_el is not None:
            for key, element_name in _ASSERTION_CONFIG:
                value_el = child_named(config_el, element_name)
                if value_el is None:
                    continue
                if key == "ignoreCase":
                    configuration[key] = (value_el.text or "").strip() == "true"
                else:
                    configuration[key] = value_el.text or ""
        return Assertion(
            type=assertion_el.get("type") or "",
            name=assertion_el.get("name"),
            id=assertion_el.get("id"),
            configuration=configuration,
        )
