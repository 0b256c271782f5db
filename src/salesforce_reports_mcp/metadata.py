# Salesforce Reports MCP Server
# File: metadata.py
# Version: v2
"""Client for the Salesforce Metadata API (SOAP).

Implements:

- retrieve_metadata() via ``readMetadata``
- list_metadata() via ``listMetadata`` (optionally scoped to a folder)
- list_report_folders() via ``listMetadata`` on ``ReportFolder``

Responses are converted to plain dicts/lists/strings so higher layers
(MCP tools) can forward them as JSON without knowing their shape.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx
from httpx import RequestError

from .connection import SalesforceConnection
from .errors import MetadataError

logger = logging.getLogger(__name__)

SOAP_NS = "http://schemas.xmlsoap.org/soap/envelope/"
METADATA_NS = "http://soap.sforce.com/2006/04/metadata"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"

ET.register_namespace("soapenv", SOAP_NS)
ET.register_namespace("met", METADATA_NS)


# ---------------------------------------------------------------------------
# XML helpers
# ---------------------------------------------------------------------------


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _find_child(elem: Optional[ET.Element], name: str) -> Optional[ET.Element]:
    if elem is None:
        return None
    for child in elem:
        if _local_name(child.tag) == name:
            return child
    return None


def _append_value(parent: ET.Element, name: str, value: Any) -> None:
    """Append ``value`` under ``parent`` as one or more ``<met:name>`` elements."""
    if value is None:
        return
    if isinstance(value, (list, tuple)):
        for item in value:
            _append_value(parent, name, item)
        return

    elem = ET.SubElement(parent, f"{{{METADATA_NS}}}{name}")
    if isinstance(value, dict):
        for key, sub_value in value.items():
            _append_value(elem, key, sub_value)
    else:
        elem.text = str(value)


def _build_envelope(session_id: str, operation: str, params: Dict[str, Any]) -> bytes:
    envelope = ET.Element(f"{{{SOAP_NS}}}Envelope")

    header = ET.SubElement(envelope, f"{{{SOAP_NS}}}Header")
    session = ET.SubElement(header, f"{{{METADATA_NS}}}SessionHeader")
    ET.SubElement(session, f"{{{METADATA_NS}}}sessionId").text = session_id

    body = ET.SubElement(envelope, f"{{{SOAP_NS}}}Body")
    call = ET.SubElement(body, f"{{{METADATA_NS}}}{operation}")
    for name, value in params.items():
        _append_value(call, name, value)

    return ET.tostring(envelope, encoding="utf-8", xml_declaration=True)


def _element_to_value(elem: ET.Element) -> Any:
    """Convert a response element to JSON-friendly Python values.

    Leaves become strings, ``xsi:nil`` becomes None and repeated child tags
    are collected into lists.
    """
    if elem.get(f"{{{XSI_NS}}}nil") == "true":
        return None

    children = list(elem)
    if not children:
        return elem.text or ""

    out: Dict[str, Any] = {}
    for child in children:
        key = _local_name(child.tag)
        value = _element_to_value(child)
        if key not in out:
            out[key] = value
        elif isinstance(out[key], list):
            out[key].append(value)
        else:
            out[key] = [out[key], value]
    return out


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


@dataclass
class MetadataClient:
    """Wrapper around the Salesforce Metadata API for one connection."""

    connection: SalesforceConnection
    transport: Optional[httpx.AsyncBaseTransport] = None

    def __post_init__(self) -> None:
        if not self.connection.instance_url:
            raise MetadataError(
                "Salesforce connection has no instance URL. "
                "Set SALESFORCE_INSTANCE_URL or authenticate via OAuth first."
            )
        if not self.connection.access_token:
            raise MetadataError(
                "Salesforce connection has no access token. "
                "Set SALESFORCE_ACCESS_TOKEN or SALESFORCE_CLIENT_ID / "
                "SALESFORCE_CLIENT_SECRET."
            )

    async def _call(self, operation: str, params: Dict[str, Any]) -> List[Any]:
        """POST one SOAP call and return the converted ``<result>`` values."""
        url = self.connection.metadata_url
        payload = _build_envelope(self.connection.access_token, operation, params)
        headers = {
            "Content-Type": "text/xml; charset=UTF-8",
            "SOAPAction": '""',
        }

        logger.debug("Metadata API %s -> %s", operation, url)

        async with httpx.AsyncClient(
            timeout=self.connection.timeout,
            verify=self.connection.verify_tls,
            transport=self.transport,
        ) as http_client:
            try:
                response = await http_client.post(url, content=payload, headers=headers)
            except RequestError as exc:
                raise MetadataError(
                    f"Error calling Salesforce Metadata API at '{url}': {exc}"
                ) from exc

        try:
            root = ET.fromstring(response.content)
        except ET.ParseError as exc:
            status = response.status_code
            body_preview = response.text[:500]
            if status >= 400:
                raise MetadataError(
                    f"Metadata API call {operation} failed at '{url}' "
                    f"(HTTP {status}). Response snippet: {body_preview}"
                ) from exc
            raise MetadataError(
                f"Unexpected non-XML response from Metadata API call {operation}: "
                f"{body_preview}"
            ) from exc

        body = _find_child(root, "Body")
        fault = _find_child(body, "Fault")
        if fault is not None:
            code_elem = _find_child(fault, "faultcode")
            string_elem = _find_child(fault, "faultstring")
            code = (code_elem.text or "").strip() if code_elem is not None else ""
            message = (string_elem.text or "").strip() if string_elem is not None else ""
            # faultcode is usually prefixed, e.g. "sf:INVALID_SESSION_ID".
            code = code.split(":", 1)[-1]
            raise MetadataError(f"{code}: {message}" if code else message or "SOAP fault")

        if response.status_code >= 400:
            raise MetadataError(
                f"Metadata API call {operation} failed at '{url}' "
                f"(HTTP {response.status_code}). "
                f"Response snippet: {response.text[:500]}"
            )

        call_response = next(iter(body), None) if body is not None else None
        if call_response is None:
            raise MetadataError(
                f"Unexpected response from Metadata API call {operation}: empty SOAP body."
            )

        return [
            _element_to_value(child)
            for child in call_response
            if _local_name(child.tag) == "result"
        ]

    async def retrieve_metadata(self, metadata_type: str, full_name: str) -> Dict[str, Any]:
        """Read a single metadata component, e.g. a ``Report``.

        Raises MetadataError when the component does not exist.
        """
        results = await self._call(
            "readMetadata",
            {"type": metadata_type, "fullNames": [full_name]},
        )

        record: Any = None
        if results and isinstance(results[0], dict):
            record = results[0].get("records")
        if isinstance(record, list):
            record = record[0] if record else None

        if not isinstance(record, dict) or not record.get("fullName"):
            raise MetadataError(f"{metadata_type} '{full_name}' not found.")

        return record

    async def list_metadata(
        self,
        metadata_type: str,
        folder: Optional[str] = None,
    ) -> List[Optional[Dict[str, Any]]]:
        """List components of ``metadata_type``, optionally within ``folder``.

        Entries are ``FileProperties`` dicts (fullName, fileName, id,
        namespacePrefix, ...). Nil results are passed through as None.
        """
        query: Dict[str, Any] = {"type": metadata_type}
        if folder:
            query["folder"] = folder

        results = await self._call(
            "listMetadata",
            {"queries": [query], "asOfVersion": self.connection.api_version},
        )
        return [r if isinstance(r, dict) else None for r in results]

    async def list_report_folders(self) -> List[Optional[Dict[str, Any]]]:
        """List report folders visible to the connected user."""
        return await self.list_metadata("ReportFolder")
