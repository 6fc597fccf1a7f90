"""application/hal+xml rendering and parsing."""

from __future__ import annotations

import logging
import re
import time
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional
from xml.etree import ElementTree as ET

from .config import DEFAULT_CONFIG, CodecConfig
from .document import Document
from .errors import HalCycleError, HalParseError, HalStructureError
from .observability import log_event

CONTENT_TYPE = "application/hal+xml"
XML_DECLARATION = '<?xml version="1.0"?>'

LINK_TAG = "link"
RESOURCE_TAG = "resource"
ATTRIBUTE_MARKER = "@"
VALUE_KEY = "value"

# letter or underscore, then word chars, dots, hyphens
XML_NAME_RE = re.compile(r"[^\W\d][\w.\-]*")
RESERVED_DATA_KEYS = frozenset({LINK_TAG, RESOURCE_TAG, "@href", "@rel"})
RESERVED_LINK_ATTRIBUTES = frozenset({"rel", "href", "title"})

log = logging.getLogger("hal_resource.xml_codec")


def _check_name(name: Any, kind: str) -> str:
    if not isinstance(name, str) or not XML_NAME_RE.fullmatch(name):
        raise HalStructureError(f"{kind} {name!r} is not a valid XML name")
    return name


def _to_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


# --- Rendering -------------------------------------------------------------- #


def render_xml(
    document: Document, pretty: bool = False, *, config: Optional[CodecConfig] = None
) -> str:
    """
    Serialize a Document to HAL+XML text.
    - Root element carries `href`; links, then data, then embedded resources.
    - Raises HalCycleError if a document embeds itself (directly or not).
    - Raises HalStructureError for names that are not XML names or that
      clash with link, resource, href or rel markup.
    """
    config = config or DEFAULT_CONFIG
    start = time.perf_counter()

    root = ET.Element(config.xml_root_tag)
    _fill_resource(root, document, config, frozenset(), 0)

    if pretty:
        ET.indent(root, space=config.xml_indent)
    text = ET.tostring(root, encoding="unicode")
    if config.xml_declaration:
        text = XML_DECLARATION + ("\n" if pretty else "") + text

    log_event(
        "hal_render",
        logger=log,
        codec="xml",
        uri=document.uri,
        pretty=pretty,
        status="ok",
        duration_ms=int((time.perf_counter() - start) * 1000),
    )
    return text


def _fill_resource(
    element: ET.Element,
    document: Document,
    config: CodecConfig,
    path: FrozenSet[int],
    depth: int,
) -> None:
    if id(document) in path:
        raise HalCycleError(f"Cyclic embedding detected at {document.uri!r}")
    if depth > config.max_depth:
        raise HalCycleError(
            f"Embedding deeper than max_depth={config.max_depth} at {document.uri!r}"
        )
    path = path | {id(document)}

    if document.uri is not None:
        element.set("href", document.uri)

    for rel, links in document.links.items():
        for link in links:
            child = ET.SubElement(element, LINK_TAG)
            child.set("rel", rel)
            child.set("href", link.uri)
            if link.title is not None:
                child.set("title", link.title)
            for name, value in link.attributes.items():
                if name in RESERVED_LINK_ATTRIBUTES:
                    continue
                child.set(_check_name(name, "Link attribute"), _to_text(value))

    clashes = RESERVED_DATA_KEYS.intersection(document.data)
    if clashes:
        raise HalStructureError(
            f"Data keys {sorted(clashes)} clash with HAL+XML markup at {document.uri!r}"
        )
    _data_to_xml(element, document.data)

    for rel, resources in document.resources.items():
        for resource in resources:
            child = ET.SubElement(element, RESOURCE_TAG)
            child.set("rel", rel)
            _fill_resource(child, resource, config, path, depth + 1)


def _data_to_xml(element: ET.Element, data: Mapping[str, Any]) -> None:
    for key, value in data.items():
        if key.startswith(ATTRIBUTE_MARKER):
            element.set(_check_name(key[1:], "Attribute"), _to_text(value))
        elif isinstance(value, list):
            for item in value:
                _value_to_xml(element, key, item)
        else:
            _value_to_xml(element, key, value)


def _value_to_xml(parent: ET.Element, key: str, value: Any) -> None:
    child = ET.SubElement(parent, _check_name(key, "Element"))
    if isinstance(value, dict):
        rest = dict(value)
        text = rest.get(VALUE_KEY)
        if VALUE_KEY in rest and not isinstance(text, (dict, list)):
            rest.pop(VALUE_KEY)
            child.text = _to_text(text)
        _data_to_xml(child, rest)
    elif isinstance(value, list):
        # nested sequence: repeat the parent's tag inside it
        for item in value:
            _value_to_xml(child, key, item)
    elif value is not None:
        child.text = _to_text(value)


# --- Parsing ---------------------------------------------------------------- #


def parse_xml(text: str, *, config: Optional[CodecConfig] = None) -> Document:
    """
    Build a Document from HAL+XML text.
    - Raises HalParseError if the text is not well-formed XML.
    - Raises HalStructureError for a `link` without rel/href or a
      `resource` without rel.
    """
    config = config or DEFAULT_CONFIG
    start = time.perf_counter()

    try:
        try:
            root = ET.fromstring(text)
        except (ET.ParseError, TypeError) as exc:
            raise HalParseError(f"Expected HAL+XML text: {exc}") from exc

        document = _element_to_document(root, config, 0)
    except (HalParseError, HalStructureError) as exc:
        log_event(
            "hal_parse",
            logger=log,
            codec="xml",
            status="error",
            error_type=type(exc).__name__,
            duration_ms=int((time.perf_counter() - start) * 1000),
        )
        raise

    log_event(
        "hal_parse",
        logger=log,
        codec="xml",
        uri=document.uri,
        status="ok",
        duration_ms=int((time.perf_counter() - start) * 1000),
    )
    return document


def _parse_bool(raw: str) -> Any:
    lowered = raw.strip().lower()
    if lowered in {"true", "1"}:
        return True
    if lowered in {"false", "0"}:
        return False
    return raw


def _element_to_document(
    element: ET.Element, config: CodecConfig, depth: int
) -> Document:
    if depth > config.max_depth:
        raise HalStructureError(f"Embedding deeper than max_depth={config.max_depth}")

    attrs = dict(element.attrib)
    uri = attrs.pop("href", None)
    if depth > 0:
        attrs.pop("rel", None)

    data: Dict[str, Any] = {ATTRIBUTE_MARKER + k: v for k, v in attrs.items()}
    data.update(
        _children_to_data(
            c for c in element if c.tag not in (LINK_TAG, RESOURCE_TAG)
        )
    )
    document = Document(uri, data)

    for child in element.findall(LINK_TAG):
        link_attrs = dict(child.attrib)
        rel = link_attrs.pop("rel", None)
        href = link_attrs.pop("href", None)
        if rel is None or href is None:
            raise HalStructureError("`link` element requires rel and href attributes")
        title = link_attrs.pop("title", None)
        if "templated" in link_attrs:
            link_attrs["templated"] = _parse_bool(link_attrs["templated"])
        document.add_link(rel, href, title, link_attrs)

    for child in element.findall(RESOURCE_TAG):
        rel = child.get("rel")
        if rel is None:
            raise HalStructureError("Embedded `resource` element requires a rel attribute")
        document.add_resource(rel, _element_to_document(child, config, depth + 1))

    return document


def _children_to_data(children: Iterable[ET.Element]) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    for child in children:
        value = _element_to_value(child)
        if child.tag not in data:
            data[child.tag] = value
        elif isinstance(data[child.tag], list):
            data[child.tag].append(value)
        else:
            data[child.tag] = [data[child.tag], value]
    return data


def _element_to_value(element: ET.Element) -> Any:
    if not element.attrib and len(element) == 0:
        return element.text or ""

    value: Dict[str, Any] = {
        ATTRIBUTE_MARKER + k: v for k, v in element.attrib.items()
    }
    if element.text and element.text.strip():
        value[VALUE_KEY] = element.text
    value.update(_children_to_data(element))
    return value


__all__ = ["render_xml", "parse_xml", "CONTENT_TYPE"]
