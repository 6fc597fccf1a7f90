"""application/hal+json rendering and parsing."""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, FrozenSet, List, Optional

from pydantic import ValidationError

from . import hal
from .config import DEFAULT_CONFIG, CodecConfig
from .document import Document
from .errors import HalCycleError, HalParseError, HalStructureError
from .models import Link, LinkObject
from .observability import log_event

CONTENT_TYPE = "application/hal+json"

log = logging.getLogger("hal_resource.json_codec")


def render_json(
    document: Document, pretty: bool = False, *, config: Optional[CodecConfig] = None
) -> str:
    """
    Serialize a Document to HAL+JSON text.
    - Data members first, then `_links` (self first), then `_embedded`.
    - A relation with one link renders as an object, two or more as an array.
    - Raises HalCycleError if a document embeds itself (directly or not).
    """
    config = config or DEFAULT_CONFIG
    start = time.perf_counter()

    payload = _document_to_dict(document, config, frozenset(), 0)
    if pretty:
        text = json.dumps(
            payload, indent=config.json_indent, ensure_ascii=config.json_ensure_ascii
        )
    else:
        text = json.dumps(
            payload, separators=(",", ":"), ensure_ascii=config.json_ensure_ascii
        )

    log_event(
        "hal_render",
        logger=log,
        codec="json",
        uri=document.uri,
        pretty=pretty,
        status="ok",
        duration_ms=int((time.perf_counter() - start) * 1000),
    )
    return text


def _links_to_dict(document: Document) -> Dict[str, Any]:
    links: Dict[str, Any] = {}
    if document.uri is not None:
        links[hal.SELF_REL] = {"href": document.uri}

    for rel, items in document.links.items():
        if len(items) == 1:
            links[rel] = items[0].to_dict()
        else:
            links[rel] = [link.to_dict() for link in items]
    return links


def _document_to_dict(
    document: Document, config: CodecConfig, path: FrozenSet[int], depth: int
) -> Dict[str, Any]:
    if id(document) in path:
        raise HalCycleError(f"Cyclic embedding detected at {document.uri!r}")
    if depth > config.max_depth:
        raise HalCycleError(
            f"Embedding deeper than max_depth={config.max_depth} at {document.uri!r}"
        )
    path = path | {id(document)}

    payload: Dict[str, Any] = hal.strip_attribute_markers(document.data)

    links = _links_to_dict(document)
    if links:
        payload[hal.LINKS_KEY] = links

    if document.resources:
        payload[hal.EMBEDDED_KEY] = {
            rel: [_document_to_dict(child, config, path, depth + 1) for child in children]
            for rel, children in document.resources.items()
        }
    return payload


def parse_json(text: str, *, config: Optional[CodecConfig] = None) -> Document:
    """
    Build a Document from HAL+JSON text.
    - Raises HalParseError if the text is not valid JSON.
    - Raises HalStructureError if a resource lacks `_links.self.href`
      or a link object has no string `href`.
    """
    config = config or DEFAULT_CONFIG
    start = time.perf_counter()

    try:
        try:
            payload = json.loads(text)
        except (json.JSONDecodeError, TypeError) as exc:
            raise HalParseError(f"Expected HAL+JSON text: {exc}") from exc

        document = _dict_to_document(payload, config, 0)
    except (HalParseError, HalStructureError) as exc:
        log_event(
            "hal_parse",
            logger=log,
            codec="json",
            status="error",
            error_type=type(exc).__name__,
            duration_ms=int((time.perf_counter() - start) * 1000),
        )
        raise

    log_event(
        "hal_parse",
        logger=log,
        codec="json",
        uri=document.uri,
        status="ok",
        duration_ms=int((time.perf_counter() - start) * 1000),
    )
    return document


def _parse_links(rel: str, value: Any) -> List[Link]:
    items = hal.as_list(value)
    links: List[Link] = []
    for item in items:
        if not isinstance(item, dict):
            raise HalStructureError(
                f"Link relation {rel!r} must hold objects, got {type(item).__name__}"
            )
        try:
            links.append(LinkObject.model_validate(item).to_link())
        except ValidationError as exc:
            raise HalStructureError(f"Invalid link under {rel!r}: {exc}") from exc
    return links


def _dict_to_document(payload: Any, config: CodecConfig, depth: int) -> Document:
    if not isinstance(payload, dict):
        raise HalStructureError(
            f"Expected a HAL+JSON object, got {type(payload).__name__}"
        )
    if depth > config.max_depth:
        raise HalStructureError(f"Embedding deeper than max_depth={config.max_depth}")

    data = dict(payload)
    raw_links = data.pop(hal.LINKS_KEY, None)
    raw_embedded = data.pop(hal.EMBEDDED_KEY, None)

    if raw_links is not None and not isinstance(raw_links, dict):
        raise HalStructureError("`_links` must be an object")
    if raw_embedded is not None and not isinstance(raw_embedded, dict):
        raise HalStructureError("`_embedded` must be an object")

    uri = hal.get_link_href(payload, hal.SELF_REL)
    if uri is None:
        raise HalStructureError("Resource has no `_links.self.href`")

    document = Document(uri, data)

    for rel, value in (raw_links or {}).items():
        if rel == hal.SELF_REL:
            continue
        for link in _parse_links(rel, value):
            document.add_link(rel, link.uri, link.title, link.attributes)

    for rel, value in (raw_embedded or {}).items():
        for child in hal.as_list(value):
            document.add_resource(rel, _dict_to_document(child, config, depth + 1))

    return document


__all__ = ["render_json", "parse_json", "CONTENT_TYPE"]
