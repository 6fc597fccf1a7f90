from __future__ import annotations

import copy
from typing import Any, Dict, List, Mapping, Optional

from .config import CodecConfig
from .models import Link

CURIE_REL = "curie"
CURIE_PLACEHOLDER = "{rel}"


class Document:
    """
    A HAL resource: a data payload plus links and embedded resources.

    `@`-prefixed data keys render as XML attributes on the parent element
    and lose the marker in JSON, i.e. {'x': {'@href': '/a'}} yields
    <x href="/a"/> in XML and {"x": {"href": "/a"}} in JSON. A `value` key
    inside a nested mapping becomes the element text in XML only.

    Links and embedded resources are ordered multimaps: relation name to a
    list kept in insertion order. A relation key never holds an empty list.
    """

    def __init__(
        self, uri: Optional[str] = None, data: Optional[Mapping[str, Any]] = None
    ):
        self.uri = uri
        self.data: Dict[str, Any] = copy.deepcopy(dict(data)) if data else {}
        self.links: Dict[str, List[Link]] = {}
        self.resources: Dict[str, List[Document]] = {}

    # --- Mutation ---------------------------------------------------------- #

    def add_link(
        self,
        rel: str,
        uri: str,
        title: Optional[str] = None,
        attributes: Optional[Mapping[str, Any]] = None,
    ) -> "Document":
        link = Link(uri=uri, title=title, attributes=dict(attributes or {}))
        self.links.setdefault(rel, []).append(link)
        return self

    def add_curie(self, name: str, uri_template: str) -> "Document":
        """
        Register a CURIE template used to abbreviate custom link relations.
        Example: doc.add_curie('acme', 'http://docs.acme.com/rels/{rel}')
                 doc.add_link('acme:widgets', '/widgets')
        """
        return self.add_link(
            CURIE_REL, uri_template, None, {"name": name, "templated": True}
        )

    def add_resource(self, rel: str, resource: "Document") -> "Document":
        self.resources.setdefault(rel, []).append(resource)
        return self

    add_embedded_resource = add_resource

    def set_data(self, data: Mapping[str, Any]) -> "Document":
        self.data = copy.deepcopy(dict(data))
        return self

    # --- Query ------------------------------------------------------------- #

    def get_uri(self) -> Optional[str]:
        return self.uri

    def get_data(self) -> Dict[str, Any]:
        return self.data

    def get_links(self) -> Dict[str, List[Link]]:
        return self.links

    def get_resources(self) -> Dict[str, List["Document"]]:
        return self.resources

    def get_resource(self, rel: str) -> Optional[List["Document"]]:
        return self.resources.get(rel)

    def get_link(self, rel: str) -> Optional[List[Link]]:
        """
        Links for a relation, or None when the relation is unknown.

        A full relation URI is also resolved through registered CURIEs:
        with curie 'acme' -> 'http://x/rels/{rel}', asking for
        'http://x/rels/widget' returns the links stored under 'acme:widget'.
        """
        if rel in self.links:
            return self.links[rel]

        for curie in self.links.get(CURIE_REL, []):
            name = curie.attributes.get("name")
            if name is None or CURIE_PLACEHOLDER not in curie.uri:
                continue
            prefix = curie.uri.split(CURIE_PLACEHOLDER, 1)[0]
            if not rel.startswith(prefix):
                continue
            expanded = f"{name}:{rel[len(prefix):]}"
            if expanded in self.links:
                return self.links[expanded]

        return None

    # --- Conversion -------------------------------------------------------- #

    def to_json(self, pretty: bool = False, *, config: Optional[CodecConfig] = None) -> str:
        from .json_codec import render_json

        return render_json(self, pretty, config=config)

    def to_xml(self, pretty: bool = False, *, config: Optional[CodecConfig] = None) -> str:
        from .xml_codec import render_xml

        return render_xml(self, pretty, config=config)

    @classmethod
    def from_json(cls, text: str, *, config: Optional[CodecConfig] = None) -> "Document":
        from .json_codec import parse_json

        return parse_json(text, config=config)

    @classmethod
    def from_xml(cls, text: str, *, config: Optional[CodecConfig] = None) -> "Document":
        from .xml_codec import parse_xml

        return parse_xml(text, config=config)

    # --- Dunder ------------------------------------------------------------ #

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return (
            self.uri == other.uri
            and self.data == other.data
            and list(self.links.items()) == list(other.links.items())
            and list(self.resources.items()) == list(other.resources.items())
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Document(uri={self.uri!r}, links={list(self.links)!r}, "
            f"resources={list(self.resources)!r})"
        )


__all__ = ["Document", "CURIE_REL", "CURIE_PLACEHOLDER"]
