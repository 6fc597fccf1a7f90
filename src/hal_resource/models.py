from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Members owned by the link itself; attributes may not override them on the wire.
RESERVED_LINK_KEYS = frozenset({"href", "title"})


class Link(BaseModel):
    """
    A typed link from a resource to a related resource.

    Links are immutable: fields cannot be reassigned and `attributes` is a
    read-only mapping built from a copy of the input.
    Reserved attributes understood by HAL are `name` and `templated`.
    """

    uri: str
    title: Optional[str] = None
    attributes: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)

    model_config = ConfigDict(frozen=True)

    @field_validator("attributes", mode="after")
    @classmethod
    def _freeze_attributes(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    def get_uri(self) -> str:
        return self.uri

    def get_title(self) -> Optional[str]:
        return self.title

    def get_attributes(self) -> Dict[str, Any]:
        return dict(self.attributes)

    def to_dict(self) -> Dict[str, Any]:
        """
        Flattened HAL+JSON link object.
        Example: Link(uri='/orders/1', title='Order') -> {'href': '/orders/1', 'title': 'Order'}
        """
        item: Dict[str, Any] = {"href": self.uri}
        if self.title is not None:
            item["title"] = self.title
        for key, value in self.attributes.items():
            if key not in RESERVED_LINK_KEYS:
                item[key] = value
        return item


class LinkObject(BaseModel):
    """
    Wire-level link object as found under `_links` in HAL+JSON.
    Unknown members (name, templated, type, hreflang...) are kept as extras.
    """

    href: str
    title: Optional[str] = None

    model_config = ConfigDict(extra="allow")

    def to_link(self) -> Link:
        return Link(uri=self.href, title=self.title, attributes=dict(self.model_extra or {}))


__all__ = ["Link", "LinkObject", "RESERVED_LINK_KEYS"]
