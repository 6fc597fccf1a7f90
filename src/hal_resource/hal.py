from typing import Any, Dict, List, Optional

LINKS_KEY = "_links"
EMBEDDED_KEY = "_embedded"
SELF_REL = "self"


def as_list(value: Any) -> List[Any]:
    """
    HAL allows a relation to hold either a single object or an array of them.
    Example: as_list({'href': '/a'}) -> [{'href': '/a'}]
    """
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def get_link(payload: Dict[str, Any], relation: str) -> Optional[Any]:
    """
    Safely retrieves the raw `_links` entry for a relation (object or array).
    """
    if not payload or not isinstance(payload.get(LINKS_KEY), dict):
        return None
    return payload[LINKS_KEY].get(relation)


def get_link_href(payload: Dict[str, Any], relation: str) -> Optional[str]:
    """
    Extracts the 'href' of the first link object for a relation.
    Example: get_link_href(order_json, 'self') -> '/orders/123'
    """
    for link in as_list(get_link(payload, relation)):
        if isinstance(link, dict):
            href = link.get("href")
            return href if isinstance(href, str) else None
        return None
    return None


def strip_attribute_markers(value: Any) -> Any:
    """
    Drop the XML-only '@' prefix from mapping keys, recursively.
    Example: {'x': {'@href': '/a'}} -> {'x': {'href': '/a'}}
    """
    if isinstance(value, dict):
        stripped: Dict[str, Any] = {}
        for key, item in value.items():
            if isinstance(key, str) and key.startswith("@"):
                key = key[1:]
            stripped[key] = strip_attribute_markers(item)
        return stripped
    if isinstance(value, list):
        return [strip_attribute_markers(v) for v in value]
    return value


__all__ = [
    "LINKS_KEY",
    "EMBEDDED_KEY",
    "SELF_REL",
    "as_list",
    "get_link",
    "get_link_href",
    "strip_attribute_markers",
]
