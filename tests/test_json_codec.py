import json
from pathlib import Path

import pytest

from hal_resource import (
    CodecConfig,
    Document,
    HalCycleError,
    HalParseError,
    HalStructureError,
    parse_json,
    render_json,
)


def load_fixture(name: str) -> str:
    return (Path(__file__).parent / "fixtures" / name).read_text(encoding="utf-8")


def build_order() -> Document:
    doc = Document("/orders/523", {"currency": "USD", "total": 10.2})
    doc.add_curie("acme", "http://example.com/rels/{rel}")
    doc.add_link("warehouse", "/warehouse/56", "Main warehouse")
    doc.add_link("acme:items", "/orders/523/items/1")
    doc.add_link("acme:items", "/orders/523/items/2", attributes={"hreflang": "en"})
    doc.add_resource("customer", Document("/customers/7809", {"name": "Ann"}))
    return doc


def test_render_compact_layout():
    doc = Document("/a", {"x": 1}).add_link("next", "/b", "Next")

    assert doc.to_json() == (
        '{"x":1,"_links":{"self":{"href":"/a"},"next":{"href":"/b","title":"Next"}}}'
    )


def test_single_link_is_object_and_many_is_array():
    payload = json.loads(build_order().to_json())
    links = payload["_links"]

    assert links["self"] == {"href": "/orders/523"}
    assert links["warehouse"] == {"href": "/warehouse/56", "title": "Main warehouse"}
    assert links["curie"] == {
        "href": "http://example.com/rels/{rel}",
        "name": "acme",
        "templated": True,
    }
    assert links["acme:items"] == [
        {"href": "/orders/523/items/1"},
        {"href": "/orders/523/items/2", "hreflang": "en"},
    ]


def test_embedded_renders_as_array_with_self():
    payload = json.loads(build_order().to_json())

    assert payload["_embedded"] == {
        "customer": [{"name": "Ann", "_links": {"self": {"href": "/customers/7809"}}}]
    }


def test_no_uri_no_links_omits_links():
    assert json.loads(Document(None, {"x": 1}).to_json()) == {"x": 1}


def test_attribute_marker_is_stripped():
    doc = Document("/a", {"@id": "7", "image": {"@href": "/i.png", "value": "Logo"}})
    payload = json.loads(doc.to_json())

    assert payload["id"] == "7"
    assert payload["image"] == {"href": "/i.png", "value": "Logo"}
    assert "@id" in doc.get_data()


def test_pretty_differs_only_in_whitespace():
    doc = build_order()
    pretty = doc.to_json(pretty=True)
    compact = doc.to_json(pretty=False)

    assert "\n    " in pretty
    assert "\n" not in compact
    assert json.loads(pretty) == json.loads(compact)
    assert "".join(pretty.split()) == "".join(compact.split())


def test_pretty_indent_follows_config():
    text = render_json(Document("/a"), True, config=CodecConfig(json_indent=2))
    assert text.splitlines()[1] == '  "_links": {'


def test_round_trip():
    doc = build_order()
    doc.get_resource("customer")[0].add_resource("address", Document("/addr/1", {"city": "Oslo"}))

    assert parse_json(doc.to_json()) == doc
    assert Document.from_json(doc.to_json(pretty=True)) == doc


def test_parse_fixture():
    doc = parse_json(load_fixture("order.json"))

    assert doc.get_uri() == "/orders/523"
    assert doc.get_data() == {"currency": "USD", "status": "shipped", "total": 10.2}
    assert list(doc.get_links()) == ["curie", "warehouse", "invoice", "acme:items"]
    assert doc.get_link("warehouse")[0].title == "Main warehouse"
    assert [link.uri for link in doc.get_link("http://example.com/rels/items")] == [
        "/orders/523/items/1",
        "/orders/523/items/2",
    ]

    (customer,) = doc.get_resource("customer")
    assert customer.get_uri() == "/customers/7809"
    assert customer.get_data() == {"name": "Ann Example"}


def test_parse_single_embedded_object():
    text = json.dumps(
        {
            "_links": {"self": {"href": "/a"}},
            "_embedded": {"child": {"_links": {"self": {"href": "/c"}}}},
        }
    )
    doc = parse_json(text)
    assert [c.get_uri() for c in doc.get_resource("child")] == ["/c"]


def test_parse_malformed_json_raises_parse_error():
    with pytest.raises(HalParseError) as exc:
        parse_json("{not json")
    assert isinstance(exc.value.__cause__, json.JSONDecodeError)

    with pytest.raises(HalParseError):
        parse_json(None)


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"x": 1},
        {"_links": {}},
        {"_links": {"self": {"title": "no href"}}},
        {"_links": [{"href": "/a"}]},
        {"_links": {"self": {"href": "/a"}, "next": {"title": "no href"}}},
        {"_links": {"self": {"href": "/a"}, "next": ["/b"]}},
        {"_links": {"self": {"href": "/a"}}, "_embedded": []},
        {"_links": {"self": {"href": "/a"}}, "_embedded": {"c": [{"x": 1}]}},
        {"_links": {"self": {"href": "/a"}}, "_embedded": {"c": ["nope"]}},
    ],
)
def test_parse_structure_errors(payload):
    with pytest.raises(HalStructureError):
        parse_json(json.dumps(payload))


def test_cycle_detection():
    parent = Document("/a")
    child = Document("/b")
    parent.add_resource("child", child)
    child.add_resource("parent", parent)

    with pytest.raises(HalCycleError):
        parent.to_json()


def test_shared_child_is_not_a_cycle():
    shared = Document("/s")
    doc = Document("/a").add_resource("x", shared).add_resource("y", shared)
    payload = json.loads(doc.to_json())
    assert payload["_embedded"]["x"] == payload["_embedded"]["y"]


def test_max_depth():
    root = Document("/0")
    node = root
    for i in range(1, 4):
        child = Document(f"/{i}")
        node.add_resource("child", child)
        node = child

    render_json(root, config=CodecConfig(max_depth=3))
    with pytest.raises(HalCycleError):
        render_json(root, config=CodecConfig(max_depth=2))
    with pytest.raises(HalStructureError):
        parse_json(root.to_json(), config=CodecConfig(max_depth=2))


def test_link_attribute_cannot_replace_href():
    doc = Document("/a").add_link("next", "/b", None, {"href": "/other", "rel": "x"})
    payload = json.loads(doc.to_json())

    assert payload["_links"]["next"] == {"href": "/b", "rel": "x"}
    assert parse_json(doc.to_json()).get_link("next")[0].uri == "/b"
