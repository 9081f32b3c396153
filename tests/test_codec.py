import pytest
from lxml import etree

from newsitem.models.types import ValidationError
from newsitem.utils import codec, tree

IM = "http://www.infomaker.se/newsml/1.0"
XLINK = "http://www.w3.org/1999/xlink"


@pytest.fixture
def link_shape():
    return {
        "@title": "Jane Doe",
        "@uuid": "11111111-1111-1111-1111-111111111111",
        "@rel": "author",
        "@type": "x-im/author",
    }


def test_flat_attribute_shape_round_trips(link_shape):
    element = codec.encode(link_shape, IM, "link")

    assert element.tag == f"{{{IM}}}link"
    assert codec.decode(element) == link_shape


def test_decode_nested_data(sample_root):
    place = tree.find_one(
        sample_root,
        ("itemMeta", "links", "link"),
        tree.attr_equals("uuid", "place-1")
    )

    assert codec.decode(place) == {
        "@rel": "subject",
        "@title": "Malmo",
        "@type": "x-im/place",
        "@uuid": "place-1",
        "data": {"geometry": "POINT(13.0 55.6)"},
    }


def test_decode_collapses_repeated_children():
    element = etree.fromstring("<data><uuid>a</uuid><uuid>b</uuid><name>x</name></data>")
    assert codec.decode(element) == {"uuid": ["a", "b"], "name": "x"}


def test_decode_keeps_text_of_element_with_attributes():
    element = etree.fromstring('<data><uuid title="Skane">polygon-1</uuid></data>')
    assert codec.decode(element) == {"uuid": {"@title": "Skane", "keyValue": "polygon-1"}}


def test_decode_xml_namespace_attribute():
    element = etree.fromstring('<idf xml:lang="sv-SE" dir="ltr"/>')
    assert codec.decode(element) == {"@xml:lang": "sv-SE", "@dir": "ltr"}


def test_namespaced_attribute_keeps_prefix():
    element = etree.fromstring(
        f'<link xmlns="{IM}" xmlns:xlink="{XLINK}" xlink:href="im://image/1" rel="image"/>'
    )

    decoded = codec.decode(element)
    assert decoded == {"@xlink:href": "im://image/1", "@rel": "image"}

    encoded = codec.encode(decoded, IM, "link", nsmap={"xlink": XLINK})
    assert encoded.get(f"{{{XLINK}}}href") == "im://image/1"
    assert codec.decode(encoded) == decoded


def test_populate_rejects_undeclared_attribute_prefix():
    with pytest.raises(ValidationError):
        codec.encode({"@xlink:href": "im://image/1"}, IM, "link")


def test_encode_skips_none_and_writes_booleans():
    element = codec.encode(
        {"@type": "imext:haspublishedversion", "@value": True, "@uri": None},
        root_name="property"
    )

    assert dict(element.attrib) == {"type": "imext:haspublishedversion", "value": "true"}


def test_encode_nested_and_lists_in_namespace():
    element = codec.encode(
        {"@id": "o1", "data": {"score": "2", "tags": ["a", "b"]}},
        IM,
        "object"
    )

    data = tree.find_child(element, "data")
    assert data.tag == f"{{{IM}}}data"
    assert [child.text for child in data if tree.local_name(child) == "tags"] == ["a", "b"]
    assert codec.decode(element) == {"@id": "o1", "data": {"score": "2", "tags": ["a", "b"]}}


def test_normalize_strips_top_level_markers_only():
    obj = {"@uuid": "u1", "data": {"@title": "inner"}}
    assert codec.normalize(obj) == {"uuid": "u1", "data": {"@title": "inner"}}


def test_mark_attributes():
    obj = {"uuid": "u1", "title": "T", "data": {"x": "1"}}
    assert codec.mark_attributes(obj, ("uuid", "title")) == {
        "@uuid": "u1",
        "@title": "T",
        "data": {"x": "1"},
    }


def test_replace_child_never_merges(sample_root):
    place = tree.find_one(
        sample_root,
        ("itemMeta", "links", "link"),
        tree.attr_equals("uuid", "place-1")
    )

    codec.replace_child(place, "data", {"email": "jane@example.com"})
    assert codec.decode(place)["data"] == {"email": "jane@example.com"}

    assert codec.replace_child(place, "data", {}) is None
    assert tree.find_child(place, "data") is None
