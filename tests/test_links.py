import pytest

from newsitem.links import LinkRegistry
from newsitem.models.types import (
    ChangeAction,
    NIL_UUID,
    NotFoundError,
    Section,
    ValidationError,
)
from newsitem.utils import tree

JANE = "11111111-1111-1111-1111-111111111111"


@pytest.fixture
def links(sample_root, event_manager):
    return LinkRegistry(sample_root, event_manager)


@pytest.fixture
def empty_links(empty_root, event_manager):
    return LinkRegistry(empty_root, event_manager)


def _uuids(registry, section=Section.ITEM_META):
    return [tree.get_attr(node, "uuid") for node in registry.link_nodes(section)]


# Authors
def test_get_authors(links):
    assert links.get_authors() == [{
        "uuid": JANE,
        "title": "Jane Doe",
        "rel": "author",
        "type": "x-im/author",
    }]


def test_add_author_is_idempotent(links, recorder):
    links.add_author("editor", {"uuid": "author-2", "name": "John"})
    assert links.add_author("editor", {"uuid": "author-2", "name": "John"}) is None

    assert [author["title"] for author in links.get_authors()] == ["Jane Doe", "John"]
    assert recorder.actions == ["add"]
    assert recorder.events[0].node.uuid == "author-2"


def test_add_author_skips_uuid_used_by_any_link(links, recorder):
    assert links.add_author("editor", {"uuid": "cat-1", "name": "Not a category"}) is None
    assert recorder.events == []


def test_simple_authors_are_listed_once_per_title(links, recorder):
    links.add_simple_author("editor", "Freelancer")
    links.add_simple_author("editor", "Freelancer")
    links.add_simple_author("editor", "Guest")

    simple = [a for a in links.get_authors() if a["uuid"] == NIL_UUID]
    assert [author["title"] for author in simple] == ["Freelancer", "Guest"]
    assert len(recorder.events) == 3


def test_update_author_rebuilds_data(links, recorder):
    links.update_author_with_uuid("editor", JANE, {
        "name": "Jane Smith",
        "email": "jane@example.com",
        "phone": "123",
    })
    links.update_author_with_uuid("editor", JANE, {"name": "Jane Smith", "email": "js@example.com"})

    author = links.get_concept_by_uuid(JANE)
    assert author["title"] == "Jane Smith"
    assert author["data"] == {"email": "js@example.com"}
    assert recorder.actions == ["update", "update"]


def test_update_missing_author_raises(links, recorder):
    with pytest.raises(NotFoundError) as excinfo:
        links.update_author_with_uuid("editor", "missing", {"name": "X"})
    assert excinfo.value.key == "missing"
    assert recorder.events == []


def test_remove_author_by_uuid_and_title(links, recorder):
    links.add_author("editor", {"uuid": "author-2", "name": "John Johnson"})

    links.remove_author_by_uuid("editor", JANE)
    links.remove_author_by_title("editor", "Johnson")

    assert links.get_authors() == []
    assert recorder.actions == ["add", "delete", "delete"]
    assert recorder.events[1].data["title"] == "Jane Doe"
    assert recorder.events[2].data == "Johnson"


def test_remove_missing_author_raises(links):
    with pytest.raises(NotFoundError):
        links.remove_author_by_uuid("editor", "missing")
    with pytest.raises(NotFoundError):
        links.remove_author_by_title("editor", "Nobody")
    # cat-1 exists but is not an author
    with pytest.raises(NotFoundError):
        links.remove_author_by_uuid("editor", "cat-1")


def test_remove_author_by_empty_title_raises(links, recorder):
    with pytest.raises(NotFoundError):
        links.remove_author_by_title("editor", "")

    assert [author["uuid"] for author in links.get_authors()] == [JANE]
    assert recorder.events == []


# Tags
def test_add_tag_twice_creates_one_node_and_one_event(links, recorder):
    tag = {"uuid": "u1", "rel": "subject", "name": ["Economy"], "imType": ["x-im/topic"]}
    links.add_tag("editor", tag)
    links.add_tag("editor", tag)

    assert _uuids(links).count("u1") == 1
    assert len(recorder.events) == 1
    assert links.get_tags(["x-im/topic"]) == [{
        "title": "Economy",
        "uuid": "u1",
        "rel": "subject",
        "type": "x-im/topic",
    }]


def test_get_links_by_type_requires_list(links):
    with pytest.raises(ValidationError):
        links.get_links_by_type("x-im/category")

    found = links.get_links_by_type(["x-im/organisation", "x-im/category"])
    assert [link["uuid"] for link in found] == ["cat-1", "org-1"]
    assert links.get_links_by_type(["x-im/author"], "author")[0]["uuid"] == JANE


def test_update_tag(links, recorder):
    links.update_tag("editor", "org-1", {"name": "Sverige", "type": "x-im/place"})

    tag = links.get_concept_by_uuid("org-1")
    assert (tag["title"], tag["type"], tag["rel"]) == ("Sverige", "x-im/place", "subject")
    assert recorder.events[0].node.title == "Sverige"

    with pytest.raises(NotFoundError):
        links.update_tag("editor", "missing", {"name": "X", "type": "x-im/topic"})


def test_add_then_remove_tag(links, recorder):
    links.add_tag("editor", {"uuid": "u9", "type": "x-im/story", "name": "S"})
    links.remove_link_by_uuid("editor", "u9")

    assert links.get_tags(["x-im/story"]) == []
    with pytest.raises(NotFoundError):
        links.remove_link_by_uuid("editor", "u9")
    assert recorder.actions == ["add", "delete"]


# Generic links
def test_add_link_deduplicates_by_uuid_and_rel(links, recorder):
    link = {"uuid": "cat-1", "rel": "related", "title": "Politics", "type": "x-im/category"}

    assert links.add_link("editor", link) is not None
    assert links.add_link("editor", link) is None

    assert _uuids(links).count("cat-1") == 2
    assert recorder.actions == ["add"]


def test_add_link_with_marked_keys_and_data(links):
    links.add_link("editor", {
        "@uri": "im://article/other",
        "@rel": "related",
        "@type": "x-im/article",
        "data": {"text": "See also"},
    })

    node = links.find_by_uri("im://article/other")
    assert tree.get_attr(node, "rel") == "related"
    assert tree.get_text(tree.find_child(tree.find_child(node, "data"), "text")) == "See also"
    assert links.add_link("editor", {"uri": "im://article/other", "rel": "related"}) is None


def test_add_link_without_notify(links, recorder):
    links.add_link("editor", {"uuid": "x1", "rel": "subject", "type": "x-im/topic"}, notify=False)

    assert links.find_by_uuid("x1") is not None
    assert recorder.events == []


def test_add_link_creates_links_container(empty_links, empty_root):
    empty_links.add_content_meta_link("editor", {"uuid": "t1", "rel": "alternate", "type": "x-im/teaser"})

    container = empty_links.links_container(Section.CONTENT_META)
    assert tree.namespace_of(container) == tree.namespace_of(empty_root)
    assert _uuids(empty_links, Section.CONTENT_META) == ["t1"]


def test_update_link_rel(links, recorder):
    links.update_link_rel("editor", {"uuid": "org-1", "rel": "about", "type": "x-im/organisation"})

    assert links.get_concept_by_uuid("org-1")["rel"] == "about"
    assert recorder.events[0].entity_type == "x-im/organisation"
    with pytest.raises(NotFoundError):
        links.update_link_rel("editor", {"uuid": "missing", "rel": "about"})


def test_remove_link_by_uri_and_uuid_and_rel(links, recorder):
    links.add_link("editor", {"uri": "im://x", "rel": "related", "type": "x-im/article"})

    links.remove_link_by_uri("editor", "im://x")
    links.remove_link_by_uuid_and_rel("editor", JANE, "author")

    assert links.find_by_uri("im://x") is None
    assert links.get_authors() == []
    with pytest.raises(NotFoundError):
        links.remove_link_by_uri("editor", "im://x")
    with pytest.raises(NotFoundError):
        links.remove_link_by_uuid_and_rel("editor", "cat-1", "author")
    assert recorder.actions == ["add", "delete", "delete"]


def test_remove_all_links_by_type_reports_each_removal(links, recorder):
    links.add_link("editor", {"uuid": "org-2", "rel": "subject", "type": "x-im/organisation"})

    removed = links.remove_all_links_by_type("editor", "x-im/organisation")

    assert [info.uuid for info in removed] == ["org-1", "org-2"]
    deletes = recorder.events[1:]
    assert [event.action for event in deletes] == [ChangeAction.DELETE_ALL] * 2
    assert [event.node.uuid for event in deletes] == ["org-1", "org-2"]
    assert all(event.data == "x-im/organisation" for event in deletes)

    with pytest.raises(NotFoundError):
        links.remove_all_links_by_type("editor", "x-im/organisation")


def test_content_meta_removal_contracts(links, recorder):
    with pytest.raises(NotFoundError):
        links.remove_content_meta_link_by_type_and_rel("editor", "x-im/teaser", "missing")

    assert links.remove_content_meta_links_by_type_and_filter(
        "editor", "x-im/teaser", lambda link: link["title"] == "Nothing"
    ) == []
    assert recorder.events == []

    removed = links.remove_content_meta_links_by_type_and_filter(
        "editor", "x-im/teaser", lambda link: link["uuid"] == "teaser-2"
    )
    assert [info.uuid for info in removed] == ["teaser-2"]

    links.remove_content_meta_link_by_type_and_rel("editor", "x-im/teaser", "alternate")
    assert links.get_content_meta_link_by_type("x-im/teaser") == []
    assert recorder.actions == ["delete", "delete"]


def test_link_getters(links):
    assert links.get_link_by_type("x-im/category") == [{
        "@rel": "subject",
        "@title": "Politics",
        "@type": "x-im/category",
        "@uuid": "cat-1",
    }]
    assert links.get_link_by_type_and_rel("x-im/category", "related") == []
    assert len(links.get_content_meta_link_by_type("x-im/teaser")) == 2
    assert links.get_concept_by_uuid("missing") is None


# Locations
def test_get_locations_by_entity(links):
    assert [l["uuid"] for l in links.get_locations()] == ["place-1", "polygon-1"]
    assert [l["uuid"] for l in links.get_locations("position")] == ["place-1"]
    assert [l["uuid"] for l in links.get_locations("polygon")] == ["polygon-1"]


def test_add_and_update_location(links, recorder):
    links.add_location("editor", {
        "uuid": "place-2",
        "title": "Lund",
        "type": "x-im/place",
        "data": {"position": "POINT(13.2 55.7)"},
    })
    assert links.get_concept_by_uuid("place-2")["data"] == {"geometry": "POINT(13.2 55.7)"}

    links.update_location("editor", {
        "uuid": "place-2",
        "title": "Lund C",
        "data": {"position": "POINT(13.1 55.7)"},
    })
    location = links.get_concept_by_uuid("place-2")
    assert location["title"] == "Lund C"
    assert location["data"] == {"geometry": "POINT(13.1 55.7)"}
    assert recorder.actions == ["add", "update"]

    with pytest.raises(NotFoundError):
        links.update_location("editor", {"uuid": "missing", "title": "X"})


def test_update_location_without_position_keeps_geometry(links, recorder):
    links.update_location("editor", {"uuid": "place-1", "title": "Malmo C", "data": {}})
    links.update_location("editor", {"uuid": "place-1", "data": {"position": ""}})

    location = links.get_concept_by_uuid("place-1")
    assert location["title"] == "Malmo C"
    assert location["data"] == {"geometry": "POINT(13.0 55.6)"}
    assert recorder.actions == ["update", "update"]


# Stories, categories, content profiles
def test_story_category_and_content_profile(links, recorder):
    links.add_story("editor", {"uuid": "story-1", "title": "Election"})
    links.add_category("editor", {"uuid": "cat-1", "title": "Politics"})
    links.add_content_profile("editor", {"uuid": "cp-1", "title": "Long read"})
    links.update_story("editor", {"uuid": "story-1", "title": "Election 2026"})
    links.update_content_profile("editor", {"uuid": "cp-1", "title": "Longread"})

    assert links.get_stories()[0]["title"] == "Election 2026"
    assert [c["uuid"] for c in links.get_categories()] == ["cat-1"]
    assert links.get_content_profiles()[0]["type"] == "x-im/content-profile"
    assert [event.entity_type for event in recorder.events] == [
        "story", "contentprofile", "story", "contentprofile"
    ]

    with pytest.raises(NotFoundError):
        links.update_story("editor", {"uuid": "missing", "title": "X"})


def test_concept_sections_and_normalized_channels(links):
    links.add_link("editor", {"uuid": "sec-1", "rel": "subject", "title": "Sport", "type": "x-im/section"})
    links.add_link("editor", {"uuid": "chn-1", "rel": "channel", "title": "Web", "type": "x-im/channel"})

    assert links.get_concept_sections()[0]["title"] == "Sport"
    assert links.get_normalized_channels() == [
        {"uuid": "chn-1", "rel": "channel", "title": "Web", "type": "x-im/channel"}
    ]
