# newsitem/links/registry.py

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from lxml.etree import _Element

from ..base_store import BaseStore
from ..config import ConceptPropertyMap
from ..models.types import (
    ATTR_PREFIX,
    ChangeAction,
    EntityType,
    JxonDict,
    LinkEntity,
    LinkRel,
    LinkType,
    NIL_UUID,
    NodeInfo,
    NotFoundError,
    Section,
    ValidationError,
    is_nil_uuid,
)
from ..utils import codec, tree
from ..utils.logger import log_mutation
from .concepts import parse_relations, write_geo_data, write_relations

LINK_ATTRIBUTES = ("title", "uuid", "uri", "rel", "type")

AUTHOR_DATA_FIELDS = (
    "email",
    "firstName",
    "lastName",
    "phone",
    "facebookUrl",
    "twitterUrl",
    "shortDescription",
    "longDescription",
)

LinkInput = Union[LinkEntity, Mapping[str, Any]]


def _first(value: Any) -> Any:
    """Tag fields arrive either as plain values or as one-element lists."""
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def node_info(node: _Element) -> NodeInfo:
    """Identifying attributes of a link element."""
    return NodeInfo(
        uuid=tree.get_attr(node, "uuid"),
        title=tree.get_attr(node, "title"),
        rel=tree.get_attr(node, "rel"),
        type=tree.get_attr(node, "type")
    )


class LinkRegistry(BaseStore):
    """
    Registry for link elements of itemMeta and contentMeta.

    Authors, tags, locations, stories, categories, content profiles and
    concepts share the itemMeta links container and are told apart by their
    type and rel attributes. Adds are idempotent, updates fail loudly on a
    missing target and removals follow a per-kind contract.
    """

    # Lookup
    def links_container(self, section: Section = Section.ITEM_META, create: bool = False) -> Optional[_Element]:
        return self.section_child(section, "links", create=create)

    def link_nodes(
        self,
        section: Section = Section.ITEM_META,
        predicate: Optional[tree.Predicate] = None
    ) -> List[_Element]:
        """Direct links of a section, in document order."""
        return tree.find_all(self.root, (section.value, "links", "link"), predicate)

    def find_by_uuid(self, uuid: Optional[str], section: Section = Section.ITEM_META) -> Optional[_Element]:
        found = self.link_nodes(section, tree.attr_equals("uuid", uuid))
        return found[0] if found else None

    def find_by_uri(self, uri: Optional[str], section: Section = Section.ITEM_META) -> Optional[_Element]:
        found = self.link_nodes(section, tree.attr_equals("uri", uri))
        return found[0] if found else None

    def find_by_uuid_and_rel(
        self,
        uuid: Optional[str],
        rel: Optional[str],
        section: Section = Section.ITEM_META
    ) -> Optional[_Element]:
        found = self.link_nodes(section, tree.attrs_equal(uuid=uuid, rel=rel))
        return found[0] if found else None

    def nodes_by_type(
        self,
        types: Union[str, Sequence[str]],
        rel: Optional[str] = None,
        section: Section = Section.ITEM_META
    ) -> List[_Element]:
        wanted = {types} if isinstance(types, str) else set(types)

        def predicate(node: _Element) -> bool:
            if tree.get_attr(node, "type") not in wanted:
                return False
            return rel is None or tree.get_attr(node, "rel") == rel

        return self.link_nodes(section, predicate)

    def _normalized_by_type(
        self,
        types: Union[str, Sequence[str]],
        rel: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        return [codec.decode_normalized(node) for node in self.nodes_by_type(types, rel)]

    def _require_uuid(self, uuid: Optional[str], entity: str) -> _Element:
        node = self.find_by_uuid(uuid)
        if node is None:
            raise NotFoundError(
                f"Could not find {entity} link with UUID: {uuid}",
                key=uuid
            )
        return node

    # Primitives
    def append_link(self, section: Section, link: LinkInput) -> _Element:
        """Append a link element, creating the links container if needed."""
        container = self.links_container(section, create=True)
        node = tree.create_element(container, "link")
        codec.populate(node, self._to_jxon(link))
        return tree.append(container, node)

    def _to_jxon(self, link: LinkInput) -> JxonDict:
        if isinstance(link, LinkEntity):
            return link.to_jxon()
        if not isinstance(link, Mapping):
            raise ValidationError(
                "Link must be a mapping",
                context={"value": repr(link)}
            )
        if any(key.startswith(ATTR_PREFIX) for key in link):
            return dict(link)
        return codec.mark_attributes(link, LINK_ATTRIBUTES)

    def _add_kind(
        self,
        actor: str,
        entity_type: EntityType,
        link: LinkEntity,
        data: Any
    ) -> Optional[_Element]:
        if self.find_by_uuid(link.uuid) is not None:
            self.logger.info(
                f"{entity_type.value.capitalize()} with uuid: {link.uuid} already exists"
            )
            return None

        node = self.append_link(Section.ITEM_META, link)
        self.event_manager.notify(
            actor,
            entity_type,
            ChangeAction.ADD,
            data=data,
            node=node_info(node)
        )
        return node

    def _remove_node(
        self,
        actor: str,
        entity_type: Union[EntityType, str],
        node: _Element,
        data: Any,
        action: ChangeAction = ChangeAction.DELETE
    ) -> NodeInfo:
        info = node_info(node)
        tree.detach(node)
        self.event_manager.notify(actor, entity_type, action, data=data, node=info)
        return info

    def _update_title(
        self,
        actor: str,
        entity_type: EntityType,
        obj: Mapping[str, Any]
    ) -> _Element:
        node = self._require_uuid(obj.get("uuid"), entity_type.value)
        if obj.get("title") is not None:
            tree.set_attr(node, "title", obj["title"])
        if isinstance(obj.get("data"), Mapping):
            codec.replace_child(node, "data", obj["data"])

        self.event_manager.notify(
            actor,
            entity_type,
            ChangeAction.UPDATE,
            data=dict(obj),
            node=node_info(node)
        )
        return node

    # Authors
    def get_authors(self) -> List[Dict[str, Any]]:
        """
        Get all authors.

        Authors without a backing concept carry the nil uuid and are told
        apart by title; all others by uuid.
        """
        authors: List[Dict[str, Any]] = []
        for author in self._normalized_by_type(LinkType.AUTHOR):
            duplicate = any(
                existing.get("title") == author.get("title")
                if is_nil_uuid(existing.get("uuid"))
                else existing.get("uuid") == author.get("uuid")
                for existing in authors
            )
            if not duplicate:
                authors.append(author)
        return authors

    @log_mutation(EntityType.AUTHOR.value)
    def add_author(self, actor: str, author: Mapping[str, Any]) -> Optional[_Element]:
        """Add a known author, given as {uuid, name}."""
        link = LinkEntity(
            title=author.get("name", author.get("title")),
            uuid=author.get("uuid"),
            rel=LinkRel.AUTHOR,
            type=LinkType.AUTHOR
        )
        return self._add_kind(actor, EntityType.AUTHOR, link, dict(author))

    @log_mutation(EntityType.AUTHOR.value)
    def add_simple_author(self, actor: str, name: str) -> _Element:
        """Add an author that has no backing concept."""
        node = self.append_link(Section.ITEM_META, LinkEntity(
            title=name,
            uuid=NIL_UUID,
            rel=LinkRel.AUTHOR,
            type=LinkType.AUTHOR
        ))
        self.event_manager.notify(
            actor,
            EntityType.AUTHOR,
            ChangeAction.ADD,
            data=name,
            node=node_info(node)
        )
        return node

    @log_mutation(EntityType.AUTHOR.value)
    def update_author_with_uuid(self, actor: str, uuid: str, author: Mapping[str, Any]) -> _Element:
        """
        Update the title and contact data of an author.

        Any existing data element is replaced by one holding the non-empty
        contact fields of author.

        Raises:
            NotFoundError: If no author link has the uuid
        """
        found = self.link_nodes(
            Section.ITEM_META,
            tree.attrs_equal(type=LinkType.AUTHOR, uuid=uuid)
        )
        if not found:
            raise NotFoundError(f"Could not find author with UUID: {uuid}", key=uuid)

        node = found[0]
        if author.get("name") is not None:
            tree.set_attr(node, "title", author["name"])

        fields = {
            name: author[name]
            for name in AUTHOR_DATA_FIELDS
            if author.get(name)
        }
        codec.replace_child(node, "data", fields)

        self.event_manager.notify(
            actor,
            EntityType.AUTHOR,
            ChangeAction.UPDATE,
            data=dict(author),
            node=node_info(node)
        )
        return node

    @log_mutation(EntityType.AUTHOR.value)
    def remove_author_by_uuid(self, actor: str, uuid: str) -> NodeInfo:
        found = self.link_nodes(
            Section.ITEM_META,
            tree.attrs_equal(type=LinkType.AUTHOR, uuid=uuid)
        )
        if not found:
            raise NotFoundError(f"Could not find author with UUID: {uuid}", key=uuid)

        snapshot = codec.decode_normalized(found[0])
        return self._remove_node(actor, EntityType.AUTHOR, found[0], snapshot)

    @log_mutation(EntityType.AUTHOR.value)
    def remove_author_by_title(self, actor: str, title: str) -> NodeInfo:
        """Remove the first author whose title contains the given text."""
        def predicate(node: _Element) -> bool:
            return (
                tree.get_attr(node, "type") == LinkType.AUTHOR
                and bool(title)
                and title in (tree.get_attr(node, "title") or "")
            )

        found = self.link_nodes(Section.ITEM_META, predicate)
        if not found:
            raise NotFoundError(f"Could not find author with title: {title}", key=title)

        return self._remove_node(actor, EntityType.AUTHOR, found[0], title)

    # Tags
    def get_links_by_type(self, types: Sequence[str], rel: str = LinkRel.SUBJECT) -> List[Dict[str, Any]]:
        """
        Get itemMeta links whose type is one of types and whose rel matches.

        Raises:
            ValidationError: If types is not a list
        """
        if not isinstance(types, (list, tuple)):
            raise ValidationError(
                "Argument types is not of type: list",
                context={"types": repr(types)}
            )
        return self._normalized_by_type(types, rel or LinkRel.SUBJECT)

    def get_tags(self, types: Sequence[str]) -> List[Dict[str, Any]]:
        return self.get_links_by_type(types, LinkRel.SUBJECT)

    @log_mutation(EntityType.TAG.value)
    def add_tag(self, actor: str, tag: Mapping[str, Any]) -> Optional[_Element]:
        """Add a subject tag, given as {uuid, name, imType or type}."""
        link = LinkEntity(
            title=_first(tag.get("name", tag.get("title"))),
            uuid=tag.get("uuid"),
            rel=LinkRel.SUBJECT,
            type=_first(tag.get("imType", tag.get("type")))
        )
        return self._add_kind(actor, EntityType.TAG, link, dict(tag))

    @log_mutation(EntityType.TAG.value)
    def update_tag(self, actor: str, uuid: str, tag: Mapping[str, Any]) -> _Element:
        node = self._require_uuid(uuid, EntityType.TAG.value)

        title = _first(tag.get("name", tag.get("title")))
        link_type = _first(tag.get("imType", tag.get("type")))
        if title is not None:
            tree.set_attr(node, "title", title)
        tree.set_attr(node, "rel", tag.get("rel") or tag.get("subject") or LinkRel.SUBJECT)
        if link_type is not None:
            tree.set_attr(node, "type", link_type)

        self.event_manager.notify(
            actor,
            EntityType.TAG,
            ChangeAction.UPDATE,
            data=dict(tag),
            node=node_info(node)
        )
        return node

    # Generic links
    def _add_link(
        self,
        actor: str,
        link: LinkInput,
        section: Section,
        notify: bool = True
    ) -> Optional[_Element]:
        entity = codec.normalize(self._to_jxon(link))
        uuid, uri, rel = entity.get("uuid"), entity.get("uri"), entity.get("rel")

        if uuid is not None:
            existing = self.find_by_uuid_and_rel(uuid, rel, section)
        elif uri is not None:
            existing = next(
                iter(self.link_nodes(section, tree.attrs_equal(uri=uri, rel=rel))),
                None
            )
        else:
            existing = None

        if existing is not None:
            self.logger.info(f"Link {uuid or uri} with rel: {rel} already exists")
            return None

        node = self.append_link(section, link)
        if notify:
            self.event_manager.notify(
                actor,
                EntityType.LINK,
                ChangeAction.ADD,
                data=dict(link) if isinstance(link, Mapping) else link.to_jxon(),
                node=node_info(node)
            )
        return node

    @log_mutation(EntityType.LINK.value)
    def add_link(self, actor: str, link: LinkInput, notify: bool = True) -> Optional[_Element]:
        """
        Add a link to itemMeta.

        The link may use plain (uuid) or attribute-marked (@uuid) keys and
        may carry a nested data mapping. A link with the same uuid, or uri,
        and the same rel is never added twice.
        """
        return self._add_link(actor, link, Section.ITEM_META, notify)

    @log_mutation(EntityType.LINK.value)
    def add_content_meta_link(self, actor: str, link: LinkInput) -> Optional[_Element]:
        return self._add_link(actor, link, Section.CONTENT_META)

    @log_mutation(EntityType.LINK.value)
    def update_link_rel(self, actor: str, link: Mapping[str, Any]) -> _Element:
        node = self._require_uuid(link.get("uuid"), EntityType.LINK.value)
        tree.set_attr(node, "rel", link.get("rel"))

        self.event_manager.notify(
            actor,
            link.get("type") or EntityType.LINK,
            ChangeAction.UPDATE,
            data=dict(link),
            node=node_info(node)
        )
        return node

    @log_mutation(EntityType.LINK.value)
    def remove_link_by_uuid(self, actor: str, uuid: str) -> NodeInfo:
        node = self._require_uuid(uuid, EntityType.LINK.value)
        return self._remove_node(actor, EntityType.TAG, node, uuid)

    @log_mutation(EntityType.LINK.value)
    def remove_link_by_uri(self, actor: str, uri: str) -> NodeInfo:
        node = self.find_by_uri(uri)
        if node is None:
            raise NotFoundError(f"Could not find link with uri: {uri}", key=uri)
        return self._remove_node(actor, EntityType.LINK, node, uri)

    @log_mutation(EntityType.LINK.value)
    def remove_link_by_uuid_and_rel(self, actor: str, uuid: str, rel: str) -> NodeInfo:
        node = self.find_by_uuid_and_rel(uuid, rel)
        if node is None:
            raise NotFoundError(
                f"Could not find link with UUID: {uuid} and rel: {rel}",
                key=uuid,
                context={"rel": rel}
            )
        return self._remove_node(actor, EntityType.LINK, node, rel)

    @log_mutation(EntityType.LINK.value)
    def remove_all_links_by_type(self, actor: str, link_type: str) -> List[NodeInfo]:
        """
        Remove every itemMeta link of a type, reporting each removal.

        Raises:
            NotFoundError: If no link has the type
        """
        nodes = self.nodes_by_type(link_type)
        if not nodes:
            raise NotFoundError(f"Could not find links with type: {link_type}", key=link_type)

        return [
            self._remove_node(
                actor,
                EntityType.LINK,
                node,
                link_type,
                action=ChangeAction.DELETE_ALL
            )
            for node in nodes
        ]

    @log_mutation(EntityType.LINK.value)
    def remove_content_meta_link_by_type_and_rel(self, actor: str, link_type: str, rel: str) -> List[NodeInfo]:
        nodes = self.nodes_by_type(link_type, rel, Section.CONTENT_META)
        if not nodes:
            raise NotFoundError(
                f"Could not find link with type: {link_type} and rel: {rel}",
                key=link_type,
                context={"rel": rel}
            )
        return [
            self._remove_node(actor, EntityType.LINK, node, rel)
            for node in nodes
        ]

    @log_mutation(EntityType.LINK.value)
    def remove_content_meta_links_by_type_and_filter(
        self,
        actor: str,
        link_type: str,
        link_filter: Callable[[Dict[str, Any]], bool]
    ) -> List[NodeInfo]:
        """
        Remove contentMeta links of a type accepted by link_filter.

        The filter receives each link as a normalized dictionary. Nothing
        matching is not an error.
        """
        removed = []
        for node in self.nodes_by_type(link_type, section=Section.CONTENT_META):
            if link_filter(codec.decode_normalized(node)):
                removed.append(
                    self._remove_node(actor, EntityType.LINK, node, link_type)
                )
        return removed

    def get_link_by_type_and_rel(self, link_type: str, rel: str) -> List[JxonDict]:
        """Attribute-marked itemMeta links of a type and rel."""
        return [codec.decode(node) for node in self.nodes_by_type(link_type, rel)]

    def get_link_by_type(self, link_type: str) -> List[JxonDict]:
        return [codec.decode(node) for node in self.nodes_by_type(link_type)]

    def get_content_meta_link_by_type(self, link_type: str) -> List[JxonDict]:
        return [
            codec.decode(node)
            for node in self.nodes_by_type(link_type, section=Section.CONTENT_META)
        ]

    def get_concept_by_uuid(self, uuid: str) -> Optional[Dict[str, Any]]:
        node = self.find_by_uuid(uuid)
        return codec.decode_normalized(node) if node is not None else None

    # Locations
    @log_mutation(EntityType.LOCATION.value)
    def add_location(self, actor: str, location: Mapping[str, Any]) -> Optional[_Element]:
        """Add a location; an optional data.position is stored as data/geometry."""
        link = LinkEntity(
            title=location.get("title"),
            uuid=location.get("uuid"),
            rel=LinkRel.SUBJECT,
            type=location.get("type"),
            data=self._geometry(location)
        )
        return self._add_kind(actor, EntityType.LOCATION, link, dict(location))

    @log_mutation(EntityType.LOCATION.value)
    def update_location(self, actor: str, location: Mapping[str, Any]) -> _Element:
        """Update a location; its geometry is only rewritten when data.position is given."""
        node = self._require_uuid(location.get("uuid"), EntityType.LOCATION.value)
        if location.get("title") is not None:
            tree.set_attr(node, "title", location["title"])
        geometry = self._geometry(location)
        if geometry:
            codec.replace_child(node, "data", geometry)

        self.event_manager.notify(
            actor,
            EntityType.LOCATION,
            ChangeAction.UPDATE,
            data=dict(location),
            node=node_info(node)
        )
        return node

    @staticmethod
    def _geometry(location: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        data = location.get("data")
        if isinstance(data, Mapping) and data.get("position"):
            return {"geometry": data["position"]}
        return None

    def get_locations(self, entity: str = "all") -> List[Dict[str, Any]]:
        """
        Get locations.

        Locations are stored either all as x-im/place or with their specific
        type; entity 'polygon' or 'position' also matches on the geometry.
        """
        if entity not in ("position", "polygon"):
            entity = "all"

        locations = []
        for location in self._normalized_by_type(LinkType.LOCATIONS):
            data = location.get("data")
            geometry = data.get("geometry", "") if isinstance(data, dict) else ""
            if entity == "all":
                locations.append(location)
            elif entity == "polygon" and (
                location.get("type") == LinkType.POLYGON or "POLYGON" in geometry
            ):
                locations.append(location)
            elif entity == "position" and (
                location.get("type") == LinkType.POSITION or geometry.startswith("POINT")
            ):
                locations.append(location)
        return locations

    # Stories, categories, content profiles
    def get_stories(self) -> List[Dict[str, Any]]:
        return self._normalized_by_type(LinkType.STORY)

    def get_categories(self) -> List[Dict[str, Any]]:
        return self._normalized_by_type(LinkType.CATEGORY)

    def get_content_profiles(self) -> List[Dict[str, Any]]:
        return self._normalized_by_type(LinkType.CONTENT_PROFILE)

    def get_concept_sections(self) -> List[Dict[str, Any]]:
        return self._normalized_by_type(LinkType.SECTION)

    def get_normalized_channels(self) -> List[Dict[str, Any]]:
        return self._normalized_by_type(LinkType.CHANNEL, LinkRel.CHANNEL)

    def _subject_link(self, obj: Mapping[str, Any], link_type: str) -> LinkEntity:
        return LinkEntity(
            title=obj.get("title"),
            uuid=obj.get("uuid"),
            rel=LinkRel.SUBJECT,
            type=link_type
        )

    @log_mutation(EntityType.STORY.value)
    def add_story(self, actor: str, story: Mapping[str, Any]) -> Optional[_Element]:
        link = self._subject_link(story, LinkType.STORY)
        return self._add_kind(actor, EntityType.STORY, link, dict(story))

    @log_mutation(EntityType.STORY.value)
    def update_story(self, actor: str, story: Mapping[str, Any]) -> _Element:
        return self._update_title(actor, EntityType.STORY, story)

    @log_mutation(EntityType.CATEGORY.value)
    def add_category(self, actor: str, category: Mapping[str, Any]) -> Optional[_Element]:
        link = self._subject_link(category, LinkType.CATEGORY)
        return self._add_kind(actor, EntityType.CATEGORY, link, dict(category))

    @log_mutation(EntityType.CONTENT_PROFILE.value)
    def add_content_profile(self, actor: str, content_profile: Mapping[str, Any]) -> Optional[_Element]:
        link = self._subject_link(content_profile, LinkType.CONTENT_PROFILE)
        return self._add_kind(actor, EntityType.CONTENT_PROFILE, link, dict(content_profile))

    @log_mutation(EntityType.CONTENT_PROFILE.value)
    def update_content_profile(self, actor: str, content_profile: Mapping[str, Any]) -> _Element:
        return self._update_title(actor, EntityType.CONTENT_PROFILE, content_profile)

    # Concepts
    def _property_map(self, property_map: Optional[Mapping[str, str]]) -> ConceptPropertyMap:
        if property_map is None:
            return self.config.property_map
        return ConceptPropertyMap.from_mapping(property_map)

    @staticmethod
    def _write_concept_data(node: _Element, concept: Mapping[str, Any]) -> None:
        article_data = concept.get("articleData")
        fields = {}
        if isinstance(article_data, Mapping):
            fields = {
                key: value
                for key, value in article_data.items()
                if value is not None and value != ""
            }
        codec.replace_child(node, "data", fields)

    @log_mutation("concept")
    def update_concept(
        self,
        actor: str,
        concept: Mapping[str, Any],
        property_map: Optional[Mapping[str, str]] = None,
        notify: bool = True
    ) -> _Element:
        """
        Rewrite a concept link from a concept object.

        The title, the data element and the nested relation links are all
        rebuilt; the previous nested links are always dropped.

        Args:
            actor: Identifier of the caller
            concept: Concept object with uuid, name, articleData and relations
            property_map: Keys of the relational fields, defaults to config
            notify: Set to False to suppress the change event

        Raises:
            NotFoundError: If no link has the concept uuid
            ValidationError: If a relation is not a mapping
        """
        property_map = self._property_map(property_map)
        node = self._require_uuid(concept.get("uuid"), "concept")
        relations = parse_relations(concept, property_map)

        title = concept.get(property_map.name, concept.get("name"))
        if title is not None:
            tree.set_attr(node, "title", title)
        self._write_concept_data(node, concept)
        write_relations(node, relations)

        if notify:
            self.event_manager.notify(
                actor,
                concept.get("type") or EntityType.LINK,
                ChangeAction.UPDATE,
                data=dict(concept),
                node=node_info(node)
            )
        return node

    @log_mutation("concept")
    def update_concept_data(self, actor: str, concept: Mapping[str, Any]) -> _Element:
        """Rebuild the title and data element of a concept link."""
        node = self._require_uuid(concept.get("uuid"), "concept")
        if concept.get("name") is not None:
            tree.set_attr(node, "title", concept["name"])
        self._write_concept_data(node, concept)

        self.event_manager.notify(
            actor,
            concept.get("type") or EntityType.LINK,
            ChangeAction.UPDATE,
            data=dict(concept),
            node=node_info(node)
        )
        return node

    @log_mutation(EntityType.RELATED_GEO.value)
    def create_extended_geo_link(self, actor: str, polygons: Sequence[Mapping[str, Any]]) -> Optional[_Element]:
        """
        Replace the related-geo link listing the uuids of polygons.

        An empty list only removes the existing link.
        """
        removed = self.link_nodes(
            Section.ITEM_META,
            tree.attr_equals("rel", LinkRel.RELATED_GEO)
        )
        for node in removed:
            tree.detach(node)

        if not polygons:
            if removed:
                self.event_manager.notify(actor, EntityType.RELATED_GEO, ChangeAction.DELETE)
            return None

        container = self.links_container(Section.ITEM_META, create=True)
        node = write_geo_data(container, polygons, self.config.property_map)
        self.event_manager.notify(
            actor,
            EntityType.RELATED_GEO,
            ChangeAction.SET,
            data=[dict(polygon) for polygon in polygons]
        )
        return node
