# newsitem/news_item.py

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from lxml import etree
from lxml.etree import _Element

from .config import NewsItemConfig
from .event_manager import EventManager, EventType
from .links.registry import LinkRegistry
from .links.services import ServiceRegistry
from .metadata.ext_properties import ExtPropertyStore
from .metadata.objects import MetadataObjectStore
from .models.types import (
    ChangeAction,
    EntityType,
    ExtPropertyType,
    LanguageParts,
    NodeInfo,
    NotFoundError,
    PubWindow,
    Section,
    ValidationError,
)
from .utils import codec, tree
from .utils.logger import NewsItemLogger, log_mutation

LocaleResolver = Callable[[Optional[str]], str]
Source = Union[str, bytes]


def _parser() -> etree.XMLParser:
    return etree.XMLParser(
        recover=False,
        resolve_entities=False,
        dtd_validation=False,
        load_dtd=False,
        no_network=True
    )


def parse_source(source: Source) -> _Element:
    """
    Parse NewsML text into its root element.

    Raises:
        ValidationError: If the text is not well-formed XML
    """
    if isinstance(source, str):
        source = source.encode("utf-8")
    try:
        return etree.fromstring(source, _parser())
    except etree.XMLSyntaxError as e:
        raise ValidationError(
            "Invalid NewsML source",
            context={"error": str(e)}
        ) from e


class NewsItem:
    """
    Metadata access for one NewsML-G2 news item.

    Wraps the element tree of the document and exposes links, services,
    ext properties, metadata objects and document level fields. Every
    mutating operation takes the identifier of the calling component as its
    first argument and reports the committed change through the event
    manager.
    """

    def __init__(
        self,
        document: Union[_Element, etree._ElementTree],
        event_manager: Optional[EventManager] = None,
        config: Optional[NewsItemConfig] = None,
        locale_resolver: Optional[LocaleResolver] = None,
        logger: Optional[NewsItemLogger] = None
    ):
        self.config = config or NewsItemConfig()
        self.logger = logger or NewsItemLogger(name=__name__)
        self.event_manager = event_manager or EventManager(logger=self.logger)
        self.locale_resolver = locale_resolver or self.config.locale_for_language
        self._bind(document)

    def _bind(self, document: Union[_Element, etree._ElementTree]) -> None:
        root = document.getroot() if isinstance(document, etree._ElementTree) else document
        if root is None:
            raise ValidationError("News item document has no root element")

        self.root = root
        components = (root, self.event_manager, self.config, self.logger)
        self.ext_properties = ExtPropertyStore(*components)
        self.objects = MetadataObjectStore(*components)
        self.links = LinkRegistry(*components)
        self.services = ServiceRegistry(*components)

    # Source
    @classmethod
    def from_source(cls, source: Source, **kwargs) -> "NewsItem":
        """Create a news item from NewsML text."""
        return cls(parse_source(source), **kwargs)

    def get_source(self) -> str:
        return etree.tostring(self.root, encoding="unicode")

    def set_source(self, source: Source) -> None:
        """
        Replace the whole document with parsed NewsML text.

        No change event is emitted; subscribers should be told by the caller.
        """
        self._bind(parse_source(source))
        self.logger.info(f"Replaced news item source, guid: {self.get_guid()}")

    def invalidate(self) -> None:
        """Tell subscribers the document is no longer valid."""
        self.logger.warning(f"News item {self.get_guid()} invalidated")
        self.event_manager.emit(EventType.DOCUMENT_INVALIDATED)

    # Identity
    def get_guid(self) -> Optional[str]:
        return tree.get_attr(self.root, "guid")

    def set_guid(self, uuid: Optional[str]) -> None:
        tree.set_attr(self.root, "guid", uuid or "")

    @log_mutation(EntityType.DOCUMENT_URI.value)
    def remove_document_uri(self, actor: str) -> bool:
        return self.ext_properties.delete(actor, Section.ITEM_META, ExtPropertyType.URI)

    # Language
    def _idf(self) -> Optional[_Element]:
        return tree.find_one(self.root, ("contentSet", "inlineXML", "idf"))

    def _require_idf(self) -> _Element:
        node = self._idf()
        if node is None:
            raise NotFoundError("Document has no contentSet idf element", key="idf")
        return node

    def get_language_parts(self) -> LanguageParts:
        """
        Split the document language into type and subtype.

        Raises:
            NotFoundError: If the document has no idf element
        """
        node = self._require_idf()
        language_type, _, subtype = (tree.get_attr(node, "xml:lang") or "").partition("-")
        return LanguageParts(
            type=language_type or None,
            subtype=subtype or None,
            direction=tree.get_attr(node, "dir")
        )

    def get_locale(self) -> str:
        """Locale as type_subtype, or resolved from the language type alone."""
        parts = self.get_language_parts()
        if parts.type and parts.subtype:
            return f"{parts.type}_{parts.subtype}"
        return self.locale_resolver(parts.type)

    @log_mutation(EntityType.LANGUAGE.value)
    def set_language(self, actor: str, language_code: str, text_direction: str = "ltr") -> None:
        """
        Set the document language and text direction.

        A code in the xx_YY form is stored as xx-YY. Subscribers receive a
        document change followed by a language change.
        """
        node = self._require_idf()
        tree.set_attr(node, "xml:lang", language_code.replace("_", "-"))
        tree.set_attr(node, "dir", text_direction)

        self.event_manager.notify(actor, EntityType.LANGUAGE, ChangeAction.UPDATE, data={})
        self.event_manager.emit(
            EventType.LANGUAGE_CHANGED,
            language_code=language_code,
            text_direction=text_direction
        )

    def get_text_direction(self) -> str:
        node = self._idf()
        direction = tree.get_attr(node, "dir") if node is not None else None
        return direction or self.config.text_direction

    # Publication
    def get_pub_status(self) -> Optional[Dict[str, Any]]:
        node = tree.find_one(self.root, (Section.ITEM_META.value, "pubStatus"))
        return codec.decode_normalized(node) if node is not None else None

    @log_mutation(EntityType.PUB_STATUS.value)
    def set_pub_status(self, actor: str, pub_status: Mapping[str, Any]) -> _Element:
        if not isinstance(pub_status, Mapping) or not pub_status.get("qcode"):
            raise ValidationError(
                "Publication status requires a qcode",
                context={"value": repr(pub_status)}
            )

        node = self.links.section_child(Section.ITEM_META, "pubStatus", create=True)
        tree.set_attr(node, "qcode", pub_status["qcode"])
        self.event_manager.notify(
            actor,
            EntityType.PUB_STATUS,
            ChangeAction.SET,
            data=dict(pub_status)
        )
        return node

    def _get_pub_property(self, ext_type: str) -> Optional[Dict[str, Any]]:
        node = self.ext_properties.get_raw(Section.ITEM_META, ext_type)
        return codec.decode_normalized(node) if node is not None else None

    def _set_pub_property(
        self,
        actor: str,
        entity_type: EntityType,
        ext_type: str,
        value: Mapping[str, Any]
    ) -> _Element:
        if not isinstance(value, Mapping):
            raise ValidationError(
                f"{entity_type.value} must be a mapping with a value",
                context={"value": repr(value)}
            )
        node = self.ext_properties.put(Section.ITEM_META, ext_type, value.get("value"))
        self.event_manager.notify(
            actor,
            entity_type,
            ChangeAction.SET,
            data=dict(value),
            node=NodeInfo(type=ext_type)
        )
        return node

    def _remove_pub_property(self, actor: str, entity_type: EntityType, ext_type: str) -> bool:
        if self.ext_properties.pop(Section.ITEM_META, ext_type) is None:
            return False
        self.event_manager.notify(actor, entity_type, ChangeAction.DELETE, data={})
        return True

    def get_pub_start(self) -> Optional[Dict[str, Any]]:
        return self._get_pub_property(ExtPropertyType.PUB_START)

    @log_mutation(EntityType.PUB_START.value)
    def set_pub_start(self, actor: str, pub_start: Mapping[str, Any]) -> _Element:
        return self._set_pub_property(actor, EntityType.PUB_START, ExtPropertyType.PUB_START, pub_start)

    @log_mutation(EntityType.PUB_START.value)
    def remove_pub_start(self, actor: str) -> bool:
        return self._remove_pub_property(actor, EntityType.PUB_START, ExtPropertyType.PUB_START)

    def get_pub_stop(self) -> Optional[Dict[str, Any]]:
        return self._get_pub_property(ExtPropertyType.PUB_STOP)

    @log_mutation(EntityType.PUB_STOP.value)
    def set_pub_stop(self, actor: str, pub_stop: Mapping[str, Any]) -> _Element:
        return self._set_pub_property(actor, EntityType.PUB_STOP, ExtPropertyType.PUB_STOP, pub_stop)

    @log_mutation(EntityType.PUB_STOP.value)
    def remove_pub_stop(self, actor: str) -> bool:
        return self._remove_pub_property(actor, EntityType.PUB_STOP, ExtPropertyType.PUB_STOP)

    def get_pub_window(self) -> PubWindow:
        return PubWindow(start=self.get_pub_start(), stop=self.get_pub_stop())

    def get_has_published_version(self) -> bool:
        value = self.ext_properties.get(Section.ITEM_META, ExtPropertyType.HAS_PUBLISHED_VERSION)
        return value == "true"

    @log_mutation(EntityType.HAS_PUBLISHED_VERSION.value)
    def set_has_published_version(self, actor: str, value: bool) -> _Element:
        node = self.ext_properties.put(
            Section.ITEM_META,
            ExtPropertyType.HAS_PUBLISHED_VERSION,
            value
        )
        self.event_manager.notify(
            actor,
            EntityType.HAS_PUBLISHED_VERSION,
            ChangeAction.SET,
            data=value
        )
        return node

    def get_newspilot_article_id(self) -> Optional[str]:
        return self.ext_properties.get(Section.ITEM_META, ExtPropertyType.NEWSPILOT_ARTICLE_ID)

    # Editorial note
    def get_ed_note(self) -> str:
        node = tree.find_one(self.root, (Section.ITEM_META.value, "edNote"))
        return tree.get_text(node) if node is not None else ""

    @log_mutation(EntityType.ED_NOTE.value)
    def set_ed_note(self, actor: str, content: Optional[str]) -> Optional[_Element]:
        """
        Set the editorial note; an empty or None content removes it.

        Raises:
            ValidationError: If content is neither a string nor None
        """
        if content is not None and not isinstance(content, str):
            raise ValidationError(
                "Argument is not of type string or None",
                context={"value": repr(content)}
            )

        node = tree.find_one(self.root, (Section.ITEM_META.value, "edNote"))
        if not content:
            if node is not None:
                tree.detach(node)
                self.event_manager.notify(actor, EntityType.ED_NOTE, ChangeAction.DELETE, data="")
            return None

        if node is None:
            node = self.links.section_child(Section.ITEM_META, "edNote", create=True)
        tree.set_text(node, content)

        self.event_manager.notify(actor, EntityType.ED_NOTE, ChangeAction.SET, data=content)
        return node

    # Dates
    def _get_date(self, section: Section, name: str) -> Optional[str]:
        node = tree.find_one(self.root, (section.value, name))
        return tree.get_text(node) if node is not None else None

    def get_version_created(self) -> Optional[str]:
        return self._get_date(Section.ITEM_META, "versionCreated")

    def get_first_created(self) -> Optional[str]:
        return self._get_date(Section.ITEM_META, "firstCreated")

    def get_content_created(self) -> Optional[str]:
        return self._get_date(Section.CONTENT_META, "contentCreated")

    def get_content_modified(self) -> Optional[str]:
        return self._get_date(Section.CONTENT_META, "contentModified")

    # Ext properties
    def get_ext_property(
        self,
        section: Union[str, Section],
        ext_type: str,
        raw: bool = False
    ) -> Union[_Element, str, None]:
        if raw:
            return self.ext_properties.get_raw(section, ext_type)
        return self.ext_properties.get(section, ext_type)

    def set_ext_property(self, actor: str, section: Union[str, Section], ext_type: str, value: Any) -> _Element:
        return self.ext_properties.set(actor, section, ext_type, value)

    def delete_ext_property(self, actor: str, section: Union[str, Section], ext_type: str) -> bool:
        return self.ext_properties.delete(actor, section, ext_type)

    # Metadata objects
    def get_content_meta_objects_by_type(self, object_type: str) -> List[Dict[str, Any]]:
        return self.objects.get_by_type(object_type)

    def get_content_meta_object_by_id(self, object_id: str) -> Optional[Dict[str, Any]]:
        return self.objects.get_by_id(object_id)

    def set_content_meta_object(self, actor: str, obj: Mapping[str, Any]) -> _Element:
        return self.objects.set(actor, obj)

    def remove_content_meta_object(self, actor: str, object_id: str) -> bool:
        return self.objects.remove(actor, object_id)

    def get_news_priority(self) -> Optional[Dict[str, Any]]:
        return self.objects.get_news_priority()

    def create_news_priority(self, actor: str, news_priority: Mapping[str, Any]) -> _Element:
        return self.objects.create_news_priority(actor, news_priority)

    def set_news_priority(self, actor: str, news_priority: Mapping[str, Any]) -> _Element:
        return self.objects.set_news_priority(actor, news_priority)

    # Channels and sections
    def get_channels(self) -> List[Dict[str, Any]]:
        return self.services.get_channels()

    def get_main_channel(self) -> Optional[Dict[str, Any]]:
        return self.services.get_main_channel()

    def add_channel(self, actor: str, channel: Mapping[str, Any], as_main: bool = False) -> _Element:
        return self.services.add_channel(actor, channel, as_main)

    def remove_channel(self, actor: str, channel: Mapping[str, Any]) -> bool:
        return self.services.remove_channel(actor, channel)

    def get_sections(self) -> List[Dict[str, Any]]:
        return self.services.get_sections()

    def get_section(self) -> Optional[Dict[str, Any]]:
        return self.services.get_section()

    def update_section(self, actor: str, section: Mapping[str, Any]) -> _Element:
        return self.services.update_section(actor, section)

    def remove_section(self, actor: str, section: Mapping[str, Any]) -> bool:
        return self.services.remove_section(actor, section)

    def get_normalized_channels(self) -> List[Dict[str, Any]]:
        return self.links.get_normalized_channels()

    # Authors
    def get_authors(self) -> List[Dict[str, Any]]:
        return self.links.get_authors()

    def add_author(self, actor: str, author: Mapping[str, Any]) -> Optional[_Element]:
        return self.links.add_author(actor, author)

    def add_simple_author(self, actor: str, name: str) -> _Element:
        return self.links.add_simple_author(actor, name)

    def update_author_with_uuid(self, actor: str, uuid: str, author: Mapping[str, Any]) -> _Element:
        return self.links.update_author_with_uuid(actor, uuid, author)

    def remove_author_by_uuid(self, actor: str, uuid: str) -> NodeInfo:
        return self.links.remove_author_by_uuid(actor, uuid)

    def remove_author_by_title(self, actor: str, title: str) -> NodeInfo:
        return self.links.remove_author_by_title(actor, title)

    # Tags and generic links
    def get_tags(self, types: Sequence[str]) -> List[Dict[str, Any]]:
        return self.links.get_tags(types)

    def get_links_by_type(self, types: Sequence[str], rel: str = "subject") -> List[Dict[str, Any]]:
        return self.links.get_links_by_type(types, rel)

    def add_tag(self, actor: str, tag: Mapping[str, Any]) -> Optional[_Element]:
        return self.links.add_tag(actor, tag)

    def update_tag(self, actor: str, uuid: str, tag: Mapping[str, Any]) -> _Element:
        return self.links.update_tag(actor, uuid, tag)

    def add_link(self, actor: str, link: Mapping[str, Any], notify: bool = True) -> Optional[_Element]:
        return self.links.add_link(actor, link, notify)

    def add_content_meta_link(self, actor: str, link: Mapping[str, Any]) -> Optional[_Element]:
        return self.links.add_content_meta_link(actor, link)

    def update_link_rel(self, actor: str, link: Mapping[str, Any]) -> _Element:
        return self.links.update_link_rel(actor, link)

    def remove_link_by_uuid(self, actor: str, uuid: str) -> NodeInfo:
        return self.links.remove_link_by_uuid(actor, uuid)

    def remove_link_by_uri(self, actor: str, uri: str) -> NodeInfo:
        return self.links.remove_link_by_uri(actor, uri)

    def remove_link_by_uuid_and_rel(self, actor: str, uuid: str, rel: str) -> NodeInfo:
        return self.links.remove_link_by_uuid_and_rel(actor, uuid, rel)

    def remove_all_links_by_type(self, actor: str, link_type: str) -> List[NodeInfo]:
        return self.links.remove_all_links_by_type(actor, link_type)

    def remove_content_meta_link_by_type_and_rel(self, actor: str, link_type: str, rel: str) -> List[NodeInfo]:
        return self.links.remove_content_meta_link_by_type_and_rel(actor, link_type, rel)

    def remove_content_meta_links_by_type_and_filter(
        self,
        actor: str,
        link_type: str,
        link_filter: Callable[[Dict[str, Any]], bool]
    ) -> List[NodeInfo]:
        return self.links.remove_content_meta_links_by_type_and_filter(actor, link_type, link_filter)

    def get_link_by_type_and_rel(self, link_type: str, rel: str) -> List[Dict[str, Any]]:
        return self.links.get_link_by_type_and_rel(link_type, rel)

    def get_link_by_type(self, link_type: str) -> List[Dict[str, Any]]:
        return self.links.get_link_by_type(link_type)

    def get_content_meta_link_by_type(self, link_type: str) -> List[Dict[str, Any]]:
        return self.links.get_content_meta_link_by_type(link_type)

    def get_concept_by_uuid(self, uuid: str) -> Optional[Dict[str, Any]]:
        return self.links.get_concept_by_uuid(uuid)

    # Locations
    def get_locations(self, entity: str = "all") -> List[Dict[str, Any]]:
        return self.links.get_locations(entity)

    def add_location(self, actor: str, location: Mapping[str, Any]) -> Optional[_Element]:
        return self.links.add_location(actor, location)

    def update_location(self, actor: str, location: Mapping[str, Any]) -> _Element:
        return self.links.update_location(actor, location)

    # Stories, categories, content profiles
    def get_stories(self) -> List[Dict[str, Any]]:
        return self.links.get_stories()

    def add_story(self, actor: str, story: Mapping[str, Any]) -> Optional[_Element]:
        return self.links.add_story(actor, story)

    def update_story(self, actor: str, story: Mapping[str, Any]) -> _Element:
        return self.links.update_story(actor, story)

    def get_categories(self) -> List[Dict[str, Any]]:
        return self.links.get_categories()

    def add_category(self, actor: str, category: Mapping[str, Any]) -> Optional[_Element]:
        return self.links.add_category(actor, category)

    def get_content_profiles(self) -> List[Dict[str, Any]]:
        return self.links.get_content_profiles()

    def add_content_profile(self, actor: str, content_profile: Mapping[str, Any]) -> Optional[_Element]:
        return self.links.add_content_profile(actor, content_profile)

    def update_content_profile(self, actor: str, content_profile: Mapping[str, Any]) -> _Element:
        return self.links.update_content_profile(actor, content_profile)

    # Deprecated names
    add_concept_profile = add_content_profile
    update_concept_profile = update_content_profile

    def get_concept_sections(self) -> List[Dict[str, Any]]:
        return self.links.get_concept_sections()

    # Concepts
    def update_concept(
        self,
        actor: str,
        concept: Mapping[str, Any],
        property_map: Optional[Mapping[str, str]] = None,
        notify: bool = True
    ) -> _Element:
        return self.links.update_concept(actor, concept, property_map, notify)

    def update_concept_data(self, actor: str, concept: Mapping[str, Any]) -> _Element:
        return self.links.update_concept_data(actor, concept)

    def create_extended_geo_link(self, actor: str, polygons: Sequence[Mapping[str, Any]]) -> Optional[_Element]:
        return self.links.create_extended_geo_link(actor, polygons)
