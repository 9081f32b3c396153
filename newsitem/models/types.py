# newsitem/models/types.py

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

# Type aliases
JxonDict = Dict[str, Any]
EntityData = Union[Mapping[str, Any], str, bool, None]

ATTR_PREFIX = "@"
VALUE_KEY = "keyValue"
NIL_UUID = "00000000-0000-0000-0000-000000000000"
MAIN_CHANNEL = "imext:main"
XML_NS = "http://www.w3.org/XML/1998/namespace"


def is_nil_uuid(uuid: Optional[str]) -> bool:
    return uuid == NIL_UUID


class Section(Enum):
    """Document sections that hold metadata."""
    ITEM_META = "itemMeta"
    CONTENT_META = "contentMeta"

    @property
    def ext_property_name(self) -> str:
        """Element name of ext properties stored in this section."""
        return f"{self.value}ExtProperty"

    @classmethod
    def from_name(cls, name: Union[str, "Section"]) -> "Section":
        """Resolve a section from its element name."""
        if isinstance(name, cls):
            return name
        try:
            return cls(name)
        except ValueError:
            raise ValidationError(
                "Either itemMeta or contentMeta section name must be specified",
                context={"section": name}
            )


class ChangeAction(Enum):
    """Actions reported with a change event."""
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"
    DELETE_ALL = "delete-all"
    SET = "set"


class EntityType(Enum):
    """Entity types reported with a change event."""
    AUTHOR = "author"
    TAG = "tag"
    LINK = "link"
    LOCATION = "location"
    STORY = "story"
    CATEGORY = "category"
    CONTENT_PROFILE = "contentprofile"
    CHANNEL = "channel"
    SECTION = "section"
    RELATED_GEO = "related-geo"
    LANGUAGE = "language"
    NEWS_PRIORITY = "newsPriority"
    PUB_STATUS = "pubStatus"
    PUB_START = "pubStart"
    PUB_STOP = "pubStop"
    ED_NOTE = "edNote"
    DOCUMENT_URI = "documentUri"
    HAS_PUBLISHED_VERSION = "hasPublishedVersion"
    CONTENT_META_OBJECT = "contentmetaobject"


class LinkType:
    """Link types used by the entity kinds."""
    AUTHOR = "x-im/author"
    STORY = "x-im/story"
    CATEGORY = "x-im/category"
    CONTENT_PROFILE = "x-im/content-profile"
    CHANNEL = "x-im/channel"
    SECTION = "x-im/section"
    PLACE = "x-im/place"
    POLYGON = "x-im/polygon"
    POSITION = "x-im/position"

    LOCATIONS = (PLACE, POLYGON, POSITION)


class LinkRel:
    """Relation roles of links."""
    SUBJECT = "subject"
    AUTHOR = "author"
    CHANNEL = "channel"
    RELATED_GEO = "related-geo"


class ExtPropertyType:
    """Well known ext property types."""
    PUB_START = "imext:pubstart"
    PUB_STOP = "imext:pubstop"
    URI = "imext:uri"
    HAS_PUBLISHED_VERSION = "imext:haspublishedversion"
    NEWSPILOT_ARTICLE_ID = "npext:articleid"


class ObjectType:
    """Well known metadata object types."""
    NEWS_VALUE = "x-im/newsvalue"


class RelationKind(Enum):
    """Relation of a concept to another concept."""
    BROADER = "broader"
    ASSOCIATED_WITH = "associated-with"


@dataclass
class NodeInfo:
    """Identifying attributes of a link element, reported with change events."""
    uuid: Optional[str] = None
    title: Optional[str] = None
    rel: Optional[str] = None
    type: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "uuid": self.uuid,
            "title": self.title,
            "rel": self.rel,
            "type": self.type
        }


@dataclass
class LinkEntity:
    """A typed, relation-tagged reference stored as a link element."""
    title: Optional[str]
    rel: Optional[str]
    type: Optional[str]
    uuid: Optional[str] = None
    uri: Optional[str] = None
    data: Optional[Dict[str, Any]] = None

    @property
    def identity(self) -> Optional[str]:
        """Identity key: uuid when present, else uri."""
        return self.uuid or self.uri

    def to_jxon(self) -> JxonDict:
        """Attribute-marked representation, in document attribute order."""
        obj: JxonDict = {"@title": self.title}
        if self.uuid is not None:
            obj["@uuid"] = self.uuid
        if self.uri is not None:
            obj["@uri"] = self.uri
        obj["@rel"] = self.rel
        obj["@type"] = self.type
        if self.data:
            obj["data"] = dict(self.data)
        return obj


@dataclass
class ServiceEntity:
    """Channel or section stored as an itemMeta service element."""
    qcode: str
    name: Optional[str] = None
    pubconstraint: Optional[str] = None
    why: Optional[str] = None

    @classmethod
    def from_mapping(cls, obj: Mapping[str, Any]) -> "ServiceEntity":
        return cls(
            qcode=obj.get("qcode"),
            name=obj.get("name"),
            pubconstraint=obj.get("pubconstraint") or obj.get("product"),
            why=obj.get("why")
        )

    def to_jxon(self) -> JxonDict:
        obj: JxonDict = {"@qcode": self.qcode}
        if self.pubconstraint:
            obj["@pubconstraint"] = self.pubconstraint
        if self.why:
            obj["@why"] = self.why
        if self.name is not None:
            obj["name"] = self.name
        return obj


@dataclass
class ExtProperty:
    type: str
    value: Optional[str]


@dataclass
class MetadataObject:
    """Id-keyed typed object stored under a metadata container."""
    id: str
    type: str
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, obj: Mapping[str, Any]) -> "MetadataObject":
        """
        Build from a plain (id, type) or attribute-marked (@id, @type) mapping.

        Raises:
            ValidationError: When the mapping is missing, or lacks id or type
        """
        if obj is None:
            raise ValidationError("Undefined value")
        if not isinstance(obj, Mapping):
            raise ValidationError(
                "Metadata object must be a mapping",
                context={"value": repr(obj)}
            )

        object_id = obj.get("@id", obj.get("id"))
        object_type = obj.get("@type", obj.get("type"))
        if object_id is None:
            raise ValidationError("Metadata object missing id attribute")
        if object_type is None:
            raise ValidationError(
                "Metadata object missing type attribute",
                context={"id": object_id}
            )

        data = {
            key: value for key, value in obj.items()
            if key not in ("@id", "id", "@type", "type")
        }
        return cls(id=str(object_id), type=str(object_type), data=data)

    def to_jxon(self) -> JxonDict:
        obj: JxonDict = {"@id": self.id, "@type": self.type}
        obj.update(self.data)
        return obj


@dataclass
class PubStatus:
    qcode: str


@dataclass
class PubWindow:
    """Publication window; each half is stored as its own ext property."""
    start: Optional[Dict[str, str]] = None
    stop: Optional[Dict[str, str]] = None


@dataclass
class ConceptRelation:
    """A concept related to another one, with its own broader chain."""
    relation: RelationKind
    name: Optional[str]
    type: Optional[str]
    uuid: Optional[str]
    broader: Optional["ConceptRelation"] = None


@dataclass
class LanguageParts:
    type: Optional[str]
    subtype: Optional[str]
    direction: Optional[str]


@dataclass
class ChangeEvent:
    """A committed change, as delivered to subscribers."""
    actor: str
    entity_type: str
    action: ChangeAction
    data: Any = None
    node: Optional[NodeInfo] = None

    def to_dict(self) -> Dict[str, Any]:
        event: Dict[str, Any] = {
            "actor": self.actor,
            "entityType": self.entity_type,
            "action": self.action.value,
            "data": self.data
        }
        if self.node is not None:
            event["node"] = self.node.to_dict()
        return event


# Error types
class NewsItemError(Exception):
    """Base error for news item metadata operations"""
    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NewsItemError):
    """Missing required field or wrong argument shape."""
    pass


class NotFoundError(NewsItemError):
    """Referenced identity is absent."""
    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        self.key = key
        super().__init__(message, context={"key": key, **(context or {})})


class InvariantViolation(NewsItemError):
    """Document holds a state the registry never produces."""
    pass


__all__: List[str] = [
    "ATTR_PREFIX",
    "VALUE_KEY",
    "NIL_UUID",
    "MAIN_CHANNEL",
    "XML_NS",
    "is_nil_uuid",
    "Section",
    "ChangeAction",
    "EntityType",
    "LinkType",
    "LinkRel",
    "ExtPropertyType",
    "ObjectType",
    "RelationKind",
    "NodeInfo",
    "LinkEntity",
    "ServiceEntity",
    "ExtProperty",
    "MetadataObject",
    "PubStatus",
    "PubWindow",
    "ConceptRelation",
    "LanguageParts",
    "ChangeEvent",
    "NewsItemError",
    "ValidationError",
    "NotFoundError",
    "InvariantViolation",
]
