from .types import (
    ATTR_PREFIX,
    VALUE_KEY,
    NIL_UUID,
    MAIN_CHANNEL,
    is_nil_uuid,
    Section,
    ChangeAction,
    EntityType,
    LinkType,
    LinkRel,
    ExtPropertyType,
    ObjectType,
    RelationKind,
    NodeInfo,
    LinkEntity,
    ServiceEntity,
    ExtProperty,
    MetadataObject,
    PubStatus,
    PubWindow,
    ConceptRelation,
    LanguageParts,
    ChangeEvent,
    NewsItemError,
    ValidationError,
    NotFoundError,
    InvariantViolation
)
