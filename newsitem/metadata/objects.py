# newsitem/metadata/objects.py

from typing import Any, Dict, List, Mapping, Optional

from lxml.etree import _Element

from ..base_store import BaseStore
from ..models.types import (
    ChangeAction,
    EntityType,
    MetadataObject,
    ObjectType,
    Section,
    ValidationError,
)
from ..utils import codec, tree
from ..utils.logger import log_mutation

OBJECT_PATH = (Section.CONTENT_META.value, "metadata", "object")


class MetadataObjectStore(BaseStore):
    """
    Store for id-keyed typed objects under contentMeta/metadata.

    No two objects with the same id ever coexist: setting an object replaces
    any existing one with that id.
    """

    def _object_nodes(self, **attrs: str) -> List[_Element]:
        return tree.find_all(self.root, OBJECT_PATH, tree.attrs_equal(**attrs))

    def get_by_type(self, object_type: str) -> List[Dict[str, Any]]:
        """Get all objects of a type as {id, type, data} dictionaries."""
        nodes = self._object_nodes(type=object_type)
        if not nodes:
            self.logger.debug(f"Content meta data objects not found: {object_type}")
        return [codec.decode_normalized(node) for node in nodes]

    def get_by_id(self, object_id: str) -> Optional[Dict[str, Any]]:
        """Get one object by id, or None."""
        nodes = self._object_nodes(id=object_id)
        if not nodes:
            self.logger.debug(f"Content meta data object not found: {object_id}")
            return None
        return codec.decode_normalized(nodes[0])

    def _container(self) -> _Element:
        return self.section_child(Section.CONTENT_META, "metadata", create=True)

    def put(self, obj: Mapping[str, Any]) -> _Element:
        """
        Insert an object, replacing any object with the same id.

        Raises:
            ValidationError: If the object is missing or lacks id or type
        """
        metadata_object = MetadataObject.from_mapping(obj)
        container = self._container()

        for existing in self._object_nodes(id=metadata_object.id):
            tree.detach(existing)

        node = tree.create_element(container, "object")
        codec.populate(node, metadata_object.to_jxon())
        return tree.append(container, node)

    def pop_by_type(self, object_type: str) -> List[Dict[str, Any]]:
        """Detach every object of a type without reporting; returns snapshots."""
        removed = []
        for node in self._object_nodes(type=object_type):
            removed.append(codec.decode_normalized(node))
            tree.detach(node)
        return removed

    @log_mutation(EntityType.CONTENT_META_OBJECT.value)
    def set(self, actor: str, obj: Mapping[str, Any]) -> _Element:
        """Insert or replace an object and report it."""
        node = self.put(obj)
        self.event_manager.notify(
            actor,
            EntityType.CONTENT_META_OBJECT,
            ChangeAction.SET,
            data=dict(obj)
        )
        return node

    @log_mutation(EntityType.CONTENT_META_OBJECT.value)
    def remove(self, actor: str, object_id: str) -> bool:
        """
        Remove an object by id. No-op when absent.

        Returns:
            bool: True if an object was removed
        """
        nodes = self._object_nodes(id=object_id)
        if not nodes:
            return False

        for node in nodes:
            tree.detach(node)

        self.event_manager.notify(
            actor,
            EntityType.CONTENT_META_OBJECT,
            ChangeAction.DELETE,
            data=object_id
        )
        return True

    # News priority is the single object of type x-im/newsvalue
    def get_news_priority(self) -> Optional[Dict[str, Any]]:
        found = self.get_by_type(ObjectType.NEWS_VALUE)
        return found[0] if found else None

    @log_mutation(EntityType.NEWS_PRIORITY.value)
    def create_news_priority(self, actor: str, news_priority: Mapping[str, Any]) -> _Element:
        """Add a news priority object."""
        node = self.put(self._news_priority_object(news_priority))
        self.event_manager.notify(
            actor,
            EntityType.NEWS_PRIORITY,
            ChangeAction.ADD,
            data=self.get_news_priority()
        )
        return node

    @log_mutation(EntityType.NEWS_PRIORITY.value)
    def set_news_priority(self, actor: str, news_priority: Mapping[str, Any]) -> _Element:
        """Replace any existing news priority object."""
        if news_priority is None:
            raise ValidationError("Undefined value", context={"type": ObjectType.NEWS_VALUE})

        obj = self._news_priority_object(news_priority)
        self.pop_by_type(ObjectType.NEWS_VALUE)
        node = self.put(obj)

        self.event_manager.notify(
            actor,
            EntityType.NEWS_PRIORITY,
            ChangeAction.UPDATE,
            data=self.get_news_priority()
        )
        return node

    def _news_priority_object(self, news_priority: Mapping[str, Any]) -> Dict[str, Any]:
        if not isinstance(news_priority, Mapping):
            raise ValidationError(
                "News priority must be a mapping",
                context={"value": repr(news_priority)}
            )
        obj = dict(news_priority)
        if "@type" not in obj and "type" not in obj:
            obj["type"] = ObjectType.NEWS_VALUE
        return obj
