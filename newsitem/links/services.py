# newsitem/links/services.py
"""Channels and sections, stored as itemMeta service elements."""

from typing import Any, Dict, List, Mapping, Optional

from lxml.etree import _Element

from ..base_store import BaseStore
from ..models.types import (
    ChangeAction,
    EntityType,
    InvariantViolation,
    MAIN_CHANNEL,
    Section,
    ServiceEntity,
    ValidationError,
)
from ..utils import codec, tree
from ..utils.logger import log_mutation

CHANNEL_PREFIX = "imchn"
SECTION_PREFIX = "imsection"


class ServiceRegistry(BaseStore):
    """
    Registry for channel and section services.

    Services are told apart by their qcode: channels contain imchn, sections
    imsection. At most one channel is the main channel and at most one
    section exists. Removing a service that is not there is silently ignored.
    """

    def _service_nodes(self, prefix: Optional[str] = None) -> List[_Element]:
        def predicate(node: _Element) -> bool:
            qcode = tree.get_attr(node, "qcode")
            return qcode is not None and (prefix is None or prefix in qcode)

        return tree.find_all(self.root, (Section.ITEM_META.value, "service"), predicate)

    def _find_service(self, qcode: Optional[str]) -> Optional[_Element]:
        return tree.find_one(
            self.root,
            (Section.ITEM_META.value, "service"),
            tree.attr_equals("qcode", qcode)
        )

    def _services(self, prefix: str) -> List[Dict[str, Any]]:
        return [codec.decode_normalized(node) for node in self._service_nodes(prefix)]

    def _append_service(self, service: ServiceEntity) -> _Element:
        item_meta = self.section_node(Section.ITEM_META, create=True)
        node = tree.create_element(item_meta, "service")
        codec.populate(node, service.to_jxon())
        return tree.append(item_meta, node)

    @staticmethod
    def _require_mapping(obj: Any, entity: str) -> None:
        if not isinstance(obj, Mapping):
            raise ValidationError(
                f"Only one {entity} object at a time is supported",
                context={"value": repr(obj)}
            )
        if not obj.get("qcode"):
            raise ValidationError(f"The {entity} has no qcode", context={"value": dict(obj)})

    def _remove(
        self,
        actor: str,
        entity_type: EntityType,
        service: Mapping[str, Any],
        mute_event: bool
    ) -> bool:
        node = self._find_service(service.get("qcode"))
        if node is None:
            return False

        tree.detach(node)
        if not mute_event:
            self.event_manager.notify(
                actor,
                entity_type,
                ChangeAction.DELETE,
                data=dict(service)
            )
        return True

    # Channels
    def get_channels(self) -> List[Dict[str, Any]]:
        return self._services(CHANNEL_PREFIX)

    def get_main_channel(self) -> Optional[Dict[str, Any]]:
        node = tree.find_one(
            self.root,
            (Section.ITEM_META.value, "service"),
            tree.attr_equals("why", MAIN_CHANNEL)
        )
        return codec.decode_normalized(node) if node is not None else None

    @log_mutation(EntityType.CHANNEL.value)
    def add_channel(self, actor: str, channel: Mapping[str, Any], as_main: bool = False) -> _Element:
        """
        Add a channel, replacing any channel with the same qcode.

        With as_main, the main channel flag is moved from every other
        service to the new channel.

        Raises:
            ValidationError: If channel is not a single mapping with a qcode
        """
        self._require_mapping(channel, "channel")
        self._remove(actor, EntityType.CHANNEL, channel, mute_event=True)

        if as_main:
            for node in self._service_nodes():
                if tree.get_attr(node, "why") == MAIN_CHANNEL:
                    tree.remove_attr(node, "why")

        node = self._append_service(ServiceEntity(
            qcode=channel["qcode"],
            why=MAIN_CHANNEL if as_main else None
        ))
        self.event_manager.notify(
            actor,
            EntityType.CHANNEL,
            ChangeAction.ADD,
            data=dict(channel)
        )
        return node

    @log_mutation(EntityType.CHANNEL.value)
    def remove_channel(self, actor: str, channel: Mapping[str, Any], mute_event: bool = False) -> bool:
        return self._remove(actor, EntityType.CHANNEL, channel, mute_event)

    # Sections
    def get_sections(self) -> List[Dict[str, Any]]:
        return self._services(SECTION_PREFIX)

    def get_section(self) -> Optional[Dict[str, Any]]:
        """
        Get the section of the article, or None.

        Raises:
            InvariantViolation: If more than one section is found
        """
        sections = self.get_sections()
        if len(sections) > 1:
            raise InvariantViolation(
                "Only one section is allowed on an article",
                context={"qcodes": [section.get("qcode") for section in sections]}
            )
        return sections[0] if sections else None

    @log_mutation(EntityType.SECTION.value)
    def update_section(self, actor: str, section: Mapping[str, Any]) -> _Element:
        """
        Replace the section of the article.

        A product given with the section is stored as its pubconstraint.
        """
        self._require_mapping(section, "section")

        current = self.get_section()
        if current is not None:
            self.remove_section(actor, current)

        node = self._append_service(ServiceEntity.from_mapping(section))
        self.event_manager.notify(
            actor,
            EntityType.SECTION,
            ChangeAction.UPDATE,
            data=dict(section)
        )
        return node

    @log_mutation(EntityType.SECTION.value)
    def remove_section(self, actor: str, section: Mapping[str, Any], mute_event: bool = False) -> bool:
        return self._remove(actor, EntityType.SECTION, section, mute_event)
