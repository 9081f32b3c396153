# newsitem/metadata/ext_properties.py
"""Generic type/value pairs stored as ext property elements of a section."""

from typing import Any, Dict, Optional, Union

from lxml.etree import _Element

from ..base_store import BaseStore
from ..models.types import ChangeAction, NodeInfo, Section, ValidationError
from ..utils import codec, tree
from ..utils.logger import log_mutation

SectionName = Union[str, Section]


class ExtPropertyStore(BaseStore):
    """
    Store for itemMetaExtProperty and contentMetaExtProperty elements.

    Each type occurs at most once per section.
    """

    def get_raw(self, section: SectionName, ext_type: str) -> Optional[_Element]:
        """Get the ext property element of a type, or None."""
        section = Section.from_name(section)
        return tree.find_one(
            self.root,
            (section.value, section.ext_property_name),
            tree.attr_equals("type", ext_type)
        )

    def get(self, section: SectionName, ext_type: str) -> Optional[str]:
        """Get the value of an ext property, or None if absent."""
        node = self.get_raw(section, ext_type)
        if node is None:
            return None
        return tree.get_attr(node, "value")

    def put(self, section: SectionName, ext_type: str, value: Any) -> _Element:
        """
        Create or update an ext property without reporting the change.

        Raises:
            ValidationError: For an unknown section or a None value
        """
        section = Section.from_name(section)
        if value is None:
            raise ValidationError(
                "Undefined value",
                context={"section": section.value, "type": ext_type}
            )

        node = self.get_raw(section, ext_type)
        if node is not None:
            tree.set_attr(node, "value", value)
            return node

        section_node = self.section_node(section, create=True)
        node = tree.create_child(section_node, section.ext_property_name)
        tree.set_attr(node, "type", ext_type)
        tree.set_attr(node, "value", value)
        return node

    def pop(self, section: SectionName, ext_type: str) -> Optional[Dict[str, Any]]:
        """Detach an ext property without reporting; returns its snapshot."""
        node = self.get_raw(section, ext_type)
        if node is None:
            return None

        snapshot = codec.decode(node)
        tree.detach(node)
        return snapshot

    @log_mutation("extProperty")
    def set(self, actor: str, section: SectionName, ext_type: str, value: Any) -> _Element:
        """Create or update an ext property and report it."""
        section = Section.from_name(section)
        node = self.put(section, ext_type, value)

        self.event_manager.notify(
            actor,
            section.ext_property_name,
            ChangeAction.SET,
            data=codec.decode(node),
            node=NodeInfo(type=ext_type)
        )
        return node

    @log_mutation("extProperty")
    def delete(self, actor: str, section: SectionName, ext_type: str) -> bool:
        """
        Delete an ext property. No-op when absent.

        Returns:
            bool: True if a property was removed
        """
        section = Section.from_name(section)
        snapshot = self.pop(section, ext_type)
        if snapshot is None:
            return False

        self.event_manager.notify(
            actor,
            section.ext_property_name,
            ChangeAction.DELETE,
            data=snapshot
        )
        return True
