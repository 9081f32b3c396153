# newsitem/base_store.py

from typing import Optional

from lxml.etree import _Element

from .config import NewsItemConfig
from .event_manager import EventManager
from .models.types import Section
from .utils import tree
from .utils.logger import NewsItemLogger


class BaseStore:
    """Base for components that read and mutate one news item tree."""

    def __init__(
        self,
        root: _Element,
        event_manager: EventManager,
        config: Optional[NewsItemConfig] = None,
        logger: Optional[NewsItemLogger] = None
    ):
        self.root = root
        self.event_manager = event_manager
        self.config = config or NewsItemConfig()
        self.logger = logger or NewsItemLogger(name=type(self).__module__)

    def section_node(self, section: Section, create: bool = False) -> Optional[_Element]:
        """
        Get a section element, optionally creating it under the document root.
        """
        node = tree.find_one(self.root, (section.value,))
        if node is None and create:
            node = tree.create_child(self.root, section.value)
            self.logger.debug(f"Created missing {section.value} section")
        return node

    def section_child(
        self,
        section: Section,
        name: str,
        create: bool = False
    ) -> Optional[_Element]:
        """Get a direct child container of a section, optionally creating it."""
        section_node = self.section_node(section, create=create)
        if section_node is None:
            return None

        node = tree.find_child(section_node, name)
        if node is None and create:
            node = tree.create_child(section_node, name)
        return node
