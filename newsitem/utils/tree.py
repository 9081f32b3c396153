# newsitem/utils/tree.py
"""
Query and mutation primitives over the news item element tree.

Queries are typed search functions: a path of element local names plus an
optional predicate. The first path step matches any descendant of the
search root, every further step matches direct children only. Matching is
by local name, so callers never deal with the document namespace.
"""

from typing import Callable, List, Optional, Sequence

from lxml import etree
from lxml.etree import _Element

from ..models.types import XML_NS

Predicate = Callable[[_Element], bool]


def is_element(node) -> bool:
    """Comments and processing instructions carry a non-string tag."""
    return isinstance(node.tag, str)


def local_name(node: _Element) -> str:
    return etree.QName(node).localname


def namespace_of(node: _Element) -> Optional[str]:
    return etree.QName(node).namespace


def _matches(node, name: str) -> bool:
    return is_element(node) and local_name(node) == name


def _qualify(namespace: Optional[str], name: str) -> str:
    return f"{{{namespace}}}{name}" if namespace else name


def _attr_key(name: str) -> str:
    """Map xml: prefixed attribute names to Clark notation."""
    if name.startswith("xml:"):
        return f"{{{XML_NS}}}{name[4:]}"
    return name


def find_all(
    root: _Element,
    path: Sequence[str],
    predicate: Optional[Predicate] = None
) -> List[_Element]:
    """
    Find all elements along path, in document order.

    Returns an empty list when nothing matches.
    """
    if root is None or not path:
        return []

    first, *rest = path
    current = [node for node in root.iterdescendants() if _matches(node, first)]

    for step in rest:
        current = [
            child
            for node in current
            for child in node
            if _matches(child, step)
        ]

    if predicate is not None:
        current = [node for node in current if predicate(node)]

    return current


def find_one(
    root: _Element,
    path: Sequence[str],
    predicate: Optional[Predicate] = None
) -> Optional[_Element]:
    """Find the first element along path, or None."""
    found = find_all(root, path, predicate)
    return found[0] if found else None


def find_child(node: _Element, name: str) -> Optional[_Element]:
    """First direct child with the given local name."""
    for child in node:
        if _matches(child, name):
            return child
    return None


def attr_equals(name: str, value: Optional[str]) -> Predicate:
    """Predicate matching an exact attribute value."""
    key = _attr_key(name)
    return lambda node: value is not None and node.get(key) == value


def attrs_equal(**expected: Optional[str]) -> Predicate:
    """Predicate matching several exact attribute values."""
    def predicate(node: _Element) -> bool:
        return all(
            value is not None and node.get(_attr_key(name)) == value
            for name, value in expected.items()
        )
    return predicate


def create_element(context: _Element, name: str) -> _Element:
    """
    Create an element in the namespace of context.

    The element is not attached; the namespace is never invented, it is
    always taken from an existing element.
    """
    return context.makeelement(
        _qualify(namespace_of(context), name),
        nsmap=context.nsmap
    )


def create_child(parent: _Element, name: str) -> _Element:
    """Create an element in the namespace of parent and append it."""
    child = create_element(parent, name)
    append(parent, child)
    return child


def append(parent: _Element, child: _Element) -> _Element:
    parent.append(child)
    return child


def detach(node: Optional[_Element]) -> Optional[_Element]:
    """Remove node from its parent. No-op for detached nodes."""
    if node is None:
        return None
    parent = node.getparent()
    if parent is not None:
        parent.remove(node)
    return node


def get_attr(node: _Element, name: str) -> Optional[str]:
    return node.get(_attr_key(name))


def set_attr(node: _Element, name: str, value) -> None:
    if isinstance(value, bool):
        value = "true" if value else "false"
    node.set(_attr_key(name), str(value))


def remove_attr(node: _Element, name: str) -> None:
    key = _attr_key(name)
    if key in node.attrib:
        del node.attrib[key]


def get_text(node: _Element) -> str:
    """Text content of node and all its descendants."""
    return "".join(node.itertext())


def set_text(node: _Element, value: str) -> None:
    """Replace all content of node with a single text value."""
    for child in list(node):
        node.remove(child)
    node.text = value
