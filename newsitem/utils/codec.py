# newsitem/utils/codec.py
"""
Mapping between attribute-marked dictionaries and element subtrees.

Attributes are keys prefixed with ``@``. Child elements holding only text
become scalar keys, child elements with structure become nested
dictionaries. Repeated sibling elements collapse into a list on decode, so
encode/decode only round-trips for shapes without repeated names.
Namespaced attributes keep the prefix declared for their namespace
(``@xlink:href``); writing one back requires that prefix to be in scope.
"""

from typing import Any, Dict, Iterable, Mapping, Optional

from lxml import etree
from lxml.etree import _Element

from ..models.types import ATTR_PREFIX, VALUE_KEY, XML_NS, JxonDict, ValidationError
from .tree import create_element, detach, is_element, local_name, namespace_of


def _attr_name(element: _Element, name: str) -> str:
    qname = etree.QName(name)
    if qname.namespace is None:
        return qname.localname
    if qname.namespace == XML_NS:
        return f"xml:{qname.localname}"

    for prefix, uri in element.nsmap.items():
        if prefix and uri == qname.namespace:
            return f"{prefix}:{qname.localname}"
    return qname.localname


def _attr_key(element: _Element, name: str) -> str:
    """Resolve a prefixed attribute name against the namespaces in scope."""
    prefix, sep, local = name.partition(":")
    if not sep:
        return name
    if prefix == "xml":
        return f"{{{XML_NS}}}{local}"

    namespace = element.nsmap.get(prefix)
    if namespace is None:
        raise ValidationError(
            f"Unknown namespace prefix in attribute: {name}",
            context={"element": local_name(element)}
        )
    return f"{{{namespace}}}{local}"


def _to_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _is_leaf(node: _Element) -> bool:
    return not node.attrib and not any(is_element(child) for child in node)


def _decode_value(node: _Element) -> Any:
    if _is_leaf(node):
        return node.text or ""
    return decode(node)


def decode(element: _Element) -> JxonDict:
    """
    Decode an element into an attribute-marked dictionary.

    Args:
        element: Element to decode

    Returns:
        Dict with ``@name`` keys for attributes and plain keys for children
    """
    result: JxonDict = {}

    for name, value in element.attrib.items():
        result[ATTR_PREFIX + _attr_name(element, name)] = value

    for child in element:
        if not is_element(child):
            continue

        key = local_name(child)
        value = _decode_value(child)
        if key in result:
            existing = result[key]
            if not isinstance(existing, list):
                result[key] = [existing]
            result[key].append(value)
        else:
            result[key] = value

    text = element.text.strip() if element.text else ""
    if text:
        result[VALUE_KEY] = element.text

    return result


def populate(element: _Element, obj: Mapping[str, Any]) -> _Element:
    """Fill an existing element from a dictionary; None values are skipped."""
    namespace = namespace_of(element)

    for key, value in obj.items():
        if value is None:
            continue

        if key.startswith(ATTR_PREFIX):
            element.set(_attr_key(element, key[len(ATTR_PREFIX):]), _to_text(value))
        elif key == VALUE_KEY:
            element.text = _to_text(value)
        elif isinstance(value, (list, tuple)):
            for item in value:
                _append_value(element, namespace, key, item)
        else:
            _append_value(element, namespace, key, value)

    return element


def _append_value(parent: _Element, namespace: Optional[str], key: str, value: Any) -> None:
    tag = f"{{{namespace}}}{key}" if namespace else key
    child = etree.SubElement(parent, tag)
    if isinstance(value, Mapping):
        populate(child, value)
    else:
        child.text = _to_text(value)


def encode(
    obj: Mapping[str, Any],
    namespace: Optional[str] = None,
    root_name: str = "object",
    nsmap: Optional[Mapping[Optional[str], str]] = None
) -> _Element:
    """
    Encode a dictionary into a detached element named root_name.

    Args:
        obj: Attribute-marked dictionary
        namespace: Namespace URI for the element and all its descendants
        root_name: Local name of the created element
        nsmap: Extra prefix declarations for prefixed attribute names

    Returns:
        The new element
    """
    declared = dict(nsmap or {})
    if namespace:
        declared[None] = namespace
        element = etree.Element(f"{{{namespace}}}{root_name}", nsmap=declared)
    else:
        element = etree.Element(root_name, nsmap=declared or None)
    return populate(element, obj)


def replace_child(
    parent: _Element,
    name: str,
    obj: Optional[Mapping[str, Any]]
) -> Optional[_Element]:
    """
    Replace every child called name with a fresh one built from obj.

    Old and new content are never merged. An empty obj leaves no child.
    """
    for child in list(parent):
        if is_element(child) and local_name(child) == name:
            detach(child)

    if not obj:
        return None

    child = create_element(parent, name)
    populate(child, obj)
    parent.append(child)
    return child


def normalize(obj: Mapping[str, Any]) -> Dict[str, Any]:
    """Strip the attribute marker from top-level keys."""
    return {
        (key[len(ATTR_PREFIX):] if key.startswith(ATTR_PREFIX) else key): value
        for key, value in obj.items()
    }


def mark_attributes(obj: Mapping[str, Any], names: Iterable[str]) -> JxonDict:
    """Mark the given plain top-level keys as attributes."""
    attribute_names = set(names)
    return {
        (ATTR_PREFIX + key if key in attribute_names else key): value
        for key, value in obj.items()
    }


def decode_normalized(element: _Element) -> Dict[str, Any]:
    """Decode an element into a flat dictionary without attribute markers."""
    return normalize(decode(element))
