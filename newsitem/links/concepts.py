# newsitem/links/concepts.py
"""
Concept relations and geo data nested inside concept links.

A concept object carries its broader concept and its associated-with
concepts under configurable keys; each related concept may in turn carry
its own broader concept. Relations are parsed into typed ConceptRelation
chains, flattened into an ordered list and written as sibling link
elements of a fresh nested links container.
"""

from typing import Any, Iterable, List, Mapping, Optional, Sequence

from lxml.etree import _Element

from ..config import ConceptPropertyMap
from ..models.types import ConceptRelation, RelationKind, ValidationError
from ..utils import tree


def _parse_relation(
    kind: RelationKind,
    obj: Any,
    property_map: ConceptPropertyMap
) -> ConceptRelation:
    if not isinstance(obj, Mapping):
        raise ValidationError(
            "Concept relation must be a mapping",
            context={"relation": kind.value, "value": repr(obj)}
        )

    broader = obj.get(property_map.broader)
    return ConceptRelation(
        relation=kind,
        name=obj.get(property_map.name),
        type=obj.get(property_map.im_type_full),
        uuid=obj.get("uuid"),
        broader=(
            _parse_relation(RelationKind.BROADER, broader, property_map)
            if broader else None
        )
    )


def parse_relations(
    concept: Mapping[str, Any],
    property_map: Optional[ConceptPropertyMap] = None
) -> List[ConceptRelation]:
    """
    Parse the broader and associated-with relations of a concept.

    The associated-with entry may be a list of concepts or a single one.

    Returns:
        List of relation chains: the broader chain first, then one chain per
        associated concept
    """
    property_map = property_map or ConceptPropertyMap()
    relations: List[ConceptRelation] = []

    broader = concept.get(property_map.broader)
    if broader:
        relations.append(
            _parse_relation(RelationKind.BROADER, broader, property_map)
        )

    associated = concept.get(property_map.associated_with)
    if associated:
        entries = associated if isinstance(associated, (list, tuple)) else [associated]
        relations.extend(
            _parse_relation(RelationKind.ASSOCIATED_WITH, entry, property_map)
            for entry in entries
            if entry
        )

    return relations


def flatten_relations(relations: Iterable[ConceptRelation]) -> List[ConceptRelation]:
    """Flatten relation chains: each relation followed by its broader chain."""
    flat: List[ConceptRelation] = []
    for relation in relations:
        current: Optional[ConceptRelation] = relation
        while current is not None:
            flat.append(current)
            current = current.broader
    return flat


def write_relations(concept_node: _Element, relations: Sequence[ConceptRelation]) -> Optional[_Element]:
    """
    Replace the nested links container of a concept link.

    Any existing container is removed; a new one is only created when there
    are relations to write.
    """
    existing = tree.find_child(concept_node, "links")
    tree.detach(existing)

    flat = flatten_relations(relations)
    if not flat:
        return None

    links_node = tree.create_child(concept_node, "links")
    for relation in flat:
        link = tree.create_child(links_node, "link")
        tree.set_attr(link, "rel", relation.relation.value)
        for name, value in (
            ("title", relation.name),
            ("type", relation.type),
            ("uuid", relation.uuid)
        ):
            if value is not None:
                tree.set_attr(link, name, value)

    return links_node


def write_geo_data(
    links_node: _Element,
    polygons: Sequence[Mapping[str, Any]],
    property_map: Optional[ConceptPropertyMap] = None
) -> _Element:
    """Append a related-geo link whose data lists each polygon uuid."""
    property_map = property_map or ConceptPropertyMap()

    geo_link = tree.create_child(links_node, "link")
    tree.set_attr(geo_link, "rel", "related-geo")
    data = tree.create_child(geo_link, "data")

    for polygon in polygons:
        uuid_node = tree.create_child(data, "uuid")
        title = polygon.get(property_map.name, polygon.get("title"))
        if title is not None:
            tree.set_attr(uuid_node, "title", title)
        uuid_node.text = polygon.get("uuid")

    return geo_link
