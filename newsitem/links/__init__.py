# newsitem/links/__init__.py
from .registry import LinkRegistry
from .services import ServiceRegistry
from .concepts import flatten_relations, parse_relations

__all__ = ['LinkRegistry', 'ServiceRegistry', 'flatten_relations', 'parse_relations']
