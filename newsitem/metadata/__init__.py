"""
Metadata stores for news item documents.
Handles ext properties and id-keyed metadata objects with change notification.
"""

from .ext_properties import ExtPropertyStore
from .objects import MetadataObjectStore

__all__ = ['ExtPropertyStore', 'MetadataObjectStore']
