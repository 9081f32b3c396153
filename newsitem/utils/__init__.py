# newsitem/utils/__init__.py
from . import codec, tree
from .logger import NewsItemLogger, log_mutation

__all__ = ['codec', 'tree', 'NewsItemLogger', 'log_mutation']
