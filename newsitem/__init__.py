# newsitem/__init__.py
from pathlib import Path
from typing import Optional, Union

from .config import ConceptPropertyMap, LoggingConfig, NewsItemConfig, load_config
from .event_manager import EventManager, EventType
from .models.types import (
    ChangeAction,
    ChangeEvent,
    EntityType,
    InvariantViolation,
    NewsItemError,
    NotFoundError,
    Section,
    ValidationError,
)
from .news_item import LocaleResolver, NewsItem, Source, parse_source
from .utils.logger import NewsItemLogger


def create_news_item(
    source: Optional[Source] = None,
    document=None,
    config_path: Optional[Union[str, Path]] = None,
    locale_resolver: Optional[LocaleResolver] = None
) -> NewsItem:
    """
    Create a news item with configuration, logging and events wired up.

    Args:
        source: NewsML text, used when no document is given
        document: Already parsed element or element tree
        config_path: YAML configuration file, defaults to NEWSITEM_CONFIG
        locale_resolver: Host function mapping a language code to a locale

    Returns:
        NewsItem: The configured news item
    """
    if source is None and document is None:
        raise ValidationError("Either source or document must be given")

    config = load_config(config_path)
    logger = NewsItemLogger(
        name="newsitem",
        level=config.logging.level,
        log_file=config.logging.log_file
    )
    event_manager = EventManager(logger=logger)

    try:
        if document is None:
            document = parse_source(source)
        news_item = NewsItem(
            document,
            event_manager=event_manager,
            config=config,
            locale_resolver=locale_resolver,
            logger=logger
        )
    except NewsItemError as e:
        logger.log_error(e, "news item")
        raise

    logger.debug(f"Created news item {news_item.get_guid()}")
    return news_item


__all__ = [
    "ChangeAction",
    "ChangeEvent",
    "ConceptPropertyMap",
    "EntityType",
    "EventManager",
    "EventType",
    "InvariantViolation",
    "LoggingConfig",
    "NewsItem",
    "NewsItemConfig",
    "NewsItemError",
    "NewsItemLogger",
    "NotFoundError",
    "Section",
    "ValidationError",
    "create_news_item",
    "load_config",
    "parse_source",
]
