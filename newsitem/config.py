# newsitem/config.py

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from dotenv import load_dotenv

load_dotenv()

PathLike = Union[str, Path]


def _env_flag(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class ConceptPropertyMap:
    """Keys under which concept objects carry their relational fields."""
    name: str = "ConceptName"
    broader: str = "ConceptBroaderRelation"
    associated_with: str = "ConceptAssociatedWithRelations"
    im_type_full: str = "ConceptImTypeFull"

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, str]]) -> "ConceptPropertyMap":
        """
        Build from a writer-style property map.

        Accepts either the writer keys (ConceptName, ConceptBroaderRelation,
        ConceptAssociatedWithRelations, ConceptImTypeFull) or the field names
        of this class.
        """
        if not mapping:
            return cls()
        if isinstance(mapping, cls):
            return mapping

        defaults = cls()
        return cls(
            name=mapping.get("ConceptName", mapping.get("name", defaults.name)),
            broader=mapping.get(
                "ConceptBroaderRelation",
                mapping.get("broader", defaults.broader)
            ),
            associated_with=mapping.get(
                "ConceptAssociatedWithRelations",
                mapping.get("associated_with", defaults.associated_with)
            ),
            im_type_full=mapping.get(
                "ConceptImTypeFull",
                mapping.get("im_type_full", defaults.im_type_full)
            )
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    log_file: Optional[Path] = None
    debug: bool = False

    def __post_init__(self):
        if isinstance(self.log_file, str):
            self.log_file = Path(self.log_file)
        if self.debug:
            self.level = "DEBUG"


@dataclass
class NewsItemConfig:
    """
    Main configuration for news item metadata access.
    """
    language: str = "sv"
    locale: str = "sv_SE"
    text_direction: str = "ltr"
    locales: Dict[str, str] = field(default_factory=lambda: {
        "sv": "sv_SE",
        "en": "en_GB",
        "nl": "nl_NL",
        "da": "da_DK",
        "fi": "fi_FI",
        "no": "nb_NO",
        "de": "de_DE",
        "ar": "ar_SA"
    })
    property_map: ConceptPropertyMap = field(default_factory=ConceptPropertyMap)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def locale_for_language(self, language_code: Optional[str]) -> str:
        """Resolve a two-character language code to a locale."""
        if language_code and language_code in self.locales:
            return self.locales[language_code]
        return self.locale

    @classmethod
    def from_environment(cls) -> "NewsItemConfig":
        """Create a NewsItemConfig instance from environment variables."""
        defaults = cls()
        log_file = os.getenv("NEWSITEM_LOG_FILE")

        return cls(
            language=os.getenv("NEWSITEM_LANGUAGE", defaults.language),
            locale=os.getenv("NEWSITEM_LOCALE", defaults.locale),
            text_direction=os.getenv(
                "NEWSITEM_TEXT_DIRECTION", defaults.text_direction
            ),
            logging=LoggingConfig(
                level=os.getenv("NEWSITEM_LOG_LEVEL", "INFO").upper(),
                log_file=Path(log_file) if log_file else None,
                debug=_env_flag("NEWSITEM_DEBUG")
            )
        )

    @classmethod
    def from_yaml(cls, path: PathLike) -> "NewsItemConfig":
        """
        Load a writer-style YAML configuration file.

        Args:
            path: Path to the YAML file

        Returns:
            NewsItemConfig: Configuration with environment values as fallback
        """
        config_path = Path(path)
        with open(config_path, "r", encoding="utf-8") as f:
            raw: Dict[str, Any] = yaml.safe_load(f) or {}

        base = cls.from_environment()
        logging_raw = raw.get("logging") or {}

        return cls(
            language=raw.get("language", base.language),
            locale=raw.get("locale", base.locale),
            text_direction=raw.get("textDirection", base.text_direction),
            locales={**base.locales, **(raw.get("locales") or {})},
            property_map=ConceptPropertyMap.from_mapping(raw.get("propertyMap")),
            logging=LoggingConfig(
                level=str(logging_raw.get("level", base.logging.level)).upper(),
                log_file=logging_raw.get("file", base.logging.log_file),
                debug=bool(logging_raw.get("debug", False))
            )
        )


def load_config(path: Optional[PathLike] = None) -> NewsItemConfig:
    """
    Load the configuration.

    A YAML file is used when a path is given or NEWSITEM_CONFIG is set,
    otherwise the environment alone.
    """
    config_path = path or os.getenv("NEWSITEM_CONFIG")
    if config_path:
        return NewsItemConfig.from_yaml(config_path)
    return NewsItemConfig.from_environment()
