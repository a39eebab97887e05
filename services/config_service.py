import logging
from typing import Dict, Optional, Any
from .interfaces import IConfigService

logger = logging.getLogger(__name__)

TRUE_VALUES = ("1", "true", "yes", "on")


class ConfigServiceImpl(IConfigService):
    """Реализация сервиса конфигурации, читающая из словаря."""

    def __init__(self, config_data: Dict[str, Optional[Any]]):
        self._config = config_data
        logger.debug("ConfigService initialized.")

    def get(self, key: str, default: Optional[Any] = None) -> Optional[Any]:
        return self._config.get(key, default)

    def get_str(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self.get(key, default)
        return str(value) if value is not None else None

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key)
        if isinstance(value, bool):
            return value
        elif value is None:
            return default
        return str(value).strip().lower() in TRUE_VALUES

    def get_events_dir(self) -> Optional[str]:
        return self.get_str("CALENDAR_EVENTS_DIR")

    def get_preferences_file(self) -> str:
        # load_app_config always provides a default
        return self.get_str("CALENDAR_PREFERENCES_FILE", "calendar_preferences.json")  # type: ignore

    def get_log_level(self) -> str:
        return self.get_str("LOG_LEVEL", "INFO").upper()  # type: ignore

    def watch_events_dir_enabled(self) -> bool:
        return self.get_bool("CALENDAR_WATCH_EVENTS_DIR", default=False)
