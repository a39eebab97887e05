import os
import logging
from dotenv import load_dotenv
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# Загрузка .env файла остается для локальной разработки
load_dotenv()

DEFAULT_PREFERENCES_FILE = "calendar_preferences.json"

_loaded_config: Optional[Dict[str, Any]] = None


def load_app_config() -> Dict[str, Any]:
    """
    Загружает конфигурацию из переменных окружения и возвращает ее в виде словаря.
    Выполняет базовую валидацию наличия ключевых переменных.
    """
    global _loaded_config
    if _loaded_config is not None:
        return _loaded_config

    config_data = {
        # --- Storage Settings ---
        "CALENDAR_EVENTS_DIR": os.getenv("CALENDAR_EVENTS_DIR"),
        "CALENDAR_PREFERENCES_FILE": os.getenv(
            "CALENDAR_PREFERENCES_FILE", DEFAULT_PREFERENCES_FILE
        ),
        "CALENDAR_WATCH_EVENTS_DIR": os.getenv("CALENDAR_WATCH_EVENTS_DIR", "false"),
        # --- Application Settings ---
        "LOG_LEVEL": os.getenv("LOG_LEVEL", "INFO").upper(),
    }

    if not config_data["CALENDAR_EVENTS_DIR"]:
        logger.warning(
            "CALENDAR_EVENTS_DIR environment variable not set. Event storage will be unavailable."
        )

    _loaded_config = config_data
    logger.info("Application configuration loaded.")
    return _loaded_config


def reset_app_config() -> None:
    """Сбрасывает кэш конфигурации (следующий вызов перечитает окружение)."""
    global _loaded_config
    _loaded_config = None
