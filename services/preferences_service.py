import logging
import json
import os
from typing import Any, Dict, Optional

from .interfaces import IPreferencesService

logger = logging.getLogger(__name__)

# Путь к файлу настроек (переопределяется через CALENDAR_PREFERENCES_FILE)
PREFERENCES_FILE = "calendar_preferences.json"


class JsonFilePreferencesService(IPreferencesService):
    """
    Реализация сервиса настроек, использующая JSON файл для хранения.
    """

    _preferences: Dict[str, Any]
    _is_loaded: bool = False

    def __init__(self, preferences_file_path: str = PREFERENCES_FILE):
        """
        Инициализирует сервис. Загрузка происходит лениво при первом доступе
        или принудительно через вызов load().
        """
        self._preferences_file_path = preferences_file_path
        self._preferences = {}
        self._is_loaded = False
        logger.debug(
            f"PreferencesService initialized with file: {self._preferences_file_path}"
        )

    def load(self) -> None:
        """Загружает настройки из JSON файла, если они еще не загружены."""
        if self._is_loaded:
            return

        logger.debug(f"Attempting to load preferences from {self._preferences_file_path}")
        if not os.path.exists(self._preferences_file_path):
            logger.info(
                f"Preferences file not found at {self._preferences_file_path}. Using defaults."
            )
            self._preferences = {}
            self._is_loaded = True
            return

        try:
            with open(self._preferences_file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if isinstance(data, dict):
                self._preferences = data
                logger.info(
                    f"Loaded {len(self._preferences)} preferences from {self._preferences_file_path}"
                )
            else:
                logger.warning(
                    f"Preferences file {self._preferences_file_path} has invalid format (not an object). Using defaults."
                )
                self._preferences = {}
        except json.JSONDecodeError:
            logger.error(
                f"Error decoding preferences file {self._preferences_file_path}. Using defaults.",
                exc_info=True,
            )
            self._preferences = {}
        except OSError as e:
            logger.error(
                f"Error reading preferences file {self._preferences_file_path}: {e}. Using defaults.",
                exc_info=True,
            )
            self._preferences = {}
        finally:
            self._is_loaded = True

    def _save(self) -> None:
        """Сохраняет текущие настройки в JSON файл."""
        try:
            dir_name = os.path.dirname(self._preferences_file_path)
            if dir_name:
                os.makedirs(dir_name, exist_ok=True)

            with open(self._preferences_file_path, "w", encoding="utf-8") as f:
                json.dump(self._preferences, f, indent=2, ensure_ascii=False)
            logger.debug(f"Saved preferences to {self._preferences_file_path}")
        except OSError as e:
            logger.error(
                f"Error saving preferences file {self._preferences_file_path}: {e}",
                exc_info=True,
            )

    def get(self, key: str, default: Optional[Any] = None) -> Optional[Any]:
        if not self._is_loaded:
            self.load()
        return self._preferences.get(key, default)

    def set(self, key: str, value: Any) -> None:
        if not self._is_loaded:
            self.load()
        self._preferences[key] = value
        self._save()
