from typing import (
    Protocol,
    Optional,
    List,
    Any,
    Callable,
    Mapping,
    TypedDict,
)

# --- Структура события ---
# Ключи совпадают с ключами frontmatter в файле события.
# Ключи с "_" - служебные, в файл не записываются.
CalendarEvent = TypedDict(
    "CalendarEvent",
    {
        "id": str,
        "title": str,
        "startDate": str,  # YYYY-MM-DD
        "endDate": str,  # YYYY-MM-DD
        "startTime": Optional[str],  # HH:MM
        "endTime": Optional[str],  # HH:MM
        "allDay": bool,
        "color": str,
        "type": str,
        "recurrence": str,
        "recurrenceEnd": Optional[str],
        "recurrenceInterval": int,
        "description": str,
        "_filename": str,
        # Projections only
        "_isRecurrenceInstance": bool,
        "_originalId": str,
        "_instanceDate": str,
        "_isHoliday": bool,
        "_holidayName": str,
    },
    total=False,
)

# --- Типы колбэков ---
ChangeCallback = Callable[[List[CalendarEvent]], None]  # Получает видимые события
Unsubscribe = Callable[[], None]
FileEventData = TypedDict(
    "FileEventData", {"event_type": str, "src_path": str, "is_directory": bool}
)
FileEventCallback = Callable[[FileEventData], None]


# --- Интерфейс Сервиса Конфигурации ---
class IConfigService(Protocol):
    """Интерфейс для доступа к конфигурационным параметрам приложения."""

    def get(self, key: str, default: Optional[Any] = None) -> Optional[Any]: ...
    def get_str(self, key: str, default: Optional[str] = None) -> Optional[str]: ...
    def get_bool(self, key: str, default: bool = False) -> bool: ...
    def get_events_dir(self) -> Optional[str]: ...
    def get_preferences_file(self) -> str: ...
    def get_log_level(self) -> str: ...
    def watch_events_dir_enabled(self) -> bool: ...


# --- Интерфейс Файлового Хранилища Событий ---
class IFileStoreService(Protocol):
    """
    Плоское хранилище "ключ -> текст" для файлов событий.
    Все методы выбрасывают StoreAccessError, если каталог не задан.
    """

    def has_access(self) -> bool:
        """Привязано ли хранилище к каталогу."""
        ...

    def get_root(self) -> Optional[str]:
        """Возвращает абсолютный путь к каталогу событий."""
        ...

    async def list_keys(self) -> List[str]:
        """Возвращает имена всех файлов событий (.md)."""
        ...

    async def read(self, key: str) -> Optional[str]:
        """Читает файл. None, если файла нет."""
        ...

    async def write(self, key: str, content: str) -> bool:
        """Создает или перезаписывает файл."""
        ...

    async def remove(self, key: str) -> bool:
        """Удаляет файл. False, если файла не было."""
        ...

    async def exists(self, key: str) -> bool:
        """Проверяет существование файла."""
        ...


# --- Интерфейс Сервиса Настроек ---
class IPreferencesService(Protocol):
    """Долговременное хранилище пользовательских настроек (фильтры типов и т.п.)."""

    def get(self, key: str, default: Optional[Any] = None) -> Optional[Any]: ...

    def set(self, key: str, value: Any) -> None:
        """Сохраняет значение и сразу записывает его на диск."""
        ...


# --- Интерфейс Сервиса Наблюдения за Каталогом ---
class IWatchService(Protocol):
    """Наблюдение за каталогом событий (изменения, сделанные извне)."""

    def watch_directory(self, path: str, callback: FileEventCallback) -> None:
        """Настраивает наблюдение за директорией."""
        ...

    def start(self) -> None:
        """Запускает поток наблюдателя."""
        ...

    def stop(self) -> None:
        """Останавливает поток наблюдателя."""
        ...


# --- Интерфейс Хранилища Событий ---
class IEventStore(Protocol):
    """Интерфейс, который получают слои отображения и редактирования."""

    async def load_all(self) -> List[CalendarEvent]: ...
    def get_all(self) -> List[CalendarEvent]: ...
    def get(self, event_id: str) -> Optional[CalendarEvent]: ...
    def get_range(self, start: Any, end: Any) -> List[CalendarEvent]: ...
    def get_events_for_date(self, day: Any) -> List[CalendarEvent]: ...
    async def create(self, data: Mapping[str, Any]) -> CalendarEvent: ...
    async def update(
        self, event_id: str, patch: Mapping[str, Any]
    ) -> CalendarEvent: ...
    async def delete(self, event_id: str) -> bool: ...
    def validate(self, candidate: Mapping[str, Any]) -> List[str]: ...
    def toggle_type(self, event_type: str) -> bool: ...
    def toggle_holidays(self) -> bool: ...
    def subscribe(self, callback: ChangeCallback) -> Unsubscribe: ...
