"""Иерархия исключений хранилища событий."""


class CalendarError(Exception):
    """Базовое исключение для ошибок календаря."""


class StoreAccessError(CalendarError):
    """Файловое хранилище не привязано к каталогу (нет доступа)."""


class EventNotFoundError(CalendarError, KeyError):
    """Событие с указанным ID отсутствует в хранилище."""

    def __init__(self, event_id: str):
        self.event_id = event_id
        super().__init__(f"Event {event_id} not found")

    def __str__(self) -> str:
        return f"Event {self.event_id} not found"


class MalformedEventFileError(CalendarError):
    """Файл события не удалось прочитать или разобрать."""

    def __init__(self, filename: str, reason: str):
        self.filename = filename
        self.reason = reason
        super().__init__(f"Malformed event file '{filename}': {reason}")


class FileStoreWriteError(CalendarError):
    """Файловое хранилище сообщило о неудачной записи."""

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(f"Failed to write event file '{filename}'")
