"""
Хранилище событий календаря.

Единственный источник истины между загрузками: словарь событий по ID.
Загружает файлы через IFileStoreService, разворачивает повторения,
добавляет праздники и уведомляет подписчиков об изменениях.
"""

import logging
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Set

from services.interfaces import (
    CalendarEvent,
    ChangeCallback,
    IEventStore,
    IFileStoreService,
    IPreferencesService,
    Unsubscribe,
)
from utils import DateLike, to_date_str

from .constants import (
    EVENT_TYPES,
    FILE_EXTENSION,
    HOLIDAY_ID_PREFIX,
    HOLIDAY_TYPE,
    NO_RECURRENCE,
)
from .errors import (
    EventNotFoundError,
    FileStoreWriteError,
    MalformedEventFileError,
    StoreAccessError,
)
from .event_fields import (
    build_event,
    generate_filename,
    generate_id,
    is_recurring,
    merge_event_patch,
    resolve_base_id,
)
from .frontmatter import parse_frontmatter, serialize_event
from .holidays import Holiday, holidays_for_range
from .recurrence import expand_recurring_events
from .validation import validate_event

logger = logging.getLogger(__name__)

ENABLED_TYPES_KEY = "enabled_types"
SHOW_HOLIDAYS_KEY = "show_holidays"


def holiday_to_event(holiday: Holiday) -> CalendarEvent:
    """Read-only event projection of a holiday."""
    return {
        "id": f"{HOLIDAY_ID_PREFIX}{holiday.date}",
        "title": holiday.localized_name,
        "startDate": holiday.date,
        "endDate": holiday.date,
        "startTime": None,
        "endTime": None,
        "allDay": True,
        "color": EVENT_TYPES[HOLIDAY_TYPE]["color"],
        "type": HOLIDAY_TYPE,
        "recurrence": NO_RECURRENCE,
        "recurrenceEnd": None,
        "recurrenceInterval": 1,
        "description": holiday.name,
        "_isHoliday": True,
        "_holidayName": holiday.name,
    }


def _sort_key(event: Mapping[str, Any]):
    return (
        event.get("startDate") or "",
        0 if event.get("allDay") else 1,
        event.get("startTime") or "",
        event.get("title") or "",
    )


class EventStore(IEventStore):
    """
    Хранилище событий. Создается один раз на процесс (см. containers.py)
    и передается потребителям по ссылке.
    """

    _events: Dict[str, CalendarEvent]
    _listeners: Set[ChangeCallback]
    _enabled_types: Set[str]
    _show_holidays: bool

    def __init__(
        self,
        file_store: IFileStoreService,
        preferences_service: Optional[IPreferencesService] = None,
    ):
        self._file_store = file_store
        self._preferences = preferences_service
        self._events = {}
        self._listeners = set()
        self._enabled_types = set(EVENT_TYPES)
        self._show_holidays = True
        self._restore_filters()
        logger.info("EventStore initialized.")

    # --- Lifecycle ---

    def _restore_filters(self) -> None:
        """Восстанавливает фильтры типов и видимость праздников из настроек."""
        self._enabled_types = set(EVENT_TYPES)
        self._show_holidays = True
        if self._preferences is None:
            return

        stored_types = self._preferences.get(ENABLED_TYPES_KEY)
        if isinstance(stored_types, list):
            self._enabled_types = {t for t in stored_types if t in EVENT_TYPES}
        elif stored_types is not None:
            logger.warning(
                f"Ignoring malformed '{ENABLED_TYPES_KEY}' preference: {stored_types!r}"
            )

        show_holidays = self._preferences.get(SHOW_HOLIDAYS_KEY)
        if isinstance(show_holidays, bool):
            self._show_holidays = show_holidays

    def reset(self) -> None:
        """Возвращает хранилище в состояние сразу после создания."""
        logger.info("Resetting EventStore state.")
        self._events.clear()
        self._listeners.clear()
        self._restore_filters()

    # --- Subscriptions ---

    def subscribe(self, callback: ChangeCallback) -> Unsubscribe:
        """Подписывает колбэк на изменения. Возвращает функцию отписки."""
        self._listeners.add(callback)

        def unsubscribe() -> None:
            self._listeners.discard(callback)

        return unsubscribe

    def _notify_listeners(self) -> None:
        events = self.get_all()
        for listener in list(self._listeners):
            try:
                listener(events)
            except Exception as e:
                logger.error(f"Error in event store listener {listener!r}: {e}", exc_info=True)

    # --- Loading ---

    async def _load_file(self, filename: str) -> CalendarEvent:
        content = await self._file_store.read(filename)
        if content is None:
            raise MalformedEventFileError(filename, "file is missing or empty")

        fields, body = parse_frontmatter(content)
        if not fields.get("startDate"):
            raise MalformedEventFileError(filename, "no startDate in frontmatter")

        event = build_event(fields, description=body)
        event["_filename"] = filename
        return event

    async def load_all(self) -> List[CalendarEvent]:
        """
        Полностью перечитывает события из файлового хранилища.
        Ошибка в отдельном файле логируется, файл пропускается.
        """
        self._events.clear()
        filenames = await self._file_store.list_keys()
        logger.debug(f"Loading {len(filenames)} event files")

        skipped = 0
        for filename in filenames:
            try:
                event = await self._load_file(filename)
            except StoreAccessError:
                raise
            except MalformedEventFileError as e:
                logger.warning(f"Skipping event file: {e}")
                skipped += 1
                continue
            except Exception as e:
                logger.error(f"Error loading event file {filename}: {e}", exc_info=True)
                skipped += 1
                continue

            if event["id"] in self._events:
                logger.warning(
                    f"Duplicate event id '{event['id']}' in {filename}, "
                    f"replacing the one from {self._events[event['id']].get('_filename')}"
                )
            self._events[event["id"]] = event

        logger.info(f"Loaded {len(self._events)} events ({skipped} files skipped)")
        self._notify_listeners()
        return [dict(e) for e in self._events.values()]  # type: ignore[misc]

    # --- Queries ---

    @property
    def enabled_types(self) -> FrozenSet[str]:
        return frozenset(self._enabled_types)

    @property
    def holidays_visible(self) -> bool:
        return self._show_holidays

    def is_type_enabled(self, event_type: str) -> bool:
        return event_type in self._enabled_types

    def get_all(self) -> List[CalendarEvent]:
        """Все сохраненные события, тип которых включен."""
        return [
            dict(event)  # type: ignore[misc]
            for event in self._events.values()
            if event.get("type") in self._enabled_types
        ]

    def get(self, event_id: str) -> Optional[CalendarEvent]:
        """Исходное событие по ID (ID экземпляра сводится к исходному)."""
        event = self._events.get(resolve_base_id(event_id, self._events))
        return dict(event) if event is not None else None  # type: ignore[return-value]

    def get_holiday_events(self, start: DateLike, end: DateLike) -> List[CalendarEvent]:
        if not (self._show_holidays and HOLIDAY_TYPE in self._enabled_types):
            return []
        return [holiday_to_event(h) for h in holidays_for_range(start, end)]

    def get_range(self, start: DateLike, end: DateLike) -> List[CalendarEvent]:
        """
        События, пересекающие [start, end] (обе границы включительно):
        исходные события, развернутые повторения и праздники.
        """
        start_str = to_date_str(start)
        end_str = to_date_str(end)
        if start_str > end_str:
            logger.debug(f"Empty range requested: {start_str} > {end_str}")
            return []

        base_events = []
        for event in self.get_all():
            if event["startDate"] > end_str:
                continue
            # A recurring series may reach into the range from an earlier start
            if is_recurring(event) or (event.get("endDate") or event["startDate"]) >= start_str:
                base_events.append(event)

        result = expand_recurring_events(base_events, start_str, end_str)
        result.extend(self.get_holiday_events(start_str, end_str))
        result.sort(key=_sort_key)
        return result

    def get_events_for_date(self, day: DateLike) -> List[CalendarEvent]:
        return self.get_range(day, day)

    def validate(self, candidate: Mapping[str, Any]) -> List[str]:
        return validate_event(candidate)

    # --- Mutations ---

    async def _allocate_filename(
        self, event: Mapping[str, Any], current: Optional[str] = None
    ) -> str:
        """Имя файла для события; при занятом имени добавляет суффикс -2, -3, ..."""
        filename = generate_filename(event)
        if filename == current:
            return filename

        taken = {
            other.get("_filename")
            for other_id, other in self._events.items()
            if other_id != event["id"]
        }
        stem = filename[: -len(FILE_EXTENSION)]
        candidate = filename
        suffix = 2
        while candidate in taken or (
            candidate != current and await self._file_store.exists(candidate)
        ):
            candidate = f"{stem}-{suffix}{FILE_EXTENSION}"
            suffix += 1
        if candidate != filename:
            logger.info(f"Filename {filename} is taken, using {candidate}")
        return candidate

    async def create(self, data: Mapping[str, Any]) -> CalendarEvent:
        """Создает событие, записывает файл и добавляет событие в память."""
        event = build_event(data, event_id=generate_id())
        if not event.get("startDate"):
            raise ValueError("startDate is required to create an event")

        filename = await self._allocate_filename(event)
        if not await self._file_store.write(filename, serialize_event(event)):
            raise FileStoreWriteError(filename)

        event["_filename"] = filename
        self._events[event["id"]] = event
        logger.info(f"Created event '{event['id']}' ({filename})")
        self._notify_listeners()
        return dict(event)  # type: ignore[return-value]

    async def update(self, event_id: str, patch: Mapping[str, Any]) -> CalendarEvent:
        """
        Обновляет событие (ID экземпляра сводится к исходному событию).
        При смене имени файла старый файл удаляется.
        """
        base_id = resolve_base_id(event_id, self._events)
        existing = self._events.get(base_id)
        if existing is None:
            raise EventNotFoundError(event_id)

        event = merge_event_patch(existing, patch)
        if not event.get("startDate"):
            raise ValueError("startDate cannot be removed from an event")

        old_filename = existing.get("_filename")
        new_filename = await self._allocate_filename(event, current=old_filename)
        if not await self._file_store.write(new_filename, serialize_event(event)):
            raise FileStoreWriteError(new_filename)

        if old_filename and old_filename != new_filename:
            await self._file_store.remove(old_filename)

        event["_filename"] = new_filename
        self._events[base_id] = event
        logger.info(f"Updated event '{base_id}' ({new_filename})")
        self._notify_listeners()
        return dict(event)  # type: ignore[return-value]

    async def delete(self, event_id: str) -> bool:
        """Удаляет событие и его файл. Возвращает False, если событие не найдено."""
        base_id = resolve_base_id(event_id, self._events)
        event = self._events.get(base_id)
        if event is None:
            logger.warning(f"Cannot delete event '{event_id}': not found")
            return False

        filename = event.get("_filename")
        if filename and not await self._file_store.remove(filename):
            logger.debug(f"Event file {filename} was already absent")

        del self._events[base_id]
        logger.info(f"Deleted event '{base_id}'")
        self._notify_listeners()
        return True

    # --- Filters ---

    def toggle_type(self, event_type: str) -> bool:
        """Включает/выключает тип событий. Возвращает новое состояние."""
        if event_type not in EVENT_TYPES:
            raise ValueError(f"Unknown event type: {event_type}")

        if event_type in self._enabled_types:
            self._enabled_types.discard(event_type)
        else:
            self._enabled_types.add(event_type)

        if self._preferences is not None:
            self._preferences.set(
                ENABLED_TYPES_KEY, [t for t in EVENT_TYPES if t in self._enabled_types]
            )
        self._notify_listeners()
        return event_type in self._enabled_types

    def toggle_holidays(self) -> bool:
        """Переключает видимость праздников. Возвращает новое состояние."""
        self._show_holidays = not self._show_holidays
        if self._preferences is not None:
            self._preferences.set(SHOW_HOLIDAYS_KEY, self._show_holidays)
        self._notify_listeners()
        return self._show_holidays
