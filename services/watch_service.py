import os
import logging
from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler, FileSystemEvent
from typing import Optional

from .interfaces import (
    IWatchService,
    FileEventCallback,
    FileEventData,
)

logger = logging.getLogger(__name__)

# Newer watchdog releases also report opened/closed; those never change an event file
CHANGE_EVENT_TYPES = frozenset({"created", "modified", "deleted", "moved"})


class EventFileHandler(FileSystemEventHandler):
    """Передает колбэку изменения файлов в каталоге событий."""

    def __init__(self, callback: FileEventCallback):
        super().__init__()
        self._callback = callback

    def on_any_event(self, event: FileSystemEvent):
        if event.is_directory or event.event_type not in CHANGE_EVENT_TYPES:
            return

        # A rename matters by its new name (e.g. an editor's temp file moved over an event)
        path = event.dest_path if event.event_type == "moved" else event.src_path
        event_data: FileEventData = {
            "event_type": event.event_type,
            "src_path": os.fsdecode(path),
            "is_directory": False,
        }
        logger.debug(f"Event file {event.event_type}: {event_data['src_path']}")
        try:
            self._callback(event_data)
        except Exception as e:
            logger.error(
                f"File change callback failed for {event_data['src_path']}: {e}",
                exc_info=True,
            )


class WatchServiceImpl(IWatchService):
    """
    Наблюдение за каталогом событий через watchdog.
    Observer сам является потоком-демоном, отдельный поток не нужен.
    """

    def __init__(self):
        self._observer: Optional[Observer] = None
        self._watch_path: Optional[str] = None

    def watch_directory(self, path: str, callback: FileEventCallback) -> None:
        if self._observer is not None:
            logger.warning(
                f"Already watching {self._watch_path}, ignoring request for {path}."
            )
            return
        if not os.path.isdir(path):
            logger.error(f"Cannot watch '{path}': not a directory.")
            return

        observer = Observer()
        observer.daemon = True
        # Event files live directly in the directory
        observer.schedule(EventFileHandler(callback), path, recursive=False)
        self._observer = observer
        self._watch_path = path
        logger.info(f"Watch configured for events directory: {path}")

    def is_running(self) -> bool:
        return self._observer is not None and self._observer.is_alive()

    def start(self) -> None:
        if self._observer is None:
            logger.info("No directory configured for watching, nothing to start.")
            return
        if self._observer.is_alive():
            logger.warning("WatchService is already running.")
            return
        self._observer.start()
        logger.info(f"Watching {self._watch_path} for changes.")

    def stop(self) -> None:
        if self._observer is None:
            return
        if self._observer.is_alive():
            self._observer.stop()
            self._observer.join(timeout=5)
        logger.info(f"Stopped watching {self._watch_path}.")
        self._observer = None
        self._watch_path = None
