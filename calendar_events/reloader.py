import asyncio
import datetime
import logging
import os
from concurrent.futures import Future
from typing import Optional

from services.interfaces import FileEventData, IEventStore

from .constants import FILE_EXTENSION

logger = logging.getLogger(__name__)


class ExternalChangeReloader:
    """
    Колбэк для watchdog: при изменении .md файла в каталоге событий
    перезагружает хранилище в цикле событий asyncio.
    Вызывается из потока наблюдателя, поэтому в хранилище напрямую не обращается.
    """

    def __init__(
        self,
        event_store: IEventStore,
        loop: asyncio.AbstractEventLoop,
        debounce_seconds: float = 1.0,
    ):
        self._event_store = event_store
        self._loop = loop
        self._debounce_interval = datetime.timedelta(seconds=debounce_seconds)
        self._last_reload: Optional[datetime.datetime] = None
        self._pending: Optional[Future] = None

    def __call__(self, event_data: FileEventData) -> Optional[Future]:
        if event_data.get("is_directory"):
            return None
        if not os.path.basename(event_data["src_path"]).endswith(FILE_EXTENSION):
            return None

        now = datetime.datetime.now()
        if self._last_reload and now - self._last_reload < self._debounce_interval:
            logger.debug(f"Skipping reload for {event_data['src_path']} (debounced)")
            return None
        if self._pending is not None and not self._pending.done():
            logger.debug("Reload already in progress, skipping.")
            return None

        self._last_reload = now
        logger.info(
            f"Event file {event_data['event_type']}: {event_data['src_path']}. Reloading events."
        )
        self._pending = asyncio.run_coroutine_threadsafe(
            self._event_store.load_all(), self._loop
        )
        self._pending.add_done_callback(self._log_failure)
        return self._pending

    @staticmethod
    def _log_failure(future: Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.error(f"Reload after external change failed: {error}", exc_info=error)
