import os
import asyncio
import logging
from typing import List, Optional

from calendar_events.constants import FILE_EXTENSION
from calendar_events.errors import StoreAccessError

from .interfaces import IFileStoreService, IConfigService

logger = logging.getLogger(__name__)


class DirectoryFileStoreService(IFileStoreService):
    """
    Хранилище файлов событий в одном каталоге на диске.
    Ключ - имя файла внутри каталога (вложенные пути и выход за каталог запрещены).
    Блокирующий ввод-вывод выполняется в потоке через asyncio.to_thread.
    """

    _root: Optional[str] = None

    def __init__(self, config_service: IConfigService):
        self._config_service = config_service
        self._initialize_root()
        logger.debug(f"DirectoryFileStoreService initialized. Root: {self._root}")

    def _initialize_root(self):
        """Получает и валидирует путь к каталогу событий из конфигурации."""
        events_dir = self._config_service.get_events_dir()
        if not events_dir:
            logger.error(
                "CALENDAR_EVENTS_DIR is not configured. File store cannot operate."
            )
            self._root = None
            return
        if not os.path.isdir(events_dir):
            logger.error(
                f"Configured CALENDAR_EVENTS_DIR '{events_dir}' is not a valid directory."
            )
            self._root = None
            return

        self._root = os.path.abspath(events_dir)

    def has_access(self) -> bool:
        return self._root is not None

    def get_root(self) -> Optional[str]:
        return self._root

    def _require_root(self) -> str:
        if self._root is None:
            raise StoreAccessError("No events directory access")
        return self._root

    def resolve_path(self, key: str) -> Optional[str]:
        """
        Преобразует ключ в безопасный абсолютный путь внутри каталога.
        Возвращает None для ключей с разделителями пути или выходящих за каталог.
        """
        root = self._require_root()
        clean_key = (key or "").strip()
        if (
            not clean_key
            or clean_key in (".", "..")
            or "/" in clean_key
            or "\\" in clean_key
            or os.path.isabs(clean_key)
        ):
            logger.error(f"Refusing unsafe event file key: '{key}'")
            return None

        resolved_path = os.path.normpath(os.path.join(root, clean_key))
        real_root = os.path.realpath(root)
        if os.path.dirname(os.path.realpath(resolved_path)) != real_root:
            logger.error(
                f"Event file key resolved outside the events directory: "
                f"Key='{key}', Resolved='{resolved_path}', Root='{root}'"
            )
            return None
        return resolved_path

    # --- Синхронные операции (выполняются в потоке) ---

    def _list_keys_sync(self, root: str) -> List[str]:
        return sorted(
            name
            for name in os.listdir(root)
            if name.endswith(FILE_EXTENSION)
            and os.path.isfile(os.path.join(root, name))
        )

    def _read_sync(self, path: str) -> Optional[str]:
        if not os.path.isfile(path):
            logger.warning(f"Event file not found for reading: {path}")
            return None
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def _write_sync(self, path: str, content: str) -> bool:
        try:
            with open(path, "w", encoding="utf-8") as f:
                f.write(content)
            logger.info(f"Event file written: {path}")
            return True
        except OSError as e:
            logger.error(f"OS error writing event file '{path}': {e}", exc_info=True)
            return False

    def _remove_sync(self, path: str) -> bool:
        if not os.path.exists(path):
            logger.warning(f"Event file not found for deletion: {path}")
            return False
        if not os.path.isfile(path):
            logger.error(f"Path is not a file, cannot delete: {path}")
            return False
        os.remove(path)
        logger.info(f"Event file deleted: {path}")
        return True

    # --- Асинхронный интерфейс ---

    async def list_keys(self) -> List[str]:
        """Возвращает имена всех .md файлов в каталоге событий."""
        root = self._require_root()
        return await asyncio.to_thread(self._list_keys_sync, root)

    async def read(self, key: str) -> Optional[str]:
        """Читает файл события. None, если файла нет."""
        path = self.resolve_path(key)
        if not path:
            return None
        return await asyncio.to_thread(self._read_sync, path)

    async def write(self, key: str, content: str) -> bool:
        """Создает или перезаписывает файл события."""
        path = self.resolve_path(key)
        if not path:
            return False
        return await asyncio.to_thread(self._write_sync, path, content)

    async def remove(self, key: str) -> bool:
        """Удаляет файл события. False, если файла не было."""
        path = self.resolve_path(key)
        if not path:
            return False
        try:
            return await asyncio.to_thread(self._remove_sync, path)
        except OSError as e:
            logger.error(f"OS error deleting event file '{path}': {e}", exc_info=True)
            return False

    async def exists(self, key: str) -> bool:
        path = self.resolve_path(key)
        if not path:
            return False
        return await asyncio.to_thread(os.path.isfile, path)
