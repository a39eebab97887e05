from dependency_injector import containers, providers
import logging

from config import load_app_config

# --- Интерфейсы ---
from services.interfaces import (
    IEventStore,
    IFileStoreService,
    IPreferencesService,
    IWatchService,
)

# --- Реализации Сервисов ---
from services.config_service import ConfigServiceImpl
from services.file_store_service import DirectoryFileStoreService
from services.preferences_service import JsonFilePreferencesService
from services.watch_service import WatchServiceImpl

# --- Хранилище Событий ---
from calendar_events import EventStore

logger = logging.getLogger(__name__)

# --- Контейнеры ---


class CoreContainer(containers.DeclarativeContainer):
    """Контейнер для базовых синглтонов и конфигурации."""

    config_dict = providers.Singleton(load_app_config)
    config_service = providers.Singleton(ConfigServiceImpl, config_data=config_dict)


class ServicesContainer(containers.DeclarativeContainer):
    """Контейнер для основных сервисов приложения."""

    core = providers.Container(CoreContainer)

    config_service = core.config_service  # Прокси для удобства

    file_store_service: providers.Provider[IFileStoreService] = providers.Singleton(
        DirectoryFileStoreService, config_service=config_service
    )
    preferences_service: providers.Provider[IPreferencesService] = (
        providers.Singleton(
            JsonFilePreferencesService,
            preferences_file_path=config_service.provided.get_preferences_file.call(),
        )
    )
    watch_service: providers.Provider[IWatchService] = providers.Singleton(
        WatchServiceImpl
    )


class ApplicationContainer(containers.DeclarativeContainer):
    """Главный контейнер приложения, собирающий все компоненты."""

    core = providers.Container(CoreContainer)
    services = providers.Container(ServicesContainer, core=core)

    # --- Основные компоненты приложения ---
    event_store: providers.Provider[IEventStore] = providers.Singleton(
        EventStore,
        file_store=services.file_store_service,
        preferences_service=services.preferences_service,
    )


# --- Функция для доступа к контейнеру ---
_app_container_instance = None


def get_container() -> ApplicationContainer:
    """Возвращает инициализированный инстанс главного DI контейнера."""
    global _app_container_instance
    if _app_container_instance is None:
        logger.info("Initializing DI container...")
        _app_container_instance = ApplicationContainer()
        logger.info("DI container initialized. Wiring should be done in main.py.")
    return _app_container_instance
