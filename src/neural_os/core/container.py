"""Dependency Injection Container."""

from injector import Injector, Module, provider, singleton
from langchain_core.language_models import BaseLanguageModel

from neural_os.agents.architect import Architect
from neural_os.apps.manager import AppManager
from neural_os.apps.store import AppStore, JSONFileStore
from neural_os.blueprint.parser import ResponseParser
from neural_os.engine.ticker import TickDriver
from .config import Settings, get_settings


class CoreModule(Module):
    """Core dependencies."""

    def __init__(self, settings: Settings | None = None, llm: BaseLanguageModel | None = None) -> None:
        self.settings = settings or get_settings()
        self.llm = llm

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        return self.settings

    @singleton
    @provider
    def provide_store(self, settings: Settings) -> AppStore:
        """Provide the JSON file store at the configured path."""
        return JSONFileStore(settings.store_path)

    @singleton
    @provider
    def provide_app_manager(self, store: AppStore, settings: Settings) -> AppManager:
        return AppManager(store, default_item_label=settings.default_item_label)

    @singleton
    @provider
    def provide_tick_driver(self, manager: AppManager, settings: Settings) -> TickDriver:
        """Provide the timer heartbeat bound to the app manager."""
        return TickDriver(manager.tick, interval=settings.tick_interval)

    @singleton
    @provider
    def provide_architect(self, settings: Settings) -> Architect:
        """Provide the architect; responses deeper than the configured limit are rejected."""
        return Architect(llm=self.llm, parser=ResponseParser(max_depth=settings.max_blueprint_depth))


def create_container(settings: Settings | None = None, llm: BaseLanguageModel | None = None) -> Injector:
    """Create configured injector."""
    return Injector([CoreModule(settings, llm)])
