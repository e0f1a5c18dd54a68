from __future__ import annotations
from contextlib import contextmanager
from typing import Iterator, Optional
from recipe_pilot.chat import ChatOrchestrator
from recipe_pilot.config import Config
from recipe_pilot.persistence import FileKeyValueStore, PersistenceGateway, WriteBehindSaver
from recipe_pilot.store import Store


class App:
    def __init__(self, config: Config, gateway: PersistenceGateway):
        self.config = config
        self.gateway = gateway
        self.store = Store(gateway.load())
        self.orchestrator = ChatOrchestrator(config)
        self.saver = WriteBehindSaver(gateway)
        self._unsubscribe = self.store.subscribe(self.saver.schedule)

    def credential(self) -> Optional[str]:
        return self.config.anthropic_api_key or self.gateway.get_stored_api_key()

    def close(self) -> None:
        self._unsubscribe()
        self.saver.close()


@contextmanager
def open_app(config: Config) -> Iterator[App]:
    """Load state, wire saving after every change, and drain pending saves on exit."""
    app = App(config, PersistenceGateway(FileKeyValueStore(config.data_dir)))
    try:
        yield app
    finally:
        app.close()
