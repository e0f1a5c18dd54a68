from __future__ import annotations
import json
import logging
import threading
from pathlib import Path
from typing import Optional, Protocol
from recipe_pilot.models import AppState, default_state

logger = logging.getLogger(__name__)

STATE_KEY = "recipe-chatbot-data"
API_KEY_KEY = "chef-ai-api-key"
RESTAURANT_TRIAL_KEY = "recipepilot_restaurant_trial_used"


class KeyValueStore(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class FileKeyValueStore:
    """One file per key under base_dir."""

    def __init__(self, base_dir: Path | None = None):
        self.base_dir = base_dir or (Path.home() / ".recipe_pilot")
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.base_dir / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text()

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(value)
        tmp.replace(path)

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class PersistenceGateway:
    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    def load(self) -> AppState:
        try:
            raw = self.kv.get_item(STATE_KEY)
            if raw is None:
                return default_state()
            document = json.loads(raw)
            if not isinstance(document, dict):
                raise ValueError(f"expected an object, got {type(document).__name__}")
            merged = {**default_state().model_dump(mode="json"), **document}
            return AppState.model_validate(merged)
        except Exception:
            logger.warning("Could not load saved state, starting fresh", exc_info=True)
            return default_state()

    def save(self, state: AppState) -> None:
        try:
            self.kv.set_item(STATE_KEY, state.model_dump_json())
        except Exception:
            logger.warning("Could not save state", exc_info=True)

    # Ancillary keys, stored beside the state document.

    def get_stored_api_key(self) -> Optional[str]:
        try:
            value = self.kv.get_item(API_KEY_KEY)
            return json.loads(value) if value else None
        except Exception:
            logger.warning("Could not read stored API key", exc_info=True)
            return None

    def set_stored_api_key(self, key: str) -> None:
        try:
            self.kv.set_item(API_KEY_KEY, json.dumps(key))
        except Exception:
            logger.warning("Could not store API key", exc_info=True)

    def remove_stored_api_key(self) -> None:
        try:
            self.kv.remove_item(API_KEY_KEY)
        except Exception:
            logger.warning("Could not remove stored API key", exc_info=True)

    def has_used_restaurant_trial(self) -> bool:
        try:
            return self.kv.get_item(RESTAURANT_TRIAL_KEY) == "true"
        except Exception:
            return False

    def mark_restaurant_trial_used(self) -> None:
        try:
            self.kv.set_item(RESTAURANT_TRIAL_KEY, "true")
        except Exception:
            logger.warning("Could not mark restaurant trial as used", exc_info=True)


class WriteBehindSaver:
    """Saves the latest scheduled state on a background thread.

    Only one pending state is kept; scheduling again before the worker picks it
    up replaces it, so the last write wins.
    """

    def __init__(self, gateway: PersistenceGateway):
        self._gateway = gateway
        self._pending: Optional[AppState] = None
        self._saving = False
        self._closed = False
        self._cond = threading.Condition()
        self._thread = threading.Thread(target=self._run, name="recipe-pilot-saver", daemon=True)
        self._thread.start()

    def schedule(self, state: AppState) -> None:
        with self._cond:
            if self._closed:
                logger.warning("Saver is closed, dropping state")
                return
            self._pending = state
            self._cond.notify_all()

    def flush(self, timeout: float | None = None) -> bool:
        with self._cond:
            return self._cond.wait_for(lambda: self._pending is None and not self._saving, timeout)

    def close(self, timeout: float | None = None) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify_all()
        self._thread.join(timeout)

    def _run(self) -> None:
        while True:
            with self._cond:
                self._cond.wait_for(lambda: self._pending is not None or self._closed)
                if self._pending is None:
                    return
                state, self._pending = self._pending, None
                self._saving = True
            self._gateway.save(state)
            with self._cond:
                self._saving = False
                self._cond.notify_all()
