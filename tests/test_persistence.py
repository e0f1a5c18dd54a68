import json
import logging
from unittest.mock import MagicMock
import pytest
from recipe_pilot.models import AppState, Ingredient, Recipe
from recipe_pilot.persistence import (
    API_KEY_KEY, RESTAURANT_TRIAL_KEY, STATE_KEY, FileKeyValueStore, PersistenceGateway,
    WriteBehindSaver,
)
from recipe_pilot.store import add_todo, append_message, create_session, save_recipe, toggle_todo


@pytest.fixture
def kv(tmp_path):
    return FileKeyValueStore(tmp_path)


@pytest.fixture
def gateway(kv):
    return PersistenceGateway(kv)


def _populated_state() -> AppState:
    pesto = Recipe(
        name="Pesto",
        region="european",
        cuisine="Italian",
        ingredients=[Ingredient(name="basil", amount="2", unit="cups", notes="packed")],
        instructions=["Blend everything."],
    )
    state, _ = create_session(AppState(), title="Weeknight")
    state, sid = create_session(state)
    state = append_message(state, sid, "user", "Something green and quick for dinner, please")
    state = append_message(state, sid, "assistant", "Try pesto.", pesto)
    state = add_todo(state, "buy basil", "shopping", pesto.id)
    state = add_todo(state, "toast pine nuts", "prep", pesto.id)
    state = toggle_todo(state, state.todos[1].id)
    state = save_recipe(state, pesto)
    return state.model_copy(update={"selected_region": "european"})


def test_missing_document_loads_default(gateway):
    assert gateway.load() == AppState()


def test_save_then_load_round_trips(gateway):
    state = _populated_state()
    gateway.save(state)
    loaded = gateway.load()
    assert loaded == state
    session = loaded.sessions[1]
    assert session.title == "Something green and quick for dinner, pl…"
    assert session.updated_at == session.messages[-1].timestamp
    assert session.messages[1].recipe == state.saved_recipes[0]
    assert session.messages[1].recipe.tips is None
    assert loaded.todos[1].completed is True
    assert loaded.current_session_id == session.id


def test_state_is_stored_under_fixed_key(tmp_path, gateway):
    gateway.save(AppState())
    assert (tmp_path / f"{STATE_KEY}.json").exists()


def test_corrupt_document_loads_default(kv, gateway, caplog):
    kv.set_item(STATE_KEY, "{this is not json")
    with caplog.at_level(logging.WARNING, logger="recipe_pilot.persistence"):
        assert gateway.load() == AppState()
    assert "starting fresh" in caplog.text


def test_non_object_document_loads_default(kv, gateway):
    kv.set_item(STATE_KEY, json.dumps(["not", "a", "state"]))
    assert gateway.load() == AppState()


def test_invalid_field_loads_default(kv, gateway):
    kv.set_item(STATE_KEY, json.dumps({"selected_region": "atlantis"}))
    assert gateway.load() == AppState()


def test_partial_document_is_merged_with_defaults(kv, gateway):
    kv.set_item(STATE_KEY, json.dumps({"selected_region": "midwest"}))
    state = gateway.load()
    assert state.selected_region == "midwest"
    assert state.sessions == []
    assert state.todos == []


def test_save_failure_is_logged_not_raised(caplog):
    kv = MagicMock()
    kv.set_item.side_effect = OSError("disk full")
    with caplog.at_level(logging.WARNING, logger="recipe_pilot.persistence"):
        PersistenceGateway(kv).save(AppState())
    assert "Could not save state" in caplog.text


def test_api_key_round_trip(tmp_path, gateway):
    assert gateway.get_stored_api_key() is None
    gateway.set_stored_api_key("sk-ant-123")
    assert gateway.get_stored_api_key() == "sk-ant-123"
    assert json.loads((tmp_path / f"{API_KEY_KEY}.json").read_text()) == "sk-ant-123"
    gateway.remove_stored_api_key()
    assert gateway.get_stored_api_key() is None


def test_restaurant_trial_flag(kv, gateway):
    assert gateway.has_used_restaurant_trial() is False
    gateway.mark_restaurant_trial_used()
    assert gateway.has_used_restaurant_trial() is True
    assert kv.get_item(RESTAURANT_TRIAL_KEY) == "true"


def test_remove_missing_key_is_fine(kv):
    kv.remove_item("never-written")
    assert kv.get_item("never-written") is None


def test_saver_writes_latest_state(gateway):
    saver = WriteBehindSaver(gateway)
    first = AppState()
    last = _populated_state()
    saver.schedule(first)
    saver.schedule(last)
    saver.close(timeout=5)
    assert gateway.load() == last


def test_saver_flush_waits_for_write(gateway):
    saver = WriteBehindSaver(gateway)
    state = _populated_state()
    saver.schedule(state)
    assert saver.flush(timeout=5) is True
    assert gateway.load() == state
    saver.close(timeout=5)


def test_saver_drops_state_after_close(gateway, caplog):
    saver = WriteBehindSaver(gateway)
    saver.close(timeout=5)
    saver.schedule(_populated_state())
    assert gateway.load() == AppState()
    assert "closed" in caplog.text
