from datetime import datetime, timezone
import pytest
from pydantic import ValidationError
from recipe_pilot.models import (
    AppState, ChatSession, Ingredient, Message, Recipe, REGIONS, TodoItem, default_state, new_id,
)


def _recipe(**overrides):
    data = dict(name="Soup", region="european", cuisine="French",
                ingredients=[Ingredient(name="water", amount="1", unit="l")])
    data.update(overrides)
    return Recipe(**data)


def test_default_state_is_empty():
    state = default_state()
    assert state.sessions == []
    assert state.current_session_id is None
    assert state.todos == []
    assert state.saved_recipes == []
    assert state.selected_region == "all"


def test_regions_cover_fourteen_tags():
    assert len(REGIONS) == 14
    assert "cajun-creole" in REGIONS
    assert REGIONS["asian"].name == "Asian"


def test_recipe_ids_are_unique():
    assert _recipe().id != _recipe().id


def test_new_id_uses_prefix():
    assert new_id("todo").startswith("todo-")


def test_recipe_rejects_unknown_region():
    with pytest.raises(ValidationError):
        _recipe(region="atlantis")


def test_recipe_rejects_non_positive_servings():
    with pytest.raises(ValidationError):
        _recipe(servings=0)


def test_recipe_validity_needs_a_named_ingredient():
    assert _recipe().is_valid
    assert not _recipe(ingredients=[]).is_valid
    assert not _recipe(ingredients=[Ingredient(name="  ")]).is_valid


def test_message_is_immutable():
    msg = Message(id="m1", role="user", content="hi", timestamp=datetime.now(tz=timezone.utc))
    with pytest.raises(ValidationError):
        msg.content = "changed"


def test_todo_defaults():
    todo = TodoItem(id="t1", text="buy eggs")
    assert todo.completed is False
    assert todo.category == "other"
    assert todo.recipe_id is None


def test_app_state_json_roundtrip():
    now = datetime(2026, 2, 20, tzinfo=timezone.utc)
    state = AppState(
        sessions=[ChatSession(id="s1", title="Chat", created_at=now, updated_at=now)],
        current_session_id="s1",
        saved_recipes=[_recipe()],
        selected_region="bbq",
    )
    loaded = AppState.model_validate_json(state.model_dump_json())
    assert loaded == state
