import json
import os
import subprocess
import sys
from pathlib import Path
import pytest
from click.testing import CliRunner
from recipe_pilot.cli import cli
from recipe_pilot.persistence import STATE_KEY


@pytest.fixture
def runner(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.delenv("IS_PREMIUM", raising=False)
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    return CliRunner()


def _saved_state(tmp_path: Path) -> dict:
    return json.loads((tmp_path / "data" / f"{STATE_KEY}.json").read_text())


def test_module_invocation_works():
    """python -m recipe_pilot must work (requires __main__.py)."""
    result = subprocess.run(
        [sys.executable, "-m", "recipe_pilot", "--help"],
        capture_output=True, text=True,
        env={**os.environ, "PYTHONPATH": str(Path(__file__).parents[1] / "src")},
    )
    assert result.returncode == 0
    assert "Usage" in result.stdout


def test_recipe_group_has_subcommands(runner):
    result = runner.invoke(cli, ["recipe", "--help"])
    assert result.exit_code == 0
    for name in ("save", "list", "show", "remove"):
        assert name in result.output


def test_chat_to_shopping_list_flow(runner, tmp_path):
    result = runner.invoke(cli, ["chat", "vegetarian", "dinner"])
    assert result.exit_code == 0, result.output
    assert "Spiced Chickpea" in result.output
    assert "demo" in result.output.lower()

    result = runner.invoke(cli, ["recipe", "save"])
    assert result.exit_code == 0, result.output
    assert "Saved" in result.output

    result = runner.invoke(cli, ["recipe", "list"])
    assert "1. Spiced Chickpea" in result.output

    result = runner.invoke(cli, ["shop", "1"])
    assert result.exit_code == 0, result.output
    assert "Added" in result.output

    result = runner.invoke(cli, ["todo", "list"])
    assert "Spiced Chickpea" in result.output
    assert "chickpeas" in result.output
    assert "(Shopping)" in result.output

    state = _saved_state(tmp_path)
    assert len(state["sessions"]) == 1
    assert len(state["sessions"][0]["messages"]) == 2
    assert all(t["category"] == "shopping" for t in state["todos"])


def test_shop_only_selected_ingredients(runner, tmp_path):
    runner.invoke(cli, ["chat", "pasta"])
    runner.invoke(cli, ["recipe", "save"])
    result = runner.invoke(cli, ["shop", "1", "--only", "1,2"])
    assert result.exit_code == 0, result.output
    assert len(_saved_state(tmp_path)["todos"]) == 2


def test_recipe_save_without_recipe_fails(runner):
    runner.invoke(cli, ["chat", "hello"])
    result = runner.invoke(cli, ["recipe", "save"])
    assert result.exit_code == 1
    assert "No recipe" in result.output


def test_out_of_range_index_fails(runner):
    result = runner.invoke(cli, ["recipe", "show", "3"])
    assert result.exit_code == 1
    assert "out of range" in result.output


def test_todo_add_toggle_clear(runner, tmp_path):
    assert runner.invoke(cli, ["todo", "add", "buy saffron", "--category", "shopping"]).exit_code == 0
    assert runner.invoke(cli, ["todo", "add", "preheat oven"]).exit_code == 0
    result = runner.invoke(cli, ["todo", "toggle", "1"])
    assert result.exit_code == 0
    assert "checked" in result.output
    result = runner.invoke(cli, ["todo", "clear"])
    assert "Cleared 1" in result.output
    todos = _saved_state(tmp_path)["todos"]
    assert [t["text"] for t in todos] == ["preheat oven"]


def test_todo_add_blank_fails(runner):
    result = runner.invoke(cli, ["todo", "add", "   "])
    assert result.exit_code == 1


def test_sessions_new_open_delete(runner, tmp_path):
    runner.invoke(cli, ["new", "--title", "Brunch"])
    runner.invoke(cli, ["new", "--title", "Dinner"])
    sessions = _saved_state(tmp_path)["sessions"]
    first = sessions[0]["id"]

    result = runner.invoke(cli, ["open", first])
    assert result.exit_code == 0
    assert _saved_state(tmp_path)["current_session_id"] == first

    result = runner.invoke(cli, ["delete", first])
    assert result.exit_code == 0
    state = _saved_state(tmp_path)
    assert [s["title"] for s in state["sessions"]] == ["Dinner"]
    assert state["current_session_id"] == state["sessions"][0]["id"]


def test_open_unknown_session_fails(runner):
    result = runner.invoke(cli, ["open", "session-nope"])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_region_is_persisted(runner, tmp_path):
    result = runner.invoke(cli, ["region", "cajun-creole"])
    assert result.exit_code == 0
    assert "Cajun" in result.output
    assert _saved_state(tmp_path)["selected_region"] == "cajun-creole"


def test_region_rejects_unknown(runner):
    result = runner.invoke(cli, ["region", "atlantis"])
    assert result.exit_code != 0


def test_restaurant_trial_used_once(runner):
    first = runner.invoke(cli, ["restaurant", "orange", "chicken"])
    assert first.exit_code == 0, first.output
    second = runner.invoke(cli, ["restaurant", "orange", "chicken"])
    assert second.exit_code == 1
    assert "premium" in second.output


def test_restaurant_unlimited_for_premium(runner, monkeypatch):
    monkeypatch.setenv("IS_PREMIUM", "true")
    for _ in range(3):
        assert runner.invoke(cli, ["restaurant", "lasagna"]).exit_code == 0


def test_convert(runner):
    result = runner.invoke(cli, ["convert", "1/2", "cup", "ml"])
    assert result.exit_code == 0
    assert "118.29 ml" in result.output


def test_convert_incompatible_units_fails(runner):
    result = runner.invoke(cli, ["convert", "1", "cup", "g"])
    assert result.exit_code == 1


def test_sub_lists_substitutes(runner):
    result = runner.invoke(cli, ["sub", "butter"])
    assert result.exit_code == 0
    assert "olive oil" in result.output.lower()


def test_scale_saved_recipe(runner):
    runner.invoke(cli, ["chat", "chicken"])
    runner.invoke(cli, ["recipe", "save"])
    result = runner.invoke(cli, ["scale", "1", "8"])
    assert result.exit_code == 0
    assert "8 pieces chicken thighs" in result.output


def test_plan_adds_shopping_items(runner, tmp_path):
    runner.invoke(cli, ["chat", "pasta"])
    runner.invoke(cli, ["recipe", "save"])
    result = runner.invoke(cli, ["plan", "1", "1"])
    assert result.exit_code == 0, result.output
    assert "Monday" in result.output
    assert "Tuesday" in result.output
    assert _saved_state(tmp_path)["todos"]


def test_key_set_and_clear(runner, tmp_path):
    assert runner.invoke(cli, ["key", "set", "sk-ant-xyz"]).exit_code == 0
    assert (tmp_path / "data" / "chef-ai-api-key.json").exists()
    assert runner.invoke(cli, ["key", "clear"]).exit_code == 0
    assert not (tmp_path / "data" / "chef-ai-api-key.json").exists()


def test_temp(runner):
    result = runner.invoke(cli, ["temp", "350", "f", "c"])
    assert result.exit_code == 0
    assert "177°C" in result.output
