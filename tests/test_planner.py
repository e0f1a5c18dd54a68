import pytest
from recipe_pilot.models import AppState, Ingredient, Recipe
from recipe_pilot.planner import (
    WEEKDAYS, add_meal_plan_shopping_list, assign_meal, create_meal_plan,
    shopping_list_from_meal_plan,
)


@pytest.fixture
def pancakes():
    return Recipe(
        id="recipe-pancakes",
        name="Pancakes",
        region="new-england",
        cuisine="American",
        ingredients=[
            Ingredient(name="Flour", amount="2", unit="cups"),
            Ingredient(name="milk", amount="1", unit="cup"),
        ],
    )


@pytest.fixture
def bread():
    return Recipe(
        id="recipe-bread",
        name="Bread",
        region="european",
        cuisine="French",
        ingredients=[Ingredient(name="flour", amount="500", unit="g"), Ingredient(name="yeast")],
    )


def test_new_plan_has_a_week_of_empty_slots():
    plan = create_meal_plan("This week")
    assert [d.day for d in plan.days] == WEEKDAYS
    assert all([m.type for m in d.meals] == ["breakfast", "lunch", "dinner"] for d in plan.days)
    assert all(m.recipe_id is None for d in plan.days for m in d.meals)


def test_assign_meal_returns_new_plan(pancakes):
    plan = create_meal_plan("Week")
    updated = assign_meal(plan, "monday", "breakfast", pancakes)
    assert plan.days[0].meals[0].recipe_id is None
    assert updated.days[0].meals[0].recipe_name == "Pancakes"


def test_assign_snack_keeps_meal_order(pancakes):
    plan = assign_meal(create_meal_plan("Week"), "Friday", "snack", pancakes)
    assert [m.type for m in plan.days[4].meals] == ["breakfast", "lunch", "dinner", "snack"]


def test_shopping_list_merges_same_ingredient(pancakes, bread):
    plan = create_meal_plan("Week")
    plan = assign_meal(plan, "Monday", "breakfast", pancakes)
    plan = assign_meal(plan, "Tuesday", "dinner", bread)
    lines = shopping_list_from_meal_plan(plan, [pancakes, bread])
    assert lines == ["2 cups Flour + 500 g", "1 cup milk", "yeast"]


def test_shopping_list_skips_unsaved_recipes(pancakes):
    plan = assign_meal(create_meal_plan("Week"), "Monday", "lunch", pancakes)
    assert shopping_list_from_meal_plan(plan, []) == []


def test_plan_shopping_list_becomes_todos(pancakes):
    state = AppState(saved_recipes=[pancakes])
    plan = assign_meal(create_meal_plan("Week"), "Sunday", "breakfast", pancakes)
    state = add_meal_plan_shopping_list(state, plan)
    assert [t.text for t in state.todos] == ["2 cups Flour", "1 cup milk"]
    assert all(t.category == "shopping" for t in state.todos)
