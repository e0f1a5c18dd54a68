from __future__ import annotations
from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field
from recipe_pilot.models import AppState, Recipe, new_id, now
from recipe_pilot.store import add_todos, make_todo

MealType = Literal["breakfast", "lunch", "dinner", "snack"]

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
DEFAULT_MEALS: tuple[str, ...] = ("breakfast", "lunch", "dinner")


class PlannedMeal(BaseModel):
    type: MealType
    recipe_id: Optional[str] = None
    recipe_name: Optional[str] = None
    notes: Optional[str] = None


class MealPlanDay(BaseModel):
    day: str
    meals: list[PlannedMeal]


class MealPlan(BaseModel):
    id: str = Field(default_factory=lambda: new_id("plan"))
    name: str
    days: list[MealPlanDay]
    created_at: datetime = Field(default_factory=now)


def create_meal_plan(name: str) -> MealPlan:
    return MealPlan(
        name=name,
        days=[
            MealPlanDay(day=day, meals=[PlannedMeal(type=meal) for meal in DEFAULT_MEALS])
            for day in WEEKDAYS
        ],
    )


def assign_meal(plan: MealPlan, day: str, meal_type: MealType, recipe: Recipe | None) -> MealPlan:
    """Return a copy of the plan with one slot pointing at recipe (or cleared)."""
    days = []
    for plan_day in plan.days:
        if plan_day.day.lower() != day.lower():
            days.append(plan_day)
            continue
        meals = [m for m in plan_day.meals if m.type != meal_type]
        meals.append(
            PlannedMeal(
                type=meal_type,
                recipe_id=recipe.id if recipe else None,
                recipe_name=recipe.name if recipe else None,
            )
        )
        meals.sort(key=lambda m: ("breakfast", "lunch", "dinner", "snack").index(m.type))
        days.append(plan_day.model_copy(update={"meals": meals}))
    return plan.model_copy(update={"days": days})


def shopping_list_from_meal_plan(plan: MealPlan, recipes: list[Recipe]) -> list[str]:
    by_id = {r.id: r for r in recipes}
    merged: dict[str, str] = {}
    for plan_day in plan.days:
        for meal in plan_day.meals:
            recipe = by_id.get(meal.recipe_id) if meal.recipe_id else None
            if recipe is None:
                continue
            for ing in recipe.ingredients:
                key = ing.name.lower()
                amount = " ".join(f"{ing.amount} {ing.unit}".split())
                if key in merged:
                    merged[key] = f"{merged[key]} + {amount}" if amount else merged[key]
                else:
                    merged[key] = " ".join(f"{amount} {ing.name}".split())
    return list(merged.values())


def add_meal_plan_shopping_list(state: AppState, plan: MealPlan) -> AppState:
    lines = shopping_list_from_meal_plan(plan, state.saved_recipes)
    return add_todos(state, (make_todo(line, "shopping") for line in lines))
