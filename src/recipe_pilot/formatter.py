from __future__ import annotations
from collections import defaultdict
from recipe_pilot.models import REGIONS, Recipe, TodoItem

OTHER_BUCKET = "Other items"

CATEGORY_LABELS = {
    "shopping": "Shopping",
    "prep": "Prep",
    "cooking": "Cooking",
    "other": "Other",
}


def format_todo_list(todos: list[TodoItem], saved_recipes: list[Recipe]) -> str:
    """Group todos under the recipe they came from.

    Todos whose recipe is no longer saved (or never had one) land in a shared
    bucket at the end.
    """
    names = {r.id: r.name for r in saved_recipes}
    by_bucket: dict[str, list[tuple[int, TodoItem]]] = defaultdict(list)
    for index, todo in enumerate(todos, start=1):
        bucket = names.get(todo.recipe_id, OTHER_BUCKET) if todo.recipe_id else OTHER_BUCKET
        by_bucket[bucket].append((index, todo))

    order = [r.name for r in saved_recipes if r.name in by_bucket]
    if OTHER_BUCKET in by_bucket:
        order.append(OTHER_BUCKET)

    lines: list[str] = []
    for bucket in order:
        lines.append(f"\n{bucket}")
        lines.append("-" * len(bucket))
        for index, todo in by_bucket[bucket]:
            mark = "x" if todo.completed else " "
            label = CATEGORY_LABELS.get(todo.category, todo.category)
            lines.append(f"{index:>3}. [{mark}] {todo.text} ({label})")

    return "\n".join(lines).strip()


def format_recipe(recipe: Recipe) -> str:
    region = REGIONS[recipe.region].name if recipe.region in REGIONS else recipe.region
    lines = [recipe.name, "=" * len(recipe.name)]
    if recipe.description:
        lines.append(recipe.description)
    lines.append(
        f"{recipe.cuisine} · {region} · {recipe.difficulty} · serves {recipe.servings}"
    )
    times = [t for t in (f"prep {recipe.prep_time}" if recipe.prep_time else "",
                         f"cook {recipe.cook_time}" if recipe.cook_time else "") if t]
    if times:
        lines.append(", ".join(times))

    lines.append("\nIngredients")
    if not recipe.ingredients:
        lines.append("  (none listed)")
    for ing in recipe.ingredients:
        text = " ".join(f"{ing.amount} {ing.unit} {ing.name}".split())
        lines.append(f"  - {text}{f' ({ing.notes})' if ing.notes else ''}")

    if recipe.instructions:
        lines.append("\nInstructions")
        for n, step in enumerate(recipe.instructions, start=1):
            lines.append(f"  {n}. {step}")

    if recipe.tips:
        lines.append("\nTips")
        for tip in recipe.tips:
            lines.append(f"  * {tip}")

    if recipe.tags:
        lines.append(f"\nTags: {', '.join(recipe.tags)}")

    return "\n".join(lines)
