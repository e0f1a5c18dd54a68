from __future__ import annotations
import logging
from typing import Optional
import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from recipe_pilot.app import App, open_app
from recipe_pilot.chat import send_message
from recipe_pilot.config import Config
from recipe_pilot.formatter import format_recipe, format_todo_list
from recipe_pilot.models import REGIONS, TODO_CATEGORIES, Recipe
from recipe_pilot.planner import WEEKDAYS, add_meal_plan_shopping_list, assign_meal, create_meal_plan
from recipe_pilot.premium import restaurant_recipe_access
from recipe_pilot.store import current_session
from recipe_pilot import units

console = Console()
err_console = Console(stderr=True)


def _load_config() -> Config:
    try:
        return Config()
    except ValidationError as e:
        err_console.print(f"[red]Error:[/red] Invalid configuration: {e}")
        raise SystemExit(1)


def _fail(message: str) -> None:
    err_console.print(f"[red]Error:[/red] {message}")
    raise SystemExit(1)


def _saved_recipe(app: App, index: int) -> Recipe:
    recipes = app.store.get_state().saved_recipes
    if index < 1 or index > len(recipes):
        _fail(f"Index {index} is out of range. Use 'recipe-pilot recipe list' to see valid indices.")
    return recipes[index - 1]


def _print_reply(text: str, recipe: Optional[Recipe], is_live: bool) -> None:
    console.print(f"\n[bold]Chef AI[/bold]: {escape(text)}\n")
    if recipe is not None:
        console.print(format_recipe(recipe), markup=False)
        console.print("\nRun [bold]recipe-pilot recipe save[/bold] to keep this recipe.")
    if not is_live:
        console.print("[dim]Live mode unavailable, showing a demo response.[/dim]")


@click.group()
@click.option("--verbose", is_flag=True, help="Show debug logging")
def cli(verbose: bool):
    """Recipe Pilot: chat with Chef AI and turn recipes into shopping lists."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("message", nargs=-1, required=True)
def chat(message: tuple[str, ...]):
    """Ask Chef AI something."""
    text = " ".join(message).strip()
    if not text:
        _fail("Message is empty.")
    with open_app(_load_config()) as app:
        reply = send_message(app.store, app.orchestrator, text, app.credential())
    _print_reply(reply.text, reply.recipe, reply.is_live)


@cli.command()
@click.option("--title", default=None, help="Optional title for the conversation")
def new(title: Optional[str]):
    """Start a new conversation."""
    with open_app(_load_config()) as app:
        session_id = app.store.create_session(title)
    console.print(f"[green]✓[/green] Started conversation [bold]{session_id}[/bold]")


@cli.command("sessions")
def list_sessions():
    """Show all conversations."""
    with open_app(_load_config()) as app:
        state = app.store.get_state()
    if not state.sessions:
        console.print("No conversations yet. Run [bold]recipe-pilot chat[/bold] to start one.")
        return

    table = Table(title="Conversations")
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("Messages", justify="right")
    table.add_column("Updated")
    for s in sorted(state.sessions, key=lambda s: s.updated_at, reverse=True):
        marker = " [green]●[/green]" if s.id == state.current_session_id else ""
        table.add_row(s.id, f"{s.title}{marker}", str(len(s.messages)), s.updated_at.strftime("%Y-%m-%d %H:%M"))
    console.print(table)


@cli.command("open")
@click.argument("session_id")
def open_session(session_id: str):
    """Switch to another conversation."""
    with open_app(_load_config()) as app:
        state = app.store.set_current_session(session_id)
    if state.current_session_id != session_id:
        _fail(f"Conversation '{session_id}' not found.")
    console.print(f"[green]✓[/green] Switched to [bold]{session_id}[/bold]")


@cli.command("delete")
@click.argument("session_id")
def delete_session(session_id: str):
    """Delete a conversation."""
    with open_app(_load_config()) as app:
        before = app.store.get_state()
        state = app.store.delete_session(session_id)
    if state is before:
        _fail(f"Conversation '{session_id}' not found.")
    console.print(f"[green]✓[/green] Deleted [bold]{session_id}[/bold]")
    if state.current_session_id:
        console.print(f"Current conversation is now [bold]{state.current_session_id}[/bold]")


@cli.command()
def history():
    """Show the messages of the current conversation."""
    with open_app(_load_config()) as app:
        session = current_session(app.store.get_state())
    if session is None or not session.messages:
        console.print("Nothing here yet. Run [bold]recipe-pilot chat[/bold] to start.")
        return
    console.print(f"\n[bold]{session.title}[/bold]\n")
    for m in session.messages:
        who = "You" if m.role == "user" else "Chef AI"
        console.print(f"[bold]{who}[/bold]: {escape(m.content)}")
        if m.recipe is not None:
            console.print(f"  [dim]recipe: {m.recipe.name}[/dim]")
    console.print()


@cli.command()
@click.argument("region", required=False, type=click.Choice(["all", *REGIONS]))
def region(region: Optional[str]):
    """Show or set the cuisine region."""
    with open_app(_load_config()) as app:
        if region:
            app.store.set_region(region)
        selected = app.store.get_state().selected_region
    label = REGIONS[selected].name if selected in REGIONS else "All regions"
    console.print(f"Region: [bold]{label}[/bold]")


@cli.group("recipe")
def recipe():
    """Manage saved recipes."""
    pass


@recipe.command("save")
def recipe_save():
    """Save the most recent recipe from the current conversation."""
    with open_app(_load_config()) as app:
        session = current_session(app.store.get_state())
        latest = None
        if session is not None:
            latest = next((m.recipe for m in reversed(session.messages) if m.recipe), None)
        if latest is None:
            _fail("No recipe in the current conversation.")
        app.store.save_recipe(latest)
    console.print(f"[green]✓[/green] Saved: {latest.name}")


@recipe.command("list")
def recipe_list():
    """Show saved recipes."""
    with open_app(_load_config()) as app:
        recipes = app.store.get_state().saved_recipes
    if not recipes:
        console.print("No saved recipes. Chat with Chef AI and run [bold]recipe-pilot recipe save[/bold].")
        return
    console.print("\n[bold]Saved recipes[/bold]\n")
    for i, r in enumerate(recipes, start=1):
        console.print(f"  {i}. {r.name} ({r.cuisine}, {len(r.ingredients)} ingredients)")
    console.print()


@recipe.command("show")
@click.argument("index", type=int)
def recipe_show(index: int):
    """Show a saved recipe by its index (from 'recipe list')."""
    with open_app(_load_config()) as app:
        r = _saved_recipe(app, index)
    console.print(format_recipe(r), markup=False)


@recipe.command("remove")
@click.argument("index", type=int)
def recipe_remove(index: int):
    """Remove a saved recipe by its index (from 'recipe list')."""
    with open_app(_load_config()) as app:
        r = _saved_recipe(app, index)
        app.store.unsave_recipe(r.id)
    console.print(f"[green]✓[/green] Removed: {r.name}")


@cli.group("todo")
def todo():
    """Manage the shopping and cooking list."""
    pass


@todo.command("add")
@click.argument("text")
@click.option("--category", type=click.Choice(TODO_CATEGORIES), default="other", show_default=True)
def todo_add(text: str, category: str):
    """Add an item to the list."""
    with open_app(_load_config()) as app:
        before = app.store.get_state()
        state = app.store.add_todo(text, category)
    if state is before:
        _fail("Item text is empty.")
    console.print(f"  [green]✓[/green] Added: {escape(text.strip())}")


@todo.command("list")
def todo_list():
    """Show the list, grouped by recipe."""
    with open_app(_load_config()) as app:
        state = app.store.get_state()
    if not state.todos:
        console.print("Your list is empty. Use [bold]recipe-pilot shop[/bold] or [bold]todo add[/bold].")
        return
    console.print(format_todo_list(state.todos, state.saved_recipes), markup=False)


def _todo_at(app: App, index: int):
    todos = app.store.get_state().todos
    if index < 1 or index > len(todos):
        _fail(f"Index {index} is out of range. Use 'recipe-pilot todo list' to see valid indices.")
    return todos[index - 1]


@todo.command("toggle")
@click.argument("index", type=int)
def todo_toggle(index: int):
    """Check or uncheck an item by its index."""
    with open_app(_load_config()) as app:
        item = _todo_at(app, index)
        app.store.toggle_todo(item.id)
    state = "unchecked" if item.completed else "checked"
    console.print(f"[green]✓[/green] {escape(item.text)} {state}")


@todo.command("remove")
@click.argument("index", type=int)
def todo_remove(index: int):
    """Remove an item by its index."""
    with open_app(_load_config()) as app:
        item = _todo_at(app, index)
        app.store.delete_todo(item.id)
    console.print(f"[green]✓[/green] Removed: {escape(item.text)}")


@todo.command("clear")
def todo_clear():
    """Remove every checked item."""
    with open_app(_load_config()) as app:
        before = len(app.store.get_state().todos)
        after = len(app.store.clear_completed_todos().todos)
    console.print(f"[green]✓[/green] Cleared {before - after} completed item(s).")


@cli.command()
@click.argument("index", type=int)
@click.option("--only", default=None, help="Comma-separated ingredient numbers to add, e.g. 1,3,4")
def shop(index: int, only: Optional[str]):
    """Add a saved recipe's ingredients to the shopping list."""
    selected = None
    if only:
        try:
            selected = [int(part) - 1 for part in only.split(",") if part.strip()]
        except ValueError:
            _fail(f"Could not read ingredient numbers from '{only}'.")
    with open_app(_load_config()) as app:
        r = _saved_recipe(app, index)
        before = len(app.store.get_state().todos)
        after = len(app.store.add_shopping_list_from_recipe(r, selected).todos)
    if after == before:
        console.print(f"{r.name} has no ingredients to add.")
        return
    console.print(f"[green]✓[/green] Added {after - before} item(s) from {r.name}")


@cli.command()
@click.argument("index", type=int)
def steps(index: int):
    """Add a saved recipe's steps to the list as a cooking checklist."""
    with open_app(_load_config()) as app:
        r = _saved_recipe(app, index)
        app.store.add_cooking_checklist_from_recipe(r)
    console.print(f"[green]✓[/green] Added {len(r.instructions)} step(s) from {r.name}")


@cli.command()
@click.argument("amount")
@click.argument("from_unit")
@click.argument("to_unit")
def convert(amount: str, from_unit: str, to_unit: str):
    """Convert a kitchen measurement, e.g. convert 1/2 cup ml."""
    try:
        result = units.convert(amount, from_unit, to_unit)
    except units.UnitError as e:
        _fail(str(e))
    console.print(f"{amount} {from_unit} = [bold]{result.formatted}[/bold]")


@cli.command()
@click.argument("value", type=float)
@click.argument("from_unit", type=click.Choice(["f", "c", "F", "C"]))
@click.argument("to_unit", type=click.Choice(["f", "c", "F", "C"]))
def temp(value: float, from_unit: str, to_unit: str):
    """Convert an oven temperature, e.g. temp 350 f c."""
    result = units.convert_temperature(value, from_unit, to_unit)
    console.print(f"{value:g}°{from_unit.upper()} = [bold]{result.formatted}[/bold]")


@cli.command()
@click.argument("ingredient")
def sub(ingredient: str):
    """Suggest substitutions for an ingredient."""
    subs = units.find_substitutions(ingredient)
    if not subs:
        console.print(f"No substitutions found for {ingredient}.")
        return
    table = Table(title=f"Substitutes for {ingredient}")
    table.add_column("Substitute")
    table.add_column("Ratio")
    table.add_column("Notes")
    for s in subs:
        table.add_row(s.substitute, s.ratio, s.notes)
    console.print(table)


@cli.command()
@click.argument("index", type=int)
@click.argument("servings", type=click.IntRange(min=1))
def scale(index: int, servings: int):
    """Show a saved recipe's ingredients scaled to a new number of servings."""
    with open_app(_load_config()) as app:
        r = _saved_recipe(app, index)
    console.print(f"\n[bold]{r.name}[/bold] for {servings} (originally {r.servings})\n")
    for ing in units.scale_recipe(r, servings):
        console.print("  - " + " ".join(f"{ing.amount} {ing.unit} {ing.name}".split()))
    console.print()


@cli.command()
@click.argument("index", type=int)
def nutrition(index: int):
    """Rough per-serving nutrition estimate for a saved recipe."""
    with open_app(_load_config()) as app:
        r = _saved_recipe(app, index)
    n = units.estimate_nutrition(r)
    console.print(f"\n[bold]{r.name}[/bold] (per serving, rough estimate)")
    console.print(f"  {n.calories} kcal · {n.protein}g protein · {n.carbs}g carbs · {n.fat}g fat · {n.fiber}g fiber\n")


@cli.command()
def timers():
    """List cooking timer presets."""
    table = Table(title="Timer presets")
    table.add_column("Category")
    table.add_column("Timer")
    table.add_column("Duration", justify="right")
    for preset in units.TIMER_PRESETS:
        table.add_row(preset.category, preset.name, units.format_duration(preset.duration))
    console.print(table)


@cli.command()
@click.argument("indexes", nargs=-1, type=int, required=True)
def plan(indexes: tuple[int, ...]):
    """Plan dinners for the week from saved recipes and shop for all of them."""
    if len(indexes) > len(WEEKDAYS):
        _fail(f"A week has {len(WEEKDAYS)} dinners; got {len(indexes)} recipes.")
    with open_app(_load_config()) as app:
        meal_plan = create_meal_plan("This week")
        for day, index in zip(WEEKDAYS, indexes):
            meal_plan = assign_meal(meal_plan, day, "dinner", _saved_recipe(app, index))
        before = len(app.store.get_state().todos)
        after = len(app.store.dispatch(lambda s: add_meal_plan_shopping_list(s, meal_plan)).todos)

    console.print(f"\n[bold]{meal_plan.name}[/bold]\n")
    for plan_day in meal_plan.days:
        dinner = next((m for m in plan_day.meals if m.type == "dinner" and m.recipe_name), None)
        if dinner:
            console.print(f"  {plan_day.day}: {dinner.recipe_name}")
    console.print(f"\n[green]✓[/green] Added {after - before} item(s) to the shopping list.")


@cli.command()
@click.argument("dish", nargs=-1, required=True)
def restaurant(dish: tuple[str, ...]):
    """Ask for a copycat recipe of a restaurant dish (one free try without premium)."""
    name = " ".join(dish).strip()
    config = _load_config()
    with open_app(config) as app:
        access = restaurant_recipe_access(config.is_premium, app.gateway.has_used_restaurant_trial())
        if not access.allowed:
            _fail("Your free restaurant recipe has been used. Upgrade to premium for more.")
        if access.consumes_trial:
            app.gateway.mark_restaurant_trial_used()
        reply = send_message(
            app.store,
            app.orchestrator,
            f"Give me a copycat recipe for {name} from a restaurant.",
            app.credential(),
        )
    _print_reply(reply.text, reply.recipe, reply.is_live)


@cli.group("key")
def key():
    """Manage the stored Anthropic API key."""
    pass


@key.command("set")
@click.argument("api_key")
def key_set(api_key: str):
    """Store an API key for live responses."""
    with open_app(_load_config()) as app:
        app.gateway.set_stored_api_key(api_key.strip())
    console.print("[green]✓[/green] API key stored.")


@key.command("clear")
def key_clear():
    """Forget the stored API key."""
    with open_app(_load_config()) as app:
        app.gateway.remove_stored_api_key()
    console.print("[green]✓[/green] API key removed.")
