"""
Application state and the transitions that change it.

Every transition is a plain function taking the current ``AppState`` and
returning the next one. Transitions never mutate their input and never raise;
a transition aimed at an id that does not exist returns the state unchanged.
``Store`` holds the current state, applies transitions and tells subscribers
when the state changed.
"""
from __future__ import annotations
import logging
from datetime import datetime
from typing import Callable, Iterable, Optional
from recipe_pilot.models import (
    AppState,
    ChatSession,
    Message,
    Recipe,
    RegionFilter,
    Role,
    TodoCategory,
    TodoItem,
    new_id,
    now,
)

logger = logging.getLogger(__name__)

Transition = Callable[[AppState], AppState]
Listener = Callable[[AppState], None]

TITLE_EXCERPT_LENGTH = 40


def default_title(when: datetime | None = None) -> str:
    return f"Chat {(when or now()).astimezone().strftime('%x')}"


def _title_excerpt(content: str) -> str:
    text = " ".join(content.split())
    if len(text) <= TITLE_EXCERPT_LENGTH:
        return text
    return text[:TITLE_EXCERPT_LENGTH].rstrip() + "…"


# --- Queries ---

def current_session(state: AppState) -> Optional[ChatSession]:
    return next((s for s in state.sessions if s.id == state.current_session_id), None)


def find_session(state: AppState, session_id: str) -> Optional[ChatSession]:
    return next((s for s in state.sessions if s.id == session_id), None)


def find_recipe(state: AppState, recipe_id: str) -> Optional[Recipe]:
    return next((r for r in state.saved_recipes if r.id == recipe_id), None)


def is_recipe_saved(state: AppState, recipe_id: str) -> bool:
    return find_recipe(state, recipe_id) is not None


# --- Sessions ---

def create_session(state: AppState, title: str | None = None) -> tuple[AppState, str]:
    created = now()
    session = ChatSession(
        id=new_id("session"),
        title=title or default_title(created),
        custom_title=bool(title),
        created_at=created,
        updated_at=created,
    )
    new_state = state.model_copy(
        update={"sessions": [*state.sessions, session], "current_session_id": session.id}
    )
    return new_state, session.id


def set_current_session(state: AppState, session_id: str | None) -> AppState:
    if session_id is not None and find_session(state, session_id) is None:
        logger.debug("Ignoring unknown session %s", session_id)
        return state
    return state.model_copy(update={"current_session_id": session_id})


def delete_session(state: AppState, session_id: str) -> AppState:
    if find_session(state, session_id) is None:
        return state
    remaining = [s for s in state.sessions if s.id != session_id]
    current = state.current_session_id
    if current == session_id:
        latest = max(remaining, key=lambda s: s.updated_at, default=None)
        current = latest.id if latest else None
    return state.model_copy(update={"sessions": remaining, "current_session_id": current})


def append_message(
    state: AppState,
    session_id: str,
    role: Role,
    content: str,
    recipe: Recipe | None = None,
) -> AppState:
    session = find_session(state, session_id)
    if session is None:
        logger.warning("Dropping message for unknown session %s", session_id)
        return state.model_copy(update={"sessions": list(state.sessions)})

    timestamp = now()
    if session.messages and timestamp <= session.messages[-1].timestamp:
        timestamp = session.messages[-1].timestamp
    message = Message(
        id=new_id("msg"),
        role=role,
        content=content,
        timestamp=timestamp,
        recipe=recipe,
    )

    update: dict = {"messages": [*session.messages, message], "updated_at": timestamp}
    first_user_message = role == "user" and not any(m.role == "user" for m in session.messages)
    if first_user_message and not session.custom_title and content.strip():
        update["title"] = _title_excerpt(content)

    updated = session.model_copy(update=update)
    sessions = [updated if s.id == session_id else s for s in state.sessions]
    return state.model_copy(update={"sessions": sessions})


def set_region(state: AppState, region: RegionFilter) -> AppState:
    return state.model_copy(update={"selected_region": region})


# --- Todos ---

def make_todo(text: str, category: TodoCategory = "other", recipe_id: str | None = None) -> TodoItem:
    return TodoItem(id=new_id("todo"), text=text, category=category, recipe_id=recipe_id)


def add_todos(state: AppState, todos: Iterable[TodoItem]) -> AppState:
    todos = list(todos)
    if not todos:
        return state
    return state.model_copy(update={"todos": [*state.todos, *todos]})


def add_todo(
    state: AppState,
    text: str,
    category: TodoCategory = "other",
    recipe_id: str | None = None,
) -> AppState:
    text = text.strip()
    if not text:
        return state
    return add_todos(state, [make_todo(text, category, recipe_id)])


def toggle_todo(state: AppState, todo_id: str) -> AppState:
    if not any(t.id == todo_id for t in state.todos):
        return state
    todos = [
        t.model_copy(update={"completed": not t.completed}) if t.id == todo_id else t
        for t in state.todos
    ]
    return state.model_copy(update={"todos": todos})


def delete_todo(state: AppState, todo_id: str) -> AppState:
    if not any(t.id == todo_id for t in state.todos):
        return state
    return state.model_copy(update={"todos": [t for t in state.todos if t.id != todo_id]})


def clear_completed_todos(state: AppState) -> AppState:
    if not any(t.completed for t in state.todos):
        return state
    return state.model_copy(update={"todos": [t for t in state.todos if not t.completed]})


# --- Recipes ---

def save_recipe(state: AppState, recipe: Recipe) -> AppState:
    if is_recipe_saved(state, recipe.id):
        return state
    return state.model_copy(update={"saved_recipes": [*state.saved_recipes, recipe]})


def unsave_recipe(state: AppState, recipe_id: str) -> AppState:
    if not is_recipe_saved(state, recipe_id):
        return state
    return state.model_copy(
        update={"saved_recipes": [r for r in state.saved_recipes if r.id != recipe_id]}
    )


def shopping_line(amount: str, unit: str, name: str, notes: str | None = None) -> str:
    line = f"{amount or ''} {unit or ''} {name or 'Unknown'}{f' ({notes})' if notes else ''}"
    return " ".join(line.split())


def add_shopping_list_from_recipe(
    state: AppState,
    recipe: Recipe,
    selected: Iterable[int] | None = None,
) -> AppState:
    """Add one shopping todo per ingredient, or per selected ingredient index."""
    ingredients = list(recipe.ingredients or [])
    if selected is not None:
        wanted = set(selected)
        ingredients = [ing for i, ing in enumerate(ingredients) if i in wanted]
    if not ingredients:
        return state
    return add_todos(
        state,
        (
            make_todo(shopping_line(i.amount, i.unit, i.name, i.notes), "shopping", recipe.id)
            for i in ingredients
        ),
    )


def add_cooking_checklist_from_recipe(state: AppState, recipe: Recipe) -> AppState:
    return add_todos(
        state,
        (
            make_todo(f"Step {n}: {step}", "cooking", recipe.id)
            for n, step in enumerate(recipe.instructions or [], start=1)
        ),
    )


class Store:
    def __init__(self, state: AppState | None = None):
        self._state = state or AppState()
        self._listeners: list[Listener] = []

    def get_state(self) -> AppState:
        return self._state

    def dispatch(self, transition: Transition) -> AppState:
        new_state = transition(self._state)
        if new_state is self._state or new_state == self._state:
            return self._state
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)
        return new_state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Convenience wrappers around dispatch.

    def create_session(self, title: str | None = None) -> str:
        created: list[str] = []

        def transition(state: AppState) -> AppState:
            new_state, session_id = create_session(state, title)
            created.append(session_id)
            return new_state

        self.dispatch(transition)
        return created[0]

    def set_current_session(self, session_id: str | None) -> AppState:
        return self.dispatch(lambda s: set_current_session(s, session_id))

    def delete_session(self, session_id: str) -> AppState:
        return self.dispatch(lambda s: delete_session(s, session_id))

    def append_message(
        self, session_id: str, role: Role, content: str, recipe: Recipe | None = None
    ) -> AppState:
        return self.dispatch(lambda s: append_message(s, session_id, role, content, recipe))

    def set_region(self, region: RegionFilter) -> AppState:
        return self.dispatch(lambda s: set_region(s, region))

    def add_todo(
        self, text: str, category: TodoCategory = "other", recipe_id: str | None = None
    ) -> AppState:
        return self.dispatch(lambda s: add_todo(s, text, category, recipe_id))

    def toggle_todo(self, todo_id: str) -> AppState:
        return self.dispatch(lambda s: toggle_todo(s, todo_id))

    def delete_todo(self, todo_id: str) -> AppState:
        return self.dispatch(lambda s: delete_todo(s, todo_id))

    def clear_completed_todos(self) -> AppState:
        return self.dispatch(clear_completed_todos)

    def save_recipe(self, recipe: Recipe) -> AppState:
        return self.dispatch(lambda s: save_recipe(s, recipe))

    def unsave_recipe(self, recipe_id: str) -> AppState:
        return self.dispatch(lambda s: unsave_recipe(s, recipe_id))

    def add_shopping_list_from_recipe(
        self, recipe: Recipe, selected: Iterable[int] | None = None
    ) -> AppState:
        return self.dispatch(lambda s: add_shopping_list_from_recipe(s, recipe, selected))

    def add_cooking_checklist_from_recipe(self, recipe: Recipe) -> AppState:
        return self.dispatch(lambda s: add_cooking_checklist_from_recipe(s, recipe))
