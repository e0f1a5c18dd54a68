from __future__ import annotations
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional, Union
from pydantic import BaseModel
from recipe_pilot.models import DIFFICULTIES, REGIONS, Ingredient, Recipe, new_id

logger = logging.getLogger(__name__)

FENCE = re.compile(r"```recipe\s*(.*?)\s*```", re.DOTALL)

UNKNOWN_INGREDIENT = "Unknown ingredient"

# Fallback for every scalar the model may omit or get wrong.
RECIPE_DEFAULTS: dict[str, Any] = {
    "name": "Untitled Recipe",
    "region": "european",
    "cuisine": "International",
    "description": "",
    "prep_time": "",
    "cook_time": "",
    "servings": 4,
    "difficulty": "Medium",
}

_KEY_ALIASES: dict[str, tuple[str, ...]] = {
    "name": ("name", "title"),
    "region": ("region",),
    "cuisine": ("cuisine",),
    "description": ("description",),
    "prep_time": ("prepTime", "prep_time"),
    "cook_time": ("cookTime", "cook_time"),
    "servings": ("servings",),
    "difficulty": ("difficulty",),
}


class ParsedReply(BaseModel):
    prose: str
    recipe: Optional[Recipe] = None


@dataclass(frozen=True)
class StringEntry:
    text: str


@dataclass(frozen=True)
class ObjectEntry:
    fields: dict


@dataclass(frozen=True)
class UnrecognizedEntry:
    raw: Any


IngredientEntry = Union[StringEntry, ObjectEntry, UnrecognizedEntry]


def classify_ingredient(raw: Any) -> IngredientEntry:
    if isinstance(raw, str):
        return StringEntry(raw)
    if isinstance(raw, dict):
        return ObjectEntry(raw)
    return UnrecognizedEntry(raw)


def _text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def resolve_ingredient(entry: IngredientEntry) -> Ingredient:
    if isinstance(entry, StringEntry):
        name = entry.text.strip()
        if name:
            return Ingredient(name=name, amount="1", unit="")
    elif isinstance(entry, ObjectEntry):
        fields = entry.fields
        name = _text(fields.get("name")) or _text(fields.get("ingredient"))
        if name:
            amount = fields.get("amount", fields.get("quantity"))
            notes = _text(fields.get("notes")) or None
            return Ingredient(name=name, amount=_text(amount), unit=_text(fields.get("unit")), notes=notes)
    logger.debug("Unrecognized ingredient entry %r", entry)
    return Ingredient(name=UNKNOWN_INGREDIENT, amount="", unit="")


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [s for s in (_text(v) for v in value) if s]


def _scalar(data: dict, field: str) -> Any:
    for key in _KEY_ALIASES[field]:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return RECIPE_DEFAULTS[field]


def _servings(value: Any) -> int:
    try:
        servings = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return RECIPE_DEFAULTS["servings"]
    return servings if servings > 0 else RECIPE_DEFAULTS["servings"]


def coerce_recipe(data: dict) -> Recipe:
    """Build a Recipe from loosely shaped model output, one field at a time."""
    region = _text(_scalar(data, "region")).lower()
    difficulty = _text(_scalar(data, "difficulty")).capitalize()
    raw_ingredients = data.get("ingredients")
    if not isinstance(raw_ingredients, list):
        raw_ingredients = []
    return Recipe(
        id=new_id("recipe"),
        name=_text(_scalar(data, "name")) or RECIPE_DEFAULTS["name"],
        region=region if region in REGIONS else RECIPE_DEFAULTS["region"],
        cuisine=_text(_scalar(data, "cuisine")) or RECIPE_DEFAULTS["cuisine"],
        description=_text(_scalar(data, "description")),
        prep_time=_text(_scalar(data, "prep_time")),
        cook_time=_text(_scalar(data, "cook_time")),
        servings=_servings(_scalar(data, "servings")),
        difficulty=difficulty if difficulty in DIFFICULTIES else RECIPE_DEFAULTS["difficulty"],
        ingredients=[resolve_ingredient(classify_ingredient(raw)) for raw in raw_ingredients],
        instructions=_string_list(data.get("instructions")),
        tips=_string_list(data.get("tips")),
        tags=_string_list(data.get("tags")),
    )


def strip_blocks(raw_text: str) -> str:
    return FENCE.sub("", raw_text).strip()


def parse(raw_text: str) -> ParsedReply:
    """Split assistant text into prose and the recipe carried in its ```recipe block."""
    match = FENCE.search(raw_text)
    if not match:
        return ParsedReply(prose=raw_text.strip())

    try:
        data = json.loads(match.group(1))
    except (ValueError, RecursionError) as e:
        logger.warning("Discarding malformed recipe block: %s", e)
        return ParsedReply(prose=raw_text.strip())
    if not isinstance(data, dict):
        logger.warning("Discarding recipe block of type %s", type(data).__name__)
        return ParsedReply(prose=raw_text.strip())

    try:
        recipe = coerce_recipe(data)
    except (ValueError, TypeError, OverflowError, RecursionError) as e:
        logger.warning("Discarding unusable recipe block: %s", e)
        return ParsedReply(prose=raw_text.strip())
    if not recipe.ingredients:
        logger.info("Recipe %r has no ingredients", recipe.name)
    return ParsedReply(prose=strip_blocks(raw_text), recipe=recipe)
