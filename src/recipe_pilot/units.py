"""
Kitchen unit conversions, substitutions and other rough cooking helpers.

Everything here is a pure function over plain values. Scaling and nutrition are
best-effort heuristics (ingredient names are matched by substring), not
nutritionally accurate.
"""
from __future__ import annotations
import re
from typing import Optional
from pydantic import BaseModel
from recipe_pilot.models import Ingredient, Recipe


class UnitError(ValueError):
    pass


class ConversionResult(BaseModel):
    value: float
    unit: str
    formatted: str


class Substitution(BaseModel):
    substitute: str
    ratio: str
    notes: str


class NutritionEstimate(BaseModel):
    calories: int = 0
    protein: int = 0
    carbs: int = 0
    fat: int = 0
    fiber: int = 0


class TimerPreset(BaseModel):
    name: str
    duration: int
    category: str


# --- Data Tables ---

# base: ml
VOLUME_TO_ML: dict[str, float] = {
    "cup": 236.588,
    "tbsp": 14.787,
    "tsp": 4.929,
    "ml": 1.0,
    "l": 1000.0,
    "floz": 29.574,
}

# base: g
WEIGHT_TO_GRAMS: dict[str, float] = {
    "g": 1.0,
    "kg": 1000.0,
    "oz": 28.3495,
    "lb": 453.592,
}

UNIT_ALIASES: dict[str, str] = {
    "cups": "cup",
    "c": "cup",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "tbs": "tbsp",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "milliliter": "ml",
    "milliliters": "ml",
    "liter": "l",
    "liters": "l",
    "fl oz": "floz",
    "fluid ounce": "floz",
    "fluid ounces": "floz",
    "gram": "g",
    "grams": "g",
    "kilogram": "kg",
    "kilograms": "kg",
    "ounce": "oz",
    "ounces": "oz",
    "pound": "lb",
    "pounds": "lb",
    "lbs": "lb",
}

# Checked before UNIT_ALIASES, where a bare "c" means cup.
TEMPERATURE_UNITS: dict[str, str] = {
    "f": "f",
    "°f": "f",
    "fahrenheit": "f",
    "c": "c",
    "°c": "c",
    "celsius": "c",
}

INGREDIENT_SUBSTITUTIONS: dict[str, list[Substitution]] = {
    "butter": [
        Substitution(substitute="coconut oil", ratio="1:1", notes="Use refined for neutral flavor"),
        Substitution(substitute="olive oil", ratio="3/4 cup per 1 cup butter", notes="Best for savory dishes"),
        Substitution(substitute="applesauce", ratio="1:1", notes="For baking, reduces fat"),
        Substitution(substitute="greek yogurt", ratio="1/2 cup per 1 cup butter", notes="Adds moisture and protein"),
    ],
    "egg": [
        Substitution(substitute="flax egg (1 tbsp ground flax + 3 tbsp water)", ratio="1:1", notes="Let sit 5 mins to gel"),
        Substitution(substitute="chia egg (1 tbsp chia + 3 tbsp water)", ratio="1:1", notes="Works great in brownies"),
        Substitution(substitute="mashed banana", ratio="1/4 cup per egg", notes="Adds sweetness"),
        Substitution(substitute="applesauce", ratio="1/4 cup per egg", notes="Good for moist baked goods"),
    ],
    "milk": [
        Substitution(substitute="oat milk", ratio="1:1", notes="Creamy, great for baking"),
        Substitution(substitute="almond milk", ratio="1:1", notes="Light, slightly nutty"),
        Substitution(substitute="coconut milk", ratio="1:1", notes="Rich, adds tropical flavor"),
        Substitution(substitute="soy milk", ratio="1:1", notes="Most similar to dairy milk"),
    ],
    "heavy cream": [
        Substitution(substitute="coconut cream", ratio="1:1", notes="Rich and creamy"),
        Substitution(substitute="cashew cream", ratio="1:1", notes="Blend soaked cashews with water"),
        Substitution(substitute="evaporated milk", ratio="1:1", notes="Less rich but works well"),
    ],
    "sour cream": [
        Substitution(substitute="greek yogurt", ratio="1:1", notes="Tangier, lower fat"),
        Substitution(substitute="coconut cream + lemon", ratio="1:1", notes="Dairy-free"),
    ],
    "flour": [
        Substitution(substitute="almond flour", ratio="1:1", notes="Gluten-free, adds nuttiness"),
        Substitution(substitute="oat flour", ratio="1:1", notes="Make by blending oats"),
        Substitution(substitute="coconut flour", ratio="1/4 cup per 1 cup flour", notes="Very absorbent, add more liquid"),
    ],
    "sugar": [
        Substitution(substitute="honey", ratio="3/4 cup per 1 cup sugar", notes="Reduce liquid in recipe slightly"),
        Substitution(substitute="maple syrup", ratio="3/4 cup per 1 cup sugar", notes="Reduce liquid, adds flavor"),
        Substitution(substitute="coconut sugar", ratio="1:1", notes="Lower glycemic index"),
        Substitution(substitute="stevia", ratio="1 tsp per 1 cup sugar", notes="Very concentrated"),
    ],
    "breadcrumbs": [
        Substitution(substitute="crushed crackers", ratio="1:1", notes="Adds a little salt"),
        Substitution(substitute="rolled oats", ratio="1:1", notes="Pulse briefly first"),
    ],
    "soy sauce": [
        Substitution(substitute="coconut aminos", ratio="1:1", notes="Slightly sweeter, soy-free"),
        Substitution(substitute="tamari", ratio="1:1", notes="Gluten-free soy sauce"),
        Substitution(substitute="worcestershire sauce", ratio="1:1", notes="Different flavor profile"),
    ],
    "chicken broth": [
        Substitution(substitute="vegetable broth", ratio="1:1", notes="Vegetarian option"),
        Substitution(substitute="mushroom broth", ratio="1:1", notes="Rich umami flavor"),
        Substitution(substitute="water + bouillon", ratio="1 cup water + 1 tsp bouillon", notes="Quick substitute"),
    ],
    "lemon juice": [
        Substitution(substitute="lime juice", ratio="1:1", notes="Slightly different citrus flavor"),
        Substitution(substitute="white wine vinegar", ratio="1/2 the amount", notes="More acidic"),
        Substitution(substitute="apple cider vinegar", ratio="1/2 the amount", notes="Adds fruity acidity"),
    ],
    "garlic": [
        Substitution(substitute="garlic powder", ratio="1/8 tsp per clove", notes="Less pungent"),
        Substitution(substitute="shallots", ratio="1/2 shallot per clove", notes="Milder, sweeter"),
        Substitution(substitute="garlic-infused oil", ratio="1/2 tsp per clove", notes="For garlic flavor without pieces"),
    ],
}

# Per rough "unit" of ingredient; order matters, first substring match wins.
INGREDIENT_NUTRITION: dict[str, dict[str, float]] = {
    "chicken": {"calories": 165, "protein": 31, "fat": 3.6},
    "beef": {"calories": 250, "protein": 26, "fat": 15},
    "salmon": {"calories": 208, "protein": 20, "fat": 13},
    "rice": {"calories": 130, "carbs": 28, "fiber": 0.4},
    "pasta": {"calories": 131, "carbs": 25, "protein": 5},
    "spaghetti": {"calories": 131, "carbs": 25, "protein": 5},
    "potato": {"calories": 77, "carbs": 17, "fiber": 2.2},
    "egg": {"calories": 78, "protein": 6, "fat": 5},
    "butter": {"calories": 102, "fat": 12},
    "oil": {"calories": 120, "fat": 14},
    "cheese": {"calories": 113, "protein": 7, "fat": 9},
    "bread": {"calories": 79, "carbs": 15, "protein": 3},
    "vegetable": {"calories": 25, "carbs": 5, "fiber": 2},
    "fruit": {"calories": 60, "carbs": 15, "fiber": 2},
    "bean": {"calories": 120, "protein": 8, "carbs": 21, "fiber": 7},
    "chickpea": {"calories": 120, "protein": 8, "carbs": 21, "fiber": 7},
    "lentil": {"calories": 115, "protein": 9, "carbs": 20, "fiber": 8},
    "tofu": {"calories": 80, "protein": 8, "fat": 4},
    "milk": {"calories": 103, "protein": 8, "carbs": 12, "fat": 2},
    "cream": {"calories": 340, "fat": 36},
    "sugar": {"calories": 49, "carbs": 13},
    "flour": {"calories": 110, "carbs": 23, "protein": 3},
}

TIMER_PRESETS: list[TimerPreset] = [
    TimerPreset(name="Soft boiled egg", duration=360, category="Eggs"),
    TimerPreset(name="Medium boiled egg", duration=480, category="Eggs"),
    TimerPreset(name="Hard boiled egg", duration=600, category="Eggs"),
    TimerPreset(name="Al dente pasta", duration=540, category="Pasta"),
    TimerPreset(name="Well-done pasta", duration=660, category="Pasta"),
    TimerPreset(name="White rice", duration=1080, category="Grains"),
    TimerPreset(name="Brown rice", duration=2700, category="Grains"),
    TimerPreset(name="Chicken breast (each side)", duration=420, category="Protein"),
    TimerPreset(name="Steak medium-rare (each side)", duration=240, category="Protein"),
    TimerPreset(name="Salmon fillet", duration=480, category="Protein"),
    TimerPreset(name="Cookies", duration=720, category="Baking"),
    TimerPreset(name="Brownies", duration=1500, category="Baking"),
    TimerPreset(name="Cake", duration=1800, category="Baking"),
    TimerPreset(name="Bread loaf", duration=2400, category="Baking"),
    TimerPreset(name="Roasted vegetables", duration=1800, category="Vegetables"),
    TimerPreset(name="Steamed broccoli", duration=300, category="Vegetables"),
    TimerPreset(name="Baked potato", duration=3600, category="Vegetables"),
]

_COMMON_FRACTIONS: list[tuple[float, str]] = [
    (0.125, "1/8"),
    (0.25, "1/4"),
    (0.333, "1/3"),
    (0.375, "3/8"),
    (0.5, "1/2"),
    (0.625, "5/8"),
    (0.667, "2/3"),
    (0.75, "3/4"),
    (0.875, "7/8"),
]

_FRACTION = re.compile(r"^(\d+)\s*/\s*(\d+)$")
_MIXED = re.compile(r"^(\d+)\s+(\d+)\s*/\s*(\d+)$")
_DECIMAL = re.compile(r"^\d+(?:\.\d+)?$|^\.\d+$")


# --- Conversions ---

def normalize_unit(unit: str) -> str:
    key = unit.strip().lower().rstrip(".")
    return UNIT_ALIASES.get(key, key)


def _convert(value: float, from_unit: str, to_unit: str, table: dict[str, float]) -> ConversionResult:
    src, dst = normalize_unit(from_unit), normalize_unit(to_unit)
    if src not in table or dst not in table:
        raise UnitError(f"Cannot convert {from_unit!r} to {to_unit!r}")
    result = value * table[src] / table[dst]
    return ConversionResult(value=result, unit=dst, formatted=f"{result:.2f} {dst}")


def convert_volume(value: float, from_unit: str, to_unit: str) -> ConversionResult:
    return _convert(value, from_unit, to_unit, VOLUME_TO_ML)


def convert_weight(value: float, from_unit: str, to_unit: str) -> ConversionResult:
    return _convert(value, from_unit, to_unit, WEIGHT_TO_GRAMS)


def temperature_unit(unit: str) -> Optional[str]:
    return TEMPERATURE_UNITS.get(unit.strip().lower().rstrip("."))


def convert_temperature(value: float, from_unit: str, to_unit: str) -> ConversionResult:
    src, dst = temperature_unit(from_unit), temperature_unit(to_unit)
    if src is None or dst is None:
        raise UnitError(f"Cannot convert temperature {from_unit!r} to {to_unit!r}")
    if src == "f" and dst == "c":
        result = (value - 32) * 5 / 9
    elif src == "c" and dst == "f":
        result = value * 9 / 5 + 32
    else:
        result = value
    symbol = "°F" if dst == "f" else "°C"
    return ConversionResult(value=result, unit=symbol, formatted=f"{round(result)}{symbol}")


def parse_amount(amount: str) -> Optional[float]:
    """Parse "2", "1.5", "1/2" or "1 1/2"; anything else ("to taste") is None."""
    text = amount.strip()
    mixed = _MIXED.match(text)
    if mixed:
        whole, num, den = (int(g) for g in mixed.groups())
        return whole + num / den if den else None
    fraction = _FRACTION.match(text)
    if fraction:
        num, den = (int(g) for g in fraction.groups())
        return num / den if den else None
    if _DECIMAL.match(text):
        return float(text)
    return None


def convert(amount: str, from_unit: str, to_unit: str) -> ConversionResult:
    """Convert a free-text amount between two units of the same family."""
    value = parse_amount(amount)
    if value is None:
        raise UnitError(f"Amount {amount!r} is not a number")
    if temperature_unit(from_unit) and temperature_unit(to_unit):
        return convert_temperature(value, from_unit, to_unit)
    src, dst = normalize_unit(from_unit), normalize_unit(to_unit)
    if src in VOLUME_TO_ML and dst in VOLUME_TO_ML:
        return convert_volume(value, src, dst)
    if src in WEIGHT_TO_GRAMS and dst in WEIGHT_TO_GRAMS:
        return convert_weight(value, src, dst)
    raise UnitError(f"Cannot convert {from_unit!r} to {to_unit!r}")


# --- Substitutions ---

def find_substitutions(ingredient: str) -> list[Substitution]:
    needle = ingredient.strip().lower()
    if not needle:
        return []
    if needle in INGREDIENT_SUBSTITUTIONS:
        return list(INGREDIENT_SUBSTITUTIONS[needle])
    for key, subs in INGREDIENT_SUBSTITUTIONS.items():
        if key in needle or needle in key:
            return list(subs)
    return []


# --- Scaling ---

def format_amount(value: float) -> str:
    if value == int(value):
        return str(int(value))
    whole = int(value)
    remainder = value - whole
    for decimal, fraction in _COMMON_FRACTIONS:
        if abs(remainder - decimal) < 0.05:
            return f"{whole} {fraction}" if whole else fraction
    return f"{value:.1f}" if value >= 1 else f"{value:.2f}"


def scale_amount(amount: str, original_servings: int, new_servings: int) -> str:
    value = parse_amount(amount)
    if value is None or original_servings <= 0:
        return amount
    return format_amount(value * new_servings / original_servings)


def scale_recipe(recipe: Recipe, new_servings: int) -> list[Ingredient]:
    return [
        ing.model_copy(update={"amount": scale_amount(ing.amount, recipe.servings, new_servings)})
        for ing in recipe.ingredients
    ]


# --- Nutrition ---

def estimate_nutrition(recipe: Recipe) -> NutritionEstimate:
    totals = {"calories": 0.0, "protein": 0.0, "carbs": 0.0, "fat": 0.0, "fiber": 0.0}
    for ing in recipe.ingredients:
        name = ing.name.lower()
        for key, facts in INGREDIENT_NUTRITION.items():
            if key not in name:
                continue
            amount = parse_amount(ing.amount) or 1.0
            multiplier = amount * (1.0 if "cup" in ing.unit.lower() else 0.5)
            for field, value in facts.items():
                totals[field] += value * multiplier
            break
    servings = recipe.servings or 1
    return NutritionEstimate(**{k: round(v / servings) for k, v in totals.items()})


# --- Timers ---

def parse_duration(text: str) -> int:
    """Seconds in strings like "15 mins" or "1 hour 30 minutes"; 0 when nothing matches."""
    total = 0
    hours = re.search(r"(\d+)\s*(?:hours?|hrs?|h\b)", text, re.IGNORECASE)
    minutes = re.search(r"(\d+)\s*(?:minutes?|mins?|m\b)", text, re.IGNORECASE)
    seconds = re.search(r"(\d+)\s*(?:seconds?|secs?|s\b)", text, re.IGNORECASE)
    if hours:
        total += int(hours.group(1)) * 3600
    if minutes:
        total += int(minutes.group(1)) * 60
    if seconds:
        total += int(seconds.group(1))
    return total


def format_duration(seconds: int) -> str:
    hours, rest = divmod(max(seconds, 0), 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"
