import pytest
from recipe_pilot.models import Ingredient, Recipe
from recipe_pilot import units
from recipe_pilot.units import UnitError


def test_half_cup_to_ml():
    result = units.convert("1/2", "cup", "ml")
    assert result.value == pytest.approx(118.29, abs=0.01)
    assert result.formatted == "118.29 ml"


def test_convert_volume_accepts_aliases():
    result = units.convert_volume(3, "teaspoons", "tablespoon")
    assert result.value == pytest.approx(1.0, abs=0.01)
    assert result.unit == "tbsp"


def test_convert_weight_pound_to_grams():
    assert units.convert_weight(1, "lb", "g").value == pytest.approx(453.592)


def test_convert_temperature_both_ways():
    assert units.convert_temperature(212, "f", "c").value == pytest.approx(100)
    hot = units.convert_temperature(180, "c", "f")
    assert hot.value == pytest.approx(356)
    assert hot.formatted == "356°F"


@pytest.mark.parametrize("src, dst", [("F", "C"), ("fahrenheit", "celsius"), ("°f", "°C")])
def test_convert_reads_celsius_as_temperature(src, dst):
    result = units.convert("212", src, dst)
    assert result.value == pytest.approx(100)
    assert result.formatted == "100°C"


def test_bare_c_is_still_a_cup_for_volumes():
    assert units.convert("1", "c", "ml").value == pytest.approx(236.588)


def test_convert_rejects_mixed_families():
    with pytest.raises(UnitError):
        units.convert("1", "cup", "g")


def test_convert_rejects_non_numeric_amount():
    with pytest.raises(UnitError, match="not a number"):
        units.convert("to taste", "tsp", "ml")


def test_unknown_unit_is_a_value_error():
    with pytest.raises(ValueError):
        units.convert_weight(1, "stone", "g")


@pytest.mark.parametrize("text,expected", [
    ("2", 2.0),
    ("1.5", 1.5),
    ("1/2", 0.5),
    ("1 1/2", 1.5),
    ("to taste", None),
    ("", None),
    ("1/0", None),
])
def test_parse_amount(text, expected):
    assert units.parse_amount(text) == expected


def test_find_substitutions_exact_and_partial():
    assert units.find_substitutions("butter")[0].substitute == "coconut oil"
    partial = units.find_substitutions("Unsalted Butter")
    assert any(s.substitute == "olive oil" for s in partial)


def test_find_substitutions_unknown_is_empty():
    assert units.find_substitutions("saffron") == []
    assert units.find_substitutions("  ") == []


def test_scale_amount():
    assert units.scale_amount("1/2", 4, 8) == "1"
    assert units.scale_amount("1", 4, 6) == "1 1/2"
    assert units.scale_amount("to taste", 4, 8) == "to taste"


def test_scale_recipe_keeps_other_fields():
    recipe = Recipe(name="Rice", region="asian", cuisine="Thai", servings=2,
                    ingredients=[Ingredient(name="rice", amount="1", unit="cup", notes="rinsed")])
    scaled = units.scale_recipe(recipe, 4)
    assert scaled[0].amount == "2"
    assert scaled[0].notes == "rinsed"
    assert recipe.ingredients[0].amount == "1"


def test_estimate_nutrition_is_per_serving():
    recipe = Recipe(name="Chicken", region="southern", cuisine="Southern", servings=2,
                    ingredients=[Ingredient(name="chicken breast", amount="4", unit="pieces"),
                                 Ingredient(name="salt", amount="to", unit="taste")])
    estimate = units.estimate_nutrition(recipe)
    assert estimate.calories == 165
    assert estimate.protein == 31


def test_parse_and_format_duration():
    assert units.parse_duration("1 hour 30 mins") == 5400
    assert units.parse_duration("45 minutes") == 2700
    assert units.parse_duration("a while") == 0
    assert units.format_duration(5400) == "1:30:00"
    assert units.format_duration(90) == "1:30"
