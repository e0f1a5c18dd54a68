"""Canned replies used when no live model is available."""
from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Callable, Optional
from pydantic import BaseModel
from recipe_pilot.models import Ingredient, Recipe, RegionFilter, WorldRegion

DEMO_NOTE = "(Demo mode - add an Anthropic API key for AI responses)"


class DemoReply(BaseModel):
    text: str
    recipe: Optional[Recipe] = None


def _region_or(region: RegionFilter, fallback: WorldRegion) -> WorldRegion:
    return fallback if region == "all" else region


def garlic_butter_chicken(region: RegionFilter) -> Recipe:
    return Recipe(
        name="Garlic Butter Chicken with Herb Rice",
        region=_region_or(region, "european"),
        cuisine="French-inspired",
        description="Juicy pan-seared chicken thighs in a rich garlic butter sauce, served over fluffy herb-infused rice.",
        prep_time="15 mins",
        cook_time="35 mins",
        servings=4,
        difficulty="Easy",
        ingredients=[
            Ingredient(name="chicken thighs", amount="4", unit="pieces", notes="bone-in, skin-on"),
            Ingredient(name="butter", amount="4", unit="tbsp"),
            Ingredient(name="garlic", amount="6", unit="cloves", notes="minced"),
            Ingredient(name="chicken broth", amount="1", unit="cup"),
            Ingredient(name="heavy cream", amount="1/2", unit="cup"),
            Ingredient(name="long grain rice", amount="1.5", unit="cups"),
            Ingredient(name="fresh thyme", amount="2", unit="sprigs"),
            Ingredient(name="fresh parsley", amount="2", unit="tbsp", notes="chopped"),
            Ingredient(name="salt", amount="to", unit="taste"),
            Ingredient(name="black pepper", amount="to", unit="taste"),
        ],
        instructions=[
            "Season chicken thighs generously with salt and pepper on both sides.",
            "Heat a large skillet over medium-high heat. Add 2 tbsp butter and sear chicken skin-side down for 6-7 minutes until golden.",
            "Flip chicken and cook another 5 minutes. Remove and set aside.",
            "In the same pan, add remaining butter and garlic. Sauté for 1 minute until fragrant.",
            "Add chicken broth, scraping up any browned bits. Add cream and bring to a simmer.",
            "Return chicken to pan, cover, and cook for 15-20 minutes until internal temp reaches 165°F.",
            "Meanwhile, cook rice according to package directions, adding thyme sprigs to the water.",
            "Fluff rice with a fork, remove thyme, and stir in parsley.",
            "Serve chicken over herb rice, spooning sauce generously over top.",
        ],
        tips=[
            "Pat chicken dry before seasoning for crispier skin",
            "Don't move the chicken while it's searing - let it develop a golden crust",
            "You can substitute thyme with rosemary for a different flavor profile",
        ],
        tags=["chicken", "comfort food", "dinner", "one-pan", "creamy"],
    )


def chickpea_curry(region: RegionFilter) -> Recipe:
    return Recipe(
        name="Spiced Chickpea & Vegetable Curry",
        region="asian",
        cuisine="Indian",
        description="A warming, aromatic curry loaded with chickpeas and seasonal vegetables in a creamy coconut sauce.",
        prep_time="15 mins",
        cook_time="30 mins",
        servings=4,
        difficulty="Easy",
        ingredients=[
            Ingredient(name="chickpeas", amount="2", unit="cans", notes="drained and rinsed"),
            Ingredient(name="coconut milk", amount="1", unit="can", notes="full fat"),
            Ingredient(name="diced tomatoes", amount="1", unit="can"),
            Ingredient(name="onion", amount="1", unit="large", notes="diced"),
            Ingredient(name="garlic", amount="4", unit="cloves", notes="minced"),
            Ingredient(name="ginger", amount="1", unit="inch", notes="grated"),
            Ingredient(name="spinach", amount="4", unit="cups"),
            Ingredient(name="curry powder", amount="2", unit="tbsp"),
            Ingredient(name="garam masala", amount="1", unit="tsp"),
            Ingredient(name="cumin", amount="1", unit="tsp"),
            Ingredient(name="turmeric", amount="1/2", unit="tsp"),
            Ingredient(name="vegetable oil", amount="2", unit="tbsp"),
            Ingredient(name="salt", amount="to", unit="taste"),
            Ingredient(name="fresh cilantro", amount="for", unit="garnish"),
        ],
        instructions=[
            "Heat oil in a large pot over medium heat. Add onion and cook until softened, about 5 minutes.",
            "Add garlic and ginger, cook for 1 minute until fragrant.",
            "Stir in curry powder, garam masala, cumin, and turmeric. Toast spices for 30 seconds.",
            "Add diced tomatoes and cook for 3 minutes, stirring occasionally.",
            "Pour in coconut milk and bring to a simmer.",
            "Add chickpeas and cook for 15 minutes, allowing flavors to meld.",
            "Stir in spinach and cook until wilted, about 2 minutes.",
            "Season with salt to taste.",
            "Serve over basmati rice, garnished with fresh cilantro.",
        ],
        tips=[
            "Toast your spices in a dry pan first for deeper flavor",
            "Add a squeeze of lime juice at the end for brightness",
            "This curry tastes even better the next day as flavors develop",
        ],
        tags=["vegetarian", "vegan", "curry", "healthy", "indian", "plant-based"],
    )


def spaghetti_carbonara(region: RegionFilter) -> Recipe:
    return Recipe(
        name="Classic Spaghetti Carbonara",
        region="european",
        cuisine="Italian",
        description="An authentic Roman pasta dish with a silky egg and cheese sauce, crispy guanciale, and freshly cracked black pepper.",
        prep_time="10 mins",
        cook_time="20 mins",
        servings=4,
        difficulty="Medium",
        ingredients=[
            Ingredient(name="spaghetti", amount="400", unit="g"),
            Ingredient(name="guanciale", amount="200", unit="g", notes="or pancetta"),
            Ingredient(name="egg yolks", amount="4", unit="large"),
            Ingredient(name="whole egg", amount="1", unit="large"),
            Ingredient(name="Pecorino Romano", amount="100", unit="g", notes="finely grated"),
            Ingredient(name="Parmigiano Reggiano", amount="50", unit="g", notes="finely grated"),
            Ingredient(name="black pepper", amount="2", unit="tsp", notes="freshly ground"),
            Ingredient(name="salt", amount="for", unit="pasta water"),
        ],
        instructions=[
            "Bring a large pot of salted water to boil. Cook spaghetti until al dente.",
            "While pasta cooks, cut guanciale into small strips or cubes.",
            "In a bowl, whisk together egg yolks, whole egg, both cheeses, and 1 tsp black pepper.",
            "Cook guanciale in a large cold pan over medium heat until fat renders and meat is crispy, about 8 minutes.",
            "Reserve 1 cup pasta water, then drain pasta.",
            "Remove guanciale pan from heat. Add hot pasta and toss to coat in the fat.",
            "Working quickly, pour egg mixture over pasta and toss vigorously. The residual heat will create a creamy sauce.",
            "Add pasta water a splash at a time if needed for silkiness.",
            "Serve immediately with extra cheese and black pepper.",
        ],
        tips=[
            "Never add the egg mixture while the pan is on heat - it will scramble",
            "The pasta must be hot enough to cook the eggs but not scramble them",
            "Authentic carbonara has no cream - the creaminess comes from the eggs and cheese",
        ],
        tags=["pasta", "italian", "authentic", "quick", "classic"],
    )


def signature_stir_fry(region: RegionFilter) -> Recipe:
    return Recipe(
        name="Chef's Signature Stir-Fry",
        region=_region_or(region, "asian"),
        cuisine="Asian Fusion",
        description="A quick and flavorful stir-fry with your choice of protein and fresh vegetables in a savory sauce.",
        prep_time="15 mins",
        cook_time="15 mins",
        servings=4,
        difficulty="Easy",
        ingredients=[
            Ingredient(name="protein of choice", amount="1", unit="lb", notes="chicken, beef, tofu, or shrimp"),
            Ingredient(name="mixed vegetables", amount="4", unit="cups", notes="broccoli, bell peppers, snap peas"),
            Ingredient(name="garlic", amount="4", unit="cloves", notes="minced"),
            Ingredient(name="ginger", amount="1", unit="tbsp", notes="grated"),
            Ingredient(name="soy sauce", amount="3", unit="tbsp"),
            Ingredient(name="sesame oil", amount="1", unit="tbsp"),
            Ingredient(name="vegetable oil", amount="2", unit="tbsp"),
            Ingredient(name="cornstarch", amount="1", unit="tbsp"),
            Ingredient(name="water", amount="2", unit="tbsp"),
            Ingredient(name="green onions", amount="3", unit="stalks", notes="sliced"),
        ],
        instructions=[
            "Cut protein into bite-sized pieces. Toss with 1 tbsp soy sauce.",
            "Mix remaining soy sauce, sesame oil, cornstarch, and water for the sauce.",
            "Heat vegetable oil in a wok or large skillet over high heat.",
            "Stir-fry protein until cooked through. Remove and set aside.",
            "Add more oil if needed. Stir-fry vegetables for 3-4 minutes until crisp-tender.",
            "Add garlic and ginger, cook 30 seconds until fragrant.",
            "Return protein to pan. Pour sauce over and toss to coat.",
            "Cook 1-2 minutes until sauce thickens.",
            "Garnish with green onions and serve over rice.",
        ],
        tips=[
            "Have all ingredients prepped before you start - stir-frying is fast!",
            "Don't overcrowd the pan - cook in batches if needed",
            "The wok should be smoking hot for the best sear",
        ],
        tags=["stir-fry", "quick", "versatile", "asian", "healthy"],
    )


@dataclass(frozen=True)
class Rule:
    keywords: tuple[str, ...]
    text: str
    recipe: Optional[Callable[[RegionFilter], Recipe]] = None
    whole_words: bool = False

    def matches(self, message: str) -> bool:
        if self.whole_words:
            return any(re.search(rf"\b{re.escape(k)}\b", message) for k in self.keywords)
        return any(k in message for k in self.keywords)


RULES: tuple[Rule, ...] = (
    Rule(
        keywords=("hello", "hi", "hey"),
        text=(
            "Hello! I'm Chef AI, your personal culinary assistant. I'm here to help you discover "
            "amazing recipes from around the world! What are you in the mood for today? You can ask "
            "me for recipes by cuisine, ingredients you have on hand, or dietary preferences.\n\n"
            + DEMO_NOTE
        ),
        whole_words=True,
    ),
    Rule(
        keywords=("chicken", "rice"),
        text=(
            "Great choice! Chicken and rice is a beloved combination across many cultures. I have a "
            "delicious recipe for you - check out this classic dish that's both comforting and "
            "flavorful. The key is to properly season the chicken and let the rice absorb all those "
            "wonderful flavors."
        ),
        recipe=garlic_butter_chicken,
    ),
    Rule(
        keywords=("vegetarian", "vegan"),
        text=(
            "I love cooking plant-based meals! There are so many delicious vegetarian options from "
            "around the world. Let me share a recipe that's packed with flavor and nutrition. This "
            "dish proves that meat-free cooking can be incredibly satisfying!"
        ),
        recipe=chickpea_curry,
    ),
    Rule(
        keywords=("quick", "fast", "30 minute"),
        text=(
            "I understand - sometimes we need delicious food fast! Here's a recipe that comes "
            "together in about 30 minutes without sacrificing flavor. It's perfect for busy "
            "weeknights when you still want something homemade and satisfying."
        ),
        recipe=signature_stir_fry,
    ),
    Rule(
        keywords=("italian", "pasta"),
        text=(
            "Ah, Italian cuisine - one of my favorites! The beauty of Italian cooking lies in its "
            "simplicity and quality ingredients. Let me share an authentic recipe that captures the "
            "essence of Italian home cooking."
        ),
        recipe=spaghetti_carbonara,
    ),
)

REGION_LINES: dict[str, str] = {
    "asian": "Asian cuisine is incredibly diverse! From the umami-rich dishes of Japan to the aromatic curries of Thailand, there's so much to explore. Let me share a recipe that captures the beautiful flavors of this region.",
    "african": "African cuisine is full of bold, complex flavors and rich culinary traditions. Let me share a dish that showcases these wonderful spices.",
    "european": "European cooking offers such wonderful variety - from rustic French country dishes to hearty German meals. I have a classic recipe that showcases the best of European culinary traditions.",
    "latin-american": "Latin American food is vibrant, colorful, and full of life! Let me share a recipe bursting with fresh flavors.",
    "middle-eastern": "Middle Eastern cuisine features beautiful aromatic spices and time-honored techniques. Let me share a recipe you'll love.",
    "southern": "Southern cooking is all about comfort and hospitality! Think crispy fried chicken, fluffy biscuits, creamy grits, and that famous sweet tea. Let me share a recipe that'll warm your soul.",
    "soul-food": "Soul food carries deep cultural roots and incredible flavor! These recipes have been passed down through generations, from collard greens to mac and cheese to candied yams. Let me share something special.",
    "cajun-creole": "Louisiana cooking is a celebration of bold spices and rich flavors! Gumbo, jambalaya, étouffée - let me share a taste of the bayou.",
    "tex-mex": "Tex-Mex is the perfect fusion of Texas and Mexican flavors! Think sizzling fajitas, cheesy enchiladas, and that addictive queso. Let me share a recipe that brings the border flavors to your kitchen.",
    "bbq": "American BBQ is an art form! Low-and-slow smoking creates incredible flavors. Let me share a recipe worth firing up the grill for.",
    "new-england": "New England cuisine celebrates the bounty of the Atlantic coast! Let me share a coastal favorite.",
    "midwest": "Midwest cooking is hearty, comforting, and delicious! Think cheese curds, hotdish casseroles, and farm-fresh flavors. Let me share a recipe that captures that heartland hospitality.",
    "oceanian": "Oceanian cuisine celebrates fresh seafood and tropical flavors. Let me share a recipe inspired by the islands.",
    "caribbean": "Caribbean food is a beautiful fusion of cultures and flavors! Let me share a recipe full of island spice.",
}

FALLBACK_LINE = (
    "That sounds delicious! Let me find the perfect recipe for you. I'll include all the details "
    "you need - ingredients, step-by-step instructions, and some tips to make sure it turns out "
    "perfectly."
)


def respond(message: str, region: RegionFilter) -> DemoReply:
    lowered = message.lower()
    for rule in RULES:
        if rule.matches(lowered):
            recipe = rule.recipe(region) if rule.recipe else None
            return DemoReply(text=rule.text, recipe=recipe)
    line = REGION_LINES.get(region, FALLBACK_LINE)
    return DemoReply(text=f"{line}\n\n{DEMO_NOTE}", recipe=signature_stir_fry(region))
