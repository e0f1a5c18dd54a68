from __future__ import annotations
import uuid
from datetime import datetime, timezone
from typing import Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

WorldRegion = Literal[
    "african",
    "asian",
    "european",
    "latin-american",
    "middle-eastern",
    "southern",
    "soul-food",
    "cajun-creole",
    "tex-mex",
    "bbq",
    "new-england",
    "midwest",
    "oceanian",
    "caribbean",
]
RegionFilter = Union[WorldRegion, Literal["all"]]
Difficulty = Literal["Easy", "Medium", "Hard"]
Role = Literal["user", "assistant"]
TodoCategory = Literal["prep", "shopping", "cooking", "other"]

TODO_CATEGORIES: tuple[str, ...] = ("prep", "shopping", "cooking", "other")
DIFFICULTIES: tuple[str, ...] = ("Easy", "Medium", "Hard")


class RegionInfo(BaseModel):
    name: str
    cuisines: list[str]
    description: str


REGIONS: dict[str, RegionInfo] = {
    "african": RegionInfo(
        name="African",
        cuisines=["Ethiopian", "Moroccan", "Nigerian", "South African", "Egyptian"],
        description="Rich, flavorful dishes with bold spices and unique ingredients",
    ),
    "asian": RegionInfo(
        name="Asian",
        cuisines=["Chinese", "Japanese", "Korean", "Thai", "Vietnamese", "Indian"],
        description="Diverse flavors from stir-fries to curries to sushi",
    ),
    "european": RegionInfo(
        name="European",
        cuisines=["Italian", "French", "Spanish", "Greek", "German", "British"],
        description="Classic techniques and refined flavors",
    ),
    "latin-american": RegionInfo(
        name="Latin American",
        cuisines=["Mexican", "Brazilian", "Peruvian", "Argentinian", "Colombian"],
        description="Vibrant, colorful dishes with fresh ingredients",
    ),
    "middle-eastern": RegionInfo(
        name="Middle Eastern",
        cuisines=["Lebanese", "Turkish", "Persian", "Israeli", "Syrian"],
        description="Aromatic spices, grilled meats, and mezze spreads",
    ),
    "southern": RegionInfo(
        name="Southern",
        cuisines=["Southern Comfort", "Georgia", "Tennessee", "Alabama", "Mississippi"],
        description="Fried chicken, biscuits, gravy, and comfort classics",
    ),
    "soul-food": RegionInfo(
        name="Soul Food",
        cuisines=["African-American", "Traditional Soul", "Modern Soul", "Sunday Dinner"],
        description="Rich, hearty dishes with deep cultural roots",
    ),
    "cajun-creole": RegionInfo(
        name="Cajun & Creole",
        cuisines=["Louisiana", "New Orleans", "Cajun", "Creole", "Bayou"],
        description="Bold spices, gumbo, jambalaya, and étouffée",
    ),
    "tex-mex": RegionInfo(
        name="Tex-Mex",
        cuisines=["Texas-Mexican", "Southwestern", "Border", "Chili", "Fajitas"],
        description="Tacos, enchiladas, queso, and Texan-Mexican fusion",
    ),
    "bbq": RegionInfo(
        name="BBQ",
        cuisines=["Texas BBQ", "Kansas City", "Carolina", "Memphis", "Smoker"],
        description="Smoked meats, ribs, brisket, and tangy sauces",
    ),
    "new-england": RegionInfo(
        name="New England",
        cuisines=["Massachusetts", "Maine", "Connecticut", "Rhode Island", "Vermont"],
        description="Clam chowder, lobster rolls, and coastal favorites",
    ),
    "midwest": RegionInfo(
        name="Midwest",
        cuisines=["Chicago", "Wisconsin", "Minnesota", "Ohio", "Farm-to-Table"],
        description="Hearty casseroles, cheese curds, and comfort classics",
    ),
    "oceanian": RegionInfo(
        name="Oceanian",
        cuisines=["Australian", "Polynesian", "Hawaiian", "New Zealand"],
        description="Fresh seafood and tropical flavors",
    ),
    "caribbean": RegionInfo(
        name="Caribbean",
        cuisines=["Jamaican", "Cuban", "Puerto Rican", "Trinidadian", "Haitian"],
        description="Island flavors with tropical fruits and spices",
    ),
}


def now() -> datetime:
    return datetime.now(tz=timezone.utc)


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex}"


class Ingredient(BaseModel):
    name: str
    amount: str = ""
    unit: str = ""
    notes: Optional[str] = None


class Recipe(BaseModel):
    id: str = Field(default_factory=lambda: new_id("recipe"))
    name: str
    region: WorldRegion
    cuisine: str
    description: str = ""
    prep_time: str = ""
    cook_time: str = ""
    servings: int = Field(default=4, gt=0)
    difficulty: Difficulty = "Medium"
    ingredients: list[Ingredient] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    tips: Optional[list[str]] = None
    tags: list[str] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return any(i.name.strip() for i in self.ingredients)


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    role: Role
    content: str
    timestamp: datetime
    recipe: Optional[Recipe] = None


class ChatSession(BaseModel):
    id: str
    title: str
    custom_title: bool = False
    messages: list[Message] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class TodoItem(BaseModel):
    id: str
    text: str
    completed: bool = False
    category: TodoCategory = "other"
    recipe_id: Optional[str] = None
    created_at: datetime = Field(default_factory=now)


class AppState(BaseModel):
    version: int = 1
    sessions: list[ChatSession] = Field(default_factory=list)
    current_session_id: Optional[str] = None
    todos: list[TodoItem] = Field(default_factory=list)
    saved_recipes: list[Recipe] = Field(default_factory=list)
    selected_region: RegionFilter = "all"


def default_state() -> AppState:
    return AppState()
