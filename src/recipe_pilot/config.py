from __future__ import annotations
from pathlib import Path
from typing import Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from recipe_pilot.models import REGIONS, RegionFilter


class Config(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    anthropic_api_key: Optional[str] = None
    anthropic_model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 2048
    history_limit: int = 10
    request_timeout: float = 60.0
    data_dir: Path = Path.home() / ".recipe_pilot"
    is_premium: bool = False
    system_prompt: str = (
        "You are Chef AI, a friendly and knowledgeable culinary assistant who helps home cooks "
        "discover and master recipes from around the world.\n\n"
        "Your personality:\n"
        "- Warm, encouraging, and passionate about food\n"
        "- Share interesting cultural context about dishes\n"
        "- Offer practical tips for home cooks\n"
        "- Suggest ingredient substitutions when appropriate\n"
        "- Consider dietary restrictions when mentioned\n\n"
        "{region_line}\n\n"
        "When recommending a recipe, ALWAYS include a JSON block with the recipe details in this "
        "exact format:\n"
        "```recipe\n"
        "{{\n"
        '  "name": "Recipe Name",\n'
        '  "region": "{regions}",\n'
        '  "cuisine": "Specific Cuisine (e.g., Italian, Thai)",\n'
        '  "description": "Brief appetizing description",\n'
        '  "prepTime": "15 mins",\n'
        '  "cookTime": "30 mins",\n'
        '  "servings": 4,\n'
        '  "difficulty": "Easy|Medium|Hard",\n'
        '  "ingredients": [\n'
        '    {{"name": "ingredient", "amount": "1", "unit": "cup", "notes": "optional notes"}}\n'
        "  ],\n"
        '  "instructions": ["Step 1 instruction", "Step 2 instruction"],\n'
        '  "tips": ["Helpful tip 1", "Helpful tip 2"],\n'
        '  "tags": ["tag1", "tag2"]\n'
        "}}\n"
        "```\n\n"
        "Guidelines:\n"
        "- Keep responses conversational but informative\n"
        "- Include the recipe JSON block when sharing a specific recipe, and only one per reply\n"
        "- Offer to modify recipes based on dietary needs\n"
        "- Share cooking tips and cultural background\n"
        "- Be encouraging to beginner cooks"
    )

    @field_validator("anthropic_api_key", mode="after")
    @classmethod
    def blank_key_is_absent(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()

    def render_system_prompt(self, region: RegionFilter) -> str:
        info = REGIONS.get(region)
        if info:
            region_line = (
                f"The user is currently exploring {info.name} cuisine ({', '.join(info.cuisines)})."
            )
        else:
            region_line = "The user is exploring cuisines from all regions."
        return self.system_prompt.format(region_line=region_line, regions="|".join(REGIONS))
