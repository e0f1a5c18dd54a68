from __future__ import annotations
from typing import Literal
from pydantic import BaseModel


class Access(BaseModel):
    allowed: bool
    consumes_trial: bool = False
    reason: Literal["premium", "trial", "trial_used"]


def restaurant_recipe_access(is_premium: bool, trial_used: bool) -> Access:
    """Premium users always get restaurant recipes; everyone else gets one free try."""
    if is_premium:
        return Access(allowed=True, reason="premium")
    if not trial_used:
        return Access(allowed=True, consumes_trial=True, reason="trial")
    return Access(allowed=False, reason="trial_used")
