from typing import Any, Optional

from ..config import PROFILE_COMPLETE_THRESHOLD

# Profile fields and how much each contributes to the completion percentage
PROFILE_COMPLETION_WEIGHTS = {
    "full_name": 15,
    "primary_role": 15,
    "handle": 10,
    "bio": 10,
    "location": 10,
    "avatar_url": 10,
    "resume_url": 10,
    "portfolio_url": 10,
    "day_rate": 5,
    "experience_level": 5,
}


def format_budget_label(amount: Optional[float], currency: str, request_quote: bool) -> str:
    """Budget shown on gig cards, e.g. "AED 12,500" """
    if request_quote:
        return "Request quote"
    if not amount:
        return "Not specified"
    if float(amount).is_integer():
        return f"{currency} {int(amount):,}"
    return f"{currency} {amount:,.2f}"


def compute_profile_completion(profile: Any) -> int:
    """Weighted percentage (0-100) of filled-in profile fields"""
    score = 0
    for field, weight in PROFILE_COMPLETION_WEIGHTS.items():
        value = getattr(profile, field, None)
        if isinstance(value, str):
            value = value.strip()
        if value:
            score += weight
    return min(score, 100)


def is_profile_complete(percentage: Optional[int]) -> bool:
    return (percentage or 0) >= PROFILE_COMPLETE_THRESHOLD
