"""Category and learned-pattern models for transaction categorization."""

from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_ICON = "📁"
DEFAULT_COLOR = "#6b7280"


@dataclass
class Pattern:
    """A keyword learned for a category from user-labeled transactions.

    Attributes:
        id: Unique identifier (auto-generated).
        category_id: ID of the owning category.
        keyword: Normalized keyword text.
        weight: Reinforcement weight, starts at 1.0 and only grows.
        occurrences: Number of times the keyword was observed for the category.
    """

    id: Optional[int]
    category_id: int
    keyword: str
    weight: float = 1.0
    occurrences: int = 1


@dataclass
class Category:
    """Represents a user's spending category.

    Attributes:
        id: Unique identifier (auto-generated).
        user_id: Owner of the category.
        name: Category name (unique per user).
        icon: Display icon.
        color: Display color as a hex string.
        is_default: Whether the category belongs to the default set.
        patterns: Learned patterns, populated only when loaded for scoring.
    """

    id: int
    user_id: str
    name: str
    icon: str = DEFAULT_ICON
    color: str = DEFAULT_COLOR
    is_default: bool = False
    patterns: List[Pattern] = field(default_factory=list)
