"""
Theme catalog for the Eunoia application.
The catalog is fixed at import time; the session controller only ever
points at one of these entries.
"""

from typing import List, Optional

from .models import Theme


THEME_CATALOG: List[Theme] = [
    Theme(
        id="harmony",
        name="Harmony",
        description="Find inner peace and balance",
        primary_color="#2196F3",
        secondary_color="#9C27B0",
        sound_file_name="harmony_ambient",
        benefits=("Reduces stress", "Improves focus", "Enhances clarity"),
        icon="sparkles",
    ),
    Theme(
        id="empathy",
        name="Empathy",
        description="Connect with your emotions",
        primary_color="#E91E63",
        secondary_color="#F44336",
        sound_file_name="empathy_ambient",
        benefits=("Emotional awareness", "Better relationships", "Self-compassion"),
        icon="heart.fill",
    ),
    Theme(
        id="resilience",
        name="Resilience",
        description="Build inner strength",
        primary_color="#4CAF50",
        secondary_color="#009688",
        sound_file_name="resilience_ambient",
        benefits=("Mental strength", "Adaptability", "Emotional balance"),
        icon="shield.fill",
    ),
]

DEFAULT_THEME = THEME_CATALOG[0]


def get_theme(theme_id: str) -> Optional[Theme]:
    """Get a catalog theme by id."""
    for theme in THEME_CATALOG:
        if theme.id == theme_id:
            return theme
    return None


def theme_ids() -> List[str]:
    return [theme.id for theme in THEME_CATALOG]
