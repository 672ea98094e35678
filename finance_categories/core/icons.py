"""
Icon vocabulary for categories

Keys are stored on categories; glyph names are what the rendering layer draws.
Unknown keys render with FALLBACK_GLYPH instead of failing.
"""
from typing import Dict

ICON_GLYPHS: Dict[str, str] = {
    "home": "Home",
    "shopping-cart": "ShoppingCart",
    "credit-card": "CreditCard",
    "dollar-sign": "DollarSign",
    "briefcase": "Briefcase",
    "coffee": "Coffee",
    "utensils": "Utensils",
    "car": "Car",
    "plane": "Plane",
    "film": "Film",
    "book": "BookOpen",
    "gift": "Gift",
    "heart": "Heart",
    "phone": "Phone",
    "music": "Music",
    "monitor": "Monitor",
    "zap": "Zap",
    "droplet": "Droplet",
    "thermometer": "Thermometer",
    "shopping-bag": "ShoppingBag",
}

KNOWN_ICONS = frozenset(ICON_GLYPHS)

DEFAULT_ICON = "credit-card"
FALLBACK_GLYPH = "HelpCircle"


def is_known_icon(key: str) -> bool:
    """Check if icon key belongs to the vocabulary"""
    return key in KNOWN_ICONS


def icon_glyph(key: str) -> str:
    """Glyph name for an icon key, falling back for unknown keys"""
    return ICON_GLYPHS.get(key, FALLBACK_GLYPH)
