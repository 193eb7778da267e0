"""Bot theme colors."""

from __future__ import annotations

import discord

THEME_CONFIG: dict[str, str] = {
    "primary": "#592B2B",
    "secondary": "#946060",
    "success": "#23C45E",
    "warning": "#FB933D",
    "error": "#F04444",
    "invisible": "#36393F",
}


def hex_to_color(value: str) -> discord.Color:
    """Convert ``#RRGGBB`` (or ``0xRRGGBB``) into a discord Color."""
    cleaned = value.strip().removeprefix("#").removeprefix("0x")
    return discord.Color(int(cleaned, 16))


def parse_theme_color(name: str) -> discord.Color:
    """Resolve a theme color name, falling back to parsing ``name`` as a hex color.

    Unknown names that are not valid hex values resolve to the primary color.
    """
    key = str(name).strip().lower()
    if key in THEME_CONFIG:
        return hex_to_color(THEME_CONFIG[key])
    try:
        return hex_to_color(str(name))
    except ValueError:
        return hex_to_color(THEME_CONFIG["primary"])


class ThemeColors:
    PRIMARY = hex_to_color(THEME_CONFIG["primary"])
    SECONDARY = hex_to_color(THEME_CONFIG["secondary"])
    SUCCESS = hex_to_color(THEME_CONFIG["success"])
    WARNING = hex_to_color(THEME_CONFIG["warning"])
    ERROR = hex_to_color(THEME_CONFIG["error"])
    INVISIBLE = hex_to_color(THEME_CONFIG["invisible"])
