"""Color palette for the exam window supporting light and dark themes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Theme(Enum):
    """Application theme options."""
    LIGHT = auto()
    DARK = auto()


@dataclass(frozen=True)
class ThemeColors:
    """Color definitions for a specific theme."""
    light: str
    dark: str

    def get(self, theme: Theme) -> str:
        """Get color value for the specified theme."""
        return self.light if theme == Theme.LIGHT else self.dark


class ColorPalette:
    """Centralized color definitions for the exam window."""

    # Text colors
    TEXT_PRIMARY = ThemeColors(
        light="#1F2933",
        dark="#F5F5F5"
    )

    TEXT_SECONDARY = ThemeColors(
        light="#616E7C",
        dark="#AAAAAA"
    )

    # Background colors
    BACKGROUND_PRIMARY = ThemeColors(
        light="#FFFFFF",
        dark="#1E1E1E"
    )

    BACKGROUND_SECONDARY = ThemeColors(
        light="#F5F7FA",
        dark="#2D2D2D"
    )

    # Status colors
    SUCCESS = ThemeColors(
        light="#107C10",
        dark="#6FCF6F"
    )

    WARNING = ThemeColors(
        light="#B7791F",
        dark="#FFC83D"
    )

    ERROR = ThemeColors(
        light="#D13438",
        dark="#FF6B6B"
    )

    # Border colors
    BORDER_PRIMARY = ThemeColors(
        light="#D1D5DB",
        dark="#555555"
    )

    # Button colors
    BUTTON_PRIMARY_BG = ThemeColors(
        light="#2563EB",      # Blue
        dark="#4A9EFF"
    )

    BUTTON_PRIMARY_TEXT = ThemeColors(
        light="#FFFFFF",
        dark="#000000"
    )

    BUTTON_SECONDARY_BG = ThemeColors(
        light="#F5F5F5",
        dark="#3A3A3A"
    )

    BUTTON_HOVER_BG = ThemeColors(
        light="#E8E8E8",
        dark="#505050"
    )

    # Selected answer option
    OPTION_SELECTED_BG = ThemeColors(
        light="#DBEAFE",
        dark="#1E3A5F"
    )

    # Multi-select badge
    BADGE_BG = ThemeColors(
        light="#EDE9FE",
        dark="#4C1D95"
    )

    # Navigator button for an answered question
    ANSWERED_BG = ThemeColors(
        light="#DCFCE7",
        dark="#14532D"
    )

    ANSWERED_TEXT = ThemeColors(
        light="#15803D",
        dark="#BBF7D0"
    )
