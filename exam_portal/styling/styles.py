"""Centralized stylesheets for the exam window."""

from .color_palette import ColorPalette, Theme

class Styles:
    """Helper class to generate Qt stylesheets based on the current theme."""

    @staticmethod
    def get_main_window_style(theme: Theme = Theme.LIGHT) -> str:
        return f"""
            QMainWindow {{
                background-color: {ColorPalette.BACKGROUND_SECONDARY.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
            }}
            QWidget {{
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
                font-family: 'Segoe UI', 'Roboto', sans-serif;
                font-size: 14px;
            }}
            QPushButton {{
                background-color: {ColorPalette.BUTTON_SECONDARY_BG.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 4px;
                padding: 6px 12px;
            }}
            QPushButton:hover {{
                background-color: {ColorPalette.BUTTON_HOVER_BG.get(theme)};
            }}
            QPushButton:disabled {{
                color: {ColorPalette.TEXT_SECONDARY.get(theme)};
            }}
            QLineEdit {{
                background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 4px;
                padding: 6px;
            }}
            QGroupBox {{
                background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 6px;
                margin-top: 6px;
                padding-top: 10px;
            }}
        """

    @staticmethod
    def get_primary_button_style(theme: Theme = Theme.LIGHT) -> str:
        return (
            f"QPushButton {{ background-color: {ColorPalette.BUTTON_PRIMARY_BG.get(theme)}; "
            f"color: {ColorPalette.BUTTON_PRIMARY_TEXT.get(theme)}; font-weight: bold; "
            "border: none; border-radius: 4px; padding: 8px 16px; }"
        )

    @staticmethod
    def get_option_style(selected: bool, theme: Theme = Theme.LIGHT) -> str:
        background = (
            ColorPalette.OPTION_SELECTED_BG.get(theme)
            if selected
            else ColorPalette.BACKGROUND_PRIMARY.get(theme)
        )
        return (
            f"background-color: {background}; "
            f"border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)}; "
            "border-radius: 6px; padding: 10px; text-align: left;"
        )

    @staticmethod
    def get_navigator_button_style(current: bool, answered: bool, theme: Theme = Theme.LIGHT) -> str:
        if current:
            background = ColorPalette.BUTTON_PRIMARY_BG.get(theme)
            color = ColorPalette.BUTTON_PRIMARY_TEXT.get(theme)
            border = background
        elif answered:
            background = ColorPalette.ANSWERED_BG.get(theme)
            color = ColorPalette.ANSWERED_TEXT.get(theme)
            border = ColorPalette.SUCCESS.get(theme)
        else:
            background = ColorPalette.BACKGROUND_SECONDARY.get(theme)
            color = ColorPalette.TEXT_PRIMARY.get(theme)
            border = ColorPalette.BORDER_PRIMARY.get(theme)
        return (
            f"QPushButton {{ background-color: {background}; color: {color}; "
            f"border: 1px solid {border}; border-radius: 14px; "
            "min-width: 28px; min-height: 28px; padding: 0; font-weight: 600; }"
        )

    @staticmethod
    def get_timer_style(urgent: bool, theme: Theme = Theme.LIGHT) -> str:
        color = ColorPalette.ERROR.get(theme) if urgent else ColorPalette.TEXT_PRIMARY.get(theme)
        return f"font-size: 14pt; font-weight: bold; color: {color};"

    @staticmethod
    def get_badge_style(theme: Theme = Theme.LIGHT) -> str:
        return (
            f"background-color: {ColorPalette.BADGE_BG.get(theme)}; "
            "border-radius: 8px; padding: 2px 8px; font-size: 11px;"
        )

    @staticmethod
    def get_notice_style(theme: Theme = Theme.LIGHT) -> str:
        return f"color: {ColorPalette.WARNING.get(theme)};"

    @staticmethod
    def get_error_style(theme: Theme = Theme.LIGHT) -> str:
        return f"color: {ColorPalette.ERROR.get(theme)};"

    @staticmethod
    def get_large_label_style() -> str:
        return "font-size: 16pt; font-weight: bold;"
