import flet as ft


class AppTheme:
    """
    Console palette: indigo primary, amber accent.
    Roles get a fixed chip colour so a shared screen shows who is signed in.
    """

    font_family = "Inter"

    light = {
        "primary": "#3949ab",
        "on_primary": "#ffffff",
        "secondary": "#ffb300",
        "surface": "#ffffff",
        "error": "#d32f2f",
    }
    dark = {
        "primary": "#7986cb",
        "on_primary": "#0d1030",
        "secondary": "#ffca28",
        "surface": "#1c1b22",
        "error": "#ef5350",
    }

    role_colors = {
        "admin": "#c62828",
        "student": "#2e7d32",
        "clinic": "#00838f",
    }

    @classmethod
    def _theme(cls, palette: dict[str, str]) -> ft.Theme:
        return ft.Theme(
            color_scheme=ft.ColorScheme(**palette),
            font_family=cls.font_family,
            use_material3=True,
        )

    @classmethod
    def light_theme(cls) -> ft.Theme:
        return cls._theme(cls.light)

    @classmethod
    def dark_theme(cls) -> ft.Theme:
        return cls._theme(cls.dark)

    @classmethod
    def role_color(cls, role: str | None) -> str:
        return cls.role_colors.get(role or "", "grey")
