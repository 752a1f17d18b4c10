import flet as ft


class StatCard(ft.Container):  # type: ignore
    """Counter tile used on the dashboard and statistics dialogs."""

    def __init__(
        self,
        label: str,
        value: object,
        icon: str = ft.Icons.INSIGHTS,
        color: str = "primary",
        width: float | None = 180,
    ):
        super().__init__(
            content=ft.Column(
                [
                    ft.Icon(icon, size=28, color=color),
                    ft.Text("-" if value is None else str(value), size=26, weight=ft.FontWeight.BOLD),
                    ft.Text(label, size=13, color="onSurfaceVariant"),
                ],
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                spacing=4,
            ),
            width=width,
            padding=16,
            border_radius=ft.border_radius.all(12),
            bgcolor="surfaceVariant",
        )
