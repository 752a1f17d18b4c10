import flet as ft


def show_message(page: ft.Page, message: str, error: bool = False) -> None:
    page.open(
        ft.SnackBar(
            ft.Text(message),
            bgcolor="error" if error else None,
        )
    )
