import flet as ft

from src.components.session import AuthError, LoginInput
from src.ui.context import ServiceContext
from src.ui.state import AppState


class LoginView(ft.Column):  # type: ignore
    def __init__(self, page: ft.Page, ctx: ServiceContext, state: AppState) -> None:
        super().__init__()
        self.page = page
        self.ctx = ctx
        self.state = state

        self.email = ft.TextField(label="Email", width=300, autofocus=True)
        self.password = ft.TextField(
            label="Password",
            width=300,
            password=True,
            can_reveal_password=True,
            on_submit=self.login_click,
        )
        self.error_text = ft.Text(color="red", visible=False)

        self.alignment = ft.MainAxisAlignment.CENTER
        self.horizontal_alignment = ft.CrossAxisAlignment.CENTER
        self.expand = True
        self.controls = [
            ft.Icon(ft.Icons.SCHOOL, size=48, color="primary"),
            ft.Text("University Management System", style="headlineMedium"),
            self.email,
            self.password,
            self.error_text,
            ft.ElevatedButton("Login", on_click=self.login_click),
            ft.TextButton(
                "No account? Register",
                on_click=lambda _: self.page.go(self.ctx.rules.session.register_route),
            ),
        ]

    def _show_error(self, message: str) -> None:
        self.error_text.value = message
        self.error_text.visible = True
        self.update()

    def login_click(self, e: ft.ControlEvent) -> None:
        inp = LoginInput(email=self.email.value or "", password=self.password.value or "")
        error = inp.validate()
        if error:
            self._show_error(error)
            return

        try:
            self.ctx.session.login(inp.email, inp.password)
        except AuthError as err:
            self._show_error(err.message)
            return
        # The router reacts to the session change and leaves /login.
