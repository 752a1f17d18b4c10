import flet as ft

from src.components.session import AuthError, RegisterInput
from src.domain.entities import ROLES
from src.ui.context import ServiceContext
from src.ui.state import AppState


class RegisterView(ft.Column):  # type: ignore
    def __init__(self, page: ft.Page, ctx: ServiceContext, state: AppState) -> None:
        super().__init__()
        self.page = page
        self.ctx = ctx
        self.state = state

        self.username = ft.TextField(label="Username", width=300, autofocus=True)
        self.email = ft.TextField(label="Email", width=300)
        self.password = ft.TextField(
            label="Password", width=300, password=True, can_reveal_password=True
        )
        self.role = ft.Dropdown(
            label="Role",
            width=300,
            value="student",
            options=[ft.dropdown.Option(r) for r in ROLES],
        )
        self.error_text = ft.Text(color="red", visible=False)

        self.alignment = ft.MainAxisAlignment.CENTER
        self.horizontal_alignment = ft.CrossAxisAlignment.CENTER
        self.expand = True
        self.controls = [
            ft.Text("Create an account", style="headlineMedium"),
            self.username,
            self.email,
            self.password,
            self.role,
            self.error_text,
            ft.ElevatedButton("Register", on_click=self.register_click),
            ft.TextButton(
                "Already registered? Login",
                on_click=lambda _: self.page.go(self.ctx.rules.session.login_route),
            ),
        ]

    def register_click(self, e: ft.ControlEvent) -> None:
        inp = RegisterInput(
            username=self.username.value or "",
            email=self.email.value or "",
            password=self.password.value or "",
            role=self.role.value or "student",
        )
        error = inp.validate()
        if error is None:
            try:
                self.ctx.session.register(inp)
                return
            except AuthError as err:
                error = err.message

        self.error_text.value = error
        self.error_text.visible = True
        self.update()
