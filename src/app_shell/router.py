import logging
from collections.abc import Callable
from typing import Literal, NamedTuple

import flet as ft

from src.domain.entities import SessionSnapshot
from src.rules.models import SessionRules

logger = logging.getLogger(__name__)


class RouteConfig(NamedTuple):
    builder: Callable[[ft.Page], ft.View]
    protected: bool
    # Guest-only routes (login/register) bounce authenticated users home.
    guest_only: bool = False


class RouteDecision(NamedTuple):
    action: Literal["render", "redirect", "not_found"]
    target: str


def decide(
    route: str,
    routes: dict[str, RouteConfig],
    authenticated: bool,
    session_rules: SessionRules,
) -> RouteDecision:
    """Pure guard: what to do with ``route`` given the session state."""
    route = route or session_rules.home_route
    config = routes.get(route)
    if config is None:
        return RouteDecision("not_found", route)
    if config.protected and not authenticated:
        return RouteDecision("redirect", session_rules.login_route)
    if config.guest_only and authenticated:
        return RouteDecision("redirect", session_rules.home_route)
    return RouteDecision("render", route)


class Router:
    def __init__(self, page: ft.Page, session_rules: SessionRules, is_authenticated: Callable[[], bool]):
        self.page = page
        self.session_rules = session_rules
        self.is_authenticated = is_authenticated
        self.routes: dict[str, RouteConfig] = {}

    def register(
        self,
        route: str,
        builder: Callable[[ft.Page], ft.View],
        protected: bool = True,
        guest_only: bool = False,
    ) -> None:
        self.routes[route] = RouteConfig(builder, protected, guest_only)

    def handle_route_change(self, e: ft.RouteChangeEvent) -> None:
        self.show(e.route)

    def show(self, route: str) -> None:
        logger.info(f"Navigate to: {route}")
        decision = decide(route, self.routes, self.is_authenticated(), self.session_rules)

        if decision.action == "redirect":
            logger.info(f"Redirecting {route} to {decision.target}")
            self.page.go(decision.target)
            return

        self.page.views.clear()
        if decision.action == "not_found":
            logger.warning(f"No route found for: {route}")
            self.page.views.append(
                ft.View(
                    "/404",
                    [
                        ft.AppBar(title=ft.Text("404")),
                        ft.Text(f"Page not found: {route}"),
                        ft.TextButton(
                            "Back to home",
                            on_click=lambda _: self.page.go(self.session_rules.home_route),
                        ),
                    ],
                )
            )
        else:
            self.page.views.append(self.routes[decision.target].builder(self.page))
        self.page.update()

    def on_session_change(self, snapshot: SessionSnapshot) -> None:
        """Re-run the guard for the current route after login, logout or expiry."""
        if snapshot.status == "loading":
            return
        self.show(self.page.route or self.session_rules.home_route)

    def view_pop(self, view: ft.View) -> None:
        self.page.views.pop()
        top_view = self.page.views[-1]
        self.page.go(top_view.route)
