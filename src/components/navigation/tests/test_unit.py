"""
Navigation component unit tests.

The capability table comes from the shipped rules.yaml so these tests pin
the real role matrix.
"""

from pathlib import Path

import pytest

from src.components.navigation import NavigationPolicy, NavigationState
from src.domain.entities import User
from src.rules.loader import load_rules

RULES_PATH = Path(__file__).parents[4] / "rules.yaml"


def make_user(role: str) -> User:
    return User.model_validate(
        {"id": f"{role}-1", "username": role, "email": f"{role}@uni.edu", "role": role}
    )


@pytest.fixture(scope="module")
def policy() -> NavigationPolicy:
    return NavigationPolicy(load_rules(RULES_PATH).navigation.tabs)


class TestNavigationPolicy:
    def test_student_tabs_in_table_order(self, policy):
        assert policy.visible_ids("student") == [
            "profile",
            "courses",
            "registration",
            "departments",
            "leave",
            "feedback",
            "cafeteria",
            "meal_feedback",
            "documents",
            "transcripts",
            "gallery",
            "messages",
        ]

    def test_admin_tabs(self, policy):
        ids = policy.visible_ids("admin")
        assert ids[0] == "dashboard"
        assert "semesters" in ids
        for hidden in ("profile", "registration", "meal_feedback", "transcripts"):
            assert hidden not in ids

    def test_clinic_tabs(self, policy):
        assert policy.visible_ids("clinic") == ["students", "health", "feedback", "messages"]

    def test_student_never_sees_admin_screens(self, policy):
        assert not policy.can_access("student", "semesters")
        assert not policy.can_access("student", "dashboard")
        assert not policy.can_access("student", "instructors")

    @pytest.mark.parametrize("role", [None, "", "superuser", "Admin"])
    def test_unknown_role_sees_nothing(self, policy, role):
        assert policy.visible_tabs(role) == []
        assert not policy.can_access(role, "messages")


class TestNavigationState:
    def test_sync_selects_first_permitted_tab(self, policy):
        state = NavigationState(policy)
        view = state.sync(make_user("admin"))
        assert view.active_tab == "dashboard"
        assert view.active_index == 0

    def test_sync_keeps_permitted_tab(self, policy):
        state = NavigationState(policy)
        user = make_user("student")
        state.select(user, "leave")
        assert state.sync(user).active_tab == "leave"

    def test_sync_resets_when_role_changes(self, policy):
        state = NavigationState(policy)
        state.select(make_user("admin"), "semesters")

        view = state.sync(make_user("student"))

        assert view.active_tab == "profile"

    def test_sync_without_user_is_empty(self, policy):
        state = NavigationState(policy)
        state.active_tab = "students"
        view = state.sync(None)
        assert view.is_empty
        assert view.active_tab is None
        assert view.active_index is None

    def test_select_forbidden_tab_raises(self, policy):
        state = NavigationState(policy)
        user = make_user("clinic")
        state.sync(user)

        with pytest.raises(PermissionError):
            state.select(user, "semesters")

        assert state.active_tab == "students"

    def test_reset(self, policy):
        state = NavigationState(policy)
        state.sync(make_user("student"))
        state.reset()
        assert state.active_tab is None
