"""
Pure helpers behind the Flet screens.
"""

from src.app_shell.admin.dashboard import enrollment_counters, grouped_counts
from src.app_shell.admin.resource_screen import action_label, format_cell, split_actions
from src.app_shell.messages import is_mine, sender_name
from src.app_shell.profile import flatten_profile
from src.domain.entities import SessionSnapshot, User
from src.ui.layout import badge_text
from src.ui.state import AppState


def test_format_cell():
    assert format_cell(None) == ""
    assert format_cell(True) == "Yes"
    assert format_cell({"_id": "c1", "courseName": "Algorithms"}) == "Algorithms"
    assert format_cell({"_id": "s1", "fullName": "Abebe"}) == "Abebe"
    assert format_cell("2024-09-01T08:30:00.000Z") == "2024-09-01"
    assert format_cell(["rice", "injera"]) == "rice, injera"
    assert format_cell(["a", "b", "c", "d"]) == "a, b, c ..."
    assert format_cell(4) == "4"


def test_split_actions(rules):
    toolbar, row = split_actions(rules.resources["registration"])
    assert toolbar == ["register", "available"]
    assert row == ["drop", "status", "grade"]

    assert split_actions(rules.resources["students"]) == ([], [])
    assert action_label("assign_course") == "Assign course"


def test_enrollment_counters():
    stats = {"overview": {"totalStudents": 120, "totalCourses": 14, "totalMessages": 9, "averageGrade": 3.14159}}
    counters = enrollment_counters(stats)
    assert [(label, value) for label, value, _, _ in counters] == [
        ("Students", 120),
        ("Courses", 14),
        ("Messages", 9),
        ("Average Grade", 3.1),
    ]
    assert enrollment_counters(None) == []


def test_grouped_counts():
    rows = [
        {"_id": "Adama", "count": 4},
        {"_id": None, "count": 1},
        {"_id": {"hasDiseases": "No Diseases"}, "count": 7},
    ]
    assert grouped_counts(rows) == [("Adama", 4), ("Unknown", 1), ("No Diseases", 7)]
    assert grouped_counts({"not": "a list"}) == []


def test_flatten_profile():
    profile = {
        "_id": "p1",
        "fullName": "Abebe Kebede",
        "familyInfo": {"city": "Adama", "phone": ""},
        "grades": [{"course": "CS101"}],
    }
    assert flatten_profile(profile) == [
        ("fullName", "Abebe Kebede"),
        ("familyInfo.city", "Adama"),
        ("grades", "1 entries"),
    ]
    assert flatten_profile(None) == []


def test_message_helpers():
    message = {"senderId": {"_id": "u1", "username": "registrar"}, "subject": "Hi"}
    assert sender_name(message) == "registrar"
    assert is_mine(message, "u1")
    assert not is_mine(message, "u2")
    assert sender_name({"senderId": "u1"}) == "Unknown"


def test_app_state_follows_snapshot():
    user = User(id="u1", username="abebe", email="a@uni.edu", role="student")
    state = AppState(unread_count=3)

    state.apply(SessionSnapshot(status="authenticated", user=user))
    assert state.role == "student"
    assert state.unread_count == 3

    state.apply(SessionSnapshot(status="unauthenticated"))
    assert state.current_user is None
    assert state.role is None
    assert state.unread_count == 0


def test_badge_text_caps_large_counts():
    assert badge_text(3) == "3"
    assert badge_text(99) == "99"
    assert badge_text(250) == "99+"
