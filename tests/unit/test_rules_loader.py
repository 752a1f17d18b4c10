from pathlib import Path

import pytest

from src.app_shell.config import validate_rules
from src.rules.loader import load_rules, parse_rules

MINIMAL = """
api:
  base_url: "http://localhost:5000/api"
navigation:
  tabs:
    - { id: messages, label: "Messages", roles: [admin, student, clinic] }
    - { id: courses, label: "Courses", roles: [admin] }
resources:
  courses:
    title: "Courses"
    path: "/courses"
    items_key: "courses"
"""


def test_shipped_rules_load(rules):
    assert rules.api.base_url.endswith("/api")
    assert rules.session.token_key == "token"
    assert [t.id for t in rules.navigation.tabs][:3] == ["dashboard", "profile", "students"]
    assert len(rules.navigation.tabs) == 17
    validate_rules(rules)


def test_resource_names_follow_mapping_keys(rules):
    for key, schema in rules.resources.items():
        assert schema.name == key


def test_schema_defaults():
    rules = parse_rules(MINIMAL)
    courses = rules.resources["courses"]
    assert courses.id_field == "_id"
    assert courses.page_size == 10
    assert courses.manage_roles == ["admin"]
    assert courses.backend == "http"
    assert rules.polling.unread_interval_seconds == 30


def test_fenced_yaml_block():
    doc = f"# Rules\n\nSome prose.\n\n```yaml\n{MINIMAL}\n```\n\nTrailing notes."
    assert parse_rules(doc).resources["courses"].title == "Courses"


def test_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_rules(tmp_path / "nope.yaml")


def test_invalid_yaml():
    with pytest.raises(ValueError, match="Invalid YAML"):
        parse_rules("api: [unclosed")


def test_schema_violation():
    with pytest.raises(ValueError, match="validation failed"):
        parse_rules("api: {}\nnavigation: {tabs: []}")


def test_unknown_role_rejected():
    bad = MINIMAL.replace("roles: [admin]", "roles: [janitor]")
    with pytest.raises(ValueError):
        parse_rules(bad)


def test_duplicate_tab_rejected():
    bad = MINIMAL.replace('id: courses, label: "Courses"', 'id: messages, label: "Again"')
    with pytest.raises(ValueError, match="Duplicate"):
        parse_rules(bad)


def test_tab_without_screen_fails_cross_validation():
    rules = parse_rules(MINIMAL.replace("id: courses", "id: library"))
    with pytest.raises(ValueError, match="library"):
        validate_rules(rules)


def test_memory_resource_needs_fields():
    rules = parse_rules(MINIMAL.replace('items_key: "courses"', 'items_key: "courses"\n    backend: memory'))
    with pytest.raises(ValueError, match="declares no fields"):
        validate_rules(rules)


@pytest.mark.parametrize("content", ["", "- just\n- a list\n"])
def test_top_level_must_be_mapping(content):
    with pytest.raises(ValueError, match="mapping"):
        parse_rules(content)
